"""Sensor entries, scheduling, EEPROM settings storage, a simulated board and compact JSON tools."""

__version__ = "0.1.0"

__all__ = [
    "hardware",
    "jsmn",
    "jsongen",
    "jsonparse",
    "ring_buffer",
    "sensor_entry",
    "sensor_manager",
    "sensors",
    "sorted_array",
    "textscan",
]