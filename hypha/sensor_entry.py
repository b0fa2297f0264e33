"""Configuration of one sensor attached to the board."""

from __future__ import annotations

import struct
from itertools import takewhile

from hypha.hardware import Eeprom
from hypha.sensors import (
    MAX_SENSOR_ID_LENGTH,
    NO_PIN,
    Reading,
    SensorMeasurementFunc,
    func_from_sensor_id,
    id_from_sensor_func,
)

__all__ = ["NUM_PINS", "LABEL_SIZE", "ID_OFFSET", "EEPROM_RECORD_SIZE", "SensorEntry"]

NUM_PINS = 4
LABEL_SIZE = 15  # bytes reserved for the label, including its terminator

# label, disabled flag, measurement period, pins; the sensor ID follows.
_LAYOUT = struct.Struct(f"<{LABEL_SIZE}s?I{NUM_PINS}b")
ID_OFFSET = _LAYOUT.size
EEPROM_RECORD_SIZE = ID_OFFSET + MAX_SENSOR_ID_LENGTH


def _cstring(raw: bytes) -> str:
    return raw.split(b"\0", 1)[0].decode("latin-1")


class SensorEntry:
    """A sensor plugged into the board: its label, pins, period and type.

    An entry is unused while it has no measurement function.
    """

    def __init__(self) -> None:
        self.set_empty()

    def set_empty(self) -> None:
        """Reset every field, marking the entry unused."""
        self.func: SensorMeasurementFunc | None = None
        self.disabled = False
        self.label = ""
        self.ms_measurement_period = 0
        self.pins: list[int] = [NO_PIN] * NUM_PINS

    def is_empty(self) -> bool:
        return self.func is None

    def enable(self, state: bool) -> None:
        self.disabled = not state

    def is_enabled(self) -> bool:
        return not self.disabled

    def is_disabled(self) -> bool:
        return self.disabled

    def sensor_id(self) -> str:
        """The registered ID of this entry's sensor type, or ``"NONE"``."""
        return id_from_sensor_func(self.func)

    def measurement_func(self) -> SensorMeasurementFunc | None:
        return self.func

    def package_data_message(self, data: Reading) -> str:
        """The JSON measurement line for a reading from this sensor."""
        if isinstance(data, str):
            datum = f'"{data}"'
        else:
            datum = f"{float(data):.2f}"
        return f'{{"measurement":{{"label":"{self.label}","datum":{datum}}}}}'

    def to_json(self, index: int = -1) -> str:
        """This entry as JSON; ``index`` is included when it is not negative."""
        if self.is_empty():
            return "{}"
        parts = []
        if index >= 0:
            parts.append(f'"index":{index}')
        pins = ",".join(str(pin) for pin in takewhile(lambda p: p != NO_PIN, self.pins))
        parts.extend(
            [
                f'"label":"{self.label}"',
                f'"sensorID":"{self.sensor_id()}"',
                f'"disabled":"{int(self.disabled)}"',
                f'"msMeasurementPeriod":{self.ms_measurement_period}',
                f'"pins":[{pins}]',
            ]
        )
        return "{" + ",".join(parts) + "}"

    def write_to_eeprom(self, eeprom: Eeprom, address: int) -> int:
        """Store this entry at ``address``; return the bytes reserved for it.

        The sensor type is stored by ID, not by function, so that saved
        settings stay valid when the program changes.
        """
        label = self.label.encode("latin-1")
        if len(label) >= LABEL_SIZE:
            raise ValueError(f"label longer than {LABEL_SIZE - 1} characters: {self.label!r}")
        if len(self.pins) != NUM_PINS:
            raise ValueError(f"an entry has exactly {NUM_PINS} pins")
        try:
            record = _LAYOUT.pack(label, self.disabled, self.ms_measurement_period, *self.pins)
        except struct.error as exc:
            raise ValueError(f"entry cannot be stored: {exc}") from exc
        eeprom.write_bytes(address, record)
        eeprom.write_string(address + ID_OFFSET, self.sensor_id())
        return EEPROM_RECORD_SIZE

    def read_from_eeprom(self, eeprom: Eeprom, address: int) -> int:
        """Load this entry from ``address``; return the bytes reserved for it."""
        label, disabled, period, *pins = _LAYOUT.unpack(eeprom.read_bytes(address, ID_OFFSET))
        self.label = _cstring(label)
        self.disabled = disabled
        self.ms_measurement_period = period
        self.pins = list(pins)
        sensor_id = _cstring(eeprom.read_bytes(address + ID_OFFSET, MAX_SENSOR_ID_LENGTH))
        self.func = func_from_sensor_id(sensor_id)
        return EEPROM_RECORD_SIZE