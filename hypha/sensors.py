"""Measurement functions for the supported sensor types and their registry."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from itertools import takewhile
from typing import Protocol, Union

from hypha.hardware import HIGH, LOW, Board, PinMode, reference_voltage_multiplier

__all__ = [
    "MAX_SENSOR_ID_LENGTH",
    "NO_PIN",
    "ATLAS_TIMEOUT_MS",
    "SensorError",
    "AtlasResponseReader",
    "read_analog",
    "read_tmp_env",
    "read_dfrobot_ph",
    "read_manylabs_ph",
    "read_atlas_circuit",
    "read_hall_sensor",
    "SENSOR_FUNCTIONS",
    "func_from_sensor_id",
    "id_from_sensor_func",
]

MAX_SENSOR_ID_LENGTH = 16
NO_PIN = -1
ATLAS_TIMEOUT_MS = 5000
ATLAS_BUFFER_SIZE = 48
MANYLABS_I2C_ADDRESS = 0x4D

Reading = Union[float, str]


class MeasuredEntry(Protocol):
    label: str
    pins: Sequence[int]

    def package_data_message(self, data: Reading) -> str: ...


SensorMeasurementFunc = Callable[[MeasuredEntry, Board], Reading]


class SensorError(RuntimeError):
    """A sensor reported an error or did not answer."""


def _report(entry: MeasuredEntry, board: Board, value: Reading) -> Reading:
    board.serial_print(entry.package_data_message(value))
    return value


def read_analog(entry: MeasuredEntry, board: Board) -> float:
    """Power the sensor, read it and return the reading as a 0..1 fraction."""
    pin_digital, pin_analog = entry.pins[0], entry.pins[1]
    board.pin_mode(pin_digital, PinMode.OUTPUT)
    board.digital_write(pin_analog, LOW)
    board.digital_write(pin_digital, HIGH)
    board.delay(100)
    reading = board.analog_read(pin_analog)
    board.digital_write(pin_digital, LOW)
    return _report(entry, board, reading / 1023.0)


def read_tmp_env(entry: MeasuredEntry, board: Board) -> float:
    """Read an ENV-TMP temperature probe and return degrees Celsius."""
    pin_digital, pin_analog = entry.pins[0], entry.pins[1]
    board.pin_mode(pin_digital, PinMode.OUTPUT)
    board.digital_write(pin_analog, LOW)
    board.digital_write(pin_digital, HIGH)
    board.delay(2)
    v_out = board.analog_read(pin_analog)
    board.digital_write(pin_digital, LOW)
    v_out *= reference_voltage_multiplier(board.reference_voltage)
    temperature = 0.0512 * 1000 * v_out - 20.5128
    return _report(entry, board, temperature)


def read_dfrobot_ph(entry: MeasuredEntry, board: Board) -> float:
    """Read a DFRobot analog pH probe, then flash its LED."""
    sensor_pin, led_pin = entry.pins[0], entry.pins[1]
    raw = float(board.analog_read(sensor_pin))
    board.serial_print(f"{raw:.2f}")
    ph = raw * reference_voltage_multiplier(board.reference_voltage) / 6
    ph *= 3.5
    _report(entry, board, ph)
    board.pin_mode(led_pin, PinMode.OUTPUT)
    board.digital_write(led_pin, HIGH)
    board.delay(200)
    board.digital_write(led_pin, LOW)
    return ph


def read_manylabs_ph(entry: MeasuredEntry, board: Board) -> float:
    """Read the ManyLabs I2C pH board."""
    opamp_gain = 5.25
    ph7 = 0.0
    ph_step = 1.0
    adc_high, adc_low = board.i2c_read(MANYLABS_I2C_ADDRESS, 2)
    adc_result = adc_high * 256 + adc_low
    millivolts = adc_result / 4096 * board.reference_voltage * 1000
    millivolts_for_ph7 = ph7 / 4096 * board.reference_voltage * 1000
    ph = 7 - (millivolts_for_ph7 - millivolts) / opamp_gain / ph_step
    return _report(entry, board, ph)


class AtlasResponseReader:
    """Collects characters from an Atlas Scientific circuit into responses.

    A response ends with ``*OK\\r``; ``*ER\\r`` marks an error.
    """

    def __init__(self) -> None:
        self._chars: list[str] = []

    def reset(self) -> None:
        self._chars.clear()

    def feed(self, char: str) -> str | None:
        """Take one character; return the response text once it is complete."""
        if len(self._chars) >= ATLAS_BUFFER_SIZE - 1:
            self.reset()
            raise SensorError("buffer overflow reading sensor")
        if char == "\n":
            return None
        self._chars.append(char)
        if char != "\r" or len(self._chars) <= 3:
            return None
        marker = "".join(self._chars[-4:-1])
        if marker == "*OK":
            response = "".join(self._chars[:-4])
            self.reset()
            return response
        if marker == "*ER":
            self.reset()
            raise SensorError("error reading sensor")
        return None


def read_atlas_circuit(entry: MeasuredEntry, board: Board) -> str:
    """Select the circuit on the multiplexer and request one reading over UART.

    The first pin holds the multiplexer address; the following pins, up to
    the first unused one, receive its bits, lowest first.
    """
    mux_address = entry.pins[0]
    select_pins = takewhile(lambda pin: pin != NO_PIN, entry.pins[1:])
    for bit, pin in enumerate(select_pins):
        board.pin_mode(pin, PinMode.OUTPUT)
        board.digital_write(pin, (mux_address >> bit) & 1)

    reader = AtlasResponseReader()
    start = board.millis()
    board.uart_write("R\r")
    while board.millis() - start <= ATLAS_TIMEOUT_MS:
        char = board.uart_read()
        if char is None:
            board.delay(1)
            continue
        response = reader.feed(char)
        if response is not None:
            text = response.replace("\r", " ").replace("\n", " ")
            return _report(entry, board, text)
    raise SensorError(f"sensor {entry.label!r} timed out")


def read_hall_sensor(entry: MeasuredEntry, board: Board) -> float:
    """Count flow-meter pulses for one second and return litres per hour."""
    pin = entry.pins[0]
    board.pin_mode(pin, PinMode.INPUT)
    pulses = board.count_rising_edges(pin, 1000)
    return _report(entry, board, pulses * 60 / 7.5)


SENSOR_FUNCTIONS: dict[str, SensorMeasurementFunc] = {
    "ANALOG": read_analog,
    "ENV-TMP": read_tmp_env,
    "DFROBOT-PH": read_dfrobot_ph,
    "MANYLABS-PH": read_manylabs_ph,
    "ATLAS-CIRCUIT": read_atlas_circuit,
    "HALL": read_hall_sensor,
}


def func_from_sensor_id(sensor_id: str) -> SensorMeasurementFunc | None:
    """The measurement function for ``sensor_id``, or None if unknown."""
    return SENSOR_FUNCTIONS.get(sensor_id)


def id_from_sensor_func(func: SensorMeasurementFunc | None) -> str:
    """The sensor ID for ``func``, or ``"NONE"`` if it is not registered."""
    return next(
        (sensor_id for sensor_id, known in SENSOR_FUNCTIONS.items() if known is func),
        "NONE",
    )