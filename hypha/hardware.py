"""Board-level helpers: status messages, EEPROM storage and a simulated board."""

from __future__ import annotations

import json
from collections import deque
from enum import Enum

__all__ = [
    "ADC_MAX",
    "LOW",
    "HIGH",
    "PinMode",
    "reference_voltage_multiplier",
    "status_message",
    "Eeprom",
    "Board",
]

ADC_MAX = 1023
LOW = 0
HIGH = 1
DEFAULT_REFERENCE_VOLTAGE = 5.0


class PinMode(Enum):
    INPUT = "input"
    OUTPUT = "output"


def reference_voltage_multiplier(reference_voltage: float) -> float:
    """Volts per ADC count for the given reference voltage."""
    return reference_voltage / float(ADC_MAX)


def status_message(kind: str, text: str) -> str:
    """A one-field JSON status line such as ``{"error":"..."}``."""
    return json.dumps({kind: text}, separators=(",", ":"))


class Eeprom:
    """Byte-addressable persistent storage, erased to 0xFF."""

    def __init__(self, size: int) -> None:
        if size < 0:
            raise ValueError("size must not be negative")
        self._data = bytearray(b"\xff" * size)

    def __len__(self) -> int:
        return len(self._data)

    def _check(self, location: int, count: int) -> None:
        if location < 0 or location + count > len(self._data):
            raise IndexError(
                f"EEPROM range {location}..{location + count} outside 0..{len(self._data)}"
            )

    def write_bytes(self, location: int, data: bytes) -> int:
        """Store ``data`` at ``location``; return the number of bytes written."""
        self._check(location, len(data))
        self._data[location:location + len(data)] = data
        return len(data)

    def write_string(self, location: int, text: str) -> int:
        """Store ``text`` NUL-terminated; return its length without the NUL."""
        encoded = text.encode("latin-1")
        self.write_bytes(location, encoded + b"\0")
        return len(encoded)

    def read_bytes(self, location: int, count: int) -> bytes:
        """Return ``count`` bytes starting at ``location``."""
        self._check(location, count)
        return bytes(self._data[location:location + count])


class Board:
    """A simulated microcontroller board with a virtual millisecond clock.

    Analog readings, I2C device replies, pulse frequencies and UART input
    are set up through the public attributes; pin changes, UART writes and
    serial output are recorded there as well.
    """

    def __init__(self, reference_voltage: float = DEFAULT_REFERENCE_VOLTAGE) -> None:
        self.reference_voltage = reference_voltage
        self.pin_modes: dict[int, PinMode] = {}
        self.pin_levels: dict[int, int] = {}
        self.analog_values: dict[int, int] = {}
        self.i2c_devices: dict[int, bytes] = {}
        self.pulse_frequencies: dict[int, float] = {}
        self.uart_input: deque[str] = deque()
        self.uart_output: list[str] = []
        self.serial_output: list[str] = []
        self._clock_ms = 0

    def pin_mode(self, pin: int, mode: PinMode) -> None:
        self.pin_modes[pin] = mode

    def digital_write(self, pin: int, value: int) -> None:
        self.pin_levels[pin] = HIGH if value else LOW

    def analog_read(self, pin: int) -> int:
        """The ADC count on ``pin``, clamped to the converter's range."""
        return max(0, min(ADC_MAX, self.analog_values.get(pin, 0)))

    def delay(self, ms: int) -> None:
        self._clock_ms += ms

    def millis(self) -> int:
        return self._clock_ms

    def i2c_read(self, address: int, count: int) -> bytes:
        """Request ``count`` bytes from the I2C device at ``address``."""
        reply = self.i2c_devices.get(address)
        if reply is None:
            raise OSError(f"no I2C device at address 0x{address:02X}")
        if len(reply) < count:
            raise OSError(f"I2C device 0x{address:02X} sent fewer than {count} bytes")
        return reply[:count]

    def count_rising_edges(self, pin: int, ms: int) -> int:
        """Count rising edges on ``pin`` over ``ms`` milliseconds."""
        edges = int(self.pulse_frequencies.get(pin, 0.0) * ms / 1000)
        self.delay(ms)
        return edges

    def uart_write(self, data: str) -> None:
        self.uart_output.append(data)

    def uart_read(self) -> str | None:
        """The next received character, or None if nothing is waiting."""
        return self.uart_input.popleft() if self.uart_input else None

    def serial_print(self, text: str) -> None:
        self.serial_output.append(text)