import json

import pytest

from hypha.hardware import (
    ADC_MAX,
    HIGH,
    LOW,
    Board,
    Eeprom,
    PinMode,
    reference_voltage_multiplier,
    status_message,
)


def test_multiplier_maps_full_scale_to_reference():
    assert reference_voltage_multiplier(5.0) * ADC_MAX == pytest.approx(5.0)
    assert reference_voltage_multiplier(1023.0) == pytest.approx(1.0)


def test_status_message_format():
    assert status_message("error", "buffer overflow") == '{"error":"buffer overflow"}'


def test_status_message_escapes_quotes():
    message = status_message("debug", 'say "hi"')
    assert json.loads(message) == {"debug": 'say "hi"'}


def test_eeprom_starts_erased():
    eeprom = Eeprom(4)
    assert eeprom.read_bytes(0, 4) == b"\xff" * 4


def test_eeprom_bytes_round_trip():
    eeprom = Eeprom(16)
    assert eeprom.write_bytes(3, b"abc") == 3
    assert eeprom.read_bytes(3, 3) == b"abc"


def test_eeprom_string_is_nul_terminated():
    eeprom = Eeprom(16)
    assert eeprom.write_string(2, "Hypha") == len("Hypha")
    assert eeprom.read_bytes(2, 6) == b"Hypha\0"


def test_eeprom_out_of_range_raises():
    eeprom = Eeprom(4)
    with pytest.raises(IndexError):
        eeprom.write_bytes(3, b"ab")
    with pytest.raises(IndexError):
        eeprom.read_bytes(-1, 1)


def test_board_records_pins():
    board = Board()
    board.pin_mode(13, PinMode.OUTPUT)
    board.digital_write(13, HIGH)
    assert board.pin_modes[13] is PinMode.OUTPUT
    assert board.pin_levels[13] == HIGH
    board.digital_write(13, LOW)
    assert board.pin_levels[13] == LOW


def test_analog_read_is_clamped():
    board = Board()
    board.analog_values[0] = 5000
    board.analog_values[1] = 300
    assert board.analog_read(0) == ADC_MAX
    assert board.analog_read(1) == 300


def test_delay_advances_clock():
    board = Board()
    start = board.millis()
    board.delay(250)
    assert board.millis() - start == 250


def test_i2c_read_and_missing_device():
    board = Board()
    board.i2c_devices[0x4D] = bytes([1, 2, 3])
    assert board.i2c_read(0x4D, 2) == bytes([1, 2])
    with pytest.raises(OSError):
        board.i2c_read(0x48, 2)
    with pytest.raises(OSError):
        board.i2c_read(0x4D, 4)


def test_count_rising_edges_uses_frequency_and_time():
    board = Board()
    board.pulse_frequencies[2] = 25
    assert board.count_rising_edges(2, 1000) == 25
    assert board.millis() == 1000


def test_uart_round_trip_and_serial():
    board = Board()
    board.uart_write("R\r")
    board.uart_input.extend("ok")
    assert board.uart_output == ["R\r"]
    assert [board.uart_read(), board.uart_read(), board.uart_read()] == ["o", "k", None]
    board.serial_print("hello")
    assert board.serial_output == ["hello"]