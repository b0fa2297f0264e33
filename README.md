# hypha

Tools for a small sensor-logging board. It has a registry of sensor types,
sensor entries with their pins and measurement periods, and a schedule of
readings. Settings are stored in an in-memory EEPROM image. There is also a
compact JSON generator and parser that work within fixed capacities. Sensor
readers run against `Board`, a simulated board with a virtual millisecond
clock.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `hypha.jsongen` builds JSON text with the fixed-capacity containers
  `JsonArray` and `JsonObject`. A value added to a full container is dropped,
  and `add` returns `False`.
  - `StringBuilder` collects output up to a fixed size.
  - `EscapedString` quotes and escapes strings, and prints `None` as `null`.
  - `format_double(value, digits)` formats a float with `digits + 1`
    significant digits, as `%.*g` does.
  - `JsonPrintable.render(size)` returns the text as it fits into a buffer of
    `size` slots.
- `hypha.jsmn` turns JSON text into a flat list of `Token` objects with
  `parse_tokens(js, max_tokens)`. Each token records its type, its span and
  the number of its direct children. When the text cannot be scanned it raises
  `TokenLimitError`, `InvalidJsonError` or `PartialJsonError`, all of which
  are subclasses of `JsmnError`. Unquoted values of any kind are accepted as
  primitives.
- `hypha.jsonparse` provides `JsonParser`, which gives `JsonValue`,
  `JsonArray`, `JsonObject` and `JsonPair` views over those tokens.
- `hypha.textscan` has small helpers for splitting loosely written command
  text: `is_ignored_char`, `eat_white_space` and `tokenize`. Spaces, tabs,
  newlines and `:,{}` count as white space.
- `hypha.sorted_array` has `SortedArray`, a bounded list kept in ascending
  order. Adding to a full one raises `CapacityError`.
- `hypha.ring_buffer` has `RingBuffer`, a bounded queue/stack. Pushing onto a
  full one raises `BufferOverflowError`, and popping from an empty one raises
  `BufferUnderflowError`.
- `hypha.hardware` provides the following:
  - `Board`, a simulated board. Its analog values, I2C replies, pulse
    frequencies and UART input are set through its attributes. It records pin
    changes, UART writes and serial output.
  - `Eeprom`, a byte store erased to `0xFF`.
  - `status_message` and `reference_voltage_multiplier`.
- `hypha.sensors` has a reading function for each supported sensor type:
  `read_analog`, `read_tmp_env`, `read_dfrobot_ph`, `read_manylabs_ph`,
  `read_atlas_circuit` and `read_hall_sensor`. The supported IDs are `ANALOG`,
  `ENV-TMP`, `DFROBOT-PH`, `MANYLABS-PH`, `ATLAS-CIRCUIT` and `HALL`.
  - `func_from_sensor_id` and `id_from_sensor_func` map between the IDs and
    the reading functions. An unknown function gives `"NONE"`.
  - An Atlas Scientific circuit that answers `*ER`, or that does not answer
    within 5 seconds, raises `SensorError`.
- `hypha.sensor_entry` has `SensorEntry`, one installed sensor. It can produce
  its measurement and description JSON, and it can be saved to and loaded from
  an `Eeprom`. The sensor type is saved by its ID.
- `hypha.sensor_manager` has `SensorManager`. It holds the board name and up
  to eight entries, and it schedules their readings as `SensorScheduledEvent`
  items ordered by due time. It also saves and loads the settings:
  - `read_from_eeprom` returns `False` when the EEPROM holds no settings.
  - It raises `SettingsVersionError` when the settings were stored in another
    format version.
  - A full schedule raises `CapacityError`.

## Example: generating JSON

```python
from hypha.jsongen import JsonArray, JsonObject

readings = JsonArray(3)
readings.add(1)
readings.add(3.14159, 4)

message = JsonObject(2)
message.add("label", "pH")
message.add("data", readings)

print(message.render(256))   # {"label":"pH","data":[1,3.1416]}
```

## Example: parsing JSON

```python
from hypha.jsonparse import JsonParser

parser = JsonParser(32)
root = parser.parse('{"index":0,"pins":[4,13]}')
print(root["index"].as_int())      # 0
print(root["pins"][1].as_int())    # 13
```

A missing key or index, or text that cannot be parsed, gives a value whose
`success()` is false. Such a value converts to `False`, `0`, `0.0` or `None`.

## Example: a sensor and its schedule

```python
from hypha.hardware import Board, Eeprom
from hypha.sensor_manager import SensorManager
from hypha.sensors import func_from_sensor_id

board = Board()
board.analog_values[1] = 512

manager = SensorManager(board)
entry = manager.sensor_entries[0]
entry.label = "soil"
entry.func = func_from_sensor_id("ANALOG")
entry.pins = [2, 1, -1, -1]
entry.ms_measurement_period = 60000

print(entry.func(entry, board))    # about 0.5
print(board.serial_output[-1])     # {"measurement":{"label":"soil","datum":0.50}}

event = manager.schedule(0)        # due one period from board.millis()
print(manager.entries_json())

eeprom = Eeprom(1024)
manager.write_to_eeprom(eeprom)    # returns the number of entries stored
```

## What this package does not do

The package does not talk to real hardware: every reading goes through the
simulated `Board`. It has no command-line program and no loop that reads
commands from a serial line. Nothing runs scheduled events when they fall
due. `SensorManager` only keeps the ordered schedule; taking due events from
`manager.events` and calling their `func` is left to the caller.