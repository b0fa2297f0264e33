import json

import pytest

from hypha.hardware import Board, Eeprom
from hypha.sensor_manager import (
    NUM_SCHEDULED_EVENTS,
    NUM_SENSOR_ENTRIES,
    SensorManager,
    SensorScheduledEvent,
    SettingsVersionError,
)
from hypha.sensors import read_analog, read_tmp_env
from hypha.sorted_array import CapacityError


def configure(manager, index, label, period, func=read_analog):
    entry = manager.sensor_entries[index]
    entry.label = label
    entry.func = func
    entry.ms_measurement_period = period
    entry.pins = [2, 3, -1, -1]
    return entry


@pytest.fixture
def manager():
    return SensorManager(Board())


def test_defaults(manager):
    assert manager.board_name == "Kefir"
    assert len(manager.sensor_entries) == NUM_SENSOR_ENTRIES
    assert all(entry.is_empty() for entry in manager.sensor_entries)
    assert len(manager.events) == 0


def test_schedule_from_given_time(manager):
    entry = configure(manager, 0, "a", 1000)
    start = 500
    event = manager.schedule(entry, start)
    assert event.date == start + entry.ms_measurement_period
    assert event.argument is entry
    assert event.func is read_analog
    assert list(manager.events) == [event]


def test_schedule_by_index_uses_board_clock(manager):
    entry = configure(manager, 1, "b", 300)
    manager.board.delay(200)
    event = manager.schedule(1)
    assert event.date == manager.board.millis() + entry.ms_measurement_period


def test_empty_and_disabled_entries_not_scheduled(manager):
    assert manager.schedule(0, 0) is None
    entry = configure(manager, 0, "a", 100)
    entry.enable(False)
    assert manager.schedule(entry, 0) is None
    assert len(manager.events) == 0


def test_events_sorted_by_date(manager):
    slow = configure(manager, 0, "slow", 5000)
    fast = configure(manager, 1, "fast", 10)
    manager.schedule(slow, 0)
    manager.schedule(fast, 0)
    dates = [event.date for event in manager.events]
    assert dates == sorted(dates)
    assert manager.events[0].argument is fast


def test_scheduler_full(manager):
    entry = configure(manager, 0, "a", 1)
    for start in range(NUM_SCHEDULED_EVENTS):
        manager.schedule(entry, start)
    with pytest.raises(CapacityError):
        manager.schedule(entry, 0)


def test_event_ordering():
    entry = object()
    early = SensorScheduledEvent(1, None, entry)
    late = SensorScheduledEvent(2, None, entry)
    assert early < late
    assert not late < early


def test_remove_events_only_for_that_entry(manager):
    first = configure(manager, 0, "a", 10)
    second = configure(manager, 1, "b", 20)
    manager.schedule(first, 0)
    manager.schedule(second, 0)
    manager.schedule(first, 100)
    manager.remove_events(0)
    assert [event.argument for event in manager.events] == [second]


def test_remove_entry(manager):
    entry = configure(manager, 2, "c", 10)
    manager.schedule(entry, 0)
    manager.remove_entry(2)
    assert entry.is_empty()
    assert len(manager.events) == 0


def test_remove_entry_bad_index_ignored(manager):
    configure(manager, 0, "a", 10)
    manager.remove_entry(NUM_SENSOR_ENTRIES)
    manager.remove_entry(-1)
    assert not manager.sensor_entries[0].is_empty()


def test_remove_all_events(manager):
    entry = configure(manager, 0, "a", 10)
    manager.schedule(entry, 0)
    manager.schedule(entry, 5)
    manager.remove_all_events()
    assert manager.events.is_empty()


def test_entry_json(manager):
    configure(manager, 3, "temp", 60)
    parsed = json.loads(manager.entry_json(3))
    assert parsed["index"] == 3
    assert parsed["label"] == "temp"
    assert manager.entry_json(NUM_SENSOR_ENTRIES) is None


def test_entries_json_lists_used_entries(manager):
    configure(manager, 1, "a", 10)
    configure(manager, 4, "b", 20, read_tmp_env)
    parsed = json.loads(manager.entries_json())
    assert [item["index"] for item in parsed["SensorEntries"]] == [1, 4]
    assert parsed["SensorEntries"][1]["sensorID"] == "ENV-TMP"


def test_eeprom_round_trip(manager):
    eeprom = Eeprom(1024)
    manager.board_name = "Greenhouse"
    configure(manager, 0, "a", 10)
    configure(manager, 5, "b", 20, read_tmp_env)
    assert manager.write_to_eeprom(eeprom) == 2

    restored = SensorManager(Board())
    configure(restored, 7, "stale", 1)
    assert restored.read_from_eeprom(eeprom)
    assert restored.board_name == "Greenhouse"
    assert restored.sensor_entries[0].label == "a"
    assert restored.sensor_entries[1].label == "b"
    assert restored.sensor_entries[1].measurement_func() is read_tmp_env
    assert all(entry.is_empty() for entry in restored.sensor_entries[2:])


def test_blank_eeprom_has_no_settings(manager):
    configure(manager, 0, "a", 10)
    assert not manager.read_from_eeprom(Eeprom(1024))
    assert manager.sensor_entries[0].label == "a"


def test_wrong_version_rejected(manager):
    eeprom = Eeprom(1024)
    manager.write_to_eeprom(eeprom)
    eeprom.write_bytes(6, b"\x01\x02")
    with pytest.raises(SettingsVersionError):
        SensorManager(Board()).read_from_eeprom(eeprom)


def test_write_reports_status(manager):
    manager.write_to_eeprom(Eeprom(1024))
    assert manager.board.serial_output[-1] == '{"status":"Settings written to EEPROM."}'