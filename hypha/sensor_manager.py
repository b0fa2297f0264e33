"""Installed sensors, their measurement schedule and their stored settings."""

from __future__ import annotations

import struct
from dataclasses import dataclass

from hypha.hardware import Board, Eeprom, status_message
from hypha.sensor_entry import SensorEntry
from hypha.sensors import SensorMeasurementFunc
from hypha.sorted_array import CapacityError, SortedArray

__all__ = [
    "NUM_SENSOR_ENTRIES",
    "NUM_SCHEDULED_EVENTS",
    "BOARD_NAME_LEN",
    "EEPROM_HEADER_STRING",
    "EEPROM_VERSION",
    "SettingsVersionError",
    "SensorScheduledEvent",
    "SensorManager",
]

NUM_SENSOR_ENTRIES = 8
NUM_SCHEDULED_EVENTS = NUM_SENSOR_ENTRIES * 3 // 2
BOARD_NAME_LEN = 16
DEFAULT_BOARD_NAME = "Kefir"

EEPROM_HEADER_STRING = b"Hypha_"
EEPROM_MAJOR_VERSION = 0
EEPROM_MINOR_VERSION = 0
EEPROM_VERSION = (EEPROM_MAJOR_VERSION << 8) + EEPROM_MINOR_VERSION

_HEADER = struct.Struct(f"<{len(EEPROM_HEADER_STRING)}sH{BOARD_NAME_LEN}sH")


class SettingsVersionError(ValueError):
    """Stored settings were written in a different format version."""


@dataclass(eq=False)
class SensorScheduledEvent:
    """A measurement due at ``date`` milliseconds, ordered by date."""

    date: int
    func: SensorMeasurementFunc | None
    argument: SensorEntry

    def __lt__(self, other: SensorScheduledEvent) -> bool:
        return self.date < other.date


class SensorManager:
    """Holds the board's name, its sensor entries and the event schedule."""

    def __init__(self, board: Board) -> None:
        self.board = board
        self.board_name = DEFAULT_BOARD_NAME
        self.sensor_entries = [SensorEntry() for _ in range(NUM_SENSOR_ENTRIES)]
        self.events: SortedArray[SensorScheduledEvent] = SortedArray(NUM_SCHEDULED_EVENTS)

    def _status(self, kind: str, text: str) -> None:
        self.board.serial_print(status_message(kind, text))

    def write_to_eeprom(self, eeprom: Eeprom) -> int:
        """Store the board name and every used entry; return the entry count."""
        self._status("debug", "Hypha writing settings to EEPROM...")
        name = self.board_name.encode("latin-1")[:BOARD_NAME_LEN]
        next_byte = _HEADER.size
        count = 0
        for entry in self.sensor_entries:
            if entry.is_empty():
                continue
            next_byte += entry.write_to_eeprom(eeprom, next_byte)
            count += 1
        eeprom.write_bytes(0, _HEADER.pack(EEPROM_HEADER_STRING, EEPROM_VERSION, name, count))
        self._status("status", "Settings written to EEPROM.")
        return count

    def read_from_eeprom(self, eeprom: Eeprom) -> bool:
        """Load stored settings; return False if the EEPROM holds none."""
        header, version, name, count = _HEADER.unpack(eeprom.read_bytes(0, _HEADER.size))
        if header != EEPROM_HEADER_STRING:
            self._status("debug", "EEPROM does not contain Hypha settings.")
            return False
        if version != EEPROM_VERSION:
            self._status("error", "Hypha settings stored in EEPROM have wrong version.")
            raise SettingsVersionError(
                f"stored settings have version {version}, expected {EEPROM_VERSION}"
            )
        if count > NUM_SENSOR_ENTRIES:
            raise ValueError(f"stored settings hold {count} entries, at most {NUM_SENSOR_ENTRIES}")
        self.board_name = name.split(b"\0", 1)[0].decode("latin-1")
        next_byte = _HEADER.size
        for position, entry in enumerate(self.sensor_entries):
            if position < count:
                next_byte += entry.read_from_eeprom(eeprom, next_byte)
            else:
                entry.set_empty()
        self._status("status", "Settings read from EEPROM.")
        return True

    def _in_range(self, index: int) -> bool:
        return 0 <= index < NUM_SENSOR_ENTRIES

    def remove_entry(self, index: int) -> None:
        """Clear the entry at ``index`` and drop its events; ignore bad indices."""
        if not self._in_range(index):
            return
        self.remove_events(index)
        self.sensor_entries[index].set_empty()

    def entry_json(self, index: int) -> str | None:
        """The entry at ``index`` as JSON, or None for a bad index."""
        if not self._in_range(index):
            return None
        return self.sensor_entries[index].to_json(index)

    def entries_json(self) -> str:
        """Every used entry as one JSON document."""
        entries = ",".join(
            entry.to_json(index)
            for index, entry in enumerate(self.sensor_entries)
            if not entry.is_empty()
        )
        return f'{{"SensorEntries":[{entries}]}}'

    def schedule(
        self,
        entry: SensorEntry | int,
        ms_time_to_schedule_from: int | None = None,
    ) -> SensorScheduledEvent | None:
        """Schedule a measurement one period after the given time (default: now).

        Unused and disabled entries are not scheduled and give None.
        Raises :class:`CapacityError` when the schedule is full.
        """
        if isinstance(entry, int):
            entry = self.sensor_entries[entry]
        if entry.is_empty() or entry.is_disabled():
            return None
        if self.events.is_full():
            self._status("error", "Scheduler full")
            raise CapacityError("Scheduler full")
        start = self.board.millis() if ms_time_to_schedule_from is None else ms_time_to_schedule_from
        event = SensorScheduledEvent(start + entry.ms_measurement_period, entry.func, entry)
        self.events.add(event)
        return event

    def remove_events(self, index: int) -> None:
        """Drop every scheduled event for the entry at ``index``."""
        if not self._in_range(index):
            return
        target = self.sensor_entries[index]
        keep = [event for event in self.events if event.argument is not target]
        self.events.clear()
        for event in keep:
            self.events.add(event)

    def remove_all_events(self) -> None:
        self.events.clear()