from dataclasses import dataclass, field

import pytest

from hypha.sorted_array import CapacityError, SortedArray


@dataclass
class _Item:
    key: int
    name: str = field(default="")

    def __lt__(self, other: "_Item") -> bool:
        return self.key < other.key


def test_items_are_kept_in_ascending_order():
    array = SortedArray(5)
    for value in [5, 1, 4, 2, 3]:
        array.add(value)
    assert list(array) == sorted([5, 1, 4, 2, 3])


def test_equal_items_keep_insertion_order():
    array = SortedArray(4)
    array.add(_Item(2, "first"))
    array.add(_Item(1, "low"))
    array.add(_Item(2, "second"))
    assert [item.name for item in array] == ["low", "first", "second"]


def test_add_to_full_array_raises():
    array = SortedArray(2)
    array.add(1)
    array.add(2)
    assert array.is_full()
    with pytest.raises(CapacityError):
        array.add(3)
    assert list(array) == [1, 2]


def test_remove_returns_item_and_closes_gap():
    array = SortedArray(4)
    for value in [30, 10, 20]:
        array.add(value)
    assert array.remove(1) == 20
    assert list(array) == [10, 30]
    assert len(array) == 2


def test_remove_out_of_range_raises():
    array = SortedArray(2)
    array.add(7)
    with pytest.raises(IndexError):
        array.remove(1)
    assert list(array) == [7]


def test_getitem_out_of_range_raises():
    array = SortedArray(2)
    array.add(5)
    with pytest.raises(IndexError):
        array[1]
    assert array[0] == 5
    assert len(array) == 1


def test_getitem_returns_sorted_position():
    array = SortedArray(3)
    array.add(9)
    array.add(4)
    assert array[0] == 4
    assert array[1] == 9


def test_clear_and_empty_state():
    array = SortedArray(3)
    assert array.is_empty()
    array.add(1)
    assert not array.is_empty()
    array.clear()
    assert array.is_empty()
    assert len(array) == 0


def test_negative_capacity_rejected():
    with pytest.raises(ValueError):
        SortedArray(-1)