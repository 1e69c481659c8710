from __future__ import annotations

import random

import numpy as np
import pytest

from algoverse.errors import EmptyStructureError, InvalidInputError
from algoverse.structures import BinaryHeap, HeapMode, left_child, parent, right_child


def test_index_helpers() -> None:
    assert parent(0) == -1
    assert parent(4) == 1
    assert left_child(1) == 3
    assert right_child(1) == 4


def test_max_heap_insert_sequence_keeps_order() -> None:
    heap = BinaryHeap(HeapMode.MAX, [3, 1, 4, 1, 5])
    assert heap.peek() == 5
    assert heap.is_valid()
    assert sorted(heap) == [1, 1, 3, 4, 5]


def test_min_heap_delete_root_returns_ascending_values() -> None:
    heap = BinaryHeap("min", [9, 2, 7, 4, 4, 1])
    drained = [heap.delete_root() for _ in range(len(heap))]
    assert drained == [1, 2, 4, 4, 7, 9]
    assert heap.is_empty()


def test_singleton_delete_root_empties_heap() -> None:
    heap = BinaryHeap(values=[8])
    assert heap.delete_root() == 8
    assert heap.is_empty()


def test_empty_heap_operations_raise() -> None:
    heap = BinaryHeap()
    with pytest.raises(EmptyStructureError):
        heap.peek()
    with pytest.raises(EmptyStructureError):
        heap.delete_root()


def test_changing_mode_clears_heap() -> None:
    heap = BinaryHeap(values=[1, 2, 3])
    heap.mode = "min"
    assert heap.mode is HeapMode.MIN
    assert heap.is_empty()
    with pytest.raises(InvalidInputError):
        heap.mode = "median"


def test_random_heap_is_valid() -> None:
    heap = BinaryHeap.random(HeapMode.MIN, rng=np.random.default_rng(5))
    assert 6 <= len(heap) <= 10
    assert all(1 <= value <= 50 for value in heap)
    assert heap.is_valid()


@pytest.mark.parametrize("mode", ["max", "min"])
def test_random_operations_preserve_heap_order(mode: str) -> None:
    rng = random.Random(13)
    heap = BinaryHeap(mode)
    reference = []
    for _ in range(200):
        if reference and rng.random() < 0.4:
            root = heap.delete_root()
            expected = max(reference) if mode == "max" else min(reference)
            assert root == expected
            reference.remove(root)
        else:
            value = rng.randint(-20, 20)
            heap.insert(value)
            reference.append(value)
        assert heap.is_valid()
        assert sorted(heap) == sorted(reference)
