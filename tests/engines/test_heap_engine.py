from __future__ import annotations

import pytest

from algoverse.engines import heap as engine
from algoverse.errors import EmptyStructureError, InvalidInputError
from algoverse.steps import OperationStatus, Step, StepKind, drain
from algoverse.structures import BinaryHeap, HeapMode


def test_insert_appends_then_sifts_up() -> None:
    heap = BinaryHeap(HeapMode.MAX, [5, 3])
    sequence = engine.insert(heap, 9)
    steps = list(sequence)
    assert steps[0] == Step.structural_insert(2, value=9)
    assert steps[1:] == [Step.compare(2, 0), Step.swap(2, 0)]
    assert sequence.outcome.status is OperationStatus.INSERTED
    assert sequence.outcome.index == 0
    assert heap.to_list() == [5, 3]


def test_insert_stops_when_parent_outranks() -> None:
    heap = BinaryHeap(HeapMode.MIN, [1, 4])
    steps = list(engine.insert(heap, 6))
    assert [step.kind for step in steps] == [StepKind.STRUCTURAL_INSERT, StepKind.COMPARE]


def test_delete_root_moves_last_element_up() -> None:
    heap = BinaryHeap(HeapMode.MAX, [3, 1, 4, 1, 5])
    assert heap.peek() == 5
    sequence = engine.delete_root(heap)
    steps = list(sequence)
    assert steps[0].kind is StepKind.MARK_CURRENT
    assert steps[1].kind is StepKind.SET_VALUE
    assert steps[2] == Step.structural_delete(4, value=heap[4])
    drain(heap, engine.delete_root(heap))
    assert heap.is_valid()
    assert sequence.outcome.value == 5
    assert len(heap) == 4


def test_delete_root_of_singleton() -> None:
    heap = BinaryHeap(values=[2])
    steps = list(engine.delete_root(heap))
    assert [step.kind for step in steps] == [StepKind.MARK_CURRENT, StepKind.STRUCTURAL_DELETE]


def test_delete_root_of_empty_heap_raises_before_steps() -> None:
    with pytest.raises(EmptyStructureError):
        engine.delete_root(BinaryHeap())


def test_insert_rejects_non_integers() -> None:
    with pytest.raises(InvalidInputError):
        engine.insert(BinaryHeap(), "x")


def test_heapify_down_from_violated_root() -> None:
    heap = BinaryHeap(HeapMode.MAX, [9, 8, 7])
    heap.apply(Step.set_value(0, 1))
    drain(heap, engine.heapify_down(heap, 0))
    assert heap.to_list() == [8, 1, 7]
    assert heap.is_valid()


def test_run_dispatches_operations() -> None:
    heap = BinaryHeap()
    drain(heap, engine.run(heap, engine.HeapInsert(4)))
    outcome = drain(heap, engine.run(heap, engine.HeapDeleteRoot()))
    assert outcome.value == 4
    with pytest.raises(TypeError):
        engine.run(heap, "insert")  # type: ignore[arg-type]


def test_delete_root_move_is_one_unit() -> None:
    heap = BinaryHeap(HeapMode.MAX, [5, 3, 4])
    steps = list(engine.delete_root(heap))
    assert [step.continues for step in steps[1:3]] == [True, False]
    assert not steps[0].continues
