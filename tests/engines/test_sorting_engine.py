from __future__ import annotations

from collections import Counter
import random

import pytest

from algoverse.context import RunContext
from algoverse.engines import sorting
from algoverse.engines.sorting import SortAlgorithm
from algoverse.errors import InvalidInputError
from algoverse.steps import OperationStatus, Step, StepKind, drain
from algoverse.structures import ArrayBuffer

ALGORITHMS = list(SortAlgorithm)


def _play(values, algorithm):
    buffer = ArrayBuffer(values)
    sequence = sorting.run(buffer, algorithm)
    steps = []
    for step in sequence:
        buffer.apply(step)
        steps.append(step)
    return buffer, steps, sequence.outcome


def test_bubble_sort_scenario_steps() -> None:
    buffer, steps, outcome = _play([5, 3, 8, 1], "bubble")
    assert steps[:2] == [Step.compare(0, 1), Step.swap(0, 1)]
    assert buffer.to_list() == [1, 3, 5, 8]
    assert [step.indices for step in steps if step.kind is StepKind.MARK_SORTED] == [
        (3,),
        (2,),
        (1,),
        (0, 1, 2, 3),
    ]
    assert outcome.comparisons == 6
    assert outcome.swaps == 4
    assert outcome.status is OperationStatus.COMPLETED


def test_bubble_sort_has_no_early_exit() -> None:
    _, steps, outcome = _play([1, 2, 3, 4, 5], "bubble")
    assert outcome.comparisons == 10
    assert not any(step.kind is StepKind.SWAP for step in steps)


@pytest.mark.parametrize("algorithm", ALGORITHMS)
def test_every_sort_orders_random_arrays(algorithm: SortAlgorithm) -> None:
    rng = random.Random(13)
    for _ in range(25):
        values = [rng.randint(-50, 50) for _ in range(rng.randint(0, 40))]
        buffer, steps, outcome = _play(values, algorithm)
        assert buffer.to_list() == sorted(values)
        assert Counter(buffer) == Counter(values)
        assert steps[-1] == Step.mark_sorted(*range(len(values)))
        assert outcome.algorithm is algorithm
        for step in steps:
            assert all(0 <= index < len(values) for index in step.indices)


@pytest.mark.parametrize("algorithm", ALGORITHMS)
def test_ties_never_swap(algorithm: SortAlgorithm) -> None:
    _, steps, _ = _play([4, 4, 4, 4], algorithm)
    assert not any(step.kind is StepKind.SWAP for step in steps)


@pytest.mark.parametrize("algorithm", ALGORITHMS)
@pytest.mark.parametrize("values", [[], [7]])
def test_trivial_arrays_produce_only_final_mark(algorithm: SortAlgorithm, values) -> None:
    _, steps, _ = _play(values, algorithm)
    assert [step.kind for step in steps if step.kind is not StepKind.MARK_SORTED] == []
    assert steps[-1] == Step.mark_sorted(*range(len(values)))


def test_selection_sort_skips_self_swap() -> None:
    _, steps, outcome = _play([1, 3, 2], "selection")
    assert [step for step in steps if step.kind is StepKind.SWAP] == [Step.swap(1, 2)]
    assert outcome.swaps == 1


def test_insertion_sort_marks_growing_prefix() -> None:
    _, steps, _ = _play([3, 2, 1], "insertion")
    marks = [step.indices for step in steps if step.kind is StepKind.MARK_SORTED]
    assert marks == [(0, 1), (0, 1, 2), (0, 1, 2)]


def test_merge_sort_announces_ranges() -> None:
    _, steps, outcome = _play([4, 3, 2, 1], "merge")
    ranges = [step.indices for step in steps if step.kind is StepKind.RANGE_UPDATE]
    assert ranges == [(0, 1), (2, 3), (0, 3)]
    assert outcome.writes == 8


def test_merge_compare_points_at_the_live_right_candidate() -> None:
    buffer = ArrayBuffer([5, 1, 4, 2, 8, 3])
    for step in sorting.run(buffer, "merge"):
        if step.kind is StepKind.COMPARE:
            assert buffer[step.index] == step.payload["right"]
            assert step.payload["slot"] <= step.index
        buffer.apply(step)
    assert buffer.to_list() == [1, 2, 3, 4, 5, 8]


def test_quick_sort_uses_last_element_as_pivot() -> None:
    _, steps, _ = _play([3, 1, 2], "quick")
    first_pivot = next(step for step in steps if step.kind is StepKind.MARK_CURRENT)
    assert first_pivot.indices == (2,)
    assert first_pivot.payload["value"] == 2


def test_heap_sort_on_worst_case_input() -> None:
    values = list(range(30, 0, -1))
    buffer, _, outcome = _play(values, "heap")
    assert buffer.to_list() == sorted(values)
    assert outcome.swaps > 0


def test_run_leaves_original_buffer_untouched() -> None:
    buffer = ArrayBuffer([2, 1])
    list(sorting.run(buffer, "bubble"))
    assert buffer.to_list() == [2, 1]


def test_unknown_algorithm_is_rejected() -> None:
    with pytest.raises(InvalidInputError):
        sorting.run(ArrayBuffer([1]), "bogo")


@pytest.mark.parametrize("algorithm", ALGORITHMS)
def test_cancellation_stops_cleanly(algorithm: SortAlgorithm) -> None:
    values = [9, 8, 7, 6, 5, 4, 3, 2, 1, 0]
    buffer = ArrayBuffer(values)
    context = RunContext()
    sequence = sorting.run(buffer, algorithm, context)
    consumed = 0
    for step in sequence:
        buffer.apply(step)
        consumed += 1
        if consumed == 5:
            context.cancel()
    assert sequence.outcome.status is OperationStatus.ABORTED
    assert len(buffer) == len(values)
    assert all(isinstance(value, int) for value in buffer)


def test_drain_sorts_instantly() -> None:
    buffer = ArrayBuffer([5, 1, 4])
    outcome = drain(buffer, sorting.run(buffer, SortAlgorithm.QUICK))
    assert buffer.to_list() == [1, 4, 5]
    assert outcome.status is OperationStatus.COMPLETED
