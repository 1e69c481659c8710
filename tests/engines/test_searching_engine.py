from __future__ import annotations

import math
import random

import pytest

from algoverse.context import RunContext
from algoverse.engines import searching
from algoverse.errors import InvalidInputError
from algoverse.steps import OperationStatus, Step, StepKind
from algoverse.structures import ArrayBuffer


def _collect(values, target, algorithm):
    sequence = searching.run(ArrayBuffer(values), target, algorithm)
    steps = list(sequence)
    return steps, sequence.outcome


def test_linear_search_reports_first_occurrence() -> None:
    steps, outcome = _collect([4, 9, 2, 9], 9, "linear")
    assert outcome.found and outcome.index == 1
    assert outcome.comparisons == 2
    assert outcome.status is OperationStatus.FOUND
    assert steps[-1] == Step.found(1, value=9)


def test_linear_search_miss_compares_every_element() -> None:
    steps, outcome = _collect([1, 2, 3], 7, "linear")
    assert not outcome.found
    assert outcome.index is None
    assert outcome.comparisons == 3
    assert [step.kind for step in steps] == [StepKind.COMPARE] * 3 + [StepKind.NOT_FOUND]


def test_binary_search_emits_range_before_each_comparison() -> None:
    steps, outcome = _collect([5, 10, 15, 20, 25, 30, 35], 30, "binary")
    kinds = [step.kind for step in steps]
    assert kinds == [
        StepKind.RANGE_UPDATE,
        StepKind.COMPARE,
        StepKind.RANGE_UPDATE,
        StepKind.COMPARE,
        StepKind.FOUND,
    ]
    assert steps[0].indices == (0, 6)
    assert steps[2].indices == (4, 6)
    assert outcome.index == 5


def test_binary_search_requires_sorted_data() -> None:
    with pytest.raises(InvalidInputError):
        searching.run(ArrayBuffer([3, 1, 2]), 1, "binary")


def test_empty_array_is_a_plain_miss() -> None:
    for algorithm in ("linear", "binary"):
        steps, outcome = _collect([], 1, algorithm)
        assert [step.kind for step in steps] == [StepKind.NOT_FOUND]
        assert outcome.comparisons == 0


def test_invalid_target_is_rejected() -> None:
    with pytest.raises(InvalidInputError):
        searching.run(ArrayBuffer([1]), "one")


def test_binary_search_comparison_bound() -> None:
    rng = random.Random(13)
    for _ in range(200):
        size = rng.randint(0, 64)
        values = sorted(rng.sample(range(1000), size))
        target = rng.choice(values) if values and rng.random() < 0.5 else rng.randint(0, 999)
        _, outcome = _collect(values, target, "binary")
        assert outcome.comparisons <= math.ceil(math.log2(size + 1))
        if target in values:
            assert values[outcome.index] == target
        else:
            assert not outcome.found


def test_cancelled_search_reports_aborted() -> None:
    context = RunContext()
    sequence = searching.run(ArrayBuffer(list(range(10))), 9, "linear", context)
    iterator = iter(sequence)
    next(iterator)
    context.cancel()
    remaining = list(iterator)
    assert remaining == []
    assert sequence.outcome.status is OperationStatus.ABORTED
