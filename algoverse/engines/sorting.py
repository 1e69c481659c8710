"""Step-producing comparison sorts.

Every sort works on a private copy of the :class:`ArrayBuffer`, yields the
steps it performs and finishes with a single ``mark_sorted`` step covering
every index.  Ties never cause a swap, so all six algorithms leave equal
elements alone when nothing forces them to move.

Quick sort keeps its pending partitions on an explicit work-list and merge
sort recurses with ``yield from``; neither relies on deep native recursion.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import logging
import operator
from typing import TYPE_CHECKING, Callable, Dict, Generator, List, Optional, Tuple

from ..context import RunContext, ensure_context
from ..errors import InvalidInputError
from ..steps import OperationStatus, Step, StepKind, StepSequence, applied
from .heap import sift_down

if TYPE_CHECKING:  # pragma: no cover - import is for type checking only
    from ..structures.array_buffer import ArrayBuffer

__all__ = ["SortAlgorithm", "SortOutcome", "run"]

logger = logging.getLogger(__name__)


class SortAlgorithm(str, Enum):
    BUBBLE = "bubble"
    SELECTION = "selection"
    INSERTION = "insertion"
    MERGE = "merge"
    QUICK = "quick"
    HEAP = "heap"


@dataclass
class SortOutcome:
    """Counters collected while a sort runs."""

    algorithm: SortAlgorithm
    comparisons: int = 0
    swaps: int = 0
    writes: int = 0
    status: OperationStatus = field(default=OperationStatus.COMPLETED)

    def tally(self, step: Step) -> None:
        if step.kind is StepKind.COMPARE:
            self.comparisons += 1
        elif step.kind is StepKind.SWAP:
            self.swaps += 1
        elif step.kind is StepKind.SET_VALUE:
            self.writes += 1


SortGenerator = Generator[Step, None, None]


def run(
    buffer: "ArrayBuffer",
    algorithm: SortAlgorithm | str,
    context: Optional[RunContext] = None,
) -> StepSequence[SortOutcome]:
    """Return the step sequence that sorts *buffer* ascending with *algorithm*."""

    try:
        chosen = SortAlgorithm(algorithm)
    except ValueError as exc:
        raise InvalidInputError(f"Unknown sort algorithm: {algorithm!r}") from exc
    ctx = ensure_context(context, f"sort:{chosen.value}")
    work = buffer.clone()
    label = f"sort:{chosen.value}"
    return StepSequence(_counted(chosen, _SORTS[chosen](work, ctx), len(work), ctx), label=label)


def _counted(
    algorithm: SortAlgorithm,
    steps: SortGenerator,
    size: int,
    context: RunContext,
) -> Generator[Step, None, SortOutcome]:
    outcome = SortOutcome(algorithm)
    logger.debug("Starting %s sort over %d elements", algorithm.value, size)
    for step in steps:
        outcome.tally(step)
        yield step
    if context.should_stop():
        outcome.status = OperationStatus.ABORTED
    else:
        yield Step.mark_sorted(*range(size))
    logger.debug(
        "%s sort %s: %d comparisons, %d swaps, %d writes",
        algorithm.value,
        outcome.status.value,
        outcome.comparisons,
        outcome.swaps,
        outcome.writes,
    )
    return outcome


def _bubble(work: "ArrayBuffer", context: RunContext) -> SortGenerator:
    n = len(work)
    for i in range(n - 1):
        for j in range(n - i - 1):
            if context.should_stop():
                return
            yield Step.compare(j, j + 1)
            if work[j] > work[j + 1]:
                yield applied(work, Step.swap(j, j + 1))
        yield Step.mark_sorted(n - i - 1)


def _selection(work: "ArrayBuffer", context: RunContext) -> SortGenerator:
    n = len(work)
    for i in range(n - 1):
        if context.should_stop():
            return
        minimum = i
        yield Step.mark_current(i, role="minimum")
        for j in range(i + 1, n):
            if context.should_stop():
                return
            yield Step.compare(j, minimum)
            if work[j] < work[minimum]:
                minimum = j
                yield Step.mark_current(j, role="minimum")
        if minimum != i:
            yield applied(work, Step.swap(i, minimum))
        yield Step.mark_sorted(i)


def _insertion(work: "ArrayBuffer", context: RunContext) -> SortGenerator:
    n = len(work)
    for i in range(1, n):
        if context.should_stop():
            return
        key = work[i]
        yield Step.mark_current(i, key=key)
        j = i - 1
        while j >= 0:
            if context.should_stop():
                return
            yield Step.compare(j, j + 1, key=key)
            if work[j] <= key:
                break
            yield applied(work, Step.set_value(j + 1, work[j]))
            j -= 1
        if j + 1 != i:
            yield applied(work, Step.set_value(j + 1, key))
        yield Step.mark_sorted(*range(i + 1))


def _merge(work: "ArrayBuffer", context: RunContext) -> SortGenerator:
    yield from _merge_range(work, 0, len(work) - 1, context)


def _merge_range(work: "ArrayBuffer", lo: int, hi: int, context: RunContext) -> SortGenerator:
    if lo >= hi or context.should_stop():
        return
    mid = (lo + hi) // 2
    yield from _merge_range(work, lo, mid, context)
    yield from _merge_range(work, mid + 1, hi, context)
    if context.should_stop():
        return
    yield Step.range_update(lo, hi)

    left = work.to_list()[lo : mid + 1]
    right = work.to_list()[mid + 1 : hi + 1]
    i = j = 0
    k = lo
    while i < len(left) and j < len(right):
        if context.should_stop():
            return
        # The left run lives in a buffer once writes begin; only the right
        # candidate still sits at its own index.
        yield Step.compare(mid + 1 + j, slot=k, left=left[i], right=right[j])
        if left[i] <= right[j]:
            value = left[i]
            i += 1
        else:
            value = right[j]
            j += 1
        yield applied(work, Step.set_value(k, value))
        k += 1
    for value in left[i:] + right[j:]:
        if context.should_stop():
            return
        yield applied(work, Step.set_value(k, value))
        k += 1


def _quick(work: "ArrayBuffer", context: RunContext) -> SortGenerator:
    pending: List[Tuple[int, int]] = [(0, len(work) - 1)]
    while pending:
        if context.should_stop():
            return
        lo, hi = pending.pop()
        if lo >= hi:
            if lo == hi:
                yield Step.mark_sorted(lo)
            continue
        pivot_index = yield from _partition(work, lo, hi, context)
        if pivot_index is None:
            return
        yield Step.mark_sorted(pivot_index)
        # Right half pushed first so the left half is processed next.
        pending.append((pivot_index + 1, hi))
        pending.append((lo, pivot_index - 1))


def _partition(
    work: "ArrayBuffer", lo: int, hi: int, context: RunContext
) -> Generator[Step, None, Optional[int]]:
    pivot = work[hi]
    yield Step.mark_current(hi, role="pivot", value=pivot)
    yield Step.range_update(lo, hi)
    boundary = lo
    for j in range(lo, hi):
        if context.should_stop():
            return None
        yield Step.compare(j, hi, pivot=pivot)
        if work[j] < pivot:
            if boundary != j:
                yield applied(work, Step.swap(boundary, j))
            boundary += 1
    if boundary != hi and work[boundary] != pivot:
        yield applied(work, Step.swap(boundary, hi))
    return boundary


def _heap(work: "ArrayBuffer", context: RunContext) -> SortGenerator:
    n = len(work)
    for i in range(n // 2 - 1, -1, -1):
        if context.should_stop():
            return
        yield from sift_down(work, i, n, operator.gt, context)
    for end in range(n - 1, 0, -1):
        if context.should_stop():
            return
        if work[0] != work[end]:
            yield applied(work, Step.swap(0, end))
        yield Step.mark_sorted(end)
        yield from sift_down(work, 0, end, operator.gt, context)


_SORTS: Dict[SortAlgorithm, Callable[["ArrayBuffer", RunContext], SortGenerator]] = {
    SortAlgorithm.BUBBLE: _bubble,
    SortAlgorithm.SELECTION: _selection,
    SortAlgorithm.INSERTION: _insertion,
    SortAlgorithm.MERGE: _merge,
    SortAlgorithm.QUICK: _quick,
    SortAlgorithm.HEAP: _heap,
}
