"""Heap insert/delete-root engines.

``insert`` appends the value and sifts it up; ``delete_root`` moves the last
element to the root, shrinks the heap and sifts down.  :func:`sift_down` is
shared with heap sort in :mod:`algoverse.engines.sorting`.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING, Callable, Generator, Optional, Protocol, Union

from ..context import RunContext, ensure_context
from ..errors import EmptyStructureError, coerce_int
from ..steps import OperationStatus, Step, StepSequence, SupportsApply, applied, atomic
from ..structures.heap import left_child, parent, right_child

if TYPE_CHECKING:  # pragma: no cover - import is for type checking only
    from ..structures.heap import BinaryHeap

__all__ = [
    "HeapDeleteRoot",
    "HeapInsert",
    "HeapOperation",
    "HeapOutcome",
    "delete_root",
    "heapify_down",
    "heapify_up",
    "insert",
    "run",
    "sift_down",
    "sift_up",
]

logger = logging.getLogger(__name__)

Outranks = Callable[[int, int], bool]


@dataclass(frozen=True)
class HeapOutcome:
    status: OperationStatus
    value: Optional[int] = None
    index: Optional[int] = None


class _Indexable(SupportsApply, Protocol):
    def __getitem__(self, index: int) -> int:
        ...


def sift_down(
    work: _Indexable,
    index: int,
    size: int,
    outranks: Outranks,
    context: RunContext,
) -> Generator[Step, None, int]:
    """Move ``work[index]`` down within ``work[:size]``; returns its final slot."""

    while not context.should_stop():
        target = index
        for child in (left_child(index), right_child(index)):
            if child < size:
                yield Step.compare(target, child)
                if outranks(work[child], work[target]):
                    target = child
        if target == index:
            break
        yield applied(work, Step.swap(index, target))
        index = target
    return index


def sift_up(
    work: _Indexable,
    index: int,
    outranks: Outranks,
    context: RunContext,
) -> Generator[Step, None, int]:
    """Move ``work[index]`` toward the root while it outranks its parent."""

    while index > 0 and not context.should_stop():
        above = parent(index)
        yield Step.compare(index, above)
        if not outranks(work[index], work[above]):
            break
        yield applied(work, Step.swap(index, above))
        index = above
    return index


def heapify_up(heap: "BinaryHeap", index: int, context: Optional[RunContext] = None) -> StepSequence[int]:
    """Restore heap order above *index* on a copy of *heap*."""

    work = heap.clone()
    ctx = ensure_context(context, "heap:heapify-up")
    return StepSequence(sift_up(work, index, work.outranks, ctx), label="heap:heapify-up")


def heapify_down(heap: "BinaryHeap", index: int, context: Optional[RunContext] = None) -> StepSequence[int]:
    """Restore heap order below *index* on a copy of *heap*."""

    work = heap.clone()
    ctx = ensure_context(context, "heap:heapify-down")
    return StepSequence(
        sift_down(work, index, len(work), work.outranks, ctx), label="heap:heapify-down"
    )


def insert(heap: "BinaryHeap", value: object, context: Optional[RunContext] = None) -> StepSequence[HeapOutcome]:
    """Append *value* and sift it up."""

    number = coerce_int(value, "heap value")
    work = heap.clone()
    ctx = ensure_context(context, "heap:insert")
    return StepSequence(_insert(work, number, ctx), label="heap:insert")


def _insert(work: "BinaryHeap", value: int, context: RunContext) -> Generator[Step, None, HeapOutcome]:
    position = len(work)
    yield applied(work, Step.structural_insert(position, value=value))
    final = yield from sift_up(work, position, work.outranks, context)
    logger.debug("Inserted %d into %s heap at index %d", value, work.mode.value, final)
    return HeapOutcome(OperationStatus.INSERTED, value=value, index=final)


def delete_root(heap: "BinaryHeap", context: Optional[RunContext] = None) -> StepSequence[HeapOutcome]:
    """Remove the root; raises :class:`EmptyStructureError` before any step."""

    if heap.is_empty():
        raise EmptyStructureError("Cannot delete the root of an empty heap")
    work = heap.clone()
    ctx = ensure_context(context, "heap:delete-root")
    return StepSequence(_delete_root(work, ctx), label="heap:delete-root")


def _delete_root(work: "BinaryHeap", context: RunContext) -> Generator[Step, None, HeapOutcome]:
    root = work[0]
    last = len(work) - 1
    yield Step.mark_current(0, value=root)
    if last == 0:
        yield applied(work, Step.structural_delete(0, value=root))
    else:
        moved = work[last]
        yield from atomic(
            [
                applied(work, Step.set_value(0, moved, replaced=root)),
                applied(work, Step.structural_delete(last, value=moved)),
            ]
        )
        yield from sift_down(work, 0, len(work), work.outranks, context)
    logger.debug("Deleted root %d from %s heap", root, work.mode.value)
    return HeapOutcome(OperationStatus.REMOVED, value=root, index=0)


@dataclass(frozen=True)
class HeapInsert:
    value: int


@dataclass(frozen=True)
class HeapDeleteRoot:
    pass


HeapOperation = Union[HeapInsert, HeapDeleteRoot]


def run(
    heap: "BinaryHeap",
    operation: HeapOperation,
    context: Optional[RunContext] = None,
) -> StepSequence[HeapOutcome]:
    """Family entry point: dispatch *operation* against *heap*."""

    if isinstance(operation, HeapInsert):
        return insert(heap, operation.value, context)
    if isinstance(operation, HeapDeleteRoot):
        return delete_root(heap, context)
    raise TypeError(f"Unsupported heap operation: {operation!r}")
