"""Linear and binary search engines."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
from typing import TYPE_CHECKING, Generator, List, Optional

from ..context import RunContext, ensure_context
from ..errors import InvalidInputError, coerce_int
from ..steps import OperationStatus, Step, StepSequence

if TYPE_CHECKING:  # pragma: no cover - import is for type checking only
    from ..structures.array_buffer import ArrayBuffer

__all__ = ["SearchAlgorithm", "SearchOutcome", "run"]

logger = logging.getLogger(__name__)


class SearchAlgorithm(str, Enum):
    LINEAR = "linear"
    BINARY = "binary"


@dataclass(frozen=True)
class SearchOutcome:
    found: bool
    index: Optional[int]
    comparisons: int
    status: OperationStatus = OperationStatus.NOT_FOUND


def run(
    buffer: "ArrayBuffer",
    target: object,
    algorithm: SearchAlgorithm | str = SearchAlgorithm.LINEAR,
    context: Optional[RunContext] = None,
) -> StepSequence[SearchOutcome]:
    """Search *buffer* for *target*.

    Binary search refuses buffers that are not in ascending order; the
    original data is never modified by either algorithm.
    """

    try:
        chosen = SearchAlgorithm(algorithm)
    except ValueError as exc:
        raise InvalidInputError(f"Unknown search algorithm: {algorithm!r}") from exc
    number = coerce_int(target, "search target")
    if chosen is SearchAlgorithm.BINARY and not buffer.is_sorted():
        raise InvalidInputError("Binary search requires the array to be sorted ascending")
    values = buffer.to_list()
    ctx = ensure_context(context, f"search:{chosen.value}")
    engine = _linear if chosen is SearchAlgorithm.LINEAR else _binary
    return StepSequence(engine(values, number, ctx), label=f"search:{chosen.value}")


def _linear(values: List[int], target: int, context: RunContext) -> Generator[Step, None, SearchOutcome]:
    comparisons = 0
    for index, value in enumerate(values):
        if context.should_stop():
            return SearchOutcome(False, None, comparisons, OperationStatus.ABORTED)
        comparisons += 1
        yield Step.compare(index, target=target)
        if value == target:
            yield Step.found(index, value=value)
            logger.debug("Linear search found %d at %d after %d comparisons", target, index, comparisons)
            return SearchOutcome(True, index, comparisons, OperationStatus.FOUND)
    yield Step.not_found(target=target)
    logger.debug("Linear search missed %d after %d comparisons", target, comparisons)
    return SearchOutcome(False, None, comparisons)


def _binary(values: List[int], target: int, context: RunContext) -> Generator[Step, None, SearchOutcome]:
    left, right = 0, len(values) - 1
    comparisons = 0
    while left <= right:
        if context.should_stop():
            return SearchOutcome(False, None, comparisons, OperationStatus.ABORTED)
        yield Step.range_update(left, right)
        mid = (left + right) // 2
        comparisons += 1
        yield Step.compare(mid, target=target)
        if values[mid] == target:
            yield Step.found(mid, value=values[mid])
            logger.debug("Binary search found %d at %d after %d comparisons", target, mid, comparisons)
            return SearchOutcome(True, mid, comparisons, OperationStatus.FOUND)
        if values[mid] < target:
            left = mid + 1
        else:
            right = mid - 1
    yield Step.not_found(target=target)
    logger.debug("Binary search missed %d after %d comparisons", target, comparisons)
    return SearchOutcome(False, None, comparisons)
