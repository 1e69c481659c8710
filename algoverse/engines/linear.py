"""Stack push/pop and queue enqueue/dequeue engines."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING, Generator, Optional, Union

from ..context import RunContext, ensure_context
from ..errors import EmptyStructureError, coerce_element
from ..steps import OperationStatus, Step, StepSequence

if TYPE_CHECKING:  # pragma: no cover - import is for type checking only
    from ..structures.linear import Element, Queue, Stack

__all__ = [
    "Dequeue",
    "Enqueue",
    "LinearOperation",
    "LinearOutcome",
    "Pop",
    "Push",
    "dequeue",
    "enqueue",
    "pop",
    "push",
    "run",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LinearOutcome:
    status: OperationStatus
    value: "Element"
    index: int


def _append(label: str, position: int, value: "Element", context: RunContext) -> Generator[Step, None, LinearOutcome]:
    if context.should_stop():
        return LinearOutcome(OperationStatus.ABORTED, value, position)
    yield Step.structural_insert(position, value=value)
    logger.debug("%s %r at index %d", label, value, position)
    return LinearOutcome(OperationStatus.INSERTED, value, position)


def _remove(label: str, position: int, value: "Element", context: RunContext) -> Generator[Step, None, LinearOutcome]:
    if context.should_stop():
        return LinearOutcome(OperationStatus.ABORTED, value, position)
    yield Step.mark_current(position, value=value)
    if context.should_stop():
        return LinearOutcome(OperationStatus.ABORTED, value, position)
    yield Step.structural_delete(position, value=value)
    logger.debug("%s %r from index %d", label, value, position)
    return LinearOutcome(OperationStatus.REMOVED, value, position)


def push(stack: "Stack", value: object, context: Optional[RunContext] = None) -> StepSequence[LinearOutcome]:
    element = coerce_element(value, "stack element")
    ctx = ensure_context(context, "stack:push")
    return StepSequence(_append("Pushed", len(stack), element, ctx), label="stack:push")


def pop(stack: "Stack", context: Optional[RunContext] = None) -> StepSequence[LinearOutcome]:
    if stack.is_empty():
        raise EmptyStructureError("Cannot pop from an empty stack")
    ctx = ensure_context(context, "stack:pop")
    top = len(stack) - 1
    return StepSequence(_remove("Popped", top, stack[top], ctx), label="stack:pop")


def enqueue(queue: "Queue", value: object, context: Optional[RunContext] = None) -> StepSequence[LinearOutcome]:
    element = coerce_element(value, "queue element")
    ctx = ensure_context(context, "queue:enqueue")
    return StepSequence(_append("Enqueued", len(queue), element, ctx), label="queue:enqueue")


def dequeue(queue: "Queue", context: Optional[RunContext] = None) -> StepSequence[LinearOutcome]:
    if queue.is_empty():
        raise EmptyStructureError("Cannot dequeue from an empty queue")
    ctx = ensure_context(context, "queue:dequeue")
    return StepSequence(_remove("Dequeued", 0, queue[0], ctx), label="queue:dequeue")


@dataclass(frozen=True)
class Push:
    value: Union[int, str]


@dataclass(frozen=True)
class Pop:
    pass


@dataclass(frozen=True)
class Enqueue:
    value: Union[int, str]


@dataclass(frozen=True)
class Dequeue:
    pass


LinearOperation = Union[Push, Pop, Enqueue, Dequeue]


def run(
    structure: Union["Stack", "Queue"],
    operation: LinearOperation,
    context: Optional[RunContext] = None,
) -> StepSequence[LinearOutcome]:
    """Family entry point; stack operations need a stack, queue ones a queue."""

    from ..structures.linear import Queue, Stack

    if isinstance(operation, (Push, Pop)) and not isinstance(structure, Stack):
        raise TypeError(f"{type(operation).__name__} requires a Stack")
    if isinstance(operation, (Enqueue, Dequeue)) and not isinstance(structure, Queue):
        raise TypeError(f"{type(operation).__name__} requires a Queue")
    if isinstance(operation, Push):
        return push(structure, operation.value, context)  # type: ignore[arg-type]
    if isinstance(operation, Pop):
        return pop(structure, context)  # type: ignore[arg-type]
    if isinstance(operation, Enqueue):
        return enqueue(structure, operation.value, context)  # type: ignore[arg-type]
    if isinstance(operation, Dequeue):
        return dequeue(structure, context)  # type: ignore[arg-type]
    raise TypeError(f"Unsupported stack/queue operation: {operation!r}")
