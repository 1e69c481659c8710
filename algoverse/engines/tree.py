"""Binary search tree insert/delete/search/traversal engines.

Insert and delete are atomic from the renderer's point of view: only the
structural events are emitted, never the descent that located the position.
Search and traversals are read-only and annotate the nodes they visit.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
from typing import TYPE_CHECKING, Generator, Iterator, List, Optional, Tuple, Union

from ..context import RunContext, ensure_context
from ..errors import InvalidInputError, coerce_int
from ..steps import OperationStatus, Step, StepSequence, applied, atomic

if TYPE_CHECKING:  # pragma: no cover - import is for type checking only
    from ..structures.bst import BinarySearchTree

__all__ = [
    "TraversalOrder",
    "TraversalOutcome",
    "TraversalRequest",
    "TreeDelete",
    "TreeInsert",
    "TreeOperation",
    "TreeOutcome",
    "TreeSearch",
    "delete",
    "insert",
    "run",
    "search",
    "traverse",
]

logger = logging.getLogger(__name__)


class TraversalOrder(str, Enum):
    INORDER = "inorder"
    PREORDER = "preorder"
    POSTORDER = "postorder"


@dataclass(frozen=True)
class TreeOutcome:
    status: OperationStatus
    value: int
    node_id: Optional[int] = None


@dataclass(frozen=True)
class TraversalOutcome:
    order: TraversalOrder
    values: Tuple[int, ...]
    status: OperationStatus = OperationStatus.COMPLETED


def _locate(tree: "BinarySearchTree", value: int) -> Tuple[Optional[int], Optional[str]]:
    """Return ``(parent_id, side)`` where *value* would be attached."""

    parent_id: Optional[int] = None
    side: Optional[str] = None
    cursor = tree.root
    while cursor is not None:
        node = tree.node(cursor)
        parent_id = cursor
        if value < node.value:
            side, cursor = "left", node.left
        else:
            side, cursor = "right", node.right
    return parent_id, side


def insert(tree: "BinarySearchTree", value: object, context: Optional[RunContext] = None) -> StepSequence[TreeOutcome]:
    """Insert *value*; duplicates produce no steps and ``DUPLICATE_IGNORED``."""

    number = coerce_int(value, "tree value")
    ctx = ensure_context(context, "tree:insert")
    return StepSequence(_insert(tree.clone(), number, ctx), label="tree:insert")


def _insert(work: "BinarySearchTree", value: int, context: RunContext) -> Generator[Step, None, TreeOutcome]:
    if context.should_stop():
        return TreeOutcome(OperationStatus.ABORTED, value)
    if work.find(value) is not None:
        logger.debug("Ignoring duplicate tree value %d", value)
        return TreeOutcome(OperationStatus.DUPLICATE_IGNORED, value)
    parent_id, side = _locate(work, value)
    node_id = work.next_id()
    yield applied(work, Step.structural_insert(node_id, value=value, parent=parent_id, side=side))
    logger.debug("Inserted %d as node %d", value, node_id)
    return TreeOutcome(OperationStatus.INSERTED, value, node_id)


def delete(tree: "BinarySearchTree", value: object, context: Optional[RunContext] = None) -> StepSequence[TreeOutcome]:
    """Delete *value*; a node with two children takes its successor's value."""

    number = coerce_int(value, "tree value")
    ctx = ensure_context(context, "tree:delete")
    return StepSequence(_delete(tree.clone(), number, ctx), label="tree:delete")


def _delete(work: "BinarySearchTree", value: int, context: RunContext) -> Generator[Step, None, TreeOutcome]:
    if context.should_stop():
        return TreeOutcome(OperationStatus.ABORTED, value)
    node_id = work.find(value)
    if node_id is None:
        yield Step.not_found(value=value)
        return TreeOutcome(OperationStatus.NOT_FOUND, value)
    node = work.node(node_id)
    if node.child_count == 2:
        successor_id = work.minimum(node.right)  # type: ignore[arg-type]
        successor_value = work.node(successor_id).value
        yield from atomic(
            [
                applied(work, Step.set_value(node_id, successor_value, replaced=value)),
                applied(work, Step.structural_delete(successor_id, value=successor_value)),
            ]
        )
    else:
        yield applied(work, Step.structural_delete(node_id, value=value))
    logger.debug("Deleted %d from node %d", value, node_id)
    return TreeOutcome(OperationStatus.DELETED, value, node_id)


def search(tree: "BinarySearchTree", value: object, context: Optional[RunContext] = None) -> StepSequence[TreeOutcome]:
    """Walk from the root towards *value*, marking every visited node."""

    number = coerce_int(value, "tree value")
    ctx = ensure_context(context, "tree:search")
    return StepSequence(_search(tree, number, ctx), label="tree:search")


def _search(tree: "BinarySearchTree", value: int, context: RunContext) -> Generator[Step, None, TreeOutcome]:
    cursor = tree.root
    while cursor is not None:
        if context.should_stop():
            return TreeOutcome(OperationStatus.ABORTED, value)
        node = tree.node(cursor)
        yield Step.mark_current(cursor, value=node.value)
        if node.value == value:
            yield Step.found(cursor, value=value)
            return TreeOutcome(OperationStatus.FOUND, value, cursor)
        cursor = node.left if value < node.value else node.right
    yield Step.not_found(value=value)
    return TreeOutcome(OperationStatus.NOT_FOUND, value)


def traverse(
    tree: "BinarySearchTree",
    order: Union[TraversalOrder, str] = TraversalOrder.INORDER,
    context: Optional[RunContext] = None,
) -> StepSequence[TraversalOutcome]:
    """Emit one ``mark_current`` per node in *order*; the tree is untouched."""

    try:
        chosen = TraversalOrder(order)
    except ValueError as exc:
        raise InvalidInputError(f"Unknown traversal order: {order!r}") from exc
    ctx = ensure_context(context, f"tree:{chosen.value}")
    return StepSequence(_traverse(tree, chosen, ctx), label=f"tree:{chosen.value}")


def _traverse(
    tree: "BinarySearchTree", order: TraversalOrder, context: RunContext
) -> Generator[Step, None, TraversalOutcome]:
    walkers = {
        TraversalOrder.INORDER: tree.inorder_ids,
        TraversalOrder.PREORDER: tree.preorder_ids,
        TraversalOrder.POSTORDER: tree.postorder_ids,
    }
    node_ids: Iterator[int] = iter(walkers[order]())
    visited: List[int] = []
    for node_id in node_ids:
        if context.should_stop():
            return TraversalOutcome(order, tuple(visited), OperationStatus.ABORTED)
        value = tree.node(node_id).value
        visited.append(value)
        yield Step.mark_current(node_id, value=value, order=order.value)
    logger.debug("%s traversal visited %d nodes", order.value, len(visited))
    return TraversalOutcome(order, tuple(visited))


@dataclass(frozen=True)
class TreeInsert:
    value: int


@dataclass(frozen=True)
class TreeDelete:
    value: int


@dataclass(frozen=True)
class TreeSearch:
    value: int


@dataclass(frozen=True)
class TraversalRequest:
    order: TraversalOrder = TraversalOrder.INORDER


TreeOperation = Union[TreeInsert, TreeDelete, TreeSearch, TraversalRequest]


def run(
    tree: "BinarySearchTree",
    operation: TreeOperation,
    context: Optional[RunContext] = None,
) -> StepSequence:
    """Family entry point: dispatch *operation* against *tree*."""

    if isinstance(operation, TreeInsert):
        return insert(tree, operation.value, context)
    if isinstance(operation, TreeDelete):
        return delete(tree, operation.value, context)
    if isinstance(operation, TreeSearch):
        return search(tree, operation.value, context)
    if isinstance(operation, TraversalRequest):
        return traverse(tree, operation.order, context)
    raise TypeError(f"Unsupported tree operation: {operation!r}")
