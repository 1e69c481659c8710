"""Arena-backed binary search tree.

Nodes live in a dictionary keyed by integer ids instead of holding direct
references to each other.  Every node records its parent and child ids, which
keeps ownership simple (the tree owns the arena) and gives deterministic
snapshots for tests and renderers.

The APIs provide:

* ``BSTNode`` – a ``@dataclass`` holding a value and parent/child ids.
* ``BinarySearchTree`` – insert/delete/search primitives plus traversal
  helpers; every mutation goes through step replay via :meth:`apply`.
* ``render_tree`` – a level-order ASCII rendering that marks missing children
  with centred dots.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, replace
from typing import Deque, Dict, Iterable, Iterator, List, Optional, Tuple

import numpy as np

from ..errors import coerce_int
from ..steps import Step, StepKind

__all__ = [
    "BSTNode",
    "BinarySearchTree",
    "level_order_values",
    "render_tree",
]


@dataclass(slots=True)
class BSTNode:
    """Node record stored in the tree's arena."""

    node_id: int
    value: int
    parent: Optional[int] = None
    left: Optional[int] = None
    right: Optional[int] = None

    def __post_init__(self) -> None:
        if not isinstance(self.value, int) or isinstance(self.value, bool):
            raise TypeError("BSTNode value must be an integer")

    @property
    def child_count(self) -> int:
        return (self.left is not None) + (self.right is not None)


class BinarySearchTree:
    """Binary search tree without duplicates, addressed by node id."""

    __slots__ = ("_nodes", "_root", "_next_id")

    def __init__(self, values: Optional[Iterable[object]] = None) -> None:
        self._nodes: Dict[int, BSTNode] = {}
        self._root: Optional[int] = None
        self._next_id = 0
        for value in values or ():
            self.insert(value)

    # ------------------------------------------------------------------
    # Arena access
    # ------------------------------------------------------------------
    @property
    def root(self) -> Optional[int]:
        return self._root

    def node(self, node_id: int) -> BSTNode:
        try:
            return self._nodes[node_id]
        except KeyError as exc:
            raise KeyError(f"Unknown node id: {node_id}") from exc

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, value: object) -> bool:
        return isinstance(value, int) and self.find(value) is not None

    def is_empty(self) -> bool:
        return self._root is None

    def next_id(self) -> int:
        """Return the id the next created node will receive."""

        return self._next_id

    def find(self, value: int) -> Optional[int]:
        """Return the id of the node holding *value*, or ``None``."""

        cursor = self._root
        while cursor is not None:
            node = self._nodes[cursor]
            if value == node.value:
                return cursor
            cursor = node.left if value < node.value else node.right
        return None

    def minimum(self, node_id: int) -> int:
        """Return the id of the smallest node in the subtree at *node_id*."""

        node = self._nodes[node_id]
        while node.left is not None:
            node = self._nodes[node.left]
        return node.node_id

    def height(self) -> int:
        """Number of nodes on the longest root-to-leaf path."""

        if self._root is None:
            return 0
        best = 0
        stack = [(self._root, 1)]
        while stack:
            node_id, depth = stack.pop()
            best = max(best, depth)
            node = self._nodes[node_id]
            for child in (node.left, node.right):
                if child is not None:
                    stack.append((child, depth + 1))
        return best

    def clear(self) -> None:
        self._nodes.clear()
        self._root = None
        self._next_id = 0

    def clone(self) -> "BinarySearchTree":
        duplicate = BinarySearchTree()
        duplicate._nodes = {key: replace(node) for key, node in self._nodes.items()}
        duplicate._root = self._root
        duplicate._next_id = self._next_id
        return duplicate

    def snapshot(self) -> Dict[str, object]:
        """Return a deterministic, serialisable view of the arena."""

        return {
            "root": self._root,
            "nodes": [
                {
                    "id": node.node_id,
                    "value": node.value,
                    "parent": node.parent,
                    "left": node.left,
                    "right": node.right,
                }
                for _, node in sorted(self._nodes.items())
            ],
        }

    # ------------------------------------------------------------------
    # Traversals (non-destructive, iterative)
    # ------------------------------------------------------------------
    def inorder_ids(self) -> Iterator[int]:
        stack: List[int] = []
        cursor = self._root
        while stack or cursor is not None:
            while cursor is not None:
                stack.append(cursor)
                cursor = self._nodes[cursor].left
            node_id = stack.pop()
            yield node_id
            cursor = self._nodes[node_id].right

    def preorder_ids(self) -> Iterator[int]:
        stack = [self._root] if self._root is not None else []
        while stack:
            node_id = stack.pop()
            yield node_id
            node = self._nodes[node_id]
            if node.right is not None:
                stack.append(node.right)
            if node.left is not None:
                stack.append(node.left)

    def postorder_ids(self) -> Iterator[int]:
        # Reverse of a root-right-left walk.
        order: List[int] = []
        stack = [self._root] if self._root is not None else []
        while stack:
            node_id = stack.pop()
            order.append(node_id)
            node = self._nodes[node_id]
            if node.left is not None:
                stack.append(node.left)
            if node.right is not None:
                stack.append(node.right)
        return reversed(order)

    def values(self) -> List[int]:
        """Inorder values; strictly ascending while the invariant holds."""

        return [self._nodes[node_id].value for node_id in self.inorder_ids()]

    # ------------------------------------------------------------------
    # Instantaneous operations
    # ------------------------------------------------------------------
    def insert(self, value: object) -> Optional[int]:
        """Insert *value*; returns the new node id or ``None`` for duplicates."""

        from ..engines import tree as engine
        from ..steps import OperationStatus, drain

        outcome = drain(self, engine.insert(self, value))
        return outcome.node_id if outcome.status is OperationStatus.INSERTED else None

    def delete(self, value: object) -> bool:
        """Delete *value*; returns ``False`` when it was not present."""

        from ..engines import tree as engine
        from ..steps import OperationStatus, drain

        return drain(self, engine.delete(self, value)).status is OperationStatus.DELETED

    def search(self, value: object) -> Optional[int]:
        """Return the id of the node holding *value*, or ``None``."""

        from ..engines import tree as engine
        from ..steps import drain

        return drain(self, engine.search(self, value)).node_id

    @classmethod
    def random(
        cls,
        rng: Optional[np.random.Generator] = None,
        *,
        min_count: int = 7,
        max_count: int = 12,
        low: int = 1,
        high: int = 100,
    ) -> "BinarySearchTree":
        """Build a tree from 7–12 unique random values in ``[low, high]``."""

        generator = rng if rng is not None else np.random.default_rng()
        count = int(generator.integers(min_count, max_count + 1))
        values = generator.choice(np.arange(low, high + 1), size=count, replace=False)
        return cls(int(value) for value in values)

    # ------------------------------------------------------------------
    # Step replay
    # ------------------------------------------------------------------
    def apply(self, step: Step) -> None:
        kind = step.kind
        if kind is StepKind.SET_VALUE:
            self._nodes[step.index].value = coerce_int(step.payload["value"])
        elif kind is StepKind.STRUCTURAL_INSERT:
            self._attach(step.index, step.payload["value"], step.payload.get("parent"), step.payload.get("side"))
        elif kind is StepKind.STRUCTURAL_DELETE:
            self._detach(step.index)
        elif kind is StepKind.SWAP:
            raise ValueError("BinarySearchTree does not support swap steps")

    def _attach(self, node_id: int, value: int, parent_id: Optional[int], side: Optional[str]) -> None:
        if node_id in self._nodes:
            raise ValueError(f"Node id {node_id} is already in use")
        node = BSTNode(node_id=node_id, value=value, parent=parent_id)
        if parent_id is None:
            if self._root is not None:
                raise ValueError("Tree already has a root")
            self._root = node_id
        else:
            parent_node = self._nodes[parent_id]
            if side == "left":
                parent_node.left = node_id
            elif side == "right":
                parent_node.right = node_id
            else:
                raise ValueError(f"Invalid child side {side!r}")
        self._nodes[node_id] = node
        self._next_id = max(self._next_id, node_id + 1)

    def _detach(self, node_id: int) -> None:
        node = self._nodes[node_id]
        if node.child_count == 2:
            raise ValueError("Only nodes with at most one child can be detached")
        replacement = node.left if node.left is not None else node.right
        if replacement is not None:
            self._nodes[replacement].parent = node.parent
        if node.parent is None:
            self._root = replacement
        else:
            parent_node = self._nodes[node.parent]
            if parent_node.left == node_id:
                parent_node.left = replacement
            else:
                parent_node.right = replacement
        del self._nodes[node_id]


def render_tree(tree: BinarySearchTree) -> str:
    """One text row per depth, absent children shown as ``·``.

    Rows stop at the deepest depth that still holds a node id.
    """

    if tree.root is None:
        return "<empty>"

    rows: List[str] = []
    depth: List[Optional[int]] = [tree.root]
    while any(node_id is not None for node_id in depth):
        rows.append(" ".join(_label(tree, node_id) for node_id in depth))
        depth = [child for node_id in depth for child in _child_ids(tree, node_id)]
    return "\n".join(rows)


def _label(tree: BinarySearchTree, node_id: Optional[int]) -> str:
    return "·" if node_id is None else str(tree.node(node_id).value)


def _child_ids(tree: BinarySearchTree, node_id: Optional[int]) -> Tuple[Optional[int], Optional[int]]:
    if node_id is None:
        return None, None
    node = tree.node(node_id)
    return node.left, node.right


def level_order_values(tree: BinarySearchTree) -> List[Optional[int]]:
    """Return the level-order values including ``None`` sentinels."""

    if tree.root is None:
        return []
    result: List[Optional[int]] = []
    queue: Deque[Optional[int]] = deque([tree.root])
    while queue:
        node_id = queue.popleft()
        if node_id is None:
            result.append(None)
            continue
        node = tree.node(node_id)
        result.append(node.value)
        queue.append(node.left)
        queue.append(node.right)
    while result and result[-1] is None:
        result.pop()
    return result
