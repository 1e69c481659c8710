"""Tagged run requests and the top-level dispatcher.

Each request names one operation of one family and carries its own
parameters.  :func:`run` routes a request to the engine of that family after
checking that the target structure is the kind the family works on.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Union

from .context import RunContext
from .engines import hashing, heap, linear, searching, sorting, tree
from .engines.hashing import HashDelete, HashInsert, HashSearch
from .engines.heap import HeapDeleteRoot, HeapInsert
from .engines.linear import Dequeue, Enqueue, Pop, Push
from .engines.searching import SearchAlgorithm
from .engines.sorting import SortAlgorithm
from .engines.tree import TraversalOrder, TraversalRequest, TreeDelete, TreeInsert, TreeSearch
from .steps import StepSequence
from .structures import ArrayBuffer, BinaryHeap, BinarySearchTree, HashTable, Queue, Stack

__all__ = [
    "Dequeue",
    "Enqueue",
    "HashDelete",
    "HashInsert",
    "HashSearch",
    "HeapDeleteRoot",
    "HeapInsert",
    "Pop",
    "Push",
    "Request",
    "SearchAlgorithm",
    "SearchRequest",
    "SortAlgorithm",
    "SortRequest",
    "TraversalOrder",
    "TraversalRequest",
    "TreeDelete",
    "TreeInsert",
    "TreeSearch",
    "run",
]


@dataclass(frozen=True)
class SortRequest:
    algorithm: SortAlgorithm = SortAlgorithm.BUBBLE


@dataclass(frozen=True)
class SearchRequest:
    target: int
    algorithm: SearchAlgorithm = SearchAlgorithm.LINEAR


Request = Union[
    SortRequest,
    SearchRequest,
    TreeInsert,
    TreeDelete,
    TreeSearch,
    TraversalRequest,
    HeapInsert,
    HeapDeleteRoot,
    Push,
    Pop,
    Enqueue,
    Dequeue,
    HashInsert,
    HashSearch,
    HashDelete,
]

_TREE_REQUESTS = (TreeInsert, TreeDelete, TreeSearch, TraversalRequest)
_HEAP_REQUESTS = (HeapInsert, HeapDeleteRoot)
_LINEAR_REQUESTS = (Push, Pop, Enqueue, Dequeue)
_HASH_REQUESTS = (HashInsert, HashSearch, HashDelete)


def _expect(structure: Any, kind: type, request: Request) -> None:
    if not isinstance(structure, kind):
        raise TypeError(
            f"{type(request).__name__} runs on {kind.__name__}, not {type(structure).__name__}"
        )


def run(structure: Any, request: Request, context: Optional[RunContext] = None) -> StepSequence[Any]:
    """Return the step sequence for *request* against *structure*.

    Raises :class:`TypeError` when the request does not belong to the family
    of *structure* and propagates the engine's own validation errors.
    """

    if isinstance(request, SortRequest):
        _expect(structure, ArrayBuffer, request)
        return sorting.run(structure, request.algorithm, context)
    if isinstance(request, SearchRequest):
        _expect(structure, ArrayBuffer, request)
        return searching.run(structure, request.target, request.algorithm, context)
    if isinstance(request, _TREE_REQUESTS):
        _expect(structure, BinarySearchTree, request)
        return tree.run(structure, request, context)
    if isinstance(request, _HEAP_REQUESTS):
        _expect(structure, BinaryHeap, request)
        return heap.run(structure, request, context)
    if isinstance(request, _LINEAR_REQUESTS):
        _expect(structure, Stack if isinstance(request, (Push, Pop)) else Queue, request)
        return linear.run(structure, request, context)
    if isinstance(request, _HASH_REQUESTS):
        _expect(structure, HashTable, request)
        return hashing.run(structure, request, context)
    raise TypeError(f"Unsupported request: {request!r}")
