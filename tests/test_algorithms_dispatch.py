from __future__ import annotations

import pytest

from algoverse import algorithms
from algoverse.steps import OperationStatus, drain
from algoverse.structures import ArrayBuffer, BinaryHeap, BinarySearchTree, HashTable, Queue, Stack


def test_sort_and_search_requests() -> None:
    buffer = ArrayBuffer([4, 1, 3])
    outcome = drain(buffer, algorithms.run(buffer, algorithms.SortRequest("merge")))
    assert outcome.algorithm is algorithms.SortAlgorithm.MERGE
    assert buffer.to_list() == [1, 3, 4]
    found = drain(buffer, algorithms.run(buffer, algorithms.SearchRequest(3, "binary")))
    assert found.index == 1


def test_family_requests_reach_their_engines() -> None:
    tree = BinarySearchTree()
    for value in (2, 1, 3):
        drain(tree, algorithms.run(tree, algorithms.TreeInsert(value)))
    walk = drain(tree, algorithms.run(tree, algorithms.TraversalRequest("postorder")))
    assert walk.values == (1, 3, 2)

    heap = BinaryHeap()
    drain(heap, algorithms.run(heap, algorithms.HeapInsert(6)))
    assert heap.peek() == 6

    stack = Stack()
    drain(stack, algorithms.run(stack, algorithms.Push("A")))
    assert drain(stack, algorithms.run(stack, algorithms.Pop())).value == "A"

    queue = Queue([1])
    assert drain(queue, algorithms.run(queue, algorithms.Dequeue())).value == 1

    table = HashTable()
    drain(table, algorithms.run(table, algorithms.HashInsert(10)))
    outcome = drain(table, algorithms.run(table, algorithms.HashSearch(10)))
    assert outcome.status is OperationStatus.FOUND


@pytest.mark.parametrize(
    "structure, request_",
    [
        (Stack(), algorithms.SortRequest()),
        (ArrayBuffer([1]), algorithms.TreeSearch(1)),
        (Queue(), algorithms.Push(1)),
        (Stack([1]), algorithms.Dequeue()),
        (BinaryHeap(), algorithms.HashDelete(1)),
    ],
)
def test_mismatched_structure_raises_type_error(structure: object, request_: object) -> None:
    with pytest.raises(TypeError):
        algorithms.run(structure, request_)  # type: ignore[arg-type]


def test_unknown_request_raises_type_error() -> None:
    with pytest.raises(TypeError, match="Unsupported request"):
        algorithms.run(ArrayBuffer([1]), "sort")  # type: ignore[arg-type]
