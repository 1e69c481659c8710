"""Descriptions and complexity tables shown beside each panel."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

from .errors import InvalidInputError

__all__ = ["AlgorithmInfo", "describe", "entries", "families"]


@dataclass(frozen=True)
class AlgorithmInfo:
    family: str
    name: str
    description: str
    complexity: Tuple[Tuple[str, str], ...]

    def complexity_rows(self) -> List[Dict[str, str]]:
        return [{"case": case, "cost": cost} for case, cost in self.complexity]


_ENTRIES: Tuple[AlgorithmInfo, ...] = (
    AlgorithmInfo(
        "sorting",
        "bubble",
        "Repeatedly walks the list, comparing adjacent elements and swapping them when they are out of order.",
        (("Best", "O(n²)"), ("Average", "O(n²)"), ("Worst", "O(n²)"), ("Space", "O(1)")),
    ),
    AlgorithmInfo(
        "sorting",
        "selection",
        "Finds the minimum of the unsorted part and moves it to the front, then repeats on the remainder.",
        (("Best", "O(n²)"), ("Average", "O(n²)"), ("Worst", "O(n²)"), ("Space", "O(1)")),
    ),
    AlgorithmInfo(
        "sorting",
        "insertion",
        "Grows a sorted prefix one element at a time by shifting larger elements right and inserting the key.",
        (("Best", "O(n)"), ("Average", "O(n²)"), ("Worst", "O(n²)"), ("Space", "O(1)")),
    ),
    AlgorithmInfo(
        "sorting",
        "merge",
        "Splits the array in halves, sorts each half and merges the two sorted halves.",
        (("Best", "O(n log n)"), ("Average", "O(n log n)"), ("Worst", "O(n log n)"), ("Space", "O(n)")),
    ),
    AlgorithmInfo(
        "sorting",
        "quick",
        "Partitions the range around its last element and sorts both partitions.",
        (("Best", "O(n log n)"), ("Average", "O(n log n)"), ("Worst", "O(n²)"), ("Space", "O(log n)")),
    ),
    AlgorithmInfo(
        "sorting",
        "heap",
        "Builds a max-heap, then repeatedly moves the maximum behind the shrinking heap.",
        (("Best", "O(n log n)"), ("Average", "O(n log n)"), ("Worst", "O(n log n)"), ("Space", "O(1)")),
    ),
    AlgorithmInfo(
        "searching",
        "linear",
        "Checks each element in turn until the target is found or the end is reached.",
        (("Best", "O(1)"), ("Average", "O(n)"), ("Worst", "O(n)"), ("Space", "O(1)")),
    ),
    AlgorithmInfo(
        "searching",
        "binary",
        "Halves a sorted range each step by comparing the target with the middle element.",
        (("Best", "O(1)"), ("Average", "O(log n)"), ("Worst", "O(log n)"), ("Space", "O(1)")),
    ),
    AlgorithmInfo(
        "tree",
        "bst",
        "A binary search tree keeps smaller values in the left subtree and larger values in the right.",
        (
            ("Search", "O(log n) average, O(n) worst"),
            ("Insert", "O(log n) average, O(n) worst"),
            ("Delete", "O(log n) average, O(n) worst"),
            ("Space", "O(n)"),
        ),
    ),
    AlgorithmInfo(
        "heap",
        "max",
        "A complete binary tree where every parent is greater than or equal to its children.",
        (("Insert", "O(log n)"), ("Delete Root", "O(log n)"), ("Peek Root", "O(1)"), ("Build Heap", "O(n)"), ("Space", "O(n)")),
    ),
    AlgorithmInfo(
        "heap",
        "min",
        "A complete binary tree where every parent is less than or equal to its children.",
        (("Insert", "O(log n)"), ("Delete Root", "O(log n)"), ("Peek Root", "O(1)"), ("Build Heap", "O(n)"), ("Space", "O(n)")),
    ),
    AlgorithmInfo(
        "linear",
        "stack",
        "Last in, first out: elements are pushed onto and popped from the top.",
        (("Push", "O(1)"), ("Pop", "O(1)"), ("Peek", "O(1)"), ("IsEmpty", "O(1)"), ("Size", "O(1)"), ("Space", "O(n)")),
    ),
    AlgorithmInfo(
        "linear",
        "queue",
        "First in, first out: elements join at the rear and leave from the front.",
        (
            ("Enqueue", "O(1)"),
            ("Dequeue", "O(1)"),
            ("Front", "O(1)"),
            ("Rear", "O(1)"),
            ("IsEmpty", "O(1)"),
            ("Size", "O(1)"),
            ("Space", "O(n)"),
        ),
    ),
    AlgorithmInfo(
        "hashing",
        "linear",
        "Maps keys to slots with a hash function; a collision moves on to the next free slot.",
        (("Insert", "O(1) average, O(n) worst"), ("Search", "O(1) average, O(n) worst"), ("Delete", "O(1) average, O(n) worst"), ("Space", "O(n)")),
    ),
    AlgorithmInfo(
        "hashing",
        "chaining",
        "Maps keys to slots with a hash function; colliding keys share a list in their slot.",
        (("Insert", "O(1) average, O(n) worst"), ("Search", "O(1) average, O(n) worst"), ("Delete", "O(1) average, O(n) worst"), ("Space", "O(n)")),
    ),
)

_INDEX: Dict[Tuple[str, str], AlgorithmInfo] = {(info.family, info.name): info for info in _ENTRIES}


def families() -> List[str]:
    return sorted({info.family for info in _ENTRIES})


def entries(family: str | None = None) -> List[AlgorithmInfo]:
    return [info for info in _ENTRIES if family is None or info.family == family]


def describe(family: str, name: str) -> AlgorithmInfo:
    try:
        return _INDEX[(family, getattr(name, "value", name))]
    except KeyError as exc:
        raise InvalidInputError(f"No catalogue entry for {family}/{name}") from exc
