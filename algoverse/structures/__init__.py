"""Inspectable data models animated by the step engines."""

from .array_buffer import ArrayBuffer
from .bst import BSTNode, BinarySearchTree, level_order_values, render_tree
from .hash_table import (
    CollisionStrategy,
    Entry,
    HashFunction,
    HashTable,
    HashTableStats,
)
from .heap import BinaryHeap, HeapMode, left_child, parent, right_child
from .linear import Element, Queue, Stack, random_elements
from .sequence import SequenceStructure

__all__ = [
    "ArrayBuffer",
    "BSTNode",
    "BinaryHeap",
    "BinarySearchTree",
    "CollisionStrategy",
    "Element",
    "Entry",
    "HashFunction",
    "HashTable",
    "HashTableStats",
    "HeapMode",
    "Queue",
    "SequenceStructure",
    "Stack",
    "left_child",
    "level_order_values",
    "parent",
    "random_elements",
    "render_tree",
    "right_child",
]
