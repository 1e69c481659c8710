"""Step-producing engines, one module per algorithm family."""

from . import hashing, heap, linear, searching, sorting, tree

__all__ = ["hashing", "heap", "linear", "searching", "sorting", "tree"]
