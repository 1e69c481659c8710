"""List-backed base class shared by arrays, heaps, stacks and queues."""

from __future__ import annotations

from typing import Any, Generic, Iterable, Iterator, List, Optional, TypeVar

from ..steps import Step, StepKind

__all__ = ["SequenceStructure"]

T = TypeVar("T")
S = TypeVar("S", bound="SequenceStructure[Any]")


class SequenceStructure(Generic[T]):
    """Ordered, index-addressable storage that can replay mutating steps."""

    __slots__ = ("_items",)

    def __init__(self, items: Optional[Iterable[T]] = None) -> None:
        self._items: List[T] = list(items) if items is not None else []

    # ------------------------------------------------------------------
    # Container protocol
    # ------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __getitem__(self, index: int) -> T:
        return self._items[index]

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._items == other._items  # type: ignore[attr-defined]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._items!r})"

    def is_empty(self) -> bool:
        return not self._items

    def to_list(self) -> List[T]:
        """Return a shallow copy of the stored items."""

        return list(self._items)

    def clear(self) -> None:
        self._items.clear()

    def clone(self: S) -> S:
        duplicate = object.__new__(type(self))
        for cls in type(self).__mro__:
            for slot in getattr(cls, "__slots__", ()):
                if hasattr(self, slot):
                    object.__setattr__(duplicate, slot, getattr(self, slot))
        duplicate._items = list(self._items)
        return duplicate

    # ------------------------------------------------------------------
    # Step replay
    # ------------------------------------------------------------------
    def apply(self, step: Step) -> None:
        """Replay a mutating *step*; annotation steps are ignored."""

        kind = step.kind
        if kind is StepKind.SWAP:
            i, j = step.indices
            self._items[i], self._items[j] = self._items[j], self._items[i]
        elif kind is StepKind.SET_VALUE:
            self._items[step.index] = step.payload["value"]
        elif kind is StepKind.STRUCTURAL_INSERT:
            index = step.index
            if not 0 <= index <= len(self._items):
                raise IndexError(f"insert position {index} out of range")
            self._items.insert(index, step.payload["value"])
        elif kind is StepKind.STRUCTURAL_DELETE:
            del self._items[step.index]
