"""Array-backed binary heap in max or min mode."""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Optional, Union

import numpy as np

from ..errors import EmptyStructureError, InvalidInputError
from .sequence import SequenceStructure

__all__ = ["BinaryHeap", "HeapMode", "left_child", "parent", "right_child"]


class HeapMode(str, Enum):
    MAX = "max"
    MIN = "min"


def parent(index: int) -> int:
    return (index - 1) // 2


def left_child(index: int) -> int:
    return 2 * index + 1


def right_child(index: int) -> int:
    return 2 * index + 2


class BinaryHeap(SequenceStructure[int]):
    """Complete binary tree stored level by level in a list.

    The heap-order property holds between public operations; the step engines
    in :mod:`algoverse.engines.heap` break it only transiently.
    """

    __slots__ = ("_mode",)

    def __init__(
        self,
        mode: Union[HeapMode, str] = HeapMode.MAX,
        values: Optional[Iterable[object]] = None,
    ) -> None:
        super().__init__()
        self._mode = _coerce_mode(mode)
        for value in values or ():
            self.insert(value)

    @property
    def mode(self) -> HeapMode:
        return self._mode

    @mode.setter
    def mode(self, value: Union[HeapMode, str]) -> None:
        # Switching ordering invalidates the stored layout.
        self._mode = _coerce_mode(value)
        self.clear()

    def outranks(self, a: int, b: int) -> bool:
        """Return ``True`` when value *a* belongs above value *b*."""

        return a > b if self._mode is HeapMode.MAX else a < b

    def peek(self) -> int:
        if not self._items:
            raise EmptyStructureError("Cannot peek into an empty heap")
        return self._items[0]

    def is_valid(self) -> bool:
        """Check the heap-order property for every non-root index."""

        return all(
            not self.outranks(self._items[index], self._items[parent(index)])
            for index in range(1, len(self._items))
        )

    # ------------------------------------------------------------------
    # Instantaneous operations
    # ------------------------------------------------------------------
    def insert(self, value: object) -> None:
        from ..engines import heap as engine
        from ..steps import drain

        drain(self, engine.insert(self, value))

    def delete_root(self) -> int:
        """Remove and return the root; raises on an empty heap."""

        from ..engines import heap as engine
        from ..steps import drain

        outcome = drain(self, engine.delete_root(self))
        return outcome.value

    @classmethod
    def random(
        cls,
        mode: Union[HeapMode, str] = HeapMode.MAX,
        *,
        rng: Optional[np.random.Generator] = None,
        min_count: int = 6,
        max_count: int = 10,
        low: int = 1,
        high: int = 50,
    ) -> "BinaryHeap":
        """Build a heap by inserting 6–10 random values one at a time."""

        generator = rng if rng is not None else np.random.default_rng()
        count = int(generator.integers(min_count, max_count + 1))
        values = [int(value) for value in generator.integers(low, high + 1, size=count)]
        return cls(mode, values)


def _coerce_mode(mode: Union[HeapMode, str]) -> HeapMode:
    try:
        return HeapMode(mode)
    except ValueError as exc:
        raise InvalidInputError(f"Unknown heap mode {mode!r}; expected 'max' or 'min'") from exc

