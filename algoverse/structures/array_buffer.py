"""Fixed-length integer buffer used by the sorting and searching panels."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Optional

import numpy as np

from ..errors import coerce_int
from ..steps import Step, StepKind
from .sequence import SequenceStructure

if TYPE_CHECKING:  # pragma: no cover - import is for type checking only
    from ..engines.sorting import SortOutcome

__all__ = ["ArrayBuffer"]


class ArrayBuffer(SequenceStructure[int]):
    """Mutable sequence of integers whose length never changes during a run."""

    __slots__ = ()

    def __init__(self, values: Optional[Iterable[object]] = None) -> None:
        super().__init__(
            coerce_int(value, "array value") for value in (values or ())
        )

    @classmethod
    def random(
        cls,
        size: int,
        *,
        low: int = 10,
        high: int = 309,
        rng: Optional[np.random.Generator] = None,
    ) -> "ArrayBuffer":
        """Generate *size* values drawn uniformly from ``[low, high]``."""

        if size < 0:
            raise ValueError("size must be non-negative")
        if high < low:
            raise ValueError("high must be greater than or equal to low")
        generator = rng if rng is not None else np.random.default_rng()
        return cls(int(value) for value in generator.integers(low, high + 1, size=size))

    @classmethod
    def random_sorted(
        cls,
        size: int,
        *,
        step: int = 5,
        jitter: int = 3,
        rng: Optional[np.random.Generator] = None,
    ) -> "ArrayBuffer":
        """Generate an ascending buffer suitable for binary search.

        Element ``i`` is ``(i + 1) * step`` plus a jitter in ``[0, jitter)``.
        With ``jitter <= step`` the result is strictly increasing.
        """

        if size < 0:
            raise ValueError("size must be non-negative")
        generator = rng if rng is not None else np.random.default_rng()
        offsets = generator.integers(0, max(jitter, 1), size=size)
        return cls((index + 1) * step + int(offset) for index, offset in enumerate(offsets))

    def is_sorted(self) -> bool:
        """Return ``True`` when the buffer is in non-decreasing order."""

        return all(a <= b for a, b in zip(self._items, self._items[1:]))

    def apply(self, step: Step) -> None:
        if step.kind in (StepKind.STRUCTURAL_INSERT, StepKind.STRUCTURAL_DELETE):
            raise ValueError("ArrayBuffer length is fixed; structural steps are not allowed")
        super().apply(step)

    def sort(self, algorithm: str = "quick") -> "SortOutcome":
        """Sort in place without animation and return the run's counters."""

        from ..engines import sorting as engine
        from ..steps import drain

        return drain(self, engine.run(self, algorithm))

    def search(self, target: object, algorithm: str = "linear") -> Optional[int]:
        """Return the index of *target*, or ``None`` when it is absent."""

        from ..engines import searching as engine
        from ..steps import drain

        return drain(self, engine.run(self, target, algorithm)).index
