"""Step vocabulary and lazy step sequences.

Every engine in :mod:`algoverse.engines` is a generator that yields
:class:`Step` records.  A step is the contract between the core and whatever
renders it:

* ``COMPARE``, ``MARK_SORTED``, ``MARK_CURRENT``, ``RANGE_UPDATE``, ``PROBE``,
  ``FOUND`` and ``NOT_FOUND`` are annotations.  Applying them to a structure
  is a no-op.
* ``SWAP``, ``SET_VALUE``, ``STRUCTURAL_INSERT`` and ``STRUCTURAL_DELETE``
  describe a mutation with enough payload to replay it through
  ``structure.apply(step)``.

:class:`StepSequence` wraps an engine generator so the generator's return
value (the operation outcome) is captured once the sequence is exhausted.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import (
    Any,
    Dict,
    Generator,
    Generic,
    Iterable,
    Iterator,
    Mapping,
    Optional,
    Protocol,
    Tuple,
    TypeVar,
)

__all__ = [
    "OperationStatus",
    "Step",
    "StepKind",
    "StepSequence",
    "SupportsApply",
    "applied",
    "atomic",
    "drain",
]

O = TypeVar("O")


class StepKind(str, Enum):
    """Closed set of step kinds engines are allowed to emit."""

    COMPARE = "compare"
    SWAP = "swap"
    SET_VALUE = "set_value"
    MARK_SORTED = "mark_sorted"
    MARK_CURRENT = "mark_current"
    RANGE_UPDATE = "range_update"
    PROBE = "probe"
    FOUND = "found"
    NOT_FOUND = "not_found"
    STRUCTURAL_INSERT = "structural_insert"
    STRUCTURAL_DELETE = "structural_delete"

    @property
    def mutates(self) -> bool:
        """``True`` for kinds that change the structure they are applied to."""

        return self in _MUTATING_KINDS


_MUTATING_KINDS = frozenset(
    {
        StepKind.SWAP,
        StepKind.SET_VALUE,
        StepKind.STRUCTURAL_INSERT,
        StepKind.STRUCTURAL_DELETE,
    }
)


class OperationStatus(str, Enum):
    """Terminal status reported by a single engine run."""

    COMPLETED = "completed"
    INSERTED = "inserted"
    UPDATED = "updated"
    DELETED = "deleted"
    REMOVED = "removed"
    FOUND = "found"
    NOT_FOUND = "not_found"
    DUPLICATE_IGNORED = "duplicate_ignored"
    FULL = "full"
    ABORTED = "aborted"


@dataclass(frozen=True, slots=True)
class Step:
    """One observable unit of algorithm progress.

    ``indices`` holds array positions, node ids or slot numbers depending on
    the structure.  ``payload`` carries values a renderer (or ``apply``) needs
    in addition to the indices.  ``continues`` marks a step whose successor
    belongs to the same indivisible unit: playback must not stop between them.
    """

    kind: StepKind
    indices: Tuple[int, ...] = ()
    payload: Mapping[str, Any] = field(default_factory=dict)
    continues: bool = field(default=False, compare=False)

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------
    @classmethod
    def compare(cls, *indices: int, **payload: Any) -> "Step":
        return cls(StepKind.COMPARE, tuple(indices), payload)

    @classmethod
    def swap(cls, i: int, j: int) -> "Step":
        return cls(StepKind.SWAP, (i, j))

    @classmethod
    def set_value(cls, index: int, value: Any, **payload: Any) -> "Step":
        return cls(StepKind.SET_VALUE, (index,), {"value": value, **payload})

    @classmethod
    def mark_sorted(cls, *indices: int) -> "Step":
        return cls(StepKind.MARK_SORTED, tuple(indices))

    @classmethod
    def mark_current(cls, index: int, **payload: Any) -> "Step":
        return cls(StepKind.MARK_CURRENT, (index,), payload)

    @classmethod
    def range_update(cls, lo: int, hi: int) -> "Step":
        return cls(StepKind.RANGE_UPDATE, (lo, hi))

    @classmethod
    def probe(cls, index: int, key: Any, **payload: Any) -> "Step":
        return cls(StepKind.PROBE, (index,), {"key": key, **payload})

    @classmethod
    def found(cls, index: int, **payload: Any) -> "Step":
        return cls(StepKind.FOUND, (index,), payload)

    @classmethod
    def not_found(cls, **payload: Any) -> "Step":
        return cls(StepKind.NOT_FOUND, (), payload)

    @classmethod
    def structural_insert(cls, ref: int, **payload: Any) -> "Step":
        return cls(StepKind.STRUCTURAL_INSERT, (ref,), payload)

    @classmethod
    def structural_delete(cls, ref: int, **payload: Any) -> "Step":
        return cls(StepKind.STRUCTURAL_DELETE, (ref,), payload)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def index(self) -> int:
        """First index of the step; raises ``ValueError`` when there is none."""

        if not self.indices:
            raise ValueError(f"{self.kind.value} step carries no index")
        return self.indices[0]

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-friendly representation of the step."""

        record: Dict[str, Any] = {
            "kind": self.kind.value,
            "indices": list(self.indices),
            "payload": dict(self.payload),
        }
        if self.continues:
            record["continues"] = True
        return record

    def describe(self) -> str:
        """Render the step as a compact ``kind(args)`` string."""

        args = ", ".join(str(index) for index in self.indices)
        if self.payload:
            extras = ", ".join(f"{key}={value!r}" for key, value in self.payload.items())
            args = f"{args}; {extras}" if args else extras
        return f"{self.kind.value}({args})"


class StepSequence(Generic[O]):
    """Single-use, lazily evaluated stream of steps with a captured outcome.

    Iterating pulls steps from the wrapped engine generator one at a time.
    When the generator finishes, its return value becomes :attr:`outcome`.
    Abandoning iteration early (cancellation) leaves ``outcome`` as ``None``.
    """

    __slots__ = ("label", "_steps", "_outcome", "_started", "_exhausted")

    def __init__(self, steps: Generator[Step, None, O], *, label: str) -> None:
        self.label = label
        self._steps = steps
        self._outcome: Optional[O] = None
        self._started = False
        self._exhausted = False

    def __iter__(self) -> Iterator[Step]:
        if self._started:
            raise RuntimeError(f"step sequence {self.label!r} can only be consumed once")
        self._started = True
        return self._drive()

    def _drive(self) -> Iterator[Step]:
        self._outcome = yield from self._steps
        self._exhausted = True

    @property
    def outcome(self) -> Optional[O]:
        """Outcome returned by the engine, or ``None`` until exhausted."""

        return self._outcome

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    def close(self) -> None:
        """Stop the underlying engine without consuming further steps."""

        self._steps.close()

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        state = "exhausted" if self._exhausted else "pending"
        return f"StepSequence({self.label!r}, {state})"


class SupportsApply(Protocol):
    """Anything that can replay mutating steps."""

    def apply(self, step: Step) -> None:
        ...


def drain(structure: SupportsApply, sequence: StepSequence[O]) -> O:
    """Apply every step of *sequence* to *structure* immediately.

    This is the instantaneous (non-animated) path used by the mutation
    primitives on each structure.
    """

    for step in sequence:
        structure.apply(step)
    return sequence.outcome  # type: ignore[return-value]


def applied(structure: SupportsApply, step: Step) -> Step:
    """Apply *step* to an engine's working copy and hand it back for yielding."""

    structure.apply(step)
    return step


def atomic(steps: Iterable[Step]) -> Iterator[Step]:
    """Chain *steps* into one unit that cancellation cannot split.

    Every step but the last is flagged ``continues``.  Engines build the unit
    eagerly on their working copy, so no cancellation check runs inside it.
    """

    unit = list(steps)
    for step in unit[:-1]:
        yield replace(step, continues=True)
    yield from unit[-1:]
