"""Fixed-size hash table with linear probing or separate chaining."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import math
from typing import Any, Dict, List, Optional, Union

from ..errors import InvalidInputError, StructureFullError, coerce_int
from ..steps import Step, StepKind

__all__ = [
    "CollisionStrategy",
    "Entry",
    "HashFunction",
    "HashTable",
    "HashTableStats",
    "GOLDEN_RATIO_CONJUGATE",
]

GOLDEN_RATIO_CONJUGATE = (math.sqrt(5) - 1) / 2


class HashFunction(str, Enum):
    DIVISION = "division"
    MULTIPLICATION = "multiplication"

    def index(self, key: int, table_size: int) -> int:
        """Map *key* into ``[0, table_size)``."""

        if self is HashFunction.DIVISION:
            return key % table_size
        fraction = (key * GOLDEN_RATIO_CONJUGATE) % 1.0
        # Float rounding can push the product to exactly table_size.
        return min(int(math.floor(table_size * fraction)), table_size - 1)


class CollisionStrategy(str, Enum):
    LINEAR_PROBING = "linear"
    CHAINING = "chaining"


@dataclass(frozen=True, slots=True)
class Entry:
    key: int
    value: Any


@dataclass(frozen=True)
class HashTableStats:
    """Occupancy metrics shown next to the table."""

    total_items: int
    used_slots: int
    table_size: int
    max_chain_length: int

    @property
    def load_factor(self) -> float:
        return self.total_items / self.table_size

    @property
    def utilization(self) -> float:
        return self.used_slots / self.table_size

    def to_dict(self) -> Dict[str, object]:
        return {
            "total_items": self.total_items,
            "used_slots": self.used_slots,
            "table_size": self.table_size,
            "load_factor": round(self.load_factor, 2),
            "utilization": round(self.utilization * 100, 1),
            "max_chain_length": self.max_chain_length,
        }


Slot = Union[Optional[Entry], List[Entry]]


class HashTable:
    """Array of slots holding one entry (probing) or a chain (chaining)."""

    __slots__ = ("_size", "_strategy", "_hash_function", "_slots")

    def __init__(
        self,
        table_size: int = 7,
        strategy: Union[CollisionStrategy, str] = CollisionStrategy.LINEAR_PROBING,
        hash_function: Union[HashFunction, str] = HashFunction.DIVISION,
    ) -> None:
        self._size = _validate_size(table_size)
        self._strategy = _coerce_enum(CollisionStrategy, strategy, "collision strategy")
        self._hash_function = _coerce_enum(HashFunction, hash_function, "hash function")
        self._slots: List[Any] = self._empty_slots()

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------
    @property
    def table_size(self) -> int:
        return self._size

    @property
    def strategy(self) -> CollisionStrategy:
        return self._strategy

    @property
    def hash_function(self) -> HashFunction:
        return self._hash_function

    @property
    def chaining(self) -> bool:
        return self._strategy is CollisionStrategy.CHAINING

    def reconfigure(
        self,
        *,
        table_size: Optional[int] = None,
        strategy: Union[CollisionStrategy, str, None] = None,
        hash_function: Union[HashFunction, str, None] = None,
    ) -> None:
        """Change any setting; the table is rebuilt empty."""

        if table_size is not None:
            self._size = _validate_size(table_size)
        if strategy is not None:
            self._strategy = _coerce_enum(CollisionStrategy, strategy, "collision strategy")
        if hash_function is not None:
            self._hash_function = _coerce_enum(HashFunction, hash_function, "hash function")
        self.clear()

    def _empty_slots(self) -> List[Any]:
        if self.chaining:
            return [[] for _ in range(self._size)]
        return [None] * self._size

    def clear(self) -> None:
        self._slots = self._empty_slots()

    def clone(self) -> "HashTable":
        duplicate = HashTable(self._size, self._strategy, self._hash_function)
        duplicate._slots = [list(slot) if isinstance(slot, list) else slot for slot in self._slots]
        return duplicate

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------
    def hash(self, key: int) -> int:
        return self._hash_function.index(key, self._size)

    def slot(self, index: int) -> Slot:
        return self._slots[index]

    def entries(self) -> List[Entry]:
        """All stored entries in slot order (chain order within a slot)."""

        collected: List[Entry] = []
        for slot in self._slots:
            if isinstance(slot, list):
                collected.extend(slot)
            elif slot is not None:
                collected.append(slot)
        return collected

    def __len__(self) -> int:
        return len(self.entries())

    def stats(self) -> HashTableStats:
        if self.chaining:
            lengths = [len(chain) for chain in self._slots]
            return HashTableStats(
                total_items=sum(lengths),
                used_slots=sum(1 for length in lengths if length),
                table_size=self._size,
                max_chain_length=max(lengths, default=0),
            )
        used = sum(1 for slot in self._slots if slot is not None)
        return HashTableStats(
            total_items=used,
            used_slots=used,
            table_size=self._size,
            max_chain_length=1 if used else 0,
        )

    def snapshot(self) -> List[Any]:
        """Serialisable view: ``None``/``[key, value]`` or lists of pairs."""

        view: List[Any] = []
        for slot in self._slots:
            if isinstance(slot, list):
                view.append([[entry.key, entry.value] for entry in slot])
            elif slot is None:
                view.append(None)
            else:
                view.append([slot.key, slot.value])
        return view

    # ------------------------------------------------------------------
    # Instantaneous operations
    # ------------------------------------------------------------------
    def insert(self, key: object, value: Any = None) -> int:
        """Insert or update *key*; returns the slot index used."""

        from ..engines import hashing as engine
        from ..steps import OperationStatus, drain

        outcome = drain(self, engine.insert(self, key, value))
        if outcome.status is OperationStatus.FULL:
            raise StructureFullError(f"Hash table is full; cannot insert key {outcome.key}")
        return outcome.index

    def search(self, key: object) -> Optional[Any]:
        """Return the stored value for *key*, or ``None`` when absent."""

        from ..engines import hashing as engine
        from ..steps import drain

        return drain(self, engine.search(self, key)).value

    def delete(self, key: object) -> bool:
        from ..engines import hashing as engine
        from ..steps import OperationStatus, drain

        return drain(self, engine.delete(self, key)).status is OperationStatus.DELETED

    # ------------------------------------------------------------------
    # Step replay
    # ------------------------------------------------------------------
    def apply(self, step: Step) -> None:
        kind = step.kind
        if kind is StepKind.STRUCTURAL_INSERT:
            entry = Entry(step.payload["key"], step.payload["value"])
            index = step.index
            if self.chaining:
                chain: List[Entry] = self._slots[index]
                for position, existing in enumerate(chain):
                    if existing.key == entry.key:
                        chain[position] = entry
                        break
                else:
                    chain.append(entry)
            else:
                current = self._slots[index]
                if current is not None and current.key != entry.key:
                    raise ValueError(f"Slot {index} is occupied by key {current.key}")
                self._slots[index] = entry
        elif kind is StepKind.STRUCTURAL_DELETE:
            key = step.payload["key"]
            index = step.index
            if self.chaining:
                self._slots[index] = [entry for entry in self._slots[index] if entry.key != key]
            else:
                current = self._slots[index]
                if current is None or current.key != key:
                    raise ValueError(f"Slot {index} does not hold key {key}")
                self._slots[index] = None
        elif kind in (StepKind.SWAP, StepKind.SET_VALUE):
            raise ValueError(f"HashTable does not support {kind.value} steps")


def _validate_size(table_size: object) -> int:
    size = coerce_int(table_size, "table size")
    if size <= 0:
        raise InvalidInputError("table size must be positive")
    return size


def _coerce_enum(enum_type: Any, value: Any, label: str) -> Any:
    try:
        return enum_type(value)
    except ValueError as exc:
        choices = ", ".join(member.value for member in enum_type)
        raise InvalidInputError(f"Unknown {label} {value!r}; expected one of: {choices}") from exc
