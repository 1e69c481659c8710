"""Hash table insert/search/delete engines.

Both collision strategies share one vocabulary:

* ``probe(slot, key)`` each time a slot (linear probing) or a chain entry
  (chaining) is examined; ``probes`` in :class:`HashOutcome` counts the
  examinations that did *not* settle the operation.
* ``structural_insert``/``structural_delete`` carry ``key`` and ``value`` so
  :meth:`HashTable.apply` can replay them.

Linear-probing deletion performs a backward shift: entries after the freed
slot whose home lies outside the cyclic range ``(hole, current]`` are moved
into the hole.  Every remaining key therefore stays reachable from its home
slot without tombstones.  The delete and its shift are emitted as one
atomic unit, so a cancelled run never stops with the cluster half moved.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING, Any, Generator, List, Optional, Union

from ..context import RunContext, ensure_context
from ..errors import coerce_int
from ..steps import OperationStatus, Step, StepSequence, applied, atomic

if TYPE_CHECKING:  # pragma: no cover - import is for type checking only
    from ..structures.hash_table import HashTable

__all__ = [
    "HashDelete",
    "HashInsert",
    "HashOperation",
    "HashOutcome",
    "HashSearch",
    "delete",
    "insert",
    "run",
    "search",
]

logger = logging.getLogger(__name__)

HashSteps = Generator[Step, None, "HashOutcome"]


@dataclass(frozen=True)
class HashOutcome:
    status: OperationStatus
    key: int
    value: Any = None
    index: Optional[int] = None
    probes: int = 0
    home: Optional[int] = None


def _between(hole: int, home: int, current: int) -> bool:
    """``True`` when *home* lies in the cyclic interval ``(hole, current]``."""

    if hole <= current:
        return hole < home <= current
    return home > hole or home <= current


# ----------------------------------------------------------------------
# Insert
# ----------------------------------------------------------------------
def insert(
    table: "HashTable",
    key: object,
    value: Any = None,
    context: Optional[RunContext] = None,
) -> StepSequence[HashOutcome]:
    """Insert *key* (value defaults to the key) or update its value."""

    number = coerce_int(key, "hash key")
    stored = number if value is None else value
    ctx = ensure_context(context, "hash:insert")
    work = table.clone()
    engine = _insert_chained if work.chaining else _insert_probing
    return StepSequence(engine(work, number, stored, ctx), label="hash:insert")


def _insert_probing(work: "HashTable", key: int, value: Any, context: RunContext) -> HashSteps:
    size = work.table_size
    home = work.hash(key)
    index = home
    for probes in range(size):
        if context.should_stop():
            return HashOutcome(OperationStatus.ABORTED, key, value, index, probes, home)
        yield Step.probe(index, key, attempt=probes)
        entry = work.slot(index)
        if entry is None or entry.key == key:
            status = OperationStatus.INSERTED if entry is None else OperationStatus.UPDATED
            yield applied(work, Step.structural_insert(index, key=key, value=value))
            logger.debug("Key %d %s at slot %d after %d probes", key, status.value, index, probes)
            return HashOutcome(status, key, value, index, probes, home)
        index = (index + 1) % size
    yield Step.not_found(key=key, reason="full")
    logger.debug("Table full; key %d not inserted", key)
    return HashOutcome(OperationStatus.FULL, key, value, None, size, home)


def _insert_chained(work: "HashTable", key: int, value: Any, context: RunContext) -> HashSteps:
    home = work.hash(key)
    yield Step.mark_current(home, key=key)
    chain = work.slot(home)
    for position, entry in enumerate(list(chain)):  # type: ignore[arg-type]
        if context.should_stop():
            return HashOutcome(OperationStatus.ABORTED, key, value, home, position, home)
        yield Step.probe(home, key, chain_position=position)
        if entry.key == key:
            yield applied(work, Step.structural_insert(home, key=key, value=value, chain_position=position))
            return HashOutcome(OperationStatus.UPDATED, key, value, home, position, home)
    position = len(chain)  # type: ignore[arg-type]
    yield applied(work, Step.structural_insert(home, key=key, value=value, chain_position=position))
    logger.debug("Key %d chained at slot %d position %d", key, home, position)
    return HashOutcome(OperationStatus.INSERTED, key, value, home, position, home)


# ----------------------------------------------------------------------
# Search
# ----------------------------------------------------------------------
def search(table: "HashTable", key: object, context: Optional[RunContext] = None) -> StepSequence[HashOutcome]:
    number = coerce_int(key, "hash key")
    ctx = ensure_context(context, "hash:search")
    engine = _search_chained if table.chaining else _search_probing
    return StepSequence(engine(table, number, ctx), label="hash:search")


def _search_probing(table: "HashTable", key: int, context: RunContext) -> HashSteps:
    size = table.table_size
    home = table.hash(key)
    index = home
    for probes in range(size):
        if context.should_stop():
            return HashOutcome(OperationStatus.ABORTED, key, None, None, probes, home)
        yield Step.probe(index, key, attempt=probes)
        entry = table.slot(index)
        if entry is None:
            break
        if entry.key == key:
            yield Step.found(index, key=key, value=entry.value)
            return HashOutcome(OperationStatus.FOUND, key, entry.value, index, probes, home)
        index = (index + 1) % size
    else:
        probes = size
    yield Step.not_found(key=key)
    return HashOutcome(OperationStatus.NOT_FOUND, key, None, None, probes, home)


def _search_chained(table: "HashTable", key: int, context: RunContext) -> HashSteps:
    home = table.hash(key)
    yield Step.mark_current(home, key=key)
    chain = table.slot(home)
    for position, entry in enumerate(chain):  # type: ignore[arg-type]
        if context.should_stop():
            return HashOutcome(OperationStatus.ABORTED, key, None, None, position, home)
        yield Step.probe(home, key, chain_position=position)
        if entry.key == key:
            yield Step.found(home, key=key, value=entry.value, chain_position=position)
            return HashOutcome(OperationStatus.FOUND, key, entry.value, home, position, home)
    yield Step.not_found(key=key)
    return HashOutcome(OperationStatus.NOT_FOUND, key, None, None, len(chain), home)  # type: ignore[arg-type]


# ----------------------------------------------------------------------
# Delete
# ----------------------------------------------------------------------
def delete(table: "HashTable", key: object, context: Optional[RunContext] = None) -> StepSequence[HashOutcome]:
    number = coerce_int(key, "hash key")
    ctx = ensure_context(context, "hash:delete")
    work = table.clone()
    engine = _delete_chained if work.chaining else _delete_probing
    return StepSequence(engine(work, number, ctx), label="hash:delete")


def _delete_probing(work: "HashTable", key: int, context: RunContext) -> HashSteps:
    located = yield from _search_probing(work, key, context)
    if located.status is not OperationStatus.FOUND:
        return located
    hole = located.index
    assert hole is not None
    unit = [applied(work, Step.structural_delete(hole, key=key))]
    unit.extend(_backward_shift(work, hole))
    yield from atomic(unit)
    logger.debug("Deleted key %d from slot %d", key, hole)
    return HashOutcome(OperationStatus.DELETED, key, located.value, hole, located.probes, located.home)


def _backward_shift(work: "HashTable", hole: int) -> List[Step]:
    """Close the gap at *hole*; the steps join the delete in one atomic unit."""

    # Bounded by the table size: the freed slot stays empty until refilled,
    # so the scan always meets an empty slot.
    size = work.table_size
    shifted: List[Step] = []
    current = hole
    while True:
        current = (current + 1) % size
        entry = work.slot(current)
        if entry is None:
            return shifted
        shifted.append(Step.mark_current(current, key=entry.key))
        if _between(hole, work.hash(entry.key), current):
            continue
        shifted.append(
            applied(work, Step.structural_insert(hole, key=entry.key, value=entry.value, relocated=True))
        )
        shifted.append(applied(work, Step.structural_delete(current, key=entry.key, relocated=True)))
        hole = current


def _delete_chained(work: "HashTable", key: int, context: RunContext) -> HashSteps:
    home = work.hash(key)
    yield Step.mark_current(home, key=key)
    chain = list(work.slot(home))  # type: ignore[arg-type]
    for position, entry in enumerate(chain):
        if context.should_stop():
            return HashOutcome(OperationStatus.ABORTED, key, None, None, position, home)
        yield Step.probe(home, key, chain_position=position)
        if entry.key == key:
            yield applied(work, Step.structural_delete(home, key=key, chain_position=position))
            logger.debug("Deleted key %d from chain %d", key, home)
            return HashOutcome(OperationStatus.DELETED, key, entry.value, home, position, home)
    yield Step.not_found(key=key)
    return HashOutcome(OperationStatus.NOT_FOUND, key, None, None, len(chain), home)


# ----------------------------------------------------------------------
# Family entry point
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class HashInsert:
    key: int
    value: Any = None


@dataclass(frozen=True)
class HashSearch:
    key: int


@dataclass(frozen=True)
class HashDelete:
    key: int


HashOperation = Union[HashInsert, HashSearch, HashDelete]


def run(
    table: "HashTable",
    operation: HashOperation,
    context: Optional[RunContext] = None,
) -> StepSequence[HashOutcome]:
    if isinstance(operation, HashInsert):
        return insert(table, operation.key, operation.value, context)
    if isinstance(operation, HashSearch):
        return search(table, operation.key, context)
    if isinstance(operation, HashDelete):
        return delete(table, operation.key, context)
    raise TypeError(f"Unsupported hash table operation: {operation!r}")
