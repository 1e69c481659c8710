from __future__ import annotations

import pytest

from algoverse.context import RunContext
from algoverse.engines import hashing as engine
from algoverse.errors import InvalidInputError
from algoverse.steps import OperationStatus, StepKind, drain
from algoverse.structures import HashTable


def _insert(table: HashTable, key: int):
    return drain(table, engine.insert(table, key))


def test_probe_counts_for_colliding_keys() -> None:
    table = HashTable(7, "linear", "division")
    outcomes = [_insert(table, key) for key in (7, 14, 21)]
    assert [outcome.index for outcome in outcomes] == [0, 1, 2]
    assert [outcome.probes for outcome in outcomes] == [0, 1, 2]
    assert all(outcome.home == 0 for outcome in outcomes)


def test_insert_steps_probe_each_visited_slot() -> None:
    table = HashTable(7)
    _insert(table, 7)
    steps = list(engine.insert(table, 14))
    assert [step.kind for step in steps] == [StepKind.PROBE, StepKind.PROBE, StepKind.STRUCTURAL_INSERT]
    assert [step.index for step in steps] == [0, 1, 1]


def test_update_existing_key() -> None:
    table = HashTable(7)
    drain(table, engine.insert(table, 3, "old"))
    outcome = drain(table, engine.insert(table, 3, "new"))
    assert outcome.status is OperationStatus.UPDATED
    assert table.search(3) == "new"


def test_full_table_reports_full_without_mutation() -> None:
    table = HashTable(2)
    _insert(table, 0)
    _insert(table, 1)
    sequence = engine.insert(table, 2)
    steps = list(sequence)
    assert sequence.outcome.status is OperationStatus.FULL
    assert sequence.outcome.probes == 2
    assert steps[-1].kind is StepKind.NOT_FOUND
    assert table.snapshot() == [[0, 0], [1, 1]]


def test_search_found_and_missing() -> None:
    table = HashTable(7)
    for key in (7, 14):
        _insert(table, key)
    found = drain(table, engine.search(table, 14))
    assert found.status is OperationStatus.FOUND
    assert found.index == 1
    missing = drain(table, engine.search(table, 21))
    assert missing.status is OperationStatus.NOT_FOUND
    assert missing.probes == 2


def test_search_wraps_and_stops_after_full_cycle() -> None:
    table = HashTable(3)
    for key in (0, 1, 2):
        _insert(table, key)
    sequence = engine.search(table, 3)
    steps = list(sequence)
    assert [step.kind for step in steps].count(StepKind.PROBE) == 3
    assert sequence.outcome.status is OperationStatus.NOT_FOUND


def test_delete_shifts_cluster_back() -> None:
    table = HashTable(7)
    for key in (7, 14, 21):
        _insert(table, key)
    sequence = engine.delete(table, 7)
    steps = list(sequence)
    relocations = [step for step in steps if step.payload.get("relocated")]
    assert len(relocations) == 4
    drain(table, engine.delete(table, 7))
    assert table.snapshot()[:3] == [[14, 14], [21, 21], None]
    assert table.search(21) == 21


def test_delete_leaves_keys_already_home() -> None:
    table = HashTable(7)
    for key in (0, 1, 2):
        _insert(table, key)
    drain(table, engine.delete(table, 0))
    assert table.snapshot()[:3] == [None, [1, 1], [2, 2]]


def test_delete_missing_key() -> None:
    table = HashTable(7)
    sequence = engine.delete(table, 5)
    steps = list(sequence)
    assert steps[-1].kind is StepKind.NOT_FOUND
    assert sequence.outcome.status is OperationStatus.NOT_FOUND


def test_chaining_insert_search_delete() -> None:
    table = HashTable(5, "chaining")
    for key in (2, 7, 12):
        outcome = _insert(table, key)
        assert outcome.index == 2
    assert table.snapshot()[2] == [[2, 2], [7, 7], [12, 12]]
    found = drain(table, engine.search(table, 12))
    assert found.status is OperationStatus.FOUND
    assert found.probes == 2
    drain(table, engine.delete(table, 7))
    assert table.snapshot()[2] == [[2, 2], [12, 12]]


def test_multiplication_hash_with_negative_keys() -> None:
    table = HashTable(7, "chaining", "multiplication")
    for key in (-5, -12, 40):
        _insert(table, key)
    for key in (-5, -12, 40):
        assert table.search(key) == key


def test_invalid_key_is_rejected() -> None:
    with pytest.raises(InvalidInputError):
        engine.insert(HashTable(), "key")
    with pytest.raises(InvalidInputError):
        engine.search(HashTable(), True)


def test_cancelled_insert_is_aborted() -> None:
    table = HashTable(7)
    for key in (7, 14):
        _insert(table, key)
    context = RunContext()
    sequence = engine.insert(table, 21, context=context)
    iterator = iter(sequence)
    next(iterator)
    context.cancel()
    assert list(iterator) == []
    assert sequence.outcome.status is OperationStatus.ABORTED
    assert len(table) == 2


def test_run_dispatch() -> None:
    table = HashTable()
    drain(table, engine.run(table, engine.HashInsert(9, "nine")))
    assert drain(table, engine.run(table, engine.HashSearch(9))).value == "nine"
    assert drain(table, engine.run(table, engine.HashDelete(9))).status is OperationStatus.DELETED


def test_delete_and_shift_form_one_unit() -> None:
    table = HashTable(7)
    for key in (7, 14, 21):
        _insert(table, key)
    steps = list(engine.delete(table, 7))
    start = next(i for i, step in enumerate(steps) if step.kind is StepKind.STRUCTURAL_DELETE)
    unit = steps[start:]
    assert all(step.continues for step in unit[:-1])
    assert not unit[-1].continues
    assert not any(step.continues for step in steps[:start])
