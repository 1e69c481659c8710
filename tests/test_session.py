from __future__ import annotations

import asyncio
import logging

import pytest

from algoverse.config import VisualizerSettings
from algoverse.playback import PlaybackStatus
from algoverse.session import Session
from algoverse.structures import Queue, Stack


@pytest.fixture
def session() -> Session:
    settings = VisualizerSettings(
        seed=42,
        sort_delay_ms=0,
        search_delay_ms=0,
        traversal_delay_ms=0,
        heap_delay_ms=0,
        linear_delay_ms=0,
        hash_delay_ms=0,
    )
    return Session(settings)


def test_seeded_sessions_generate_identical_structures() -> None:
    first = Session(VisualizerSettings(seed=7))
    second = Session(VisualizerSettings(seed=7))
    assert first.sorting.structure == second.sorting.structure
    assert len(first.sorting.structure) == 30
    assert len(first.searching.structure) == 15
    assert set(first.panels()) == {"sorting", "searching", "tree", "heap", "linear", "hashing"}


@pytest.mark.asyncio
async def test_sorting_panel_runs_selected_algorithm(session: Session) -> None:
    session.sorting.select("heap")
    result = await session.sorting.start()
    assert result is not None
    assert result.status is PlaybackStatus.COMPLETED
    assert session.sorting.structure.is_sorted()
    assert "completed" in session.sorting.status


@pytest.mark.asyncio
async def test_overlapping_start_is_a_logged_no_op(session: Session, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING, logger="algoverse.session")
    session.sorting.set_speed(1)
    first = asyncio.create_task(session.sorting.start())
    await asyncio.sleep(0)
    assert session.sorting.running
    assert await session.sorting.start() is None
    session.sorting.cancel()
    result = await first
    assert result.status is PlaybackStatus.ABORTED
    assert not session.sorting.running
    assert any("already in progress" in record.getMessage() for record in caplog.records)


@pytest.mark.asyncio
async def test_binary_search_panel_finds_generated_value(session: Session) -> None:
    session.searching.select("binary")
    target = session.searching.structure[3]
    result = await session.searching.start(target)
    assert result.outcome.found
    assert session.searching.structure[result.outcome.index] == target


@pytest.mark.asyncio
async def test_errors_are_reported_not_raised(session: Session, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING, logger="algoverse.session")
    assert await session.searching.start("not a number") is None
    assert "integer" in session.searching.status
    assert await session.heap.delete_root() is None
    assert "empty" in session.heap.status
    assert caplog.records


def test_tree_panel_instant_operations(session: Session) -> None:
    panel = session.tree
    assert panel.insert(5) is not None
    panel.insert(3)
    assert panel.insert(5) is None
    assert panel.status == "5 already exists."
    assert panel.delete(3) is True
    assert panel.delete(99) is False
    assert panel.insert("x") is None
    assert "integer" in panel.status


@pytest.mark.asyncio
async def test_tree_panel_traversal(session: Session) -> None:
    for value in (5, 3, 8, 1, 4):
        session.tree.insert(value)
    result = await session.tree.traverse("preorder")
    assert result.outcome.values == (5, 3, 1, 4, 8)


@pytest.mark.asyncio
async def test_heap_panel_mode_switch_and_insert(session: Session) -> None:
    session.heap.generate()
    assert not session.heap.structure.is_empty()
    session.heap.set_mode("min")
    assert session.heap.structure.is_empty()
    for value in (4, 2, 9):
        await session.heap.insert(value)
    assert session.heap.peek() == 2


@pytest.mark.asyncio
async def test_linear_panel_switches_between_stack_and_queue(session: Session) -> None:
    panel = session.linear
    assert isinstance(panel.structure, Stack)
    await panel.add("A")
    await panel.add(2)
    assert panel.peek() == 2
    panel.use("queue")
    assert isinstance(panel.structure, Queue)
    await panel.add("A")
    await panel.add(2)
    assert panel.peek() == "A"
    result = await panel.remove()
    assert result.outcome.value == "A"
    panel.reset()
    assert await panel.remove() is None


@pytest.mark.asyncio
async def test_hashing_panel_reports_full_table(session: Session) -> None:
    panel = session.hashing
    panel.configure(table_size=2)
    for key in (1, 2):
        await panel.insert(key)
    result = await panel.insert(3)
    assert result.outcome.status.value == "full"
    assert panel.stats()["total_items"] == 2
    panel.configure(strategy="bogus")
    assert "collision strategy" in panel.status


@pytest.mark.asyncio
async def test_cancelled_hash_delete_keeps_cluster_reachable(session: Session) -> None:
    panel = session.hashing
    for key in (7, 14, 21):
        await panel.insert(key)

    def sink(step) -> None:
        if step.kind.value == "structural_delete":
            panel.cancel()

    result = await panel.delete(7, sink=sink)
    assert result.status is PlaybackStatus.ABORTED
    assert panel.structure.snapshot()[:3] == [[14, 14], [21, 21], None]
    assert panel.structure.search(14) == 14
    assert panel.structure.search(21) == 21
    assert panel.stats()["total_items"] == 2


@pytest.mark.asyncio
async def test_cancelled_delete_root_leaves_no_phantom_element(session: Session) -> None:
    panel = session.heap
    for value in (5, 3, 4):
        await panel.insert(value)

    def sink(step) -> None:
        if step.kind.value == "set_value":
            panel.cancel()

    result = await panel.delete_root(sink=sink)
    assert result.status is PlaybackStatus.ABORTED
    assert panel.structure.to_list() == [4, 3]
    assert panel.structure.is_valid()
