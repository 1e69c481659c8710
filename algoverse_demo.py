"""Command line player for the AlgoVerse step engines.

Runs one algorithm family over either explicit values or a seeded random
structure, plays the resulting step sequence through
:class:`algoverse.playback.PlaybackController` and prints every step as it is
applied.  ``--format json`` emits one JSON object per line instead, followed
by a final ``result`` record, which makes the output easy to diff in tests.

Examples::

    python algoverse_demo.py sort --algorithm quick --values 5,3,8,1 --delay-ms 0
    python algoverse_demo.py hash --keys 7,14,21 --delete 14 --delay-ms 0
    python algoverse_demo.py catalog
"""

from __future__ import annotations

import argparse
import asyncio
from dataclasses import asdict, dataclass, field, is_dataclass
from enum import Enum
import json
import logging
from pathlib import Path
from typing import Any, Callable, List, Optional, Sequence

import numpy as np
from rich.console import Console
from rich.table import Table

from algoverse import catalog
from algoverse.config import ConfigError, VisualizerSettings, load_settings
from algoverse.context import RunContext
from algoverse.engines import hashing, heap, linear, searching, sorting, tree
from algoverse.errors import AlgoVerseError
from algoverse.playback import PlaybackController, PlaybackResult
from algoverse.steps import Step, StepSequence
from algoverse.structures import (
    ArrayBuffer,
    BinaryHeap,
    BinarySearchTree,
    HashTable,
    Queue,
    Stack,
    random_elements,
    render_tree,
)
from algoverse.trace import StepTrace

logger = logging.getLogger(__name__)

FAMILIES = ("sort", "search", "tree", "heap", "stack", "queue", "hash", "catalog")


@dataclass
class DemoRun:
    """Structure plus the queue of sequences to play against it."""

    structure: Any
    delay_ms: float
    factories: List[Callable[[RunContext], StepSequence[Any]]] = field(default_factory=list)


def _parse_values(text: Optional[str], label: str) -> Optional[List[str]]:
    if text is None:
        return None
    items = [item.strip() for item in text.split(",") if item.strip()]
    if not items:
        raise ValueError(f"{label} must list at least one value")
    return items


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if is_dataclass(value) and not isinstance(value, type):
        return {key: _plain(item) for key, item in asdict(value).items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value


def _snapshot(structure: Any) -> Any:
    if isinstance(structure, (BinarySearchTree, HashTable)):
        return structure.snapshot()
    return structure.to_list()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Play AlgoVerse algorithm step sequences.")
    parser.add_argument("family", choices=FAMILIES, help="Algorithm family to run")
    parser.add_argument(
        "--algorithm",
        default=None,
        help=(
            "sort: bubble/selection/insertion/merge/quick/heap; search: linear/binary; "
            "tree: inorder/preorder/postorder"
        ),
    )
    parser.add_argument("--values", default=None, help="Comma separated input values")
    parser.add_argument("--size", type=int, default=None, help="Random array size")
    parser.add_argument("--target", default=None, help="Search target (search and tree)")
    parser.add_argument("--keys", default=None, help="Comma separated hash keys to insert")
    parser.add_argument("--search", dest="lookup", default=None, help="Hash key to search after inserting")
    parser.add_argument("--delete", default=None, help="Tree value or hash key to delete")
    parser.add_argument("--pop", type=int, default=0, help="Number of pops/dequeues after pushing")
    parser.add_argument("--delete-root", type=int, default=0, help="Number of heap root deletions")
    parser.add_argument("--mode", choices=["max", "min"], default=None, help="Heap mode")
    parser.add_argument("--table-size", type=int, default=None, help="Hash table size")
    parser.add_argument("--strategy", choices=["linear", "chaining"], default=None)
    parser.add_argument("--hash-function", choices=["division", "multiplication"], default=None)
    parser.add_argument("--seed", type=int, default=None, help="Seed for random structures")
    speed = parser.add_mutually_exclusive_group()
    speed.add_argument("--delay-ms", type=float, default=None, help="Delay between steps")
    speed.add_argument("--speed", type=int, default=None, help="Speed level 1-100")
    parser.add_argument("--config", type=Path, default=None, help="JSON or YAML settings file")
    parser.add_argument("--format", choices=["text", "json"], default="text", help="Step output format")
    parser.add_argument("--trace-csv", type=Path, default=None, help="Write all steps to this CSV file")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"],
        help="Logging verbosity for diagnostic output.",
    )
    return parser


def _prepare(args: argparse.Namespace, settings: VisualizerSettings) -> DemoRun:
    rng = np.random.default_rng(args.seed if args.seed is not None else settings.seed)
    values = _parse_values(args.values, "--values")

    if args.family == "sort":
        buffer = ArrayBuffer(values) if values else ArrayBuffer.random(
            args.size or settings.sort_array_size,
            low=settings.sort_value_min,
            high=settings.sort_value_max,
            rng=rng,
        )
        algorithm = args.algorithm or settings.sort_algorithm
        run = DemoRun(buffer, settings.sort_delay_ms)
        run.factories.append(lambda ctx: sorting.run(run.structure, algorithm, ctx))
        return run

    if args.family == "search":
        algorithm = searching.SearchAlgorithm(args.algorithm or settings.search_algorithm)
        size = args.size or settings.search_array_size
        if values:
            buffer = ArrayBuffer(values)
        elif algorithm is searching.SearchAlgorithm.BINARY:
            buffer = ArrayBuffer.random_sorted(size, rng=rng)
        else:
            buffer = ArrayBuffer.random(size, low=1, high=100, rng=rng)
        target = args.target if args.target is not None else buffer[int(rng.integers(0, len(buffer)))]
        run = DemoRun(buffer, settings.search_delay_ms)
        run.factories.append(lambda ctx: searching.run(run.structure, target, algorithm, ctx))
        return run

    if args.family == "tree":
        bst = BinarySearchTree(values) if values else BinarySearchTree.random(rng)
        run = DemoRun(bst, settings.traversal_delay_ms)
        if args.delete is not None:
            run.factories.append(lambda ctx: tree.delete(run.structure, args.delete, ctx))
        if args.target is not None:
            run.factories.append(lambda ctx: tree.search(run.structure, args.target, ctx))
        else:
            order = args.algorithm or settings.traversal_order
            run.factories.append(lambda ctx: tree.traverse(run.structure, order, ctx))
        return run

    if args.family == "heap":
        mode = args.mode or settings.heap_mode
        items = values or [str(value) for value in BinaryHeap.random(mode, rng=rng)]
        run = DemoRun(BinaryHeap(mode), settings.heap_delay_ms)
        for item in items:
            run.factories.append(lambda ctx, item=item: heap.insert(run.structure, item, ctx))
        for _ in range(args.delete_root):
            run.factories.append(lambda ctx: heap.delete_root(run.structure, ctx))
        return run

    if args.family in ("stack", "queue"):
        items = values or random_elements(rng)
        is_stack = args.family == "stack"
        run = DemoRun(Stack() if is_stack else Queue(), settings.linear_delay_ms)
        add = linear.push if is_stack else linear.enqueue
        remove = linear.pop if is_stack else linear.dequeue
        for item in items:
            run.factories.append(lambda ctx, item=item: add(run.structure, item, ctx))
        for _ in range(args.pop):
            run.factories.append(lambda ctx: remove(run.structure, ctx))
        return run

    table = HashTable(
        args.table_size or settings.hash_table_size,
        args.strategy or settings.collision_strategy,
        args.hash_function or settings.hash_function,
    )
    keys = _parse_values(args.keys, "--keys") or values
    if keys is None:
        keys = [str(int(key)) for key in rng.integers(1, 100, size=table.table_size - 1)]
    run = DemoRun(table, settings.hash_delay_ms)
    for key in keys:
        run.factories.append(lambda ctx, key=key: hashing.insert(run.structure, key, None, ctx))
    if args.lookup is not None:
        run.factories.append(lambda ctx: hashing.search(run.structure, args.lookup, ctx))
    if args.delete is not None:
        run.factories.append(lambda ctx: hashing.delete(run.structure, args.delete, ctx))
    return run


def _print_catalog(console: Console, output_format: str) -> None:
    if output_format == "json":
        for info in catalog.entries():
            print(json.dumps({"family": info.family, "name": info.name, "complexity": info.complexity_rows()}))
        return
    table = Table(title="Algorithm catalogue")
    table.add_column("Family")
    table.add_column("Name")
    table.add_column("Complexity")
    for info in catalog.entries():
        table.add_row(info.family, info.name, ", ".join(f"{case}: {cost}" for case, cost in info.complexity))
    console.print(table)


async def _play(
    run: DemoRun, controller: PlaybackController, sink: Callable[[Step], object], label: str
) -> List[PlaybackResult]:
    results: List[PlaybackResult] = []
    for factory in run.factories:
        context = RunContext(label=label)
        sequence = factory(context)
        results.append(await controller.play(run.structure, sequence, context, sink))
    return results


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point; returns 0 on success and 1 on a reported error."""

    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level))
    console = Console()

    if args.family == "catalog":
        _print_catalog(console, args.format)
        return 0

    try:
        settings = load_settings(args.config)
        run = _prepare(args, settings)
        controller = PlaybackController(run.delay_ms)
        if args.delay_ms is not None:
            controller.delay_ms = args.delay_ms
        elif args.speed is not None:
            controller.set_speed_level(args.speed)
    except (AlgoVerseError, ConfigError, ValueError) as exc:
        logger.error("Unable to prepare %s run: %s", args.family, exc)
        return 1

    trace = StepTrace()

    def sink(step: Step) -> None:
        trace(step)
        if args.format == "json":
            print(json.dumps(step.to_dict(), default=str))
        else:
            print(step.describe())

    try:
        results = asyncio.run(_play(run, controller, sink, args.family))
    except AlgoVerseError as exc:
        logger.error("%s run failed: %s", args.family, exc)
        return 1

    if args.trace_csv is not None:
        trace.write_csv(args.trace_csv)
        logger.info("Trace written to %s", args.trace_csv)

    outcomes = [_plain(result.outcome) for result in results]
    if args.format == "json":
        print(json.dumps({"result": {"structure": _snapshot(run.structure), "outcomes": outcomes}}, default=str))
        return 0

    summary = Table(title=f"{args.family} run")
    summary.add_column("Run")
    summary.add_column("Status")
    summary.add_column("Steps", justify="right")
    for result in results:
        summary.add_row(result.label, result.status.value, str(result.steps_applied))
    console.print(summary)
    console.print(f"Steps by kind: {trace.kind_counts()}")
    if isinstance(run.structure, BinarySearchTree):
        console.print(render_tree(run.structure), markup=False)
    else:
        console.print(f"Final structure: {_snapshot(run.structure)}", markup=False)
    return 0


__all__ = ["main"]


if __name__ == "__main__":  # pragma: no cover - CLI entry
    raise SystemExit(main())
