"""Per-panel session state.

A :class:`Session` owns one panel per algorithm family.  Every panel keeps
its structure, its selected algorithm, a :class:`PlaybackController`, a run
guard and the last status message.  Panels never let an
:class:`~algoverse.errors.AlgoVerseError` escape: failures are logged at
WARNING and recorded in :attr:`Panel.status`.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Generic, Optional, TypeVar, Union

import numpy as np

from .config import VisualizerSettings
from .context import RunContext
from .engines import hashing, heap, linear, searching, sorting, tree
from .engines.searching import SearchAlgorithm
from .engines.sorting import SortAlgorithm
from .engines.tree import TraversalOrder
from .errors import AlgoVerseError, InvalidInputError
from .playback import PlaybackController, PlaybackResult, RenderSink
from .steps import StepSequence
from .structures import (
    ArrayBuffer,
    BinaryHeap,
    BinarySearchTree,
    CollisionStrategy,
    HashFunction,
    HashTable,
    HeapMode,
    Queue,
    Stack,
    random_elements,
)

__all__ = [
    "HashingPanel",
    "HeapPanel",
    "LinearPanel",
    "Panel",
    "SearchingPanel",
    "Session",
    "SortingPanel",
    "TreePanel",
]

logger = logging.getLogger(__name__)

S = TypeVar("S")
R = TypeVar("R")

SequenceFactory = Callable[[RunContext], StepSequence[Any]]


class Panel(Generic[S]):
    """Shared run guard, playback delegation and error reporting."""

    family = "panel"

    def __init__(self, structure: S, delay_ms: float, rng: np.random.Generator) -> None:
        self.structure = structure
        self.controller = PlaybackController(delay_ms)
        self.rng = rng
        self.status = "Ready."
        self.last_result: Optional[PlaybackResult] = None
        self._active = False

    @property
    def running(self) -> bool:
        return self._active

    def pause(self) -> None:
        self.controller.pause()

    def resume(self) -> None:
        self.controller.resume()

    def cancel(self) -> None:
        self.controller.cancel()

    def set_speed(self, delay_ms: float) -> None:
        self._guarded(lambda: setattr(self.controller, "delay_ms", delay_ms))

    def set_speed_level(self, level: int) -> None:
        self._guarded(lambda: self.controller.set_speed_level(level))

    def _report(self, exc: AlgoVerseError) -> None:
        logger.warning("%s panel: %s", self.family, exc)
        self.status = str(exc)

    def _guarded(self, action: Callable[[], R]) -> Optional[R]:
        try:
            return action()
        except AlgoVerseError as exc:
            self._report(exc)
            return None

    def _instant(self, action: Callable[[], R], message: Callable[[R], str]) -> Optional[R]:
        """Run a non-animated mutation unless a run currently owns the structure."""

        if self._active:
            logger.warning("%s panel: ignoring operation while a run is active", self.family)
            return None
        try:
            result = action()
        except AlgoVerseError as exc:
            self._report(exc)
            return None
        self.status = message(result)
        return result

    async def _start(self, factory: SequenceFactory, sink: Optional[RenderSink]) -> Optional[PlaybackResult]:
        if self._active:
            logger.warning("%s panel: run already in progress; request ignored", self.family)
            return None
        self._active = True
        try:
            context = RunContext(label=self.family)
            try:
                sequence = factory(context)
            except AlgoVerseError as exc:
                self._report(exc)
                return None
            result = await self.controller.play(self.structure, sequence, context, sink)  # type: ignore[arg-type]
            self.last_result = result
            self.status = f"{sequence.label} {result.status.value} after {result.steps_applied} steps."
            return result
        finally:
            self._active = False


class SortingPanel(Panel[ArrayBuffer]):
    family = "sorting"

    def __init__(self, settings: VisualizerSettings, rng: np.random.Generator) -> None:
        super().__init__(ArrayBuffer(), settings.sort_delay_ms, rng)
        self.settings = settings
        self.algorithm = settings.sort_algorithm
        self.size = settings.sort_array_size
        self.generate()

    def generate(self, size: Optional[int] = None) -> None:
        if self._active:
            return
        if size is not None:
            if size < 1:
                self._report(InvalidInputError("array size must be at least 1"))
                return
            self.size = size
        self.structure = ArrayBuffer.random(
            self.size,
            low=self.settings.sort_value_min,
            high=self.settings.sort_value_max,
            rng=self.rng,
        )
        self.status = "Array generated. Ready to sort."

    def reset(self) -> None:
        self.generate()

    def select(self, algorithm: Union[SortAlgorithm, str]) -> None:
        def choose() -> None:
            try:
                self.algorithm = SortAlgorithm(algorithm)
            except ValueError as exc:
                raise InvalidInputError(f"Unknown sort algorithm: {algorithm!r}") from exc

        self._guarded(choose)

    async def start(self, sink: Optional[RenderSink] = None) -> Optional[PlaybackResult]:
        return await self._start(lambda ctx: sorting.run(self.structure, self.algorithm, ctx), sink)


class SearchingPanel(Panel[ArrayBuffer]):
    family = "searching"

    def __init__(self, settings: VisualizerSettings, rng: np.random.Generator) -> None:
        super().__init__(ArrayBuffer(), settings.search_delay_ms, rng)
        self.algorithm = settings.search_algorithm
        self.size = settings.search_array_size
        self.generate()

    def generate(self) -> None:
        """Binary search gets an ascending array, linear search a random one."""

        if self._active:
            return
        if self.algorithm is SearchAlgorithm.BINARY:
            self.structure = ArrayBuffer.random_sorted(self.size, rng=self.rng)
        else:
            self.structure = ArrayBuffer.random(self.size, low=1, high=100, rng=self.rng)
        self.status = "Array generated. Enter a value to search for."

    def reset(self) -> None:
        self.generate()

    def select(self, algorithm: Union[SearchAlgorithm, str]) -> None:
        def choose() -> None:
            try:
                self.algorithm = SearchAlgorithm(algorithm)
            except ValueError as exc:
                raise InvalidInputError(f"Unknown search algorithm: {algorithm!r}") from exc
            self.generate()

        self._guarded(choose)

    async def start(self, target: object, sink: Optional[RenderSink] = None) -> Optional[PlaybackResult]:
        return await self._start(
            lambda ctx: searching.run(self.structure, target, self.algorithm, ctx), sink
        )


class TreePanel(Panel[BinarySearchTree]):
    family = "tree"

    def __init__(self, settings: VisualizerSettings, rng: np.random.Generator) -> None:
        super().__init__(BinarySearchTree(), settings.traversal_delay_ms, rng)
        self.order = settings.traversal_order

    def generate(self) -> None:
        if self._active:
            return
        self.structure = BinarySearchTree.random(self.rng)
        self.status = f"Random tree with {len(self.structure)} nodes generated."

    def reset(self) -> None:
        if self._active:
            return
        self.structure.clear()
        self.status = "Tree cleared."

    def insert(self, value: object) -> Optional[int]:
        return self._instant(
            lambda: self.structure.insert(value),
            lambda node_id: f"Inserted {value}." if node_id is not None else f"{value} already exists.",
        )

    def delete(self, value: object) -> Optional[bool]:
        return self._instant(
            lambda: self.structure.delete(value),
            lambda deleted: f"Deleted {value}." if deleted else f"{value} not found.",
        )

    async def search(self, value: object, sink: Optional[RenderSink] = None) -> Optional[PlaybackResult]:
        return await self._start(lambda ctx: tree.search(self.structure, value, ctx), sink)

    async def traverse(
        self,
        order: Union[TraversalOrder, str, None] = None,
        sink: Optional[RenderSink] = None,
    ) -> Optional[PlaybackResult]:
        chosen = self.order if order is None else order
        return await self._start(lambda ctx: tree.traverse(self.structure, chosen, ctx), sink)


class HeapPanel(Panel[BinaryHeap]):
    family = "heap"

    def __init__(self, settings: VisualizerSettings, rng: np.random.Generator) -> None:
        super().__init__(BinaryHeap(settings.heap_mode), settings.heap_delay_ms, rng)

    def generate(self) -> None:
        if self._active:
            return
        self.structure = BinaryHeap.random(self.structure.mode, rng=self.rng)
        self.status = f"Random {self.structure.mode.value} heap with {len(self.structure)} values generated."

    def reset(self) -> None:
        if self._active:
            return
        self.structure.clear()
        self.status = "Heap cleared."

    def set_mode(self, mode: Union[HeapMode, str]) -> None:
        if self._active:
            return

        def switch() -> None:
            self.structure.mode = mode

        self._guarded(switch)

    def peek(self) -> Optional[int]:
        return self._instant(self.structure.peek, lambda root: f"Root is {root}.")

    async def insert(self, value: object, sink: Optional[RenderSink] = None) -> Optional[PlaybackResult]:
        return await self._start(lambda ctx: heap.insert(self.structure, value, ctx), sink)

    async def delete_root(self, sink: Optional[RenderSink] = None) -> Optional[PlaybackResult]:
        return await self._start(lambda ctx: heap.delete_root(self.structure, ctx), sink)


class LinearPanel(Panel[Union[Stack, Queue]]):
    family = "linear"

    def __init__(self, settings: VisualizerSettings, rng: np.random.Generator) -> None:
        super().__init__(Stack(), settings.linear_delay_ms, rng)

    @property
    def is_stack(self) -> bool:
        return isinstance(self.structure, Stack)

    def use(self, kind: str) -> None:
        """Switch between ``"stack"`` and ``"queue"``; the new structure is empty."""

        if self._active:
            return
        if kind == "stack":
            self.structure = Stack()
        elif kind == "queue":
            self.structure = Queue()
        else:
            self._report(InvalidInputError(f"Unknown linear structure {kind!r}"))
            return
        self.status = f"Switched to an empty {kind}."

    def generate(self) -> None:
        if self._active:
            return
        values = random_elements(self.rng)
        self.structure = Stack(values) if self.is_stack else Queue(values)
        self.status = f"Generated {len(values)} elements."

    def reset(self) -> None:
        if self._active:
            return
        self.structure.clear()
        self.status = "Cleared."

    def peek(self) -> Any:
        if self.is_stack:
            return self._instant(self.structure.peek, lambda top: f"Top is {top}.")  # type: ignore[union-attr]
        return self._instant(self.structure.front, lambda front: f"Front is {front}.")  # type: ignore[union-attr]

    async def add(self, value: object, sink: Optional[RenderSink] = None) -> Optional[PlaybackResult]:
        """Push onto a stack or enqueue onto a queue."""

        if self.is_stack:
            return await self._start(lambda ctx: linear.push(self.structure, value, ctx), sink)  # type: ignore[arg-type]
        return await self._start(lambda ctx: linear.enqueue(self.structure, value, ctx), sink)  # type: ignore[arg-type]

    async def remove(self, sink: Optional[RenderSink] = None) -> Optional[PlaybackResult]:
        """Pop from a stack or dequeue from a queue."""

        if self.is_stack:
            return await self._start(lambda ctx: linear.pop(self.structure, ctx), sink)  # type: ignore[arg-type]
        return await self._start(lambda ctx: linear.dequeue(self.structure, ctx), sink)  # type: ignore[arg-type]


class HashingPanel(Panel[HashTable]):
    family = "hashing"

    def __init__(self, settings: VisualizerSettings, rng: np.random.Generator) -> None:
        table = HashTable(settings.hash_table_size, settings.collision_strategy, settings.hash_function)
        super().__init__(table, settings.hash_delay_ms, rng)

    def configure(
        self,
        *,
        table_size: Optional[int] = None,
        strategy: Union[CollisionStrategy, str, None] = None,
        hash_function: Union[HashFunction, str, None] = None,
    ) -> None:
        """Change table settings; the table is rebuilt empty."""

        if self._active:
            return
        self._instant(
            lambda: self.structure.reconfigure(
                table_size=table_size, strategy=strategy, hash_function=hash_function
            ),
            lambda _: "Hash table reconfigured.",
        )

    def reset(self) -> None:
        if self._active:
            return
        self.structure.clear()
        self.status = "Hash table cleared."

    def stats(self) -> dict:
        return self.structure.stats().to_dict()

    async def insert(self, key: object, value: Any = None, sink: Optional[RenderSink] = None) -> Optional[PlaybackResult]:
        return await self._start(lambda ctx: hashing.insert(self.structure, key, value, ctx), sink)

    async def search(self, key: object, sink: Optional[RenderSink] = None) -> Optional[PlaybackResult]:
        return await self._start(lambda ctx: hashing.search(self.structure, key, ctx), sink)

    async def delete(self, key: object, sink: Optional[RenderSink] = None) -> Optional[PlaybackResult]:
        return await self._start(lambda ctx: hashing.delete(self.structure, key, ctx), sink)


class Session:
    """All panels of one visualizer session, sharing one seeded generator."""

    def __init__(self, settings: Optional[VisualizerSettings] = None) -> None:
        self.settings = settings if settings is not None else VisualizerSettings()
        self.rng = np.random.default_rng(self.settings.seed)
        self.sorting = SortingPanel(self.settings, self.rng)
        self.searching = SearchingPanel(self.settings, self.rng)
        self.tree = TreePanel(self.settings, self.rng)
        self.heap = HeapPanel(self.settings, self.rng)
        self.linear = LinearPanel(self.settings, self.rng)
        self.hashing = HashingPanel(self.settings, self.rng)

    def panels(self) -> dict:
        return {
            panel.family: panel
            for panel in (self.sorting, self.searching, self.tree, self.heap, self.linear, self.hashing)
        }

    def cancel_all(self) -> None:
        for panel in self.panels().values():
            panel.cancel()
