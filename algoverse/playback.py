"""Cooperative playback of step sequences.

:class:`PlaybackController` pulls one step at a time from a
:class:`~algoverse.steps.StepSequence`, applies it to the authoritative
structure, hands it to a render sink and then sleeps for the configured
delay.  Pausing blocks on an :class:`asyncio.Event`; cancelling flips the run's
:class:`~algoverse.context.RunContext` so both the controller and the engine
stop pulling.  No rollback happens: a cancelled structure keeps whatever the
last applied step produced, except that a unit of steps chained with
``continues`` is always finished first.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
import logging
from typing import Any, Callable, Optional

from .context import RunContext
from .errors import InvalidInputError
from .steps import OperationStatus, Step, StepSequence, SupportsApply

__all__ = [
    "MAX_SPEED_LEVEL",
    "PlaybackController",
    "PlaybackResult",
    "PlaybackStatus",
    "RenderSink",
    "level_to_delay_ms",
]

logger = logging.getLogger(__name__)

RenderSink = Callable[[Step], object]

MAX_SPEED_LEVEL = 100


class PlaybackStatus(str, Enum):
    COMPLETED = "completed"
    ABORTED = "aborted"


@dataclass(frozen=True)
class PlaybackResult:
    """Terminal report of one playback."""

    label: str
    status: PlaybackStatus
    steps_applied: int
    outcome: Any = None

    @property
    def completed(self) -> bool:
        return self.status is PlaybackStatus.COMPLETED


def level_to_delay_ms(level: int) -> int:
    """Map a 1–100 speed slider position to a per-step delay (``101 - level``)."""

    if isinstance(level, bool) or not isinstance(level, int):
        raise InvalidInputError("speed level must be an integer")
    if not 1 <= level <= MAX_SPEED_LEVEL:
        raise InvalidInputError(f"speed level must be between 1 and {MAX_SPEED_LEVEL}")
    return MAX_SPEED_LEVEL + 1 - level


def _aborted_outcome(outcome: Any) -> bool:
    return getattr(outcome, "status", None) is OperationStatus.ABORTED


class PlaybackController:
    """Drain step sequences at a controllable pace."""

    def __init__(self, delay_ms: float = 500, sink: Optional[RenderSink] = None) -> None:
        self._delay_ms = 0.0
        self.delay_ms = delay_ms
        self.sink = sink
        self._resume = asyncio.Event()
        self._resume.set()
        self._context: Optional[RunContext] = None

    # ------------------------------------------------------------------
    # Speed
    # ------------------------------------------------------------------
    @property
    def delay_ms(self) -> float:
        return self._delay_ms

    @delay_ms.setter
    def delay_ms(self, value: float) -> None:
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
            raise InvalidInputError("delay must be a non-negative number of milliseconds")
        self._delay_ms = float(value)

    def set_speed_level(self, level: int) -> None:
        self.delay_ms = level_to_delay_ms(level)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def running(self) -> bool:
        return self._context is not None

    @property
    def paused(self) -> bool:
        return not self._resume.is_set()

    def pause(self) -> None:
        if self.running:
            self._resume.clear()

    def resume(self) -> None:
        self._resume.set()

    def cancel(self) -> None:
        """Request cancellation of the active run; a paused run wakes to stop."""

        if self._context is not None:
            self._context.cancel()
        self._resume.set()

    # ------------------------------------------------------------------
    # Playback
    # ------------------------------------------------------------------
    async def play(
        self,
        structure: SupportsApply,
        sequence: StepSequence[Any],
        context: Optional[RunContext] = None,
        sink: Optional[RenderSink] = None,
    ) -> PlaybackResult:
        """Apply every step of *sequence* to *structure*, pausing between steps.

        *context* should be the one the engine was created with so a cancel
        also stops the engine.  Raises :class:`RuntimeError` when another run
        is already being played by this controller.
        """

        if self._context is not None:
            raise RuntimeError("playback already in progress")
        ctx = context if context is not None else RunContext(label=sequence.label)
        render = sink if sink is not None else self.sink
        self._context = ctx
        self._resume.set()
        applied_count = 0
        in_unit = False
        steps = iter(sequence)
        try:
            while True:
                if not self._resume.is_set():
                    await self._resume.wait()
                # A started unit always runs to its last step.
                if ctx.should_stop() and not in_unit:
                    break
                step = next(steps, None)
                if step is None:
                    break
                structure.apply(step)
                applied_count += 1
                if render is not None:
                    render(step)
                in_unit = step.continues
                if in_unit and ctx.should_stop():
                    continue
                await asyncio.sleep(self._delay_ms / 1000)
        finally:
            self._context = None
            self._resume.set()

        if ctx.should_stop() or _aborted_outcome(sequence.outcome):
            sequence.close()
            logger.info("Run %s aborted after %d steps", sequence.label, applied_count)
            return PlaybackResult(sequence.label, PlaybackStatus.ABORTED, applied_count, sequence.outcome)
        logger.info("Run %s completed in %d steps", sequence.label, applied_count)
        return PlaybackResult(sequence.label, PlaybackStatus.COMPLETED, applied_count, sequence.outcome)

    def drain(
        self,
        structure: SupportsApply,
        sequence: StepSequence[Any],
        sink: Optional[RenderSink] = None,
    ) -> PlaybackResult:
        """Apply *sequence* immediately, still reporting each step to the sink."""

        render = sink if sink is not None else self.sink
        applied_count = 0
        for step in sequence:
            structure.apply(step)
            applied_count += 1
            if render is not None:
                render(step)
        status = PlaybackStatus.ABORTED if _aborted_outcome(sequence.outcome) else PlaybackStatus.COMPLETED
        logger.debug("Drained %s: %d steps", sequence.label, applied_count)
        return PlaybackResult(sequence.label, status, applied_count, sequence.outcome)
