"""Per-run cancellation context threaded through engines and playback."""

from __future__ import annotations

from dataclasses import dataclass, field
import itertools

__all__ = ["RunContext"]

_RUN_IDS = itertools.count(1)


@dataclass(slots=True)
class RunContext:
    """Cooperative cancellation flag for one algorithm run.

    Engines call :meth:`should_stop` at the top of every loop iteration and
    return promptly once it is ``True``.  The playback controller checks the
    same flag before consuming each step.
    """

    label: str = "run"
    run_id: int = field(default_factory=lambda: next(_RUN_IDS))
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True

    def should_stop(self) -> bool:
        return self.cancelled


def ensure_context(context: RunContext | None, label: str) -> RunContext:
    """Return *context* or a fresh one labelled *label*."""

    return context if context is not None else RunContext(label=label)
