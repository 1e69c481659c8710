"""Recording render sink with pandas export."""

from __future__ import annotations

from collections import Counter
import json
from pathlib import Path
from typing import Dict, Iterator, List, Union

import pandas as pd

from .steps import Step, StepKind

__all__ = ["StepTrace", "TRACE_COLUMNS"]

TRACE_COLUMNS = ("position", "kind", "indices", "payload")


class StepTrace:
    """Collect every step handed to it; usable directly as a render sink."""

    def __init__(self) -> None:
        self._steps: List[Step] = []

    def __call__(self, step: Step) -> None:
        self._steps.append(step)

    def __len__(self) -> int:
        return len(self._steps)

    def __iter__(self) -> Iterator[Step]:
        return iter(self._steps)

    @property
    def steps(self) -> List[Step]:
        return list(self._steps)

    def clear(self) -> None:
        self._steps.clear()

    def kind_counts(self) -> Dict[str, int]:
        """Number of recorded steps per kind, in vocabulary order."""

        counts = Counter(step.kind for step in self._steps)
        return {kind.value: counts[kind] for kind in StepKind if counts[kind]}

    def to_frame(self) -> pd.DataFrame:
        """One row per step; indices and payload are JSON-encoded strings."""

        rows = [
            {
                "position": position,
                "kind": step.kind.value,
                "indices": json.dumps(list(step.indices)),
                "payload": json.dumps(dict(step.payload), sort_keys=True, default=str),
            }
            for position, step in enumerate(self._steps)
        ]
        return pd.DataFrame(rows, columns=list(TRACE_COLUMNS))

    def write_csv(self, path: Union[str, Path]) -> Path:
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        self.to_frame().to_csv(target, index=False)
        return target
