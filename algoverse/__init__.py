"""Step-producing engines for animating classical algorithms and data structures."""

from .algorithms import SearchRequest, SortRequest, run
from .config import ConfigError, VisualizerSettings, load_settings
from .context import RunContext
from .errors import (
    AlgoVerseError,
    EmptyStructureError,
    InvalidInputError,
    StructureFullError,
)
from .playback import PlaybackController, PlaybackResult, PlaybackStatus
from .session import Session
from .steps import OperationStatus, Step, StepKind, StepSequence, drain
from .trace import StepTrace

__all__ = [
    "AlgoVerseError",
    "ConfigError",
    "EmptyStructureError",
    "InvalidInputError",
    "OperationStatus",
    "PlaybackController",
    "PlaybackResult",
    "PlaybackStatus",
    "RunContext",
    "SearchRequest",
    "Session",
    "SortRequest",
    "Step",
    "StepKind",
    "StepSequence",
    "StepTrace",
    "StructureFullError",
    "VisualizerSettings",
    "drain",
    "load_settings",
    "run",
]

__version__ = "0.1.0"
