"""Error taxonomy shared by every structure and engine.

All failures that callers are expected to report (rather than crash on) derive
from :class:`AlgoVerseError`.  Each concrete class also subclasses the closest
built-in exception so existing ``except ValueError`` style handlers keep
working.

Search and delete misses are *not* errors; they are reported through
``OperationStatus.NOT_FOUND`` on the operation outcome.
"""

from __future__ import annotations

from typing import Union

__all__ = [
    "AlgoVerseError",
    "EmptyStructureError",
    "InvalidInputError",
    "StructureFullError",
    "coerce_element",
    "coerce_int",
]


class AlgoVerseError(Exception):
    """Base class for recoverable, user-facing failures."""


class InvalidInputError(AlgoVerseError, ValueError):
    """Raised when a key or value is not an acceptable payload."""


class EmptyStructureError(AlgoVerseError, LookupError):
    """Raised when removing from or peeking into an empty structure."""


class StructureFullError(AlgoVerseError, OverflowError):
    """Raised when a linear-probing table has no free slot left."""


def coerce_int(value: object, label: str = "value") -> int:
    """Return *value* as an ``int`` or raise :class:`InvalidInputError`.

    Integers pass through unchanged and strings holding a base-10 integer are
    parsed.  Booleans are rejected even though ``bool`` subclasses ``int``.
    """

    if isinstance(value, bool):
        raise InvalidInputError(f"{label} must be an integer, not a boolean")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip(), 10)
        except ValueError as exc:
            raise InvalidInputError(f"{label} must be an integer, got {value!r}") from exc
    raise InvalidInputError(f"{label} must be an integer, got {type(value).__name__}")


def coerce_element(value: object, label: str = "value") -> Union[int, str]:
    """Validate a stack/queue element: an integer or a non-empty string."""

    if isinstance(value, bool):
        raise InvalidInputError(f"{label} must be an integer or a string")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            raise InvalidInputError(f"{label} must not be empty")
        return stripped
    raise InvalidInputError(f"{label} must be an integer or a string")
