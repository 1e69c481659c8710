"""Visualizer defaults and the JSON/YAML settings loader."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
import json
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from .engines.searching import SearchAlgorithm
from .engines.sorting import SortAlgorithm
from .engines.tree import TraversalOrder
from .structures.hash_table import CollisionStrategy, HashFunction
from .structures.heap import HeapMode

__all__ = ["ConfigError", "VisualizerSettings", "load_settings"]


class ConfigError(ValueError):
    """Raised when a settings file is unreadable or holds invalid values."""


@dataclass(frozen=True, slots=True)
class VisualizerSettings:
    """Per-panel defaults; delays are milliseconds per step."""

    sort_array_size: int = 30
    sort_value_min: int = 10
    sort_value_max: int = 309
    sort_delay_ms: int = 50
    sort_algorithm: SortAlgorithm = SortAlgorithm.BUBBLE
    search_array_size: int = 15
    search_delay_ms: int = 800
    search_algorithm: SearchAlgorithm = SearchAlgorithm.LINEAR
    traversal_delay_ms: int = 800
    traversal_order: TraversalOrder = TraversalOrder.INORDER
    heap_delay_ms: int = 500
    heap_mode: HeapMode = HeapMode.MAX
    linear_delay_ms: int = 500
    hash_delay_ms: int = 500
    hash_table_size: int = 7
    collision_strategy: CollisionStrategy = CollisionStrategy.LINEAR_PROBING
    hash_function: HashFunction = HashFunction.DIVISION
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        for name in (
            "sort_array_size",
            "search_array_size",
            "hash_table_size",
        ):
            if getattr(self, name) < 1:
                raise ConfigError(f"{name} must be at least 1")
        for name in (
            "sort_delay_ms",
            "search_delay_ms",
            "traversal_delay_ms",
            "heap_delay_ms",
            "linear_delay_ms",
            "hash_delay_ms",
        ):
            if getattr(self, name) < 0:
                raise ConfigError(f"{name} must be non-negative")
        if self.sort_value_max < self.sort_value_min:
            raise ConfigError("sort_value_max must be greater than or equal to sort_value_min")

    def with_overrides(self, **overrides: Any) -> "VisualizerSettings":
        return _build(overrides, base=self)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        for item in fields(self):
            value = getattr(self, item.name)
            payload[item.name] = value.value if hasattr(value, "value") else value
        return payload


_ENUM_FIELDS = {
    "sort_algorithm": SortAlgorithm,
    "search_algorithm": SearchAlgorithm,
    "traversal_order": TraversalOrder,
    "heap_mode": HeapMode,
    "collision_strategy": CollisionStrategy,
    "hash_function": HashFunction,
}


def _coerce_field(name: str, value: Any) -> Any:
    if name in _ENUM_FIELDS:
        enum_type = _ENUM_FIELDS[name]
        try:
            return enum_type(value)
        except ValueError as exc:
            choices = ", ".join(member.value for member in enum_type)
            raise ConfigError(f"{name} must be one of: {choices}") from exc
    if name == "seed" and value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{name} must be an integer")
    return value


def _build(payload: Mapping[str, Any], base: Optional[VisualizerSettings] = None) -> VisualizerSettings:
    known = {item.name for item in fields(VisualizerSettings)}
    unknown = sorted(set(payload) - known)
    if unknown:
        raise ConfigError(f"Unknown setting(s): {', '.join(unknown)}")
    values = {name: _coerce_field(name, value) for name, value in payload.items()}
    return replace(base, **values) if base is not None else VisualizerSettings(**values)


def load_settings(path: Union[str, Path, None] = None) -> VisualizerSettings:
    """Load settings from a ``.json``, ``.yaml`` or ``.yml`` file.

    ``None`` returns the defaults.  Missing keys keep their defaults; unknown
    keys and wrongly typed values raise :class:`ConfigError`.
    """

    if path is None:
        return VisualizerSettings()
    config_path = Path(path)
    try:
        text = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Unable to read settings file {config_path}: {exc}") from exc

    try:
        if config_path.suffix.lower() == ".json":
            payload = json.loads(text)
        else:
            payload = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Invalid settings file {config_path}: {exc}") from exc

    if payload is None:
        payload = {}
    if not isinstance(payload, Mapping):
        raise ConfigError("Settings file must contain a mapping at the top level")
    return _build(payload)
