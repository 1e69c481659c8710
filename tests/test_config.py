from __future__ import annotations

import json
from pathlib import Path

import pytest

from algoverse.config import ConfigError, VisualizerSettings, load_settings
from algoverse.engines.sorting import SortAlgorithm
from algoverse.structures import CollisionStrategy, HeapMode


def test_defaults_without_a_file() -> None:
    settings = load_settings()
    assert settings == VisualizerSettings()
    assert settings.sort_array_size == 30
    assert settings.sort_delay_ms == 50
    assert settings.hash_table_size == 7
    assert settings.heap_mode is HeapMode.MAX


def test_load_json_settings(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"sort_algorithm": "merge", "seed": 3, "hash_table_size": 11}))
    settings = load_settings(path)
    assert settings.sort_algorithm is SortAlgorithm.MERGE
    assert settings.seed == 3
    assert settings.hash_table_size == 11
    assert settings.search_delay_ms == 800


def test_load_yaml_settings(tmp_path: Path) -> None:
    path = tmp_path / "settings.yaml"
    path.write_text("heap_mode: min\ncollision_strategy: chaining\nsort_delay_ms: 0\n")
    settings = load_settings(path)
    assert settings.heap_mode is HeapMode.MIN
    assert settings.collision_strategy is CollisionStrategy.CHAINING
    assert settings.sort_delay_ms == 0


def test_empty_yaml_file_gives_defaults(tmp_path: Path) -> None:
    path = tmp_path / "empty.yml"
    path.write_text("")
    assert load_settings(path) == VisualizerSettings()


@pytest.mark.parametrize(
    "content, message",
    [
        ("unknown_key: 1\n", "Unknown setting"),
        ("sort_array_size: big\n", "must be an integer"),
        ("sort_array_size: true\n", "must be an integer"),
        ("sort_algorithm: bogo\n", "must be one of"),
        ("sort_array_size: 0\n", "at least 1"),
        ("hash_delay_ms: -5\n", "non-negative"),
        ("- 1\n- 2\n", "mapping"),
        ("sort_array_size: [\n", "Invalid settings file"),
    ],
)
def test_invalid_settings_raise_config_error(tmp_path: Path, content: str, message: str) -> None:
    path = tmp_path / "settings.yaml"
    path.write_text(content)
    with pytest.raises(ConfigError, match=message):
        load_settings(path)


def test_missing_file_raises_config_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Unable to read"):
        load_settings(tmp_path / "absent.yaml")


def test_inverted_value_range_is_rejected() -> None:
    with pytest.raises(ConfigError):
        VisualizerSettings(sort_value_min=50, sort_value_max=10)


def test_with_overrides_returns_a_new_instance() -> None:
    base = VisualizerSettings()
    updated = base.with_overrides(sort_algorithm="quick", seed=9)
    assert updated.sort_algorithm is SortAlgorithm.QUICK
    assert updated.seed == 9
    assert base.seed is None
    assert updated.to_dict()["sort_algorithm"] == "quick"
    with pytest.raises(ConfigError):
        base.with_overrides(sort_delay_ms="fast")
