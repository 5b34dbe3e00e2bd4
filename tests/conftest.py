"""
Shared fixtures for layermap tests.

Fixtures defined here are available to all test files without explicit
imports.
"""

import pathlib as _pathlib
import typing as _typing

import pytest as _pytest
import yaml as _yaml

import layermap

# Environment keys that should be cleared for isolated tests
ENV_KEYS_TO_CLEAR = [
    "LAYERMAP_LOG_LEVEL",
    "LAYERMAP_ENV_PREFIX",
    "LAYERMAP_MISSING_OK",
    "LAYERMAP_OUTPUT_FORMAT",
    "LAYERMAP_ENV_FILE",
]


@_pytest.fixture(autouse=True)
def _isolate_layermap_env(monkeypatch: _pytest.MonkeyPatch) -> None:
    """Keep the caller's LAYERMAP_* variables out of every test."""
    for key in ENV_KEYS_TO_CLEAR:
        monkeypatch.delenv(key, raising=False)


@_pytest.fixture
def primary() -> dict[str, int]:
    """Primary layer shared by reference with the two_layer_map fixture."""
    return {"a": 1}


@_pytest.fixture
def secondary() -> dict[str, int]:
    """Secondary layer shared by reference with the two_layer_map fixture."""
    return {"a": 2, "b": 3}


@_pytest.fixture
def two_layer_map(
    primary: dict[str, int],
    secondary: dict[str, int],
) -> layermap.LayeredMap[str, int]:
    """primary={a: 1} over secondary={a: 2, b: 3}."""
    return layermap.LayeredMap(primary, secondary)


@_pytest.fixture
def write_yaml(tmp_path: _pathlib.Path) -> _typing.Callable[[str, _typing.Any], _pathlib.Path]:
    """Factory writing data as YAML to tmp_path/<name> and returning the path."""

    def _write(name: str, data: _typing.Any) -> _pathlib.Path:
        path = tmp_path / name
        path.write_text(_yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
        return path

    return _write

