"""Building LayeredMap layers from YAML files and environment variables.

Layers are collected in precedence order, highest first:

1. Environment variables with a given prefix (optional)
2. YAML files, in the order given (first file wins)

build_layered_map() puts a fresh, empty dict in front of them as the
primary layer, so runtime overrides made through add() or the indexer never
touch the loaded data.
"""

import collections.abc as _abc
import dataclasses as _dataclasses
import logging as _logging
import os as _os
import pathlib as _pathlib
import typing as _typing

import yaml as _yaml

import layermap._core as _core
import layermap.errors as errors

_logger = _logging.getLogger(__name__)


@_dataclasses.dataclass(frozen=True)
class LayerSource:
    """One loaded layer and where it came from."""

    name: str
    path: _pathlib.Path | None
    data: dict[str, _typing.Any]


def load_yaml_layer(path: _pathlib.Path) -> dict[str, _typing.Any]:
    """
    Load a YAML file as a layer.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed mapping. An empty file yields an empty dict.

    Raises:
        LayerFileError: If the file cannot be read, is malformed YAML,
            or does not contain a mapping at the top level.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except PermissionError as e:
        raise errors.LayerFileError(path, f"permission denied: {e}") from e
    except OSError as e:
        raise errors.LayerFileError(path, f"cannot read file: {e}") from e

    try:
        parsed = _yaml.safe_load(content)
    except _yaml.YAMLError as e:
        raise errors.LayerFileError(path, f"invalid YAML: {e}") from e

    if parsed is None:
        return {}

    if not isinstance(parsed, dict):
        type_name = type(parsed).__name__
        raise errors.LayerFileError(
            path,
            f"layer must be a YAML mapping (dict), got {type_name}",
        )

    _logger.debug("Loaded %d key(s) from %s", len(parsed), path)
    return parsed


def parse_scalar(raw: str) -> _typing.Any:
    """Parse a string as a YAML scalar, keeping the raw text for anything else."""
    try:
        value = _yaml.safe_load(raw)
    except _yaml.YAMLError:
        return raw
    # Only accept scalars; "[1, 2]" style values stay strings
    if isinstance(value, (dict, list)) or value is None:
        return raw
    return value


def env_layer(
    prefix: str,
    environ: _abc.Mapping[str, str] | None = None,
) -> dict[str, _typing.Any]:
    """
    Build a layer from environment variables starting with ``prefix``.

    The prefix is stripped and the remainder lowercased, so with prefix
    ``APP_`` the variable ``APP_PORT=8080`` becomes ``{"port": 8080}``.
    Values are parsed as YAML scalars (numbers, booleans).

    Args:
        prefix: Variable name prefix. Matching is case-sensitive.
        environ: Mapping to read from. Defaults to os.environ.
    """
    if not prefix:
        raise ValueError("prefix must be a non-empty string")
    if environ is None:
        environ = _os.environ

    layer: dict[str, _typing.Any] = {}
    for name, raw in environ.items():
        if not name.startswith(prefix) or name == prefix:
            continue
        layer[name[len(prefix):].lower()] = parse_scalar(raw)

    _logger.debug("Collected %d key(s) from environment prefix %s", len(layer), prefix)
    return layer


def collect_sources(
    paths: _abc.Iterable[_pathlib.Path],
    *,
    env_prefix: str | None = None,
    missing_ok: bool = False,
    environ: _abc.Mapping[str, str] | None = None,
) -> list[LayerSource]:
    """
    Load every layer source, highest precedence first.

    Args:
        paths: YAML files, first = highest precedence.
        env_prefix: If given, an environment layer is placed before all files.
        missing_ok: Skip missing files instead of raising.
        environ: Environment mapping for the env layer (defaults to os.environ).

    Raises:
        LayerFileError: On a missing file (unless missing_ok) or a bad file.
    """
    result: list[LayerSource] = []

    if env_prefix:
        result.append(
            LayerSource(name=f"env:{env_prefix}", path=None, data=env_layer(env_prefix, environ))
        )

    for path in paths:
        if not path.exists():
            if missing_ok:
                _logger.warning("Skipping missing layer file %s", path)
                continue
            raise errors.LayerFileError(path, "file not found")
        result.append(LayerSource(name=path.name, path=path, data=load_yaml_layer(path)))

    return result


def build_layered_map(
    sources: _abc.Iterable[LayerSource],
    primary: _abc.MutableMapping[str, _typing.Any] | None = None,
) -> _core.LayeredMap[str, _typing.Any]:
    """
    Assemble a LayeredMap from loaded sources.

    Args:
        sources: Layer sources in precedence order (see collect_sources).
        primary: Mapping to use as the primary layer. Defaults to a fresh
            empty dict. Held by reference.
    """
    if primary is None:
        primary = {}
    return _core.LayeredMap(primary, *(source.data for source in sources))
