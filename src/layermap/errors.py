"""
Exceptions raised by layermap.

Every error derives from LayeredMapError and from the builtin exception a
plain dict or list would raise in the same situation, so callers can catch
either.
"""

from __future__ import annotations

import pathlib as _pathlib
import typing as _typing


class LayeredMapError(Exception):
    """Base class for layermap errors."""

    pass


class KeyNotFound(LayeredMapError, KeyError):
    """No layer contains the requested key."""

    def __init__(self, key: _typing.Hashable) -> None:
        self.key = key
        super().__init__(f"Key {key!r} was not found in any layer")

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the whole message
        return str(self.args[0])


class DuplicateKey(LayeredMapError, ValueError):
    """The primary layer already holds the key passed to add()."""

    def __init__(self, key: _typing.Hashable) -> None:
        self.key = key
        super().__init__(f"Key {key!r} already exists in the primary layer")


class IndexOutOfRange(LayeredMapError, IndexError):
    """A layer index outside the current list of layers."""

    def __init__(self, index: int, layer_count: int) -> None:
        self.index = index
        self.layer_count = layer_count
        super().__init__(
            f"Layer index {index} out of range (0..{layer_count - 1})"
        )


class LayerFileError(LayeredMapError):
    """Error loading or parsing a layer file."""

    def __init__(self, path: _pathlib.Path, message: str) -> None:
        self.path = path
        super().__init__(f"Error in layer file {path}: {message}")
