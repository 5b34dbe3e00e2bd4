"""
Read-only views over layers.

LayeredMap hands these out from get_layers() and get_layer() so callers
can inspect any layer without being able to change it. The views are
live: they wrap the layer by reference, so later changes to the layer
show through. Nested containers are frozen on access.
"""

from __future__ import annotations

import collections.abc as _abc
import typing as _typing

K = _typing.TypeVar("K")
V = _typing.TypeVar("V")


class FrozenMapping(_typing.Mapping[K, V]):
    """
    Read-only, live view of a layer.

    Example:
        >>> layer = {"db": {"hosts": ["a", "b"]}}
        >>> view = FrozenMapping(layer)
        >>> view["db"]["hosts"][0]
        'a'
        >>> layer["port"] = 5432
        >>> view["port"]
        5432
        >>> view["port"] = 1  # TypeError: immutable
    """

    __slots__ = ("_data",)

    def __init__(self, data: _abc.Mapping[K, V]) -> None:
        """
        Wrap a mapping in a read-only view.

        Args:
            data: The layer to wrap. Held by reference, never copied.
        """
        self._data = data

    def __getitem__(self, key: K) -> _typing.Any:
        """Get a value, freezing nested containers."""
        return freeze(self._data[key])

    def __iter__(self) -> _typing.Iterator[K]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __repr__(self) -> str:
        return f"FrozenMapping({self._data!r})"

    def __eq__(self, other: object) -> bool:
        """Compare equal to any Mapping with the same content."""
        if isinstance(other, _abc.Mapping):
            return dict(self.items()) == dict(other.items())
        return NotImplemented

    def __hash__(self) -> int:
        raise TypeError(f"unhashable type: '{type(self).__name__}'")


class FrozenSequence(_abc.Sequence[_typing.Any]):
    """Read-only view of a list found inside a layer."""

    __slots__ = ("_data",)

    def __init__(self, data: _abc.Sequence[_typing.Any]) -> None:
        self._data = data

    @_typing.overload
    def __getitem__(self, index: int) -> _typing.Any: ...

    @_typing.overload
    def __getitem__(self, index: slice) -> FrozenSequence: ...

    def __getitem__(self, index: int | slice) -> _typing.Any:
        """Get an item or slice, freezing nested containers."""
        value = self._data[index]
        if isinstance(index, slice):
            return FrozenSequence(value)
        return freeze(value)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"FrozenSequence({self._data!r})"

    def __eq__(self, other: object) -> bool:
        """Compare equal to any non-string Sequence with the same content."""
        if isinstance(other, (str, bytes)):
            return NotImplemented
        if isinstance(other, _abc.Sequence):
            return list(self) == list(other)
        return NotImplemented

    def __hash__(self) -> int:
        raise TypeError(f"unhashable type: '{type(self).__name__}'")


def freeze(value: _typing.Any) -> _typing.Any:
    """
    Wrap mutable containers in frozen views.

    - Mapping → FrozenMapping
    - Sequence → FrozenSequence (except str, bytes and tuple)
    - Anything else, including already frozen views, is returned as-is

    Example:
        >>> freeze({"a": [1, 2]})
        FrozenMapping({'a': [1, 2]})
        >>> freeze("string")
        'string'
    """
    if isinstance(value, (FrozenMapping, FrozenSequence)):
        return value
    if isinstance(value, _abc.Mapping):
        return FrozenMapping(value)
    if isinstance(value, _abc.Sequence) and not isinstance(value, (str, bytes, tuple)):
        return FrozenSequence(value)
    return value
