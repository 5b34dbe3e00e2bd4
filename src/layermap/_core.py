"""
LayeredMap: a primary mapping in front of an ordered list of fallbacks.

Unlike collections.ChainMap, the layers are not symmetric:

- Primary layer: the only layer add(), remove() and clear() touch
- Secondary layers: read-only fallbacks, consulted in list order

Read semantics:
- Lookups check the primary, then each secondary layer in order
- keys() and values() are deduplicated unions
- items() and iteration yield raw pairs from every layer, duplicates kept

Write semantics (indexer):
- Key in primary: overwritten in place
- Key only in a secondary layer: new value promoted into the primary,
  the secondary entry is left alone
- Key in no layer: ignored

Thread safety: none. Layers are held by reference and never copied, so
changes made to a layer from outside are visible immediately.
"""

from __future__ import annotations

import collections.abc as _abc
import copy as _copy
import logging as _logging
import typing as _typing

import layermap._frozen as _frozen
import layermap.errors as errors

_logger = _logging.getLogger(__name__)

K = _typing.TypeVar("K")
V = _typing.TypeVar("V")


class LayeredMap(_typing.Generic[K, V]):
    """
    A primary mapping layered over an ordered list of secondary mappings.

    Example:
        >>> defaults = {"host": "localhost", "port": 8080}
        >>> overrides = {"port": 9000}
        >>> lm = LayeredMap(overrides, defaults)
        >>> lm["port"], lm["host"]
        (9000, 'localhost')
        >>> lm["host"] = "example.org"  # promoted into overrides
        >>> overrides
        {'port': 9000, 'host': 'example.org'}
        >>> lm["unknown"] = 1  # no layer has it: ignored
        >>> "unknown" in lm
        False

    Args:
        *layers: Mappings in priority order. The first one becomes the
            primary layer and must be mutable; the rest become secondary
            layers. With no arguments the primary is a fresh empty dict.

    Note:
        **Layer semantics:** Layers are stored **by reference**. The
        primary you pass in is the dict add()/remove() mutate, and edits
        you make to any layer afterwards are seen by the next lookup.
        Deep copy your mappings first if you need snapshot semantics::

            lm = LayeredMap(copy.deepcopy(overrides), defaults)

        get_layers() and get_layer() return FrozenMapping views, while
        get_main_layer() returns the primary itself for direct edits that
        bypass add() and the indexer rules.
    """

    def __init__(self, *layers: _abc.Mapping[K, V]) -> None:
        if layers:
            primary = layers[0]
            if not isinstance(primary, _abc.MutableMapping):
                raise TypeError(
                    f"Primary layer must be a mutable mapping, got {type(primary).__name__}"
                )
            self._primary: _abc.MutableMapping[K, V] = primary
            self._secondary: list[_abc.Mapping[K, V]] = list(layers[1:])
        else:
            self._primary = {}
            self._secondary = []

    # =========================================================================
    # Lookup
    # =========================================================================

    def _all_layers(self) -> list[_abc.Mapping[K, V]]:
        """Primary followed by the secondary layers, in precedence order."""
        return [self._primary, *self._secondary]

    def get(self, key: K) -> V:
        """
        Resolve a key through the layers.

        Raises:
            KeyNotFound: If no layer contains the key.
        """
        found, value = self.try_get(key)
        if not found:
            raise errors.KeyNotFound(key)
        return _typing.cast(V, value)

    def try_get(self, key: K) -> tuple[bool, V | None]:
        """
        Resolve a key without raising.

        Returns:
            (True, value) from the first layer holding the key, or
            (False, None) when no layer does.
        """
        for layer in self._all_layers():
            if key in layer:
                return True, layer[key]
        return False, None

    def contains_key(self, key: object) -> bool:
        """True if any layer holds the key."""
        return any(key in layer for layer in self._all_layers())

    def contains_value(self, value: object) -> bool:
        """True if any layer holds a value equal to ``value``."""
        return any(value in layer.values() for layer in self._all_layers())

    def __getitem__(self, key: K) -> V:
        return self.get(key)

    def __contains__(self, key: object) -> bool:
        return self.contains_key(key)

    # =========================================================================
    # Mutation (primary layer only)
    # =========================================================================

    def add(self, key: K, value: V) -> None:
        """
        Insert a new key into the primary layer.

        Secondary layers are not consulted, so adding a key that only a
        secondary layer holds succeeds and shadows it.

        Raises:
            DuplicateKey: If the primary layer already holds the key.
        """
        if key in self._primary:
            raise errors.DuplicateKey(key)
        self._primary[key] = value

    def try_add(self, key: K, value: V) -> bool:
        """Like add(), but return False instead of raising."""
        if key in self._primary:
            return False
        self._primary[key] = value
        return True

    def set(self, key: K, value: V) -> None:
        """
        Write through the indexer.

        Only keys that already exist somewhere are written, and always
        into the primary layer. Secondary layers are never modified.
        """
        if key in self._primary:
            self._primary[key] = value
            return
        if any(key in layer for layer in self._secondary):
            _logger.debug("Promoting key %r into the primary layer", key)
            self._primary[key] = value
            return
        _logger.debug("Ignoring write to key %r: not present in any layer", key)

    def __setitem__(self, key: K, value: V) -> None:
        self.set(key, value)

    def remove(self, key: K) -> bool:
        """
        Remove a key from the primary layer.

        Returns:
            True if the primary held the key. A key held only by secondary
            layers is left in place and False is returned.
        """
        if key not in self._primary:
            return False
        del self._primary[key]
        return True

    def clear(self) -> None:
        """Empty the primary layer. Secondary layers are untouched."""
        self._primary.clear()

    def clear_all(self) -> None:
        """Empty the primary layer and drop every secondary layer."""
        _logger.debug("Dropping %d secondary layer(s)", len(self._secondary))
        self._primary.clear()
        self._secondary.clear()

    # =========================================================================
    # Layer management
    # =========================================================================

    def add_layer(self, layer: _abc.Mapping[K, V], index: int = -1) -> None:
        """
        Insert a secondary layer.

        Args:
            layer: The mapping to add. Held by reference.
            index: Position in the secondary list. Negative appends to the
                end; past the last existing position inserts at the front;
                anything else inserts at that position.
        """
        if index < 0:
            position = len(self._secondary)
        elif index > len(self._secondary) - 1:
            position = 0
        else:
            position = index
        _logger.debug("Adding secondary layer at position %d (requested %d)", position, index)
        self._secondary.insert(position, layer)

    def remove_layer(self, index: int) -> _abc.Mapping[K, V] | None:
        """
        Remove a secondary layer by position.

        Returns:
            The removed layer, or None if index was out of range (in which
            case nothing happens).
        """
        if 0 <= index < len(self._secondary):
            _logger.debug("Removing secondary layer at position %d", index)
            return self._secondary.pop(index)
        return None

    def get_layers(self) -> list[_frozen.FrozenMapping[K, V]]:
        """Read-only views of all layers, primary first."""
        return [_frozen.FrozenMapping(layer) for layer in self._all_layers()]

    def get_layer(self, index: int) -> _frozen.FrozenMapping[K, V]:
        """
        Read-only view of one layer (0 = primary, 1.. = secondary).

        Raises:
            IndexOutOfRange: If index is negative or past the last layer.
        """
        layers = self._all_layers()
        if not 0 <= index < len(layers):
            raise errors.IndexOutOfRange(index, len(layers))
        return _frozen.FrozenMapping(layers[index])

    def get_main_layer(self) -> _abc.MutableMapping[K, V]:
        """The primary layer itself. Edits made here skip all checks."""
        return self._primary

    # =========================================================================
    # Bulk views
    # =========================================================================

    def keys(self) -> _abc.KeysView[K]:
        """Distinct keys across all layers, primary first."""
        return dict.fromkeys(
            key for layer in self._all_layers() for key in layer
        ).keys()

    def values(self) -> list[V]:
        """Distinct values across all layers, compared by equality."""
        result: list[V] = []
        for layer in self._all_layers():
            for value in layer.values():
                if value not in result:
                    result.append(value)
        return result

    def items(self) -> _typing.Iterator[tuple[K, V]]:
        """
        Yield every (key, value) pair of every layer.

        Primary entries come first, then each secondary layer in order.
        Shadowed keys are NOT skipped, so a key present in two layers is
        yielded twice.
        """
        for layer in self._all_layers():
            yield from layer.items()

    def __iter__(self) -> _typing.Iterator[tuple[K, V]]:
        return self.items()

    def count(self) -> int:
        """Total number of entries over all layers, duplicates included."""
        return sum(len(layer) for layer in self._all_layers())

    def __len__(self) -> int:
        return self.count()

    def layer_count(self) -> int:
        """Number of layers, the primary included."""
        return 1 + len(self._secondary)

    def merge(self) -> dict[K, V]:
        """
        Resolve every key once and return the result as a plain dict.

        Values are deep copied, so the result can be mutated freely
        without affecting any layer.
        """
        result: dict[K, V] = {}
        for layer in self._all_layers():
            for key, value in layer.items():
                if key not in result:
                    result[key] = _copy.deepcopy(value)
        return result

    def __repr__(self) -> str:
        parts = [repr(layer) for layer in self._all_layers()]
        return f"LayeredMap({', '.join(parts)})"
