"""
layermap - a primary mapping layered over ordered fallback mappings.

Lookups check the primary layer first, then each secondary layer in order.
Writes go to the primary layer only.

Example:
    >>> import layermap
    >>> defaults = {"host": "localhost", "port": 8080}
    >>> lm = layermap.LayeredMap({"port": 9000}, defaults)
    >>> lm["port"], lm["host"]
    (9000, 'localhost')
"""

import importlib.metadata as _metadata

_raw_version = _metadata.version("layermap")
__version_info__: tuple[int, int, int] = tuple(int(x) for x in _raw_version.split(".")[:3])  # type: ignore[assignment]
__version__: str = ".".join(str(x) for x in __version_info__)

from layermap._core import LayeredMap  # noqa: E402
from layermap._frozen import FrozenMapping, FrozenSequence, freeze  # noqa: E402
from layermap.errors import (  # noqa: E402
    DuplicateKey,
    IndexOutOfRange,
    KeyNotFound,
    LayeredMapError,
    LayerFileError,
)

__all__ = [
    "__version__",
    "__version_info__",
    "DuplicateKey",
    "FrozenMapping",
    "FrozenSequence",
    "IndexOutOfRange",
    "KeyNotFound",
    "LayerFileError",
    "LayeredMap",
    "LayeredMapError",
    "freeze",
]
