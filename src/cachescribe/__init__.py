"""cachescribe — in-process key-value cache with TTL and file snapshots."""

from __future__ import annotations

from typing import Any

from cachescribe.cache import Cache, CacheStats, JsonTransformer, digest, supported_algorithms
from cachescribe.config.schema import CacheOptions
from cachescribe.errors import (
    ArgumentValidationError,
    CachescribeError,
    ConfigValidationError,
    SnapshotError,
    SnapshotLoadError,
    SnapshotWriteError,
    UnsupportedAlgorithmError,
)
from cachescribe.types import CacheEntry, CacheSnapshot, EntryInput, Transformer

__version__ = "0.1.0"


def cachescribe(**options: Any) -> Cache:
    """Create a cache that persists to a snapshot file.

    Usage:
        with cachescribe(namespace="http", ttl=60) as cache:
            cache.set("key", {"a": 1})

    See ``CacheOptions`` for the accepted options.
    """
    return Cache(**options)


__all__ = [
    "cachescribe",
    "Cache",
    "CacheEntry",
    "CacheOptions",
    "CacheSnapshot",
    "CacheStats",
    "EntryInput",
    "JsonTransformer",
    "Transformer",
    "digest",
    "supported_algorithms",
    "CachescribeError",
    "ConfigValidationError",
    "UnsupportedAlgorithmError",
    "ArgumentValidationError",
    "SnapshotError",
    "SnapshotLoadError",
    "SnapshotWriteError",
]
