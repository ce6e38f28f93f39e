"""Cache subsystem — in-memory engine with a single-file snapshot store."""

from cachescribe.cache.engine import Cache
from cachescribe.cache.keys import digest, snapshot_filename, snapshot_path, supported_algorithms
from cachescribe.cache.serializer import JsonTransformer
from cachescribe.cache.snapshot import SnapshotStore
from cachescribe.cache.stats import CacheStats

__all__ = [
    "Cache",
    "CacheStats",
    "JsonTransformer",
    "SnapshotStore",
    "digest",
    "snapshot_filename",
    "snapshot_path",
    "supported_algorithms",
]
