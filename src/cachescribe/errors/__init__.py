"""Error handling — exception hierarchy for cache, config and snapshot failures."""

from cachescribe.errors.exceptions import (
    ArgumentValidationError,
    CachescribeError,
    ConfigValidationError,
    SnapshotError,
    SnapshotLoadError,
    SnapshotWriteError,
    UnsupportedAlgorithmError,
)

__all__ = [
    "CachescribeError",
    "ConfigValidationError",
    "UnsupportedAlgorithmError",
    "ArgumentValidationError",
    "SnapshotError",
    "SnapshotLoadError",
    "SnapshotWriteError",
]
