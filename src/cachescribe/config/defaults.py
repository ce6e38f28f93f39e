"""Package-level default configuration values."""

from __future__ import annotations

from pathlib import Path
from typing import Any

# Snapshot identity
DEFAULT_NAMESPACE = "default"
DEFAULT_DIRECTORY = Path.home() / ".cache" / "cachescribe"
DEFAULT_EXTENSION = ""
DEFAULT_ALGORITHM = "md5"

# Entry lifetime in seconds, 0 = never expires
DEFAULT_TTL = 0.0

DEFAULT_SNAPSHOT_DISABLED = False

# Log level
DEFAULT_LOG_LEVEL = "WARNING"


def get_defaults() -> dict[str, Any]:
    """Return all defaults as a flat dictionary for merging."""
    return {
        "namespace": DEFAULT_NAMESPACE,
        "directory": str(DEFAULT_DIRECTORY),
        "extension": DEFAULT_EXTENSION,
        "algorithm": DEFAULT_ALGORITHM,
        "ttl": DEFAULT_TTL,
        "snapshot_disabled": DEFAULT_SNAPSHOT_DISABLED,
        "log_level": DEFAULT_LOG_LEVEL,
    }
