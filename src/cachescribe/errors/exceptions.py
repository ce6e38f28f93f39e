"""Custom exception hierarchy for cachescribe."""

from __future__ import annotations

from pathlib import Path
from typing import Any


class CachescribeError(Exception):
    """Base exception for all cachescribe errors."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        super().__init__(message)
        self.message = message


class ConfigValidationError(CachescribeError):
    """Construction options failed validation; no cache instance is produced.

    Examples: wrong option types, empty namespace, negative ttl, unknown option.
    """

    def __init__(
        self,
        message: str = "",
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(message)
        self.errors = errors or []


class UnsupportedAlgorithmError(CachescribeError):
    """Digest algorithm is not provided by hashlib on this interpreter."""

    def __init__(self, message: str = "", algorithm: str = "") -> None:
        super().__init__(message)
        self.algorithm = algorithm


class ArgumentValidationError(CachescribeError):
    """Malformed arguments to a cache operation; cache state is untouched.

    Examples: empty key, empty key list, negative ttl override.
    """

    def __init__(
        self,
        message: str = "",
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(message)
        self.errors = errors or []


class SnapshotError(CachescribeError):
    """Snapshot file could not be read or written."""

    def __init__(
        self,
        message: str = "",
        namespace: str = "",
        path: Path | None = None,
        original: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.namespace = namespace
        self.path = path
        self.original = original


class SnapshotLoadError(SnapshotError):
    """Snapshot exists but is unreadable or malformed; fatal to construction."""


class SnapshotWriteError(SnapshotError):
    """Snapshot could not be persisted."""
