"""Snapshot file identity — namespace digests and path derivation."""

from __future__ import annotations

import hashlib
from collections.abc import Callable
from pathlib import Path

from cachescribe.errors.exceptions import ArgumentValidationError, UnsupportedAlgorithmError

# Output size in bytes for variable-length digests
_SHAKE_LENGTHS = {"shake_128": 16, "shake_256": 32}


def supported_algorithms() -> list[str]:
    """Digest algorithm names available from hashlib on this interpreter."""
    return sorted(hashlib.algorithms_available)


def digest(algorithm: str, values: list[str]) -> str:
    """Hash a non-empty list of strings, in order, to a hex digest.

    Values are fed to the hash one after another, so the result equals the
    digest of their concatenation.
    """
    if not isinstance(values, list) or not values:
        raise ArgumentValidationError("values must be a non-empty list of strings")
    if not all(isinstance(v, str) for v in values):
        raise ArgumentValidationError("values must be a non-empty list of strings")

    name = _resolve_algorithm(algorithm)
    try:
        hashed = hashlib.new(name, usedforsecurity=False)
    except ValueError as exc:
        # Listed by hashlib but disabled in the linked OpenSSL
        raise UnsupportedAlgorithmError(
            f"Unsupported hash algorithm: '{algorithm}' ({exc})", algorithm=algorithm
        ) from exc
    for value in values:
        hashed.update(value.encode("utf-8"))

    if name in _SHAKE_LENGTHS:
        return hashed.hexdigest(_SHAKE_LENGTHS[name])  # type: ignore[call-arg]
    return hashed.hexdigest()


def snapshot_filename(
    digest_fn: Callable[[str, list[str]], str],
    algorithm: str,
    namespace: str,
    extension: str = "",
) -> str:
    """File name for a namespace: its digest, plus ``.extension`` if given."""
    hashed = digest_fn(algorithm, [namespace])
    return f"{hashed}.{extension}" if extension else hashed


def snapshot_path(directory: Path | str, filename: str) -> Path:
    return Path(directory) / filename


def _resolve_algorithm(algorithm: str) -> str:
    """Map an algorithm name onto hashlib's spelling, or raise."""
    if not isinstance(algorithm, str) or not algorithm:
        raise UnsupportedAlgorithmError(
            f"Unsupported hash algorithm: {algorithm!r}", algorithm=str(algorithm)
        )

    available = hashlib.algorithms_available
    for candidate in (algorithm, algorithm.lower(), algorithm.lower().replace("-", "_")):
        if candidate in available:
            return candidate

    raise UnsupportedAlgorithmError(
        f"Unsupported hash algorithm: '{algorithm}' (see supported_algorithms())",
        algorithm=algorithm,
    )
