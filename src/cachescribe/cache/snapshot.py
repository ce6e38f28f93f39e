"""Snapshot store — loads and persists a cache's entries as a single file."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

from cachescribe.errors.exceptions import SnapshotLoadError, SnapshotWriteError
from cachescribe.types import (
    CacheEntry,
    CacheSnapshot,
    SnapshotMeta,
    Transformer,
    is_expired,
    utcnow,
)

logger = logging.getLogger(__name__)


class SnapshotStore:
    """Reads and writes the snapshot file of one namespace.

    The file holds the transformer's rendering of
    ``{"meta": {"id": namespace}, "entries": [[key, entry], ...]}``.
    There is no locking: two stores on the same path overwrite each other,
    the last ``persist`` wins.
    """

    def __init__(self, path: Path, namespace: str, transformer: Transformer) -> None:
        self._path = path
        self._namespace = namespace
        self._transformer = transformer

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> dict[str, CacheEntry]:
        """Read the snapshot into an ordered mapping, dropping expired entries.

        A missing file is a first run and yields an empty mapping. Anything
        else that goes wrong raises SnapshotLoadError.
        """
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise self._load_error(exc) from exc

        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug("No snapshot for namespace '%s' at %s", self._namespace, self._path)
            return {}
        except (OSError, UnicodeDecodeError) as exc:
            raise self._load_error(exc) from exc

        try:
            snapshot = CacheSnapshot.model_validate(self._transformer.deserialize(text))
        except Exception as exc:
            raise self._load_error(exc) from exc

        if snapshot.meta.id != self._namespace:
            logger.warning(
                "Snapshot %s was written for namespace '%s', loading it as '%s'",
                self._path,
                snapshot.meta.id,
                self._namespace,
            )

        now = utcnow()
        entries: dict[str, CacheEntry] = {}
        dropped = 0
        for key, entry in snapshot.entries:
            if is_expired(entry.meta.timestamp, entry.meta.ttl, now):
                dropped += 1
                continue
            entries[key] = entry

        logger.debug(
            "Loaded %d entries (%d expired) for namespace '%s' from %s",
            len(entries),
            dropped,
            self._namespace,
            self._path,
        )
        return entries

    def persist(self, entries: Mapping[str, CacheEntry]) -> None:
        """Write all entries, in order, overwriting any existing snapshot."""
        try:
            snapshot = CacheSnapshot(
                meta=SnapshotMeta(id=self._namespace),
                entries=list(entries.items()),
            )
            text = self._transformer.serialize(snapshot.to_payload())
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(text, encoding="utf-8")
        except Exception as exc:
            raise SnapshotWriteError(
                f"Failed to write cache snapshot (namespace: {self._namespace}, "
                f"path: {self._path}, message: {exc})",
                namespace=self._namespace,
                path=self._path,
                original=exc,
            ) from exc

        logger.debug(
            "Persisted %d entries for namespace '%s' to %s",
            len(snapshot.entries),
            self._namespace,
            self._path,
        )

    def _load_error(self, exc: Exception) -> SnapshotLoadError:
        return SnapshotLoadError(
            f"Failed to read cache snapshot (namespace: {self._namespace}, "
            f"path: {self._path}, message: {exc})",
            namespace=self._namespace,
            path=self._path,
            original=exc,
        )
