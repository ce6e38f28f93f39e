"""Cache engine — in-memory entries with lazy TTL expiry and snapshot lifecycle."""

from __future__ import annotations

import atexit
import logging
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Annotated, Any

from pydantic import Field, TypeAdapter, ValidationError

from cachescribe.cache.keys import snapshot_filename, snapshot_path
from cachescribe.cache.snapshot import SnapshotStore
from cachescribe.cache.stats import CacheStats
from cachescribe.config.schema import CacheOptions, parse_options
from cachescribe.errors.exceptions import (
    ArgumentValidationError,
    ConfigValidationError,
    SnapshotWriteError,
)
from cachescribe.types import CacheEntry, EntryInput, EntryMeta, utcnow

logger = logging.getLogger(__name__)

_Key = Annotated[str, Field(min_length=1, strict=True)]

_KEY = TypeAdapter(_Key)
_KEYS = TypeAdapter(Annotated[list[_Key], Field(min_length=1)])
_TTL = TypeAdapter(Annotated[float, Field(ge=0, strict=True)])
_ENTRIES = TypeAdapter(Annotated[list[EntryInput], Field(min_length=1)])


def _check(adapter: TypeAdapter, value: Any, what: str) -> Any:
    try:
        return adapter.validate_python(value)
    except ValidationError as exc:
        errors = exc.errors(include_url=False)
        raise ArgumentValidationError(
            f"Invalid {what}: {errors[0]['msg']}", errors=errors
        ) from exc


class Cache:
    """Key-value cache that can persist itself to a snapshot file.

    Entries live in an insertion-ordered dict. Expired entries are purged
    lazily by ``get``/``take`` and skipped when a snapshot is loaded; there
    is no background sweep.

    With ``snapshot=True`` (the default) the snapshot is loaded on
    construction and written by ``close()``, which also runs on ``with``
    exit and, once, at interpreter exit. Values are stored and returned by
    reference: mutating an object returned by ``get`` mutates the cached one.

    Not thread-safe; wrap calls in a lock when sharing an instance.
    """

    def __init__(self, **options: Any) -> None:
        self._options = parse_options(**options)
        self._path = self._derive_path(self._options)
        self._store = SnapshotStore(
            self._path, self._options.namespace, self._options.transformer
        )
        self._stats = CacheStats()
        self._closed = False

        if self._options.snapshot:
            self._entries: dict[str, CacheEntry] = self._store.load()
            atexit.register(self._close_at_exit)
        else:
            self._entries = {}

    @property
    def options(self) -> CacheOptions:
        return self._options

    @property
    def path(self) -> Path:
        """Snapshot file location, derived from namespace and directory."""
        return self._path

    @property
    def closed(self) -> bool:
        return self._closed

    # ── Single-key operations ──

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        """Insert or overwrite ``key``.

        ``ttl`` overrides the standard ttl for this entry. Overwriting resets
        the entry's timestamp.
        """
        _check(_KEY, key, "key")
        if ttl is not None:
            _check(_TTL, ttl, "ttl")
        self._put(key, value, ttl)

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value for ``key``, or ``default`` if unknown or expired.

        An expired entry is deleted as a side effect.
        """
        _check(_KEY, key, "key")
        entry = self._lookup(key)
        if entry is None:
            return default
        return entry.value

    def take(self, key: str, default: Any = None) -> Any:
        """Return the value for ``key`` and remove it from the cache."""
        _check(_KEY, key, "key")
        entry = self._lookup(key)
        if entry is None:
            return default
        del self._entries[key]
        return entry.value

    def has(self, key: str) -> bool:
        """Whether ``key`` holds a non-expired entry.

        Unlike ``get``, an expired entry is reported absent but not deleted.
        """
        _check(_KEY, key, "key")
        entry = self._entries.get(key)
        return entry is not None and not entry.is_expired

    def delete(self, key: str) -> bool:
        """Remove ``key``. Returns whether it was present."""
        _check(_KEY, key, "key")
        return self._entries.pop(key, None) is not None

    def ttl(self, key: str, ttl: float) -> bool:
        """Change the ttl of an existing entry without touching its timestamp.

        Returns whether the entry was found.
        """
        _check(_KEY, key, "key")
        _check(_TTL, ttl, "ttl")
        entry = self._entries.get(key)
        if entry is None:
            return False
        entry.meta.ttl = float(ttl)
        return True

    # ── Batch operations ──

    def mset(self, *entries: EntryInput | Mapping[str, Any]) -> None:
        """Set several entries, given as ``{"key", "value", "ttl"?}`` items.

        The whole batch is validated before any entry is written.
        """
        batch = _check(_ENTRIES, list(entries), "entries")
        for item in batch:
            self._put(item.key, item.value, item.ttl)

    def mget(self, *keys: str) -> dict[str, Any]:
        """Values of the given keys that are present and not expired."""
        _check(_KEYS, list(keys), "keys")
        found: dict[str, Any] = {}
        for key in keys:
            entry = self._lookup(key)
            if entry is not None:
                found[key] = entry.value
        return found

    def mtake(self, *keys: str) -> dict[str, Any]:
        """Like ``mget``, removing every entry it returns."""
        _check(_KEYS, list(keys), "keys")
        taken: dict[str, Any] = {}
        for key in keys:
            entry = self._lookup(key)
            if entry is not None:
                del self._entries[key]
                taken[key] = entry.value
        return taken

    def mhas(self, *keys: str) -> bool:
        _check(_KEYS, list(keys), "keys")
        return all(self.has(key) for key in keys)

    def mdel(self, *keys: str) -> None:
        _check(_KEYS, list(keys), "keys")
        for key in keys:
            self._entries.pop(key, None)

    def flush(self) -> None:
        """Remove all entries."""
        self._entries.clear()

    # ── Enumeration ──
    # One-shot iterators over a copy taken at call time, in insertion order.

    def keys(self) -> Iterator[str]:
        return iter(list(self._entries))

    def values(self) -> Iterator[Any]:
        return iter([entry.value for entry in self._entries.values()])

    def entries(self) -> Iterator[tuple[str, Any]]:
        return iter([(key, entry.value) for key, entry in self._entries.items()])

    def stats(self) -> CacheStats:
        return self._stats.model_copy(update={"entries": len(self._entries)})

    # ── Lifecycle ──

    def close(self) -> None:
        """Persist the snapshot, once.

        Later calls are no-ops, also when the first write failed. The cache
        keeps serving from memory after closing, but changes are not saved.

        Raises SnapshotWriteError if the snapshot cannot be written.
        """
        if self._closed:
            return
        self._closed = True
        if not self._options.snapshot:
            return
        atexit.unregister(self._close_at_exit)
        self._store.persist(self._entries)

    def __enter__(self) -> Cache:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return self.has(key)  # type: ignore[arg-type]

    def __repr__(self) -> str:
        return (
            f"Cache(namespace={self._options.namespace!r}, entries={len(self._entries)}, "
            f"snapshot={self._options.snapshot})"
        )

    # ── Internals ──

    def _put(self, key: str, value: Any, ttl: float | None) -> None:
        self._entries[key] = CacheEntry(
            meta=EntryMeta(
                key=key,
                ttl=self._options.ttl if ttl is None else ttl,
                timestamp=utcnow(),
            ),
            value=value,
        )

    def _lookup(self, key: str) -> CacheEntry | None:
        """Live entry for ``key``; purges it if expired."""
        entry = self._entries.get(key)
        if entry is None:
            self._stats.misses += 1
            return None
        if entry.is_expired:
            del self._entries[key]
            self._stats.expired += 1
            self._stats.misses += 1
            logger.debug("Entry '%s' expired, removed", key)
            return None
        self._stats.hits += 1
        return entry

    def _close_at_exit(self) -> None:
        # Interpreter is shutting down; report instead of raising
        try:
            self.close()
        except SnapshotWriteError as exc:
            logger.error("%s", exc.message)

    @staticmethod
    def _derive_path(options: CacheOptions) -> Path:
        filename = snapshot_filename(
            options.digest_fn, options.algorithm, options.namespace, options.extension
        )
        if not isinstance(filename, str) or not filename:
            raise ConfigValidationError(
                f"digest_fn must return a non-empty string, got {filename!r}"
            )
        return snapshot_path(options.directory, filename)
