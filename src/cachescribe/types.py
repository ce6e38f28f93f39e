"""Shared Pydantic models for cachescribe."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, Field, field_validator

# ── Time ──


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def is_expired(timestamp: datetime, ttl: float, now: datetime | None = None) -> bool:
    """Whether an entry created at ``timestamp`` has outlived ``ttl`` seconds.

    A ttl of zero (or less) never expires.
    """
    if ttl <= 0:
        return False
    elapsed = ((now or utcnow()) - timestamp).total_seconds()
    return elapsed > ttl


# ── Transformer ──


@runtime_checkable
class Transformer(Protocol):
    """Serializes a snapshot payload to text and back."""

    def serialize(self, value: Any) -> str: ...

    def deserialize(self, text: str) -> Any: ...


# ── Entries ──


class EntryMeta(BaseModel):
    key: str = Field(min_length=1)
    ttl: float = Field(default=0.0, ge=0)
    timestamp: datetime = Field(default_factory=utcnow)

    @field_validator("timestamp")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # Naive timestamps come from transformers that drop tzinfo
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class CacheEntry(BaseModel):
    """A cached value with its key, lifetime and creation instant."""

    meta: EntryMeta
    value: Any = None

    @property
    def is_expired(self) -> bool:
        return is_expired(self.meta.timestamp, self.meta.ttl)


class EntryInput(BaseModel):
    """One item of a batch ``mset`` call."""

    key: str = Field(min_length=1)
    value: Any = None
    ttl: float | None = Field(default=None, ge=0, strict=True)


# ── Snapshot ──


class SnapshotMeta(BaseModel):
    id: str = Field(min_length=1)


class CacheSnapshot(BaseModel):
    """On-disk form of a cache: its namespace and ordered entries."""

    meta: SnapshotMeta
    entries: list[tuple[str, CacheEntry]] = Field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        """Plain structure handed to the transformer.

        Values are passed through untouched so the transformer sees their
        real types.
        """
        return {
            "meta": self.meta.model_dump(),
            "entries": [
                [key, {"meta": entry.meta.model_dump(), "value": entry.value}]
                for key, entry in self.entries
            ],
        }
