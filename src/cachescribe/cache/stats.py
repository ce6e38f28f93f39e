"""Cache lookup statistics."""

from __future__ import annotations

from pydantic import BaseModel


class CacheStats(BaseModel):
    """Per-instance counters for ``get``/``take`` lookups."""

    entries: int = 0
    hits: int = 0
    misses: int = 0
    expired: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0
