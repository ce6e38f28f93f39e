"""Pydantic model for cache construction options."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from cachescribe.config.defaults import (
    DEFAULT_ALGORITHM,
    DEFAULT_DIRECTORY,
    DEFAULT_EXTENSION,
    DEFAULT_NAMESPACE,
    DEFAULT_TTL,
)
from cachescribe.errors.exceptions import ConfigValidationError
from cachescribe.types import Transformer


def _default_digest_fn() -> Callable[[str, list[str]], str]:
    from cachescribe.cache.keys import digest

    return digest


def _default_transformer() -> Transformer:
    from cachescribe.cache.serializer import JsonTransformer

    return JsonTransformer()


class CacheOptions(BaseModel):
    """Resolved options for a single cache instance."""

    model_config = ConfigDict(extra="forbid")

    # Identifies the snapshot file; each namespace maps to one file
    namespace: str = Field(default=DEFAULT_NAMESPACE, min_length=1, strict=True)
    directory: Path = DEFAULT_DIRECTORY
    # Appended as ".<extension>", without the dot
    extension: str = Field(default=DEFAULT_EXTENSION, strict=True)
    algorithm: str = Field(default=DEFAULT_ALGORITHM, min_length=1, strict=True)
    # Standard entry lifetime in seconds, 0 = infinite
    ttl: float = Field(default=DEFAULT_TTL, ge=0, strict=True)
    digest_fn: Callable[[str, list[str]], str] = Field(default_factory=_default_digest_fn)
    # False = memory only, never loaded or written
    snapshot: bool = Field(default=True, strict=True)
    transformer: Any = Field(default_factory=_default_transformer)

    @field_validator("directory", mode="before")
    @classmethod
    def _non_empty_directory(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            raise ValueError("directory must not be empty")
        return value

    @field_validator("transformer")
    @classmethod
    def _has_transformer_methods(cls, value: Any) -> Any:
        if not isinstance(value, Transformer):
            raise ValueError("transformer must provide serialize() and deserialize()")
        return value


def parse_options(**options: Any) -> CacheOptions:
    """Validate raw keyword options into ``CacheOptions``.

    Raises ConfigValidationError with the pydantic error list on failure.
    """
    try:
        return CacheOptions(**options)
    except ValidationError as exc:
        raise ConfigValidationError(
            f"Invalid cache options: {exc.error_count()} error(s)",
            errors=exc.errors(include_url=False),
        ) from exc
