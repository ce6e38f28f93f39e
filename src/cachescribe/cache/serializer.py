"""Default snapshot transformer — JSON with tagged non-JSON types."""

from __future__ import annotations

import base64
import json
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from pathlib import Path, PurePath
from typing import Any
from uuid import UUID

_TYPE_KEY = "__type__"
_VALUE_KEY = "value"


class JsonTransformer:
    """Round-trips JSON-native values plus dates, sets, tuples, bytes and friends.

    Values JSON cannot represent are written as ``{"__type__": tag, "value": ...}``.
    Dicts that have non-string keys, or that contain a literal ``"__type__"``
    key, are written as tagged key/value pair lists so they decode unchanged.
    """

    def __init__(self, indent: int | None = None) -> None:
        self._indent = indent

    def serialize(self, value: Any) -> str:
        return json.dumps(_encode(value), indent=self._indent, ensure_ascii=False)

    def deserialize(self, text: str) -> Any:
        return _decode(json.loads(text))


def _tag(tag: str, value: Any) -> dict[str, Any]:
    return {_TYPE_KEY: tag, _VALUE_KEY: value}


def _encode(obj: Any) -> Any:
    # bool is an int subclass; check JSON natives first
    if obj is None or isinstance(obj, (bool, int, str)):
        return obj
    if isinstance(obj, float):
        if obj != obj or obj in (float("inf"), float("-inf")):
            return _tag("float", repr(obj))
        return obj
    if isinstance(obj, dict):
        if all(isinstance(k, str) for k in obj) and _TYPE_KEY not in obj:
            return {k: _encode(v) for k, v in obj.items()}
        return _tag("dict", [[_encode(k), _encode(v)] for k, v in obj.items()])
    if isinstance(obj, list):
        return [_encode(v) for v in obj]
    if isinstance(obj, tuple):
        return _tag("tuple", [_encode(v) for v in obj])
    if isinstance(obj, frozenset):
        return _tag("frozenset", [_encode(v) for v in obj])
    if isinstance(obj, set):
        return _tag("set", [_encode(v) for v in obj])
    # datetime is a date subclass
    if isinstance(obj, datetime):
        return _tag("datetime", obj.isoformat())
    if isinstance(obj, date):
        return _tag("date", obj.isoformat())
    if isinstance(obj, time):
        return _tag("time", obj.isoformat())
    if isinstance(obj, timedelta):
        return _tag("timedelta", obj.total_seconds())
    if isinstance(obj, (bytes, bytearray)):
        return _tag("bytes", base64.b64encode(bytes(obj)).decode("ascii"))
    if isinstance(obj, Decimal):
        return _tag("decimal", str(obj))
    if isinstance(obj, UUID):
        return _tag("uuid", str(obj))
    if isinstance(obj, PurePath):
        return _tag("path", str(obj))
    raise TypeError(f"Object of type {type(obj).__name__} is not serializable")


def _decode(obj: Any) -> Any:
    if isinstance(obj, list):
        return [_decode(v) for v in obj]
    if not isinstance(obj, dict):
        return obj
    if _TYPE_KEY in obj and set(obj) == {_TYPE_KEY, _VALUE_KEY}:
        return _decode_tagged(obj[_TYPE_KEY], obj[_VALUE_KEY])
    return {k: _decode(v) for k, v in obj.items()}


def _decode_tagged(tag: str, value: Any) -> Any:
    if tag == "dict":
        return {_decode(k): _decode(v) for k, v in value}
    if tag == "tuple":
        return tuple(_decode(v) for v in value)
    if tag == "set":
        return {_decode(v) for v in value}
    if tag == "frozenset":
        return frozenset(_decode(v) for v in value)
    if tag == "datetime":
        return datetime.fromisoformat(value)
    if tag == "date":
        return date.fromisoformat(value)
    if tag == "time":
        return time.fromisoformat(value)
    if tag == "timedelta":
        return timedelta(seconds=value)
    if tag == "bytes":
        return base64.b64decode(value)
    if tag == "decimal":
        return Decimal(value)
    if tag == "uuid":
        return UUID(value)
    if tag == "path":
        return Path(value)
    if tag == "float":
        return float(value)
    raise ValueError(f"Unknown type tag in snapshot: {tag!r}")
