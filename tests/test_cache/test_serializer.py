"""Tests for the default JSON transformer."""

import json
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from pathlib import Path
from uuid import UUID

import pytest

from cachescribe.cache.serializer import JsonTransformer


@pytest.fixture
def transformer():
    return JsonTransformer()


class TestJsonTransformer:
    def test_plain_json_untouched(self, transformer):
        value = {"a": [1, 2.5, "x", None, True]}
        text = transformer.serialize(value)
        assert json.loads(text) == value
        assert transformer.deserialize(text) == value

    def test_datetime_keeps_timezone(self, transformer):
        value = datetime(2024, 1, 2, 3, 4, 5, 678, tzinfo=timezone.utc)
        result = transformer.deserialize(transformer.serialize(value))
        assert result == value
        assert result.tzinfo is not None

    def test_temporal_types(self, transformer):
        value = [date(2024, 2, 29), time(13, 45), timedelta(hours=1, seconds=3)]
        assert transformer.deserialize(transformer.serialize(value)) == value

    def test_collections(self, transformer):
        value = {"set": {1, 2}, "frozen": frozenset({"a"}), "tuple": (1, (2, 3))}
        result = transformer.deserialize(transformer.serialize(value))
        assert result == value
        assert isinstance(result["tuple"][1], tuple)

    def test_scalars(self, transformer):
        value = [
            b"\x00\xff",
            Decimal("3.14"),
            UUID("12345678-1234-5678-1234-567812345678"),
            Path("a/b"),
        ]
        assert transformer.deserialize(transformer.serialize(value)) == value

    def test_non_finite_floats(self, transformer):
        result = transformer.deserialize(transformer.serialize([float("inf"), float("-inf")]))
        assert result == [float("inf"), float("-inf")]

    def test_non_string_dict_keys(self, transformer):
        value = {1: "one", (2, 3): "pair"}
        assert transformer.deserialize(transformer.serialize(value)) == value

    def test_dict_with_type_key_is_escaped(self, transformer):
        value = {"__type__": "datetime", "value": "not a date"}
        assert transformer.deserialize(transformer.serialize(value)) == value

    def test_unserializable_raises(self, transformer):
        with pytest.raises(TypeError):
            transformer.serialize(object())

    def test_unknown_tag_raises(self, transformer):
        with pytest.raises(ValueError):
            transformer.deserialize('{"__type__": "nope", "value": 1}')

    def test_indent(self):
        text = JsonTransformer(indent=2).serialize({"a": 1})
        assert text == '{\n  "a": 1\n}'
