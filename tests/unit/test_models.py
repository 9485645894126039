"""Unit tests for the Property and Document schema models."""

from __future__ import annotations

import json

import pytest

from schemagen.config import DEFAULT_SCHEMA_URI
from schemagen.errors import SchemaSerializationError
from schemagen.models import Document, Property


class TestProperty:
    """Tests for Property construction and serialization."""

    def test_empty_property_dumps_empty(self) -> None:
        """An untyped node should serialize to an empty object."""
        assert Property().model_dump() == {}

    def test_add_type_keeps_order_and_skips_duplicates(self) -> None:
        """type should behave as an ordered set."""
        prop = Property()
        prop.add_type("string")
        prop.add_type("null")
        prop.add_type("string")
        assert prop.type == ["string", "null"]

    def test_single_type_is_bare_string(self) -> None:
        """A one-token type should be written as a string."""
        assert Property(type=["null"]).model_dump() == {"type": "null"}
        assert Property(type=["integer", "null"]).model_dump() == {"type": ["integer", "null"]}

    def test_key_order(self) -> None:
        """Keys should follow the fixed schema layout order."""
        prop = Property(
            type=["string", "null"],
            format="date-time",
            description="when",
            max_length=10,
            min_length=3,
            pattern="^x",
            enum=["a", "b"],
            const="a",
        )
        assert list(prop.model_dump()) == [
            "type",
            "format",
            "description",
            "maxLength",
            "minLength",
            "pattern",
            "enum",
            "const",
        ]

    def test_zero_values_are_kept(self) -> None:
        """Numeric zero is a set value, not an absent one."""
        prop = Property(type=["integer"], minimum=0.0, exclusive_maximum=0.0, min_length=0)
        dumped = prop.model_dump()
        assert dumped["minimum"] == 0.0
        assert dumped["exclusiveMaximum"] == 0.0
        assert dumped["minLength"] == 0

    def test_additional_properties(self) -> None:
        """additionalProperties should be written when set, including false."""
        assert Property().model_dump().get("additionalProperties") is None
        closed = Property(type=["object"], additional_properties=False)
        assert closed.model_dump()["additionalProperties"] is False
        opened = Property(type=["object"], additional_properties=True)
        assert opened.model_dump()["additionalProperties"] is True

    def test_empty_collections_omitted(self) -> None:
        """Empty properties, required, anyOf and enum should be omitted."""
        prop = Property(type=["object"], properties={}, required=[], any_of=[], enum=[])
        assert prop.model_dump() == {"type": "object"}

    def test_nested_nodes(self) -> None:
        """Children should be serialized recursively with camelCase keys."""
        prop = Property(
            type=["object"],
            properties={
                "tags": Property(type=["array"], items=Property(type=["string"])),
                "ref": Property(
                    type=["null"],
                    any_of=[Property(type=["integer"]), Property(type=["null"])],
                ),
            },
        )
        assert prop.model_dump() == {
            "type": "object",
            "properties": {
                "tags": {"type": "array", "items": {"type": "string"}},
                "ref": {"type": "null", "anyOf": [{"type": "integer"}, {"type": "null"}]},
            },
        }

    def test_accepts_aliases(self) -> None:
        """Properties should validate from camelCase keys and a string type."""
        prop = Property.model_validate(
            {"type": "integer", "multipleOf": 2.0, "exclusiveMinimum": 1.0}
        )
        assert prop.type == ["integer"]
        assert prop.multiple_of == 2.0
        assert prop.exclusive_minimum == 1.0

    def test_const_keeps_declared_type(self) -> None:
        """Integer and float const values should not be coerced into each other."""
        assert Property.model_validate({"const": 42}).const == 42
        assert isinstance(Property.model_validate({"const": 42}).const, int)
        assert isinstance(Property.model_validate({"const": 1.5}).const, float)
        assert Property.model_validate({"const": "x"}).const == "x"


class TestDocument:
    """Tests for Document."""

    def test_schema_written_first(self) -> None:
        """$schema should precede every other key."""
        doc = Document(type=["boolean", "null"])
        doc.set_default_schema(DEFAULT_SCHEMA_URI)
        assert list(doc.model_dump()) == ["$schema", "type"]

    def test_set_default_schema_does_not_overwrite(self) -> None:
        """An existing $schema should be kept."""
        doc = Document(schema_uri="https://json-schema.org/draft/2020-12/schema")
        doc.set_default_schema(DEFAULT_SCHEMA_URI)
        assert doc.schema_uri == "https://json-schema.org/draft/2020-12/schema"

    def test_set_default_schema_fills_empty(self) -> None:
        """An empty $schema should be filled."""
        doc = Document()
        doc.set_default_schema(DEFAULT_SCHEMA_URI)
        assert doc.schema_uri == DEFAULT_SCHEMA_URI

    def test_to_json_layout(self) -> None:
        """JSON text should be indented with four spaces."""
        doc = Document(schema_uri=DEFAULT_SCHEMA_URI, type=["integer"])
        expected = (
            "{\n"
            '    "$schema": "http://json-schema.org/schema#",\n'
            '    "type": "integer"\n'
            "}"
        )
        assert doc.to_json() == expected
        assert str(doc) == expected

    def test_to_json_keeps_unicode(self) -> None:
        """Non-ASCII descriptions should be written as-is."""
        doc = Document(type=["string"], description="Größe")
        assert "Größe" in doc.to_json()

    def test_to_json_custom_indent(self) -> None:
        """indent should control the JSON indentation."""
        doc = Document(type=["integer"])
        assert doc.to_json(indent=2) == '{\n  "type": "integer"\n}'

    def test_unserializable_const_raises(self) -> None:
        """A non-JSON value in const is a construction defect."""
        doc = Document(type=["string"])
        doc.const = object()  # type: ignore[assignment]
        with pytest.raises(SchemaSerializationError) as exc_info:
            doc.to_json()

        assert exc_info.value.user_message == "Schema document could not be serialized"

    def test_round_trip(self) -> None:
        """Parsing serialized text should rebuild the same tree."""
        doc = Document(
            schema_uri=DEFAULT_SCHEMA_URI,
            type=["object", "null"],
            properties={
                "name": Property(type=["string", "null"], min_length=3, enum=["a", "b"]),
                "count": Property(
                    type=["null"],
                    any_of=[Property(type=["integer"]), Property(type=["null"])],
                ),
                "score": Property(type=["number", "null"], minimum=0.0, const=1.5),
            },
            required=["name"],
            additional_properties=False,
        )
        parsed = Document.from_json(doc.to_json())
        assert parsed.model_dump() == doc.model_dump()
        assert parsed.properties is not None
        assert parsed.properties["count"].any_of[0].type == ["integer"]
        assert json.loads(parsed.to_json()) == json.loads(doc.to_json())
