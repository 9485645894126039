"""Schema tree models: Document and Property.

A ``Property`` is one node of the generated JSON Schema (a field, an array
element or the root). ``Document`` is the root node plus the ``$schema``
dialect marker. Both serialize to the schema layout directly through
``model_dump()``: keys in a fixed order, empty values omitted, and a
single-token ``type`` written as a bare string.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_serializer

from schemagen.config import DEFAULT_INDENT
from schemagen.errors import SchemaSerializationError


class Property(BaseModel):
    """One JSON Schema node.

    Numeric validators are floats and length bounds are integers; None
    means "not set", so a zero bound is still written out.
    ``additional_properties`` is None unless a record closed the node
    (False) or a map accepts arbitrary values (True).
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    type: list[str] = Field(default_factory=list)
    format: str = ""
    items: Property | None = None
    properties: dict[str, Property] | None = None
    required: list[str] = Field(default_factory=list)
    additional_properties: bool | None = Field(default=None, alias="additionalProperties")
    description: str = ""
    any_of: list[Property] = Field(default_factory=list, alias="anyOf")

    # numeric validators
    multiple_of: float | None = Field(default=None, alias="multipleOf")
    maximum: float | None = None
    minimum: float | None = None
    exclusive_maximum: float | None = Field(default=None, alias="exclusiveMaximum")
    exclusive_minimum: float | None = Field(default=None, alias="exclusiveMinimum")
    # string validators
    max_length: int | None = Field(default=None, alias="maxLength")
    min_length: int | None = Field(default=None, alias="minLength")
    pattern: str = ""
    enum: list[str] = Field(default_factory=list)

    # strings and numbers only
    const: str | int | float | None = None

    @field_validator("type", mode="before")
    @classmethod
    def coerce_single_type(cls, v: Any) -> Any:
        """Accept the bare-string form of a one-token ``type``."""
        if isinstance(v, str):
            return [v]
        return v

    def add_type(self, token: str) -> None:
        """Append a vocabulary token unless it is already present."""
        if token not in self.type:
            self.type.append(token)

    def schema_fields(self) -> dict[str, Any]:
        """Return the node as a schema-shaped dict, omitting empty values."""
        result: dict[str, Any] = {}
        for name, info in type(self).model_fields.items():
            value = getattr(self, name)
            if value is None or (not isinstance(value, bool) and value in ("", [], {})):
                continue
            key = info.alias or name
            if name == "type" and len(value) == 1:
                result[key] = value[0]
            elif isinstance(value, Property):
                result[key] = value.schema_fields()
            elif isinstance(value, dict):
                result[key] = {k: child.schema_fields() for k, child in value.items()}
            elif name == "any_of":
                result[key] = [child.schema_fields() for child in value]
            elif isinstance(value, list):
                result[key] = list(value)
            else:
                result[key] = value
        return result

    @model_serializer(mode="plain")
    def serialize(self) -> dict[str, Any]:
        """Serialize to the JSON Schema layout."""
        return self.schema_fields()


class Document(Property):
    """Top-level schema document.

    Attributes:
        schema_uri: Dialect identifier, written as ``$schema`` before every
            other key. Filled once by ``set_default_schema``.

    Example:
        >>> doc = generate_document(User)
        >>> print(doc.to_json())
        {
            "$schema": "http://json-schema.org/schema#",
            "type": [
                "object",
                "null"
            ],
            ...
    """

    schema_uri: str = Field(default="", alias="$schema")

    def set_default_schema(self, uri: str) -> None:
        """Set ``$schema`` unless the document already carries one."""
        if not self.schema_uri:
            self.schema_uri = uri

    def schema_fields(self) -> dict[str, Any]:
        fields = super().schema_fields()
        schema_uri = fields.pop("$schema", None)
        if schema_uri is None:
            return fields
        return {"$schema": schema_uri, **fields}

    def to_json(self, indent: int = DEFAULT_INDENT) -> str:
        """Encode the document as pretty-printed JSON text.

        Args:
            indent: Spaces per indentation level.

        Returns:
            JSON text; non-ASCII characters are kept as-is.

        Raises:
            SchemaSerializationError: If a node holds a value JSON cannot
                represent.
        """
        try:
            return json.dumps(self.model_dump(), indent=indent, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise SchemaSerializationError(
                "Schema document could not be serialized",
                internal_details=str(e),
            ) from e

    @classmethod
    def from_json(cls, text: str | bytes) -> Document:
        """Parse JSON text produced by ``to_json`` back into a Document."""
        return cls.model_validate(json.loads(text))

    def __str__(self) -> str:
        return self.to_json()
