"""Generator configuration model.

Settings that shape the generated document without changing the type
walk itself.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from schemagen.classifier import VOCABULARY
from schemagen.tags import NAME_TAG

DEFAULT_SCHEMA_URI = "http://json-schema.org/schema#"
"""Dialect identifier written to ``$schema``."""

DEFAULT_INDENT = 4
DEFAULT_ENUM_SEPARATOR = "|"


class GeneratorConfig(BaseModel):
    """Configuration for schema generation.

    Attributes:
        schema_uri: Value written to ``$schema`` when the document has none
        indent: Spaces per indentation level of the JSON text
        enum_separator: Delimiter splitting ``enum`` annotation values
        name_tag: Annotation key holding the external name and options
        formats: Extra type-identity rules, qualified type name to
            (token, format), e.g. ``{"ipaddress.IPv4Address": ("string", "ipv4")}``

    Example:
        >>> config = GeneratorConfig(
        ...     schema_uri="https://json-schema.org/draft/2020-12/schema",
        ...     enum_separator=",",
        ... )
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    schema_uri: str = Field(default=DEFAULT_SCHEMA_URI, description="$schema dialect URI")
    indent: int = Field(default=DEFAULT_INDENT, ge=0, le=16, description="JSON indentation")
    enum_separator: str = Field(
        default=DEFAULT_ENUM_SEPARATOR,
        min_length=1,
        description="Separator for enum annotation values",
    )
    name_tag: str = Field(default=NAME_TAG, min_length=1, description="Name annotation key")
    formats: dict[str, tuple[str, str]] = Field(
        default_factory=dict,
        description="Extra type identity format rules",
    )

    @field_validator("formats")
    @classmethod
    def validate_format_tokens(cls, v: dict[str, tuple[str, str]]) -> dict[str, tuple[str, str]]:
        """Reject format rules whose token is not a JSON Schema type."""
        for type_name, (token, _fmt) in v.items():
            if token not in VOCABULARY:
                msg = f"Format rule for '{type_name}' uses unknown type '{token}'"
                raise ValueError(msg)
        return v
