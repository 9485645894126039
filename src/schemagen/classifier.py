"""Type classifier: structural kinds to JSON Schema vocabulary.

The classifier maps a ``TypeDescriptor`` to one JSON Schema type token,
an optional format hint and the refined kind used for dispatch. A table
keyed by exact type identity (qualified name) is consulted first, so that
for instance ``datetime.datetime`` becomes a ``date-time`` string; the
structural kind table is the fallback.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import NamedTuple

from schemagen.descriptors import Kind, TypeDescriptor

# JSON Schema vocabulary tokens
BOOLEAN = "boolean"
INTEGER = "integer"
NUMBER = "number"
STRING = "string"
ARRAY = "array"
OBJECT = "object"
NULL = "null"

VOCABULARY = frozenset({BOOLEAN, INTEGER, NUMBER, STRING, ARRAY, OBJECT, NULL})

FORMAT_MAPPING: Mapping[str, tuple[str, str]] = MappingProxyType(
    {
        "datetime.datetime": (STRING, "date-time"),
        "datetime.date": (STRING, "date"),
        "datetime.time": (STRING, "time"),
        "uuid.UUID": (STRING, "uuid"),
    }
)
"""Type identity -> (token, format). Matched on exact qualified name only."""

KIND_MAPPING: Mapping[Kind, str] = MappingProxyType(
    {
        Kind.BOOL: BOOLEAN,
        Kind.INT: INTEGER,
        Kind.FLOAT: NUMBER,
        Kind.STRING: STRING,
        Kind.BYTES: STRING,
        Kind.SEQUENCE: ARRAY,
        Kind.MAP: OBJECT,
        Kind.RECORD: OBJECT,
    }
)

PRIMITIVE_KINDS = frozenset({Kind.BOOL, Kind.INT, Kind.FLOAT, Kind.STRING})

TOKEN_KINDS: Mapping[str, Kind] = MappingProxyType(
    {
        BOOLEAN: Kind.BOOL,
        INTEGER: Kind.INT,
        NUMBER: Kind.FLOAT,
        STRING: Kind.STRING,
    }
)
"""Kind an identity rule refines to, by token. Other tokens are opaque."""


class Classification(NamedTuple):
    """Result of classifying a type.

    ``token`` is empty for untyped values, ``format`` is empty unless the
    type identity carries one.
    """

    token: str
    format: str
    kind: Kind


def is_primitive(kind: Kind) -> bool:
    """Return True for kinds rendered as a single scalar JSON value."""
    return kind in PRIMITIVE_KINDS


class TypeClassifier:
    """Classifies type descriptors against immutable lookup tables.

    Args:
        formats: Extra identity rules merged over ``FORMAT_MAPPING``.

    Example:
        >>> classifier = TypeClassifier()
        >>> classifier.classify(describe(datetime))
        Classification(token='string', format='date-time', kind=<Kind.STRING: 'string'>)
    """

    def __init__(self, formats: Mapping[str, tuple[str, str]] | None = None) -> None:
        self._formats: Mapping[str, tuple[str, str]] = MappingProxyType(
            {**FORMAT_MAPPING, **(formats or {})}
        )

    def classify(self, descriptor: TypeDescriptor) -> Classification:
        """Classify a descriptor.

        Args:
            descriptor: Descriptor of the type to classify.

        Returns:
            Token, format and refined kind. Identity rules refine to the kind of
            their token; non-scalar tokens are opaque (``Kind.UNKNOWN``) and are
            not walked structurally.
        """
        rule = self._formats.get(descriptor.qualified_name) if descriptor.qualified_name else None
        if rule is not None:
            token, fmt = rule
            return Classification(token, fmt, TOKEN_KINDS.get(token, Kind.UNKNOWN))

        return Classification(KIND_MAPPING.get(descriptor.kind, ""), "", descriptor.kind)
