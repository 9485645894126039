"""schemagen: JSON Schema generation from Python types.

This package provides:
- generate / generate_document / export_schema: type -> JSON Schema
- Document and Property: the schema tree models
- Tags: per-field annotations (name, required marker, validators)
- GeneratorConfig: generation settings
"""

from __future__ import annotations

__version__ = "0.1.0"

# Type walk
from schemagen.builder import WILDCARD_KEY, SchemaBuilder
from schemagen.classifier import Classification, TypeClassifier, is_primitive

# Configuration
from schemagen.config import DEFAULT_SCHEMA_URI, GeneratorConfig
from schemagen.descriptors import FieldDescriptor, Kind, TypeDescriptor, describe

# Error types
from schemagen.errors import (
    CyclicTypeError,
    SchemaGenError,
    SchemaSerializationError,
    UnresolvedTypeError,
)

# Entry points
from schemagen.generator import export_schema, generate, generate_document

# Schema models
from schemagen.models import Document, Property
from schemagen.tags import Tags, parse_name_tag

__all__ = [
    "__version__",
    # Entry points
    "generate",
    "generate_document",
    "export_schema",
    # Models
    "Document",
    "Property",
    # Annotations
    "Tags",
    "parse_name_tag",
    # Type walk
    "SchemaBuilder",
    "TypeClassifier",
    "Classification",
    "is_primitive",
    "describe",
    "Kind",
    "TypeDescriptor",
    "FieldDescriptor",
    "WILDCARD_KEY",
    # Configuration
    "GeneratorConfig",
    "DEFAULT_SCHEMA_URI",
    # Errors
    "SchemaGenError",
    "CyclicTypeError",
    "SchemaSerializationError",
    "UnresolvedTypeError",
]
