"""Schema generation entry points.

This module provides the public functions turning a Python type into a
JSON Schema document:

- generate: JSON text for a type
- generate_document: the Document tree, before serialization
- export_schema: generate and write the JSON text to a file
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from schemagen.builder import SchemaBuilder
from schemagen.config import GeneratorConfig
from schemagen.descriptors import describe
from schemagen.models import Document

logger = logging.getLogger(__name__)


def generate_document(
    root: Any,
    *,
    document: Document | None = None,
    config: GeneratorConfig | None = None,
) -> Document:
    """Build the schema Document for a type.

    Args:
        root: Type annotation to describe (a record class, ``list[int]``...).
        document: Optional document to fill. Its ``$schema`` is kept when
            already set.
        config: Generator configuration.

    Returns:
        The populated Document.

    Raises:
        CyclicTypeError: If a record type contains itself.

    Example:
        >>> doc = generate_document(User)
        >>> doc.required
        ['name']
    """
    config = config or GeneratorConfig()
    document = document if document is not None else Document()
    document.set_default_schema(config.schema_uri)

    descriptor = describe(root)
    SchemaBuilder(config).read(document, descriptor)

    logger.info(
        "Generated schema for %s (%d properties)",
        descriptor.display_name,
        len(document.properties or {}),
    )
    return document


def generate(root: Any, *, config: GeneratorConfig | None = None) -> str:
    """Generate the JSON Schema text for a type.

    Args:
        root: Type annotation to describe.
        config: Generator configuration.

    Returns:
        Pretty-printed JSON text.

    Raises:
        CyclicTypeError: If a record type contains itself.
        SchemaSerializationError: If the built document cannot be encoded.

    Example:
        >>> print(generate(int))
        {
            "$schema": "http://json-schema.org/schema#",
            "type": [
                "integer",
                "null"
            ]
        }
    """
    config = config or GeneratorConfig()
    return generate_document(root, config=config).to_json(indent=config.indent)


def export_schema(
    root: Any,
    output_path: Path | str,
    *,
    config: GeneratorConfig | None = None,
) -> Document:
    """Generate the schema for a type and write it to a file.

    Args:
        root: Type annotation to describe.
        output_path: Path of the JSON file. Parent directories are created
            as needed.
        config: Generator configuration.

    Returns:
        The generated Document.

    Example:
        >>> export_schema(User, Path("schemas/user.schema.json"))
    """
    config = config or GeneratorConfig()
    document = generate_document(root, config=config)
    _write_schema_file(document.to_json(indent=config.indent), output_path)
    return document


def _write_schema_file(text: str, path: Path | str) -> None:
    """Write schema text to a JSON file.

    Args:
        text: Serialized schema.
        path: Output file path.
    """
    output_path = Path(path)

    # Create parent directories if needed
    output_path.parent.mkdir(parents=True, exist_ok=True)

    output_path.write_text(text + "\n", encoding="utf-8")
    logger.debug("Wrote schema to %s", output_path)
