"""Schema builder: recursive type-to-schema walk.

``SchemaBuilder.read`` fills a ``Property`` for a type descriptor:

1. Classify the type and record its token and format.
2. Mark the node nullable (untyped nodes stay without any type).
3. Dispatch on the structural kind: sequences, maps and records get their
   own handling; an optional reference is read through to its referent.
4. An optional reference to a primitive is rewritten into
   ``{"type": "null", "anyOf": [<primitive>, {"type": "null"}]}``.

Records are inlined at every occurrence. A record reached again while it
is still being read raises ``CyclicTypeError`` instead of recursing forever.
"""

from __future__ import annotations

import logging

from schemagen.classifier import NULL, OBJECT, TypeClassifier, is_primitive
from schemagen.config import GeneratorConfig
from schemagen.descriptors import Kind, TypeDescriptor
from schemagen.errors import CyclicTypeError
from schemagen.models import Property
from schemagen.tags import DESCRIPTION, OMIT_EMPTY, REQUIRED, SKIP_NAME, parse_name_tag
from schemagen.validators import add_validators

logger = logging.getLogger(__name__)

WILDCARD_KEY = ".*"
"""Synthetic ``properties`` key describing every value of a map."""


class SchemaBuilder:
    """Builds Property trees from type descriptors.

    A builder tracks the records it is currently inside, so an instance
    must not be shared between concurrent generation calls.

    Args:
        config: Generator configuration. Defaults to ``GeneratorConfig()``.
        classifier: Type classifier. Defaults to one built from
            ``config.formats``.

    Example:
        >>> builder = SchemaBuilder()
        >>> prop = Property()
        >>> builder.read(prop, describe(list[int]))
        >>> prop.model_dump()
        {'type': ['array', 'null'], 'items': {'type': ['integer', 'null']}}
    """

    def __init__(
        self,
        config: GeneratorConfig | None = None,
        classifier: TypeClassifier | None = None,
    ) -> None:
        self.config = config or GeneratorConfig()
        self.classifier = classifier or TypeClassifier(self.config.formats)
        self._path: list[str] = []
        self._active: list[TypeDescriptor] = []

    def read(self, prop: Property, descriptor: TypeDescriptor) -> None:
        """Populate ``prop`` in place for ``descriptor``.

        Args:
            prop: Node to fill.
            descriptor: Type to describe.

        Raises:
            CyclicTypeError: If a record contains itself.
        """
        token, fmt, kind = self.classifier.classify(descriptor)
        if token:
            prop.add_type(token)
        if fmt:
            prop.format = fmt

        if kind is Kind.OPTIONAL:
            self._read_optional(prop, descriptor)
            return

        if token:
            prop.add_type(NULL)

        if kind is Kind.SEQUENCE:
            self._read_sequence(prop, descriptor)
        elif kind is Kind.MAP:
            self._read_map(prop, descriptor)
        elif kind is Kind.RECORD:
            self._read_record(prop, descriptor)

    def _read_optional(self, prop: Property, descriptor: TypeDescriptor) -> None:
        referent = descriptor.element
        if referent is None:
            return
        self.read(prop, referent)

        if not is_primitive(self.classifier.classify(referent).kind):
            return
        primitive = Property(
            type=[token for token in prop.type if token != NULL],
            format=prop.format,
        )
        prop.any_of = [primitive, Property(type=[NULL])]
        prop.type = [NULL]
        prop.format = ""

    def _read_sequence(self, prop: Property, descriptor: TypeDescriptor) -> None:
        element = descriptor.element
        if element is None:
            return
        token, _, kind = self.classifier.classify(element)
        if token or kind is Kind.OPTIONAL:
            prop.items = Property()
            self.read(prop.items, element)

    def _read_map(self, prop: Property, descriptor: TypeDescriptor) -> None:
        value = descriptor.element
        if value is None:
            prop.additional_properties = True
            return
        token, fmt, _ = self.classifier.classify(value)
        if token:
            prop.properties = {WILDCARD_KEY: Property(type=[token], format=fmt)}
            prop.additional_properties = False
        else:
            prop.additional_properties = True

    def _read_record(self, prop: Property, descriptor: TypeDescriptor) -> None:
        name = descriptor.display_name
        if descriptor in self._active:
            start = self._active.index(descriptor)
            path = [self._path[i] for i in range(start * 2, len(self._path))] + [name]
            raise CyclicTypeError(
                name,
                path=path,
                internal_details=f"record {descriptor.python_type!r} reached through {path}",
            )

        prop.type = [OBJECT, NULL]
        prop.properties = {}
        prop.additional_properties = False

        logger.debug("Reading record %s", name)
        self._active.append(descriptor)
        self._path.append(name)
        try:
            for field in descriptor.fields():
                field_name, options = parse_name_tag(field.tags.get(self.config.name_tag, ""))
                if field_name == SKIP_NAME:
                    continue
                if not field_name:
                    field_name = field.name

                child = Property()
                self._path.append(field_name)
                try:
                    self.read(child, field.type)
                finally:
                    self._path.pop()
                prop.properties[field_name] = child

                description = field.tags.get(DESCRIPTION)
                if description:
                    child.description = description
                add_validators(child, field.tags, enum_separator=self.config.enum_separator)

                _, required = field.tags.lookup(REQUIRED)
                if required and OMIT_EMPTY not in options and field_name not in prop.required:
                    prop.required.append(field_name)
        finally:
            self._path.pop()
            self._active.pop()
