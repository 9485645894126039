"""Validator extraction from field annotations.

Each validator is read from its own annotation and parsed according to
the value it describes. A missing or malformed annotation leaves the
validator unset; it is never an error. Validators only apply to nodes
whose type allows them: length, pattern and enum constraints to strings,
range and multiple-of constraints to numbers and integers, ``const`` to
both.
"""

from __future__ import annotations

import math
from collections.abc import Mapping

from schemagen import tags as tag_keys
from schemagen.classifier import INTEGER, NULL, NUMBER, STRING
from schemagen.config import DEFAULT_ENUM_SEPARATOR
from schemagen.models import Property


def add_validators(
    prop: Property,
    tags: Mapping[str, str],
    *,
    enum_separator: str = DEFAULT_ENUM_SEPARATOR,
) -> None:
    """Attach annotation validators to a node, gated by its type tokens.

    For a nullable reference to a primitive the node itself only allows
    ``null``; the validators then go to its non-null ``anyOf`` alternative.

    Args:
        prop: Node to update in place.
        tags: Field annotations.
        enum_separator: Delimiter splitting the ``enum`` annotation.
    """
    target = _validation_target(prop)
    for token in target.type:
        if token == STRING:
            _add_string_validators(target, tags, enum_separator)
        elif token in (NUMBER, INTEGER):
            _add_number_validators(target, tags, token)


def _validation_target(prop: Property) -> Property:
    for alternative in prop.any_of:
        if any(token != NULL for token in alternative.type):
            return alternative
    return prop


def _add_string_validators(prop: Property, tags: Mapping[str, str], enum_separator: str) -> None:
    min_length = parse_int(tags.get(tag_keys.MIN_LENGTH))
    if min_length is not None:
        prop.min_length = min_length

    max_length = parse_int(tags.get(tag_keys.MAX_LENGTH))
    if max_length is not None:
        prop.max_length = max_length

    pattern = tags.get(tag_keys.PATTERN)
    if pattern:
        prop.pattern = pattern

    enum = tags.get(tag_keys.ENUM)
    if enum:
        prop.enum = enum.split(enum_separator)

    const = tags.get(tag_keys.CONST)
    if const:
        prop.const = const


def _add_number_validators(prop: Property, tags: Mapping[str, str], token: str) -> None:
    for key, attribute in (
        (tag_keys.MULTIPLE_OF, "multiple_of"),
        (tag_keys.MINIMUM, "minimum"),
        (tag_keys.MAXIMUM, "maximum"),
        (tag_keys.EXCLUSIVE_MINIMUM, "exclusive_minimum"),
        (tag_keys.EXCLUSIVE_MAXIMUM, "exclusive_maximum"),
    ):
        value = parse_float(tags.get(key))
        if value is not None:
            setattr(prop, attribute, value)

    raw = tags.get(tag_keys.CONST)
    const = parse_float(raw) if token == NUMBER else parse_int(raw)
    if const is not None:
        prop.const = const


def parse_int(value: str | None) -> int | None:
    """Parse a base-10 integer annotation; None when absent or malformed."""
    if value is None:
        return None
    try:
        return int(value, 10)
    except ValueError:
        return None


def parse_float(value: str | None) -> float | None:
    """Parse a finite float annotation; None when absent or malformed."""
    if value is None:
        return None
    try:
        number = float(value)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number
