"""Field annotations ("tags") for record fields.

A record field carries a flat set of string key/value annotations that
steer its schema: the external name and its options, the required marker,
a description and validator values. ``Tags`` is the lookup capability the
builder reads them through, independent of where they were declared.

Example:
    >>> @dataclass
    ... class User:
    ...     name: Annotated[str, Tags(json="name", required="true", minLength=3)]
    ...     nickname: str = field(default="", metadata=Tags(json="nick,omitempty"))
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

NAME_TAG = "json"
"""Default key holding the external field name and its options."""

SKIP_NAME = "-"
"""Name sentinel that excludes a field from the schema."""

OMIT_EMPTY = "omitempty"
REQUIRED = "required"
DESCRIPTION = "description"

# Validator keys
MIN_LENGTH = "minLength"
MAX_LENGTH = "maxLength"
PATTERN = "pattern"
ENUM = "enum"
CONST = "const"
MULTIPLE_OF = "multipleOf"
MINIMUM = "min"
MAXIMUM = "max"
EXCLUSIVE_MINIMUM = "exclusiveMin"
EXCLUSIVE_MAXIMUM = "exclusiveMax"


class Tags(Mapping[str, str]):
    """Immutable string annotations attached to a record field.

    Values that are not strings are stored as ``str(value)`` so that
    ``Tags(minLength=3)`` and ``Tags(minLength="3")`` are equivalent.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[str, Any] | None = None, /, **kwargs: Any) -> None:
        merged: dict[str, Any] = dict(values or {})
        merged.update(kwargs)
        self._values: dict[str, str] = {
            str(key): value if isinstance(value, str) else str(value)
            for key, value in merged.items()
        }

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __hash__(self) -> int:
        return hash(frozenset(self._values.items()))

    def __repr__(self) -> str:
        return f"Tags({self._values!r})"

    def lookup(self, key: str) -> tuple[str, bool]:
        """Return the value for ``key`` and whether it was present at all.

        An annotation may be present with an empty value, which is different
        from being absent (the ``required`` marker only needs to be present).
        """
        if key in self._values:
            return self._values[key], True
        return "", False

    def merged(self, other: Mapping[str, Any]) -> Tags:
        """Return new tags holding ``other``'s keys under this instance's keys."""
        return Tags(other, **self._values) if other else self


EMPTY_TAGS = Tags()


def parse_name_tag(value: str) -> tuple[str, frozenset[str]]:
    """Split a name annotation into the name and its options.

    Args:
        value: Annotation text such as ``"id,omitempty"`` or ``",omitempty"``.

    Returns:
        Tuple of the name (possibly empty) and the set of options.

    Example:
        >>> parse_name_tag("id,omitempty")
        ('id', frozenset({'omitempty'}))
    """
    name, sep, rest = value.partition(",")
    if not sep:
        return name, frozenset()
    return name, frozenset(option for option in rest.split(",") if option)
