"""Type descriptors: the type graph the schema builder walks.

``describe()`` turns a Python type annotation into a ``TypeDescriptor``
that exposes the two capabilities the builder needs:

- classify itself as one structural ``Kind``
- enumerate its fields (name, type and tags) when it is a record

Records are dataclasses, pydantic models and ``TypedDict`` classes. Their
fields are resolved lazily, so self-referential records can be described
(the builder is responsible for refusing to inline them forever).
"""

from __future__ import annotations

import collections
import collections.abc
import dataclasses
import inspect
import types
import typing
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, NotRequired, Required, Union

import annotated_types
from pydantic import BaseModel

from schemagen import tags as tag_keys
from schemagen.errors import UnresolvedTypeError
from schemagen.tags import EMPTY_TAGS, Tags


class Kind(str, Enum):
    """Structural kind of a type, driving schema dispatch."""

    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STRING = "string"
    BYTES = "bytes"
    SEQUENCE = "sequence"
    MAP = "map"
    RECORD = "record"
    OPTIONAL = "optional"
    UNKNOWN = "unknown"


_SEQUENCE_ORIGINS = frozenset(
    {
        list,
        tuple,
        set,
        frozenset,
        collections.deque,
        collections.abc.Sequence,
        collections.abc.MutableSequence,
        collections.abc.Set,
        collections.abc.MutableSet,
        collections.abc.Collection,
        collections.abc.Iterable,
    }
)

_MAP_ORIGINS = frozenset(
    {
        dict,
        collections.OrderedDict,
        collections.defaultdict,
        collections.abc.Mapping,
        collections.abc.MutableMapping,
    }
)

_FIELD_WRAPPERS = (Required, NotRequired)

# annotated_types constraint -> (tag key, attribute holding the bound)
_CONSTRAINT_TAGS: tuple[tuple[type, str, str], ...] = (
    (annotated_types.MinLen, tag_keys.MIN_LENGTH, "min_length"),
    (annotated_types.MaxLen, tag_keys.MAX_LENGTH, "max_length"),
    (annotated_types.Ge, tag_keys.MINIMUM, "ge"),
    (annotated_types.Le, tag_keys.MAXIMUM, "le"),
    (annotated_types.Gt, tag_keys.EXCLUSIVE_MINIMUM, "gt"),
    (annotated_types.Lt, tag_keys.EXCLUSIVE_MAXIMUM, "lt"),
    (annotated_types.MultipleOf, tag_keys.MULTIPLE_OF, "multiple_of"),
)


@dataclasses.dataclass(frozen=True)
class TypeDescriptor:
    """Structural description of a Python type.

    Attributes:
        python_type: The annotation this descriptor was built from.
        kind: Structural kind used for dispatch.
        element: Referent of an OPTIONAL, element of a SEQUENCE or value
            of a MAP; None for every other kind.
    """

    python_type: Any
    kind: Kind
    element: TypeDescriptor | None = None

    @property
    def qualified_name(self) -> str:
        """Return ``module.qualname`` for plain classes, empty otherwise."""
        tp = self.python_type
        if not isinstance(tp, type) or typing.get_origin(tp) is not None:
            return ""
        return f"{tp.__module__}.{tp.__qualname__}"

    @property
    def display_name(self) -> str:
        """Return a short human readable name of the type."""
        tp = self.python_type
        if isinstance(tp, type) and typing.get_origin(tp) is None:
            return tp.__name__
        return repr(tp)

    def fields(self) -> list[FieldDescriptor]:
        """Enumerate record fields in declaration order.

        Returns:
            Field descriptors; empty for anything that is not a record.
        """
        if self.kind is not Kind.RECORD:
            return []
        return record_fields(self.python_type)


@dataclasses.dataclass(frozen=True)
class FieldDescriptor:
    """One declared field of a record type.

    Attributes:
        name: Declared Python identifier of the field.
        type: Descriptor of the field's type.
        tags: Annotations attached to the field.
    """

    name: str
    type: TypeDescriptor
    tags: Tags = EMPTY_TAGS


def describe(annotation: Any) -> TypeDescriptor:
    """Build a descriptor for a Python type annotation.

    Args:
        annotation: A type or typing construct (``list[int]``, ``T | None``...).

    Returns:
        TypeDescriptor for the annotation. Types that have no structural
        meaning are described as ``Kind.UNKNOWN``.
    """
    tp = _strip_wrappers(annotation)
    origin = typing.get_origin(tp)

    if tp is Any or tp is object or isinstance(tp, typing.TypeVar):
        return TypeDescriptor(python_type=tp, kind=Kind.UNKNOWN)

    if origin is Union or origin is types.UnionType:
        return _describe_union(tp)

    if origin in _SEQUENCE_ORIGINS:
        return TypeDescriptor(
            python_type=tp,
            kind=Kind.SEQUENCE,
            element=_sequence_element(origin, typing.get_args(tp)),
        )

    if origin in _MAP_ORIGINS:
        args = typing.get_args(tp)
        value = describe(args[1]) if len(args) == 2 else describe(Any)
        return TypeDescriptor(python_type=tp, kind=Kind.MAP, element=value)

    if origin is not None and is_record(origin):
        # Parametrized generic record, e.g. Page[int]
        return TypeDescriptor(python_type=tp, kind=Kind.RECORD)

    if isinstance(tp, type):
        return _describe_class(tp)

    return TypeDescriptor(python_type=tp, kind=Kind.UNKNOWN)


def _strip_wrappers(annotation: Any) -> Any:
    tp = annotation
    while True:
        origin = typing.get_origin(tp)
        if origin is Annotated or origin in _FIELD_WRAPPERS:
            tp = typing.get_args(tp)[0]
        elif isinstance(tp, typing.NewType):
            tp = tp.__supertype__
        else:
            return tp


def _describe_union(tp: Any) -> TypeDescriptor:
    args = typing.get_args(tp)
    members = [arg for arg in args if arg is not type(None)]
    if len(members) != 1:
        return TypeDescriptor(python_type=tp, kind=Kind.UNKNOWN)

    referent = describe(members[0])
    if len(members) == len(args):
        return referent
    if referent.kind is Kind.UNKNOWN and referent.python_type in (Any, object):
        return TypeDescriptor(python_type=tp, kind=Kind.UNKNOWN)
    return TypeDescriptor(python_type=tp, kind=Kind.OPTIONAL, element=referent)


def _sequence_element(origin: Any, args: tuple[Any, ...]) -> TypeDescriptor:
    if not args:
        return describe(Any)
    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return describe(args[0])
        if all(arg == args[0] for arg in args):
            return describe(args[0])
        return describe(Any)
    return describe(args[0])


def _describe_class(tp: type) -> TypeDescriptor:
    if issubclass(tp, bool):
        kind = Kind.BOOL
    elif issubclass(tp, int):
        kind = Kind.INT
    elif issubclass(tp, (float, Decimal)):
        kind = Kind.FLOAT
    elif issubclass(tp, str):
        kind = Kind.STRING
    elif issubclass(tp, (bytes, bytearray, memoryview)):
        kind = Kind.BYTES
    elif is_record(tp):
        kind = Kind.RECORD
    elif issubclass(tp, (list, tuple, set, frozenset, collections.deque)):
        return TypeDescriptor(python_type=tp, kind=Kind.SEQUENCE, element=describe(Any))
    elif issubclass(tp, dict):
        return TypeDescriptor(python_type=tp, kind=Kind.MAP, element=describe(Any))
    else:
        kind = Kind.UNKNOWN
    return TypeDescriptor(python_type=tp, kind=kind)


def is_record(tp: Any) -> bool:
    """Return True for dataclasses, pydantic models and TypedDict classes."""
    if not isinstance(tp, type):
        return False
    return (
        issubclass(tp, BaseModel)
        or dataclasses.is_dataclass(tp)
        or typing.is_typeddict(tp)
    )


def record_fields(tp: Any) -> list[FieldDescriptor]:
    """Enumerate the fields of a record type in declaration order.

    Args:
        tp: A record class, or a parametrized generic record alias.

    Returns:
        Field descriptors with their merged tags.
    """
    cls = typing.get_origin(tp) or tp
    if issubclass(cls, BaseModel):
        return _pydantic_fields(tp)
    if dataclasses.is_dataclass(cls):
        return _dataclass_fields(tp)
    return _typeddict_fields(cls)


def _dataclass_fields(tp: Any) -> list[FieldDescriptor]:
    cls = typing.get_origin(tp) or tp
    hints = _resolve_hints(cls)
    substitutions = _generic_substitutions(tp)

    result: list[FieldDescriptor] = []
    for field in dataclasses.fields(cls):
        annotation = _substitute(hints.get(field.name, field.type), substitutions)
        field_tags = annotation_tags(annotation).merged(field.metadata)
        result.append(
            FieldDescriptor(name=field.name, type=describe(annotation), tags=field_tags)
        )
    return result


def _pydantic_fields(tp: Any) -> list[FieldDescriptor]:
    # Parametrized pydantic generics are concrete subclasses already
    cls: type[BaseModel] = tp if isinstance(tp, type) else typing.get_origin(tp)

    result: list[FieldDescriptor] = []
    for name, info in cls.model_fields.items():
        field_tags = metadata_tags(info.metadata)
        extra = info.json_schema_extra
        if isinstance(extra, dict):
            field_tags = Tags(extra).merged(field_tags)
        fallbacks: dict[str, str] = {}
        if info.alias:
            fallbacks[tag_keys.NAME_TAG] = info.alias
        if info.description:
            fallbacks[tag_keys.DESCRIPTION] = info.description
        field_tags = field_tags.merged(fallbacks)
        result.append(
            FieldDescriptor(name=name, type=describe(info.annotation), tags=field_tags)
        )
    return result


def _typeddict_fields(cls: type) -> list[FieldDescriptor]:
    hints = _resolve_hints(cls)
    return [
        FieldDescriptor(
            name=name,
            type=describe(annotation),
            tags=annotation_tags(annotation),
        )
        for name, annotation in hints.items()
    ]


def _resolve_hints(cls: type) -> dict[str, Any]:
    """Resolve the field annotations of a dataclass or TypedDict.

    Falls back to resolving field by field when a string annotation names
    something missing from the module, so the failing field can be reported.

    Raises:
        UnresolvedTypeError: If a string annotation cannot be resolved.
    """
    try:
        return typing.get_type_hints(cls, include_extras=True)
    except NameError:
        pass

    hints: dict[str, Any] = {}
    for owner in reversed(cls.__mro__):
        for name, annotation in inspect.get_annotations(owner).items():
            hints[name] = _resolve_annotation(cls, owner, name, annotation)
    return hints


def _resolve_annotation(record: type, owner: type, name: str, annotation: Any) -> Any:
    if isinstance(annotation, typing.ForwardRef):
        annotation = annotation.__forward_arg__
    if annotation is None:
        return type(None)
    if not isinstance(annotation, str):
        return annotation

    namespace = {"__module__": owner.__module__, "__annotations__": {name: annotation}}
    holder = type(owner.__name__, (), namespace)
    try:
        return typing.get_type_hints(holder, localns=dict(vars(owner)), include_extras=True)[name]
    except NameError as exc:
        raise UnresolvedTypeError(
            record.__qualname__,
            name,
            internal_details=f"{owner.__qualname__}.{name}: {annotation!r} ({exc})",
        ) from exc


def annotation_tags(annotation: Any) -> Tags:
    """Collect tags from the ``Annotated`` metadata of a field annotation.

    ``Required``/``NotRequired`` wrappers around the ``Annotated`` form are
    looked through.
    """
    tp = annotation
    while typing.get_origin(tp) in _FIELD_WRAPPERS:
        tp = typing.get_args(tp)[0]
    if typing.get_origin(tp) is not Annotated:
        return EMPTY_TAGS
    return metadata_tags(tp.__metadata__)


def metadata_tags(metadata: typing.Iterable[Any]) -> Tags:
    """Merge ``Tags`` and constraint objects found in annotation metadata.

    Explicit ``Tags`` take precedence over values derived from
    ``annotated_types`` constraints or ``pattern`` metadata.
    """
    explicit: dict[str, str] = {}
    derived: dict[str, Any] = {}
    for item in metadata:
        if isinstance(item, Tags):
            explicit.update(item)
            continue
        for constraint, key, attribute in _CONSTRAINT_TAGS:
            if isinstance(item, constraint):
                derived[key] = getattr(item, attribute)
        if isinstance(item, annotated_types.Len):
            if item.min_length:
                derived[tag_keys.MIN_LENGTH] = item.min_length
            if item.max_length is not None:
                derived[tag_keys.MAX_LENGTH] = item.max_length
        elif isinstance(item, annotated_types.Interval):
            for key, attribute in (
                (tag_keys.MINIMUM, "ge"),
                (tag_keys.MAXIMUM, "le"),
                (tag_keys.EXCLUSIVE_MINIMUM, "gt"),
                (tag_keys.EXCLUSIVE_MAXIMUM, "lt"),
            ):
                if getattr(item, attribute) is not None:
                    derived[key] = getattr(item, attribute)
        pattern = getattr(item, "pattern", None)
        if isinstance(pattern, str):
            derived[tag_keys.PATTERN] = pattern
    if not explicit and not derived:
        return EMPTY_TAGS
    return Tags(explicit).merged(derived)


def _generic_substitutions(tp: Any) -> dict[Any, Any]:
    origin = typing.get_origin(tp)
    if origin is None:
        return {}
    parameters = getattr(origin, "__parameters__", ())
    return dict(zip(parameters, typing.get_args(tp), strict=False))


def _substitute(annotation: Any, substitutions: dict[Any, Any]) -> Any:
    if not substitutions:
        return annotation
    if isinstance(annotation, typing.TypeVar):
        return substitutions.get(annotation, annotation)
    parameters = getattr(annotation, "__parameters__", ())
    if parameters:
        return annotation[tuple(substitutions.get(p, p) for p in parameters)]
    return annotation
