"""Custom exception hierarchy for schemagen.

This module defines the exception classes raised by the generator:
- SchemaGenError: Base exception for all schemagen errors
- CyclicTypeError: Raised when a record type contains itself
- UnresolvedTypeError: Raised when a field annotation cannot be resolved
- SchemaSerializationError: Raised when a built document cannot be encoded

Malformed or missing field annotations are never errors; they simply leave
the corresponding validator unset.

- User-facing messages are safe to display
- Technical details logged internally via structlog
"""

from __future__ import annotations

import structlog

logger = structlog.get_logger(__name__)


class SchemaGenError(Exception):
    """Base exception for schemagen.

    Args:
        user_message: Safe message to display to the caller.
        internal_details: Optional technical details for logging. This is
            logged internally but not part of the exception message.

    Example:
        >>> raise SchemaGenError(
        ...     "Schema generation failed",
        ...     internal_details="const value of type object on field 'name'",
        ... )
    """

    def __init__(
        self,
        user_message: str,
        *,
        internal_details: str | None = None,
    ) -> None:
        """Initialize SchemaGenError with user message and optional internal details.

        Args:
            user_message: Safe message to display to the caller.
            internal_details: Technical details for internal logging only.
        """
        super().__init__(user_message)
        self.user_message = user_message
        self.internal_details = internal_details

        if internal_details:
            logger.error(
                "schemagen_error",
                error_type=self.__class__.__name__,
                user_message=user_message,
                internal_details=internal_details,
            )


class CyclicTypeError(SchemaGenError):
    """Raised when a record type is reached again while it is being read.

    Every nested record is inlined, so a self-referential record (directly
    or through other records, sequences, maps or optional fields) has no
    finite schema.

    Attributes:
        type_name: Name of the record that closes the cycle.
        path: Record and field names walked from the first occurrence of
            ``type_name`` back to itself.

    Example:
        >>> raise CyclicTypeError("Node", path=["Node", "children", "Node"])
        # Caller sees: "Type 'Node' is self-referential (Node -> children -> Node)"
    """

    def __init__(
        self,
        type_name: str,
        *,
        path: list[str],
        internal_details: str | None = None,
    ) -> None:
        """Initialize CyclicTypeError with the offending path.

        Args:
            type_name: Name of the record that closes the cycle.
            path: Names walked along the cycle.
            internal_details: Technical details for internal logging only.
        """
        user_message = f"Type '{type_name}' is self-referential ({' -> '.join(path)})"

        super().__init__(user_message, internal_details=internal_details)

        self.type_name = type_name
        self.path = path


class UnresolvedTypeError(SchemaGenError):
    """Raised when a record field annotation names a type that cannot be found.

    String annotations (``from __future__ import annotations`` or explicit
    forward references) are resolved against the record's module. A record
    declared inside a function that refers to another local class cannot be
    resolved that way.

    Attributes:
        type_name: Name of the record declaring the field.
        field_name: Name of the field whose annotation failed to resolve.

    Example:
        >>> raise UnresolvedTypeError("Outer", "inner")
        # Caller sees: "Cannot resolve the type of field 'inner' on 'Outer'"
    """

    def __init__(
        self,
        type_name: str,
        field_name: str,
        *,
        internal_details: str | None = None,
    ) -> None:
        """Initialize UnresolvedTypeError with the record and field names.

        Args:
            type_name: Name of the record declaring the field.
            field_name: Name of the unresolved field.
            internal_details: Technical details for internal logging only.
        """
        user_message = f"Cannot resolve the type of field '{field_name}' on '{type_name}'"

        super().__init__(user_message, internal_details=internal_details)

        self.type_name = type_name
        self.field_name = field_name


class SchemaSerializationError(SchemaGenError):
    """Raised when a schema document cannot be encoded as JSON.

    This indicates a construction defect (for example a non-JSON value
    placed in ``const``), never a problem with the input type.
    """

    pass
