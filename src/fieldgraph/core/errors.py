"""
Custom exceptions for the fieldgraph system.

Field selection errors follow a fixed taxonomy: every subclass of
FieldSelectionError carries a ``type`` tag, the offending field, and the
dotted field path rendered in the client's naming convention
(e.g. ``"user.todos.priorityScore"``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


RELATIONSHIP_FIELD_ERROR = "relationship_field_error"
EMBEDDED_RESOURCE_FIELD_ERROR = "embedded_resource_field_error"


class FieldgraphError(Exception):
    """Base exception for all fieldgraph errors."""

    type = "fieldgraph_error"

    def as_tuple(self) -> tuple:
        return (self.type, str(self))


class SchemaConfigError(FieldgraphError):
    """Raised when a schema document is invalid."""

    type = "schema_config_error"

    def __init__(self, errors: list[str]):
        self.errors = errors
        joined = "\n".join(errors)
        super().__init__(f"Schema compilation failed:\n{joined}")


class ConfigError(FieldgraphError):
    """Raised when fieldgraph configuration is invalid."""

    type = "config_error"


class ResourceNotFoundError(FieldgraphError):
    """Raised when a resource is not registered in the schema."""

    type = "resource_not_found"

    def __init__(self, resource: str):
        self.resource = resource
        super().__init__(f"Resource '{resource}' not found")

    def as_tuple(self) -> tuple:
        return (self.type, self.resource)


class ActionNotFoundError(FieldgraphError):
    """Raised when a resource has no action with the requested name."""

    type = "action_not_found"

    def __init__(self, resource: str, action: str):
        self.resource = resource
        self.action = action
        super().__init__(f"Action '{action}' not found on resource '{resource}'")

    def as_tuple(self) -> tuple:
        return (self.type, self.action)


@dataclass(frozen=True)
class ErrorFrame:
    """
    An enclosing level a field selection error passed through.

    ``type`` is RELATIONSHIP_FIELD_ERROR or EMBEDDED_RESOURCE_FIELD_ERROR.
    """
    type: str
    field: str
    owner: str
    field_path: str


class FieldSelectionError(FieldgraphError):
    """
    Base class for errors raised while processing a requested field list.

    Attributes:
        field: Canonical name of the offending field (or the raw entry)
        field_path: Dotted path to the field, in client naming
        context: Enclosing relationship/embedded frames, innermost first
    """

    type = "field_selection_error"

    def __init__(self, field: Any, field_path: Optional[str] = None, message: Optional[str] = None):
        self.field = field
        self.field_path = field_path if field_path is not None else str(field)
        self.context: list[ErrorFrame] = []
        super().__init__(message or self.default_message())

    def default_message(self) -> str:
        return f"Invalid field selection for '{self.field_path}'"

    def add_context(self, frame: ErrorFrame) -> "FieldSelectionError":
        """Attach an enclosing frame while the error unwinds."""
        self.context.append(frame)
        return self

    def as_tuple(self) -> tuple:
        return (self.type, self.field, self.field_path)


class UnknownFieldError(FieldSelectionError):
    """Field does not exist on the owner resource or type."""

    type = "unknown_field"

    def __init__(self, field: str, owner: str, field_path: str, owner_kind: str = "resource"):
        self.owner = owner
        self.owner_kind = owner_kind  # resource | typed_struct | map | keyword | tuple | union
        super().__init__(field, field_path)

    def default_message(self) -> str:
        return f"Unknown field '{self.field_path}' for {self.owner}"

    def as_tuple(self) -> tuple:
        return (self.type, self.field, self.owner, self.field_path)


class UnsupportedFieldFormatError(FieldSelectionError):
    """Entry is neither a bare identifier nor a single-key mapping."""

    type = "unsupported_field_format"

    def __init__(self, entry: Any, field_path: str):
        self.entry = entry
        super().__init__(entry, field_path)

    def default_message(self) -> str:
        return f"Unsupported field format {self.entry!r} at '{self.field_path}'"


class InvalidFieldFormatError(FieldSelectionError):
    """Mapping entry has more than one key."""

    type = "invalid_field_format"

    def __init__(self, entry: Any, field_path: str):
        self.entry = entry
        super().__init__(entry, field_path)

    def default_message(self) -> str:
        return (
            f"Invalid field format at '{self.field_path}': "
            f"mapping entries must have exactly one key, got {sorted(map(str, self.entry))}"
        )


class DuplicateFieldError(FieldSelectionError):
    type = "duplicate_field"

    def default_message(self) -> str:
        return f"Field '{self.field_path}' was requested multiple times"


class _FieldWithSpecError(FieldSelectionError):
    """Shared shape: field id plus the nested spec that was not allowed."""

    def __init__(self, field: str, spec: Any, field_path: str):
        self.spec = spec
        super().__init__(field, field_path)

    def as_tuple(self) -> tuple:
        return (self.type, self.field, self.spec, self.field_path)


class SimpleAttributeWithSpecError(_FieldWithSpecError):
    type = "simple_attribute_with_spec"

    def default_message(self) -> str:
        return f"Attribute '{self.field_path}' does not accept a nested field specification"


class SimpleCalculationWithSpecError(_FieldWithSpecError):
    type = "simple_calculation_with_spec"

    def default_message(self) -> str:
        return f"Calculation '{self.field_path}' takes no arguments and no field selection"


class FieldDoesNotSupportNestingError(_FieldWithSpecError):
    type = "field_does_not_support_nesting"

    def default_message(self) -> str:
        return f"Field '{self.field_path}' does not support nested field selection"


class InvalidCalculationSpecError(_FieldWithSpecError):
    """Calculation was given a mapping that is not ``{args, fields}``."""

    type = "invalid_calculation_spec"

    def default_message(self) -> str:
        return (
            f"Invalid specification for calculation '{self.field_path}': "
            "expected a mapping with 'args' and/or 'fields'"
        )


class InvalidCalculationArgsError(FieldSelectionError):
    type = "invalid_calculation_args"

    def __init__(self, field: str, field_path: str, errors: Optional[list[dict]] = None):
        self.errors = errors or []
        super().__init__(field, field_path)

    def default_message(self) -> str:
        return f"Invalid arguments for calculation '{self.field_path}'"


class RequiresFieldSelectionError(FieldSelectionError):
    """A structured field was requested bare or with an empty field list."""

    type = "requires_field_selection"

    def __init__(self, field_kind: str, field: str, field_path: str):
        self.field_kind = field_kind
        super().__init__(field, field_path)

    def default_message(self) -> str:
        kind = self.field_kind.replace("_", " ").capitalize()
        return f"{kind} '{self.field_path}' requires field selection"

    def as_tuple(self) -> tuple:
        return (self.type, self.field_kind, self.field, self.field_path)


class UnsupportedFieldCombinationError(FieldSelectionError):
    """A structured field was given a specification of the wrong shape."""

    type = "unsupported_field_combination"

    def __init__(self, field_kind: str, field: str, spec: Any, field_path: str):
        self.field_kind = field_kind
        self.spec = spec
        super().__init__(field, field_path)

    def default_message(self) -> str:
        return (
            f"Unsupported combination of field type and specification for '{self.field_path}'"
        )


class InvalidFieldSelectionError(FieldSelectionError):
    """Field selection attempted on a primitive-typed value."""

    type = "invalid_field_selection"

    def __init__(self, field: Any, field_kind: str, field_path: str):
        self.field_kind = field_kind
        super().__init__(field, field_path)

    def default_message(self) -> str:
        kind = self.field_kind.replace("_", " ")
        return f"Cannot select fields from {kind} '{self.field_path}'"

    def as_tuple(self) -> tuple:
        return (self.type, self.field, self.field_kind, self.field_path)
