"""
Error response builder.

Turns FieldgraphError instances into structured, JSON-friendly dicts:

    {
        "type": "unknown_field",
        "message": "Unknown field 'user.bogus' for User",
        "field_path": "user.bogus",
        "details": {"field": "user.bogus", "resource": "User", "suggestion": "..."},
    }
"""

from __future__ import annotations

from typing import Any

from ..core.errors import (
    ActionNotFoundError,
    FieldgraphError,
    FieldSelectionError,
    InvalidCalculationArgsError,
    InvalidFieldSelectionError,
    RequiresFieldSelectionError,
    ResourceNotFoundError,
    SchemaConfigError,
    UnknownFieldError,
    UnsupportedFieldCombinationError,
)


_SUGGESTIONS: dict[str, str] = {
    "unknown_field": (
        "Check the field name spelling and ensure it's a public attribute, "
        "calculation, aggregate or relationship"
    ),
    "unknown_map_field": "Check that the field name is valid for the map's field constraints",
    "unknown_keyword_field": "Check that the field name is valid for the keyword list's field constraints",
    "unknown_tuple_field": "Check that the field name is one of the tuple's named slots",
    "unknown_typed_struct_field": "Check that the field name is valid for the typed struct definition",
    "unknown_union_field": "Check that the union member name is valid for the union attribute definition",
    "unsupported_field_format": "Use a field name or a single-key object such as {\"user\": [\"id\"]}",
    "invalid_field_format": "Split the object into one entry per field",
    "duplicate_field": "Remove duplicate field specifications",
    "simple_attribute_with_spec": "Request the attribute by name without a nested specification",
    "simple_calculation_with_spec": "Request the calculation by name without arguments or fields",
    "field_does_not_support_nesting": "Remove the nested specification for this field",
    "invalid_calculation_spec": "Use the format {\"calculation\": {\"args\": {...}, \"fields\": [...]}}",
    "invalid_calculation_args": "Check the calculation's argument names and types",
    "unsupported_field_combination": "Check the documentation for valid field specification formats",
    "action_not_found": "Check that the action is defined on the resource",
    "resource_not_found": "Check that the resource is defined in the schema",
    "schema_config_error": "Fix the schema document and reload it",
}

_UNKNOWN_FIELD_TYPES = {
    "map": "unknown_map_field",
    "keyword": "unknown_keyword_field",
    "tuple": "unknown_tuple_field",
    "typed_struct": "unknown_typed_struct_field",
    "union": "unknown_union_field",
}


def build_error_response(error: FieldgraphError) -> dict[str, Any]:
    """
    Build a structured error response.

    Args:
        error: Any fieldgraph exception

    Returns:
        Dict with type, message, details and (for field errors) field_path
    """
    if isinstance(error, FieldSelectionError):
        return _field_error_response(error)

    details: dict[str, Any] = {}
    if isinstance(error, ActionNotFoundError):
        details.update(resource=error.resource, action_name=error.action)
    elif isinstance(error, ResourceNotFoundError):
        details["resource"] = error.resource
    elif isinstance(error, SchemaConfigError):
        details["errors"] = list(error.errors)

    suggestion = _SUGGESTIONS.get(error.type)
    if suggestion:
        details["suggestion"] = suggestion

    return {"type": error.type, "message": str(error), "details": details}


def _field_error_response(error: FieldSelectionError) -> dict[str, Any]:
    error_type = error.type
    details: dict[str, Any] = {"field": error.field_path}

    if isinstance(error, UnknownFieldError):
        error_type = _UNKNOWN_FIELD_TYPES.get(error.owner_kind, error_type)
        details[error.owner_kind if error.owner_kind != "typed_struct" else "type"] = error.owner

    elif isinstance(error, RequiresFieldSelectionError):
        details["field_type"] = error.field_kind
        details["suggestion"] = f"Specify which fields to select from this {error.field_kind.replace('_', ' ')}"

    elif isinstance(error, InvalidFieldSelectionError):
        kind = error.field_kind.replace("_", " ")
        details["field_type"] = error.field_kind
        details["suggestion"] = f"Remove the field selection for this {kind}"

    elif isinstance(error, UnsupportedFieldCombinationError):
        details["field_type"] = error.field_kind
        details["field_spec"] = repr(error.spec)

    elif isinstance(error, InvalidCalculationArgsError):
        details["expected"] = "Map containing argument values"
        if error.errors:
            details["errors"] = list(error.errors)

    if "suggestion" not in details and error_type in _SUGGESTIONS:
        details["suggestion"] = _SUGGESTIONS[error_type]

    if error.context:
        details["via"] = [
            {"type": frame.type, "field": frame.field, "owner": frame.owner, "field_path": frame.field_path}
            for frame in error.context
        ]

    return {
        "type": error_type,
        "message": str(error),
        "field_path": error.field_path,
        "details": details,
    }
