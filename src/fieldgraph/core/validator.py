"""
Nesting rules: which request forms each field kind accepts.

    simple attribute / simple calculation / aggregate / custom scalar -> bare only
    calculation with arguments or structured return -> {args, fields}
    relationship, embedded, union, struct, map, tuple, keyword list -> non-empty list

Every violation raises the matching FieldSelectionError subclass.
"""

from __future__ import annotations

from .classifier import STRUCTURED_KINDS, Classification, FieldKind
from .errors import (
    FieldDoesNotSupportNestingError,
    InvalidCalculationArgsError,
    InvalidCalculationSpecError,
    RequiresFieldSelectionError,
    SimpleAttributeWithSpecError,
    SimpleCalculationWithSpecError,
    UnknownFieldError,
    UnsupportedFieldCombinationError,
)
from .query_types import ClientForm, FieldRequest
from .types import TypeKind


CALCULATION_SPEC_KEYS = frozenset({"args", "fields"})


class NestingValidator:
    """
    Checks a request form against a field classification.

    Usage:
        NestingValidator().validate(classification, request, "user.todos")
    """

    def validate(self, classification: Classification, request: FieldRequest, field_path: str) -> None:
        kind = classification.kind
        name = classification.name

        if kind == FieldKind.UNKNOWN:
            raise UnknownFieldError(name, classification.owner, field_path, owner_kind=_owner_kind(classification))

        if kind == FieldKind.SIMPLE_ATTRIBUTE:
            if not request.is_bare:
                raise SimpleAttributeWithSpecError(name, request.spec, field_path)
            return

        if kind == FieldKind.SIMPLE_CALCULATION:
            if not request.is_bare:
                raise SimpleCalculationWithSpecError(name, request.spec, field_path)
            return

        if kind in (FieldKind.AGGREGATE, FieldKind.OPAQUE_CUSTOM_SCALAR):
            if not request.is_bare:
                raise FieldDoesNotSupportNestingError(name, request.spec, field_path)
            return

        if kind == FieldKind.COMPLEX_CALCULATION:
            self._validate_calculation(classification, request, field_path)
            return

        if kind in STRUCTURED_KINDS:
            if request.is_bare or not request.spec:
                raise RequiresFieldSelectionError(kind.value, name, field_path)
            # a single mapping is shorthand for a one-member union selection
            if request.form == ClientForm.MAPPING and kind != FieldKind.UNION:
                raise UnsupportedFieldCombinationError(kind.value, name, request.spec, field_path)
            return

        raise UnsupportedFieldCombinationError(kind.value, name, request.spec, field_path)

    def _validate_calculation(self, classification: Classification, request: FieldRequest, field_path: str) -> None:
        name = classification.name
        calculation = classification.calculation
        structured = calculation.type.requires_selection

        if request.is_bare:
            if structured:
                raise RequiresFieldSelectionError(FieldKind.COMPLEX_CALCULATION.value, name, field_path)
            raise InvalidCalculationArgsError(name, field_path)

        if request.form == ClientForm.LIST:
            if calculation.accepts_arguments:
                raise InvalidCalculationArgsError(name, field_path)
            if not request.spec:
                raise RequiresFieldSelectionError(FieldKind.COMPLEX_CALCULATION.value, name, field_path)
            return

        spec = request.spec
        if not spec or not set(spec) <= CALCULATION_SPEC_KEYS:
            raise InvalidCalculationSpecError(name, spec, field_path)
        if "args" in spec and not isinstance(spec["args"], dict):
            raise InvalidCalculationArgsError(name, field_path)
        if "fields" in spec and not isinstance(spec["fields"], list):
            raise InvalidCalculationSpecError(name, spec, field_path)
        if structured and not spec.get("fields"):
            raise RequiresFieldSelectionError(FieldKind.COMPLEX_CALCULATION.value, name, field_path)


_COMPOSITE_OWNER_KINDS = {
    TypeKind.STRUCT: "typed_struct",
    TypeKind.MAP: "map",
    TypeKind.KEYWORD: "keyword",
    TypeKind.TUPLE: "tuple",
}


def _owner_kind(classification: Classification) -> str:
    # unknown fields of composite types carry the composite as their type
    if classification.type is None:
        return "resource"
    return _COMPOSITE_OWNER_KINDS.get(classification.type.unwrap().kind, "resource")
