"""
Calculation handling: argument validation and nested selection.

Arguments are validated against the calculation's signature with a
pydantic model generated per calculation:

    {"self": {"args": {"prefix": "x"}, "fields": ["id"]}}
    -> load:     ("self", CalculationLoad({"prefix": "x"}, ["id"]))
       template: ("self", ["id"])
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationError, create_model

from .classifier import Classification
from .defs import ArgumentDef, CalculationDef
from .errors import InvalidCalculationArgsError, InvalidFieldSelectionError
from .formatter import FieldFormatter
from .query_types import CalculationLoad, ClientForm, FieldRequest, FieldSelection, Path
from .types import TypeKind, TypeSpec

if TYPE_CHECKING:
    from .processor import FieldProcessor


_PRIMITIVE_PYTHON_TYPES: dict[str, Any] = {
    "string": str,
    "ci_string": str,
    "atom": str,
    "integer": int,
    "boolean": bool,
    "float": float,
    "decimal": Decimal,
    "date": date,
    "datetime": datetime,
    "naive_datetime": datetime,
    "time": time,
    "uuid": UUID,
    "binary": bytes,
    "duration": timedelta,
}


def python_type(type_spec: TypeSpec) -> Any:
    """Python annotation used to validate a value of the given type."""
    if type_spec.kind == TypeKind.PRIMITIVE:
        return _PRIMITIVE_PYTHON_TYPES.get(type_spec.name, Any)
    if type_spec.kind == TypeKind.ARRAY and type_spec.item is not None:
        return list[python_type(type_spec.item)]
    if type_spec.kind in (TypeKind.MAP, TypeKind.STRUCT, TypeKind.RESOURCE, TypeKind.EMBEDDED):
        return dict[str, Any]
    if type_spec.kind == TypeKind.TUPLE:
        return list[Any]
    return Any


class ArgumentValidator:
    """
    Validates calculation arguments, one generated model per calculation.

    Argument keys are converted to canonical names with the input
    formatter before validation. Only supplied arguments are returned.
    """

    def __init__(self, formatter: FieldFormatter):
        self.formatter = formatter
        self._models: dict[tuple[str, str], type[BaseModel]] = {}

    def model_for(self, owner: str, calculation: CalculationDef) -> type[BaseModel]:
        key = (owner, calculation.name)
        model = self._models.get(key)
        if model is None:
            model = self._build_model(calculation)
            self._models[key] = model
        return model

    @staticmethod
    def _build_model(calculation: CalculationDef) -> type[BaseModel]:
        # positional field names keep argument names clear of BaseModel attributes
        fields = {
            f"arg_{index}": _argument_field(argument)
            for index, argument in enumerate(calculation.arguments)
        }
        return create_model(
            f"{calculation.name}_arguments",
            __config__=ConfigDict(extra="forbid"),
            **fields,
        )

    def validate(
        self,
        owner: str,
        calculation: CalculationDef,
        args: dict[str, Any],
        field_path: str,
    ) -> dict[str, Any]:
        """
        Validate client arguments.

        Raises:
            InvalidCalculationArgsError: With pydantic's error list attached
        """
        canonical = {self.formatter.to_canonical(key): value for key, value in args.items()}
        model = self.model_for(owner, calculation)
        try:
            instance = model.model_validate(canonical)
        except ValidationError as exc:
            errors = [
                {
                    "field": ".".join(str(part) for part in error["loc"]),
                    "message": error["msg"],
                    "type": error["type"],
                }
                for error in exc.errors()
            ]
            raise InvalidCalculationArgsError(calculation.name, field_path, errors) from exc

        return instance.model_dump(by_alias=True, exclude_unset=True)


def _argument_field(argument: ArgumentDef) -> tuple[Any, Any]:
    annotation = python_type(argument.type)
    if argument.allow_nil:
        annotation = Optional[annotation]

    if argument.required:
        return (annotation, Field(..., alias=argument.name))
    return (annotation, Field(argument.default, alias=argument.name))


def process_calculation(
    processor: "FieldProcessor",
    classification: Classification,
    request: FieldRequest,
    path: Path,
) -> FieldSelection:
    """Handle a calculation that takes arguments or returns a structured value."""
    calculation = classification.calculation
    name = calculation.name

    if request.form == ClientForm.LIST:
        args: dict[str, Any] = {}
        fields: list = request.spec
    else:
        args = request.spec.get("args") or {}
        fields = request.spec.get("fields") or []

    validated = processor.arguments.validate(classification.owner, calculation, args, path.render())

    if calculation.type.requires_selection:
        nested = processor.process(calculation.type, fields, path, tag_union_loads=False)
        load = CalculationLoad(validated, nested.select + nested.load)
        return FieldSelection([], [(name, load)], [(name, nested.template)])

    if fields:
        raise InvalidFieldSelectionError(name, "calculation", path.render())
    return FieldSelection([], [(name, CalculationLoad(validated, []))], [name])
