"""
Recursive field processor.

Walks a client field list against the schema and produces the
(select, load, template) triple:

    processor = FieldProcessor(context)
    selection = processor.process(TypeSpec(kind=TypeKind.RESOURCE, name="Todo"),
                                  ["id", {"user": ["name"]}])
    selection.select    # ["id"]
    selection.load      # [("user", ["name"])]
    selection.template  # ["id", ("user", ["name"])]

Errors are raised at the failing field; relationship and embedded
levels attach an ErrorFrame on the way out and re-raise.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable

from .calculations import ArgumentValidator, process_calculation
from .classifier import Classification, FieldKind
from .composites import process_composite_fields
from .errors import (
    EMBEDDED_RESOURCE_FIELD_ERROR,
    RELATIONSHIP_FIELD_ERROR,
    ErrorFrame,
    FieldSelectionError,
    InvalidFieldSelectionError,
    UnsupportedFieldFormatError,
)
from .query_types import ClientForm, FieldRequest, FieldSelection, Path
from .request_parser import parse_field_list
from .types import FIELD_CONSTRAINED_KINDS, TypeKind, TypeSpec
from .unions import process_union_members

if TYPE_CHECKING:
    from ..runtime.context import ProcessingContext

logger = logging.getLogger(__name__)


Handler = Callable[[Classification, FieldRequest, Path], FieldSelection]


class FieldProcessor:
    """
    Turns client field lists into select / load / template.

    One handler per FieldKind; the table is checked for completeness
    when the processor is created.
    """

    def __init__(self, context: "ProcessingContext"):
        self.context = context
        self.classifier = context.classifier
        self.validator = context.validator
        self.arguments = ArgumentValidator(context.input_formatter)
        self.handlers: dict[FieldKind, Handler] = {
            FieldKind.SIMPLE_ATTRIBUTE: self._process_attribute,
            FieldKind.SIMPLE_CALCULATION: self._process_loaded_field,
            FieldKind.COMPLEX_CALCULATION: self._process_calculation,
            FieldKind.AGGREGATE: self._process_loaded_field,
            FieldKind.RELATIONSHIP: self._process_relationship,
            FieldKind.EMBEDDED_RESOURCE: self._process_embedded,
            FieldKind.EMBEDDED_RESOURCE_ARRAY: self._process_embedded,
            FieldKind.UNION: self._process_stored_composite,
            FieldKind.TYPED_STRUCT: self._process_stored_composite,
            FieldKind.CONSTRAINED_MAP: self._process_stored_composite,
            FieldKind.TUPLE: self._process_stored_composite,
            FieldKind.KEYWORD_LIST: self._process_stored_composite,
            FieldKind.OPAQUE_CUSTOM_SCALAR: self._process_attribute,
            FieldKind.UNKNOWN: self._process_unknown,
        }
        missing = set(FieldKind) - set(self.handlers)
        if missing:
            raise RuntimeError(f"No handler for field kinds: {sorted(k.value for k in missing)}")

    # =========================================================================
    # Entry points
    # =========================================================================

    def process(
        self,
        return_type: TypeSpec,
        fields: Any,
        path: Path = Path(),
        tag_union_loads: bool = True,
    ) -> FieldSelection:
        """
        Process a field list against any value type.

        Args:
            return_type: Type of the value being selected from
            fields: Client field list
            path: Path of the value (empty at the top level)
            tag_union_loads: Keep union member loads under their tag
                (stored attributes) or merge them (calculation results)

        Returns:
            FieldSelection for the value
        """
        inner = return_type.unwrap()

        if inner.kind in (TypeKind.RESOURCE, TypeKind.EMBEDDED):
            return self.process_resource_fields(inner.name, fields, path)

        if inner.kind == TypeKind.UNION:
            return process_union_members(self, inner, fields, path, tag_loads=tag_union_loads)

        if inner.kind in FIELD_CONSTRAINED_KINDS and inner.has_fields:
            return process_composite_fields(self, inner, fields, path)

        # untyped values and field-less structs or maps pass the request through
        if inner.kind == TypeKind.ANY or inner.kind in FIELD_CONSTRAINED_KINDS:
            return self.process_untyped_fields(fields, path)

        if fields:
            field = path.segments[-1] if path else inner.describe()
            raise InvalidFieldSelectionError(field, _value_kind(inner), path.render() or inner.describe())
        return FieldSelection.empty()

    def process_resource_fields(self, resource: str, fields: Any, path: Path = Path()) -> FieldSelection:
        """Process a field list against a resource (or embedded resource)."""
        render = self.context.renderer_for_resource(resource)
        requests = parse_field_list(fields, self.context.resolver_for_resource(resource), path, render)

        select: list = []
        load: list = []
        template: list = []

        for request in requests:
            field_path = path.child(render(request.name))
            classification = self.classifier.classify(request.name, resource)
            self.validator.validate(classification, request, field_path.render())

            handler = self.handlers[classification.kind]
            result = handler(classification, request, field_path)

            select.extend(result.select)
            load.extend(result.load)
            template.extend(result.template)

        logger.debug(f"Processed {len(requests)} fields of {resource} at '{path.render() or '<root>'}'")
        return FieldSelection(select, load, template)

    def process_untyped_fields(self, fields: Any, path: Path = Path()) -> FieldSelection:
        """
        Pass a field list through for a value with no declared type.

        Nothing is selected or loaded; the requested names go straight into
        the template so extraction can still project the value:

            ["result", {"nested": ["a"]}] -> template ["result", ("nested", ["a"])]
        """
        formatter = self.context.input_formatter
        render = self.context.output_formatter.to_external
        requests = parse_field_list(fields, formatter.to_canonical, path, render)

        template: list = []
        for request in requests:
            if request.is_bare:
                template.append(request.name)
            elif request.form == ClientForm.LIST:
                nested = self.process_untyped_fields(request.spec, path.child(render(request.name)))
                template.append((request.name, nested.template))
            else:
                raise UnsupportedFieldFormatError({request.client_name: request.spec}, path.render(render(request.name)))

        return FieldSelection([], [], template)

    # =========================================================================
    # Handlers
    # =========================================================================

    def _process_attribute(self, classification: Classification, request: FieldRequest, path: Path) -> FieldSelection:
        return FieldSelection([classification.name], [], [classification.name])

    def _process_loaded_field(self, classification: Classification, request: FieldRequest, path: Path) -> FieldSelection:
        return FieldSelection([], [classification.name], [classification.name])

    def _process_calculation(self, classification: Classification, request: FieldRequest, path: Path) -> FieldSelection:
        return process_calculation(self, classification, request, path)

    def _process_relationship(self, classification: Classification, request: FieldRequest, path: Path) -> FieldSelection:
        name = classification.name
        try:
            nested = self.process(classification.type, request.spec, path)
        except FieldSelectionError as error:
            error.add_context(ErrorFrame(RELATIONSHIP_FIELD_ERROR, name, classification.owner, path.render()))
            raise

        return FieldSelection([], [(name, nested.select + nested.load)], [(name, nested.template)])

    def _process_embedded(self, classification: Classification, request: FieldRequest, path: Path) -> FieldSelection:
        name = classification.name
        try:
            nested = self.process(classification.type, request.spec, path)
        except FieldSelectionError as error:
            error.add_context(ErrorFrame(EMBEDDED_RESOURCE_FIELD_ERROR, name, classification.owner, path.render()))
            raise

        # stored inline: selected as a whole, only calculated children need loading
        load = [(name, nested.load)] if nested.load else []
        return FieldSelection([name], load, [(name, nested.template)])

    def _process_stored_composite(self, classification: Classification, request: FieldRequest, path: Path) -> FieldSelection:
        name = classification.name
        nested = self.process(classification.type, request.spec, path)
        load = [(name, nested.load)] if nested.load else []
        return FieldSelection([name], load, [(name, nested.template)])

    def _process_unknown(self, classification: Classification, request: FieldRequest, path: Path) -> FieldSelection:
        # the validator rejects unknown fields before dispatch
        raise RuntimeError(f"Unknown field '{classification.name}' reached dispatch")


def _value_kind(type_spec: TypeSpec) -> str:
    if type_spec.kind == TypeKind.CUSTOM:
        return "custom_type"
    return "primitive_type"
