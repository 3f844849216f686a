"""
Typed structs, constrained maps, keyword lists and tuples.

Children are checked against the type's own field list rather than the
resource graph. Composite values are stored inline and selected as a
whole; only calculated fields of embedded resources inside them are
loaded. Tuples are projected by slot:

    {"coordinates": ["latitude", "longitude"]}
    -> template: ("coordinates", [TupleSlot(0, "latitude"), TupleSlot(1, "longitude")])
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .classifier import STRUCTURED_KINDS
from .query_types import FieldSelection, Path, TupleSlot
from .request_parser import parse_field_list
from .types import TypeKind, TypeSpec

if TYPE_CHECKING:
    from .processor import FieldProcessor


def process_composite_fields(
    processor: "FieldProcessor",
    composite: TypeSpec,
    fields: Any,
    path: Path,
) -> FieldSelection:
    """
    Process a field list against a struct, map, keyword list or tuple.

    Template entries follow request order for every composite kind.
    """
    context = processor.context
    render = context.renderer_for_type(composite)
    requests = parse_field_list(fields, context.resolver_for_type(composite), path, render)

    load: list = []
    template: list = []
    for request in requests:
        field_path = path.child(render(request.name))
        classification = processor.classifier.classify_composite_field(request.name, composite)
        processor.validator.validate(classification, request, field_path.render())

        nested = None
        if classification.kind in STRUCTURED_KINDS:
            selection = processor.process(classification.type, request.spec, field_path)
            nested = selection.template
            if selection.load:
                load.append((request.name, selection.load))

        if composite.kind == TypeKind.TUPLE:
            index = composite.field_position(request.name)
            template.append(TupleSlot(index, request.name, nested))
        elif nested is None:
            template.append(request.name)
        else:
            template.append((request.name, nested))

    return FieldSelection([], load, template)
