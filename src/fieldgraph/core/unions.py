"""
Union member selection.

A union field is requested with a list of member tags: bare tags for
primitive members, ``{tag: [...]}`` for structured ones. Every requested
tag gets a template entry; extraction later keeps the one matching the
runtime value.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .errors import (
    FieldDoesNotSupportNestingError,
    RequiresFieldSelectionError,
    UnknownFieldError,
    UnsupportedFieldCombinationError,
)
from .query_types import ClientForm, FieldSelection, Path
from .request_parser import parse_field_list
from .types import TypeKind, TypeSpec

if TYPE_CHECKING:
    from .processor import FieldProcessor


def process_union_members(
    processor: "FieldProcessor",
    union: TypeSpec,
    fields: Any,
    path: Path,
    tag_loads: bool = True,
) -> FieldSelection:
    """
    Process member selections of a union value.

    Member loads stay under their tag for stored attributes, where each
    member is loaded on its own, and are merged into one list when the
    union is a calculation result.
    """
    formatter = processor.context.input_formatter
    render = processor.context.output_formatter.to_external

    # {"content": {"text": [...]}} is shorthand for a one-member list
    if isinstance(fields, dict):
        fields = [fields]
    requests = parse_field_list(fields, formatter.to_canonical, path, render)

    load: list = []
    template: list = []
    for request in requests:
        tag = request.name
        tag_path = path.child(render(tag))
        member = union.member(tag)
        if member is None:
            raise UnknownFieldError(tag, union.describe(), tag_path.render(), owner_kind="union")

        if not member.type.requires_selection:
            if not request.is_bare:
                raise FieldDoesNotSupportNestingError(tag, request.spec, tag_path.render())
            template.append(tag)
            continue

        if request.is_bare or not request.spec:
            raise RequiresFieldSelectionError("union_member", tag, tag_path.render())
        if request.form == ClientForm.MAPPING and member.type.unwrap().kind != TypeKind.UNION:
            raise UnsupportedFieldCombinationError("union_member", tag, request.spec, tag_path.render())

        nested = processor.process(member.type, request.spec, tag_path)
        if tag_loads:
            if nested.load:
                load.append((tag, nested.load))
        else:
            for entry in nested.select + nested.load:
                if entry not in load:
                    load.append(entry)
        template.append((tag, nested.template))

    return FieldSelection([], load, template)
