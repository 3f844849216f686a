"""
Parser for client field lists.

A field list is a list whose entries are either a bare identifier or a
single-key mapping from identifier to a nested list or an
``{"args": ..., "fields": ...}`` mapping:

    ["id", {"user": ["name"]}, {"self": {"args": {"prefix": "x"}, "fields": ["id"]}}]

Identifiers are translated to canonical names with a resolver callable
supplied by the caller (field_names overrides first, then the formatter).
Duplicate identifiers are rejected for the whole sibling list before any
entry is processed.
"""

from __future__ import annotations

from typing import Any, Callable

from .errors import DuplicateFieldError, InvalidFieldFormatError, UnsupportedFieldFormatError
from .query_types import ClientForm, FieldRequest, Path


NameResolver = Callable[[str], str]


def parse_entry(entry: Any, resolve: NameResolver, path: Path) -> FieldRequest:
    """
    Parse a single field list entry.

    Raises:
        UnsupportedFieldFormatError: Entry is not a string or single-key mapping,
            or its nested value is neither a list nor a mapping
        InvalidFieldFormatError: Mapping entry has more than one key
    """
    if isinstance(entry, str):
        return FieldRequest(name=resolve(entry), client_name=entry, form=ClientForm.BARE)

    if isinstance(entry, dict):
        if len(entry) > 1:
            raise InvalidFieldFormatError(entry, path.render() or "<root>")
        if len(entry) == 1:
            key, value = next(iter(entry.items()))
            if isinstance(key, str):
                if isinstance(value, list):
                    form = ClientForm.LIST
                elif isinstance(value, dict):
                    form = ClientForm.MAPPING
                else:
                    raise UnsupportedFieldFormatError(entry, path.render(key))
                return FieldRequest(name=resolve(key), client_name=key, form=form, spec=value)

    raise UnsupportedFieldFormatError(entry, path.render() or "<root>")


def parse_field_list(
    entries: Any,
    resolve: NameResolver,
    path: Path,
    render: Callable[[str], str],
) -> list[FieldRequest]:
    """
    Parse a sibling list and reject duplicates.

    Args:
        entries: Raw client list
        resolve: client identifier -> canonical name
        path: Path of the owner of this list
        render: canonical name -> client-facing path segment

    Returns:
        Parsed requests in client order
    """
    if not isinstance(entries, list):
        raise UnsupportedFieldFormatError(entries, path.render() or "<root>")

    requests = [parse_entry(entry, resolve, path) for entry in entries]

    seen: set[str] = set()
    for request in requests:
        if request.name in seen:
            raise DuplicateFieldError(request.name, path.render(render(request.name)))
        seen.add(request.name)

    return requests
