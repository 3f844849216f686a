"""
Result extractor - applies an extraction template to fetched data.

Handles:
- Records as dicts or objects (attribute access)
- Lists, mapped element-wise
- Keyword lists (lists of (key, value) pairs)
- Tuples, projected by TupleSlot index
- Union values, keeping only the active member's selection
- Output key rendering with the output formatter
"""

from __future__ import annotations

from typing import Any

from ..core.formatter import CAMEL_CASE, FieldFormatter
from ..core.query_types import TemplateEntry, TupleSlot, UnionValue

_MISSING = object()


class ResultExtractor:
    """
    Projects raw values into the client-requested shape.

    Usage:
        extractor = ResultExtractor(context.output_formatter)
        data = extractor.extract(records, selection.template)

    An empty template returns the value unchanged (untyped and scalar returns).
    """

    def __init__(self, formatter: FieldFormatter = CAMEL_CASE):
        self.formatter = formatter

    def extract(self, value: Any, template: list[TemplateEntry]) -> Any:
        if not template:
            return value
        return self._extract(value, template)

    def _extract(self, value: Any, template: list[TemplateEntry]) -> Any:
        if value is None:
            return None

        if isinstance(value, UnionValue):
            return self._extract_union(value, template)

        has_slots = any(isinstance(entry, TupleSlot) for entry in template)

        if isinstance(value, tuple) and has_slots:
            return self._extract_tuple(value, template)

        if isinstance(value, list):
            # tuples decoded from JSON arrive as flat lists
            if has_slots and value and not any(isinstance(item, (list, tuple)) for item in value):
                return self._extract_tuple(value, template)
            if not has_slots and _is_keyword_list(value):
                return self._extract_record(dict(value), template)
            return [self._extract(item, template) for item in value]

        return self._extract_record(value, template)

    def _extract_record(self, record: Any, template: list[TemplateEntry]) -> dict[str, Any]:
        output: dict[str, Any] = {}
        for entry in template:
            if isinstance(entry, TupleSlot):
                name, nested = entry.field, entry.template
            elif isinstance(entry, str):
                name, nested = entry, None
            else:
                name, nested = entry

            raw = _get(record, name)
            if raw is _MISSING:
                continue
            output[self.formatter.to_external(name)] = (
                raw if not nested else self._extract(raw, nested)
            )
        return output

    def _extract_tuple(self, value: Any, template: list[TemplateEntry]) -> dict[str, Any]:
        output: dict[str, Any] = {}
        for slot in template:
            if slot.index >= len(value):
                continue
            raw = value[slot.index]
            output[self.formatter.to_external(slot.field)] = (
                raw if slot.template is None else self._extract(raw, slot.template)
            )
        return output

    def _extract_union(self, value: UnionValue, template: list[TemplateEntry]) -> Any:
        for entry in template:
            tag, nested = (entry, None) if isinstance(entry, str) else entry
            if tag != value.tag:
                continue
            member = value.value if nested is None else self._extract(value.value, nested)
            return {self.formatter.to_external(tag): member}
        # runtime member was not requested
        return None


def _get(record: Any, name: str) -> Any:
    if isinstance(record, dict):
        return record.get(name, _MISSING)
    return getattr(record, name, _MISSING)


def _is_keyword_list(value: list) -> bool:
    return bool(value) and all(
        isinstance(item, tuple) and len(item) == 2 and isinstance(item[0], str)
        for item in value
    )
