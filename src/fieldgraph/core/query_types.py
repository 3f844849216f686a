"""
Request and result types for field selection.

Client input is validated with pydantic (FieldSelectionRequest); the
engine's internal and output structures are plain dataclasses.

Output shapes:
    select:   ["id", "title", "metadata"]
    load:     ["is_overdue", ("user", ["id", "name"]),
               ("self", CalculationLoad({"prefix": "x"}, ["id"]))]
    template: ["id", ("user", ["id", "name"]),
               ("coordinates", [TupleSlot(0, "latitude"), TupleSlot(1, "longitude")])]
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, NamedTuple, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# --- Client input ---

class ClientForm(str, Enum):
    """Shape in which a field was requested."""
    BARE = "bare"          # "title"
    LIST = "list"          # {"user": ["id"]}
    MAPPING = "mapping"    # {"self": {"args": {...}, "fields": [...]}}


@dataclass(frozen=True)
class FieldRequest:
    """
    One parsed entry of a client field list.

    ``name`` is the canonical identifier, ``client_name`` the identifier as
    the client sent it. ``spec`` is the nested list or mapping (None when bare).
    """
    name: str
    client_name: str
    form: ClientForm
    spec: Any = None

    @property
    def is_bare(self) -> bool:
        return self.form == ClientForm.BARE

    @property
    def is_empty_list(self) -> bool:
        return self.form == ClientForm.LIST and not self.spec


class FieldSelectionRequest(BaseModel):
    """
    Wire-level request for one action.

    Example:
    {
        "resource": "Todo",
        "action": "read",
        "fields": ["id", {"user": ["name"]}]
    }
    """
    model_config = ConfigDict(extra="forbid")

    resource: str
    action: str
    fields: list[Any] = Field(default_factory=list)


# --- Engine output ---

@dataclass(frozen=True)
class CalculationLoad:
    """Arguments and nested load of a calculation."""
    args: dict[str, Any] = field(default_factory=dict)
    fields: list["LoadEntry"] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"args": dict(self.args), "fields": [_load_to_json(e) for e in self.fields]}


@dataclass(frozen=True)
class TupleSlot:
    """Positional slot of a tuple, projected by name."""
    index: int
    field: str
    template: Optional[list] = None  # nested selection for structured slots

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"index": self.index, "field": self.field}
        if self.template is not None:
            data["fields"] = [_template_to_json(e) for e in self.template]
        return data


LoadEntry = Union[str, tuple[str, Union[list, CalculationLoad]]]
TemplateEntry = Union[str, TupleSlot, tuple[str, list]]


class FieldSelection(NamedTuple):
    """The (select, load, template) triple."""
    select: list[str]
    load: list[LoadEntry]
    template: list[TemplateEntry]

    @classmethod
    def empty(cls) -> "FieldSelection":
        return cls([], [], [])

    def to_dict(self) -> dict[str, list]:
        """JSON-friendly rendering (tuples become single-key objects)."""
        return {
            "select": list(self.select),
            "load": [_load_to_json(e) for e in self.load],
            "template": [_template_to_json(e) for e in self.template],
        }


def _load_to_json(entry: LoadEntry) -> Any:
    if isinstance(entry, str):
        return entry
    name, nested = entry
    if isinstance(nested, CalculationLoad):
        return {name: nested.to_dict()}
    return {name: [_load_to_json(e) for e in nested]}


def _template_to_json(entry: TemplateEntry) -> Any:
    if isinstance(entry, str):
        return entry
    if isinstance(entry, TupleSlot):
        return entry.to_dict()
    name, nested = entry
    return {name: [_template_to_json(e) for e in nested]}


# --- Extraction input ---

@dataclass(frozen=True)
class UnionValue:
    """A union value tagged with its active member."""
    tag: str
    value: Any


@dataclass(frozen=True)
class Path:
    """Dotted path accumulator, in client naming."""
    segments: tuple[str, ...] = ()

    def child(self, segment: str) -> "Path":
        return Path(self.segments + (segment,))

    def render(self, leaf: Optional[str] = None) -> str:
        segments = self.segments + (leaf,) if leaf is not None else self.segments
        return ".".join(segments)

    def __bool__(self) -> bool:
        return bool(self.segments)
