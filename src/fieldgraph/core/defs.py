"""
Core dataclass definitions for fieldgraph schemas.

These define the schema structure for resources: attributes, calculations,
aggregates, relationships and actions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Optional

from .types import TypeSpec


AggregateKind = Literal["count", "exists", "sum", "avg", "min", "max", "first", "last", "list"]
ActionType = Literal["read", "create", "update", "destroy", "action"]

AGGREGATE_KINDS = ("count", "exists", "sum", "avg", "min", "max", "first", "last", "list")
ACTION_TYPES = ("read", "create", "update", "destroy", "action")


@dataclass
class AttributeDef:
    """Definition of a stored attribute."""
    name: str
    type: TypeSpec
    allow_nil: bool = True


@dataclass
class ArgumentDef:
    """Definition of a calculation argument."""
    name: str
    type: TypeSpec
    allow_nil: bool = True
    has_default: bool = False
    default: Any = None

    @property
    def required(self) -> bool:
        return not self.allow_nil and not self.has_default


@dataclass
class CalculationDef:
    """Definition of a calculation, with its argument signature."""
    name: str
    type: TypeSpec
    arguments: list[ArgumentDef] = field(default_factory=list)

    @property
    def accepts_arguments(self) -> bool:
        return bool(self.arguments)


@dataclass
class AggregateDef:
    """Definition of an aggregate over a relationship."""
    name: str
    kind: AggregateKind
    relationship: str
    field: Optional[str] = None


@dataclass
class RelationshipDef:
    """Definition of a relationship to another resource."""
    name: str
    destination: str  # destination resource name
    cardinality: Literal["one", "many"] = "one"


@dataclass
class ActionDef:
    """Definition of a resource action."""
    name: str
    type: ActionType
    get: bool = False  # read action returning a single record
    returns: Optional[TypeSpec] = None  # generic actions only


@dataclass
class ResourceDef:
    """Complete definition of a resource."""
    name: str
    attributes: dict[str, AttributeDef] = field(default_factory=dict)
    calculations: dict[str, CalculationDef] = field(default_factory=dict)
    aggregates: dict[str, AggregateDef] = field(default_factory=dict)
    relationships: dict[str, RelationshipDef] = field(default_factory=dict)
    actions: dict[str, ActionDef] = field(default_factory=dict)
    embedded: bool = False
    field_names: dict[str, str] = field(default_factory=dict)  # internal -> client name


@dataclass
class SchemaDef:
    """Complete schema definition."""
    version: int
    resources: dict[str, ResourceDef]
    types: dict[str, TypeSpec] = field(default_factory=dict)
