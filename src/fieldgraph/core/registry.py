"""
Schema registry - the read-only schema oracle.

Answers "what is field X on resource R" for the field processor. All
lookup tables are built once at construction; the registry is never
mutated afterwards, so one instance can serve concurrent requests.

Usage:
    from fieldgraph.core.registry import SchemaRegistry

    registry = SchemaRegistry.from_yaml("schema.yaml")
    registry.attributes("Todo")
    registry.union_members("content", "Todo")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional, Union

from .compiler import compile_schema, load_schema_document
from .defs import (
    ActionDef,
    AggregateDef,
    AttributeDef,
    CalculationDef,
    RelationshipDef,
    ResourceDef,
    SchemaDef,
)
from .errors import ActionNotFoundError, ResourceNotFoundError
from .types import FieldConstraint, TypeKind, TypeSpec

logger = logging.getLogger(__name__)


FieldCategory = Literal["attribute", "calculation", "aggregate", "relationship"]
FieldDefinition = Union[AttributeDef, CalculationDef, AggregateDef, RelationshipDef]


@dataclass(frozen=True)
class FieldEntry:
    """A field of a resource together with the section it is declared in."""
    category: FieldCategory
    definition: FieldDefinition

    @property
    def name(self) -> str:
        return self.definition.name


class SchemaRegistry:
    """
    Read-only lookup over a compiled SchemaDef.

    Example:
        registry = SchemaRegistry(compile_schema(document))
        entry = registry.field_table("Todo")["title"]
        entry.category  # "attribute"
    """

    def __init__(self, schema: SchemaDef):
        self.schema = schema
        self._field_tables: dict[str, dict[str, FieldEntry]] = {
            name: self._build_field_table(resource)
            for name, resource in schema.resources.items()
        }
        self._client_names: dict[str, dict[str, str]] = {
            name: {client: internal for internal, client in resource.field_names.items()}
            for name, resource in schema.resources.items()
        }

    @classmethod
    def from_dict(cls, document: dict) -> "SchemaRegistry":
        """Compile a schema document and wrap it."""
        return cls(compile_schema(document))

    @classmethod
    def from_yaml(cls, path: Path | str) -> "SchemaRegistry":
        """Load, compile and wrap a schema file."""
        registry = cls(compile_schema(load_schema_document(path)))
        logger.info(f"Loaded schema from {path} ({len(registry.schema.resources)} resources)")
        return registry

    @staticmethod
    def _build_field_table(resource: ResourceDef) -> dict[str, FieldEntry]:
        table: dict[str, FieldEntry] = {}
        for attr in resource.attributes.values():
            table[attr.name] = FieldEntry("attribute", attr)
        for calc in resource.calculations.values():
            table[calc.name] = FieldEntry("calculation", calc)
        for agg in resource.aggregates.values():
            table[agg.name] = FieldEntry("aggregate", agg)
        for rel in resource.relationships.values():
            table[rel.name] = FieldEntry("relationship", rel)
        return table

    # =========================================================================
    # Resources and actions
    # =========================================================================

    def has_resource(self, name: str) -> bool:
        return name in self.schema.resources

    def resource(self, name: str) -> ResourceDef:
        """
        Get a resource definition.

        Raises:
            ResourceNotFoundError: If the resource is not registered
        """
        resource = self.schema.resources.get(name)
        if resource is None:
            raise ResourceNotFoundError(name)
        return resource

    def action(self, resource_name: str, action_name: str) -> ActionDef:
        """
        Get an action of a resource.

        Raises:
            ResourceNotFoundError: If the resource is not registered
            ActionNotFoundError: If the resource has no such action
        """
        action = self.resource(resource_name).actions.get(action_name)
        if action is None:
            raise ActionNotFoundError(resource_name, action_name)
        return action

    def named_type(self, name: str) -> Optional[TypeSpec]:
        return self.schema.types.get(name)

    def field_table(self, resource_name: str) -> dict[str, FieldEntry]:
        """All fields of a resource keyed by canonical name."""
        table = self._field_tables.get(resource_name)
        if table is None:
            raise ResourceNotFoundError(resource_name)
        return table

    # =========================================================================
    # Oracle interface
    # =========================================================================

    def attributes(self, resource_name: str) -> list[AttributeDef]:
        return list(self.resource(resource_name).attributes.values())

    def calculations(self, resource_name: str) -> list[CalculationDef]:
        return list(self.resource(resource_name).calculations.values())

    def aggregates(self, resource_name: str) -> list[AggregateDef]:
        return list(self.resource(resource_name).aggregates.values())

    def relationships(self, resource_name: str) -> list[RelationshipDef]:
        return list(self.resource(resource_name).relationships.values())

    def embedded_type_of(self, field_name: str, resource_name: str) -> Optional[str]:
        """Name of the embedded resource stored in an attribute, if any."""
        attr = self.resource(resource_name).attributes.get(field_name)
        if attr is None:
            return None
        inner = attr.type.unwrap()
        return inner.name if inner.kind == TypeKind.EMBEDDED else None

    def union_members(self, field_name: str, resource_name: str) -> Optional[dict[str, TypeSpec]]:
        """Member tag -> type for a union-typed attribute or calculation."""
        spec = self._field_type(field_name, resource_name)
        if spec is None or spec.kind != TypeKind.UNION:
            return None
        return {member.tag: member.type for member in spec.members}

    def typed_struct_fields(self, type_ref: Union[str, TypeSpec]) -> list[FieldConstraint]:
        """Fixed field list of a typed struct (by name or descriptor)."""
        spec = self.named_type(type_ref) if isinstance(type_ref, str) else type_ref
        if spec is None:
            return []
        spec = spec.unwrap()
        return list(spec.fields) if spec.kind == TypeKind.STRUCT else []

    def map_field_constraints(self, field_name: str, resource_name: str) -> Optional[list[FieldConstraint]]:
        """Field constraints of a map / keyword / tuple attribute, or None."""
        spec = self._field_type(field_name, resource_name)
        if spec is None or spec.kind not in (TypeKind.MAP, TypeKind.KEYWORD, TypeKind.TUPLE):
            return None
        return list(spec.fields) if spec.fields else None

    def _field_type(self, field_name: str, resource_name: str) -> Optional[TypeSpec]:
        entry = self.field_table(resource_name).get(field_name)
        if entry is None or entry.category not in ("attribute", "calculation"):
            return None
        return entry.definition.type.unwrap()

    # =========================================================================
    # Client naming
    # =========================================================================

    def internal_field_name(self, resource_name: str, client_name: str) -> Optional[str]:
        """Resolve a client name through the resource's field_names overrides."""
        return self._client_names.get(resource_name, {}).get(client_name)

    def client_field_name(self, resource_name: str, internal_name: str) -> Optional[str]:
        resource = self.schema.resources.get(resource_name)
        if resource is None:
            return None
        return resource.field_names.get(internal_name)
