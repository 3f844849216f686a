"""
Schema compiler - converts a schema document into SchemaDef.

Validates the document structure and resolves every type reference.

Usage:
    from fieldgraph.core.compiler import SchemaCompiler

    compiler = SchemaCompiler()
    result = compiler.compile(document)  # document: dict (e.g. from YAML)
    if result.success:
        schema = result.schema
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from .defs import (
    ACTION_TYPES,
    AGGREGATE_KINDS,
    ActionDef,
    AggregateDef,
    ArgumentDef,
    AttributeDef,
    CalculationDef,
    RelationshipDef,
    ResourceDef,
    SchemaDef,
)
from .errors import SchemaConfigError
from .types import ANY_TYPE, PRIMITIVE_TYPES, FieldConstraint, TypeKind, TypeSpec, UnionMember

logger = logging.getLogger(__name__)


_COMPOSITE_KINDS = {
    "map": TypeKind.MAP,
    "keyword": TypeKind.KEYWORD,
    "tuple": TypeKind.TUPLE,
    "struct": TypeKind.STRUCT,
}


@dataclass
class CompilationError:
    """Single compilation error."""
    resource: Optional[str]
    field: Optional[str]
    message: str

    def __str__(self) -> str:
        parts = []
        if self.resource:
            parts.append(self.resource)
        if self.field:
            parts.append(self.field)
        location = ".".join(parts) if parts else "global"
        return f"[{location}] {self.message}"


@dataclass
class CompilationResult:
    """Result of compilation."""
    success: bool
    schema: Optional[SchemaDef] = None
    errors: list[CompilationError] = field(default_factory=list)

    def error_messages(self) -> list[str]:
        """Get all error messages as strings."""
        return [str(e) for e in self.errors]


class SchemaCompiler:
    """
    Compiles a schema document into a SchemaDef.

    Performs validation:
    - All type references resolve (primitive, named type, or resource)
    - Relationship destinations exist
    - Aggregates reference existing relationships and destination fields
    - Field names are unique across attributes, calculations, aggregates, relationships
    - Tuples and structs declare fields, unions declare members
    """

    SCHEMA_VERSION = 1

    def __init__(self):
        self.errors: list[CompilationError] = []
        self._raw_types: dict[str, Any] = {}
        self._types: dict[str, TypeSpec] = {}
        self._resolving: set[str] = set()
        self._resource_kinds: dict[str, TypeKind] = {}

    def compile(self, document: dict) -> CompilationResult:
        """
        Compile a schema document.

        Args:
            document: Schema document with "types" and "resources" sections

        Returns:
            CompilationResult with either schema or errors
        """
        self.errors = []
        self._types = {}
        self._resolving = set()

        if not isinstance(document, dict):
            self._add_error("Schema document must be a mapping")
            return CompilationResult(success=False, errors=self.errors)

        self._raw_types = document.get("types") or {}
        resources = document.get("resources") or {}

        if not resources:
            self._add_error("No resources defined")

        # Resource names must be known before any type is resolved
        self._resource_kinds = {
            name: TypeKind.EMBEDDED if (spec or {}).get("embedded") else TypeKind.RESOURCE
            for name, spec in resources.items()
        }
        for name in self._raw_types:
            if name in self._resource_kinds:
                self._add_error(f"Type '{name}' clashes with a resource of the same name")

        for name in self._raw_types:
            self._resolve_named_type(name)

        resource_defs = {
            name: self._build_resource(name, spec or {})
            for name, spec in resources.items()
        }
        self._validate_relationships(resource_defs)
        self._validate_aggregates(resource_defs)

        if self.errors:
            return CompilationResult(success=False, schema=None, errors=self.errors)

        schema = SchemaDef(
            version=document.get("version", self.SCHEMA_VERSION),
            resources=resource_defs,
            types=dict(self._types),
        )
        return CompilationResult(success=True, schema=schema, errors=[])

    def _add_error(
        self,
        message: str,
        resource: Optional[str] = None,
        field: Optional[str] = None,
    ):
        """Add a compilation error."""
        self.errors.append(CompilationError(
            resource=resource,
            field=field,
            message=message,
        ))

    # =========================================================================
    # Type resolution
    # =========================================================================

    def _resolve_named_type(self, name: str) -> TypeSpec:
        if name in self._types:
            return self._types[name]
        if name in self._resolving:
            self._add_error(f"Type '{name}' references itself", field=name)
            return ANY_TYPE

        self._resolving.add(name)
        raw = self._raw_types[name]
        if isinstance(raw, str):
            spec = self._resolve(raw, None, name)
        else:
            spec = self._resolve(raw, None, name, type_name=name)
        self._resolving.discard(name)
        self._types[name] = spec
        return spec

    def _resolve(
        self,
        ref: Any,
        resource: Optional[str],
        field_name: Optional[str],
        type_name: Optional[str] = None,
    ) -> TypeSpec:
        """Resolve a type reference (string or mapping) into a TypeSpec."""
        if isinstance(ref, str):
            return self._resolve_name(ref, resource, field_name)

        if not isinstance(ref, dict) or "type" not in ref:
            self._add_error(f"Invalid type reference {ref!r}", resource=resource, field=field_name)
            return ANY_TYPE

        kind = ref["type"]

        if kind == "array":
            if "items" not in ref:
                self._add_error("Array type missing 'items'", resource=resource, field=field_name)
                return TypeSpec.array_of(ANY_TYPE)
            return TypeSpec.array_of(self._resolve(ref["items"], resource, field_name))

        if kind in _COMPOSITE_KINDS:
            return self._resolve_composite(ref, _COMPOSITE_KINDS[kind], resource, field_name, type_name)

        if kind == "union":
            return self._resolve_union(ref, resource, field_name, type_name)

        if kind == "custom":
            name = ref.get("name") or type_name
            if not name:
                self._add_error("Custom type missing 'name'", resource=resource, field=field_name)
            return TypeSpec(kind=TypeKind.CUSTOM, name=name)

        # {type: string, allow_nil: false} and similar wrappers
        return self._resolve(kind, resource, field_name)

    def _resolve_name(self, name: str, resource: Optional[str], field_name: Optional[str]) -> TypeSpec:
        if name in PRIMITIVE_TYPES:
            return TypeSpec.primitive(name)
        if name in self._raw_types:
            return self._resolve_named_type(name)
        if name in self._resource_kinds:
            return TypeSpec(kind=self._resource_kinds[name], name=name)
        if name in ("map", "keyword", "struct"):
            return TypeSpec(kind=_COMPOSITE_KINDS[name])
        if name == "any":
            return ANY_TYPE
        self._add_error(f"Unknown type '{name}'", resource=resource, field=field_name)
        return ANY_TYPE

    def _resolve_composite(
        self,
        ref: dict,
        kind: TypeKind,
        resource: Optional[str],
        field_name: Optional[str],
        type_name: Optional[str],
    ) -> TypeSpec:
        raw_fields = ref.get("fields") or {}
        if kind in (TypeKind.TUPLE, TypeKind.STRUCT) and not raw_fields:
            self._add_error(f"{kind.value.capitalize()} type declares no fields", resource=resource, field=field_name)

        constraints = []
        for name, raw in raw_fields.items():
            allow_nil = raw.get("allow_nil", True) if isinstance(raw, dict) else True
            constraints.append(FieldConstraint(
                name=name,
                type=self._resolve(raw, resource, f"{field_name}.{name}" if field_name else name),
                allow_nil=allow_nil,
            ))

        field_names = ref.get("field_names") or {}
        for internal in field_names:
            if internal not in raw_fields:
                self._add_error(
                    f"field_names maps unknown field '{internal}'",
                    resource=resource,
                    field=field_name,
                )

        return TypeSpec(
            kind=kind,
            name=ref.get("name") or type_name,
            fields=tuple(constraints),
            field_names=tuple(field_names.items()),
        )

    def _resolve_union(
        self,
        ref: dict,
        resource: Optional[str],
        field_name: Optional[str],
        type_name: Optional[str],
    ) -> TypeSpec:
        raw_members = ref.get("types") or {}
        if not raw_members:
            self._add_error("Union type declares no members", resource=resource, field=field_name)

        members = tuple(
            UnionMember(tag=tag, type=self._resolve(raw, resource, field_name))
            for tag, raw in raw_members.items()
        )
        return TypeSpec(kind=TypeKind.UNION, name=ref.get("name") or type_name, members=members)

    # =========================================================================
    # Resources
    # =========================================================================

    def _build_resource(self, name: str, spec: dict) -> ResourceDef:
        resource = ResourceDef(
            name=name,
            embedded=bool(spec.get("embedded", False)),
            field_names=dict(spec.get("field_names") or {}),
        )
        seen: set[str] = set()

        def claim(field_name: str) -> None:
            if field_name in seen:
                self._add_error("Field name defined more than once", resource=name, field=field_name)
            seen.add(field_name)

        for attr_name, raw in (spec.get("attributes") or {}).items():
            claim(attr_name)
            allow_nil = raw.get("allow_nil", True) if isinstance(raw, dict) else True
            resource.attributes[attr_name] = AttributeDef(
                name=attr_name,
                type=self._resolve(raw, name, attr_name),
                allow_nil=allow_nil,
            )

        for calc_name, raw in (spec.get("calculations") or {}).items():
            claim(calc_name)
            resource.calculations[calc_name] = self._build_calculation(name, calc_name, raw)

        for agg_name, raw in (spec.get("aggregates") or {}).items():
            claim(agg_name)
            raw = raw or {}
            kind = raw.get("kind")
            if kind not in AGGREGATE_KINDS:
                self._add_error(
                    f"Invalid aggregate kind '{kind}', must be one of {AGGREGATE_KINDS}",
                    resource=name,
                    field=agg_name,
                )
            resource.aggregates[agg_name] = AggregateDef(
                name=agg_name,
                kind=kind,
                relationship=raw.get("relationship", ""),
                field=raw.get("field"),
            )

        for rel_name, raw in (spec.get("relationships") or {}).items():
            claim(rel_name)
            if isinstance(raw, str):
                raw = {"destination": raw}
            resource.relationships[rel_name] = RelationshipDef(
                name=rel_name,
                destination=raw.get("destination", ""),
                cardinality=raw.get("cardinality", "one"),
            )

        for mapped in resource.field_names:
            if mapped not in seen:
                self._add_error(f"field_names maps unknown field '{mapped}'", resource=name)

        for action_name, raw in (spec.get("actions") or {}).items():
            if isinstance(raw, str):
                raw = {"type": raw}
            resource.actions[action_name] = self._build_action(name, action_name, raw or {})

        return resource

    def _build_calculation(self, resource: str, calc_name: str, raw: Any) -> CalculationDef:
        arguments = []
        if isinstance(raw, dict):
            type_ref = {k: v for k, v in raw.items() if k != "arguments"}
            # {type: string, arguments: {...}} collapses to the plain name
            if set(type_ref) == {"type"}:
                type_ref = type_ref["type"]
            for arg_name, arg_raw in (raw.get("arguments") or {}).items():
                arg_spec = arg_raw if isinstance(arg_raw, dict) else {"type": arg_raw}
                arguments.append(ArgumentDef(
                    name=arg_name,
                    type=self._resolve(arg_spec, resource, f"{calc_name}({arg_name})"),
                    allow_nil=arg_spec.get("allow_nil", True),
                    has_default="default" in arg_spec,
                    default=arg_spec.get("default"),
                ))
        else:
            type_ref = raw

        return CalculationDef(
            name=calc_name,
            type=self._resolve(type_ref, resource, calc_name),
            arguments=arguments,
        )

    def _build_action(self, resource: str, action_name: str, raw: dict) -> ActionDef:
        action_type = raw.get("type", "read")
        if action_type not in ACTION_TYPES:
            self._add_error(
                f"Invalid action type '{action_type}', must be one of {ACTION_TYPES}",
                resource=resource,
                field=action_name,
            )
        returns = None
        if raw.get("returns") is not None:
            if action_type != "action":
                self._add_error("Only generic actions declare 'returns'", resource=resource, field=action_name)
            returns = self._resolve(raw["returns"], resource, action_name)

        return ActionDef(
            name=action_name,
            type=action_type,
            get=bool(raw.get("get", False)),
            returns=returns,
        )

    def _validate_relationships(self, resources: dict[str, ResourceDef]):
        """Validate all relationships reference valid resources."""
        for resource_name, resource in resources.items():
            for rel_name, rel in resource.relationships.items():
                if not rel.destination:
                    self._add_error("Missing destination", resource=resource_name, field=rel_name)
                    continue

                if rel.destination not in resources:
                    self._add_error(
                        f"Unknown destination resource '{rel.destination}'",
                        resource=resource_name,
                        field=rel_name,
                    )
                    continue

                if resources[rel.destination].embedded:
                    self._add_error(
                        f"Destination '{rel.destination}' is an embedded resource",
                        resource=resource_name,
                        field=rel_name,
                    )

                if rel.cardinality not in ("one", "many"):
                    self._add_error(
                        f"Invalid cardinality '{rel.cardinality}', must be 'one' or 'many'",
                        resource=resource_name,
                        field=rel_name,
                    )

    def _validate_aggregates(self, resources: dict[str, ResourceDef]):
        """Validate aggregates reference existing relationships and fields."""
        for resource_name, resource in resources.items():
            for agg_name, agg in resource.aggregates.items():
                rel = resource.relationships.get(agg.relationship)
                if rel is None:
                    self._add_error(
                        f"Aggregate over unknown relationship '{agg.relationship}'",
                        resource=resource_name,
                        field=agg_name,
                    )
                    continue

                destination = resources.get(rel.destination)
                if agg.field and destination and agg.field not in destination.attributes:
                    self._add_error(
                        f"Aggregate field '{agg.field}' not in {rel.destination}",
                        resource=resource_name,
                        field=agg_name,
                    )


def compile_schema(document: dict) -> SchemaDef:
    """
    Convenience function to compile a schema document.

    Raises:
        SchemaConfigError: If compilation fails

    Returns:
        Validated SchemaDef
    """
    compiler = SchemaCompiler()
    result = compiler.compile(document)

    if not result.success:
        raise SchemaConfigError(result.error_messages())

    logger.info(f"Compiled schema with {len(result.schema.resources)} resources")
    return result.schema


def load_schema_document(path: Path | str) -> dict:
    """Load a schema document from a YAML (or JSON) file."""
    path = Path(path)
    if not path.exists():
        raise SchemaConfigError([f"Schema file '{path}' not found"])

    data = yaml.safe_load(path.read_text())
    if data is None:
        raise SchemaConfigError([f"Schema file '{path}' is empty"])
    return data
