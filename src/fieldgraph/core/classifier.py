"""
Field classifier.

Maps (field name, owner) to one of a closed set of field kinds. Resource
fields are classified once per resource when the classifier is built;
fields of composite types (struct, map, keyword list, tuple) are
classified from their declared type.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .defs import CalculationDef
from .registry import FieldEntry, SchemaRegistry
from .types import TypeKind, TypeSpec


class FieldKind(str, Enum):
    SIMPLE_ATTRIBUTE = "simple_attribute"
    SIMPLE_CALCULATION = "simple_calculation"
    COMPLEX_CALCULATION = "calculation"
    AGGREGATE = "aggregate"
    RELATIONSHIP = "relationship"
    EMBEDDED_RESOURCE = "embedded_resource"
    EMBEDDED_RESOURCE_ARRAY = "embedded_resource_array"
    UNION = "union"
    TYPED_STRUCT = "typed_struct"
    CONSTRAINED_MAP = "map"
    TUPLE = "tuple"
    KEYWORD_LIST = "keyword_list"
    OPAQUE_CUSTOM_SCALAR = "custom_type"
    UNKNOWN = "unknown"


# Kinds that must be requested with a non-empty nested list
STRUCTURED_KINDS = frozenset({
    FieldKind.RELATIONSHIP,
    FieldKind.EMBEDDED_RESOURCE,
    FieldKind.EMBEDDED_RESOURCE_ARRAY,
    FieldKind.UNION,
    FieldKind.TYPED_STRUCT,
    FieldKind.CONSTRAINED_MAP,
    FieldKind.TUPLE,
    FieldKind.KEYWORD_LIST,
})


@dataclass(frozen=True)
class Classification:
    """
    Result of classifying one field.

    Attributes:
        kind: The field kind
        name: Canonical field name
        owner: Resource name or composite type description
        type: Declared value type (relationship targets included)
        calculation: Definition for calculation kinds
    """
    kind: FieldKind
    name: str
    owner: str
    type: Optional[TypeSpec] = None
    calculation: Optional[CalculationDef] = None


def classify_type(name: str, type_spec: TypeSpec, owner: str) -> Classification:
    """Classify a value by its declared type alone."""
    inner = type_spec.unwrap()

    if inner.kind in (TypeKind.EMBEDDED, TypeKind.RESOURCE):
        kind = FieldKind.EMBEDDED_RESOURCE_ARRAY if type_spec.is_array else FieldKind.EMBEDDED_RESOURCE
    elif inner.kind == TypeKind.UNION:
        kind = FieldKind.UNION
    elif inner.kind == TypeKind.TUPLE:
        kind = FieldKind.TUPLE
    elif inner.kind == TypeKind.STRUCT and inner.has_fields:
        kind = FieldKind.TYPED_STRUCT
    elif inner.kind == TypeKind.MAP and inner.has_fields:
        kind = FieldKind.CONSTRAINED_MAP
    elif inner.kind == TypeKind.KEYWORD and inner.has_fields:
        kind = FieldKind.KEYWORD_LIST
    elif inner.kind == TypeKind.CUSTOM:
        kind = FieldKind.OPAQUE_CUSTOM_SCALAR
    else:
        kind = FieldKind.SIMPLE_ATTRIBUTE

    return Classification(kind=kind, name=name, owner=owner, type=type_spec)


def classify_entry(entry: FieldEntry, owner: str) -> Classification:
    """Classify a resource field from its schema entry."""
    definition = entry.definition

    if entry.category == "attribute":
        return classify_type(definition.name, definition.type, owner)

    if entry.category == "calculation":
        complex_calc = definition.accepts_arguments or definition.type.requires_selection
        return Classification(
            kind=FieldKind.COMPLEX_CALCULATION if complex_calc else FieldKind.SIMPLE_CALCULATION,
            name=definition.name,
            owner=owner,
            type=definition.type,
            calculation=definition,
        )

    if entry.category == "aggregate":
        return Classification(kind=FieldKind.AGGREGATE, name=definition.name, owner=owner)

    target = TypeSpec(kind=TypeKind.RESOURCE, name=definition.destination)
    if definition.cardinality == "many":
        target = TypeSpec.array_of(target)
    return Classification(kind=FieldKind.RELATIONSHIP, name=definition.name, owner=owner, type=target)


class FieldClassifier:
    """
    Classifies resource fields in O(1) per lookup.

    Usage:
        classifier = FieldClassifier(registry)
        classifier.classify("user", "Todo").kind  # FieldKind.RELATIONSHIP
    """

    def __init__(self, registry: SchemaRegistry):
        self.registry = registry
        self._tables: dict[str, dict[str, Classification]] = {
            resource: {
                name: classify_entry(entry, resource)
                for name, entry in registry.field_table(resource).items()
            }
            for resource in registry.schema.resources
        }

    def classify(self, field_name: str, owner: str) -> Classification:
        """Classify a field of a resource. Unknown names yield FieldKind.UNKNOWN."""
        table = self._tables.get(owner, {})
        classification = table.get(field_name)
        if classification is None:
            return Classification(kind=FieldKind.UNKNOWN, name=field_name, owner=owner)
        return classification

    def classify_composite_field(self, field_name: str, composite: TypeSpec) -> Classification:
        """Classify a field of a struct, map, keyword list or tuple."""
        owner = composite.describe()
        constraint = composite.field(field_name)
        if constraint is None:
            return Classification(kind=FieldKind.UNKNOWN, name=field_name, owner=owner, type=composite)
        return classify_type(field_name, constraint.type, owner)
