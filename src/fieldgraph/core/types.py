"""
Type descriptors for schema values.

A TypeSpec describes the shape of an attribute, calculation return,
union member, or nested field. Composite kinds (map, keyword, tuple,
struct) carry an ordered list of field constraints; unions carry their
members; arrays wrap an item type.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import cached_property
from typing import Optional


PRIMITIVE_TYPES = frozenset({
    "string",
    "integer",
    "boolean",
    "float",
    "decimal",
    "date",
    "datetime",
    "naive_datetime",
    "time",
    "atom",
    "uuid",
    "binary",
    "ci_string",
    "duration",
})


class TypeKind(str, Enum):
    PRIMITIVE = "primitive"
    CUSTOM = "custom"
    RESOURCE = "resource"
    EMBEDDED = "embedded"
    MAP = "map"
    KEYWORD = "keyword"
    TUPLE = "tuple"
    STRUCT = "struct"
    UNION = "union"
    ARRAY = "array"
    ANY = "any"


# Kinds that are constrained by an explicit field list
FIELD_CONSTRAINED_KINDS = frozenset({TypeKind.MAP, TypeKind.KEYWORD, TypeKind.TUPLE, TypeKind.STRUCT})


@dataclass(frozen=True)
class FieldConstraint:
    """A named field inside a map, keyword list, tuple or typed struct."""
    name: str
    type: "TypeSpec"
    allow_nil: bool = True


@dataclass(frozen=True)
class UnionMember:
    """A tagged member of a union type."""
    tag: str
    type: "TypeSpec"


@dataclass(frozen=True)
class TypeSpec:
    """
    Immutable type descriptor.

    ``name`` holds the primitive name, the resource name, or the name of a
    registered struct/custom type. ``field_names`` maps internal struct field
    names to client-facing names.
    """
    kind: TypeKind
    name: Optional[str] = None
    fields: tuple[FieldConstraint, ...] = ()
    members: tuple[UnionMember, ...] = ()
    item: Optional["TypeSpec"] = None
    field_names: tuple[tuple[str, str], ...] = ()

    # --- constructors ---

    @classmethod
    def primitive(cls, name: str) -> "TypeSpec":
        return cls(kind=TypeKind.PRIMITIVE, name=name)

    @classmethod
    def array_of(cls, item: "TypeSpec") -> "TypeSpec":
        return cls(kind=TypeKind.ARRAY, item=item)

    # --- introspection ---

    def unwrap(self) -> "TypeSpec":
        """Strip any number of array wrappers."""
        current = self
        while current.kind == TypeKind.ARRAY and current.item is not None:
            current = current.item
        return current

    @property
    def is_array(self) -> bool:
        return self.kind == TypeKind.ARRAY

    @property
    def has_fields(self) -> bool:
        return bool(self.fields)

    @property
    def is_scalar(self) -> bool:
        """True for values that never accept a field selection."""
        inner = self.unwrap()
        if inner.kind in (TypeKind.PRIMITIVE, TypeKind.CUSTOM):
            return True
        if inner.kind in (TypeKind.MAP, TypeKind.KEYWORD, TypeKind.STRUCT):
            return not inner.has_fields
        return False

    @property
    def requires_selection(self) -> bool:
        """True for values whose fields must be selected explicitly."""
        inner = self.unwrap()
        if inner.kind in (TypeKind.RESOURCE, TypeKind.EMBEDDED, TypeKind.UNION, TypeKind.TUPLE):
            return True
        return inner.kind in FIELD_CONSTRAINED_KINDS and inner.has_fields

    @cached_property
    def _field_index(self) -> dict[str, tuple[int, FieldConstraint]]:
        return {fc.name: (index, fc) for index, fc in enumerate(self.fields)}

    @cached_property
    def _member_index(self) -> dict[str, UnionMember]:
        return {member.tag: member for member in self.members}

    @cached_property
    def _client_names(self) -> dict[str, str]:
        return {client: internal for internal, client in self.field_names}

    def field(self, name: str) -> Optional[FieldConstraint]:
        entry = self._field_index.get(name)
        return entry[1] if entry else None

    def field_position(self, name: str) -> Optional[int]:
        entry = self._field_index.get(name)
        return entry[0] if entry else None

    def member(self, tag: str) -> Optional[UnionMember]:
        return self._member_index.get(tag)

    def internal_field_name(self, client_name: str) -> Optional[str]:
        """Resolve a client-facing name through ``field_names``."""
        return self._client_names.get(client_name)

    def client_field_name(self, internal_name: str) -> Optional[str]:
        for internal, client in self.field_names:
            if internal == internal_name:
                return client
        return None

    def describe(self) -> str:
        """Short human readable form, used in error messages."""
        if self.kind == TypeKind.ARRAY and self.item is not None:
            return f"array of {self.item.describe()}"
        if self.name:
            return self.name
        return self.kind.value


ANY_TYPE = TypeSpec(kind=TypeKind.ANY)
