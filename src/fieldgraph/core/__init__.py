"""
Core module - schema definitions, classification and field processing.
"""

from __future__ import annotations

from .classifier import Classification, FieldClassifier, FieldKind
from .compiler import (
    CompilationError,
    CompilationResult,
    SchemaCompiler,
    compile_schema,
    load_schema_document,
)
from .defs import (
    ActionDef,
    AggregateDef,
    ArgumentDef,
    AttributeDef,
    CalculationDef,
    RelationshipDef,
    ResourceDef,
    SchemaDef,
)
from .errors import (
    ActionNotFoundError,
    ConfigError,
    DuplicateFieldError,
    ErrorFrame,
    FieldDoesNotSupportNestingError,
    FieldgraphError,
    FieldSelectionError,
    InvalidCalculationArgsError,
    InvalidCalculationSpecError,
    InvalidFieldFormatError,
    InvalidFieldSelectionError,
    RequiresFieldSelectionError,
    ResourceNotFoundError,
    SchemaConfigError,
    SimpleAttributeWithSpecError,
    SimpleCalculationWithSpecError,
    UnknownFieldError,
    UnsupportedFieldCombinationError,
    UnsupportedFieldFormatError,
)
from .formatter import FieldFormatter, get_formatter
from .processor import FieldProcessor
from .query_types import (
    CalculationLoad,
    FieldSelection,
    FieldSelectionRequest,
    TupleSlot,
    UnionValue,
)
from .registry import SchemaRegistry
from .types import FieldConstraint, TypeKind, TypeSpec, UnionMember
from .validator import NestingValidator

__all__ = [
    # Definitions
    "ActionDef",
    "AggregateDef",
    "ArgumentDef",
    "AttributeDef",
    "CalculationDef",
    "RelationshipDef",
    "ResourceDef",
    "SchemaDef",
    "FieldConstraint",
    "TypeKind",
    "TypeSpec",
    "UnionMember",
    # Compiler / registry
    "CompilationError",
    "CompilationResult",
    "SchemaCompiler",
    "compile_schema",
    "load_schema_document",
    "SchemaRegistry",
    # Engine
    "Classification",
    "FieldClassifier",
    "FieldKind",
    "NestingValidator",
    "FieldProcessor",
    "FieldFormatter",
    "get_formatter",
    # Results
    "CalculationLoad",
    "FieldSelection",
    "FieldSelectionRequest",
    "TupleSlot",
    "UnionValue",
    # Errors
    "FieldgraphError",
    "SchemaConfigError",
    "ConfigError",
    "ResourceNotFoundError",
    "ActionNotFoundError",
    "ErrorFrame",
    "FieldSelectionError",
    "UnknownFieldError",
    "UnsupportedFieldFormatError",
    "InvalidFieldFormatError",
    "DuplicateFieldError",
    "SimpleAttributeWithSpecError",
    "SimpleCalculationWithSpecError",
    "FieldDoesNotSupportNestingError",
    "InvalidCalculationSpecError",
    "InvalidCalculationArgsError",
    "RequiresFieldSelectionError",
    "UnsupportedFieldCombinationError",
    "InvalidFieldSelectionError",
]
