"""
Fieldgraph - field selection planning for resource schemas.

Turns a client's nested field list into:
- select: stored attributes to fetch directly
- load: calculations, aggregates, relationships and nested specs
- template: the request-ordered plan for shaping fetched data

Usage:
    from fieldgraph import SchemaRegistry, ProcessingContext, FieldSelectionPipeline

    registry = SchemaRegistry.from_yaml("schema.yaml")
    pipeline = FieldSelectionPipeline(ProcessingContext.create(registry))
    select, load, template = pipeline.process("Todo", "read", ["id", {"user": ["name"]}])
"""

from __future__ import annotations

from .core import (
    ActionNotFoundError,
    CalculationLoad,
    FieldgraphError,
    FieldKind,
    FieldSelection,
    FieldSelectionError,
    FieldSelectionRequest,
    ResourceNotFoundError,
    SchemaCompiler,
    SchemaConfigError,
    SchemaRegistry,
    TupleSlot,
    TypeKind,
    TypeSpec,
    UnionValue,
    compile_schema,
)
from .runtime import (
    FieldSelectionPipeline,
    ProcessingContext,
    ResultExtractor,
    build_error_response,
    process_fields,
)

__version__ = "0.1.0"

__all__ = [
    "SchemaRegistry",
    "SchemaCompiler",
    "compile_schema",
    "TypeKind",
    "TypeSpec",
    "FieldKind",
    "ProcessingContext",
    "FieldSelectionPipeline",
    "process_fields",
    "ResultExtractor",
    "build_error_response",
    "FieldSelection",
    "FieldSelectionRequest",
    "CalculationLoad",
    "TupleSlot",
    "UnionValue",
    "FieldgraphError",
    "FieldSelectionError",
    "SchemaConfigError",
    "ResourceNotFoundError",
    "ActionNotFoundError",
]
