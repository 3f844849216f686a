"""
Processing context for field selection.

Carries every collaborator the engine needs (schema oracle, formatters,
classifier) so nothing is read from ambient state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from ..core.classifier import FieldClassifier
from ..core.formatter import CAMEL_CASE, FieldFormatter, FormatterSpec, get_formatter
from ..core.registry import SchemaRegistry
from ..core.types import TypeSpec
from ..core.validator import NestingValidator


@dataclass
class ProcessingContext:
    """
    Context passed through the field processor.

    Contains:
    - registry: The schema oracle
    - input_formatter: Translates client identifiers to canonical names
    - output_formatter: Renders canonical names in error paths and output
    """
    registry: SchemaRegistry
    input_formatter: FieldFormatter = CAMEL_CASE
    output_formatter: FieldFormatter = CAMEL_CASE
    classifier: FieldClassifier = field(init=False)
    validator: NestingValidator = field(init=False)

    def __post_init__(self):
        """Build the per-resource classification tables."""
        self.classifier = FieldClassifier(self.registry)
        self.validator = NestingValidator()

    @classmethod
    def create(
        cls,
        registry: SchemaRegistry,
        input_formatter: FormatterSpec = "camel_case",
        output_formatter: FormatterSpec = "camel_case",
    ) -> "ProcessingContext":
        """Build a context from formatter names (or custom formatter pairs)."""
        return cls(
            registry=registry,
            input_formatter=get_formatter(input_formatter),
            output_formatter=get_formatter(output_formatter),
        )

    # --- resource naming ---

    def resolver_for_resource(self, resource: str) -> Callable[[str], str]:
        def resolve(client_name: str) -> str:
            internal = self.registry.internal_field_name(resource, client_name)
            return internal or self.input_formatter.to_canonical(client_name)
        return resolve

    def renderer_for_resource(self, resource: str) -> Callable[[str], str]:
        def render(name: str) -> str:
            client = self.registry.client_field_name(resource, name)
            return client or self.output_formatter.to_external(name)
        return render

    # --- composite type naming ---

    def resolver_for_type(self, type_spec: TypeSpec) -> Callable[[str], str]:
        def resolve(client_name: str) -> str:
            internal = type_spec.internal_field_name(client_name)
            return internal or self.input_formatter.to_canonical(client_name)
        return resolve

    def renderer_for_type(self, type_spec: TypeSpec) -> Callable[[str], str]:
        def render(name: str) -> str:
            client = type_spec.client_field_name(name)
            return client or self.output_formatter.to_external(name)
        return render
