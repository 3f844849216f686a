"""
Field selection pipeline - action lookup, return type, processing.

Handles:
- Resolving the action and its return type
- Running the field processor over the client field list
"""

from __future__ import annotations

import logging
from typing import Any, Union

from ..core.defs import ActionDef
from ..core.processor import FieldProcessor
from ..core.query_types import FieldSelection, FieldSelectionRequest
from ..core.types import ANY_TYPE, TypeKind, TypeSpec
from .context import ProcessingContext

logger = logging.getLogger(__name__)


def action_return_type(resource: str, action: ActionDef, embedded: bool = False) -> TypeSpec:
    """
    Return type of an action.

    read (get) / create / update / destroy -> the resource
    read                                   -> array of the resource
    generic action                         -> its declared return, or any
    """
    if action.type == "action":
        return action.returns if action.returns is not None else ANY_TYPE

    record = TypeSpec(kind=TypeKind.EMBEDDED if embedded else TypeKind.RESOURCE, name=resource)
    if action.type == "read" and not action.get:
        return TypeSpec.array_of(record)
    return record


class FieldSelectionPipeline:
    """
    Runs field selection for resource actions.

    Usage:
        pipeline = FieldSelectionPipeline(context)
        selection = pipeline.process("Todo", "read", ["id", {"user": ["name"]}])
    """

    def __init__(self, context: ProcessingContext):
        self.context = context
        self.processor = FieldProcessor(context)

    def return_type(self, resource: str, action: str) -> TypeSpec:
        """
        Raises:
            ResourceNotFoundError: If the resource is not registered
            ActionNotFoundError: If the resource has no such action
        """
        action_def = self.context.registry.action(resource, action)
        embedded = self.context.registry.resource(resource).embedded
        return action_return_type(resource, action_def, embedded)

    def process(self, resource: str, action: str, fields: Any) -> FieldSelection:
        """
        Process a client field list for an action.

        Args:
            resource: Resource name
            action: Action name on the resource
            fields: Client field list

        Returns:
            FieldSelection (select, load, template)
        """
        return_type = self.return_type(resource, action)
        logger.debug(f"Processing fields for {resource}.{action} returning {return_type.describe()}")

        selection = self.processor.process(return_type, fields)

        logger.debug(
            f"{resource}.{action}: {len(selection.select)} selected, "
            f"{len(selection.load)} loaded"
        )
        return selection

    def process_request(self, request: Union[FieldSelectionRequest, dict]) -> FieldSelection:
        """Process a wire-level request (validated with pydantic)."""
        if isinstance(request, dict):
            request = FieldSelectionRequest.model_validate(request)
        return self.process(request.resource, request.action, request.fields)


def process_fields(context: ProcessingContext, resource: str, action: str, fields: Any) -> FieldSelection:
    """Convenience wrapper around FieldSelectionPipeline."""
    return FieldSelectionPipeline(context).process(resource, action, fields)
