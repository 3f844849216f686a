import copy

import pytest

from fieldgraph.core.processor import FieldProcessor
from fieldgraph.core.registry import SchemaRegistry
from fieldgraph.runtime.context import ProcessingContext
from fieldgraph.runtime.pipeline import FieldSelectionPipeline


SCHEMA_DOCUMENT = {
    "version": 1,
    "types": {
        "PriorityScore": {
            "type": "struct",
            "fields": {
                "score": "integer",
                "factors": {"type": "array", "items": "string"},
                "details": {
                    "type": "map",
                    "fields": {"level": "string", "weight": "float"},
                },
            },
        },
        "ColorPalette": {"type": "custom"},
    },
    "resources": {
        "User": {
            "attributes": {
                "id": "uuid",
                "name": "string",
                "email": "string",
            },
            "calculations": {
                "display_name": "string",
            },
            "relationships": {
                "todos": {"destination": "Todo", "cardinality": "many"},
            },
            "actions": {
                "read": {"type": "read"},
                "get_user": {"type": "read", "get": True},
            },
        },
        "TodoMetadata": {
            "embedded": True,
            "attributes": {
                "category": "string",
                "priority_score": "integer",
                "tags": {"type": "array", "items": "string"},
            },
            "calculations": {
                "display_category": "string",
                "adjusted_priority": {
                    "type": "integer",
                    "arguments": {"urgency_multiplier": "float"},
                },
            },
        },
        "TextContent": {
            "embedded": True,
            "attributes": {
                "text": "string",
                "word_count": "integer",
            },
            "calculations": {
                "formatted_text": "string",
            },
        },
        "TodoComment": {
            "attributes": {
                "id": "uuid",
                "content": "string",
            },
            "relationships": {
                "todo": {"destination": "Todo"},
                "user": {"destination": "User"},
            },
            "actions": {
                "read": {"type": "read"},
            },
        },
        "Todo": {
            "field_names": {"completed": "isDone"},
            "attributes": {
                "id": "uuid",
                "title": "string",
                "description": "string",
                "completed": "boolean",
                "tags": {"type": "array", "items": "string"},
                "priority_score": "PriorityScore",
                "color_palette": "ColorPalette",
                "metadata": "TodoMetadata",
                "metadata_history": {"type": "array", "items": "TodoMetadata"},
                "review": {
                    "type": "struct",
                    "fields": {"rating": "integer", "meta": "TodoMetadata"},
                },
                "coordinates": {
                    "type": "tuple",
                    "fields": {"latitude": "float", "longitude": "float"},
                },
                "options": {
                    "type": "keyword",
                    "fields": {"priority": "integer", "category": "string", "notify": "boolean"},
                },
                "stats": {
                    "type": "map",
                    "fields": {
                        "views": "integer",
                        "details": {"type": "map", "fields": {"created": "string"}},
                    },
                },
                "settings": "map",
                "content": {
                    "type": "union",
                    "types": {
                        "text": "TextContent",
                        "note": "string",
                        "priority_value": "integer",
                    },
                },
            },
            "calculations": {
                "is_overdue": "boolean",
                "self": {
                    "type": "Todo",
                    "arguments": {
                        "prefix": "string",
                        "count": "integer",
                        "enabled": "boolean",
                        "data": "map",
                    },
                },
                "summary": "PriorityScore",
                "latest_content": {
                    "type": "union",
                    "types": {"text": "TextContent", "note": "string"},
                },
                "formatted_title": {
                    "type": "string",
                    "arguments": {"style": {"type": "string", "allow_nil": False}},
                },
            },
            "aggregates": {
                "comment_count": {"kind": "count", "relationship": "comments"},
                "latest_comment_content": {
                    "kind": "first",
                    "relationship": "comments",
                    "field": "content",
                },
            },
            "relationships": {
                "user": {"destination": "User"},
                "comments": {"destination": "TodoComment", "cardinality": "many"},
            },
            "actions": {
                "read": {"type": "read"},
                "get_todo": {"type": "read", "get": True},
                "create_todo": {"type": "create"},
                "summarize": {"type": "action", "returns": "PriorityScore"},
                "count_todos": {"type": "action", "returns": "integer"},
                "ping": {"type": "action"},
            },
        },
    },
}


@pytest.fixture()
def schema_document():
    return copy.deepcopy(SCHEMA_DOCUMENT)


@pytest.fixture(scope="session")
def registry():
    return SchemaRegistry.from_dict(SCHEMA_DOCUMENT)


@pytest.fixture()
def context(registry):
    return ProcessingContext.create(registry)


@pytest.fixture()
def processor(context):
    return FieldProcessor(context)


@pytest.fixture()
def process_todo(processor):
    """Run the processor over a field list of a single Todo."""
    def run(fields):
        return processor.process_resource_fields("Todo", fields)
    return run


@pytest.fixture()
def pipeline(context):
    return FieldSelectionPipeline(context)
