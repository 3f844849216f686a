import pytest

from fieldgraph.core.errors import (
    ActionNotFoundError,
    FieldSelectionError,
    RELATIONSHIP_FIELD_ERROR,
    SchemaConfigError,
)
from fieldgraph.runtime.error_builder import build_error_response


def _error_for(process_todo, fields):
    with pytest.raises(FieldSelectionError) as exc_info:
        process_todo(fields)
    return build_error_response(exc_info.value)


def test_unknown_field_response(process_todo):
    response = _error_for(process_todo, [{"user": ["bogus"]}])

    assert response["type"] == "unknown_field"
    assert response["field_path"] == "user.bogus"
    assert response["message"] == "Unknown field 'user.bogus' for User"
    assert response["details"]["resource"] == "User"
    assert "suggestion" in response["details"]
    assert response["details"]["via"] == [
        {"type": RELATIONSHIP_FIELD_ERROR, "field": "user", "owner": "Todo", "field_path": "user"},
    ]


@pytest.mark.parametrize(
    "fields, error_type",
    [
        ([{"priorityScore": ["bogus"]}], "unknown_typed_struct_field"),
        ([{"stats": ["bogus"]}], "unknown_map_field"),
        ([{"options": ["bogus"]}], "unknown_keyword_field"),
        ([{"coordinates": ["bogus"]}], "unknown_tuple_field"),
        ([{"content": ["bogus"]}], "unknown_union_field"),
    ],
)
def test_unknown_composite_field_types(process_todo, fields, error_type):
    assert _error_for(process_todo, fields)["type"] == error_type


def test_requires_field_selection_response(process_todo):
    response = _error_for(process_todo, ["user"])

    assert response["type"] == "requires_field_selection"
    assert response["message"] == "Relationship 'user' requires field selection"
    assert response["details"]["field_type"] == "relationship"
    assert response["details"]["suggestion"] == "Specify which fields to select from this relationship"


def test_invalid_calculation_args_response(process_todo):
    response = _error_for(process_todo, [{"self": {"args": {"count": "x"}, "fields": ["id"]}}])

    assert response["type"] == "invalid_calculation_args"
    assert response["details"]["errors"][0]["field"] == "count"


def test_duplicate_field_response(process_todo):
    response = _error_for(process_todo, ["id", "id"])

    assert response["message"] == "Field 'id' was requested multiple times"
    assert response["details"]["suggestion"] == "Remove duplicate field specifications"


def test_action_not_found_response():
    response = build_error_response(ActionNotFoundError("Todo", "archive"))

    assert response["type"] == "action_not_found"
    assert response["details"]["action_name"] == "archive"
    assert "field_path" not in response


def test_schema_error_response():
    response = build_error_response(SchemaConfigError(["[A.x] Unknown type 'bogus'"]))

    assert response["details"]["errors"] == ["[A.x] Unknown type 'bogus'"]
