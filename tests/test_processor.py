import pytest

from fieldgraph.core.errors import RELATIONSHIP_FIELD_ERROR, UnknownFieldError
from fieldgraph.core.query_types import CalculationLoad, TupleSlot


def _template_name(entry):
    if isinstance(entry, str):
        return entry
    if isinstance(entry, TupleSlot):
        return entry.field
    return entry[0]


def test_flat_request_splits_attributes_and_calculations(process_todo):
    select, load, template = process_todo(["id", "title", "isOverdue"])

    assert select == ["id", "title"]
    assert load == ["is_overdue"]
    assert template == ["id", "title", "is_overdue"]


def test_calculation_with_args_and_fields(process_todo):
    select, load, template = process_todo([{"self": {"args": {"prefix": "x"}, "fields": ["id"]}}])

    assert select == []
    assert load == [("self", CalculationLoad({"prefix": "x"}, ["id"]))]
    assert template == [("self", ["id"])]


def test_tuple_slots_are_projected_by_name(process_todo):
    select, load, template = process_todo([{"coordinates": ["latitude", "longitude"]}])

    assert select == ["coordinates"]
    assert load == []
    assert template == [("coordinates", [TupleSlot(0, "latitude"), TupleSlot(1, "longitude")])]


def test_tuple_slot_keeps_declared_index_in_request_order(process_todo):
    _, _, template = process_todo([{"coordinates": ["longitude"]}])

    assert template == [("coordinates", [TupleSlot(1, "longitude")])]


def test_unknown_field_inside_relationship_carries_path(process_todo):
    with pytest.raises(UnknownFieldError) as exc_info:
        process_todo([{"user": ["id", "bogus"]}])

    error = exc_info.value
    assert error.as_tuple() == ("unknown_field", "bogus", "User", "user.bogus")
    assert [frame.type for frame in error.context] == [RELATIONSHIP_FIELD_ERROR]
    assert error.context[0].field == "user"


def test_relationship_goes_to_load_only(process_todo):
    select, load, template = process_todo([{"user": ["id", "displayName"]}])

    assert select == []
    assert load == [("user", ["id", "display_name"])]
    assert template == [("user", ["id", "display_name"])]


def test_nested_relationships(process_todo):
    _, load, template = process_todo([
        {"user": [{"todos": ["title", {"comments": ["content"]}]}]},
    ])

    assert load == [("user", [("todos", ["title", ("comments", ["content"])])])]
    assert template == [("user", [("todos", ["title", ("comments", ["content"])])])]


def test_embedded_resource_is_selected_with_scoped_load(process_todo):
    select, load, template = process_todo([{"metadata": ["category", "displayCategory"]}])

    assert select == ["metadata"]
    assert load == [("metadata", ["display_category"])]
    assert template == [("metadata", ["category", "display_category"])]


def test_embedded_resource_without_calculations_has_no_load(process_todo):
    select, load, template = process_todo([{"metadata": ["category", "tags"]}])

    assert select == ["metadata"]
    assert load == []
    assert template == [("metadata", ["category", "tags"])]


def test_embedded_resource_array(process_todo):
    select, load, template = process_todo([{"metadataHistory": ["category"]}])

    assert select == ["metadata_history"]
    assert template == [("metadata_history", ["category"])]


def test_embedded_calculation_with_args(process_todo):
    _, load, template = process_todo([
        {"metadata": [{"adjustedPriority": {"args": {"urgencyMultiplier": 1.5}}}]},
    ])

    assert load == [
        ("metadata", [("adjusted_priority", CalculationLoad({"urgency_multiplier": 1.5}, []))]),
    ]
    assert template == [("metadata", ["adjusted_priority"])]


def test_union_members(process_todo):
    select, load, template = process_todo([
        {"content": ["note", {"text": ["text", "formattedText"]}, "priorityValue"]},
    ])

    assert select == ["content"]
    assert load == [("content", [("text", ["formatted_text"])])]
    assert template == [
        ("content", ["note", ("text", ["text", "formatted_text"]), "priority_value"]),
    ]


def test_calculation_returning_union_merges_member_loads(process_todo):
    select, load, template = process_todo([
        {"latestContent": ["note", {"text": ["text", "formattedText"]}]},
    ])

    assert select == []
    assert load == [("latest_content", CalculationLoad({}, ["text", "formatted_text"]))]
    assert template == [("latest_content", ["note", ("text", ["text", "formatted_text"])])]


def test_embedded_resource_inside_struct_keeps_its_load(process_todo):
    select, load, template = process_todo([
        {"review": ["rating", {"meta": ["category", "displayCategory"]}]},
    ])

    assert select == ["review"]
    assert load == [("review", [("meta", ["display_category"])])]
    assert template == [("review", ["rating", ("meta", ["category", "display_category"])])]


def test_struct_without_calculated_children_has_no_load(process_todo):
    _, load, _ = process_todo([{"review": [{"meta": ["category"]}]}])

    assert load == []


def test_union_single_mapping_shorthand(process_todo):
    select, load, template = process_todo([{"content": {"text": ["text"]}}])

    assert select == ["content"]
    assert load == []
    assert template == [("content", [("text", ["text"])])]


def test_typed_struct(process_todo):
    select, load, template = process_todo([{"priorityScore": ["score", "factors"]}])

    assert select == ["priority_score"]
    assert load == []
    assert template == [("priority_score", ["score", "factors"])]


def test_typed_struct_with_nested_map(process_todo):
    _, _, template = process_todo([{"priorityScore": [{"details": ["level"]}, "score"]}])

    assert template == [("priority_score", [("details", ["level"]), "score"])]


def test_keyword_list_follows_request_order(process_todo):
    select, _, template = process_todo([{"options": ["notify", "priority"]}])

    assert select == ["options"]
    assert template == [("options", ["notify", "priority"])]


def test_constrained_map_with_nested_map(process_todo):
    _, _, template = process_todo([{"stats": ["views", {"details": ["created"]}]}])

    assert template == [("stats", ["views", ("details", ["created"])])]


def test_aggregates_are_loaded(process_todo):
    select, load, template = process_todo(["commentCount", "latestCommentContent"])

    assert select == []
    assert load == ["comment_count", "latest_comment_content"]
    assert template == ["comment_count", "latest_comment_content"]


def test_custom_scalar_and_unconstrained_map_are_selected(process_todo):
    select, load, _ = process_todo(["colorPalette", "settings", "tags"])

    assert select == ["color_palette", "settings", "tags"]
    assert load == []


def test_field_name_override(process_todo):
    select, _, template = process_todo(["isDone"])

    assert select == ["completed"]
    assert template == ["completed"]


def test_no_arg_calculation_with_structured_return(process_todo):
    _, load, template = process_todo([{"summary": ["score"]}])

    assert load == [("summary", CalculationLoad({}, []))]
    assert template == [("summary", ["score"])]


def test_no_arg_calculation_accepts_fields_mapping(process_todo):
    _, load, template = process_todo([{"summary": {"fields": ["score"]}}])

    assert load == [("summary", CalculationLoad({}, []))]
    assert template == [("summary", ["score"])]


def test_calculation_returning_resource_with_relationship(process_todo):
    _, load, template = process_todo([
        {"self": {"args": {}, "fields": ["id", {"user": ["name"]}]}},
    ])

    assert load == [("self", CalculationLoad({}, ["id", ("user", ["name"])]))]
    assert template == [("self", ["id", ("user", ["name"])])]


def test_scalar_calculation_with_args(process_todo):
    _, load, template = process_todo([{"formattedTitle": {"args": {"style": "upper"}}}])

    assert load == [("formatted_title", CalculationLoad({"style": "upper"}, []))]
    assert template == ["formatted_title"]


def test_calculation_load_keeps_only_supplied_args(process_todo):
    _, load, _ = process_todo([
        {"self": {"args": {"count": "3", "enabled": True}, "fields": ["id"]}},
    ])

    assert load[0][1].args == {"count": 3, "enabled": True}


def test_template_mirrors_request_order(process_todo):
    request = [
        {"user": ["name"]},
        "title",
        {"content": ["note"]},
        "commentCount",
        {"coordinates": ["latitude"]},
        "id",
        {"metadata": ["category"]},
        {"self": {"args": {"prefix": "p"}, "fields": ["id"]}},
    ]
    _, _, template = process_todo(request)

    assert len(template) == len(request)
    assert [_template_name(e) for e in template] == [
        "user", "title", "content", "comment_count", "coordinates", "id", "metadata", "self",
    ]


def test_select_and_load_are_disjoint(process_todo):
    select, load, _ = process_todo([
        "id",
        "title",
        "isOverdue",
        "commentCount",
        {"user": ["name"]},
        {"priorityScore": ["score"]},
        {"metadata": ["category"]},
    ])

    load_names = {entry if isinstance(entry, str) else entry[0] for entry in load}
    assert set(select) == {"id", "title", "priority_score", "metadata"}
    assert load_names == {"is_overdue", "comment_count", "user"}
    assert not set(select) & load_names


def test_empty_top_level_list(process_todo):
    assert process_todo([]) == ([], [], [])


def test_duplicates_in_different_lists_are_allowed(process_todo):
    _, load, _ = process_todo([{"user": ["id"]}, {"comments": [{"user": ["id"]}]}])

    assert load == [("user", ["id"]), ("comments", [("user", ["id"])])]
