from types import SimpleNamespace

from fieldgraph.core.formatter import SNAKE_CASE
from fieldgraph.core.query_types import TupleSlot, UnionValue
from fieldgraph.runtime.extractor import ResultExtractor


def test_extracts_requested_keys_in_client_casing():
    record = {"id": 1, "is_overdue": True, "secret": "x"}

    assert ResultExtractor().extract(record, ["id", "is_overdue"]) == {"id": 1, "isOverdue": True}


def test_lists_are_mapped_element_wise():
    records = [{"id": 1, "title": "a"}, {"id": 2, "title": "b"}]

    assert ResultExtractor().extract(records, ["title"]) == [{"title": "a"}, {"title": "b"}]


def test_nested_template_and_none_values():
    records = [
        {"id": 1, "user": {"id": 7, "name": "Ann", "email": "a@x"}},
        {"id": 2, "user": None},
    ]

    assert ResultExtractor().extract(records, ["id", ("user", ["name"])]) == [
        {"id": 1, "user": {"name": "Ann"}},
        {"id": 2, "user": None},
    ]


def test_missing_keys_are_skipped():
    assert ResultExtractor().extract({"id": 1}, ["id", "title"]) == {"id": 1}


def test_objects_use_attribute_access():
    todo = SimpleNamespace(id=1, comment_count=3, title="t")

    assert ResultExtractor().extract(todo, ["comment_count"]) == {"commentCount": 3}


def test_tuple_projection():
    template = [TupleSlot(1, "longitude"), TupleSlot(0, "latitude")]

    assert ResultExtractor().extract((51.5, -0.12), template) == {"longitude": -0.12, "latitude": 51.5}


def test_tuple_decoded_as_list():
    template = [TupleSlot(0, "latitude"), TupleSlot(1, "longitude")]
    extractor = ResultExtractor()

    assert extractor.extract([1.0, 2.0], template) == {"latitude": 1.0, "longitude": 2.0}
    assert extractor.extract([[1.0, 2.0], (3.0, 4.0)], template) == [
        {"latitude": 1.0, "longitude": 2.0},
        {"latitude": 3.0, "longitude": 4.0},
    ]
    assert extractor.extract({"coordinates": [5.0, 6.0]}, [("coordinates", template[:1])]) == {
        "coordinates": {"latitude": 5.0},
    }


def test_untyped_passthrough_template(pipeline):
    selection = pipeline.process("Todo", "ping", ["status", {"details": ["code"]}])
    value = {"status": "ok", "details": {"code": 200, "trace": "x"}, "extra": 1}

    assert ResultExtractor().extract(value, selection.template) == {
        "status": "ok",
        "details": {"code": 200},
    }


def test_record_with_tuple_field():
    record = {"coordinates": (1.0, 2.0)}
    template = [("coordinates", [TupleSlot(0, "latitude")])]

    assert ResultExtractor().extract(record, template) == {"coordinates": {"latitude": 1.0}}


def test_keyword_list():
    options = [("priority", 1), ("category", "work"), ("notify", True)]

    assert ResultExtractor().extract(options, ["notify", "priority"]) == {"notify": True, "priority": 1}


def test_union_keeps_active_member():
    template = ["note", ("text", ["text"])]
    extractor = ResultExtractor()

    text = UnionValue("text", {"text": "hi", "word_count": 1})
    assert extractor.extract(text, template) == {"text": {"text": "hi"}}
    assert extractor.extract(UnionValue("note", "hello"), template) == {"note": "hello"}
    assert extractor.extract(UnionValue("priority_value", 3), template) is None


def test_empty_template_passes_value_through():
    assert ResultExtractor().extract(42, []) == 42


def test_snake_case_output():
    assert ResultExtractor(SNAKE_CASE).extract({"is_overdue": False}, ["is_overdue"]) == {"is_overdue": False}


def test_extract_processed_selection(pipeline):
    selection = pipeline.process("Todo", "read", [
        "title",
        {"user": ["name"]},
        {"coordinates": ["longitude"]},
        {"content": ["note", {"text": ["wordCount"]}]},
    ])
    records = [
        {
            "title": "Buy milk",
            "user": {"name": "Ann"},
            "coordinates": (10.0, 20.0),
            "content": UnionValue("text", {"text": "x", "word_count": 1}),
        },
    ]

    assert ResultExtractor().extract(records, selection.template) == [
        {
            "title": "Buy milk",
            "user": {"name": "Ann"},
            "coordinates": {"longitude": 20.0},
            "content": {"text": {"wordCount": 1}},
        },
    ]
