import pytest

from sqlite_doc_engine import matches
from sqlite_doc_engine.query import describe, strict_equals


def test_empty_conditions_match_everything():
    assert matches({"name": "John"}, {})
    assert matches({}, None)


def test_literal_and_predicate_conditions():
    rec = {"name": "John", "age": 30}
    assert matches(rec, {"name": "John"})
    assert matches(rec, {"age": lambda v: v > 18})
    assert matches(rec, {"name": "John", "age": lambda v: v > 18})
    assert not matches(rec, {"name": "John", "age": lambda v: v > 40})
    assert not matches(rec, {"name": "Jane"})


def test_missing_field_reads_as_none():
    assert not matches({"name": "John"}, {"age": 30})
    assert matches({"name": "John"}, {"age": None})
    assert matches({"name": "John"}, {"age": lambda v: v is None})


def test_predicate_sees_none_for_absent_field():
    seen = []
    assert not matches({"name": "B"}, {"age": lambda v: seen.append(v) or v is not None and v > 18})
    assert seen == [None]

    with pytest.raises(TypeError):
        matches({"name": "B"}, {"age": lambda v: v > 18})


def test_strict_equality():
    assert not strict_equals(1, True)
    assert not strict_equals(0, False)
    assert strict_equals(1, 1.0)
    assert not strict_equals("1", 1)
    assert strict_equals(["a", 1], ["a", 1])
    assert not strict_equals([1], [True])
    assert strict_equals({"city": "Wien"}, {"city": "Wien"})
    assert not strict_equals({"city": "Wien"}, {"city": "Wien", "zip": 1})
    assert not matches({"active": True}, {"active": 1})


def test_describe_names_predicates():
    def adult(v):
        return v > 18

    assert describe({"age": adult, "name": "J"}) == {"age": "<adult>", "name": "'J'"}
