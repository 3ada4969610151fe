"""Tests for lowering condition trees into SQL fragments."""

from __future__ import annotations

import re

import pytest

from typed_sql import ConditionError, compile_condition, compile_where
from typed_sql.conditions import and_, field, not_field, or_, raw

# -- fields ------------------------------------------------------------------


def test_equality():
    assert compile_condition("user", field("name", "x")) == ('"user".name = $1', ("x",), 2)


def test_inequality():
    compiled = compile_condition("user", not_field("name", "x"), 5)
    assert compiled == ('"user".name != $5', ("x",), 6)


def test_in_list_continues_from_counter():
    compiled = compile_condition("user", field("id", 1, 2, 3), 4)
    assert compiled == ('"user".id IN ($4, $5, $6)', (1, 2, 3), 7)


def test_not_in_list():
    compiled = compile_condition("user", not_field("id", 1, 2))
    assert compiled.fragment == '"user".id NOT IN ($1, $2)'


def test_null_tests_use_no_placeholder():
    assert compile_condition("user", field("deleted_at", None), 3) == (
        '"user".deleted_at IS NULL',
        (),
        3,
    )
    assert compile_condition("user", not_field("deleted_at", None), 3) == (
        '"user".deleted_at IS NOT NULL',
        (),
        3,
    )


def test_explicit_table_overrides_current_table():
    compiled = compile_condition("friendstate", field("name", "a", table="ra"))
    assert compiled.fragment == '"ra".name = $1'


# -- merges ------------------------------------------------------------------


def test_nested_merge():
    compiled = compile_where(
        "friendstate",
        ["AND", [["accepted", "NOT"], True], ["OR", ["receiver_id", 1], ["sender_id", 1]]],
    )
    assert compiled.fragment == (
        '("friendstate".accepted != $1 AND '
        '("friendstate".receiver_id = $2 OR "friendstate".sender_id = $3))'
    )
    assert compiled.values == (True, 1, 1)
    assert compiled.counter == 4


def test_placeholders_are_contiguous_and_ordered():
    cond = or_(
        and_(field("a", 1, 2), field("b", None), raw("c = $2 OR d = $1", "x", "y")),
        not_field("e", 3),
        field("f", 4, 5, 6),
    )
    compiled = compile_condition("t", cond, 1)
    numbers = [int(n) for n in re.findall(r"\$(\d+)", compiled.fragment)]
    assert sorted(numbers) == list(range(1, len(compiled.values) + 1))
    assert compiled.values == (1, 2, "x", "y", 3, 4, 5, 6)
    assert compiled.counter == len(compiled.values) + 1


def test_compile_is_pure():
    cond = and_(field("a", 1), field("b", 2))
    assert compile_condition("t", cond, 3) == compile_condition("t", cond, 3)


# -- raw ---------------------------------------------------------------------


def test_raw_is_unchanged_at_counter_one():
    text = "'user'.'name' != $1 AND ('user'.age >= $3) = $2"
    compiled = compile_condition("user", raw(text, "test", True, 123))
    assert compiled == (text, ("test", True, 123), 4)


def test_raw_is_renumbered():
    compiled = compile_condition("user", raw("x = $1 AND (y >= $3) = $2", "a", True, 5), 3)
    assert compiled.fragment == "x = $3 AND (y >= $5) = $4"
    assert compiled.values == ("a", True, 5)
    assert compiled.counter == 6


def test_raw_inside_merge():
    compiled = compile_where(
        "user",
        ["OR", ["active", True], {"query": "'user'.'name' != $1", "values": ["t"]}],
    )
    assert compiled.fragment == "(\"user\".active = $1 OR ('user'.'name' != $2))"
    assert compiled.values == (True, "t")


def test_raw_member_keeps_its_own_grouping():
    compiled = compile_where(
        "t",
        ["AND", ["a", 1], {"query": "b = $1 OR c = $2", "values": [2, 3]}],
    )
    assert compiled.fragment == '("t".a = $1 AND (b = $2 OR c = $3))'
    assert compiled.values == (1, 2, 3)


@pytest.mark.parametrize("text", ["a = $2", "a = $0"])
def test_raw_placeholder_out_of_range(text):
    with pytest.raises(ConditionError, match="references"):
        compile_condition("t", raw(text, 1))


# -- compile_where -----------------------------------------------------------


def test_compile_where_accepts_nodes():
    assert compile_where("t", field("a", 1)) == compile_condition("t", field("a", 1))


def test_compile_where_appends_diagnostics():
    literal = ["OR", ["id", "==", 123], ["active", True]]
    with pytest.raises(ConditionError) as exc_info:
        compile_where("user", literal)
    message = str(exc_info.value)
    assert message.startswith("Comparison tuple")
    assert "Condition type: list" in message
    assert "Condition: " in message
    assert exc_info.value.path == "<root>[1]"
    assert exc_info.value.condition is literal


def test_compile_where_reports_raw_numbering_errors():
    with pytest.raises(ConditionError, match="Condition type: RawCondition"):
        compile_where("t", raw("a = $3", 1))
