"""Tests for SQON reduction."""

from __future__ import annotations

from typing import Any

import pytest

from sqon_builder import create_filter, empty_sqon, reduce_sqon, sqon_to_dict, validate_sqon
from sqon_builder.models import Operator, combination


def _in(field: str, value: Any) -> Operator:
    return create_filter(field, "in", value)


def _gt(field: str, value: float) -> Operator:
    return create_filter(field, "gt", value)


def _lt(field: str, value: float) -> Operator:
    return create_filter(field, "lt", value)


def _and(*content: Operator) -> Operator:
    return combination("and", content)


def _or(*content: Operator) -> Operator:
    return combination("or", content)


def _not(*content: Operator) -> Operator:
    return combination("not", content)


def _reduced(sqon: Operator) -> dict[str, Any]:
    return sqon_to_dict(reduce_sqon(sqon))


# =============================================================================
# Filters
# =============================================================================


def test_reduce_deduplicates_in_values() -> None:
    """Duplicate `in` values are dropped, keeping first-seen order."""
    assert _reduced(_in("name", ["Jim", "Jim", "Bob", "Jim"])) == {
        "op": "in",
        "content": {"fieldName": "name", "value": ["Jim", "Bob"]},
    }


def test_reduce_scalar_filter_unchanged() -> None:
    sqon = _gt("age", 30)
    assert reduce_sqon(sqon) == sqon


# =============================================================================
# Collapsing combinations
# =============================================================================


def test_single_filter_and_or_collapse() -> None:
    """`and(F)` and `or(F)` both reduce to F."""
    assert reduce_sqon(_and(_gt("age", 1))) == _gt("age", 1)
    assert reduce_sqon(_or(_gt("age", 1))) == _gt("age", 1)


def test_deeply_nested_single_entries_collapse() -> None:
    assert reduce_sqon(_and(_or(_and(_lt("age", 9))))) == _lt("age", 9)


def test_empty_and_stays_empty() -> None:
    assert reduce_sqon(empty_sqon()) == empty_sqon()


def test_empty_or_becomes_empty_and() -> None:
    assert reduce_sqon(_or()) == empty_sqon()


def test_empty_nested_combinations_are_dropped() -> None:
    assert reduce_sqon(_and(_or(), _not(), _in("name", "Jim"))) == _in("name", "Jim")


def test_combinations_with_empty_children_only() -> None:
    assert reduce_sqon(_or(_and(), _or())) == empty_sqon()


def test_same_op_children_are_spliced() -> None:
    """Nested combinations with the parent's op are flattened."""
    sqon = _or(_or(_in("a", "x"), _gt("b", 1)), _lt("c", 2))
    assert _reduced(sqon) == {
        "op": "or",
        "content": [
            {"op": "in", "content": {"fieldName": "a", "value": ["x"]}},
            {"op": "gt", "content": {"fieldName": "b", "value": 1}},
            {"op": "lt", "content": {"fieldName": "c", "value": 2}},
        ],
    }


def test_spliced_children_are_merged() -> None:
    """Filters spliced from a nested combination merge with their new siblings."""
    sqon = _and(_gt("age", 5), _and(_gt("age", 10), _in("name", "Jim")))
    assert _reduced(sqon) == {
        "op": "and",
        "content": [
            {"op": "gt", "content": {"fieldName": "age", "value": 10}},
            {"op": "in", "content": {"fieldName": "name", "value": ["Jim"]}},
        ],
    }


def test_different_op_children_are_kept() -> None:
    sqon = _and(_or(_in("a", "x"), _in("b", "y")), _gt("c", 1))
    assert reduce_sqon(sqon) == sqon


# =============================================================================
# Negation
# =============================================================================


def test_not_with_single_child_is_kept() -> None:
    sqon = _not(_in("name", "Jim"))
    assert reduce_sqon(sqon) == sqon


def test_empty_root_not_is_kept() -> None:
    assert _reduced(_not()) == {"op": "not", "content": []}


def test_sibling_nots_are_not_merged() -> None:
    sqon = _and(_not(_in("name", "Jim")), _not(_in("name", "Bob")))
    assert reduce_sqon(sqon) == sqon


def test_nested_not_is_not_flattened() -> None:
    sqon = _not(_not(_in("name", "Jim")))
    assert reduce_sqon(sqon) == sqon


def test_not_content_is_reduced() -> None:
    """Content inside a `not` is still reduced."""
    sqon = _not(_or(_gt("age", 5), _gt("age", 10)))
    assert reduce_sqon(sqon) == _not(_gt("age", 5))


def test_and_with_single_not_collapses_to_the_not() -> None:
    sqon = _and(_not(_gt("age", 5)))
    assert reduce_sqon(sqon) == _not(_gt("age", 5))


# =============================================================================
# Merging sibling filters
# =============================================================================


@pytest.mark.parametrize(
    ("op", "values", "expected"),
    [
        ("and", [90, 97], 97),
        ("or", [95, 85], 85),
        ("not", [5, 10], 10),
    ],
)
def test_merge_gt(op: str, values: list[int], expected: int) -> None:
    sqon = combination(op, [_gt("score", v) for v in values])
    reduced = reduce_sqon(sqon)
    if op == "not":
        assert reduced == _not(_gt("score", expected))
    else:
        assert reduced == _gt("score", expected)


@pytest.mark.parametrize(
    ("op", "values", "expected"),
    [
        ("and", [55, 40], 40),
        ("or", [55, 40], 55),
        ("not", [5, 10], 5),
    ],
)
def test_merge_lt(op: str, values: list[int], expected: int) -> None:
    sqon = combination(op, [_lt("score", v) for v in values])
    reduced = reduce_sqon(sqon)
    if op == "not":
        assert reduced == _not(_lt("score", expected))
    else:
        assert reduced == _lt("score", expected)


def test_merge_in_concatenates_and_deduplicates() -> None:
    sqon = _and(_in("name", "Jim"), _in("name", ["Bob", "Jim", "Greg"]))
    assert _reduced(sqon) == {
        "op": "in",
        "content": {"fieldName": "name", "value": ["Jim", "Bob", "Greg"]},
    }


def test_merge_in_under_or() -> None:
    sqon = _or(_in("name", "Jim"), _gt("age", 1), _in("name", "Bob"))
    assert _reduced(sqon) == {
        "op": "or",
        "content": [
            {"op": "in", "content": {"fieldName": "name", "value": ["Jim", "Bob"]}},
            {"op": "gt", "content": {"fieldName": "age", "value": 1}},
        ],
    }


def test_no_merge_across_ops_or_fields() -> None:
    sqon = _and(_gt("age", 5), _lt("age", 50), _gt("score", 5))
    assert reduce_sqon(sqon) == sqon


def test_merge_mixed_int_and_float() -> None:
    assert reduce_sqon(_and(_gt("age", 5), _gt("age", 7.5))) == _gt("age", 7.5)


# =============================================================================
# Properties
# =============================================================================

IDEMPOTENCE_CASES: list[dict[str, Any]] = [
    {"op": "in", "content": {"fieldName": "name", "value": ["Jim", "Jim"]}},
    {"op": "and", "content": []},
    {"op": "or", "content": []},
    {"op": "not", "content": []},
    {
        "op": "and",
        "content": [
            {"op": "and", "content": [{"op": "gt", "content": {"fieldName": "a", "value": 1}}]},
            {"op": "gt", "content": {"fieldName": "a", "value": 3}},
            {"op": "in", "content": {"fieldName": "b", "value": ["x", "y"]}},
            {"op": "in", "content": {"fieldName": "b", "value": ["y", "z"]}},
        ],
    },
    {
        "op": "or",
        "content": [
            {
                "op": "and",
                "content": [
                    {"op": "or", "content": []},
                    {"op": "lt", "content": {"fieldName": "a", "value": 1}},
                    {"op": "not", "content": [{"op": "and", "content": []}]},
                ],
            },
            {
                "op": "or",
                "content": [
                    {"op": "lt", "content": {"fieldName": "a", "value": 5}},
                    {"op": "in", "content": {"fieldName": "c", "value": 1}},
                ],
            },
        ],
    },
    {
        "op": "not",
        "content": [
            {"op": "not", "content": [{"op": "gt", "content": {"fieldName": "a", "value": 1}}]},
            {"op": "not", "content": [{"op": "gt", "content": {"fieldName": "a", "value": 2}}]},
            {"op": "and", "content": [{"op": "gt", "content": {"fieldName": "a", "value": 2}}]},
            {"op": "gt", "content": {"fieldName": "a", "value": 4}},
        ],
    },
]


@pytest.mark.parametrize("raw", IDEMPOTENCE_CASES)
def test_reduce_is_idempotent(raw: dict[str, Any]) -> None:
    once = reduce_sqon(validate_sqon(raw))
    assert reduce_sqon(once) == once


def test_reduce_does_not_modify_input() -> None:
    sqon = _and(_in("name", "Jim"), _in("name", "Bob"), _and(_gt("age", 1)))
    before = sqon_to_dict(sqon)
    reduce_sqon(sqon)
    assert sqon_to_dict(sqon) == before
