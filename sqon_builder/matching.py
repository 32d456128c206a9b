"""
Filter matching and top-level filter mutation.

The mutators only look at the root of a SQON: a bare filter, or the direct
content of the root combination. Filters nested deeper are left alone.
"""

from __future__ import annotations

import logging
from typing import Any

from .models import (
    CombinationKeys,
    Filter,
    InFilter,
    Operator,
    as_array,
    combination,
    create_filter,
    empty_sqon,
    is_array_filter,
    is_combination,
    is_filter,
    with_value,
)
from .reduce import reduce_sqon

logger = logging.getLogger(__name__)


def check_matching_arrays(a: Any, b: Any) -> bool:
    """True if both values hold the same items, ignoring order and repeats."""
    return frozenset(as_array(a)) == frozenset(as_array(b))


def filters_match(a: Filter, b: Filter) -> bool:
    """
    Check if two filters are equivalent.

    op and fieldName must be equal, and values are compared as sets so that
    `["Jim", "Bob"]` matches `["Bob", "Jim"]`.
    """
    if a.op != b.op or a.content.field_name != b.content.field_name:
        return False
    return check_matching_arrays(a.content.value, b.content.value)


def remove_exact_filter(sqon: Operator, filter_: Filter) -> Operator:
    """Remove top-level filters exactly matching `filter_`."""
    if is_filter(sqon):
        if filters_match(sqon, filter_):
            return empty_sqon()
        return reduce_sqon(sqon)

    content = [
        operator
        for operator in sqon.content
        if not (is_filter(operator) and filters_match(operator, filter_))
    ]
    logger.debug(f"remove_exact_filter removed {len(sqon.content) - len(content)} filter(s)")
    return reduce_sqon(combination(sqon.op, content))


def remove_filter(
    sqon: Operator,
    field_name: str,
    op: str | None = None,
    values: Any | None = None,
) -> Operator:
    """
    Remove top-level filters by partial match.

    - only `field_name`: every filter on that field
    - with `op`: every filter on that field with that op
    - with `values`: filters whose value set equals `values` are removed;
      `in` filters that otherwise match lose just the listed values.
      Scalar filters are only removed on a full match.
    """
    values_to_remove = as_array(values) if values is not None else None

    def is_match(filter_: Filter) -> bool:
        return (
            filter_.content.field_name == field_name
            and (op is None or filter_.op == op)
            and (
                values_to_remove is None
                or check_matching_arrays(values_to_remove, filter_.content.value)
            )
        )

    def is_partial_match(filter_: Filter) -> bool:
        return (
            values_to_remove is not None
            and is_array_filter(filter_)
            and filter_.content.field_name == field_name
            and (op is None or filter_.op == op)
        )

    def without_values(filter_: InFilter) -> Filter:
        assert values_to_remove is not None
        remaining = tuple(value for value in filter_.content.value if value not in values_to_remove)
        return with_value(filter_, remaining)

    if is_filter(sqon):
        if is_match(sqon):
            return empty_sqon()
        if is_partial_match(sqon):
            return reduce_sqon(without_values(sqon))  # type: ignore[arg-type]
        return reduce_sqon(sqon)

    content: list[Operator] = []
    for operator in sqon.content:
        if is_combination(operator):
            content.append(operator)
        elif is_match(operator):
            continue
        elif is_partial_match(operator):
            content.append(without_values(operator))  # type: ignore[arg-type]
        else:
            content.append(operator)
    return reduce_sqon(combination(sqon.op, content))


def set_filter(sqon: Operator, field_name: str, op: str, value: Any) -> Operator:
    """
    Add a filter to the top level of `sqon`, or replace the value of the
    top-level filter with the same `field_name` and `op`.

    A bare filter that does not match is combined with the new one by `and`.
    """
    replacement = create_filter(field_name, op, value)

    if is_filter(sqon):
        if sqon.op == op and sqon.content.field_name == field_name:
            return reduce_sqon(replacement)
        return reduce_sqon(combination(CombinationKeys.AND, [sqon, replacement]))

    found = False
    content: list[Operator] = []
    for operator in sqon.content:
        if is_filter(operator) and operator.op == op and operator.content.field_name == field_name:
            found = True
            content.append(replacement)
        else:
            content.append(operator)
    if not found:
        content.append(replacement)
    return reduce_sqon(combination(sqon.op, content))
