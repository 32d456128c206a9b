"""
SQON reduction.

Collapses redundant nesting and merges compatible sibling filters so that
equivalent trees built in different ways end up in the same canonical form.
"""

from __future__ import annotations

from .models import (
    ArrayFilterKeys,
    CombinationKeys,
    Filter,
    Operator,
    ScalarFilterKeys,
    combination,
    empty_sqon,
    is_array_filter,
    is_filter,
    with_value,
)


def _deduplicate_values(filter_: Filter) -> Filter:
    """Drop repeated `in` values, keeping the first occurrence of each."""
    if not is_array_filter(filter_):
        return filter_
    unique = tuple(dict.fromkeys(filter_.content.value))
    if unique == filter_.content.value:
        return filter_
    return with_value(filter_, unique)


def _merge_filters(existing: Filter, incoming: Filter, parent_op: str) -> Filter:
    """
    Merge two filters sharing op and fieldName inside a combination of `parent_op`.

    - gt: the larger bound under `and`/`not`, the smaller under `or`
    - lt: the smaller bound under `and`/`not`, the larger under `or`
    - in: values are concatenated (duplicates are dropped afterwards)
    """
    restrictive = parent_op in (CombinationKeys.AND, CombinationKeys.NOT)
    if existing.op == ArrayFilterKeys.IN:
        value = existing.content.value + incoming.content.value
    elif existing.op == ScalarFilterKeys.GREATER_THAN:
        pick = max if restrictive else min
        value = pick(existing.content.value, incoming.content.value)
    else:
        pick = min if restrictive else max
        value = pick(existing.content.value, incoming.content.value)
    return with_value(existing, value)


def _absorb(output: list[Operator], parent_op: str, node: Operator) -> None:
    """Add an already-reduced `node` to the content being collected for `parent_op`."""
    if is_filter(node):
        for index, current in enumerate(output):
            if (
                is_filter(current)
                and current.op == node.op
                and current.content.field_name == node.content.field_name
            ):
                output[index] = _merge_filters(current, node, parent_op)
                return
        output.append(node)
        return

    if not node.content:
        return
    # Negations are kept exactly as written.
    if node.op == CombinationKeys.NOT:
        output.append(node)
        return
    if len(node.content) == 1 or node.op == parent_op:
        for inner in node.content:
            _absorb(output, parent_op, inner)
        return
    output.append(node)


def reduce_sqon(sqon: Operator) -> Operator:
    """
    Reduce a SQON to its canonical form.

    Children are reduced first, then folded into the parent:

    1. empty combinations are dropped
    2. `and`/`or` combinations with a single entry are replaced by that entry
    3. combinations with the same op as their parent are spliced into it
    4. filters with the same op and fieldName are merged
    5. `not` combinations are never unwrapped, flattened or merged

    An `and`/`or` left with one entry collapses to that entry; one left empty
    becomes the empty `and`. The function is idempotent.
    """
    if is_filter(sqon):
        return _deduplicate_values(sqon)

    output: list[Operator] = []
    for child in sqon.content:
        _absorb(output, sqon.op, reduce_sqon(child))
    output = [_deduplicate_values(item) if is_filter(item) else item for item in output]

    if sqon.op == CombinationKeys.NOT:
        return combination(sqon.op, output)
    if len(output) == 1:
        return output[0]
    if not output:
        return empty_sqon()
    return combination(sqon.op, output)
