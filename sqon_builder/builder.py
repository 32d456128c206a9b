"""
Fluent, immutable SQON builder.

Example:
    from sqon_builder import SQONBuilder

    # Start from nothing
    sqon = SQONBuilder.in_("name", ["Jim", "Bob"]).gt("age", 30)
    print(sqon)
    # {"op":"and","content":[{"op":"in","content":{"fieldName":"name","value":["Jim","Bob"]}},
    #  {"op":"gt","content":{"fieldName":"age","value":30}}]}

    # Or from an existing SQON (object or JSON string)
    sqon = SQONBuilder('{"op":"gt","content":{"fieldName":"age","value":30}}')
    sqon = sqon.or_(SQONBuilder.lt("age", 10))

    # Negations added separately stay separate
    SQONBuilder.not_(SQONBuilder.in_("name", "Jim")).not_(SQONBuilder.in_("name", "Bob"))

Every method returns a new builder holding a reduced tree; a builder is never
modified after it is created.
"""

from __future__ import annotations

import functools
import json
import logging
import types
from collections.abc import Callable, Mapping, Sequence
from typing import Any, Union

from .exceptions import SqonSyntaxError, SqonValidationError
from .matching import remove_exact_filter, remove_filter, set_filter
from .models import (
    ArrayFilterKeys,
    CombinationKeys,
    CombinationOperator,
    Operator,
    ScalarFilterKeys,
    SqonModel,
    combination,
    create_filter,
    empty_sqon,
    is_filter,
    sqon_to_dict,
    sqon_to_json,
    validate_sqon,
)
from .reduce import reduce_sqon

logger = logging.getLogger(__name__)

SqonInput = Union["SQONBuilder", SqonModel, Mapping[str, Any], str, bytes]
SqonContent = Union[SqonInput, Sequence[SqonInput]]


def _parse_json(source: str | bytes | bytearray) -> Any:
    try:
        return json.loads(source)
    except json.JSONDecodeError as e:
        raise SqonSyntaxError(f"Invalid JSON: {e.msg}", line=e.lineno, column=e.colno) from None
    except UnicodeDecodeError as e:
        raise SqonSyntaxError(f"Invalid JSON: {e.reason}") from None


def _to_operator(source: Any) -> Operator:
    """Turn any accepted input into a validated (not yet reduced) operator."""
    if isinstance(source, SQONBuilder):
        return source.to_value()
    if isinstance(source, (str, bytes, bytearray)):
        return validate_sqon(_parse_json(source))
    return validate_sqon(source)


def _to_operators(content: Any) -> list[Operator]:
    if isinstance(content, (list, tuple)):
        return [_to_operator(item) for item in content]
    return [_to_operator(content)]


def _combine(op: str, sqon: Operator, content: Sequence[Operator]) -> CombinationOperator:
    """Append `content` to `sqon` if it is already an `op` combination, else wrap both."""
    if sqon.op == op:
        return combination(op, [*sqon.content, *content])  # type: ignore[union-attr]
    return combination(op, [sqon, *content])


class _chainable:
    """
    Builder method that can also be called on the class.

    Called on the class, the method runs against an empty SQON, so that
    `SQONBuilder.gt("age", 5)` works like `SQONBuilder(empty_sqon()).gt("age", 5)`.
    """

    def __init__(self, func: Callable[..., SQONBuilder]) -> None:
        self.__func__ = func
        functools.update_wrapper(self, func)

    def __get__(
        self, instance: SQONBuilder | None, owner: type[SQONBuilder]
    ) -> Callable[..., SQONBuilder]:
        if instance is None:
            instance = owner(empty_sqon())
        return types.MethodType(self.__func__, instance)


class SQONBuilder:
    """
    Immutable wrapper around a reduced SQON.

    Accepts another builder, an operator model, a plain parsed value
    (dict) or a JSON string.

    Raises:
        SqonSyntaxError: If a string input is not valid JSON.
        SqonValidationError: If the input does not match the SQON grammar.
    """

    __slots__ = ("_sqon",)

    def __init__(self, source: SqonInput) -> None:
        operator = _to_operator(source)
        self._sqon: Operator = reduce_sqon(operator)
        logger.debug(f"SQONBuilder created from {type(source).__name__}, op={self._sqon.op}")

    @classmethod
    def from_(cls, source: SqonInput) -> SQONBuilder:
        """Build from a builder, operator, plain value or JSON string."""
        return cls(source)

    # =========================================================================
    # Combinators
    # =========================================================================

    @_chainable
    def and_(self, content: SqonContent) -> SQONBuilder:
        """Combine the current SQON and `content` with `and`."""
        return type(self)(_combine(CombinationKeys.AND, self._sqon, _to_operators(content)))

    @_chainable
    def or_(self, content: SqonContent) -> SQONBuilder:
        """Combine the current SQON and `content` with `or`."""
        return type(self)(_combine(CombinationKeys.OR, self._sqon, _to_operators(content)))

    @_chainable
    def not_(self, content: SqonContent) -> SQONBuilder:
        """
        Add `not(content)` to the current SQON with `and`.

        Each call adds its own `not` block; blocks are never merged.
        """
        negation = combination(CombinationKeys.NOT, _to_operators(content))
        return type(self)(_combine(CombinationKeys.AND, self._sqon, [negation]))

    @_chainable
    def in_(self, field_name: str, value: Any) -> SQONBuilder:
        """Require `field_name` to be one of `value` (single value or list)."""
        return self.and_(create_filter(field_name, ArrayFilterKeys.IN, value))

    @_chainable
    def gt(self, field_name: str, value: int | float) -> SQONBuilder:
        """Require `field_name` to be greater than `value`."""
        return self.and_(create_filter(field_name, ScalarFilterKeys.GREATER_THAN, value))

    @_chainable
    def lt(self, field_name: str, value: int | float) -> SQONBuilder:
        """Require `field_name` to be less than `value`."""
        return self.and_(create_filter(field_name, ScalarFilterKeys.LESSER_THAN, value))

    # =========================================================================
    # Filter modifiers
    # =========================================================================

    def remove_exact_filter(self, filter_: SqonInput) -> SQONBuilder:
        """
        Remove a filter exactly matching `filter_` from the top level of the SQON.

        Value order is ignored. Only the root, or the direct content of the root
        combination, is searched.

        Example:
            SQONBuilder.in_("name", "Jim").gt("score", 50).remove_exact_filter(
                {"op": "in", "content": {"fieldName": "name", "value": ["Jim"]}}
            )
            # {"op":"gt","content":{"fieldName":"score","value":50}}
        """
        target = _to_operator(filter_)
        if not is_filter(target):
            raise SqonValidationError(
                f"Expected a filter operator, got combination '{target.op}'", field="op"
            )
        return type(self)(remove_exact_filter(self._sqon, target))

    def remove_filter(
        self,
        field_name: str,
        op: str | None = None,
        values: Any | None = None,
    ) -> SQONBuilder:
        """
        Remove top-level filters partially matching the arguments.

        Example:
            builder = SQONBuilder.in_("name", ["Jim", "Bob"]).gt("age", 20).lt("age", 50)
            builder.remove_filter("age")
            # {"op":"in","content":{"fieldName":"name","value":["Jim","Bob"]}}

            SQONBuilder.in_("name", ["Jim", "Bob", "May"]).remove_filter(
                "name", "in", ["Jim", "Bob", "Sue"]
            )
            # {"op":"in","content":{"fieldName":"name","value":["May"]}}
        """
        return type(self)(remove_filter(self._sqon, field_name, op, values))

    def set_filter(self, field_name: str, op: str, value: Any) -> SQONBuilder:
        """
        Replace the value of the top-level filter on (`field_name`, `op`), or add
        a new filter if there is none.

        Raises:
            FilterValueTypeError: If `value` is not valid for `op`.
        """
        return type(self)(set_filter(self._sqon, field_name, op, value))

    # =========================================================================
    # Outputs
    # =========================================================================

    @property
    def op(self) -> str:
        return self._sqon.op

    @property
    def content(self) -> Any:
        return self._sqon.content

    def to_value(self) -> Operator:
        """The current SQON as a frozen operator model."""
        return self._sqon

    def to_dict(self) -> dict[str, Any]:
        """The current SQON as a plain dict."""
        return sqon_to_dict(self._sqon)

    def to_string(self) -> str:
        """Compact JSON representation of the current SQON."""
        return sqon_to_json(self._sqon)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"SQONBuilder({self.to_string()!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SQONBuilder):
            return self._sqon == other._sqon
        if isinstance(other, SqonModel):
            return self._sqon == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._sqon)


# Shorthand alias for convenience
S = SQONBuilder
