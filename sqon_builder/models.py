"""
SQON tree model.

A SQON is a recursive tree of operators discriminated by their `op` key:

- filters test one field against a value:
  `{"op": "in", "content": {"fieldName": "name", "value": ["Jim", "Bob"]}}`
  `{"op": "gt", "content": {"fieldName": "age", "value": 30}}`
- combinations join other operators:
  `{"op": "and", "content": [<operator>, ...]}` (also `or` and `not`)

All models are frozen; a tree, once built, is never modified in place.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Annotated, Any, Final, Literal, TypeGuard

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictFloat,
    StrictInt,
    StrictStr,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from .exceptions import FilterValueTypeError, SqonValidationError

# =============================================================================
# Keys
# =============================================================================


class ArrayFilterKeys:
    IN: Final = "in"


class ScalarFilterKeys:
    GREATER_THAN: Final = "gt"
    LESSER_THAN: Final = "lt"


class CombinationKeys:
    AND: Final = "and"
    OR: Final = "or"
    NOT: Final = "not"


ArrayFilterKey = Literal["in"]
ScalarFilterKey = Literal["gt", "lt"]
FilterKey = Literal["in", "gt", "lt"]
CombinationKey = Literal["and", "or", "not"]

ARRAY_FILTER_KEYS: Final = frozenset([ArrayFilterKeys.IN])
SCALAR_FILTER_KEYS: Final = frozenset([ScalarFilterKeys.GREATER_THAN, ScalarFilterKeys.LESSER_THAN])
FILTER_KEYS: Final = ARRAY_FILTER_KEYS | SCALAR_FILTER_KEYS
COMBINATION_KEYS: Final = frozenset(
    [CombinationKeys.AND, CombinationKeys.OR, CombinationKeys.NOT]
)

# =============================================================================
# Filter values
# =============================================================================

# Mixed strings and numbers are allowed in one `in` filter; the search backend
# sorts out the types.
ArrayFilterItem = StrictStr | StrictInt | StrictFloat
ScalarFilterValue = StrictInt | StrictFloat

_ARRAY_FILTER_ITEMS: TypeAdapter[Any] = TypeAdapter(tuple[ArrayFilterItem, ...])
_SCALAR_FILTER_VALUE: TypeAdapter[Any] = TypeAdapter(ScalarFilterValue)


def as_array(value: Any) -> tuple[Any, ...]:
    """
    Wrap a single value in a tuple; lists and tuples are returned as tuples.

    Other collections (sets, dicts) count as a single value, so they fail
    item validation instead of being unpacked in an arbitrary order.
    """
    if isinstance(value, (list, tuple)):
        return tuple(value)
    return (value,)


# =============================================================================
# Operators
# =============================================================================


class SqonModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
    )


class InFilterContent(SqonModel):
    field_name: StrictStr = Field(..., alias="fieldName")
    value: tuple[ArrayFilterItem, ...]

    @field_validator("value", mode="before")
    @classmethod
    def _wrap_single_value(cls, value: Any) -> Any:
        return as_array(value)


class ScalarFilterContent(SqonModel):
    field_name: StrictStr = Field(..., alias="fieldName")
    value: ScalarFilterValue


class InFilter(SqonModel):
    """Field value is one of `content.value`."""

    op: ArrayFilterKey
    content: InFilterContent


class GreaterThanFilter(SqonModel):
    """Field value is greater than `content.value`."""

    op: Literal["gt"]
    content: ScalarFilterContent


class LesserThanFilter(SqonModel):
    """Field value is less than `content.value`."""

    op: Literal["lt"]
    content: ScalarFilterContent


class CombinationOperator(SqonModel):
    """`and` / `or` / `not` over an ordered sequence of operators."""

    op: CombinationKey
    content: tuple[Operator, ...]


ScalarFilter = GreaterThanFilter | LesserThanFilter
Filter = InFilter | ScalarFilter
FilterOperator = Annotated[
    InFilter | GreaterThanFilter | LesserThanFilter,
    Field(discriminator="op"),
]
Operator = Annotated[
    InFilter | GreaterThanFilter | LesserThanFilter | CombinationOperator,
    Field(discriminator="op"),
]

CombinationOperator.model_rebuild()

_OPERATOR: TypeAdapter[Any] = TypeAdapter(Operator)

# =============================================================================
# Type guards
# =============================================================================


def is_combination(operator: Operator) -> TypeGuard[CombinationOperator]:
    return operator.op in COMBINATION_KEYS


def is_filter(operator: Operator) -> TypeGuard[Filter]:
    return operator.op in FILTER_KEYS


def is_array_filter(operator: Operator) -> TypeGuard[InFilter]:
    return operator.op in ARRAY_FILTER_KEYS


def is_scalar_filter(operator: Operator) -> TypeGuard[ScalarFilter]:
    return operator.op in SCALAR_FILTER_KEYS


def is_array_filter_key(value: object) -> bool:
    return isinstance(value, str) and value in ARRAY_FILTER_KEYS


def is_scalar_filter_key(value: object) -> bool:
    return isinstance(value, str) and value in SCALAR_FILTER_KEYS


def is_array_filter_value(value: object) -> bool:
    try:
        _ARRAY_FILTER_ITEMS.validate_python(as_array(value))
    except ValidationError:
        return False
    return True


def is_scalar_filter_value(value: object) -> bool:
    try:
        _SCALAR_FILTER_VALUE.validate_python(value)
    except ValidationError:
        return False
    return True


# =============================================================================
# Construction and validation
# =============================================================================


def validate_sqon(raw: Any) -> Operator:
    """
    Validate an arbitrary parsed value against the SQON grammar.

    Already-built operator models are returned as-is.

    Raises:
        SqonValidationError: listing every structural mismatch with its location.
    """
    try:
        return _OPERATOR.validate_python(raw)
    except ValidationError as e:
        raise SqonValidationError.from_pydantic(e) from None


def empty_sqon() -> CombinationOperator:
    """The canonical empty tree: `{"op": "and", "content": []}`."""
    return CombinationOperator(op=CombinationKeys.AND, content=())


def create_filter(
    field_name: str,
    op: str,
    value: Any,
) -> Filter:
    """
    Build a single filter.

    Array values are always stored as a tuple, even when a single value is given.

    Raises:
        FilterValueTypeError: If `value` cannot be used with `op` (or `op` is unknown).
        SqonValidationError: If `field_name` is not a string.
    """
    try:
        if is_array_filter_key(op) and is_array_filter_value(value):
            return InFilter(
                op=ArrayFilterKeys.IN,
                content=InFilterContent(field_name=field_name, value=as_array(value)),
            )
        if is_scalar_filter_key(op) and is_scalar_filter_value(value):
            content = ScalarFilterContent(field_name=field_name, value=value)
            if op == ScalarFilterKeys.GREATER_THAN:
                return GreaterThanFilter(op=ScalarFilterKeys.GREATER_THAN, content=content)
            return LesserThanFilter(op=ScalarFilterKeys.LESSER_THAN, content=content)
    except ValidationError as e:
        raise SqonValidationError.from_pydantic(e) from None
    raise FilterValueTypeError(op, value)


def combination(op: str, content: Sequence[Operator]) -> CombinationOperator:
    return CombinationOperator(op=op, content=tuple(content))  # type: ignore[arg-type]


def with_value(filter_: Filter, value: Any) -> Filter:
    """Copy of `filter_` holding `value`; the value is not re-validated."""
    content = filter_.content.model_copy(update={"value": value})
    return filter_.model_copy(update={"content": content})


# =============================================================================
# Serialization
# =============================================================================


def sqon_to_dict(operator: Operator) -> dict[str, Any]:
    """Plain JSON-compatible dict using the wire key names (`fieldName`)."""
    return operator.model_dump(by_alias=True, mode="json")


def sqon_to_json(operator: Operator) -> str:
    """Compact canonical JSON string."""
    return operator.model_dump_json(by_alias=True)
