"""
sqon_builder - build and normalize SQON filter trees for search backends.

Example:
    from sqon_builder import SQONBuilder

    sqon = SQONBuilder.in_("name", ["Jim", "Bob"]).gt("age", 30)
    payload = sqon.to_string()
"""

from __future__ import annotations

from .builder import S, SQONBuilder
from .exceptions import (
    FilterValueTypeError,
    SqonError,
    SqonSyntaxError,
    SqonValidationError,
)
from .matching import (
    check_matching_arrays,
    filters_match,
    remove_exact_filter,
    remove_filter,
    set_filter,
)
from .models import (
    ARRAY_FILTER_KEYS,
    COMBINATION_KEYS,
    FILTER_KEYS,
    SCALAR_FILTER_KEYS,
    ArrayFilterKeys,
    CombinationKeys,
    CombinationOperator,
    FilterOperator,
    GreaterThanFilter,
    InFilter,
    LesserThanFilter,
    Operator,
    ScalarFilterKeys,
    as_array,
    create_filter,
    empty_sqon,
    is_array_filter,
    is_array_filter_key,
    is_array_filter_value,
    is_combination,
    is_filter,
    is_scalar_filter,
    is_scalar_filter_key,
    is_scalar_filter_value,
    sqon_to_dict,
    sqon_to_json,
    validate_sqon,
)
from .reduce import reduce_sqon

__version__ = "0.1.0"

__all__ = [
    # Builder
    "SQONBuilder",
    "S",
    # Models
    "Operator",
    "FilterOperator",
    "CombinationOperator",
    "InFilter",
    "GreaterThanFilter",
    "LesserThanFilter",
    "ArrayFilterKeys",
    "ScalarFilterKeys",
    "CombinationKeys",
    "ARRAY_FILTER_KEYS",
    "SCALAR_FILTER_KEYS",
    "FILTER_KEYS",
    "COMBINATION_KEYS",
    "is_combination",
    "is_filter",
    "is_array_filter",
    "is_scalar_filter",
    "is_array_filter_key",
    "is_scalar_filter_key",
    "is_array_filter_value",
    "is_scalar_filter_value",
    "validate_sqon",
    "empty_sqon",
    "create_filter",
    "as_array",
    "sqon_to_dict",
    "sqon_to_json",
    # Reduction and matching
    "reduce_sqon",
    "filters_match",
    "check_matching_arrays",
    "remove_exact_filter",
    "remove_filter",
    "set_filter",
    # Errors
    "SqonError",
    "SqonSyntaxError",
    "SqonValidationError",
    "FilterValueTypeError",
]
