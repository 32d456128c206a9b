"""Exceptions raised while parsing, validating and building SQONs."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError


class SqonError(Exception):
    """Base class for all sqon_builder errors."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field

    def __str__(self) -> str:
        if self.field:
            return f"{self.field}: {self.message}"
        return self.message


class SqonSyntaxError(SqonError, ValueError):
    """Input string is not well-formed JSON."""

    def __init__(self, message: str, *, line: int | None = None, column: int | None = None) -> None:
        super().__init__(message)
        self.line = line
        self.column = column


class SqonValidationError(SqonError, ValueError):
    """Parsed value does not conform to the SQON grammar.

    `errors` lists every structural mismatch found, each a dict with
    `loc` (dotted path to the offending node), `msg` and `type`.
    """

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        if field is None and errors and len(errors) == 1:
            field = errors[0]["loc"] or None
        super().__init__(message, field=field)
        self.errors = errors or []

    @classmethod
    def from_pydantic(cls, exc: ValidationError) -> SqonValidationError:
        errors = [
            {
                "loc": ".".join(str(loc) for loc in err["loc"]),
                "msg": err["msg"],
                "type": err["type"],
            }
            for err in exc.errors()
        ]
        if len(errors) == 1:
            return cls(errors[0]["msg"], errors=errors)
        lines = [f"{err['loc'] or '<root>'}: {err['msg']}" for err in errors]
        return cls("Multiple validation errors:\n" + "\n".join(lines), errors=errors)


class FilterValueTypeError(SqonError, TypeError):
    """A filter value is incompatible with the filter's op."""

    def __init__(self, op: str, value: Any) -> None:
        super().__init__(f'Cannot assign the value "{value!r}" to a filter of type "{op}".')
        self.op = op
        self.value = value
