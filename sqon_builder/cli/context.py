from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Literal

from sqon_builder.exceptions import (
    FilterValueTypeError,
    SqonSyntaxError,
    SqonValidationError,
)

from .errors import CLIError
from .results import CommandMeta, CommandResult, ErrorInfo

OutputFormat = Literal["table", "json"]


@dataclass
class CLIContext:
    output: OutputFormat
    quiet: bool
    verbosity: int
    indent: int = 2


def exit_code_for_exception(exc: Exception) -> int:
    if isinstance(exc, CLIError):
        return exc.exit_code
    if isinstance(exc, (SqonSyntaxError, SqonValidationError, FilterValueTypeError)):
        return 2
    return 1


def error_info_for_exception(exc: Exception) -> ErrorInfo:
    if isinstance(exc, CLIError):
        return ErrorInfo(
            type=exc.error_type, message=exc.message, hint=exc.hint, details=exc.details
        )
    if isinstance(exc, SqonSyntaxError):
        details: dict[str, Any] | None = None
        if exc.line is not None:
            details = {"line": exc.line, "column": exc.column}
        return ErrorInfo(type="syntax_error", message=exc.message, details=details)
    if isinstance(exc, SqonValidationError):
        return ErrorInfo(
            type="validation_error",
            message=str(exc),
            details={"errors": exc.errors} if exc.errors else None,
        )
    if isinstance(exc, FilterValueTypeError):
        return ErrorInfo(
            type="validation_error",
            message=exc.message,
            details={"op": exc.op, "value": repr(exc.value)},
        )
    return ErrorInfo(type="internal_error", message=str(exc), details=None)


def build_result(
    *,
    ok: bool,
    command: str,
    started_at: float,
    data: Any | None,
    warnings: list[str],
    error: ErrorInfo | None = None,
) -> CommandResult:
    duration_ms = int(max(0.0, (time.time() - started_at) * 1000))
    return CommandResult(
        ok=ok,
        command=command,
        data=data,
        warnings=warnings,
        meta=CommandMeta(duration_ms=duration_ms),
        error=error,
    )
