from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from typing import Any

from rich.console import Console, Group
from rich.json import JSON
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .results import CommandResult


@dataclass(frozen=True, slots=True)
class RenderSettings:
    output: str  # "table" | "json"
    quiet: bool
    verbosity: int
    indent: int = 2


def _error_title(error_type: str) -> str:
    normalized = (error_type or "").strip()
    mapping = {
        "usage_error": "Usage error",
        "syntax_error": "Syntax error",
        "validation_error": "Validation error",
        "internal_error": "Internal error",
    }
    return mapping.get(normalized, "Error")


def _render_error_details(
    *,
    stderr: Console,
    command: str,
    error_type: str,
    hint: str | None,
    details: dict[str, Any] | None,
    settings: RenderSettings,
) -> None:
    if settings.quiet:
        return

    if hint:
        stderr.print(f"Hint: {hint}")

    if not details:
        if error_type == "usage_error" and not hint:
            stderr.print(f"Hint: run `sqon {command} --help`")
        return

    if error_type == "validation_error":
        errors = details.get("errors")
        if isinstance(errors, list) and errors:
            table = Table(show_header=True, header_style="bold")
            table.add_column("Location")
            table.add_column("Problem")
            table.add_column("Type", style="dim")
            for err in errors[:50]:
                table.add_row(
                    str(err.get("loc") or "<root>"),
                    str(err.get("msg", "")),
                    str(err.get("type", "")),
                )
            stderr.print(table)
            return

    if error_type == "syntax_error" and "line" in details:
        stderr.print(f"At line {details['line']}, column {details.get('column')}")
        return

    if settings.verbosity >= 1:
        stderr.print(Panel.fit(Text(json.dumps(details, ensure_ascii=False, indent=2))))


def _sqon_renderable(sqon: Any, *, indent: int) -> JSON:
    return JSON.from_data(sqon, indent=indent)


def _render_human_data(data: Any, *, settings: RenderSettings) -> Any:
    if data is None:
        return None
    if not isinstance(data, dict):
        return Text(str(data))
    parts: list[Any] = []
    for key, value in data.items():
        if key == "sqon":
            continue
        parts.append(Text(f"{key}: {value}"))
    if "sqon" in data:
        parts.append(_sqon_renderable(data["sqon"], indent=settings.indent))
    return Group(*parts)


def render_result(result: CommandResult, *, settings: RenderSettings) -> int:
    stdout = Console(file=sys.stdout, force_terminal=False)
    stderr = Console(file=sys.stderr, force_terminal=False)

    if settings.output == "json":
        payload = result.model_dump(by_alias=True, mode="json")
        sys.stdout.write(json.dumps(payload, ensure_ascii=False) + "\n")
        return 0

    if not result.ok:
        if result.error is not None:
            title = _error_title(result.error.type)
            stderr.print(f"{title}: {result.error.message}", markup=False)
            _render_error_details(
                stderr=stderr,
                command=result.command,
                error_type=result.error.type,
                hint=result.error.hint,
                details=result.error.details,
                settings=settings,
            )
        else:
            stderr.print("Error")
        return 0

    renderable: Any
    if result.command == "version" and isinstance(result.data, dict):
        ops = [*result.data.get("filterOps", []), *result.data.get("combinationOps", [])]
        renderable = Group(
            Text(f"sqon-builder {result.data.get('version', '')}", style="bold"),
            Text(f"Ops: {', '.join(ops)}"),
        )
    elif result.command == "validate" and isinstance(result.data, dict):
        renderable = Group(
            Text("Valid SQON", style="bold green"),
            _sqon_renderable(result.data.get("sqon"), indent=settings.indent),
        )
    else:
        renderable = _render_human_data(result.data, settings=settings)

    if renderable is not None:
        stdout.print(renderable)
    return 0
