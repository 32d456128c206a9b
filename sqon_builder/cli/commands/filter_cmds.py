from __future__ import annotations

from typing import IO

import click
import rich_click

from sqon_builder.models import FILTER_KEYS, SCALAR_FILTER_KEYS

from ..context import CLIContext
from ..errors import CLIError
from ..options import output_options, sqon_source_options
from ..runner import CommandOutput, run_command
from ._input import parse_value, read_sqon

_OP_CHOICE = click.Choice(sorted(FILTER_KEYS))


@click.command(name="remove-filter", cls=rich_click.RichCommand)
@click.argument("field_name")
@sqon_source_options
@click.option("--op", type=_OP_CHOICE, default=None, help="Only remove filters with this op.")
@click.option(
    "--value",
    "values",
    multiple=True,
    help="Value to match or remove (repeatable). Parsed as JSON when possible.",
)
@output_options
@click.pass_obj
def remove_filter_cmd(
    ctx: CLIContext,
    field_name: str,
    sqon: str | None,
    file: IO[str] | None,
    *,
    op: str | None,
    values: tuple[str, ...],
) -> None:
    """Remove top-level filters on FIELD_NAME from a SQON.

    With --value, an `in` filter that matches the field and op only loses the
    listed values.
    """

    def fn(_: CLIContext, _warnings: list[str]) -> CommandOutput:
        builder = read_sqon(sqon, file)
        parsed = [parse_value(v) for v in values] if values else None
        updated = builder.remove_filter(field_name, op, parsed)
        return CommandOutput(data={"sqon": updated.to_dict()})

    run_command(ctx, command="remove-filter", fn=fn)


@click.command(name="set-filter", cls=rich_click.RichCommand)
@click.argument("field_name")
@click.argument("op", type=_OP_CHOICE)
@sqon_source_options
@click.option(
    "--value",
    "values",
    multiple=True,
    required=True,
    help="Filter value (repeatable for `in`). Parsed as JSON when possible.",
)
@output_options
@click.pass_obj
def set_filter_cmd(
    ctx: CLIContext,
    field_name: str,
    op: str,
    sqon: str | None,
    file: IO[str] | None,
    *,
    values: tuple[str, ...],
) -> None:
    """Set the value of the top-level FIELD_NAME/OP filter, adding it if missing."""

    def fn(_: CLIContext, _warnings: list[str]) -> CommandOutput:
        parsed = [parse_value(v) for v in values]
        if op in SCALAR_FILTER_KEYS and len(parsed) != 1:
            raise CLIError.usage(
                f"Filter op '{op}' takes exactly one --value.",
                hint="Repeat --value only for the 'in' op.",
            )
        builder = read_sqon(sqon, file)
        value = parsed[0] if op in SCALAR_FILTER_KEYS else parsed
        updated = builder.set_filter(field_name, op, value)
        return CommandOutput(data={"sqon": updated.to_dict()})

    run_command(ctx, command="set-filter", fn=fn)
