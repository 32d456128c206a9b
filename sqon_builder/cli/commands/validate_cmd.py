from __future__ import annotations

from typing import IO

import click
import rich_click

from ..context import CLIContext
from ..options import output_options, sqon_source_options
from ..runner import CommandOutput, run_command
from ._input import read_sqon


@click.command(name="validate", cls=rich_click.RichCommand)
@sqon_source_options
@output_options
@click.pass_obj
def validate_cmd(ctx: CLIContext, sqon: str | None, file: IO[str] | None) -> None:
    """Check a SQON against the grammar (exit code 2 when invalid)."""

    def fn(_: CLIContext, warnings: list[str]) -> CommandOutput:
        builder = read_sqon(sqon, file)
        if builder.op == "and" and not builder.content:
            warnings.append("SQON reduces to an empty 'and' and matches everything.")
        return CommandOutput(data={"valid": True, "sqon": builder.to_dict()})

    run_command(ctx, command="validate", fn=fn)
