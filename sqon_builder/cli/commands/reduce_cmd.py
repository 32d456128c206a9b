from __future__ import annotations

from typing import IO

import click
import rich_click

from ..context import CLIContext
from ..options import output_options, sqon_source_options
from ..runner import CommandOutput, run_command
from ._input import read_sqon


@click.command(name="reduce", cls=rich_click.RichCommand)
@sqon_source_options
@output_options
@click.pass_obj
def reduce_cmd(ctx: CLIContext, sqon: str | None, file: IO[str] | None) -> None:
    """Print the canonical (reduced) form of a SQON."""

    def fn(_: CLIContext, _warnings: list[str]) -> CommandOutput:
        builder = read_sqon(sqon, file)
        return CommandOutput(data={"sqon": builder.to_dict()})

    run_command(ctx, command="reduce", fn=fn)
