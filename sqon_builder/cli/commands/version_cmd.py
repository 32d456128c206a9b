from __future__ import annotations

import platform

import click
import pydantic
import rich_click

import sqon_builder
from sqon_builder.models import COMBINATION_KEYS, FILTER_KEYS

from ..context import CLIContext
from ..options import output_options
from ..runner import CommandOutput, run_command


@click.command(name="version", cls=rich_click.RichCommand)
@output_options
@click.pass_obj
def version_cmd(ctx: CLIContext) -> None:
    """Show the sqon-builder version and the SQON ops it understands."""

    def fn(_: CLIContext, _warnings: list[str]) -> CommandOutput:
        return CommandOutput(
            data={
                "version": sqon_builder.__version__,
                "filterOps": sorted(FILTER_KEYS),
                "combinationOps": sorted(COMBINATION_KEYS),
                "pydanticVersion": pydantic.VERSION,
                "pythonVersion": platform.python_version(),
            }
        )

    run_command(ctx, command="version", fn=fn)
