from __future__ import annotations

import click
import rich_click

import sqon_builder

from .context import CLIContext
from .logging import configure_logging, restore_logging


@click.group(
    name="sqon",
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
    cls=rich_click.RichGroup,
)
@click.option(
    "--output",
    type=click.Choice(["table", "json"]),
    default="table",
    envvar="SQON_OUTPUT",
    show_envvar=True,
)
@click.option("--json", "json_flag", is_flag=True, help="Alias for --output json.")
@click.option("-q", "--quiet", is_flag=True, help="Suppress non-essential stderr output.")
@click.option("-v", "verbose", count=True, help="Increase verbosity (-v, -vv).")
@click.option(
    "--indent",
    type=click.IntRange(0, 8),
    default=2,
    show_default=True,
    help="Indentation for SQON JSON in table output.",
)
@click.version_option(version=sqon_builder.__version__, prog_name="sqon")
@click.pass_context
def cli(
    click_ctx: click.Context,
    *,
    output: str,
    json_flag: bool,
    quiet: bool,
    verbose: int,
    indent: int,
) -> None:
    """Build, validate and normalize SQON filter trees."""
    if click_ctx.invoked_subcommand is None:
        click.echo(click_ctx.get_help())
        raise click.exceptions.Exit(0)

    out = "json" if json_flag else output
    click_ctx.obj = CLIContext(
        output=out,  # type: ignore[arg-type]
        quiet=quiet,
        verbosity=verbose,
        indent=indent,
    )

    previous_logging = configure_logging(verbosity=verbose)
    click_ctx.call_on_close(lambda: restore_logging(previous_logging))


# Register commands
from .commands.filter_cmds import remove_filter_cmd as _remove_filter_cmd  # noqa: E402
from .commands.filter_cmds import set_filter_cmd as _set_filter_cmd  # noqa: E402
from .commands.reduce_cmd import reduce_cmd as _reduce_cmd  # noqa: E402
from .commands.validate_cmd import validate_cmd as _validate_cmd  # noqa: E402
from .commands.version_cmd import version_cmd as _version_cmd  # noqa: E402

cli.add_command(_version_cmd)
cli.add_command(_reduce_cmd)
cli.add_command(_validate_cmd)
cli.add_command(_remove_filter_cmd)
cli.add_command(_set_filter_cmd)


def main() -> None:
    cli()
