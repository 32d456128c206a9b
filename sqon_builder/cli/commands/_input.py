from __future__ import annotations

import json
from typing import IO, Any

import click

from sqon_builder import SQONBuilder

from ..errors import CLIError


def read_sqon(sqon: str | None, file: IO[str] | None) -> SQONBuilder:
    """Build from the SQON argument, `--file`, or stdin (`-`)."""
    if sqon is not None and file is not None:
        raise CLIError.usage("Pass the SQON either as an argument or with --file, not both.")
    if file is not None:
        text = file.read()
    elif sqon == "-" or sqon is None:
        stdin = click.get_text_stream("stdin")
        if sqon is None and stdin.isatty():
            raise CLIError.usage(
                "Missing SQON.", hint="Pass it as an argument, with --file, or on stdin."
            )
        text = stdin.read()
    else:
        text = sqon
    if not text.strip():
        raise CLIError.usage("Empty SQON input.")
    return SQONBuilder(text)


def parse_value(raw: str) -> Any:
    """
    Parse a filter value given on the command line.

    JSON scalars are decoded (`30` -> 30, `"30"` -> "30"); anything else is
    kept as a plain string.
    """
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        return raw
    if isinstance(value, (str, int, float)) and not isinstance(value, bool):
        return value
    return raw
