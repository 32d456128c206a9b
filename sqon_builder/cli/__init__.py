"""Command line interface for sqon_builder (`sqon`)."""

from __future__ import annotations

from .main import cli, main

__all__ = ["cli", "main"]
