"""Command line interface package."""

from declutter.ui.cli.cli import CommandProcessor, main

__all__ = ["CommandProcessor", "main"]
