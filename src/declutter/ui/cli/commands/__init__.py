"""Command execution package for CLI."""

from declutter.ui.cli.commands.review import ReviewCommand
from declutter.ui.cli.commands.scan import ScanCommand

__all__ = ["ReviewCommand", "ScanCommand"]
