"""Command line argument handling package."""

from declutter.ui.cli.args.parser import ArgumentParser
from declutter.ui.cli.args.options import CLIArgs, ReviewArgs, ScanArgs

__all__ = ["ArgumentParser", "CLIArgs", "ReviewArgs", "ScanArgs"]
