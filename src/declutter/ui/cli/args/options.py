"""Command line argument options."""

from dataclasses import dataclass
from pathlib import Path
from typing import Literal, final

from declutter.features.triage.domain.models import FileType


@final
@dataclass(slots=True)
class ReviewArgs:
    """Command line arguments for the ``review`` subcommand."""

    command: Literal["review"]
    location: Path
    file_type: FileType | None
    deferred: bool
    verbose: bool
    quiet: bool


@final
@dataclass(slots=True)
class ScanArgs:
    """Command line arguments for the ``scan`` subcommand."""

    command: Literal["scan"]
    location: Path
    limit: int | None
    verbose: bool
    quiet: bool


CLIArgs = ReviewArgs | ScanArgs

__all__ = ["CLIArgs", "ReviewArgs", "ScanArgs"]
