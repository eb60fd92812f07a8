"""Command line interface for Declutter."""

import sys
from typing import Final, final

from declutter.features.triage.usecases.ports import ScanError
from declutter.platform.logging import logger
from declutter.ui.cli.args import ArgumentParser
from declutter.ui.cli.args.options import CLIArgs, ReviewArgs, ScanArgs
from declutter.ui.cli.commands import ReviewCommand, ScanCommand

EXIT_INTERRUPTED: Final[int] = 130
EXIT_UNREADABLE_LOCATION: Final[int] = 2
EXIT_FAILURE: Final[int] = 1


@final
class CommandProcessor:
    """Parse the command line, run the chosen subcommand and map failures to exit codes."""

    @staticmethod
    def process_command(args_list: list[str] | None = None) -> None:
        """Run ``review`` or ``scan`` for ``args_list`` (``sys.argv`` when omitted).

        Exits the process with 130 on Ctrl-C, 2 when the location cannot be
        read and 1 for anything else unexpected.
        """
        try:
            CommandProcessor._run(ArgumentParser.process_args(args_list))
        except KeyboardInterrupt:
            logger.info("\nReview interrupted; decisions made so far are kept")
            sys.exit(EXIT_INTERRUPTED)
        except ScanError as e:
            logger.error("Cannot read %s: %s", e.location, e.reason)
            sys.exit(EXIT_UNREADABLE_LOCATION)
        except Exception as e:
            logger.error("An unexpected error occurred: %s", str(e))
            sys.exit(EXIT_FAILURE)

    @staticmethod
    def _run(args: CLIArgs) -> None:
        if isinstance(args, ReviewArgs):
            snapshot = ReviewCommand(args).execute()
            logger.debug(
                "Review of %s ended with %d of %d files left",
                args.location,
                snapshot.remaining,
                snapshot.total_files,
            )
            return

        assert isinstance(args, ScanArgs)
        rows = ScanCommand(args).execute()
        logger.debug("Scanned %s: %d files listed", args.location, len(rows))


def main() -> int:
    """Console-script entry point; returns 0 when the command completes."""
    CommandProcessor.process_command()
    return 0
