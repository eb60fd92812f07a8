"""Command line argument parser."""

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import final

from declutter.config.config import Config
from declutter.config.paths import default_review_location
from declutter.features.triage.domain.models import FileType
from declutter.platform.logging import DEFAULT_LOG_FILE, logger, setup_logger
from declutter.ui.cli.args.options import CLIArgs, ReviewArgs, ScanArgs


@final
class ArgumentParser:
    """Command line argument parser."""

    @staticmethod
    def create_parser() -> argparse.ArgumentParser:
        """Create argument parser.

        Returns:
            argparse.ArgumentParser: Configured argument parser.
        """
        parser = argparse.ArgumentParser(
            description="Declutter - Review a folder one file at a time and clear it out.",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        subparsers = parser.add_subparsers(dest="command", required=True)

        review_parser = subparsers.add_parser(
            "review",
            help="Triage files interactively (keep, bin, stack, move to cloud)",
        )
        ArgumentParser._add_location_argument(review_parser)
        _ = review_parser.add_argument(
            "--filter",
            type=str,
            dest="file_type",
            metavar="TYPE",
            help="Only review files of this type (image, video, audio, document, archive, app, folder, other)",
        )
        _ = review_parser.add_argument(
            "--deferred",
            action="store_true",
            help="Collect binned files instead of trashing them right away",
        )
        ArgumentParser._add_verbosity_arguments(review_parser)

        scan_parser = subparsers.add_parser(
            "scan",
            help="List files and their suggestions without changing anything",
        )
        ArgumentParser._add_location_argument(scan_parser)
        _ = scan_parser.add_argument(
            "--limit",
            type=int,
            help="Show only the first N files",
        )
        ArgumentParser._add_verbosity_arguments(scan_parser)

        return parser

    @staticmethod
    def process_args(args_list: Sequence[str] | None = None) -> CLIArgs:
        """Process command line arguments.

        Args:
            args_list: List of command line arguments (for testing).

        Returns:
            CLIArgs: Processed command line arguments.

        Raises:
            SystemExit: If the location does not exist or other validation fails.
        """
        parser = ArgumentParser.create_parser()
        parsed_args = parser.parse_args(args_list)

        is_quiet = bool(getattr(parsed_args, "quiet", False))
        is_verbose = bool(getattr(parsed_args, "verbose", False))

        if is_quiet:
            log_level = logging.ERROR
        elif is_verbose:
            log_level = logging.DEBUG
        else:
            log_level = logging.INFO

        configuration = Config.load()
        log_file_path = configuration.log_file or DEFAULT_LOG_FILE
        _ = setup_logger(log_file=log_file_path, console_level=log_level)

        location = ArgumentParser._resolve_location(parsed_args.location, configuration)
        command: str = parsed_args.command

        if command == "review":
            return ArgumentParser._process_review(parsed_args, location)

        if command == "scan":
            return ArgumentParser._process_scan(parsed_args, location)

        logger.error("Unsupported command: %s", command)
        sys.exit(2)

    @staticmethod
    def _add_location_argument(parser: argparse.ArgumentParser) -> None:
        _ = parser.add_argument(
            "location",
            type=str,
            nargs="?",
            help="Folder to review (defaults to the configured location or ~/Desktop)",
            metavar="PATH",
        )

    @staticmethod
    def _add_verbosity_arguments(parser: argparse.ArgumentParser) -> None:
        group = parser.add_mutually_exclusive_group()
        _ = group.add_argument(
            "--verbose",
            action="store_true",
            help="Show detailed session information",
        )
        _ = group.add_argument(
            "--quiet",
            action="store_true",
            help="Suppress all output except errors",
        )

    @staticmethod
    def _resolve_location(raw: str | None, configuration: Config) -> Path:
        if raw:
            location = Path(raw).expanduser()
        else:
            location = configuration.default_location or default_review_location()

        if not location.exists() or not location.is_dir():
            logger.error("Location does not exist or is not a directory: %s", location)
            sys.exit(1)
        return location.resolve()

    @staticmethod
    def _process_review(parsed_args: argparse.Namespace, location: Path) -> ReviewArgs:
        file_type: FileType | None = None
        if parsed_args.file_type:
            try:
                file_type = FileType.from_user_input(parsed_args.file_type)
            except ValueError as exc:
                logger.error("%s", exc)
                sys.exit(2)

        return ReviewArgs(
            command="review",
            location=location,
            file_type=file_type,
            deferred=parsed_args.deferred,
            verbose=parsed_args.verbose,
            quiet=parsed_args.quiet,
        )

    @staticmethod
    def _process_scan(parsed_args: argparse.Namespace, location: Path) -> ScanArgs:
        limit = parsed_args.limit
        if limit is not None and limit <= 0:
            logger.error("Limit must be a positive integer; received %s", limit)
            sys.exit(1)

        return ScanArgs(
            command="scan",
            location=location,
            limit=limit,
            verbose=parsed_args.verbose,
            quiet=parsed_args.quiet,
        )
