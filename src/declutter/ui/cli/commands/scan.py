"""Scan command implementation for the CLI."""

from __future__ import annotations

from typing import final

from declutter.application.services.declutter_service import DeclutterSession
from declutter.features.suggestions.domain.models import Suggestion
from declutter.features.triage.domain.models import FileRecord
from declutter.ui.cli.args.options import ScanArgs
from declutter.ui.cli.display.scan import ScanDisplay


@final
class ScanCommand:
    """List a location with the suggestions each file would get, read-only."""

    def __init__(self, args: ScanArgs, session: DeclutterSession | None = None) -> None:
        self.args = args
        self.session = session or DeclutterSession()
        self.display = ScanDisplay()

    def execute(self) -> list[tuple[FileRecord, list[Suggestion]]]:
        """Execute the scan command."""

        try:
            _ = self.session.load_session(self.args.location)
            records = self.session.records()
            shown = records[: self.args.limit] if self.args.limit else records
            rows = [(record, self.session.detect(record)) for record in shown]
            self.display.show(rows, total=len(records), quiet=self.args.quiet)
            return rows
        finally:
            self.session.shutdown()
