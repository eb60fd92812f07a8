"""Display utilities for the scan command."""

from __future__ import annotations

from collections.abc import Sequence
from typing import final

from rich.console import Console
from rich.table import Table

from declutter.features.suggestions.domain.models import Suggestion
from declutter.features.triage.domain.models import FileRecord
from declutter.shared.formatting import format_bytes


@final
class ScanDisplay:
    """Render files with their suggestions as a table."""

    def __init__(self) -> None:
        self.console = Console()

    def show(
        self,
        rows: Sequence[tuple[FileRecord, Sequence[Suggestion]]],
        *,
        total: int,
        quiet: bool = False,
    ) -> None:
        if quiet:
            return

        table = Table(title=f"{total} files")
        table.add_column("Name", style="white", overflow="fold")
        table.add_column("Type", style="cyan")
        table.add_column("Size", justify="right")
        table.add_column("Suggestions", style="yellow")
        for record, suggestions in rows:
            table.add_row(
                record.name,
                record.file_type.display_name,
                format_bytes(record.size),
                "\n".join(suggestion.message for suggestion in suggestions) or "-",
            )
        self.console.print(table)
        if len(rows) < total:
            self.console.print(f"[dim]... and {total - len(rows)} more[/dim]")
