"""Render an open group review: members, statistics and smart actions."""

from __future__ import annotations

from collections.abc import Sequence
from typing import final

from rich.console import Console
from rich.table import Table

from declutter.features.group_review.domain.models import GroupStats, ReviewContext, SmartAction
from declutter.shared.formatting import format_bytes


@final
class GroupReviewDisplay:
    """Show the members of a review and the numbered smart actions."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def show(
        self,
        context: ReviewContext,
        stats: GroupStats | None,
        actions: Sequence[SmartAction],
    ) -> None:
        table = Table(title=context.suggestion.message, show_lines=False)
        table.add_column("File", style="white")
        table.add_column("Size", justify="right")
        table.add_column("Created", style="dim")
        for member in context.members:
            created = f"{member.created_at:%Y-%m-%d %H:%M}" if member.created_at else "-"
            table.add_row(member.name, format_bytes(member.size), created)
        self.console.print(table)

        if stats is not None:
            summary = f"{stats.count} files, {format_bytes(stats.total_bytes)}"
            if stats.date_range:
                summary += f"  •  {stats.date_range}"
            self.console.print(f"[dim]{summary}[/dim]")

        if not actions:
            self.console.print("[yellow]No smart actions for this group.[/yellow]")
            return
        for index, action in enumerate(actions, start=1):
            self.console.print(f"  [bold]{index}[/bold]. {action.title} [dim]({action.description})[/dim]")
