"""Render the focused file and its suggestions during an interactive review."""

from __future__ import annotations

from collections.abc import Sequence
from typing import final

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from declutter.features.suggestions.domain.models import Suggestion
from declutter.features.triage.domain.models import FileRecord, SessionSnapshot
from declutter.shared.formatting import format_bytes

KEY_HELP = (
    "[k]eep  [b]in  [s]tack  [c]loud  [m]ove  [n] skip  [p]rev  [f]wd  "
    "[u]ndo  [r]edo  [g]roup  [t]ype filter  [e]nter folder  e[x]it folder  [q]uit"
)


@final
class CardDisplay:
    """Show one file card at a time."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def show(
        self,
        record: FileRecord,
        snapshot: SessionSnapshot,
        suggestions: Sequence[Suggestion],
    ) -> None:
        details = Text()
        _ = details.append(f"{record.file_type.display_name}", style="cyan")
        _ = details.append(f"  •  {format_bytes(record.size)}")
        if record.created_at is not None:
            _ = details.append(f"  •  {record.created_at:%Y-%m-%d %H:%M}")

        body: list[Text] = [details]
        if snapshot.folder_depth:
            body.insert(0, Text(f"📂 {snapshot.breadcrumb}", style="dim"))
        for suggestion in suggestions:
            line = Text(f"💡 {suggestion.message}", style="yellow")
            if suggestion.action_hint:
                _ = line.append(f"  {suggestion.action_hint}", style="dim")
            body.append(line)

        position = f"{snapshot.cursor + 1}/{snapshot.visible}"
        title = f"[bold]{record.name}[/bold]"
        self.console.print(Panel(Group(*body), title=title, subtitle=position, expand=False))
        self.console.print(f"[dim]{KEY_HELP}[/dim]")
