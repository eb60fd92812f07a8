"""Utilities for rendering the end-of-session summary."""

from __future__ import annotations

from rich.console import Console

from declutter.features.triage.domain.models import SessionSnapshot
from declutter.shared.formatting import format_bytes


def render_session_summary(console: Console, snapshot: SessionSnapshot) -> None:
    """Render counters and leftover collections of a session.

    Args:
        console: Rich console instance used to render output.
        snapshot: Committed session state to summarise.
    """
    counters = snapshot.counters

    console.print("\n[bold]Session Summary:[/bold]")
    console.print(f"Files reviewed: {snapshot.total_files - snapshot.remaining} of {snapshot.total_files}")
    console.print(f"[green]Kept: {counters.kept}[/green]")
    console.print(f"[red]Binned: {counters.binned} ({format_bytes(counters.reclaimed_bytes)})[/red]")
    if counters.relocated:
        console.print(f"[blue]Moved to cloud or folders: {counters.relocated}[/blue]")
    if snapshot.stacked:
        console.print(f"[yellow]Stacked for later: {len(snapshot.stacked)}[/yellow]")
        for record in snapshot.stacked:
            console.print(f"[yellow]  • {record.name}[/yellow]")
    if snapshot.pending_bin:
        console.print(f"[red]Waiting in bin: {len(snapshot.pending_bin)}[/red]")
