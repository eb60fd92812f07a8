"""Interactive review command implementation for the CLI."""

from __future__ import annotations

from pathlib import Path
from typing import Final, final

from rich.console import Console
from rich.prompt import Confirm, IntPrompt, Prompt

from declutter.application.services.declutter_service import DeclutterSession
from declutter.features.triage.domain.models import Decision, FileType, SessionSnapshot
from declutter.platform.logging import logger
from declutter.ui.cli.args.options import ReviewArgs
from declutter.ui.cli.display.card import CardDisplay
from declutter.ui.cli.display.group import GroupReviewDisplay
from declutter.ui.cli.display.summary import render_session_summary

SUGGESTION_WAIT_SECONDS: Final[float] = 1.0

_DECISION_KEYS: Final[dict[str, Decision]] = {
    "k": Decision.KEEP,
    "b": Decision.BIN,
    "s": Decision.STACK,
    "c": Decision.CLOUD,
}
KEY_CHOICES: Final[list[str]] = [*_DECISION_KEYS, "m", "n", "p", "f", "u", "r", "g", "t", "e", "x", "q"]
FILTER_CHOICES: Final[list[str]] = ["all", *(file_type.value for file_type in FileType)]


@final
class ReviewCommand:
    """Walk the working list one file at a time, reading keys with Rich prompts."""

    def __init__(
        self,
        args: ReviewArgs,
        session: DeclutterSession | None = None,
        console: Console | None = None,
    ) -> None:
        self.args = args
        if session is None:
            session = DeclutterSession(immediate_binning=False) if args.deferred else DeclutterSession()
        self.session = session
        self.console = console or Console()
        self.card = CardDisplay(self.console)
        self.group = GroupReviewDisplay(self.console)

    def execute(self) -> SessionSnapshot:
        """Run the review loop until the list is exhausted or the user quits.

        Raises:
            ScanError: The location could not be read.
        """

        try:
            _ = self.session.load_session(self.args.location)
            if self.args.file_type is not None:
                self.session.set_filter(self.args.file_type)
            self._loop()
            self._finish()
            snapshot = self.session.snapshot()
            if not self.args.quiet:
                render_session_summary(self.console, snapshot)
            return snapshot
        finally:
            self.session.shutdown()

    def _loop(self) -> None:
        while True:
            record = self.session.current()
            if record is None:
                snapshot = self.session.snapshot()
                if snapshot.active_filter is not None and snapshot.remaining:
                    label = snapshot.active_filter.display_name.lower()
                    self.console.print(f"[dim]No more {label}; showing all files.[/dim]")
                    self.session.set_filter(None)
                    continue
                if snapshot.folder_depth > 0:
                    self.console.print(f"[dim]Finished {snapshot.breadcrumb}; back to the parent folder.[/dim]")
                    _ = self.session.return_to_parent()
                    continue
                break

            _ = self.session.wait_for_suggestions(SUGGESTION_WAIT_SECONDS)
            self.card.show(record, self.session.snapshot(), self.session.suggestions())

            try:
                key = Prompt.ask("Key", choices=KEY_CHOICES, show_choices=False, console=self.console)
            except (EOFError, KeyboardInterrupt):
                self.console.print("[yellow]Review cancelled by user.[/yellow]")
                return
            if key == "q":
                return
            self._handle_key(key)

        if self.session.snapshot().total_files == 0:
            self.console.print("[dim]Nothing to review.[/dim]")
        else:
            self.console.print("[green]All files reviewed.[/green]")

    def _handle_key(self, key: str) -> None:
        decision = _DECISION_KEYS.get(key)
        if decision is not None:
            if decision is Decision.CLOUD and not self.session.cloud_available:
                self.console.print("[yellow]No cloud folder is configured.[/yellow]")
                return
            if not self.session.decide(decision):
                self.console.print(f"[red]Could not {decision.value} this file.[/red]")
            return

        if key == "m":
            self._move_to_folder()
        elif key == "n":
            _ = self.session.skip()
        elif key == "p":
            if not self.session.go_back():
                self.console.print("[dim]Already at the first file.[/dim]")
        elif key == "f":
            if not self.session.go_forward():
                self.console.print("[dim]Already at the last file.[/dim]")
        elif key == "u":
            if not self.session.undo():
                self.console.print("[dim]Nothing to undo.[/dim]")
        elif key == "r":
            if not self.session.redo():
                self.console.print("[dim]Nothing to redo.[/dim]")
        elif key == "g":
            self._review_group()
        elif key == "t":
            self._change_filter()
        elif key == "e":
            self._enter_folder()
        elif key == "x":
            if not self.session.return_to_parent():
                self.console.print("[dim]Already at the top folder.[/dim]")

    def _ask_folder(self) -> Path | None:
        try:
            raw = Prompt.ask("Move to folder (blank to cancel)", default="", console=self.console)
        except (EOFError, KeyboardInterrupt):
            return None
        raw = raw.strip()
        return Path(raw).expanduser() if raw else None

    def _move_to_folder(self) -> None:
        folder = self._ask_folder()
        if folder is None:
            return
        if not self.session.move_to_folder(folder):
            self.console.print(f"[red]Could not move this file to {folder}.[/red]")

    def _enter_folder(self) -> None:
        count = self.session.enter_folder()
        if count is None:
            self.console.print("[yellow]This is not a folder that can be opened.[/yellow]")
            return
        if count == 0:
            self.console.print("[dim]That folder is empty.[/dim]")

    def _review_group(self) -> None:
        groups = [s for s in self.session.suggestions() if s.is_group]
        if not groups:
            self.console.print("[dim]No group suggestions for this file.[/dim]")
            return

        context = self.session.start_group_review(groups[0].id)
        if context is None:
            self.console.print("[dim]That group is no longer available.[/dim]")
            return

        try:
            actions = self.session.smart_actions()
            self.group.show(context, self.session.group_stats(), actions)
            move_choice = len(actions) + 1
            self.console.print(f"  [bold]{move_choice}[/bold]. Move the whole group to a folder")
            try:
                choice = IntPrompt.ask(
                    "Action number (0 to cancel)",
                    choices=[str(number) for number in range(move_choice + 1)],
                    default=0,
                    show_choices=False,
                    console=self.console,
                )
            except (EOFError, KeyboardInterrupt):
                self.console.print("[yellow]Group review cancelled by user.[/yellow]")
                return
            if choice == 0:
                return
            if choice == move_choice:
                self._move_group(context.member_ids)
                return
            applied = self.session.apply_group_action(choice - 1)
            if applied is None:
                self.console.print(f"[yellow]No action {choice}.[/yellow]")
            else:
                logger.info("Applied group action: %s", applied.title)
        finally:
            self.session.close_group_review()

    def _move_group(self, member_ids: tuple[str, ...]) -> None:
        folder = self._ask_folder()
        if folder is None:
            return
        moved = self.session.move_group_to_folder(member_ids, folder)
        logger.info("Moved %d of %d group files to %s", moved, len(member_ids), folder)

    def _change_filter(self) -> None:
        try:
            raw = Prompt.ask(
                "Type",
                choices=FILTER_CHOICES,
                default="all",
                console=self.console,
            )
        except (EOFError, KeyboardInterrupt):
            return
        self.session.set_filter(None if raw == "all" else FileType(raw))

    def _finish(self) -> None:
        pending = self.session.snapshot().pending_bin
        if not pending:
            return
        try:
            confirmed = Confirm.ask(
                f"Move {len(pending)} binned files to the trash?",
                default=False,
                console=self.console,
            )
        except (EOFError, KeyboardInterrupt):
            self.console.print("[yellow]Binned files were left in place.[/yellow]")
            return
        if confirmed:
            trashed = self.session.empty_bin()
            logger.info("Moved %d files to the trash", trashed)
