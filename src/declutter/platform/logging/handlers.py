"""Rich console handler used by the Declutter logger.

Where: platform/logging/handlers.py
What: Render structured session events (decisions, undo, suggestions) with icons.
Why: Keep console formatting out of the engine while giving the CLI readable output.
"""

from __future__ import annotations

import logging
from pathlib import PurePosixPath
from typing import Any, ClassVar, override

from rich.console import ConsoleRenderable
from rich.logging import RichHandler
from rich.style import Style
from rich.text import Text


class SessionEventRichHandler(RichHandler):
    """Rich handler that renders ``session_event`` records with compact paths."""

    _EVENT_STYLES: ClassVar[dict[str, tuple[str, str]]] = {
        "session.loaded": ("📂", "cyan"),
        "session.error": ("❌", "red"),
        "session.finished": ("✅", "green"),
        "decision.keep": ("👍", "green"),
        "decision.bin": ("🗑️", "red"),
        "decision.stack": ("📚", "yellow"),
        "decision.cloud": ("☁️", "blue"),
        "decision.move": ("📁", "blue"),
        "decision.undo": ("↩️", "magenta"),
        "decision.redo": ("↪️", "magenta"),
        "move.failed": ("⛔", "red"),
        "review.opened": ("🔍", "cyan"),
        "review.closed": ("🏁", "cyan"),
        "folder.entered": ("📂", "cyan"),
        "folder.returned": ("⬆️", "cyan"),
        "folder.failed": ("❌", "red"),
    }
    _EVENT_PREFIXES: ClassVar[dict[str, str]] = {
        "session.loaded": "Loaded ",
        "session.error": "Could not load ",
        "session.finished": "Finished ",
        "decision.keep": "Kept ",
        "decision.bin": "Binned ",
        "decision.stack": "Stacked ",
        "decision.cloud": "Relocated ",
        "decision.move": "Moved ",
        "decision.undo": "Undid ",
        "decision.redo": "Redid ",
        "move.failed": "Move failed for ",
        "review.opened": "Reviewing group ",
        "review.closed": "Closed group ",
        "folder.entered": "Entered ",
        "folder.returned": "Back in ",
        "folder.failed": "Could not open ",
    }
    _PATH_SEGMENT_LIMIT: ClassVar[int] = 4

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        for option, value in (
            ("show_time", False),
            ("show_path", False),
            ("show_level", False),
            ("rich_tracebacks", True),
            ("markup", True),
        ):
            _ = kwargs.setdefault(option, value)
        super().__init__(*args, **kwargs)

    @classmethod
    def compact_path(cls, raw_path: str, base: str | None = None) -> Text:
        """Render ``raw_path`` relative to ``base`` when inside it, keeping the last segments.

        Separators and the elision mark are magenta; names are white.
        """
        path = PurePosixPath(raw_path)
        if base:
            base_path = PurePosixPath(base)
            if path != base_path and path.is_relative_to(base_path):
                path = path.relative_to(base_path)

        names = [part for part in path.parts if part != path.anchor]
        elided = len(names) > cls._PATH_SEGMENT_LIMIT
        if elided:
            names = names[-cls._PATH_SEGMENT_LIMIT :]

        separator = Style(color="magenta")
        text = Text()
        if path.anchor:
            _ = text.append("/", style=separator)
        if elided:
            _ = text.append("…/", style=separator)
        for index, name in enumerate(names):
            if index:
                _ = text.append("/", style=separator)
            _ = text.append(name, style=Style(color="white"))
        return text if text.plain else Text(".", style=Style(color="white"))

    def _render_session_event(self, record: logging.LogRecord) -> Text | None:
        """Render structured session events with dedicated styling."""

        event = getattr(record, "session_event", None)
        if not isinstance(event, str):
            return None

        icon, color = self._EVENT_STYLES.get(event, ("ℹ️", "blue"))
        text = Text()
        _ = text.append(f"{icon} ", style=Style(color=color, bold=True))

        body = Text(style=Style(color=color))
        file_path = getattr(record, "file_path", None)
        if file_path:
            prefix = self._EVENT_PREFIXES.get(event)
            if prefix:
                _ = body.append(prefix)
            _ = body.append_text(
                self.compact_path(str(file_path), base=getattr(record, "base_path", None))
            )
        else:
            _ = body.append(record.getMessage())

        metrics: list[str] = []
        remaining = getattr(record, "remaining", None)
        if isinstance(remaining, int):
            metrics.append(f"remaining={remaining}")
        size = getattr(record, "size", None)
        if isinstance(size, int) and event == "decision.bin":
            metrics.append(f"{size / (1024 * 1024):.1f} MB")
        error_message = getattr(record, "error_message", None)
        if error_message:
            metrics.append(str(error_message))
        if metrics:
            _ = body.append(" (" + ", ".join(metrics) + ")")

        _ = text.append_text(body)
        return text

    @override
    def render_message(self, record: logging.LogRecord, message: str) -> ConsoleRenderable:
        """Render message with custom styling for session events."""

        event_text = self._render_session_event(record)
        if event_text is not None:
            return event_text
        return super().render_message(record, message)


__all__ = ["SessionEventRichHandler"]
