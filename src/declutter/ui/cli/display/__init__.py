"""Display management for CLI interface."""

from declutter.ui.cli.display.card import CardDisplay
from declutter.ui.cli.display.group import GroupReviewDisplay
from declutter.ui.cli.display.scan import ScanDisplay
from declutter.ui.cli.display.summary import render_session_summary

__all__ = ["CardDisplay", "GroupReviewDisplay", "ScanDisplay", "render_session_summary"]
