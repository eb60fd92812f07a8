"""Use cases for reviewing a suggestion's group of files."""

from . import coordinator, smart_actions

__all__ = ["coordinator", "smart_actions"]
