"""Use cases computing suggestions off the coordinating thread."""

from . import cancellation, ports, suggestion_engine

__all__ = ["cancellation", "ports", "suggestion_engine"]
