"""Use cases driving a triage session: store, decisions and undo."""

from . import decision_engine, ports, session_store, undo_history

__all__ = ["decision_engine", "ports", "session_store", "undo_history"]
