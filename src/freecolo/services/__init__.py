"""Collaborators around the game core."""

from .session_store import SavedSession, SessionStore

__all__ = ["SavedSession", "SessionStore"]
