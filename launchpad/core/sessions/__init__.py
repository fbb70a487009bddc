"""Signing sessions."""

from .manager import SessionManager
from .models import MetadataEntry, SessionStatus, TransactionSession
from .store import InMemorySessionStore, SessionStore

__all__ = [
    "InMemorySessionStore",
    "MetadataEntry",
    "SessionManager",
    "SessionStatus",
    "SessionStore",
    "TransactionSession",
]
