"""
Session persistence.
"""

import threading
from dataclasses import replace
from datetime import datetime, timezone
from typing import Dict, Optional, Protocol, runtime_checkable

from ..errors import NotFoundError
from .models import SessionStatus, TransactionSession


@runtime_checkable
class SessionStore(Protocol):
    def save(self, session: TransactionSession) -> None:
        ...

    def get(self, session_id: str) -> Optional[TransactionSession]:
        ...

    def set_status(self, session_id: str, status: SessionStatus) -> TransactionSession:
        """Only the confirmation watcher moves a session out of pending."""
        ...


class InMemorySessionStore:
    """Process-local SessionStore. Each write is one dict assignment under a lock."""

    def __init__(self):
        self._lock = threading.Lock()
        self._sessions: Dict[str, TransactionSession] = {}

    def save(self, session: TransactionSession) -> None:
        with self._lock:
            self._sessions[session.session_id] = session

    def get(self, session_id: str) -> Optional[TransactionSession]:
        return self._sessions.get(session_id)

    def set_status(self, session_id: str, status: SessionStatus) -> TransactionSession:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                raise NotFoundError(f"Session not found: {session_id}", details={"session_id": session_id})
            updated = replace(session, status=status, updated_at=datetime.now(timezone.utc))
            self._sessions[session_id] = updated
        return updated

    def __len__(self) -> int:
        return len(self._sessions)
