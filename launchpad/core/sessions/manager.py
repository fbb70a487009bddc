"""
Session manager for signable transaction plans.

A session is created once from a built plan and handed to the user as a
signing URL. The manager never changes a session afterwards.
"""

import logging
import uuid
from typing import Optional, Sequence

from ...config import settings
from ..errors import NotFoundError, ValidationError
from ..execution.models import TransactionStep
from .models import MetadataInput, SessionStatus, TransactionSession, metadata_entries
from .store import InMemorySessionStore, SessionStore


logger = logging.getLogger(__name__)


class SessionManager:
    """Creates and reads signing sessions."""

    def __init__(self, store: Optional[SessionStore] = None, signing_base_url: Optional[str] = None):
        self.store = store or InMemorySessionStore()
        self._signing_base_url = signing_base_url

    @property
    def signing_base_url(self) -> str:
        base = self._signing_base_url or settings.resolved_signing_base_url
        return base.rstrip("/")

    def create_session(
        self,
        steps: Sequence[TransactionStep],
        chain_type: str,
        chain_id: str,
        metadata: MetadataInput = (),
    ) -> str:
        """
        Persist steps verbatim as a pending session.

        Args:
            steps: Ordered transaction steps
            chain_type: Chain family, e.g. "ethereum"
            chain_id: Network id the steps target
            metadata: Ordered display metadata

        Returns:
            The new session id (uuid4)
        """
        if not steps:
            raise ValidationError("A session needs at least one transaction step")

        session = TransactionSession(
            session_id=str(uuid.uuid4()),
            steps=tuple(steps),
            chain_type=chain_type,
            chain_id=str(chain_id),
            metadata=metadata_entries(metadata),
            status=SessionStatus.PENDING,
        )
        self.store.save(session)

        logger.info(f"Created session {session.session_id} with {len(session.steps)} steps on chain {chain_id}")
        return session.session_id

    def get_session(self, session_id: str) -> TransactionSession:
        session = self.store.get(session_id)
        if session is None:
            raise NotFoundError(f"Session not found: {session_id}", details={"session_id": session_id})
        return session

    def signing_url(self, session_id: str) -> str:
        return f"{self.signing_base_url}/tx/{session_id}"
