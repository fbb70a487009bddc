"""
Signing session models.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Tuple, Union

from ..execution.models import TransactionStep


class SessionStatus(str, Enum):
    """Signing session lifecycle."""
    PENDING = "pending"          # Waiting for the user to sign
    CONFIRMED = "confirmed"      # Every step confirmed on chain
    FAILED = "failed"            # A step failed or reverted


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class MetadataEntry:
    """A display key/value pair attached to a session."""
    key: str
    value: str

    def to_dict(self) -> Dict[str, str]:
        return {"key": self.key, "value": self.value}


MetadataInput = Union[Mapping[str, Any], Iterable[MetadataEntry], Iterable[Tuple[str, Any]]]


def metadata_entries(items: MetadataInput) -> Tuple[MetadataEntry, ...]:
    """Normalize a mapping or a sequence of pairs into ordered entries."""
    if isinstance(items, Mapping):
        items = items.items()
    entries = []
    for item in items:
        if isinstance(item, MetadataEntry):
            entries.append(item)
        else:
            key, value = item
            entries.append(MetadataEntry(str(key), str(value)))
    return tuple(entries)


@dataclass
class TransactionSession:
    """An ordered, signable set of transactions."""
    session_id: str
    steps: Tuple[TransactionStep, ...]
    chain_type: str
    chain_id: str
    metadata: Tuple[MetadataEntry, ...] = ()
    status: SessionStatus = SessionStatus.PENDING
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def metadata_value(self, key: str) -> str:
        for entry in self.metadata:
            if entry.key == key:
                return entry.value
        return ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.session_id,
            "chain_type": self.chain_type,
            "chain_id": self.chain_id,
            "status": self.status.value,
            "metadata": [entry.to_dict() for entry in self.metadata],
            "transactions": [step.to_dict() for step in self.steps],
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
