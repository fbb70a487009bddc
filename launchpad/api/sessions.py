from typing import Any, Dict

from fastapi import APIRouter, Depends

from ..core.commands import CommandContext
from .deps import get_command_context


router = APIRouter(prefix="/tx")


@router.get("/{session_id}")
async def get_transaction_session(
    session_id: str,
    context: CommandContext = Depends(get_command_context),
) -> Dict[str, Any]:
    """Session read model consumed by the signing page."""
    return context.sessions.get_session(session_id).to_dict()
