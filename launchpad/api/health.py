from typing import Any, Dict

from fastapi import APIRouter, Depends

from .. import __version__
from ..core.commands import CommandRegistry
from .deps import get_command_registry

router = APIRouter()


@router.get("/healthz")
async def health_check(registry: CommandRegistry = Depends(get_command_registry)) -> Dict[str, Any]:
    """Liveness probe; the service has no upstream dependencies to check."""
    return {
        "status": "healthy",
        "version": __version__,
        "commands": len(registry.list_commands()),
    }
