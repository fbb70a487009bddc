from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from ..core.commands import CommandContext, CommandRegistry
from ..core.errors import ErrorCategory
from .deps import get_command_context, get_command_registry


router = APIRouter(prefix="/commands")

STATUS_BY_CATEGORY = {
    ErrorCategory.VALIDATION: 400,
    ErrorCategory.NOT_FOUND: 404,
    ErrorCategory.STATE: 409,
    ErrorCategory.ARITHMETIC: 422,
    ErrorCategory.EXTERNAL: 502,
}


def status_for(category: str) -> int:
    try:
        return STATUS_BY_CATEGORY[ErrorCategory(category)]
    except ValueError:
        return 500


@router.get("")
async def list_commands(registry: CommandRegistry = Depends(get_command_registry)) -> Dict[str, Any]:
    return {"commands": [command.describe() for command in registry.list_commands()]}


@router.post("/{command_type}")
def run_command(
    command_type: str,
    payload: Optional[Dict[str, Any]] = Body(default=None),
    registry: CommandRegistry = Depends(get_command_registry),
    context: CommandContext = Depends(get_command_context),
):
    result = registry.execute(command_type, payload, context)
    if result.success:
        return result.to_dict()
    return JSONResponse(status_code=status_for(result.error["category"]), content=result.to_dict())
