"""Registry of launchpad commands keyed by CommandType."""

from typing import Any, Dict, List, Optional, Union

from ..errors import NotFoundError
from .base import Command, CommandContext, CommandResult, CommandType
from .liquidity import AddLiquidityCommand, CreatePoolCommand, RemoveLiquidityCommand
from .pool import PoolInfoCommand
from .swap import SwapCommand, SwapQuoteCommand


class CommandRegistry:
    """Maps command types to command instances."""

    def __init__(self):
        self._commands: Dict[CommandType, Command] = {}

    def register(self, command: Command) -> None:
        self._commands[command.command_type] = command

    def get(self, command_type: Union[str, CommandType]) -> Command:
        try:
            key = CommandType(command_type)
        except ValueError:
            raise NotFoundError(f"Unknown command: {command_type}", details={"command": str(command_type)})
        command = self._commands.get(key)
        if command is None:
            raise NotFoundError(f"Command not registered: {key.value}", details={"command": key.value})
        return command

    def list_commands(self) -> List[Command]:
        return list(self._commands.values())

    def execute(
        self,
        command_type: Union[str, CommandType],
        payload: Optional[Dict[str, Any]],
        context: CommandContext,
    ) -> CommandResult:
        return self.get(command_type).execute(payload, context)


def default_registry() -> CommandRegistry:
    """Registry with every launchpad command registered."""
    registry = CommandRegistry()
    for command in (
        CreatePoolCommand(),
        AddLiquidityCommand(),
        RemoveLiquidityCommand(),
        SwapCommand(),
        SwapQuoteCommand(),
        PoolInfoCommand(),
    ):
        registry.register(command)
    return registry
