"""
Launchpad commands.

Each command validates a payload, plans, builds and (for mutating
operations) opens a signing session:

Usage:
    from launchpad.core.commands import CommandType, default_registry

    registry = default_registry()
    result = registry.execute(CommandType.SWAP_QUOTE, payload, context)
    if not result.success:
        print(result.error["category"], result.error["message"])
"""

from .base import Command, CommandContext, CommandResult, CommandType
from .registry import CommandRegistry, default_registry

__all__ = [
    "Command",
    "CommandContext",
    "CommandRegistry",
    "CommandResult",
    "CommandType",
    "default_registry",
]
