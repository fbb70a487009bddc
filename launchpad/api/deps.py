"""
Singleton collaborators for the HTTP app.

Tests replace them through ``app.dependency_overrides``.
"""

import logging
from typing import Optional

from ..config import settings
from ..core.commands import CommandContext, CommandRegistry, default_registry
from ..core.registry import (
    Chain,
    ChainType,
    Deployment,
    InMemoryChainRegistry,
    InMemoryDeploymentRegistry,
    InMemoryPoolStore,
    InMemoryPositionStore,
)
from ..core.sessions import SessionManager


logger = logging.getLogger(__name__)

_context: Optional[CommandContext] = None
_registry: Optional[CommandRegistry] = None


def build_default_context() -> CommandContext:
    """In-memory context, seeded with the configured chain when one is set."""
    chains = InMemoryChainRegistry()
    deployments = InMemoryDeploymentRegistry()

    if settings.chain_network_id:
        chain = Chain(
            id=settings.chain_network_id,
            chain_type=ChainType.ETHEREUM,
            network_id=settings.chain_network_id,
            name=settings.chain_name or f"chain-{settings.chain_network_id}",
            rpc_url=settings.rpc_url,
            is_active=True,
        )
        chains.add(chain)
        deployments.add(Deployment(
            chain_id=chain.id,
            factory_address=settings.uniswap_factory_address,
            router_address=settings.uniswap_router_address,
            weth_address=settings.weth_address,
        ))
        logger.info(f"Seeded active chain {chain.name} ({chain.network_id})")

    return CommandContext(
        chains=chains,
        deployments=deployments,
        pools=InMemoryPoolStore(),
        positions=InMemoryPositionStore(),
        sessions=SessionManager(),
    )


def get_command_context() -> CommandContext:
    """Get the singleton command context."""
    global _context
    if _context is None:
        _context = build_default_context()
    return _context


def get_command_registry() -> CommandRegistry:
    """Get the singleton command registry."""
    global _registry
    if _registry is None:
        _registry = default_registry()
    return _registry
