"""Chain, deployment, pool and position records."""

from .models import Chain, ChainType, Deployment, LiquidityPosition, Pool, PositionAction, RecordStatus
from .stores import (
    ChainRegistry,
    DeploymentRegistry,
    InMemoryChainRegistry,
    InMemoryDeploymentRegistry,
    InMemoryPoolStore,
    InMemoryPositionStore,
    PoolStore,
    PositionStore,
)

__all__ = [
    "Chain",
    "ChainRegistry",
    "ChainType",
    "Deployment",
    "DeploymentRegistry",
    "InMemoryChainRegistry",
    "InMemoryDeploymentRegistry",
    "InMemoryPoolStore",
    "InMemoryPositionStore",
    "LiquidityPosition",
    "Pool",
    "PoolStore",
    "PositionAction",
    "PositionStore",
    "RecordStatus",
]
