"""Route planning for Uniswap V2 operations."""

from .models import (
    LogicalStep,
    Operation,
    PairShape,
    PoolSnapshot,
    RoutePlan,
    RouteRequest,
    StepKind,
)
from .planner import RoutePlanner

__all__ = [
    "LogicalStep",
    "Operation",
    "PairShape",
    "PoolSnapshot",
    "RoutePlan",
    "RouteRequest",
    "RoutePlanner",
    "StepKind",
]
