"""
Route planning models.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple

from ..registry.models import Pool


class Operation(str, Enum):
    """DEX operations the planner understands."""
    CREATE_POOL = "create_pool"
    ADD_LIQUIDITY = "add_liquidity"
    REMOVE_LIQUIDITY = "remove_liquidity"
    SWAP = "swap"


class PairShape(str, Enum):
    """How the two sides of a request map onto pools."""
    DIRECT_NATIVE_PAIR = "direct_native_pair"                # One side is the native currency
    DIRECT_TOKEN_PAIR = "direct_token_pair"                  # Two ERC-20s sharing a pool
    ROUTED_VIA_WRAPPED_NATIVE = "routed_via_wrapped_native"  # token -> WETH -> token


class StepKind(str, Enum):
    """Logical contract calls, before encoding."""
    APPROVE = "approve"
    ADD_LIQUIDITY = "addLiquidity"
    ADD_LIQUIDITY_NATIVE = "addLiquidityETH"
    REMOVE_LIQUIDITY = "removeLiquidity"
    REMOVE_LIQUIDITY_NATIVE = "removeLiquidityETH"
    SWAP_EXACT_NATIVE_FOR_TOKENS = "swapExactETHForTokens"
    SWAP_EXACT_TOKENS_FOR_NATIVE = "swapExactTokensForETH"
    SWAP_EXACT_TOKENS_FOR_TOKENS = "swapExactTokensForTokens"

    @property
    def function_name(self) -> str:
        return self.value


@dataclass(frozen=True)
class RouteRequest:
    """What the caller wants done between two assets (``0x0`` means native)."""
    operation: Operation
    token_a: str
    token_b: str


@dataclass(frozen=True)
class PoolSnapshot:
    """Pools the caller loaded for one planning call."""
    pools: Tuple[Pool, ...] = ()

    @classmethod
    def of(cls, pools: Iterable[Optional[Pool]]) -> "PoolSnapshot":
        unique: Dict[str, Pool] = {}
        for pool in pools:
            if pool is not None:
                unique.setdefault(pool.id, pool)
        return cls(tuple(unique.values()))

    def find(self, token_a: str, token_b: str) -> Optional[Pool]:
        """Order-insensitive lookup; a confirmed pool wins over pending ones."""
        wanted = {token_a.lower(), token_b.lower()}
        matches = [
            pool for pool in self.pools
            if {pool.token0_address.lower(), pool.token1_address.lower()} == wanted
        ]
        confirmed = [pool for pool in matches if pool.is_confirmed]
        if confirmed:
            return confirmed[0]
        return matches[0] if matches else None


@dataclass(frozen=True)
class LogicalStep:
    """
    One contract call the signer will make.

    ``target`` is the contract called. For approvals ``token_a`` is the
    token being approved and ``spender`` the router.
    """
    kind: StepKind
    target: str
    token_a: str = ""
    token_b: str = ""
    path: Tuple[str, ...] = ()
    spender: str = ""


@dataclass(frozen=True)
class RoutePlan:
    """Ordered logical steps for one request. Approvals precede their consumer."""
    operation: Operation
    shape: PairShape
    chain_id: str
    router_address: str
    weth_address: str
    token_a: str                        # Checksummed, or the zero address for native
    token_b: str
    steps: Tuple[LogicalStep, ...]
    deadline: int
    path: Tuple[str, ...] = ()          # Swap path in router terms (native as WETH)
    pools: Tuple[Pool, ...] = ()        # Pools along ``path``, in hop order
    native_index: Optional[int] = None  # 0 or 1 when one side is native

    @property
    def is_native(self) -> bool:
        return self.native_index is not None

    @property
    def token_side(self) -> str:
        """The ERC-20 side of a native pair."""
        if self.native_index == 0:
            return self.token_b
        return self.token_a

    @property
    def pool(self) -> Optional[Pool]:
        return self.pools[0] if self.pools else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "operation": self.operation.value,
            "shape": self.shape.value,
            "chain_id": self.chain_id,
            "token_a": self.token_a,
            "token_b": self.token_b,
            "path": list(self.path),
            "deadline": self.deadline,
            "steps": [step.kind.value for step in self.steps],
            "pool_ids": [pool.id for pool in self.pools],
        }
