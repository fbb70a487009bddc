"""
Registry records the planning core reads: chains, router deployments,
pools and liquidity positions.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from ..errors import ValidationError


class ChainType(str, Enum):
    """Chain families known to the registry."""
    ETHEREUM = "ethereum"
    SOLANA = "solana"


class RecordStatus(str, Enum):
    """Lifecycle of deployments, pools and positions."""
    PENDING = "pending"          # Session built, not yet signed
    CONFIRMED = "confirmed"      # Observed on chain
    FAILED = "failed"            # Transaction failed or reverted


class PositionAction(str, Enum):
    ADD = "add"
    REMOVE = "remove"


@dataclass(frozen=True)
class Chain:
    """A chain the launchpad can plan for."""
    id: str
    chain_type: ChainType
    network_id: str                     # EVM chain id, as a string
    name: str = ""
    rpc_url: str = ""
    is_active: bool = False

    @property
    def is_evm(self) -> bool:
        return self.chain_type == ChainType.ETHEREUM


@dataclass(frozen=True)
class Deployment:
    """Uniswap V2 factory/router pair deployed on a chain."""
    chain_id: str
    factory_address: str
    router_address: str
    weth_address: str
    version: str = "v2"
    status: RecordStatus = RecordStatus.CONFIRMED

    def missing_addresses(self) -> Tuple[str, ...]:
        """Names of required addresses that are blank."""
        required = {
            "factory_address": self.factory_address,
            "router_address": self.router_address,
            "weth_address": self.weth_address,
        }
        return tuple(name for name, value in required.items() if not (value or "").strip())


@dataclass(frozen=True)
class Pool:
    """
    A Uniswap V2 pair as the launchpad knows it.

    Native-paired pools store the wrapped-native address as their paired
    side. Reserves are the last values recorded by the confirmation watcher;
    they are never fetched live.
    """
    id: str
    chain_id: str
    token0_address: str
    token1_address: str
    pair_address: str = ""
    initial_token0: int = 0
    initial_token1: int = 0
    reserve0: Optional[int] = None
    reserve1: Optional[int] = None
    version: str = "v2"
    status: RecordStatus = RecordStatus.PENDING
    session_id: str = ""

    def __post_init__(self):
        if self.token0_address.lower() == self.token1_address.lower():
            raise ValidationError(
                "Pool tokens must differ",
                details={"token": self.token0_address},
            )
        if self.status == RecordStatus.CONFIRMED and not self.pair_address:
            raise ValidationError(
                "A confirmed pool needs a pair address",
                details={"pool_id": self.id},
            )

    @property
    def is_confirmed(self) -> bool:
        return self.status == RecordStatus.CONFIRMED and bool(self.pair_address)

    @property
    def has_reserves(self) -> bool:
        return bool(self.reserve0) and bool(self.reserve1)

    def contains(self, token: str) -> bool:
        token = token.lower()
        return token in (self.token0_address.lower(), self.token1_address.lower())

    def other_token(self, token: str) -> str:
        if token.lower() == self.token0_address.lower():
            return self.token1_address
        return self.token0_address

    def seed_for(self, token_in: str) -> Tuple[int, int]:
        """Initial seed amounts oriented as (reserve_in, reserve_out)."""
        if token_in.lower() == self.token0_address.lower():
            return self.initial_token0, self.initial_token1
        return self.initial_token1, self.initial_token0

    def reserves_for(self, token_in: str) -> Optional[Tuple[int, int]]:
        """Last-known reserves oriented as (reserve_in, reserve_out), if recorded."""
        if not self.has_reserves:
            return None
        if token_in.lower() == self.token0_address.lower():
            return self.reserve0, self.reserve1
        return self.reserve1, self.reserve0

    def with_status(self, status: RecordStatus, pair_address: str = "") -> "Pool":
        return replace(self, status=status, pair_address=pair_address or self.pair_address)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "chain_id": self.chain_id,
            "token0_address": self.token0_address,
            "token1_address": self.token1_address,
            "pair_address": self.pair_address,
            "initial_token0": str(self.initial_token0),
            "initial_token1": str(self.initial_token1),
            "reserve0": str(self.reserve0) if self.reserve0 is not None else None,
            "reserve1": str(self.reserve1) if self.reserve1 is not None else None,
            "version": self.version,
            "status": self.status.value,
            "session_id": self.session_id,
        }


@dataclass
class LiquidityPosition:
    """A pending or settled add/remove against a pool."""
    id: str
    pool_id: str
    action: PositionAction
    holder_address: str = ""
    amount0: int = 0
    amount1: int = 0
    liquidity: int = 0                  # LP tokens burned (remove only)
    status: RecordStatus = RecordStatus.PENDING
    session_id: str = ""
