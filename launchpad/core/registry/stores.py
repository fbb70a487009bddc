"""
Registry interfaces consumed by the planning core, plus in-memory
implementations used by the HTTP app and the tests.

Each in-memory store guards single writes with a lock. Read-then-write
sequences across calls are not atomic.
"""

import logging
import threading
import uuid
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Protocol, runtime_checkable

from ..errors import NotFoundError, ValidationError
from .models import Chain, Deployment, LiquidityPosition, Pool, RecordStatus


logger = logging.getLogger(__name__)


@runtime_checkable
class ChainRegistry(Protocol):
    def active_chain(self) -> Chain:
        """Return the selected chain, raising NotFoundError if none is selected."""
        ...

    def get(self, chain_id: str) -> Chain:
        ...


@runtime_checkable
class DeploymentRegistry(Protocol):
    def by_chain(self, chain_id: str) -> Deployment:
        ...


@runtime_checkable
class PoolStore(Protocol):
    def by_token_pair(self, chain_id: str, token_a: str, token_b: str) -> Optional[Pool]:
        """Order-insensitive pool lookup; None when the pair is unknown."""
        ...

    def get(self, pool_id: str) -> Pool:
        ...

    def create(self, pool: Pool) -> str:
        ...

    def attach_session(self, pool_id: str, session_id: str) -> None:
        ...

    def update_status(
        self,
        pool_id: str,
        status: RecordStatus,
        pair_address: str = "",
        reserves: Optional[tuple] = None,
    ) -> Pool:
        ...


@runtime_checkable
class PositionStore(Protocol):
    def create(self, position: LiquidityPosition) -> str:
        ...

    def get(self, position_id: str) -> LiquidityPosition:
        ...


class InMemoryChainRegistry:
    def __init__(self, chains: Iterable[Chain] = ()):
        self._lock = threading.Lock()
        self._chains: Dict[str, Chain] = {chain.id: chain for chain in chains}

    def add(self, chain: Chain) -> None:
        with self._lock:
            self._chains[chain.id] = chain

    def get(self, chain_id: str) -> Chain:
        chain = self._chains.get(str(chain_id))
        if chain is None:
            raise NotFoundError(f"Chain not found: {chain_id}", details={"chain_id": chain_id})
        return chain

    def active_chain(self) -> Chain:
        for chain in self._chains.values():
            if chain.is_active:
                return chain
        raise NotFoundError("No active chain selected")


class InMemoryDeploymentRegistry:
    def __init__(self, deployments: Iterable[Deployment] = ()):
        self._lock = threading.Lock()
        self._deployments: Dict[str, Deployment] = {d.chain_id: d for d in deployments}

    def add(self, deployment: Deployment) -> None:
        with self._lock:
            self._deployments[deployment.chain_id] = deployment

    def by_chain(self, chain_id: str) -> Deployment:
        deployment = self._deployments.get(str(chain_id))
        if deployment is None:
            raise NotFoundError(
                f"No Uniswap V2 deployment on chain {chain_id}",
                details={"chain_id": chain_id},
            )
        return deployment


class InMemoryPoolStore:
    def __init__(self, pools: Iterable[Pool] = ()):
        self._lock = threading.Lock()
        self._pools: Dict[str, Pool] = {pool.id: pool for pool in pools}

    def by_token_pair(self, chain_id: str, token_a: str, token_b: str) -> Optional[Pool]:
        wanted = {token_a.lower(), token_b.lower()}
        candidates = [
            pool for pool in self._pools.values()
            if pool.chain_id == str(chain_id)
            and {pool.token0_address.lower(), pool.token1_address.lower()} == wanted
        ]
        if not candidates:
            return None
        # A confirmed pair shadows leftover pending records for the same tokens
        confirmed = [pool for pool in candidates if pool.is_confirmed]
        return (confirmed or candidates)[0]

    def get(self, pool_id: str) -> Pool:
        pool = self._pools.get(pool_id)
        if pool is None:
            raise NotFoundError(f"Pool not found: {pool_id}", details={"pool_id": pool_id})
        return pool

    def create(self, pool: Pool) -> str:
        if not pool.id:
            raise ValidationError("Pool id is required")
        with self._lock:
            self._pools[pool.id] = pool
        logger.info(f"Recorded pool {pool.id} ({pool.token0_address}/{pool.token1_address}) as {pool.status.value}")
        return pool.id

    def attach_session(self, pool_id: str, session_id: str) -> None:
        with self._lock:
            pool = self.get(pool_id)
            self._pools[pool_id] = replace(pool, session_id=session_id)

    def update_status(
        self,
        pool_id: str,
        status: RecordStatus,
        pair_address: str = "",
        reserves: Optional[tuple] = None,
    ) -> Pool:
        """Record the outcome observed by the confirmation watcher."""
        with self._lock:
            updated = self.get(pool_id).with_status(status, pair_address)
            if reserves is not None:
                reserve0, reserve1 = reserves
                updated = replace(updated, reserve0=int(reserve0), reserve1=int(reserve1))
            self._pools[pool_id] = updated
        return updated

    def list_pools(self) -> List[Pool]:
        return list(self._pools.values())


class InMemoryPositionStore:
    def __init__(self):
        self._lock = threading.Lock()
        self._positions: Dict[str, LiquidityPosition] = {}

    def create(self, position: LiquidityPosition) -> str:
        if not position.id:
            position.id = str(uuid.uuid4())
        with self._lock:
            self._positions[position.id] = position
        return position.id

    def get(self, position_id: str) -> LiquidityPosition:
        position = self._positions.get(position_id)
        if position is None:
            raise NotFoundError(f"Position not found: {position_id}", details={"position_id": position_id})
        return position
