"""
Route planner.

Turns a RouteRequest into an ordered list of logical contract calls against
a Uniswap V2 deployment. The planner is pure: pools come in as a snapshot
loaded by the caller and nothing is written anywhere.
"""

import logging
from typing import List, Optional, Tuple

from ...config import settings
from ...services.address import ZERO_ADDRESS, is_native, normalize_address, normalize_token, same_address
from ..errors import NotFoundError, StateError, ValidationError
from ..registry.models import Deployment, Pool, RecordStatus
from .models import (
    LogicalStep,
    Operation,
    PairShape,
    PoolSnapshot,
    RoutePlan,
    RouteRequest,
    StepKind,
)


logger = logging.getLogger(__name__)


class RoutePlanner:
    """
    Decides which router calls an operation needs and in what order.

    Approvals always come before the call that consumes them:

    - add / create, native pair: approve token, addLiquidityETH
    - add / create, token pair: approve A, approve B, addLiquidity
    - remove: approve LP token, removeLiquidity(ETH)
    - swap native -> token: swapExactETHForTokens
    - swap token -> native: approve, swapExactTokensForETH
    - swap token -> token: approve, swapExactTokensForTokens (direct, or via WETH
      when no direct pool is known)
    """

    def __init__(self, deadline_seconds: Optional[int] = None):
        self.deadline_seconds = (
            deadline_seconds if deadline_seconds is not None else settings.router_deadline_seconds
        )

    def plan(
        self,
        request: RouteRequest,
        deployment: Deployment,
        pools: PoolSnapshot,
        now: int,
    ) -> RoutePlan:
        token_a = normalize_token(request.token_a, "token_a")
        token_b = normalize_token(request.token_b, "token_b")
        # Native and WETH are one asset; a blank WETH still catches equal inputs
        side_weth = deployment.weth_address or ZERO_ADDRESS
        if same_address(
            side_weth if is_native(token_a) else token_a,
            side_weth if is_native(token_b) else token_b,
        ):
            raise ValidationError(
                "tokenA and tokenB must be different assets",
                details={"token_a": request.token_a, "token_b": request.token_b},
            )

        router, weth = self._check_deployment(deployment)
        pool_a = weth if is_native(token_a) else token_a
        pool_b = weth if is_native(token_b) else token_b

        native_index = 0 if is_native(token_a) else 1 if is_native(token_b) else None

        if request.operation == Operation.SWAP:
            shape, route_pools, path = self._swap_route(pool_a, pool_b, weth, native_index, pools)
        else:
            shape = PairShape.DIRECT_NATIVE_PAIR if native_index is not None else PairShape.DIRECT_TOKEN_PAIR
            path = (pool_a, pool_b)
            route_pools = self._liquidity_pools(request.operation, pool_a, pool_b, pools)

        steps = self._steps(request.operation, token_a, token_b, native_index, router, path, route_pools)

        plan = RoutePlan(
            operation=request.operation,
            shape=shape,
            chain_id=deployment.chain_id,
            router_address=router,
            weth_address=weth,
            token_a=token_a,
            token_b=token_b,
            steps=tuple(steps),
            deadline=int(now) + self.deadline_seconds,
            path=path,
            pools=route_pools,
            native_index=native_index,
        )
        logger.debug(f"Planned {request.operation.value} as {shape.value}: {[s.kind.value for s in steps]}")
        return plan

    @staticmethod
    def _check_deployment(deployment: Deployment) -> Tuple[str, str]:
        missing = deployment.missing_addresses()
        if missing:
            raise StateError(
                "Uniswap V2 deployment is not fully provisioned",
                details={"chain_id": deployment.chain_id, "missing": list(missing)},
            )
        if deployment.status != RecordStatus.CONFIRMED:
            raise StateError(
                f"Uniswap V2 deployment on chain {deployment.chain_id} is {deployment.status.value}",
                details={"chain_id": deployment.chain_id, "status": deployment.status.value},
            )
        return (
            normalize_address(deployment.router_address, "router_address"),
            normalize_address(deployment.weth_address, "weth_address"),
        )

    @staticmethod
    def _require_confirmed(pool: Optional[Pool], token_a: str, token_b: str) -> Pool:
        if pool is None:
            raise NotFoundError(
                "Liquidity pool not found",
                details={"token_a": token_a, "token_b": token_b},
            )
        if not pool.is_confirmed:
            raise StateError(
                f"Liquidity pool {pool.id} is not confirmed yet",
                details={"pool_id": pool.id, "status": pool.status.value},
            )
        return pool

    def _liquidity_pools(
        self,
        operation: Operation,
        token_a: str,
        token_b: str,
        pools: PoolSnapshot,
    ) -> Tuple[Pool, ...]:
        existing = pools.find(token_a, token_b)
        if operation == Operation.CREATE_POOL:
            if existing is not None and existing.is_confirmed:
                raise StateError(
                    "Liquidity pool already exists for this token pair",
                    details={"pool_id": existing.id, "pair_address": existing.pair_address},
                )
            return ()
        return (self._require_confirmed(existing, token_a, token_b),)

    def _swap_route(
        self,
        token_in: str,
        token_out: str,
        weth: str,
        native_index: Optional[int],
        pools: PoolSnapshot,
    ) -> Tuple[PairShape, Tuple[Pool, ...], Tuple[str, ...]]:
        direct = pools.find(token_in, token_out)
        if native_index is not None:
            pool = self._require_confirmed(direct, token_in, token_out)
            return PairShape.DIRECT_NATIVE_PAIR, (pool,), (token_in, token_out)

        touches_weth = same_address(token_in, weth) or same_address(token_out, weth)
        if (direct is not None and direct.is_confirmed) or touches_weth:
            pool = self._require_confirmed(direct, token_in, token_out)
            return PairShape.DIRECT_TOKEN_PAIR, (pool,), (token_in, token_out)

        first = self._require_confirmed(pools.find(token_in, weth), token_in, weth)
        second = self._require_confirmed(pools.find(weth, token_out), weth, token_out)
        return PairShape.ROUTED_VIA_WRAPPED_NATIVE, (first, second), (token_in, weth, token_out)

    @staticmethod
    def _approve(token: str, router: str) -> LogicalStep:
        return LogicalStep(kind=StepKind.APPROVE, target=token, token_a=token, spender=router)

    def _steps(
        self,
        operation: Operation,
        token_a: str,
        token_b: str,
        native_index: Optional[int],
        router: str,
        path: Tuple[str, ...],
        route_pools: Tuple[Pool, ...],
    ) -> List[LogicalStep]:
        token_side = token_b if native_index == 0 else token_a

        if operation in (Operation.CREATE_POOL, Operation.ADD_LIQUIDITY):
            if native_index is not None:
                return [
                    self._approve(token_side, router),
                    LogicalStep(kind=StepKind.ADD_LIQUIDITY_NATIVE, target=router, token_a=token_side),
                ]
            return [
                self._approve(token_a, router),
                self._approve(token_b, router),
                LogicalStep(kind=StepKind.ADD_LIQUIDITY, target=router, token_a=token_a, token_b=token_b),
            ]

        if operation == Operation.REMOVE_LIQUIDITY:
            pair = normalize_address(route_pools[0].pair_address, "pair_address")
            if native_index is not None:
                act = LogicalStep(kind=StepKind.REMOVE_LIQUIDITY_NATIVE, target=router, token_a=token_side)
            else:
                act = LogicalStep(kind=StepKind.REMOVE_LIQUIDITY, target=router, token_a=token_a, token_b=token_b)
            return [self._approve(pair, router), act]

        if native_index == 0:
            return [LogicalStep(kind=StepKind.SWAP_EXACT_NATIVE_FOR_TOKENS, target=router, path=path)]
        if native_index == 1:
            return [
                self._approve(token_a, router),
                LogicalStep(kind=StepKind.SWAP_EXACT_TOKENS_FOR_NATIVE, target=router, path=path),
            ]
        return [
            self._approve(token_a, router),
            LogicalStep(kind=StepKind.SWAP_EXACT_TOKENS_FOR_TOKENS, target=router, path=path),
        ]
