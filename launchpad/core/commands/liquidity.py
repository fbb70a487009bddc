"""
Liquidity commands: pool creation, add and remove.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional, Tuple

from pydantic import Field

from ...config import settings
from ...services.address import normalize_address
from ..amm.quote import initial_price
from ..execution.models import BuiltPlan, PlanAmounts
from ..registry.models import Chain, LiquidityPosition, Pool, PositionAction, RecordStatus
from ..routing.models import Operation, RoutePlan
from ..sessions.models import MetadataEntry
from .base import Command, CommandContext, CommandType, SessionCommandRequest, WeiAmount


logger = logging.getLogger(__name__)


class CreatePoolRequest(SessionCommandRequest):
    token_address: str = Field(description="ERC-20 token to list")
    paired_token_address: str = Field(default="0x0", description="Paired asset; 0x0 for the native currency")
    token_amount: WeiAmount = Field(gt=0, description="Initial token liquidity in base units")
    paired_amount: WeiAmount = Field(gt=0, description="Initial paired liquidity in base units (wei for native)")
    owner_address: str = Field(description="Receives the LP tokens")
    token_decimals: int = Field(default=18, ge=0, le=36)
    paired_decimals: int = Field(default=18, ge=0, le=36)


class AddLiquidityRequest(SessionCommandRequest):
    token_a: str = Field(description="First asset; 0x0 for the native currency")
    token_b: str = Field(default="0x0", description="Second asset; 0x0 for the native currency")
    amount_a: WeiAmount = Field(gt=0, description="Desired deposit of token_a in base units")
    amount_b: WeiAmount = Field(gt=0, description="Desired deposit of token_b in base units")
    amount_a_min: Optional[WeiAmount] = None
    amount_b_min: Optional[WeiAmount] = None
    owner_address: str = Field(description="Receives the LP tokens")


class RemoveLiquidityRequest(SessionCommandRequest):
    token_a: str = Field(description="First asset; 0x0 for the native currency")
    token_b: str = Field(default="0x0", description="Second asset; 0x0 for the native currency")
    liquidity: WeiAmount = Field(gt=0, description="LP tokens to burn")
    expected_amount_a: WeiAmount = Field(default=0, description="Expected withdrawal of token_a")
    expected_amount_b: WeiAmount = Field(default=0, description="Expected withdrawal of token_b")
    amount_a_min: Optional[WeiAmount] = None
    amount_b_min: Optional[WeiAmount] = None
    owner_address: str = Field(description="Holder of the LP tokens; receives the withdrawn assets")


def _pool_order(pool: Pool, plan: RoutePlan, amount_a: int, amount_b: int) -> Tuple[int, int]:
    """Map request-ordered amounts onto the pool's token0/token1."""
    if pool.token0_address.lower() == plan.path[0].lower():
        return amount_a, amount_b
    return amount_b, amount_a


def _session_payload(
    context: CommandContext,
    session_id: str,
    plan: RoutePlan,
    built: BuiltPlan,
) -> Dict[str, Any]:
    return {
        "session_id": session_id,
        "url": context.sessions.signing_url(session_id),
        "shape": plan.shape.value,
        "transactions": len(built.steps),
        "minimums": {name: str(value) for name, value in built.minimums.items()},
        "warnings": [warning.to_dict() for warning in built.warnings],
    }


def _open_session(
    context: CommandContext,
    chain: Chain,
    built: BuiltPlan,
    metadata: List[MetadataEntry],
) -> str:
    return context.sessions.create_session(
        built.steps,
        chain_type=chain.chain_type.value,
        chain_id=chain.network_id,
        metadata=metadata,
    )


class CreatePoolCommand(Command):
    command_type = CommandType.CREATE_POOL
    request_model = CreatePoolRequest
    description = (
        "Create a Uniswap V2 liquidity pool seeded with initial liquidity. "
        "Returns a URL where the owner signs the approvals and the pool creation."
    )

    def run(self, request: CreatePoolRequest, context: CommandContext) -> Dict[str, Any]:
        chain = context.resolve_chain(request.chain_id)
        owner = normalize_address(request.owner_address, "owner_address")
        price = initial_price(
            request.token_amount,
            request.paired_amount,
            request.token_decimals,
            request.paired_decimals,
            places=settings.price_display_places,
        )

        plan = context.plan(chain, Operation.CREATE_POOL, request.token_address, request.paired_token_address)
        built = context.builder.build(plan, PlanAmounts(
            amount_a=request.token_amount,
            amount_b=request.paired_amount,
            recipient=owner,
            slippage_percent=request.slippage_percent,
        ))

        pool = Pool(
            id=str(uuid.uuid4()),
            chain_id=chain.id,
            token0_address=plan.path[0],
            token1_address=plan.path[1],
            initial_token0=request.token_amount,
            initial_token1=request.paired_amount,
            status=RecordStatus.PENDING,
        )
        # Not locked against a concurrent create of the same pair
        context.pools.create(pool)

        metadata = request.metadata_entries() + [
            MetadataEntry("pool_id", pool.id),
            MetadataEntry("token0_address", pool.token0_address),
            MetadataEntry("token1_address", pool.token1_address),
            MetadataEntry("initial_price", price.display),
            MetadataEntry("action", CommandType.CREATE_POOL.value),
        ]
        session_id = _open_session(context, chain, built, metadata)
        context.pools.attach_session(pool.id, session_id)

        logger.info(f"Pool {pool.id} pending creation in session {session_id}")
        return {
            **_session_payload(context, session_id, plan, built),
            "pool_id": pool.id,
            "initial_price": price.display,
            "inverse_price": price.inverse_display,
        }


class AddLiquidityCommand(Command):
    command_type = CommandType.ADD_LIQUIDITY
    request_model = AddLiquidityRequest
    description = (
        "Add liquidity to an existing, confirmed Uniswap V2 pool. "
        "Returns a URL where the owner signs the approvals and the deposit."
    )

    def run(self, request: AddLiquidityRequest, context: CommandContext) -> Dict[str, Any]:
        chain = context.resolve_chain(request.chain_id)
        owner = normalize_address(request.owner_address, "owner_address")

        plan = context.plan(chain, Operation.ADD_LIQUIDITY, request.token_a, request.token_b)
        built = context.builder.build(plan, PlanAmounts(
            amount_a=request.amount_a,
            amount_b=request.amount_b,
            amount_a_min=request.amount_a_min,
            amount_b_min=request.amount_b_min,
            recipient=owner,
            slippage_percent=request.slippage_percent,
        ))

        pool = plan.pool
        amount0, amount1 = _pool_order(pool, plan, request.amount_a, request.amount_b)
        position = LiquidityPosition(
            id=str(uuid.uuid4()),
            pool_id=pool.id,
            action=PositionAction.ADD,
            holder_address=owner,
            amount0=amount0,
            amount1=amount1,
        )

        metadata = request.metadata_entries() + [
            MetadataEntry("pool_id", pool.id),
            MetadataEntry("pool_pair_address", pool.pair_address),
            MetadataEntry("action", CommandType.ADD_LIQUIDITY.value),
            MetadataEntry("token_a_address", plan.token_a),
            MetadataEntry("token_b_address", plan.token_b),
        ]
        session_id = _open_session(context, chain, built, metadata)
        position.session_id = session_id
        context.positions.create(position)

        return {
            **_session_payload(context, session_id, plan, built),
            "pool_id": pool.id,
            "position_id": position.id,
        }


class RemoveLiquidityCommand(Command):
    command_type = CommandType.REMOVE_LIQUIDITY
    request_model = RemoveLiquidityRequest
    description = (
        "Remove liquidity from a confirmed Uniswap V2 pool. "
        "Returns a URL where the holder approves the LP token and withdraws."
    )

    def run(self, request: RemoveLiquidityRequest, context: CommandContext) -> Dict[str, Any]:
        chain = context.resolve_chain(request.chain_id)
        owner = normalize_address(request.owner_address, "owner_address")

        plan = context.plan(chain, Operation.REMOVE_LIQUIDITY, request.token_a, request.token_b)
        built = context.builder.build(plan, PlanAmounts(
            amount_a=request.expected_amount_a,
            amount_b=request.expected_amount_b,
            amount_a_min=request.amount_a_min,
            amount_b_min=request.amount_b_min,
            liquidity=request.liquidity,
            recipient=owner,
            slippage_percent=request.slippage_percent,
        ))

        pool = plan.pool
        amount0, amount1 = _pool_order(pool, plan, request.expected_amount_a, request.expected_amount_b)
        position = LiquidityPosition(
            id=str(uuid.uuid4()),
            pool_id=pool.id,
            action=PositionAction.REMOVE,
            holder_address=owner,
            amount0=amount0,
            amount1=amount1,
            liquidity=request.liquidity,
        )

        metadata = request.metadata_entries() + [
            MetadataEntry("pool_id", pool.id),
            MetadataEntry("pool_pair_address", pool.pair_address),
            MetadataEntry("action", CommandType.REMOVE_LIQUIDITY.value),
            MetadataEntry("liquidity", str(request.liquidity)),
        ]
        session_id = _open_session(context, chain, built, metadata)
        position.session_id = session_id
        context.positions.create(position)

        return {
            **_session_payload(context, session_id, plan, built),
            "pool_id": pool.id,
            "position_id": position.id,
        }
