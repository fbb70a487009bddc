"""
Read-only pool lookup.
"""

from typing import Any, Dict, Optional

from pydantic import Field

from ...config import settings
from ...services.address import is_native
from ..amm.quote import initial_price
from ..errors import NotFoundError, ValidationError
from .base import Command, CommandContext, CommandRequest, CommandType


class PoolInfoRequest(CommandRequest):
    pool_id: Optional[str] = Field(default=None, description="Pool id; takes precedence over tokens")
    token_a: Optional[str] = Field(default=None, description="First asset; 0x0 for the native currency")
    token_b: str = Field(default="0x0", description="Second asset; 0x0 for the native currency")


class PoolInfoCommand(Command):
    command_type = CommandType.POOL_INFO
    request_model = PoolInfoRequest
    description = "Describe a liquidity pool by id or by its token pair."

    def run(self, request: PoolInfoRequest, context: CommandContext) -> Dict[str, Any]:
        chain = context.resolve_chain(request.chain_id)

        if request.pool_id:
            pool = context.pools.get(request.pool_id)
            if pool.chain_id != chain.id:
                raise NotFoundError(
                    f"Liquidity pool {request.pool_id} not found on chain {chain.id}",
                    details={"pool_id": request.pool_id, "chain_id": chain.id},
                )
        elif request.token_a:
            weth = context.deployments.by_chain(chain.id).weth_address
            token_a = weth if is_native(request.token_a) else request.token_a
            token_b = weth if is_native(request.token_b) else request.token_b
            pool = context.pools.by_token_pair(chain.id, token_a, token_b)
            if pool is None:
                raise NotFoundError(
                    "Liquidity pool not found",
                    details={"token_a": request.token_a, "token_b": request.token_b},
                )
        else:
            raise ValidationError("Provide pool_id or token_a", details={"field": "pool_id"})

        info = pool.to_dict()
        info["confirmed"] = pool.is_confirmed
        if pool.initial_token0 > 0:
            price = initial_price(pool.initial_token0, pool.initial_token1, places=settings.price_display_places)
            info["initial_price"] = price.display
            info["initial_inverse_price"] = price.inverse_display
        return info
