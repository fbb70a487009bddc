"""
Swap commands.
"""

import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from ...config import settings
from ...services.address import normalize_address
from ..amm.quote import SwapQuote, minimum_amount
from ..execution.models import PlanAmounts
from ..routing.models import Operation
from ..sessions.models import MetadataEntry
from .base import Command, CommandContext, CommandRequest, CommandType, SessionCommandRequest, WeiAmount


logger = logging.getLogger(__name__)

ESTIMATE_WARNINGS = [
    "This is an estimated quote based on recorded pool reserves",
    "Actual output may vary due to slippage and other transactions",
]


class ReservePair(BaseModel):
    reserve_in: WeiAmount = Field(gt=0)
    reserve_out: WeiAmount = Field(gt=0)


class SwapQuoteRequest(CommandRequest):
    token_in: str = Field(description="Input asset; 0x0 for the native currency")
    token_out: str = Field(description="Output asset; 0x0 for the native currency")
    amount_in: WeiAmount = Field(gt=0, description="Exact input in base units")
    reserves: List[ReservePair] = Field(
        default_factory=list,
        description="Optional current reserves per pool along the route, oriented in swap direction",
    )

    def hop_reserves(self) -> Tuple[Tuple[int, int], ...]:
        return tuple((pair.reserve_in, pair.reserve_out) for pair in self.reserves)


class SwapRequest(SwapQuoteRequest, SessionCommandRequest):
    amount_out_min: Optional[WeiAmount] = Field(default=None, description="Explicit minimum output")
    recipient: str = Field(description="Receives the output asset")


def _format_percent(value: Decimal) -> str:
    return f"{value.quantize(Decimal(1).scaleb(-settings.price_display_places)):f}"


def _quote_payload(quote: SwapQuote) -> Dict[str, Any]:
    return {
        "amount_in": str(quote.amount_in),
        "expected_output": str(quote.amount_out_wei),
        "price_impact_percent": _format_percent(quote.price_impact_percent),
        "path": list(quote.path),
        "reserve_sources": [source.value for source in quote.reserve_sources],
        "fee_bps": quote.fee_bps,
    }


class SwapCommand(Command):
    command_type = CommandType.SWAP
    request_model = SwapRequest
    description = (
        "Swap an exact input amount through Uniswap V2, directly or via the wrapped native token. "
        "Returns a URL where the user signs the approval and the swap."
    )

    def run(self, request: SwapRequest, context: CommandContext) -> Dict[str, Any]:
        chain = context.resolve_chain(request.chain_id)
        recipient = normalize_address(request.recipient, "recipient")

        plan = context.plan(chain, Operation.SWAP, request.token_in, request.token_out)
        built = context.builder.build(plan, PlanAmounts(
            amount_in=request.amount_in,
            amount_out_min=request.amount_out_min,
            recipient=recipient,
            hop_reserves=request.hop_reserves(),
            slippage_percent=request.slippage_percent,
        ))
        amount_out_min = built.minimums["amount_out_min"]

        metadata = request.metadata_entries() + [
            MetadataEntry("action", CommandType.SWAP.value),
            MetadataEntry("token_in", plan.token_a),
            MetadataEntry("token_out", plan.token_b),
            MetadataEntry("amount_in", str(request.amount_in)),
            MetadataEntry("amount_out_min", str(amount_out_min)),
            MetadataEntry("route", " -> ".join(plan.path)),
        ]
        session_id = context.sessions.create_session(
            built.steps,
            chain_type=chain.chain_type.value,
            chain_id=chain.network_id,
            metadata=metadata,
        )

        return {
            "session_id": session_id,
            "url": context.sessions.signing_url(session_id),
            "shape": plan.shape.value,
            "transactions": len(built.steps),
            "amount_out_min": str(amount_out_min),
            "quote": _quote_payload(built.quote) if built.quote is not None else None,
            "warnings": [warning.to_dict() for warning in built.warnings],
        }


class SwapQuoteCommand(Command):
    command_type = CommandType.SWAP_QUOTE
    request_model = SwapQuoteRequest
    description = "Estimate swap output and price impact. Read-only; no session is created."

    def run(self, request: SwapQuoteRequest, context: CommandContext) -> Dict[str, Any]:
        chain = context.resolve_chain(request.chain_id)
        plan = context.plan(chain, Operation.SWAP, request.token_in, request.token_out)
        quote = context.builder.quote(plan, request.amount_in, request.hop_reserves())

        slippage = settings.quote_slippage_percent
        warnings = [warning.to_dict() for warning in context.builder.quote_warnings(quote)]
        warnings.extend({"code": "estimate", "message": message} for message in ESTIMATE_WARNINGS)

        return {
            **_quote_payload(quote),
            "shape": plan.shape.value,
            "pool_info": [pool.to_dict() for pool in plan.pools],
            "recommendations": {
                "suggested_slippage_percent": str(slippage),
                "min_output": str(minimum_amount(quote.amount_out, slippage)),
            },
            "warnings": warnings,
        }
