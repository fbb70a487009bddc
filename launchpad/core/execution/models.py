"""
Transaction step models.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from ..amm.quote import SwapQuote


class TransactionType(str, Enum):
    """Types of signable transactions, as understood by the signing page."""
    REGULAR = "regular"
    TOKEN_DEPLOYMENT = "token_deployment"
    UNISWAP_V2_TOKEN_DEPLOYMENT = "uniswap_v2_token_deployment"
    UNISWAP_V2_FACTORY_DEPLOYMENT = "uniswap_v2_factory_deployment"
    UNISWAP_V2_ROUTER_DEPLOYMENT = "uniswap_v2_router_deployment"
    LIQUIDITY_POOL_CREATION = "liquidity_pool_creation"
    ADD_LIQUIDITY = "add_liquidity"
    REMOVE_LIQUIDITY = "remove_liquidity"
    SWAP = "swap"


@dataclass(frozen=True)
class TransactionStep:
    """One transaction the user signs, in order."""
    title: str
    description: str
    receiver: str                               # Blank means contract creation
    data: str                                   # 0x-prefixed calldata
    value: str = "0"                            # Wei, decimal string
    transaction_type: TransactionType = TransactionType.REGULAR
    arguments: Tuple[Tuple[str, str], ...] = ()  # Raw call arguments for display

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "title": self.title,
            "description": self.description,
            "receiver": self.receiver,
            "value": self.value,
            "data": self.data,
            "transactionType": self.transaction_type.value,
        }
        if self.arguments:
            payload["contractArguments"] = [
                {"name": name, "value": value} for name, value in self.arguments
            ]
        return payload

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TransactionStep":
        return cls(
            title=data["title"],
            description=data.get("description", ""),
            receiver=data.get("receiver", ""),
            data=data.get("data", "0x"),
            value=str(data.get("value", "0")),
            transaction_type=TransactionType(data.get("transactionType", TransactionType.REGULAR.value)),
            arguments=tuple(
                (arg["name"], arg["value"]) for arg in data.get("contractArguments", [])
            ),
        )


@dataclass(frozen=True)
class PlanWarning:
    """Something the signer should know about a built plan."""
    code: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"code": self.code, "message": self.message}


@dataclass(frozen=True)
class PlanAmounts:
    """
    Amounts for one plan, in base units.

    ``amount_a``/``amount_b`` follow the request's token order: desired
    deposits for add/create, expected withdrawals for remove.
    ``hop_reserves`` are caller-supplied (reserve_in, reserve_out) per swap hop.
    """
    amount_a: int = 0
    amount_b: int = 0
    amount_a_min: Optional[int] = None
    amount_b_min: Optional[int] = None
    liquidity: int = 0
    amount_in: int = 0
    amount_out_min: Optional[int] = None
    recipient: str = ""
    hop_reserves: Tuple[Tuple[int, int], ...] = ()
    slippage_percent: Optional[Decimal] = None


@dataclass(frozen=True)
class BuiltPlan:
    """Encoded steps plus the numbers they were built from."""
    steps: Tuple[TransactionStep, ...]
    minimums: Dict[str, int] = field(default_factory=dict)
    quote: Optional[SwapQuote] = None
    warnings: Tuple[PlanWarning, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "transactions": [step.to_dict() for step in self.steps],
            "minimums": {name: str(value) for name, value in self.minimums.items()},
            "warnings": [warning.to_dict() for warning in self.warnings],
        }
        if self.quote is not None:
            result["quote"] = {
                "amount_in": str(self.quote.amount_in),
                "amount_out": str(self.quote.amount_out_wei),
                "price_impact_percent": str(self.quote.price_impact_percent),
                "path": list(self.quote.path),
                "reserve_sources": [source.value for source in self.quote.reserve_sources],
            }
        return result
