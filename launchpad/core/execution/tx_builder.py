"""
Transaction plan builder.

Turns a RoutePlan into encoded TransactionSteps. The builder resolves
amounts and slippage minimums, quotes swaps when no explicit minimum is
given, and encodes every call through a CallEncoder. It never persists
anything.
"""

import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ...config import settings
from ...services.address import normalize_address
from ..amm.quote import ReserveHop, ReserveSource, SwapQuote, minimum_amount, quote_path
from ..errors import ValidationError
from ..routing.models import LogicalStep, Operation, RoutePlan, StepKind
from .abi import ERC20_ABI, UNISWAP_V2_ROUTER_ABI
from .encoder import MAX_UINT256, AbiEncoder, CallEncoder, describe_arguments
from .models import BuiltPlan, PlanAmounts, PlanWarning, TransactionStep, TransactionType


logger = logging.getLogger(__name__)

HIGH_PRICE_IMPACT_PERCENT = Decimal("5")


def _short(address: str) -> str:
    return f"{address[:6]}...{address[-4:]}" if len(address) > 12 else address


def _non_negative(value: Optional[int], name: str) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or int(value) < 0:
        raise ValidationError(f"{name} must be a non-negative integer", details={"field": name})
    return int(value)


def _positive(value: int, name: str) -> int:
    if value is None or isinstance(value, bool) or int(value) <= 0:
        raise ValidationError(f"{name} must be positive", details={"field": name})
    return int(value)


class TransactionPlanBuilder:
    """
    Builds signable transaction steps from a route plan.

    Approvals are unlimited (MAX_UINT256) and granted to the router.
    """

    def __init__(
        self,
        encoder: Optional[CallEncoder] = None,
        default_slippage_percent: Optional[Decimal] = None,
        fee_bps: Optional[int] = None,
    ):
        self.encoder = encoder or AbiEncoder()
        self.default_slippage_percent = (
            default_slippage_percent
            if default_slippage_percent is not None
            else settings.default_slippage_percent
        )
        self.fee_bps = fee_bps if fee_bps is not None else settings.swap_fee_bps

    def build(self, plan: RoutePlan, amounts: PlanAmounts) -> BuiltPlan:
        recipient = normalize_address(amounts.recipient, "recipient")
        slippage = (
            Decimal(amounts.slippage_percent)
            if amounts.slippage_percent is not None
            else self.default_slippage_percent
        )

        if plan.operation == Operation.SWAP:
            args, value, minimums, quote, warnings = self._swap_args(plan, amounts, recipient, slippage)
        elif plan.operation == Operation.REMOVE_LIQUIDITY:
            args, value, minimums, warnings = self._remove_args(plan, amounts, recipient, slippage)
            quote = None
        else:
            args, value, minimums = self._add_args(plan, amounts, recipient, slippage)
            quote, warnings = None, []

        steps: List[TransactionStep] = []
        for logical in plan.steps:
            if logical.kind == StepKind.APPROVE:
                steps.append(self._approve_step(plan, logical))
            else:
                steps.append(self._router_step(plan, logical, args, value))

        logger.info(
            f"Built {plan.operation.value} plan with {len(steps)} steps "
            f"({plan.shape.value}, chain {plan.chain_id})"
        )
        return BuiltPlan(
            steps=tuple(steps),
            minimums=minimums,
            quote=quote,
            warnings=tuple(warnings),
        )

    def _encode(self, function_name: str, args: Sequence[Any], abi) -> Tuple[str, Tuple[Tuple[str, str], ...]]:
        data = self.encoder.encode(function_name, args, abi)
        return data, describe_arguments(function_name, args, abi)

    def _approve_step(self, plan: RoutePlan, logical: LogicalStep) -> TransactionStep:
        data, arguments = self._encode("approve", [logical.spender, MAX_UINT256], ERC20_ABI)
        is_lp = plan.operation == Operation.REMOVE_LIQUIDITY
        return TransactionStep(
            title="Approve LP token" if is_lp else f"Approve {_short(logical.token_a)}",
            description=(
                f"Allow the router {_short(logical.spender)} to spend "
                f"{'LP tokens of pair' if is_lp else 'token'} {logical.token_a}"
            ),
            receiver=logical.target,
            data=data,
            value="0",
            transaction_type=TransactionType.REGULAR,
            arguments=arguments,
        )

    def _router_step(
        self,
        plan: RoutePlan,
        logical: LogicalStep,
        args: List[Any],
        value: int,
    ) -> TransactionStep:
        function_name = logical.kind.function_name
        data, arguments = self._encode(function_name, args, UNISWAP_V2_ROUTER_ABI)

        if plan.operation == Operation.CREATE_POOL:
            title, tx_type = "Create liquidity pool", TransactionType.LIQUIDITY_POOL_CREATION
            description = f"Create the {_short(plan.path[0])}/{_short(plan.path[1])} pool and seed its liquidity"
        elif plan.operation == Operation.ADD_LIQUIDITY:
            title, tx_type = "Add liquidity", TransactionType.ADD_LIQUIDITY
            description = f"Add liquidity to the {_short(plan.path[0])}/{_short(plan.path[1])} pool"
        elif plan.operation == Operation.REMOVE_LIQUIDITY:
            title, tx_type = "Remove liquidity", TransactionType.REMOVE_LIQUIDITY
            description = f"Remove liquidity from pair {plan.pools[0].pair_address}"
        else:
            title, tx_type = "Swap", TransactionType.SWAP
            description = "Swap along " + " -> ".join(_short(token) for token in logical.path)

        return TransactionStep(
            title=title,
            description=f"{description} via {function_name}",
            receiver=logical.target,
            data=data,
            value=str(value),
            transaction_type=tx_type,
            arguments=arguments,
        )

    def _pick_min(self, explicit: Optional[int], desired: int, slippage: Decimal, name: str) -> int:
        explicit = _non_negative(explicit, name)
        if explicit is not None:
            return explicit
        return minimum_amount(desired, slippage)

    def _add_args(
        self,
        plan: RoutePlan,
        amounts: PlanAmounts,
        recipient: str,
        slippage: Decimal,
    ) -> Tuple[List[Any], int, Dict[str, int]]:
        amount_a = _positive(amounts.amount_a, "amount_a")
        amount_b = _positive(amounts.amount_b, "amount_b")

        if plan.is_native:
            native_first = plan.native_index == 0
            token_amount, eth_amount = (amount_b, amount_a) if native_first else (amount_a, amount_b)
            token_min_explicit, eth_min_explicit = (
                (amounts.amount_b_min, amounts.amount_a_min) if native_first
                else (amounts.amount_a_min, amounts.amount_b_min)
            )
            token_min = self._pick_min(token_min_explicit, token_amount, slippage, "amount_token_min")
            eth_min = self._pick_min(eth_min_explicit, eth_amount, slippage, "amount_eth_min")
            args = [plan.token_side, token_amount, token_min, eth_min, recipient, plan.deadline]
            return args, eth_amount, {"amount_token_min": token_min, "amount_eth_min": eth_min}

        a_min = self._pick_min(amounts.amount_a_min, amount_a, slippage, "amount_a_min")
        b_min = self._pick_min(amounts.amount_b_min, amount_b, slippage, "amount_b_min")
        args = [plan.token_a, plan.token_b, amount_a, amount_b, a_min, b_min, recipient, plan.deadline]
        return args, 0, {"amount_a_min": a_min, "amount_b_min": b_min}

    def _remove_args(
        self,
        plan: RoutePlan,
        amounts: PlanAmounts,
        recipient: str,
        slippage: Decimal,
    ) -> Tuple[List[Any], int, Dict[str, int], List[PlanWarning]]:
        liquidity = _positive(amounts.liquidity, "liquidity")
        expected_a = _non_negative(amounts.amount_a, "amount_a") or 0
        expected_b = _non_negative(amounts.amount_b, "amount_b") or 0
        a_min = self._pick_min(amounts.amount_a_min, expected_a, slippage, "amount_a_min")
        b_min = self._pick_min(amounts.amount_b_min, expected_b, slippage, "amount_b_min")

        warnings: List[PlanWarning] = []
        if a_min == 0 and b_min == 0:
            warnings.append(PlanWarning(
                code="no_minimum",
                message="Both withdrawal minimums are zero; the removal has no slippage protection",
            ))

        if plan.is_native:
            token_min, eth_min = (b_min, a_min) if plan.native_index == 0 else (a_min, b_min)
            args = [plan.token_side, liquidity, token_min, eth_min, recipient, plan.deadline]
            return args, 0, {"amount_token_min": token_min, "amount_eth_min": eth_min}, warnings

        args = [plan.token_a, plan.token_b, liquidity, a_min, b_min, recipient, plan.deadline]
        return args, 0, {"amount_a_min": a_min, "amount_b_min": b_min}, warnings

    def quote(self, plan: RoutePlan, amount_in: int, hop_reserves: Sequence[Tuple[int, int]] = ()) -> SwapQuote:
        """
        Quote a swap plan along its pools.

        Reserves per hop come from the caller first, then the pool's last
        known reserves, then the pool's initial seed amounts.
        """
        if hop_reserves and len(hop_reserves) != len(plan.pools):
            raise ValidationError(
                f"Expected reserves for {len(plan.pools)} pools, got {len(hop_reserves)}",
                details={"field": "reserves"},
            )

        hops: List[ReserveHop] = []
        for index, pool in enumerate(plan.pools):
            token_in, token_out = plan.path[index], plan.path[index + 1]
            if hop_reserves:
                (reserve_in, reserve_out), source = hop_reserves[index], ReserveSource.CALLER
            elif pool.reserves_for(token_in) is not None:
                (reserve_in, reserve_out), source = pool.reserves_for(token_in), ReserveSource.LAST_KNOWN
            else:
                (reserve_in, reserve_out), source = pool.seed_for(token_in), ReserveSource.INITIAL_SEED
            hops.append(ReserveHop(token_in, token_out, reserve_in, reserve_out, source))

        return quote_path(amount_in, hops, self.fee_bps)

    @staticmethod
    def quote_warnings(quote: SwapQuote) -> List[PlanWarning]:
        warnings: List[PlanWarning] = []
        if quote.uses_stale_reserves:
            warnings.append(PlanWarning(
                code="stale_reserves",
                message="Quote uses the pool's initial seed amounts; reserves may have moved since creation",
            ))
        if quote.price_impact_percent > HIGH_PRICE_IMPACT_PERCENT:
            warnings.append(PlanWarning(
                code="high_price_impact",
                message=f"Trade consumes {quote.price_impact_percent:.2f}% of the input reserve",
            ))
        return warnings

    def _swap_args(
        self,
        plan: RoutePlan,
        amounts: PlanAmounts,
        recipient: str,
        slippage: Decimal,
    ) -> Tuple[List[Any], int, Dict[str, int], Optional[SwapQuote], List[PlanWarning]]:
        amount_in = _positive(amounts.amount_in, "amount_in")

        quote: Optional[SwapQuote] = None
        warnings: List[PlanWarning] = []
        amount_out_min = _non_negative(amounts.amount_out_min, "amount_out_min")
        if amount_out_min is None:
            quote = self.quote(plan, amount_in, amounts.hop_reserves)
            warnings = self.quote_warnings(quote)
            amount_out_min = minimum_amount(quote.amount_out, slippage)

        path = list(plan.path)
        if plan.native_index == 0:
            args: List[Any] = [amount_out_min, path, recipient, plan.deadline]
            value = amount_in
        else:
            args = [amount_in, amount_out_min, path, recipient, plan.deadline]
            value = 0
        return args, value, {"amount_out_min": amount_out_min}, quote, warnings
