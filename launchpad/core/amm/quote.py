"""
Constant-product (x * y = k) quote math.

Every function here is pure and works on exact token quantities: ``int``
wei amounts, ``Decimal`` values or decimal strings. Floats are rejected so
that wei-scale numbers never pass through binary floating point.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from enum import Enum
from typing import Optional, Sequence, Tuple, Union

from ..errors import AmmArithmeticError, ValidationError

Amount = Union[int, str, Decimal]

BPS_DENOMINATOR = 10_000
DEFAULT_FEE_BPS = 30  # 0.3% Uniswap V2 fee

# Amounts and reserves are uint256 on chain
MAX_UINT256 = 2**256 - 1

# uint256 has 78 decimal digits; keep headroom for the intermediate products
_PRECISION = 120


class ReserveSource(str, Enum):
    """Where the reserves behind a quote came from."""

    CALLER = "caller"              # Supplied with the request
    LAST_KNOWN = "last_known"      # Last reserves recorded for the pool
    INITIAL_SEED = "initial_seed"  # Seed amounts from pool creation (stale after any trade)


@dataclass(frozen=True)
class PriceQuote:
    """Initial pool price, in both directions, with display strings."""

    price: Decimal
    display: str
    inverse_price: Optional[Decimal] = None
    inverse_display: Optional[str] = None


@dataclass(frozen=True)
class ReserveHop:
    """Reserves of one pool along a swap path, oriented in the swap direction."""

    token_in: str
    token_out: str
    reserve_in: int
    reserve_out: int
    source: ReserveSource = ReserveSource.CALLER


@dataclass(frozen=True)
class SwapQuote:
    """Result of quoting an exact-input swap across one or more pools."""

    amount_in: int
    amount_out: Decimal
    path: Tuple[str, ...]
    hop_outputs: Tuple[Decimal, ...]
    price_impact_percent: Decimal
    reserve_sources: Tuple[ReserveSource, ...]
    fee_bps: int = DEFAULT_FEE_BPS

    @property
    def amount_out_wei(self) -> int:
        return int(self.amount_out.to_integral_value(rounding=ROUND_FLOOR))

    @property
    def uses_stale_reserves(self) -> bool:
        return ReserveSource.INITIAL_SEED in self.reserve_sources


def to_decimal(value: Amount, name: str = "amount") -> Decimal:
    """Parse an exact amount within the uint256 range. Floats are refused."""
    if isinstance(value, bool) or isinstance(value, float):
        raise ValidationError(
            f"Invalid {name}: {value!r} (use an integer or decimal string)",
            details={"field": name},
        )
    try:
        parsed = Decimal(value.strip()) if isinstance(value, str) else Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"Invalid {name}: {value!r}", details={"field": name})
    if not parsed.is_finite():
        raise ValidationError(f"Invalid {name}: {value!r}", details={"field": name})
    if abs(parsed) > MAX_UINT256:
        raise ValidationError(
            f"{name} exceeds the uint256 range",
            details={"field": name, "max": str(MAX_UINT256)},
        )
    return parsed


def floor_to_int(value: Decimal) -> int:
    return int(value.to_integral_value(rounding=ROUND_FLOOR))


def _check_fee(fee_bps: int) -> None:
    if not isinstance(fee_bps, int) or fee_bps < 0 or fee_bps >= BPS_DENOMINATOR:
        raise ValidationError(
            f"fee_bps must be in [0, {BPS_DENOMINATOR}), got {fee_bps!r}",
            details={"field": "fee_bps"},
        )


def _check_slippage(slippage_percent: Decimal) -> None:
    if slippage_percent < 0 or slippage_percent >= 100:
        raise ValidationError(
            f"Slippage must be in [0, 100), got {slippage_percent}",
            details={"field": "slippage_percent"},
        )


def swap_output(
    reserve_in: Amount,
    reserve_out: Amount,
    amount_in: Amount,
    fee_bps: int = DEFAULT_FEE_BPS,
) -> Decimal:
    """
    Output of an exact-input swap against a constant-product pool.

    amount_in_after_fee = amount_in * (10000 - fee_bps) / 10000
    output = reserve_out * amount_in_after_fee / (reserve_in + amount_in_after_fee)

    The result is strictly between 0 and ``reserve_out``.

    Raises:
        AmmArithmeticError: If a reserve or the input amount is not positive
        ValidationError: If fee_bps is outside [0, 10000)
    """
    r_in = to_decimal(reserve_in, "reserve_in")
    r_out = to_decimal(reserve_out, "reserve_out")
    a_in = to_decimal(amount_in, "amount_in")
    _check_fee(fee_bps)

    if r_in <= 0 or r_out <= 0:
        raise AmmArithmeticError(
            "Pool reserves must be positive",
            details={"reserve_in": str(r_in), "reserve_out": str(r_out)},
        )
    if a_in <= 0:
        raise AmmArithmeticError("Swap amount must be positive", details={"amount_in": str(a_in)})

    with localcontext() as ctx:
        ctx.prec = _PRECISION
        after_fee = a_in * (BPS_DENOMINATOR - fee_bps) / BPS_DENOMINATOR
        return r_out * after_fee / (r_in + after_fee)


def minimum_amount(desired: Amount, slippage_percent: Amount) -> int:
    """
    Slippage-protected minimum: floor(desired * (100 - slippage) / 100).

    Raises:
        ValidationError: If slippage is outside [0, 100)
        AmmArithmeticError: If desired is negative
    """
    amount = to_decimal(desired, "desired")
    slippage = to_decimal(slippage_percent, "slippage_percent")
    _check_slippage(slippage)
    if amount < 0:
        raise AmmArithmeticError("Desired amount must not be negative", details={"desired": str(amount)})

    with localcontext() as ctx:
        ctx.prec = _PRECISION
        scaled = amount * (100 - slippage) / 100
        return max(0, floor_to_int(scaled))


def minimum_amounts(amount_a: Amount, amount_b: Amount, slippage_percent: Amount) -> Tuple[int, int]:
    """Minimums for both sides of a liquidity operation."""
    return minimum_amount(amount_a, slippage_percent), minimum_amount(amount_b, slippage_percent)


def _format(value: Decimal, places: int) -> str:
    quantum = Decimal(1).scaleb(-places)
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return f"{value.quantize(quantum, rounding=ROUND_HALF_UP):f}"


def initial_price(
    token_amount: Amount,
    paired_amount: Amount,
    token_decimals: int = 18,
    paired_decimals: int = 18,
    places: int = 6,
) -> PriceQuote:
    """
    Price of one whole token in units of the paired asset, from seed amounts.

    Both amounts are raw base units; each is scaled down by its decimals
    before dividing. The inverse (tokens per paired unit) is None when the
    paired amount is zero.

    Raises:
        AmmArithmeticError: If token_amount <= 0 or paired_amount < 0
    """
    tokens = to_decimal(token_amount, "token_amount")
    paired = to_decimal(paired_amount, "paired_amount")
    if tokens <= 0:
        raise AmmArithmeticError("Token amount must be positive", details={"token_amount": str(tokens)})
    if paired < 0:
        raise AmmArithmeticError("Paired amount must not be negative", details={"paired_amount": str(paired)})

    with localcontext() as ctx:
        ctx.prec = _PRECISION
        whole_tokens = tokens.scaleb(-token_decimals)
        whole_paired = paired.scaleb(-paired_decimals)
        price = whole_paired / whole_tokens
        inverse = whole_tokens / whole_paired if whole_paired > 0 else None

    return PriceQuote(
        price=price,
        display=_format(price, places),
        inverse_price=inverse,
        inverse_display=_format(inverse, places) if inverse is not None else None,
    )


def price_impact_percent(amount_in: Amount, reserve_in: Amount) -> Decimal:
    """
    Share of the input reserve consumed by a trade, in percent.

    Raises:
        AmmArithmeticError: If reserve_in <= 0 or amount_in < 0
    """
    a_in = to_decimal(amount_in, "amount_in")
    r_in = to_decimal(reserve_in, "reserve_in")
    if r_in <= 0:
        raise AmmArithmeticError("Input reserve must be positive", details={"reserve_in": str(r_in)})
    if a_in < 0:
        raise AmmArithmeticError("Swap amount must not be negative", details={"amount_in": str(a_in)})

    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return 100 * a_in / r_in


def execution_price_impact(
    amount_in: Amount,
    amount_out: Amount,
    reserve_in: Amount,
    reserve_out: Amount,
) -> Decimal:
    """Percent difference between spot price and the realised execution price."""
    a_in = to_decimal(amount_in, "amount_in")
    a_out = to_decimal(amount_out, "amount_out")
    r_in = to_decimal(reserve_in, "reserve_in")
    r_out = to_decimal(reserve_out, "reserve_out")
    if min(a_in, r_in, r_out) <= 0 or a_out < 0:
        raise AmmArithmeticError("Amounts and reserves must be positive")

    with localcontext() as ctx:
        ctx.prec = _PRECISION
        spot = r_out / r_in
        execution = a_out / a_in
        return (spot - execution) / spot * 100


def quote_path(
    amount_in: Amount,
    hops: Sequence[ReserveHop],
    fee_bps: int = DEFAULT_FEE_BPS,
) -> SwapQuote:
    """
    Quote an exact-input swap across consecutive pools.

    Intermediate outputs are floored to whole base units before they feed
    the next hop, as the router does on chain.
    """
    if not hops:
        raise ValidationError("A swap quote needs at least one pool")

    initial = to_decimal(amount_in, "amount_in")
    if initial != initial.to_integral_value():
        raise ValidationError("amount_in must be a whole number of base units", details={"field": "amount_in"})

    current: Decimal = initial
    outputs = []
    for index, hop in enumerate(hops):
        out = swap_output(hop.reserve_in, hop.reserve_out, current, fee_bps)
        outputs.append(out)
        if index < len(hops) - 1:
            current = Decimal(floor_to_int(out))

    path = (hops[0].token_in,) + tuple(hop.token_out for hop in hops)
    return SwapQuote(
        amount_in=int(initial),
        amount_out=outputs[-1],
        path=path,
        hop_outputs=tuple(outputs),
        price_impact_percent=price_impact_percent(initial, hops[0].reserve_in),
        reserve_sources=tuple(hop.source for hop in hops),
        fee_bps=fee_bps,
    )
