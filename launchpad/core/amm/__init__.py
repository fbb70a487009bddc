"""
Constant-product AMM quote math.

Usage:
    from launchpad.core.amm import swap_output, minimum_amount

    out = swap_output(reserve_in=100 * 10**18, reserve_out=100_000 * 10**18, amount_in=10**18)
    floor = minimum_amount(out, slippage_percent=1)
"""

from .quote import (
    DEFAULT_FEE_BPS,
    PriceQuote,
    ReserveHop,
    ReserveSource,
    SwapQuote,
    execution_price_impact,
    initial_price,
    minimum_amount,
    minimum_amounts,
    price_impact_percent,
    quote_path,
    swap_output,
)

__all__ = [
    "DEFAULT_FEE_BPS",
    "PriceQuote",
    "ReserveHop",
    "ReserveSource",
    "SwapQuote",
    "execution_price_impact",
    "initial_price",
    "minimum_amount",
    "minimum_amounts",
    "price_impact_percent",
    "quote_path",
    "swap_output",
]
