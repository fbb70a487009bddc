"""
Minimal contract ABIs used to encode launchpad transactions.
"""

from typing import Any, Dict, List, Sequence, Tuple


def _function(
    name: str,
    inputs: Sequence[Tuple[str, str]],
    outputs: Sequence[Tuple[str, str]] = (),
    payable: bool = False,
) -> Dict[str, Any]:
    return {
        "inputs": [{"internalType": t, "name": n, "type": t} for n, t in inputs],
        "name": name,
        "outputs": [{"internalType": t, "name": n, "type": t} for n, t in outputs],
        "stateMutability": "payable" if payable else "nonpayable",
        "type": "function",
    }


# ERC-20 approve, also used for the pair's LP token before removing liquidity
ERC20_ABI: List[Dict[str, Any]] = [
    _function("approve", [("spender", "address"), ("amount", "uint256")], [("", "bool")]),
]

# UniswapV2Router02 entry points the planner emits
UNISWAP_V2_ROUTER_ABI: List[Dict[str, Any]] = [
    _function(
        "addLiquidity",
        [
            ("tokenA", "address"),
            ("tokenB", "address"),
            ("amountADesired", "uint256"),
            ("amountBDesired", "uint256"),
            ("amountAMin", "uint256"),
            ("amountBMin", "uint256"),
            ("to", "address"),
            ("deadline", "uint256"),
        ],
        [("amountA", "uint256"), ("amountB", "uint256"), ("liquidity", "uint256")],
    ),
    _function(
        "addLiquidityETH",
        [
            ("token", "address"),
            ("amountTokenDesired", "uint256"),
            ("amountTokenMin", "uint256"),
            ("amountETHMin", "uint256"),
            ("to", "address"),
            ("deadline", "uint256"),
        ],
        [("amountToken", "uint256"), ("amountETH", "uint256"), ("liquidity", "uint256")],
        payable=True,
    ),
    _function(
        "removeLiquidity",
        [
            ("tokenA", "address"),
            ("tokenB", "address"),
            ("liquidity", "uint256"),
            ("amountAMin", "uint256"),
            ("amountBMin", "uint256"),
            ("to", "address"),
            ("deadline", "uint256"),
        ],
        [("amountA", "uint256"), ("amountB", "uint256")],
    ),
    _function(
        "removeLiquidityETH",
        [
            ("token", "address"),
            ("liquidity", "uint256"),
            ("amountTokenMin", "uint256"),
            ("amountETHMin", "uint256"),
            ("to", "address"),
            ("deadline", "uint256"),
        ],
        [("amountToken", "uint256"), ("amountETH", "uint256")],
    ),
    _function(
        "swapExactETHForTokens",
        [
            ("amountOutMin", "uint256"),
            ("path", "address[]"),
            ("to", "address"),
            ("deadline", "uint256"),
        ],
        [("amounts", "uint256[]")],
        payable=True,
    ),
    _function(
        "swapExactTokensForETH",
        [
            ("amountIn", "uint256"),
            ("amountOutMin", "uint256"),
            ("path", "address[]"),
            ("to", "address"),
            ("deadline", "uint256"),
        ],
        [("amounts", "uint256[]")],
    ),
    _function(
        "swapExactTokensForTokens",
        [
            ("amountIn", "uint256"),
            ("amountOutMin", "uint256"),
            ("path", "address[]"),
            ("to", "address"),
            ("deadline", "uint256"),
        ],
        [("amounts", "uint256[]")],
    ),
]
