import json

import pytest

from launchpad.core.errors import ExternalError
from launchpad.core.execution.abi import ERC20_ABI, UNISWAP_V2_ROUTER_ABI
from launchpad.core.execution.encoder import MAX_UINT256, AbiEncoder, describe_arguments

SPENDER = "0x" + "aa" * 20
TOKEN = "0x" + "11" * 20
WETH = "0x" + "cc" * 20
RECIPIENT = "0x" + "ee" * 20


@pytest.fixture
def encoder():
    return AbiEncoder()


@pytest.mark.parametrize(
    "function_name,selector",
    [
        ("addLiquidity", "0xe8e33700"),
        ("addLiquidityETH", "0xf305d719"),
        ("removeLiquidity", "0xbaa2abde"),
        ("removeLiquidityETH", "0x02751cec"),
        ("swapExactETHForTokens", "0x7ff36ab5"),
        ("swapExactTokensForETH", "0x18cbafe5"),
        ("swapExactTokensForTokens", "0x38ed1739"),
    ],
)
def test_router_selectors(encoder, function_name, selector):
    entry = next(e for e in UNISWAP_V2_ROUTER_ABI if e["name"] == function_name)
    args = []
    for param in entry["inputs"]:
        if param["type"] == "address":
            args.append(TOKEN)
        elif param["type"] == "address[]":
            args.append([TOKEN, WETH])
        else:
            args.append(1)

    assert encoder.encode(function_name, args, UNISWAP_V2_ROUTER_ABI).startswith(selector)


def test_unlimited_approve(encoder):
    data = encoder.encode("approve", [SPENDER, MAX_UINT256], ERC20_ABI)

    assert data.startswith("0x095ea7b3")
    assert len(data) == 2 + 8 + 64 * 2
    assert data[10:74] == "0" * 24 + "aa" * 20
    assert data[74:] == "f" * 64


def test_dynamic_path_offset(encoder):
    data = encoder.encode(
        "swapExactTokensForTokens",
        [10**18, 990, [TOKEN, WETH], RECIPIENT, 1_700_000_600],
        UNISWAP_V2_ROUTER_ABI,
    )
    words = [data[10 + i * 64: 10 + (i + 1) * 64] for i in range((len(data) - 10) // 64)]

    assert int(words[0], 16) == 10**18
    assert int(words[1], 16) == 990
    assert int(words[2], 16) == 5 * 32
    assert int(words[5], 16) == 2
    assert words[6].endswith("11" * 20)


def test_accepts_json_abi_and_numeric_strings(encoder):
    from_list = encoder.encode("approve", [SPENDER, 5], ERC20_ABI)
    from_json = encoder.encode("approve", [SPENDER, "5"], json.dumps(ERC20_ABI))

    assert from_list == from_json


def test_argument_count_mismatch(encoder):
    with pytest.raises(ExternalError):
        encoder.encode("approve", [SPENDER], ERC20_ABI)


def test_unknown_function(encoder):
    with pytest.raises(ExternalError):
        encoder.encode("transferFrom", [SPENDER, SPENDER, 1], ERC20_ABI)


@pytest.mark.parametrize("args", [["not-an-address", 1], [SPENDER, -1], [SPENDER, 2**256], [SPENDER, 1.5]])
def test_type_mismatch(encoder, args):
    with pytest.raises(ExternalError) as exc_info:
        encoder.encode("approve", args, ERC20_ABI)

    assert exc_info.value.category.value == "external"


def test_invalid_abi_json(encoder):
    with pytest.raises(ExternalError):
        encoder.encode("approve", [SPENDER, 1], "{not json")


def test_describe_arguments_labels_max_uint():
    described = describe_arguments("approve", [SPENDER, MAX_UINT256], ERC20_ABI)

    assert described == (("spender", SPENDER), ("amount", "MAX_UINT256"))


def test_describe_arguments_lists_path():
    described = dict(describe_arguments(
        "swapExactETHForTokens", [0, [WETH, TOKEN], RECIPIENT, 10], UNISWAP_V2_ROUTER_ABI
    ))

    assert described["path"] == f"[{WETH}, {TOKEN}]"
    assert described["amountOutMin"] == "0"
