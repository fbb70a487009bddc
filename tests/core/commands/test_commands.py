import pytest
from eth_utils import to_checksum_address

from launchpad.core.amm.quote import MAX_UINT256
from launchpad.core.commands import CommandType, default_registry
from launchpad.core.registry import Chain, ChainType, InMemoryChainRegistry, Pool, RecordStatus

ETH = 10**18


def run(context, command_type, payload):
    return default_registry().execute(command_type, payload, context)


def metadata_of(context, session_id):
    return {m.key: m.value for m in context.sessions.get_session(session_id).metadata}


class TestCreatePool:
    def test_creates_pending_pool_and_session(self, context, addrs):
        result = run(context, CommandType.CREATE_POOL, {
            "token_address": addrs.third,
            "token_amount": str(100_000 * ETH),
            "paired_amount": str(100 * ETH),
            "owner_address": addrs.owner,
            "metadata": [{"key": "token_name", "value": "Launch"}],
        })

        assert result.success, result.error
        data = result.data
        assert data["url"] == f"http://signer.test/tx/{data['session_id']}"
        assert data["initial_price"] == "0.001000"
        assert data["transactions"] == 2

        pool = context.pools.get(data["pool_id"])
        assert pool.status == RecordStatus.PENDING
        assert pool.token1_address == to_checksum_address(addrs.weth)
        assert pool.session_id == data["session_id"]

        session = context.sessions.get_session(data["session_id"])
        assert [m.key for m in session.metadata][0] == "token_name"
        meta = metadata_of(context, data["session_id"])
        assert meta["pool_id"] == data["pool_id"]
        assert meta["action"] == "create_pool"
        assert meta["initial_price"] == "0.001000"
        assert session.steps[1].transaction_type.value == "liquidity_pool_creation"

    def test_duplicate_confirmed_pool(self, context, addrs):
        result = run(context, CommandType.CREATE_POOL, {
            "token_address": addrs.token,
            "token_amount": 1000,
            "paired_amount": 1000,
            "owner_address": addrs.owner,
        })

        assert not result.success
        assert result.error["category"] == "state"

    def test_pydantic_failures_become_validation_errors(self, context):
        result = run(context, CommandType.CREATE_POOL, {"token_amount": -1})

        assert not result.success
        assert result.error["category"] == "validation"
        fields = {e["field"] for e in result.error["details"]["errors"]}
        assert {"token_address", "token_amount", "owner_address"} <= fields

    def test_float_amount_is_rejected(self, context, addrs):
        result = run(context, CommandType.CREATE_POOL, {
            "token_address": addrs.third,
            "token_amount": 1.2345678901234567e17,
            "paired_amount": str(100 * ETH),
            "owner_address": addrs.owner,
        })

        assert result.error["category"] == "validation"
        assert [e["field"] for e in result.error["details"]["errors"]] == ["token_amount"]
        assert len(context.pools.list_pools()) == 2

    def test_bad_owner(self, context, addrs):
        result = run(context, CommandType.CREATE_POOL, {
            "token_address": addrs.third,
            "token_amount": 1000,
            "paired_amount": 1000,
            "owner_address": "0xnope",
        })

        assert result.error["category"] == "validation"


class TestLiquidity:
    def test_add_liquidity_records_position(self, context, addrs):
        result = run(context, CommandType.ADD_LIQUIDITY, {
            "token_a": addrs.token,
            "amount_a": 1000,
            "amount_b": 1000,
            "owner_address": addrs.owner,
        })

        assert result.success, result.error
        assert result.data["minimums"] == {"amount_token_min": "990", "amount_eth_min": "990"}
        position = context.positions.get(result.data["position_id"])
        assert position.session_id == result.data["session_id"]
        meta = metadata_of(context, result.data["session_id"])
        assert meta["pool_pair_address"] == addrs.pair
        assert meta["action"] == "add_liquidity"

    def test_add_liquidity_unknown_pool(self, context, addrs):
        result = run(context, CommandType.ADD_LIQUIDITY, {
            "token_a": addrs.third,
            "amount_a": 1,
            "amount_b": 1,
            "owner_address": addrs.owner,
        })

        assert result.error["category"] == "not_found"

    def test_add_liquidity_pending_pool(self, context, addrs):
        context.pools.update_status("pool-native", RecordStatus.FAILED)
        result = run(context, CommandType.ADD_LIQUIDITY, {
            "token_a": addrs.token,
            "amount_a": 1,
            "amount_b": 1,
            "owner_address": addrs.owner,
        })

        assert result.error["category"] == "state"

    def test_remove_liquidity(self, context, addrs):
        result = run(context, CommandType.REMOVE_LIQUIDITY, {
            "token_a": addrs.token,
            "liquidity": ETH,
            "expected_amount_a": 1000,
            "expected_amount_b": 1000,
            "owner_address": addrs.owner,
        })

        assert result.success, result.error
        assert result.data["transactions"] == 2
        assert result.data["minimums"] == {"amount_token_min": "990", "amount_eth_min": "990"}
        assert context.positions.get(result.data["position_id"]).liquidity == ETH


class TestSwap:
    def test_swap_native_for_token(self, context, addrs):
        result = run(context, CommandType.SWAP, {
            "token_in": "0x0",
            "token_out": addrs.token,
            "amount_in": ETH,
            "recipient": addrs.owner,
        })

        assert result.success, result.error
        data = result.data
        assert data["transactions"] == 1
        assert data["quote"]["reserve_sources"] == ["initial_seed"]
        assert [w["code"] for w in data["warnings"]] == ["stale_reserves"]
        session = context.sessions.get_session(data["session_id"])
        assert session.steps[0].value == str(ETH)
        assert metadata_of(context, data["session_id"])["amount_out_min"] == data["amount_out_min"]

    def test_routed_swap(self, context, addrs):
        result = run(context, CommandType.SWAP, {
            "token_in": addrs.token,
            "token_out": addrs.other,
            "amount_in": 1000 * ETH,
            "amount_out_min": 1,
            "recipient": addrs.owner,
        })

        assert result.success, result.error
        assert result.data["shape"] == "routed_via_wrapped_native"
        assert result.data["quote"] is None
        assert result.data["amount_out_min"] == "1"

    def test_identical_tokens(self, context, addrs):
        result = run(context, CommandType.SWAP, {
            "token_in": addrs.token,
            "token_out": addrs.token,
            "amount_in": 1,
            "recipient": addrs.owner,
        })

        assert result.error["category"] == "validation"

    @pytest.mark.parametrize("command", [CommandType.SWAP, CommandType.SWAP_QUOTE])
    def test_amount_beyond_uint256_is_a_validation_error(self, context, addrs, command):
        result = run(context, command, {
            "token_in": "0x0",
            "token_out": addrs.token,
            "amount_in": str(MAX_UINT256 + 1),
            "recipient": addrs.owner,
        })

        assert result.error["category"] == "validation"
        assert result.error["details"]["errors"][0]["field"] == "amount_in"

    def test_float_min_output_is_rejected(self, context, addrs):
        result = run(context, CommandType.SWAP, {
            "token_in": "0x0",
            "token_out": addrs.token,
            "amount_in": ETH,
            "amount_out_min": 1.0,
            "recipient": addrs.owner,
        })

        assert result.error["category"] == "validation"

    def test_swap_quote_is_read_only(self, context, addrs):
        result = run(context, CommandType.SWAP_QUOTE, {
            "token_in": "0x0",
            "token_out": addrs.token,
            "amount_in": ETH,
        })

        assert result.success, result.error
        data = result.data
        assert data["expected_output"].startswith("987158")
        assert data["price_impact_percent"] == "1.000000"
        assert data["recommendations"]["suggested_slippage_percent"] == "0.5"
        assert int(data["recommendations"]["min_output"]) < int(data["expected_output"])
        assert data["pool_info"][0]["id"] == "pool-native"
        assert "stale_reserves" in [w["code"] for w in data["warnings"]]
        assert len(context.sessions.store) == 0


class TestPoolInfo:
    def test_by_tokens(self, context, addrs):
        result = run(context, CommandType.POOL_INFO, {"token_a": addrs.token})

        assert result.success, result.error
        assert result.data["id"] == "pool-native"
        assert result.data["confirmed"] is True
        assert result.data["initial_price"] == "0.001000"

    def test_by_id(self, context):
        result = run(context, CommandType.POOL_INFO, {"pool_id": "pool-other"})

        assert result.data["pair_address"] == "0x" + "dd" * 20

    def test_requires_a_selector(self, context):
        assert run(context, CommandType.POOL_INFO, {}).error["category"] == "validation"

    def test_unknown_pool(self, context):
        assert run(context, CommandType.POOL_INFO, {"pool_id": "nope"}).error["category"] == "not_found"

    def test_pool_on_another_chain_is_not_found(self, context, addrs):
        context.pools.create(Pool(
            id="pool-l2",
            chain_id="10",
            token0_address=addrs.token,
            token1_address=addrs.weth,
            initial_token0=1000,
            initial_token1=1000,
        ))

        result = run(context, CommandType.POOL_INFO, {"pool_id": "pool-l2"})

        assert result.error["category"] == "not_found"


def test_non_evm_chain_rejected(context, addrs):
    context.chains = InMemoryChainRegistry([
        Chain(id="sol", chain_type=ChainType.SOLANA, network_id="mainnet-beta", is_active=True),
    ])
    result = run(context, CommandType.SWAP_QUOTE, {"token_in": "0x0", "token_out": addrs.token, "amount_in": 1})

    assert result.error["category"] == "validation"


def test_no_active_chain(context, addrs):
    context.chains = InMemoryChainRegistry()
    result = run(context, CommandType.SWAP_QUOTE, {"token_in": "0x0", "token_out": addrs.token, "amount_in": 1})

    assert result.error["category"] == "not_found"


def test_registry_lists_every_command():
    types = {command.command_type for command in default_registry().list_commands()}

    assert types == set(CommandType)
