from dataclasses import replace

import pytest
from eth_utils import to_checksum_address

from launchpad.core.errors import NotFoundError, StateError, ValidationError
from launchpad.core.registry import Pool, RecordStatus
from launchpad.core.routing import (
    Operation,
    PairShape,
    PoolSnapshot,
    RoutePlanner,
    RouteRequest,
    StepKind,
)

NOW = 1_700_000_000


def kinds(plan):
    return [step.kind for step in plan.steps]


@pytest.fixture
def planner():
    return RoutePlanner(deadline_seconds=600)


@pytest.fixture
def snapshot(native_pool, other_native_pool):
    return PoolSnapshot.of([native_pool, other_native_pool])


class TestAddLiquidity:
    def test_native_pair_is_approve_then_add_eth(self, planner, deployment, snapshot, addrs):
        plan = planner.plan(RouteRequest(Operation.ADD_LIQUIDITY, addrs.token, "0x0"), deployment, snapshot, NOW)

        assert plan.shape == PairShape.DIRECT_NATIVE_PAIR
        assert kinds(plan) == [StepKind.APPROVE, StepKind.ADD_LIQUIDITY_NATIVE]
        approve = plan.steps[0]
        assert approve.target == to_checksum_address(addrs.token)
        assert approve.spender == to_checksum_address(addrs.router)
        assert plan.steps[1].target == to_checksum_address(addrs.router)
        assert plan.native_index == 1
        assert plan.pool.id == "pool-native"

    def test_native_side_first_still_approves_the_token(self, planner, deployment, snapshot, addrs):
        zero = "0x0000000000000000000000000000000000000000"
        plan = planner.plan(RouteRequest(Operation.ADD_LIQUIDITY, zero, addrs.token), deployment, snapshot, NOW)

        assert plan.native_index == 0
        assert plan.token_side == to_checksum_address(addrs.token)
        assert plan.steps[0].token_a == to_checksum_address(addrs.token)

    def test_token_pair_approves_both_sides(self, planner, deployment, addrs):
        pool = Pool(
            id="pool-direct",
            chain_id="1",
            token0_address=addrs.token,
            token1_address=addrs.other,
            pair_address=addrs.pair_direct,
            status=RecordStatus.CONFIRMED,
        )
        plan = planner.plan(
            RouteRequest(Operation.ADD_LIQUIDITY, addrs.token, addrs.other),
            deployment,
            PoolSnapshot.of([pool]),
            NOW,
        )

        assert plan.shape == PairShape.DIRECT_TOKEN_PAIR
        assert kinds(plan) == [StepKind.APPROVE, StepKind.APPROVE, StepKind.ADD_LIQUIDITY]
        assert [s.token_a for s in plan.steps[:2]] == [
            to_checksum_address(addrs.token),
            to_checksum_address(addrs.other),
        ]

    def test_missing_pool(self, planner, deployment, addrs):
        with pytest.raises(NotFoundError):
            planner.plan(RouteRequest(Operation.ADD_LIQUIDITY, addrs.third, "0x0"), deployment, PoolSnapshot(), NOW)

    def test_pending_pool(self, planner, deployment, native_pool, addrs):
        pending = replace(native_pool, status=RecordStatus.PENDING, pair_address="")

        with pytest.raises(StateError):
            planner.plan(
                RouteRequest(Operation.ADD_LIQUIDITY, addrs.token, "0x0"),
                deployment,
                PoolSnapshot.of([pending]),
                NOW,
            )


class TestCreatePool:
    def test_same_steps_as_add(self, planner, deployment, addrs):
        plan = planner.plan(RouteRequest(Operation.CREATE_POOL, addrs.third, "0x0"), deployment, PoolSnapshot(), NOW)

        assert kinds(plan) == [StepKind.APPROVE, StepKind.ADD_LIQUIDITY_NATIVE]
        assert plan.path == (to_checksum_address(addrs.third), to_checksum_address(addrs.weth))
        assert plan.pools == ()

    def test_duplicate_confirmed_pool(self, planner, deployment, snapshot, addrs):
        with pytest.raises(StateError):
            planner.plan(RouteRequest(Operation.CREATE_POOL, addrs.token, "0x0"), deployment, snapshot, NOW)


class TestRemoveLiquidity:
    def test_approves_lp_token(self, planner, deployment, snapshot, addrs):
        plan = planner.plan(RouteRequest(Operation.REMOVE_LIQUIDITY, addrs.token, "0x0"), deployment, snapshot, NOW)

        assert kinds(plan) == [StepKind.APPROVE, StepKind.REMOVE_LIQUIDITY_NATIVE]
        assert plan.steps[0].target == to_checksum_address(addrs.pair)


class TestSwap:
    def test_native_to_token_has_no_approval(self, planner, deployment, snapshot, addrs):
        plan = planner.plan(RouteRequest(Operation.SWAP, "0x0", addrs.token), deployment, snapshot, NOW)

        assert kinds(plan) == [StepKind.SWAP_EXACT_NATIVE_FOR_TOKENS]
        assert plan.steps[0].path == (to_checksum_address(addrs.weth), to_checksum_address(addrs.token))

    def test_token_to_native(self, planner, deployment, snapshot, addrs):
        plan = planner.plan(RouteRequest(Operation.SWAP, addrs.token, "0x0"), deployment, snapshot, NOW)

        assert kinds(plan) == [StepKind.APPROVE, StepKind.SWAP_EXACT_TOKENS_FOR_NATIVE]
        assert plan.path == (to_checksum_address(addrs.token), to_checksum_address(addrs.weth))

    def test_token_to_token_routes_via_weth(self, planner, deployment, snapshot, addrs):
        plan = planner.plan(RouteRequest(Operation.SWAP, addrs.token, addrs.other), deployment, snapshot, NOW)

        assert plan.shape == PairShape.ROUTED_VIA_WRAPPED_NATIVE
        assert kinds(plan) == [StepKind.APPROVE, StepKind.SWAP_EXACT_TOKENS_FOR_TOKENS]
        assert plan.path == (
            to_checksum_address(addrs.token),
            to_checksum_address(addrs.weth),
            to_checksum_address(addrs.other),
        )
        assert [pool.id for pool in plan.pools] == ["pool-native", "pool-other"]

    def test_direct_pool_wins_over_routing(self, planner, deployment, native_pool, other_native_pool, addrs):
        direct = Pool(
            id="pool-direct",
            chain_id="1",
            token0_address=addrs.other,
            token1_address=addrs.token,
            pair_address=addrs.pair_direct,
            status=RecordStatus.CONFIRMED,
        )
        plan = planner.plan(
            RouteRequest(Operation.SWAP, addrs.token, addrs.other),
            deployment,
            PoolSnapshot.of([native_pool, other_native_pool, direct]),
            NOW,
        )

        assert plan.shape == PairShape.DIRECT_TOKEN_PAIR
        assert len(plan.path) == 2
        assert plan.pools == (direct,)

    def test_routed_leg_missing(self, planner, deployment, native_pool, addrs):
        with pytest.raises(NotFoundError):
            planner.plan(
                RouteRequest(Operation.SWAP, addrs.token, addrs.other),
                deployment,
                PoolSnapshot.of([native_pool]),
                NOW,
            )


class TestValidation:
    def test_identical_tokens(self, planner, deployment, snapshot, addrs):
        with pytest.raises(ValidationError):
            planner.plan(RouteRequest(Operation.SWAP, addrs.token, addrs.token), deployment, snapshot, NOW)

    def test_native_and_wrapped_native_are_identical(self, planner, deployment, snapshot, addrs):
        with pytest.raises(ValidationError):
            planner.plan(RouteRequest(Operation.ADD_LIQUIDITY, "0x0", addrs.weth), deployment, snapshot, NOW)

    def test_identical_tokens_checked_before_deployment(self, planner, deployment, snapshot, addrs):
        unprovisioned = replace(deployment, router_address="", weth_address="")

        with pytest.raises(ValidationError):
            planner.plan(RouteRequest(Operation.SWAP, addrs.token, addrs.token), unprovisioned, snapshot, NOW)
        with pytest.raises(ValidationError):
            planner.plan(RouteRequest(Operation.SWAP, "0x0", "0x0"), unprovisioned, snapshot, NOW)

    def test_token_and_native_with_blank_weth_is_a_state_error(self, planner, deployment, snapshot, addrs):
        with pytest.raises(StateError) as exc_info:
            planner.plan(
                RouteRequest(Operation.SWAP, addrs.token, "0x0"),
                replace(deployment, weth_address=""),
                snapshot,
                NOW,
            )

        assert exc_info.value.details["missing"] == ["weth_address"]

    def test_malformed_address(self, planner, deployment, snapshot):
        with pytest.raises(ValidationError):
            planner.plan(RouteRequest(Operation.SWAP, "0x1234", "0x0"), deployment, snapshot, NOW)

    def test_blank_router(self, planner, deployment, snapshot, addrs):
        with pytest.raises(StateError) as exc_info:
            planner.plan(
                RouteRequest(Operation.SWAP, addrs.token, "0x0"),
                replace(deployment, router_address=""),
                snapshot,
                NOW,
            )

        assert exc_info.value.details["missing"] == ["router_address"]

    def test_unconfirmed_deployment(self, planner, deployment, snapshot, addrs):
        with pytest.raises(StateError):
            planner.plan(
                RouteRequest(Operation.SWAP, addrs.token, "0x0"),
                replace(deployment, status=RecordStatus.PENDING),
                snapshot,
                NOW,
            )

    def test_deadline(self, planner, deployment, snapshot, addrs):
        plan = planner.plan(RouteRequest(Operation.SWAP, addrs.token, "0x0"), deployment, snapshot, NOW)

        assert plan.deadline == NOW + 600


def test_zero_deadline_is_kept(deployment, snapshot, addrs):
    plan = RoutePlanner(deadline_seconds=0).plan(
        RouteRequest(Operation.SWAP, addrs.token, "0x0"), deployment, snapshot, NOW
    )

    assert plan.deadline == NOW
