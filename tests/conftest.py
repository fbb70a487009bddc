from types import SimpleNamespace

import pytest

from launchpad.core.commands import CommandContext
from launchpad.core.registry import (
    Chain,
    ChainType,
    Deployment,
    InMemoryChainRegistry,
    InMemoryDeploymentRegistry,
    InMemoryPoolStore,
    InMemoryPositionStore,
    Pool,
    RecordStatus,
)
from launchpad.core.sessions import SessionManager


@pytest.fixture
def addrs():
    return SimpleNamespace(
        token="0x" + "11" * 20,
        other="0x" + "22" * 20,
        third="0x" + "33" * 20,
        weth="0x" + "cc" * 20,
        router="0x" + "aa" * 20,
        factory="0x" + "ff" * 20,
        owner="0x" + "ee" * 20,
        pair="0x" + "bb" * 20,
        pair_other="0x" + "dd" * 20,
        pair_direct="0x" + "44" * 20,
    )


@pytest.fixture
def chain():
    return Chain(id="1", chain_type=ChainType.ETHEREUM, network_id="1", name="mainnet", is_active=True)


@pytest.fixture
def deployment(addrs):
    return Deployment(
        chain_id="1",
        factory_address=addrs.factory,
        router_address=addrs.router,
        weth_address=addrs.weth,
    )


@pytest.fixture
def native_pool(addrs):
    """token/WETH pool seeded with 100,000 tokens against 100 ETH."""
    return Pool(
        id="pool-native",
        chain_id="1",
        token0_address=addrs.token,
        token1_address=addrs.weth,
        pair_address=addrs.pair,
        initial_token0=100_000 * 10**18,
        initial_token1=100 * 10**18,
        status=RecordStatus.CONFIRMED,
    )


@pytest.fixture
def other_native_pool(addrs):
    return Pool(
        id="pool-other",
        chain_id="1",
        token0_address=addrs.other,
        token1_address=addrs.weth,
        pair_address=addrs.pair_other,
        initial_token0=50_000 * 10**18,
        initial_token1=100 * 10**18,
        status=RecordStatus.CONFIRMED,
    )


@pytest.fixture
def context(chain, deployment, native_pool, other_native_pool):
    return CommandContext(
        chains=InMemoryChainRegistry([chain]),
        deployments=InMemoryDeploymentRegistry([deployment]),
        pools=InMemoryPoolStore([native_pool, other_native_pool]),
        positions=InMemoryPositionStore(),
        sessions=SessionManager(signing_base_url="http://signer.test"),
        clock=lambda: 1_700_000_000,
    )
