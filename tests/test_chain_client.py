import aiohttp
import pytest
from web3.exceptions import ContractLogicError

from rootstock_mcp.chain import Web3ChainClient, build_client, load_account
from rootstock_mcp.config import RootstockConfig
from rootstock_mcp.errors import ChainRejectedError, ChainUnreachableError, NoAccountError
from rootstock_mcp.networks import ROOTSTOCK_MAINNET, ROOTSTOCK_TESTNET

TEST_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"


class StubEth:
    def __init__(self, gas_price=None, balance=None, error=None):
        self._gas_price = gas_price
        self._balance = balance
        self._error = error
        self.balance_queries = []

    async def _gas(self):
        if self._error is not None:
            raise self._error
        return self._gas_price

    @property
    def gas_price(self):
        return self._gas()

    async def get_balance(self, address):
        self.balance_queries.append(address)
        if self._error is not None:
            raise self._error
        return self._balance


class StubProvider:
    def __init__(self):
        self.disconnected = False

    async def disconnect(self):
        self.disconnected = True


class StubWeb3:
    def __init__(self, eth):
        self.eth = eth
        self.provider = StubProvider()


def _client(eth, account=None):
    return Web3ChainClient(ROOTSTOCK_MAINNET, account=account, web3=StubWeb3(eth))


@pytest.mark.asyncio
async def test_gas_price_and_balance():
    eth = StubEth(gas_price=60_000_000, balance=5)
    client = _client(eth)
    assert await client.get_gas_price() == 60_000_000
    assert await client.get_balance("0x5aaeb6053f3e94c9b9a09f33669435e7ef1beaed") == 5
    assert eth.balance_queries == ["0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"]


@pytest.mark.asyncio
async def test_revert_maps_to_chain_rejected():
    client = _client(StubEth(error=ContractLogicError("execution reverted: paused")))
    with pytest.raises(ChainRejectedError) as excinfo:
        await client.get_gas_price()
    assert excinfo.value.kind == "ChainRejected"
    assert "paused" in excinfo.value.message


@pytest.mark.asyncio
async def test_connection_failure_maps_to_unreachable():
    client = _client(StubEth(error=aiohttp.ClientConnectionError("refused")))
    with pytest.raises(ChainUnreachableError) as excinfo:
        await client.get_balance("0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed")
    assert excinfo.value.kind == "ChainRejected"


@pytest.mark.asyncio
async def test_value_error_maps_to_chain_rejected():
    client = _client(StubEth(error=ValueError({"code": -32000, "message": "insufficient funds"})))
    with pytest.raises(ChainRejectedError) as excinfo:
        await client.get_gas_price()
    assert "insufficient funds" in excinfo.value.message


@pytest.mark.asyncio
async def test_write_operations_require_account():
    client = _client(StubEth())
    with pytest.raises(NoAccountError):
        await client.simulate_contract("0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed", [], "transfer")
    with pytest.raises(NoAccountError):
        await client.deploy_contract([], "0x6080")


@pytest.mark.asyncio
async def test_aclose_disconnects_provider():
    client = _client(StubEth())
    await client.aclose()
    assert client._w3.provider.disconnected


def test_load_account():
    assert load_account(None) is None
    assert load_account("") is None
    account = load_account(TEST_KEY)
    assert account.address.startswith("0x") and len(account.address) == 42


def test_load_account_hides_key():
    with pytest.raises(ValueError) as excinfo:
        load_account("0xnot-a-key")
    assert "0xnot-a-key" not in str(excinfo.value)


def test_with_network_keeps_account():
    account = load_account(TEST_KEY)
    client = _client(StubEth(), account=account)
    testnet = client.with_network(ROOTSTOCK_TESTNET)
    assert testnet.chain_id == 31
    assert testnet.account_address == client.account_address
    assert testnet is not client


def test_build_client_from_config():
    cfg = RootstockConfig(
        rpc_url="http://main.local",
        rpc_url_testnet="http://test.local",
        use_testnet=True,
        private_key=None,
    )
    client = build_client(cfg)
    assert client.chain_id == 31
    assert client.network.rpc_url == "http://test.local"
    assert client.account_address is None
