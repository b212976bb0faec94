import os
import sys

import pytest

# Ensure repository root is on sys.path before importing project modules.
repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if repo_root not in sys.path:
    sys.path.insert(0, repo_root)

from rootstock_mcp.chain import PreparedTransaction  # noqa: E402
from rootstock_mcp.metrics import default_metrics  # noqa: E402
from rootstock_mcp.networks import ROOTSTOCK_MAINNET  # noqa: E402

ACCOUNT = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
TOKEN = "0xfb6916095ca1df60bb79ce92ce3ea74c37c5d359"
RECIPIENT = "0xdbf03b407c01e7cd3cbea99509d93f8dddc8c6fb"
TX_HASH = "0x" + "ab" * 32


class FakeChainClient:
    """Records every chain call; reads are answered from ``reads`` keyed by function name."""

    def __init__(self, *, account=ACCOUNT, network=ROOTSTOCK_MAINNET, reads=None, balance=0, gas_price=0):
        self.network = network
        self._account = account
        self.reads = dict(reads or {})
        self.balance = balance
        self.gas_price = gas_price
        self.calls = []
        self.children = []
        self.closed = False
        self.simulate_error = None
        self.balance_error = None

    @property
    def account_address(self):
        return self._account

    @property
    def chain_id(self):
        return self.network.chain_id

    async def read_contract(self, address, abi, function_name, args=()):
        self.calls.append(("read", address, function_name, list(args)))
        return self.reads[function_name]

    async def simulate_contract(self, address, abi, function_name, args=(), *, value=0):
        self.calls.append(("simulate", address, function_name, list(args), value))
        if self.simulate_error is not None:
            raise self.simulate_error
        return PreparedTransaction(params={"to": address, "value": value})

    async def write_contract(self, prepared):
        self.calls.append(("write", prepared.params))
        return TX_HASH

    async def deploy_contract(self, abi, bytecode, args=()):
        self.calls.append(("deploy", bytecode, list(args)))
        return TX_HASH

    async def get_gas_price(self):
        self.calls.append(("gas_price",))
        return self.gas_price

    async def get_balance(self, address):
        self.calls.append(("balance", address, self.network.rpc_url))
        if self.balance_error is not None:
            raise self.balance_error
        return self.balance

    def with_network(self, network):
        child = FakeChainClient(account=self._account, network=network, balance=self.balance)
        child.balance_error = self.balance_error
        self.children.append(child)
        return child

    async def aclose(self):
        self.closed = True

    def kinds(self):
        return [call[0] for call in self.calls]


@pytest.fixture
def fake_client():
    return FakeChainClient()


@pytest.fixture(autouse=True)
def reset_metrics():
    default_metrics.reset()
    yield
    default_metrics.reset()
