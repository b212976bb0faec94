import pytest
from eth_tester.exceptions import TransactionFailed
from web3 import AsyncWeb3
from web3.exceptions import ContractLogicError
from web3.providers.eth_tester import AsyncEthereumTesterProvider

from rootstock_mcp.chain import Web3ChainClient, load_account
from rootstock_mcp.errors import ChainRejectedError
from rootstock_mcp.networks import ROOTSTOCK_MAINNET

TEST_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"

# Hand-assembled storage contract: set(uint256) stores a non-zero value and
# reverts on zero; get() returns the stored value.
STORAGE_ABI = [
    {
        "name": "set",
        "type": "function",
        "stateMutability": "nonpayable",
        "inputs": [{"name": "value", "type": "uint256"}],
        "outputs": [],
    },
    {
        "name": "get",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}],
    },
]
STORAGE_BYTECODE = (
    "0x603a80600b6000396000f3"
    "60003560e01c80636d4ce63c14601d57"
    "6360fe47b114602957600080fd"
    "5b60005460005260206000f3"
    "5b60043580603557600080fd"
    "5b60005500"
)


class NodeLikeTesterProvider(AsyncEthereumTesterProvider):
    """Reports reverts as ContractLogicError, the way web3 does for a JSON-RPC node."""

    async def make_request(self, method, params):
        try:
            return await super().make_request(method, params)
        except TransactionFailed as exc:
            raise ContractLogicError(str(exc)) from exc


async def _funded_client():
    w3 = AsyncWeb3(NodeLikeTesterProvider())
    account = load_account(TEST_KEY)
    funder = (await w3.eth.accounts)[0]
    await w3.eth.send_transaction({"from": funder, "to": account.address, "value": 10**18, "gas": 21000})
    return Web3ChainClient(ROOTSTOCK_MAINNET, account=account, web3=w3), w3


async def _deploy_storage(client, w3):
    tx_hash = await client.deploy_contract(STORAGE_ABI, STORAGE_BYTECODE)
    receipt = await w3.eth.wait_for_transaction_receipt(tx_hash)
    assert receipt["status"] == 1
    return receipt["contractAddress"]


@pytest.mark.asyncio
async def test_deploy_write_then_read():
    client, w3 = await _funded_client()
    address = await _deploy_storage(client, w3)

    prepared = await client.simulate_contract(address, STORAGE_ABI, "set", [7])
    tx_hash = await client.write_contract(prepared)
    assert tx_hash.startswith("0x") and len(tx_hash) == 66
    receipt = await w3.eth.wait_for_transaction_receipt(tx_hash)
    assert receipt["status"] == 1

    assert await client.read_contract(address, STORAGE_ABI, "get") == 7


@pytest.mark.asyncio
async def test_reverting_simulation_sends_nothing():
    client, w3 = await _funded_client()
    address = await _deploy_storage(client, w3)
    sender = client.account_address
    nonce_before = await w3.eth.get_transaction_count(sender)

    with pytest.raises(ChainRejectedError):
        await client.simulate_contract(address, STORAGE_ABI, "set", [0])

    assert await w3.eth.get_transaction_count(sender) == nonce_before
    assert await client.read_contract(address, STORAGE_ABI, "get") == 0


@pytest.mark.asyncio
async def test_nonce_follows_pending_count():
    client, w3 = await _funded_client()
    address = await _deploy_storage(client, w3)
    sender = client.account_address

    hashes = []
    for value in (3, 4):
        expected_nonce = await w3.eth.get_transaction_count(sender, "pending")
        prepared = await client.simulate_contract(address, STORAGE_ABI, "set", [value])
        tx_hash = await client.write_contract(prepared)
        transaction = await w3.eth.get_transaction(tx_hash)
        assert transaction["nonce"] == expected_nonce
        hashes.append(tx_hash)

    first, second = [await w3.eth.get_transaction(tx_hash) for tx_hash in hashes]
    assert second["nonce"] == first["nonce"] + 1
    assert await client.read_contract(address, STORAGE_ABI, "get") == 4
