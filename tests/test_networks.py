from rootstock_mcp.config import RootstockConfig
from rootstock_mcp.networks import (
    ROOTSTOCK_MAINNET,
    ROOTSTOCK_TESTNET,
    explorer_tx_url,
    select_network,
)

TX = "0x" + "12" * 32


def test_explorer_urls():
    assert explorer_tx_url(30, TX) == f"https://explorer.rootstock.io/tx/{TX}"
    assert explorer_tx_url(31, TX) == f"https://explorer.testnet.rootstock.io/tx/{TX}"


def test_unknown_chain_uses_mainnet_explorer():
    assert explorer_tx_url(1337, TX) == f"https://explorer.rootstock.io/tx/{TX}"


def test_select_network_uses_configured_endpoints():
    cfg = RootstockConfig(rpc_url="http://main", rpc_url_testnet="http://test", private_key=None)
    mainnet = select_network(False, cfg)
    testnet = select_network(True, cfg)
    assert (mainnet.chain_id, mainnet.rpc_url) == (30, "http://main")
    assert (testnet.chain_id, testnet.rpc_url) == (31, "http://test")
    assert testnet.native_symbol == "tRBTC"
    # Module-level entries stay untouched.
    assert ROOTSTOCK_MAINNET.rpc_url == "https://public-node.rsk.co"
    assert ROOTSTOCK_TESTNET.rpc_url == "https://public-node.testnet.rsk.co"
