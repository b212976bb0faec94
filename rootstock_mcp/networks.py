"""Rootstock network table and explorer link derivation."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict

from rootstock_mcp.config import RootstockConfig, default_config

ROOTSTOCK_MAINNET_CHAIN_ID = 30
ROOTSTOCK_TESTNET_CHAIN_ID = 31

# Gas prices are reported in gwei.
GAS_PRICE_DECIMALS = 9
GAS_PRICE_UNIT = "Gwei"


@dataclass(frozen=True, slots=True)
class Network:
    name: str
    chain_id: int
    rpc_url: str
    explorer_url: str
    native_symbol: str = "RBTC"
    native_decimals: int = 18


ROOTSTOCK_MAINNET = Network(
    name="rootstock",
    chain_id=ROOTSTOCK_MAINNET_CHAIN_ID,
    rpc_url="https://public-node.rsk.co",
    explorer_url="https://explorer.rootstock.io",
)

ROOTSTOCK_TESTNET = Network(
    name="rootstock-testnet",
    chain_id=ROOTSTOCK_TESTNET_CHAIN_ID,
    rpc_url="https://public-node.testnet.rsk.co",
    explorer_url="https://explorer.testnet.rootstock.io",
    native_symbol="tRBTC",
)

NETWORKS_BY_CHAIN_ID: Dict[int, Network] = {
    ROOTSTOCK_MAINNET.chain_id: ROOTSTOCK_MAINNET,
    ROOTSTOCK_TESTNET.chain_id: ROOTSTOCK_TESTNET,
}


def select_network(use_testnet: bool, config: RootstockConfig = default_config) -> Network:
    """Return the mainnet or testnet entry bound to the configured RPC endpoint."""
    if use_testnet:
        return replace(ROOTSTOCK_TESTNET, rpc_url=config.rpc_url_testnet)
    return replace(ROOTSTOCK_MAINNET, rpc_url=config.rpc_url)


def explorer_tx_url(chain_id: int, tx_hash: str) -> str:
    """Explorer link for a transaction; unknown chains resolve to mainnet."""
    network = NETWORKS_BY_CHAIN_ID.get(chain_id, ROOTSTOCK_MAINNET)
    return f"{network.explorer_url}/tx/{tx_hash}"
