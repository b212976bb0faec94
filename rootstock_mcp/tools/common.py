"""Helpers shared by the tool handlers."""

from __future__ import annotations

import json

from rootstock_mcp.chain import ChainClient
from rootstock_mcp.errors import NoAccountError
from rootstock_mcp.networks import explorer_tx_url


def require_account(client: ChainClient) -> str:
    address = client.account_address
    if not address:
        raise NoAccountError()
    return address


def transaction_result(client: ChainClient, tx_hash: str) -> str:
    """Serialize the envelope returned by every transaction-submitting tool."""
    return json.dumps({"hash": tx_hash, "url": explorer_tx_url(client.chain_id, tx_hash)})
