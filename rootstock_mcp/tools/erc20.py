"""ERC20 token tools."""

from __future__ import annotations

import asyncio
import logging

from rootstock_mcp.chain import ChainClient
from rootstock_mcp.contracts import ERC20_ABI
from rootstock_mcp.tools.arguments import Erc20BalanceArgs, Erc20TransferArgs
from rootstock_mcp.tools.common import require_account, transaction_result
from rootstock_mcp.tools.validators import (
    from_atomic_units,
    normalize_address,
    split_decimal_amount,
    to_atomic_units,
)

logger = logging.getLogger(__name__)


async def _read_decimals(client: ChainClient, token: str) -> int:
    return int(await client.read_contract(token, ERC20_ABI, "decimals"))


async def erc20_balance(client: ChainClient, args: Erc20BalanceArgs) -> str:
    """Return the configured account's token balance as a decimal string."""
    token = normalize_address(args.contract_address, "contractAddress", strict=False)
    owner = require_account(client)

    balance, decimals = await asyncio.gather(
        client.read_contract(token, ERC20_ABI, "balanceOf", [owner]),
        _read_decimals(client, token),
    )
    return from_atomic_units(int(balance), decimals)


async def erc20_transfer(client: ChainClient, args: Erc20TransferArgs) -> str:
    """
    Transfer tokens from the configured account.

    The amount is a human decimal string; it is scaled by the token's
    ``decimals()`` before the transfer is simulated and submitted.
    """
    token = normalize_address(args.contract_address, "contractAddress", strict=False)
    recipient = normalize_address(args.to_address, "toAddress", strict=False)
    split_decimal_amount(args.amount)
    require_account(client)

    decimals = await _read_decimals(client, token)
    atomic_amount = to_atomic_units(args.amount, decimals)

    prepared = await client.simulate_contract(token, ERC20_ABI, "transfer", [recipient, atomic_amount])
    tx_hash = await client.write_contract(prepared)
    logger.info("Submitted ERC20 transfer token=%s to=%s tx=%s", token, recipient, tx_hash)
    return transaction_result(client, tx_hash)
