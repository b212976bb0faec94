"""Account and network query tools."""

from __future__ import annotations

import logging

from rootstock_mcp.chain import ChainClient
from rootstock_mcp.config import RootstockConfig, default_config
from rootstock_mcp.errors import BalanceQueryFailedError
from rootstock_mcp.networks import GAS_PRICE_DECIMALS, GAS_PRICE_UNIT, select_network
from rootstock_mcp.tools.arguments import GetNativeBalanceArgs, NoArgs
from rootstock_mcp.tools.common import require_account
from rootstock_mcp.tools.validators import from_atomic_units

logger = logging.getLogger(__name__)


async def get_address(client: ChainClient, args: NoArgs) -> str:
    """Return the configured account address."""
    return require_account(client)


async def get_gas_price(client: ChainClient, args: NoArgs) -> str:
    gas_price = await client.get_gas_price()
    return f"{from_atomic_units(int(gas_price), GAS_PRICE_DECIMALS)} {GAS_PRICE_UNIT}"


async def get_native_balance(
    client: ChainClient, args: GetNativeBalanceArgs, *, config: RootstockConfig = default_config
) -> str:
    """
    Native RBTC balance of the configured account on mainnet or testnet.

    A transient client bound to the selected network performs the lookup, so
    this works regardless of which network the shared client targets.
    """
    address = require_account(client)
    network = select_network(args.use_testnet, config)
    transient = client.with_network(network)
    try:
        balance = await transient.get_balance(address)
    except Exception as exc:
        logger.error("Error getting balance on %s: %s", network.name, exc)
        raise BalanceQueryFailedError(f"Failed to get balance: {exc}") from exc
    finally:
        await transient.aclose()
    return from_atomic_units(int(balance), network.native_decimals)
