"""Minimal sanity checks for the Rootstock MCP tools against live public nodes."""

from __future__ import annotations

import asyncio
import os
import sys

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from rootstock_mcp import mcp  # noqa: E402
from rootstock_mcp.chain import default_client  # noqa: E402

# Optional token to read; rUSDT on mainnet by default, override via env.
SAMPLE_TOKEN = os.getenv("RSK_SAMPLE_TOKEN", "0xef213441A85dF4d7ACbDaE0Cf78004e1E486bB96")
# Reads that need a signing account only run when a key is configured.
HAS_ACCOUNT = default_client.account_address is not None


async def main() -> None:
    print("Gas price:", await mcp.dispatch("get_gas_price", {}))
    print(
        "decimals():",
        await mcp.dispatch(
            "call_contract",
            {
                "contractAddress": SAMPLE_TOKEN,
                "functionName": "decimals",
                "abi": '[{"inputs":[],"name":"decimals","outputs":[{"type":"uint8"}],'
                '"stateMutability":"view","type":"function"}]',
            },
        ),
    )

    if HAS_ACCOUNT:
        print("Address:", await mcp.dispatch("get_address", {}))
        print("Native balance (mainnet):", await mcp.dispatch("get_native_balance", {"useTestnet": False}))
        print("Native balance (testnet):", await mcp.dispatch("get_native_balance", {"useTestnet": True}))
        print("Token balance:", await mcp.dispatch("erc20_balance", {"contractAddress": SAMPLE_TOKEN}))
    else:
        print("No signing key configured; skipping account-bound checks.")

    await default_client.aclose()


if __name__ == "__main__":
    asyncio.run(main())
