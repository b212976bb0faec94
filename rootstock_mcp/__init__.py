"""
Rootstock MCP server package.

This package exposes LLM-friendly tools for contract calls, ERC20 transfers and
balances, property contract deployment, and account/gas queries on Rootstock.
See DESIGN.md for full details.
"""

__all__ = ["chain", "config", "mcp", "tools"]
