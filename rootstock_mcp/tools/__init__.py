"""LLM-facing tool implementations."""

from .account import get_address, get_gas_price, get_native_balance
from .contracts import call_contract
from .deploy import deploy_property_nft, deploy_property_token, deploy_property_yield_vault
from .erc20 import erc20_balance, erc20_transfer
from . import validators

__all__ = [
    "call_contract",
    "erc20_balance",
    "erc20_transfer",
    "get_gas_price",
    "get_address",
    "deploy_property_nft",
    "deploy_property_token",
    "deploy_property_yield_vault",
    "get_native_balance",
    "validators",
]
