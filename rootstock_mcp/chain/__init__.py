"""Chain client capability and its web3 implementation."""

from .client import (
    ChainClient,
    PreparedTransaction,
    Web3ChainClient,
    build_client,
    default_client,
    load_account,
)

__all__ = [
    "ChainClient",
    "PreparedTransaction",
    "Web3ChainClient",
    "build_client",
    "default_client",
    "load_account",
]
