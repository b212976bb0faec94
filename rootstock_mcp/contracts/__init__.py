"""Contract ABIs and compiled artifacts used by the deployment and token tools."""

from .artifacts import (
    PROPERTY_NFT,
    PROPERTY_TOKEN,
    PROPERTY_YIELD_VAULT,
    ContractArtifact,
    load_artifact,
)
from .erc20 import ERC20_ABI

__all__ = [
    "ContractArtifact",
    "ERC20_ABI",
    "PROPERTY_NFT",
    "PROPERTY_TOKEN",
    "PROPERTY_YIELD_VAULT",
    "load_artifact",
]
