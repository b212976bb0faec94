"""Deployment tools for the property contract suite."""

from __future__ import annotations

import logging
from typing import Any, List

from rootstock_mcp.chain import ChainClient
from rootstock_mcp.config import RootstockConfig, default_config
from rootstock_mcp.contracts import (
    PROPERTY_NFT,
    PROPERTY_TOKEN,
    PROPERTY_YIELD_VAULT,
    load_artifact,
)
from rootstock_mcp.tools.arguments import (
    DeployPropertyTokenArgs,
    DeployPropertyYieldVaultArgs,
    NoArgs,
)
from rootstock_mcp.tools.common import require_account, transaction_result
from rootstock_mcp.tools.validators import normalize_address, parse_uint256

logger = logging.getLogger(__name__)


async def _deploy(
    client: ChainClient, contract_name: str, constructor_args: List[Any], config: RootstockConfig
) -> str:
    artifact = load_artifact(contract_name, config.artifacts_dir)
    tx_hash = await client.deploy_contract(artifact.abi, artifact.bytecode, constructor_args)
    logger.info("Submitted %s deployment tx=%s", contract_name, tx_hash)
    return transaction_result(client, tx_hash)


async def deploy_property_nft(
    client: ChainClient, args: NoArgs, *, config: RootstockConfig = default_config
) -> str:
    """Deploy a PropertyNFT contract (no constructor arguments)."""
    require_account(client)
    return await _deploy(client, PROPERTY_NFT, [], config)


async def deploy_property_token(
    client: ChainClient, args: DeployPropertyTokenArgs, *, config: RootstockConfig = default_config
) -> str:
    """
    Deploy a PropertyToken bound to an existing PropertyNFT.

    Constructor order: (propertyNFT, propertyId, name, symbol).
    """
    require_account(client)
    nft = normalize_address(args.property_nft_address, "propertyNFTAddress")
    property_id = parse_uint256(args.property_id, "propertyId")
    return await _deploy(client, PROPERTY_TOKEN, [nft, property_id, args.name, args.symbol], config)


async def deploy_property_yield_vault(
    client: ChainClient, args: DeployPropertyYieldVaultArgs, *, config: RootstockConfig = default_config
) -> str:
    """
    Deploy a PropertyYieldVault over a PropertyToken asset.

    Constructor order: (asset, name, symbol, propertyNFT, propertyId).
    """
    require_account(client)
    asset = normalize_address(args.asset_address, "assetAddress")
    nft = normalize_address(args.property_nft_address, "propertyNFTAddress")
    property_id = parse_uint256(args.property_id, "propertyId")
    return await _deploy(
        client,
        PROPERTY_YIELD_VAULT,
        [asset, args.name, args.symbol, nft, property_id],
        config,
    )
