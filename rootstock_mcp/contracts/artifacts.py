"""
Loading of compiled contract artifacts (ABI + creation bytecode).

Artifacts are produced outside this project. Both the flat layout
(``<dir>/PropertyNFT.json``) and the nested Hardhat/Foundry layouts
(``artifacts/contracts/PropertyNFT.sol/PropertyNFT.json``,
``out/PropertyNFT.sol/PropertyNFT.json``) are supported.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from rootstock_mcp.errors import ArtifactUnavailableError

logger = logging.getLogger(__name__)

PROPERTY_NFT = "PropertyNFT"
PROPERTY_TOKEN = "PropertyToken"
PROPERTY_YIELD_VAULT = "PropertyYieldVault"


@dataclass(frozen=True, slots=True)
class ContractArtifact:
    name: str
    abi: List[Dict[str, Any]]
    bytecode: str


def _find_artifact_file(name: str, artifacts_dir: Path) -> Optional[Path]:
    direct = artifacts_dir / f"{name}.json"
    if direct.is_file():
        return direct
    if not artifacts_dir.is_dir():
        return None
    for candidate in sorted(artifacts_dir.rglob(f"{name}.json")):
        # Hardhat writes debug files as <name>.dbg.json; rglob on the exact name skips them.
        if candidate.is_file():
            return candidate
    return None


def _extract_bytecode(raw: Any) -> str:
    if isinstance(raw, dict):
        raw = raw.get("object")
    if not isinstance(raw, str):
        return ""
    raw = raw.strip()
    if raw and not raw.startswith("0x"):
        raw = f"0x{raw}"
    return raw


def load_artifact(name: str, artifacts_dir: str | Path) -> ContractArtifact:
    """Load a contract's ABI and bytecode, raising ArtifactUnavailableError when unusable."""
    path = _find_artifact_file(name, Path(artifacts_dir))
    if path is None:
        raise ArtifactUnavailableError(f"Contract artifact {name} not found in {artifacts_dir}")
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ArtifactUnavailableError(f"Contract artifact {name} could not be read: {exc}") from exc

    abi = payload.get("abi") if isinstance(payload, dict) else None
    if not isinstance(abi, list):
        raise ArtifactUnavailableError(f"Contract artifact {name} has no ABI")
    bytecode = _extract_bytecode(payload.get("bytecode"))
    if len(bytecode) <= 2:
        raise ArtifactUnavailableError(f"Contract artifact {name} has no deployable bytecode")
    logger.debug("Loaded artifact %s from %s", name, path)
    return ContractArtifact(name=name, abi=abi, bytecode=bytecode)
