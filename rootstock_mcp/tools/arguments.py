"""
Typed argument records, one per tool.

The dispatcher parses a structurally valid payload into the matching record
before a handler runs, so handlers never see loose dictionaries. The ``param``
metadata holds the wire name of each field.
"""

from __future__ import annotations

from dataclasses import MISSING, dataclass, field, fields
from typing import Any, Dict, List, Optional, Type, TypeVar

RecordT = TypeVar("RecordT")


def _param(name: str, default: Any = MISSING) -> Any:
    return field(default=default, metadata={"param": name})


@dataclass(frozen=True, slots=True)
class NoArgs:
    pass


@dataclass(frozen=True, slots=True)
class CallContractArgs:
    contract_address: str = _param("contractAddress")
    function_name: str = _param("functionName")
    abi: str = _param("abi")
    function_args: Optional[List[str]] = _param("functionArgs", None)
    value: Optional[str] = _param("value", None)


@dataclass(frozen=True, slots=True)
class Erc20BalanceArgs:
    contract_address: str = _param("contractAddress")


@dataclass(frozen=True, slots=True)
class Erc20TransferArgs:
    contract_address: str = _param("contractAddress")
    to_address: str = _param("toAddress")
    amount: str = _param("amount")


@dataclass(frozen=True, slots=True)
class DeployPropertyTokenArgs:
    property_nft_address: str = _param("propertyNFTAddress")
    property_id: str = _param("propertyId")
    name: str = _param("name")
    symbol: str = _param("symbol")


@dataclass(frozen=True, slots=True)
class DeployPropertyYieldVaultArgs:
    asset_address: str = _param("assetAddress")
    name: str = _param("name")
    symbol: str = _param("symbol")
    property_nft_address: str = _param("propertyNFTAddress")
    property_id: str = _param("propertyId")


@dataclass(frozen=True, slots=True)
class GetNativeBalanceArgs:
    use_testnet: bool = _param("useTestnet")


def build_arguments(record_type: Type[RecordT], params: Dict[str, Any]) -> RecordT:
    """Instantiate ``record_type`` from wire-named params (already schema-checked)."""
    values: Dict[str, Any] = {}
    for record_field in fields(record_type):
        wire_name = record_field.metadata.get("param", record_field.name)
        if wire_name in params:
            values[record_field.name] = params[wire_name]
    return record_type(**values)


def wire_names(record_type: type) -> List[str]:
    return [record_field.metadata.get("param", record_field.name) for record_field in fields(record_type)]
