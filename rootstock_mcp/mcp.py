"""
Tool registry and dispatcher for the MCP surface.

Each tool is declared once with its JSON schema, its typed argument record and
its handler. ``call_tool`` validates the payload structurally, parses it into
the record and runs the handler; semantic checks (addresses, amounts, ABI) stay
inside the handlers.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional

import jsonschema

from rootstock_mcp.chain import ChainClient, default_client
from rootstock_mcp.errors import (
    MissingFieldError,
    ToolError,
    TypeMismatchError,
    UnknownToolError,
)
from rootstock_mcp.tools import (
    call_contract,
    deploy_property_nft,
    deploy_property_token,
    deploy_property_yield_vault,
    erc20_balance,
    erc20_transfer,
    get_address,
    get_gas_price,
    get_native_balance,
)
from rootstock_mcp.tools.arguments import (
    CallContractArgs,
    DeployPropertyTokenArgs,
    DeployPropertyYieldVaultArgs,
    Erc20BalanceArgs,
    Erc20TransferArgs,
    GetNativeBalanceArgs,
    NoArgs,
    build_arguments,
    wire_names,
)

logger = logging.getLogger(__name__)

ToolHandler = Callable[[ChainClient, Any], Awaitable[str]]


def _address_schema(description: str) -> Dict[str, Any]:
    return {"type": "string", "description": description}


def _object_schema(properties: Dict[str, Any], required: List[str]) -> Dict[str, Any]:
    return {
        "type": "object",
        "properties": properties,
        "required": required,
        "additionalProperties": False,
    }


@dataclass(frozen=True, slots=True)
class ToolDefinition:
    name: str
    description: str
    input_schema: Dict[str, Any]
    arguments: type
    handler: ToolHandler
    writes: bool = False


_DEFINITIONS = [
    ToolDefinition(
        name="call_contract",
        description=(
            "Call a contract function on Rootstock. view/pure functions are queried; "
            "other functions are simulated and then submitted as a transaction."
        ),
        input_schema=_object_schema(
            {
                "contractAddress": _address_schema("The address of the contract to call"),
                "functionName": {"type": "string", "description": "The name of the function to call"},
                "functionArgs": {
                    "type": "array",
                    "description": "The arguments to pass to the function",
                    "items": {"type": "string"},
                },
                "abi": {"type": "string", "description": "The ABI of the contract (JSON)"},
                "value": {
                    "type": "string",
                    "description": "Native value to send in wei (payable functions only, default 0)",
                },
            },
            ["contractAddress", "functionName", "abi"],
        ),
        arguments=CallContractArgs,
        handler=call_contract,
        writes=True,
    ),
    ToolDefinition(
        name="erc20_balance",
        description="Get the balance of an ERC20 token on Rootstock for the current account",
        input_schema=_object_schema(
            {"contractAddress": _address_schema("The address of the token contract")},
            ["contractAddress"],
        ),
        arguments=Erc20BalanceArgs,
        handler=erc20_balance,
    ),
    ToolDefinition(
        name="erc20_transfer",
        description="Transfer an ERC20 token on Rootstock",
        input_schema=_object_schema(
            {
                "contractAddress": _address_schema("The address of the token contract"),
                "toAddress": _address_schema("The address of the recipient"),
                "amount": {
                    "type": "string",
                    "description": "The amount of tokens to transfer, as a decimal string (e.g. '2.5')",
                },
            },
            ["contractAddress", "toAddress", "amount"],
        ),
        arguments=Erc20TransferArgs,
        handler=erc20_transfer,
        writes=True,
    ),
    ToolDefinition(
        name="get_gas_price",
        description="Get the current gas price on Rootstock Network",
        input_schema=_object_schema({}, []),
        arguments=NoArgs,
        handler=get_gas_price,
    ),
    ToolDefinition(
        name="get_address",
        description="Get the address of the current account",
        input_schema=_object_schema({}, []),
        arguments=NoArgs,
        handler=get_address,
    ),
    ToolDefinition(
        name="deploy_property_nft",
        description="Deploy a PropertyNFT contract on Rootstock",
        input_schema=_object_schema({}, []),
        arguments=NoArgs,
        handler=deploy_property_nft,
        writes=True,
    ),
    ToolDefinition(
        name="deploy_property_token",
        description="Deploy a PropertyToken contract on Rootstock",
        input_schema=_object_schema(
            {
                "propertyNFTAddress": _address_schema("The address of the PropertyNFT"),
                "propertyId": {"type": "string", "description": "The ID of the property"},
                "name": {"type": "string", "description": "The name of the property"},
                "symbol": {"type": "string", "description": "The symbol of the property"},
            },
            ["propertyNFTAddress", "propertyId", "name", "symbol"],
        ),
        arguments=DeployPropertyTokenArgs,
        handler=deploy_property_token,
        writes=True,
    ),
    ToolDefinition(
        name="deploy_property_yield_vault",
        description="Deploy a PropertyYieldVault contract on Rootstock",
        input_schema=_object_schema(
            {
                "assetAddress": _address_schema("The address of the underlying ERC20 PropertyToken"),
                "name": {"type": "string", "description": "The name of the vault token"},
                "symbol": {"type": "string", "description": "The symbol of the vault token"},
                "propertyNFTAddress": _address_schema("The address of the PropertyNFT"),
                "propertyId": {"type": "string", "description": "The ID of the property"},
            },
            ["assetAddress", "name", "symbol", "propertyNFTAddress", "propertyId"],
        ),
        arguments=DeployPropertyYieldVaultArgs,
        handler=deploy_property_yield_vault,
        writes=True,
    ),
    ToolDefinition(
        name="get_native_balance",
        description="Get the RBTC balance of the current account on mainnet or testnet",
        input_schema=_object_schema(
            {
                "useTestnet": {
                    "type": "boolean",
                    "description": "Whether to use testnet or mainnet for balance check",
                }
            },
            ["useTestnet"],
        ),
        arguments=GetNativeBalanceArgs,
        handler=get_native_balance,
    ),
]


def validate_registry(definitions: List[ToolDefinition]) -> Dict[str, ToolDefinition]:
    """Build the name-keyed registry, rejecting inconsistent definitions."""
    registry: Dict[str, ToolDefinition] = {}
    for definition in definitions:
        if definition.name in registry:
            raise ValueError(f"Duplicate tool name: {definition.name}")
        jsonschema.Draft202012Validator.check_schema(definition.input_schema)
        properties = definition.input_schema.get("properties", {})
        missing = [name for name in definition.input_schema.get("required", []) if name not in properties]
        if missing:
            raise ValueError(f"Tool {definition.name} requires undeclared fields: {missing}")
        if sorted(properties) != sorted(wire_names(definition.arguments)):
            raise ValueError(f"Tool {definition.name} schema does not match its argument record")
        registry[definition.name] = definition
    return registry


TOOL_REGISTRY: Dict[str, ToolDefinition] = validate_registry(_DEFINITIONS)


def list_tools() -> List[Dict[str, Any]]:
    """Return the tool catalog for discovery."""
    return [
        {
            "name": tool.name,
            "description": tool.description,
            "inputSchema": tool.input_schema,
        }
        for tool in TOOL_REGISTRY.values()
    ]


def _field_label(path) -> Optional[str]:
    label = None
    for part in path:
        label = f"{label}[{part}]" if isinstance(part, int) and label else str(part)
    return label


def _structural_error(error: jsonschema.ValidationError) -> ToolError:
    if error.validator == "required":
        instance = error.instance if isinstance(error.instance, dict) else {}
        missing = next((name for name in error.validator_value if name not in instance), None)
        return MissingFieldError(f"Missing required field: {missing}", field=missing)
    if error.validator == "additionalProperties":
        declared = error.schema.get("properties", {})
        extras = sorted(name for name in error.instance if name not in declared)
        unexpected = extras[0] if extras else None
        return TypeMismatchError(f"Unexpected field: {unexpected}", field=unexpected)
    label = _field_label(error.absolute_path)
    return TypeMismatchError(f"Invalid type for field {label}: {error.message}", field=label)


def parse_arguments(definition: ToolDefinition, params: Any) -> Any:
    """Validate a raw payload against the tool schema and build its typed record."""
    if not isinstance(params, dict):
        raise TypeMismatchError("Tool arguments must be a JSON object")
    validator = jsonschema.Draft202012Validator(definition.input_schema)
    errors = sorted(
        validator.iter_errors(params),
        key=lambda err: (err.validator != "required", [str(part) for part in err.absolute_path]),
    )
    if errors:
        raise _structural_error(errors[0])
    return build_arguments(definition.arguments, params)


async def call_tool(
    tool_name: str,
    params: Optional[Dict[str, Any]] = None,
    *,
    client: Optional[ChainClient] = None,
) -> Any:
    """
    Dispatch to a tool by name.

    Returns the handler's string result, or a tagged error dict
    ``{"error", "kind", "field"?}``. Never raises.
    """
    tool = TOOL_REGISTRY.get(tool_name) if isinstance(tool_name, str) else None
    if tool is None:
        return UnknownToolError(f"Unknown tool: {tool_name}", field="name").to_dict()

    try:
        arguments = parse_arguments(tool, {} if params is None else params)
        return await tool.handler(client or default_client, arguments)
    except ToolError as exc:
        logger.debug("tool=%s kind=%s error=%s", tool_name, exc.kind, exc.message)
        return exc.to_dict()
    except Exception as exc:
        logger.exception("Unexpected error while calling tool %s", tool_name)
        return {"error": f"Unexpected error while calling tool: {exc}", "kind": "InternalError"}


async def dispatch(tool_name: str, arguments: Optional[Dict[str, Any]] = None, *, client=None) -> str:
    """String-only invocation surface: error dicts are JSON-encoded."""
    result = await call_tool(tool_name, arguments, client=client)
    if isinstance(result, str):
        return result
    return json.dumps(result)
