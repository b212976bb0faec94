"""ABI parsing, function lookup and string-argument coercion for contract calls."""

from __future__ import annotations

import json
import re
from typing import Any, Dict, List, Optional, Sequence

from rootstock_mcp.errors import (
    FunctionNotFoundError,
    InvalidAbiError,
    InvalidAmountError,
    InvalidArgumentError,
)
from rootstock_mcp.tools.validators import normalize_address

READ_ONLY_MUTABILITY = {"view", "pure"}
INT_TYPE_REGEX = re.compile(r"^(u?)int(\d*)$")
DECIMAL_INT_REGEX = re.compile(r"^-?\d+$")
HEX_REGEX = re.compile(r"^0x([0-9a-fA-F]{2})*$")


def parse_abi(raw: Any) -> List[Dict[str, Any]]:
    """Parse an ABI given as JSON text: a list of entries or an artifact with an ``abi`` list."""
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise InvalidAbiError(f"Invalid ABI: {exc}", field="abi") from exc
    if isinstance(parsed, dict) and isinstance(parsed.get("abi"), list):
        parsed = parsed["abi"]
    if not isinstance(parsed, list) or not all(isinstance(item, dict) for item in parsed):
        raise InvalidAbiError("Invalid ABI: expected a JSON array of ABI entries", field="abi")
    return parsed


def find_function(abi: Sequence[Dict[str, Any]], name: str, arg_count: int) -> Dict[str, Any]:
    """Locate a function entry by name, using the argument count to pick between overloads."""
    candidates = [
        item
        for item in abi
        if item.get("type", "function") == "function" and item.get("name") == name
    ]
    if not candidates:
        raise FunctionNotFoundError(f"Function {name} not found in ABI", field="functionName")
    if len(candidates) == 1:
        return candidates[0]
    matching = [item for item in candidates if len(item.get("inputs") or []) == arg_count]
    if len(matching) == 1:
        return matching[0]
    if not matching:
        raise InvalidArgumentError(
            f"No overload of {name} takes {arg_count} arguments", field="functionArgs"
        )
    raise InvalidArgumentError(
        f"Function {name} has several overloads taking {arg_count} arguments", field="functionArgs"
    )


def is_read_only(function_abi: Dict[str, Any]) -> bool:
    mutability = function_abi.get("stateMutability")
    if mutability is None:
        return bool(function_abi.get("constant"))
    return mutability in READ_ONLY_MUTABILITY


def is_payable(function_abi: Dict[str, Any]) -> bool:
    mutability = function_abi.get("stateMutability")
    if mutability is None:
        return bool(function_abi.get("payable"))
    return mutability == "payable"


def _coerce_int(value: Any, abi_type: str, unsigned: bool, bits: int, field: str) -> int:
    if isinstance(value, bool):
        raise InvalidAmountError(f"Invalid {field}: expected {abi_type}", field=field)
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.lower().startswith("0x") and len(text) > 2:
            try:
                parsed = int(text, 16)
            except ValueError:
                raise InvalidAmountError(f"Invalid {field}: expected {abi_type}", field=field) from None
        elif DECIMAL_INT_REGEX.fullmatch(text):
            parsed = int(text)
        else:
            raise InvalidAmountError(f"Invalid {field}: expected {abi_type}", field=field)
    else:
        raise InvalidAmountError(f"Invalid {field}: expected {abi_type}", field=field)

    if unsigned:
        low, high = 0, 2**bits - 1
    else:
        low, high = -(2 ** (bits - 1)), 2 ** (bits - 1) - 1
    if not low <= parsed <= high:
        raise InvalidAmountError(f"Invalid {field}: {parsed} is out of range for {abi_type}", field=field)
    return parsed


def _coerce_bool(value: Any, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "1"}:
            return True
        if lowered in {"false", "0"}:
            return False
    raise InvalidArgumentError(f"Invalid {field}: expected bool", field=field)


def _coerce_bytes(value: Any, abi_type: str, field: str) -> bytes:
    if not isinstance(value, str) or not HEX_REGEX.fullmatch(value.strip()):
        raise InvalidArgumentError(f"Invalid {field}: expected 0x-prefixed hex for {abi_type}", field=field)
    data = bytes.fromhex(value.strip()[2:])
    size = abi_type[len("bytes"):]
    if size and len(data) != int(size):
        raise InvalidArgumentError(f"Invalid {field}: expected {size} bytes for {abi_type}", field=field)
    return data


def _load_composite(value: Any, abi_type: str, field: str) -> List[Any]:
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            raise InvalidArgumentError(f"Invalid {field}: expected JSON array for {abi_type}", field=field) from None
    if not isinstance(value, list):
        raise InvalidArgumentError(f"Invalid {field}: expected JSON array for {abi_type}", field=field)
    return value


def _coerce(value: Any, param: Dict[str, Any], field: str) -> Any:
    abi_type = param.get("type", "")

    if abi_type.endswith("]"):
        items = _load_composite(value, abi_type, field)
        element_type, _, size = abi_type[:-1].rpartition("[")
        if size and len(items) != int(size):
            raise InvalidArgumentError(f"Invalid {field}: expected {size} items for {abi_type}", field=field)
        element = {**param, "type": element_type}
        return [_coerce(item, element, f"{field}[{index}]") for index, item in enumerate(items)]

    if abi_type == "tuple":
        items = _load_composite(value, abi_type, field)
        components = param.get("components") or []
        if len(items) != len(components):
            raise InvalidArgumentError(
                f"Invalid {field}: expected {len(components)} tuple members", field=field
            )
        return tuple(
            _coerce(item, component, f"{field}[{index}]")
            for index, (item, component) in enumerate(zip(items, components))
        )

    int_match = INT_TYPE_REGEX.fullmatch(abi_type)
    if int_match:
        bits = int(int_match.group(2) or 256)
        return _coerce_int(value, abi_type, int_match.group(1) == "u", bits, field)
    if abi_type == "bool":
        return _coerce_bool(value, field)
    if abi_type == "address":
        return normalize_address(value, field, strict=False)
    if abi_type.startswith("bytes"):
        return _coerce_bytes(value, abi_type, field)
    if abi_type == "string":
        if not isinstance(value, str):
            raise InvalidArgumentError(f"Invalid {field}: expected string", field=field)
        return value
    raise InvalidArgumentError(f"Unsupported ABI type {abi_type} for {field}", field=field)


def coerce_function_args(function_abi: Dict[str, Any], args: Optional[Sequence[Any]]) -> List[Any]:
    """Convert string arguments into the Python values web3 expects for each ABI input."""
    inputs = function_abi.get("inputs") or []
    values = list(args or [])
    if len(values) != len(inputs):
        raise InvalidArgumentError(
            f"Function {function_abi.get('name')} expects {len(inputs)} arguments, got {len(values)}",
            field="functionArgs",
        )
    return [
        _coerce(value, param, f"functionArgs[{index}]")
        for index, (value, param) in enumerate(zip(values, inputs))
    ]


def stringify_result(value: Any) -> str:
    """Render a decoded call result as plain text."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    if isinstance(value, (list, tuple)):
        return ",".join(stringify_result(item) for item in value)
    if value is None:
        return ""
    return str(value)
