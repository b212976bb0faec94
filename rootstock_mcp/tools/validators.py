"""Shared validation helpers for Rootstock MCP tools."""

from __future__ import annotations

import re
from typing import Any, Optional

from eth_utils import is_checksum_address, to_checksum_address

from rootstock_mcp.errors import InvalidAddressError, InvalidAmountError

# EVM addresses: 0x-prefixed, 20 bytes of hex.
ADDRESS_REGEX = re.compile(r"^0x[0-9a-fA-F]{40}$")
AMOUNT_REGEX = re.compile(r"^(?P<whole>\d*)(?:\.(?P<fraction>\d*))?$")
UINT_REGEX = re.compile(r"^\d+$")

UINT256_MAX = 2**256 - 1


def is_valid_address(address: Optional[str], *, strict: bool = True) -> bool:
    """
    Format validation for EVM addresses.

    With ``strict`` a mixed-case address must carry a valid EIP-55 checksum;
    all-lowercase and all-uppercase hex are accepted either way.
    """
    if not address or not isinstance(address, str):
        return False
    if not ADDRESS_REGEX.fullmatch(address):
        return False
    if not strict:
        return True
    body = address[2:]
    if body == body.lower() or body == body.upper():
        return True
    return is_checksum_address(address)


def normalize_address(address: Any, field: str, *, strict: bool = True) -> str:
    """Validate an address argument and return its checksum form."""
    if not isinstance(address, str) or not is_valid_address(address, strict=strict):
        raise InvalidAddressError(f"Invalid {field}: {address}", field=field)
    return to_checksum_address(address)


def to_atomic_units(amount: str, decimals: int, *, field: str = "amount") -> int:
    """Convert a human decimal string into integer atomic units."""
    whole, fraction = split_decimal_amount(amount, field=field)
    if len(fraction) > decimals:
        raise InvalidAmountError(
            f"Invalid {field}: {amount} has more than {decimals} decimal places",
            field=field,
        )
    atomic = int((whole or "0") + fraction.ljust(decimals, "0"))
    if atomic > UINT256_MAX:
        raise InvalidAmountError(f"Invalid {field}: {amount} is too large", field=field)
    return atomic


def split_decimal_amount(amount: Any, *, field: str = "amount") -> tuple[str, str]:
    """Syntax check for an unsigned decimal string, returning (whole, fraction) digits."""
    if not isinstance(amount, str):
        raise InvalidAmountError(f"Invalid {field}: {amount}", field=field)
    match = AMOUNT_REGEX.fullmatch(amount.strip())
    if match is None:
        raise InvalidAmountError(f"Invalid {field}: {amount}", field=field)
    whole = match.group("whole") or ""
    fraction = match.group("fraction") or ""
    if not whole and not fraction:
        raise InvalidAmountError(f"Invalid {field}: {amount}", field=field)
    return whole, fraction


def from_atomic_units(value: int, decimals: int) -> str:
    """Format atomic units as a decimal string without trailing zeros."""
    negative = value < 0
    digits = str(abs(value))
    if decimals == 0:
        return f"-{digits}" if negative else digits
    digits = digits.rjust(decimals, "0")
    whole = digits[:-decimals] or "0"
    fraction = digits[-decimals:].rstrip("0")
    text = f"{whole}.{fraction}" if fraction else whole
    return f"-{text}" if negative else text


def parse_uint256(value: Any, field: str) -> int:
    """Parse a decimal integer string bounded to the uint256 range."""
    if isinstance(value, bool):
        raise InvalidAmountError(f"Invalid {field}: {value}", field=field)
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str) and UINT_REGEX.fullmatch(value.strip()):
        parsed = int(value.strip())
    else:
        raise InvalidAmountError(f"Invalid {field}: {value} is not an unsigned integer", field=field)
    if parsed < 0 or parsed > UINT256_MAX:
        raise InvalidAmountError(f"Invalid {field}: {value} is out of range", field=field)
    return parsed
