"""
Error taxonomy shared by the dispatcher, the tool handlers and the chain client.

Every failure a caller can see is a ``ToolError`` carrying a stable ``kind`` and,
where it applies, the name of the offending argument field.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class ToolError(Exception):
    """Base exception for reportable tool failures."""

    kind = "ToolError"

    def __init__(self, message: str, *, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.message, "kind": self.kind}
        if self.field is not None:
            payload["field"] = self.field
        return payload


class UnknownToolError(ToolError):
    """Raised when a tool name is not in the registry."""

    kind = "UnknownTool"


class MissingFieldError(ToolError):
    """Raised when a required argument is absent."""

    kind = "MissingField"


class TypeMismatchError(ToolError):
    """Raised when an argument has the wrong JSON type or is not declared."""

    kind = "TypeMismatch"


class InvalidArgumentError(ToolError):
    """Raised when a contract function argument cannot be coerced to its ABI type."""

    kind = "InvalidArgument"


class InvalidAddressError(ToolError):
    """Raised when an address field is not a valid chain address."""

    kind = "InvalidAddress"


class InvalidAmountError(ToolError):
    """Raised when a numeric amount or identifier cannot be represented."""

    kind = "InvalidAmount"


class InvalidAbiError(ToolError):
    """Raised when an ABI payload is not valid JSON or not an ABI list."""

    kind = "InvalidAbi"


class FunctionNotFoundError(ToolError):
    """Raised when the requested function is absent from the ABI."""

    kind = "FunctionNotFound"


class NoAccountError(ToolError):
    """Raised when an operation needs a signing account and none is configured."""

    kind = "NoAccount"

    def __init__(self, message: str = "No account address available", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class ArtifactUnavailableError(ToolError):
    """Raised when compiled contract bytecode/ABI cannot be loaded."""

    kind = "ArtifactUnavailable"


class ChainRejectedError(ToolError):
    """Raised when simulation or submission fails at the chain or RPC layer."""

    kind = "ChainRejected"


class ChainUnreachableError(ChainRejectedError):
    """Raised when the RPC endpoint cannot be reached or times out."""


class BalanceQueryFailedError(ToolError):
    """Raised when the transient-client balance lookup fails."""

    kind = "BalanceQueryFailed"
