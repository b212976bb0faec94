"""
Configuration helpers for the Rootstock MCP server.

This module centralizes RPC endpoint selection, signing key loading, default
timeouts, artifact location and rate limits. No secrets are stored in the
repository; the private key is read from environment or a local file if present.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)

# Default connection settings
DEFAULT_RPC_URL = os.getenv("RSK_RPC_URL", "https://public-node.rsk.co")
DEFAULT_RPC_URL_TESTNET = os.getenv("RSK_RPC_URL_TESTNET", "https://public-node.testnet.rsk.co")
DEFAULT_TIMEOUT_SECONDS = 30.0


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y"}


def _load_timeout() -> float:
    raw_timeout = os.getenv("RSK_MCP_HTTP_TIMEOUT")
    if raw_timeout:
        try:
            return float(raw_timeout)
        except ValueError:
            return DEFAULT_TIMEOUT_SECONDS
    return DEFAULT_TIMEOUT_SECONDS


def _load_rate(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        parsed = float(raw)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _parse_tool_rate_limits(raw: Optional[str]) -> Dict[str, float]:
    """Parse ``tool=qps`` pairs separated by commas; malformed pairs are skipped."""
    limits: Dict[str, float] = {}
    if not raw:
        return limits
    for chunk in raw.split(","):
        name, sep, value = chunk.partition("=")
        name = name.strip()
        if not sep or not name:
            continue
        try:
            rate = float(value)
        except ValueError:
            logger.warning("Ignoring malformed rate limit for tool %s", name)
            continue
        if rate > 0:
            limits[name] = rate
    return limits


DEFAULT_TIMEOUT = _load_timeout()
USE_TESTNET = _env_flag("RSK_USE_TESTNET")

# Signing key handling
PRIVATE_KEY_ENV_VAR = "RSK_PRIVATE_KEY"
PRIVATE_KEY_FILE_ENV_VAR = "RSK_PRIVATE_KEY_FILE"
DEFAULT_PRIVATE_KEY_FILE = "private_key.txt"

ARTIFACTS_DIR = os.getenv("RSK_MCP_ARTIFACTS_DIR", "artifacts")

DEFAULT_RATE_LIMIT_QPS = _load_rate("RSK_MCP_RATE_LIMIT_QPS", 5.0)
DEFAULT_WRITE_RATE_LIMIT_QPS = _load_rate("RSK_MCP_WRITE_RATE_LIMIT_QPS", 1.0)
PER_TOOL_RATE_LIMITS = _parse_tool_rate_limits(os.getenv("RSK_MCP_TOOL_RATE_LIMITS"))
LOG_LEVEL = os.getenv("RSK_MCP_LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("RSK_MCP_LOG_FORMAT", "json")  # json or plain


def load_private_key() -> Optional[str]:
    """
    Load the signing key from environment or a local file.

    Returns:
        The hex private key if available, otherwise None. The key is never logged
        or returned to callers.
    """
    env_key = os.getenv(PRIVATE_KEY_ENV_VAR)
    if env_key:
        return env_key.strip()

    key_path = os.getenv(PRIVATE_KEY_FILE_ENV_VAR, DEFAULT_PRIVATE_KEY_FILE)
    if key_path:
        path = Path(key_path)
        if path.is_file():
            return path.read_text(encoding="utf-8").strip() or None

    return None


@dataclass(slots=True)
class RootstockConfig:
    """Runtime configuration for Rootstock access."""

    rpc_url: str = DEFAULT_RPC_URL
    rpc_url_testnet: str = DEFAULT_RPC_URL_TESTNET
    use_testnet: bool = USE_TESTNET
    timeout: float = DEFAULT_TIMEOUT
    private_key: Optional[str] = field(default_factory=load_private_key, repr=False)
    artifacts_dir: str = ARTIFACTS_DIR
    rate_limit_qps: float = DEFAULT_RATE_LIMIT_QPS
    write_rate_limit_qps: float = DEFAULT_WRITE_RATE_LIMIT_QPS
    per_tool_rate_limits: Dict[str, float] = field(default_factory=lambda: dict(PER_TOOL_RATE_LIMITS))
    log_level: str = LOG_LEVEL
    log_format: str = LOG_FORMAT


default_config = RootstockConfig()
