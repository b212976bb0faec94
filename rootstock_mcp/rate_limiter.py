"""Per-tool token-bucket rate limiting (per-process, best-effort)."""

from __future__ import annotations

import asyncio
import time
from typing import Dict, Iterable, Optional


class TokenBucket:
    def __init__(self, rate: float, capacity: float) -> None:
        self.rate = rate
        self.capacity = capacity
        self.tokens = capacity
        self.timestamp = time.monotonic()
        self._lock = asyncio.Lock()

    async def consume(self, amount: float = 1.0) -> bool:
        async with self._lock:
            now = time.monotonic()
            self.tokens = min(self.capacity, self.tokens + (now - self.timestamp) * self.rate)
            self.timestamp = now
            if self.tokens < amount:
                return False
            self.tokens -= amount
            return True


class ToolRateLimiter:
    """
    One bucket per tool name.

    Rates resolve in order: explicit per-tool override, the write rate for
    transaction-submitting tools, then the default rate. Burst equals the rate
    with a floor of one request.
    """

    def __init__(
        self,
        rate_per_sec: float,
        *,
        write_rate_per_sec: Optional[float] = None,
        write_tools: Iterable[str] = (),
        per_tool: Optional[Dict[str, float]] = None,
    ) -> None:
        self.rate = rate_per_sec
        self.write_rate = write_rate_per_sec if write_rate_per_sec is not None else rate_per_sec
        self.write_tools = frozenset(write_tools)
        self.per_tool = dict(per_tool or {})
        self._buckets: Dict[str, TokenBucket] = {}
        self._lock = asyncio.Lock()

    def rate_for(self, tool: str) -> float:
        if tool in self.per_tool:
            return self.per_tool[tool]
        if tool in self.write_tools:
            return self.write_rate
        return self.rate

    async def allow(self, tool: str) -> bool:
        async with self._lock:
            bucket = self._buckets.get(tool)
            if bucket is None:
                rate = self.rate_for(tool)
                bucket = TokenBucket(rate, max(rate, 1.0))
                self._buckets[tool] = bucket
        return await bucket.consume()
