"""
In-process counters for the Rootstock gateway.

Tool outcomes are keyed by registered tool name only; calls to unknown names
are folded into a single ``UNKNOWN_TOOL`` entry. Request latencies keep the
most recent ``MAX_RECENT_REQUESTS`` entries. Nothing here is shared across
worker processes.
"""

from __future__ import annotations

from collections import Counter, OrderedDict
from threading import Lock
from typing import Dict, Optional

UNKNOWN_TOOL = "unknown"
MAX_RECENT_REQUESTS = 100


class GatewayMetrics:
    def __init__(self, max_recent_requests: int = MAX_RECENT_REQUESTS) -> None:
        self._lock = Lock()
        self._max_recent = max_recent_requests
        self._requests = 0
        self._latency_ms: "OrderedDict[str, float]" = OrderedDict()
        self._rate_limited = 0
        self._tool_ok: Counter[str] = Counter()
        self._tool_failed: Counter[str] = Counter()
        self._failure_kinds: Counter[str] = Counter()
        self._submitted: Counter[str] = Counter()

    def incr_request(self) -> None:
        with self._lock:
            self._requests += 1

    def record_duration(self, request_id: str, duration_ms: float) -> None:
        with self._lock:
            self._latency_ms[request_id] = duration_ms
            while len(self._latency_ms) > self._max_recent:
                self._latency_ms.popitem(last=False)

    def incr_rate_limited(self) -> None:
        with self._lock:
            self._rate_limited += 1

    def record_tool(self, tool: str, *, success: bool, kind: Optional[str] = None) -> None:
        """Count one dispatch outcome; failures are also tallied by error kind."""
        with self._lock:
            if success:
                self._tool_ok[tool] += 1
                return
            self._tool_failed[tool] += 1
            self._failure_kinds[kind or "Unknown"] += 1

    def record_transaction(self, tool: str) -> None:
        """Count a transaction hash returned by a write tool."""
        with self._lock:
            self._submitted[tool] += 1

    def snapshot(self) -> Dict[str, object]:
        with self._lock:
            return {
                "requests": self._requests,
                "rate_limited": self._rate_limited,
                "tool_success": dict(self._tool_ok),
                "tool_error": dict(self._tool_failed),
                "error_kinds": dict(self._failure_kinds),
                "transactions_submitted": dict(self._submitted),
                "recent_request_durations_ms": dict(self._latency_ms),
            }

    def reset(self) -> None:
        with self._lock:
            self._requests = 0
            self._rate_limited = 0
            self._latency_ms.clear()
            for counter in (self._tool_ok, self._tool_failed, self._failure_kinds, self._submitted):
                counter.clear()


default_metrics = GatewayMetrics()
