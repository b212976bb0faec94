"""FastAPI application wiring Rootstock MCP tools to HTTP and JSON-RPC routes."""

from __future__ import annotations

import json
import logging
import time
import uuid
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from rootstock_mcp import mcp
from rootstock_mcp.chain import default_client
from rootstock_mcp.config import RootstockConfig, default_config
from rootstock_mcp.metrics import UNKNOWN_TOOL, default_metrics
from rootstock_mcp.rate_limiter import ToolRateLimiter

logger = logging.getLogger(__name__)

APP_VERSION = "0.1.0"
MCP_SERVER_NAME = "rootstock-mcp-server"
MCP_SERVER_VERSION = APP_VERSION
HEALTH_STATUS = {"status": "ok"}
LOG_EXTRA_KEYS = ("tool", "request_id", "kind", "error")


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "message": record.getMessage(),
            "name": record.name,
        }
        for key in LOG_EXTRA_KEYS:
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def configure_logging(config: RootstockConfig = default_config) -> None:
    level = getattr(logging, config.log_level.upper(), logging.INFO)
    if config.log_format.lower() == "json":
        handler = logging.StreamHandler()
        handler.setFormatter(JsonFormatter())
        logging.basicConfig(level=level, handlers=[handler])
    else:
        logging.basicConfig(level=level)


configure_logging()

rate_limiter = ToolRateLimiter(
    default_config.rate_limit_qps,
    write_rate_per_sec=default_config.write_rate_limit_qps,
    write_tools=[tool.name for tool in mcp.TOOL_REGISTRY.values() if tool.writes],
    per_tool=default_config.per_tool_rate_limits,
)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    yield
    await default_client.aclose()


app = FastAPI(
    title="Rootstock MCP Server",
    description="Rootstock contract, token and account tools for LLM agents.",
    version=APP_VERSION,
    lifespan=lifespan,
)


@app.middleware("http")
async def add_request_context(request: Request, call_next):
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id
    start = time.time()
    default_metrics.incr_request()
    response = await call_next(request)
    duration_ms = (time.time() - start) * 1000
    default_metrics.record_duration(request_id, duration_ms)
    response.headers["X-Request-ID"] = request_id
    return response


def _tool_key(tool_name: str) -> str:
    """Rate-limit and metrics key; unregistered names share one bucket and counter."""
    return tool_name if tool_name in mcp.TOOL_REGISTRY else UNKNOWN_TOOL


def _log_tool_result(tool_name: str, result: Any, request_id: Optional[str] = None) -> None:
    key = _tool_key(tool_name)
    if isinstance(result, dict) and result.get("error"):
        kind = result.get("kind")
        logger.warning(
            "tool=%s outcome=error kind=%s error=%s request_id=%s",
            tool_name,
            kind,
            result.get("error"),
            request_id,
            extra={"tool": tool_name, "request_id": request_id, "kind": kind, "error": result.get("error")},
        )
        default_metrics.record_tool(key, success=False, kind=kind)
        return

    logger.info(
        "tool=%s outcome=success request_id=%s",
        tool_name,
        request_id,
        extra={"tool": tool_name, "request_id": request_id},
    )
    default_metrics.record_tool(key, success=True)
    tool = mcp.TOOL_REGISTRY.get(tool_name)
    if tool is not None and tool.writes and _is_transaction_envelope(result):
        default_metrics.record_transaction(tool_name)


def _is_transaction_envelope(result: Any) -> bool:
    if not isinstance(result, str) or not result.startswith("{"):
        return False
    try:
        payload = json.loads(result)
    except ValueError:
        return False
    return isinstance(payload, dict) and "hash" in payload


async def _enforce_rate_limit(key: str) -> Optional[JSONResponse]:
    allowed = await rate_limiter.allow(key)
    if not allowed:
        logger.warning("tool=%s outcome=rate_limited", key, extra={"tool": key})
        default_metrics.incr_rate_limited()
        return JSONResponse(
            status_code=429,
            content={"jsonrpc": "2.0", "error": {"code": 429, "message": "Rate limit exceeded"}},
        )
    return None


@app.get("/health")
async def health() -> JSONResponse:
    """Lightweight health endpoint for monitoring."""
    return JSONResponse(content=HEALTH_STATUS)


@app.get("/metrics")
async def metrics() -> JSONResponse:
    """Return in-process metrics snapshot."""
    return JSONResponse(content=default_metrics.snapshot())


@app.get("/tools")
async def tools_catalog() -> JSONResponse:
    return JSONResponse(content={"tools": mcp.list_tools()})


@app.post("/tools/{tool_name}")
async def tool_route(tool_name: str, request: Request) -> JSONResponse:
    """Invoke a tool with the JSON request body as its arguments."""
    raw = await request.body()
    try:
        body = json.loads(raw) if raw.strip() else {}
    except ValueError:
        return JSONResponse(status_code=400, content={"error": "Invalid JSON body", "kind": "TypeMismatch"})
    limited = await _enforce_rate_limit(_tool_key(tool_name))
    if limited:
        return limited
    result = await mcp.call_tool(tool_name, body)
    request_id = getattr(request.state, "request_id", None)
    _log_tool_result(tool_name, result, request_id)
    if isinstance(result, dict):
        status_code = 404 if result.get("kind") == "UnknownTool" else 400
        return JSONResponse(status_code=status_code, content=result)
    return JSONResponse(content={"result": result})


@app.post("/mcp")
async def mcp_gateway(request: Request) -> JSONResponse:
    request_id = getattr(request.state, "request_id", None)
    start = time.time()

    def _respond(
        payload: Dict[str, Any],
        status_code: int = 200,
        *,
        outcome: str,
        method_label: Optional[str] = None,
        tool_label: Optional[str] = None,
        error_code: Optional[int] = None,
    ) -> JSONResponse:
        duration_ms = (time.time() - start) * 1000
        logger.info(
            "mcp outcome=%s method=%s tool=%s id=%s status=%s duration_ms=%.2f error_code=%s",
            outcome,
            method_label,
            tool_label,
            payload.get("id"),
            status_code,
            duration_ms,
            error_code,
            extra={"request_id": request_id, "tool": tool_label},
        )
        payload["requestId"] = request_id
        return JSONResponse(status_code=status_code, content=payload)

    try:
        body = await request.json()
    except ValueError:
        payload = _jsonrpc_error_payload(None, -32700, "Parse error")
        return _respond(payload, 400, outcome="error", error_code=-32700)

    if not isinstance(body, dict):
        payload = _jsonrpc_error_payload(None, -32600, "Invalid request")
        return _respond(payload, outcome="error", error_code=-32600)

    rpc_id = body.get("id")
    method = body.get("method")
    params = body.get("params")
    if params is None:
        params = {}
    if not isinstance(method, str):
        payload = _jsonrpc_error_payload(rpc_id, -32600, "Invalid request")
        return _respond(payload, outcome="error", error_code=-32600)
    if not isinstance(params, dict):
        payload = _jsonrpc_error_payload(rpc_id, -32602, "Invalid params")
        return _respond(payload, outcome="error", method_label=method, error_code=-32602)

    if method == "initialize":
        protocol_version = params.get("protocolVersion")
        if not isinstance(protocol_version, str) or not protocol_version:
            payload = _jsonrpc_error_payload(rpc_id, -32602, "Invalid params")
            return _respond(payload, outcome="error", method_label=method, error_code=-32602)
        result = {
            "protocolVersion": protocol_version,
            "serverInfo": {"name": MCP_SERVER_NAME, "version": MCP_SERVER_VERSION},
            "capabilities": {"tools": {"listChanged": False}},
        }
        return _respond(_jsonrpc_success_payload(rpc_id, result), outcome="success", method_label=method)

    if method in ("list_tools", "tools/list"):
        limited = await _enforce_rate_limit("list_tools")
        if limited:
            return limited
        result = {"tools": mcp.list_tools()}
        return _respond(_jsonrpc_success_payload(rpc_id, result), outcome="success", method_label=method)

    if method in ("call_tool", "tools/call"):
        tool_name = params.get("tool") or params.get("name")
        tool_params = params.get("params")
        if tool_params is None:
            tool_params = params.get("arguments") or {}
        if not isinstance(tool_name, str) or not tool_name.strip():
            payload = _jsonrpc_error_payload(rpc_id, -32602, "Invalid params")
            return _respond(payload, outcome="error", method_label=method, error_code=-32602)
        if not isinstance(tool_params, dict):
            payload = _jsonrpc_error_payload(rpc_id, -32602, "Invalid params")
            return _respond(payload, outcome="error", method_label=method, tool_label=tool_name, error_code=-32602)
        limited = await _enforce_rate_limit(_tool_key(tool_name))
        if limited:
            return limited
        result = await mcp.call_tool(tool_name, tool_params)
        _log_tool_result(tool_name, result, request_id)
        return _respond(
            _jsonrpc_success_payload(rpc_id, _wrap_tool_result(result)),
            outcome="success",
            method_label=method,
            tool_label=tool_name,
        )

    if method in ("notifications/initialized", "initialized"):
        # Notifications carry no JSON-RPC response body.
        return Response(status_code=204)

    payload = _jsonrpc_error_payload(rpc_id, -32601, "Method not found")
    return _respond(payload, outcome="error", method_label=method, error_code=-32601)


def _jsonrpc_success_payload(rpc_id: Any, result: Any) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": rpc_id, "result": result}


def _jsonrpc_error_payload(rpc_id: Any, code: int, message: str) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": rpc_id, "error": {"code": code, "message": message}}


def _wrap_tool_result(result: Any) -> Dict[str, Any]:
    """Shape tool outputs into an MCP content array."""
    if isinstance(result, dict) and "error" in result:
        return {
            "content": [{"type": "text", "text": str(result.get("error") or "Error")}],
            "isError": True,
            "structuredContent": result,
        }
    return {"content": [{"type": "text", "text": str(result)}]}


def main() -> None:
    uvicorn.run("rootstock_mcp.server:app", host="127.0.0.1", port=8000)


if __name__ == "__main__":
    main()
