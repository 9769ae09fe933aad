"""
Downstream JSON-RPC handler behind the bearer gate: a minimal MCP server with one addition tool.
A fresh handler is created per request and closed afterwards.
"""
import logging
from typing import Any, Protocol

from oauth_testbed.constants import JSONRPC_INVALID_PARAMS, JSONRPC_INVALID_REQUEST, JSONRPC_METHOD_NOT_FOUND
from oauth_testbed.errors import jsonrpc_error

logger = logging.getLogger(__name__)

DEFAULT_PROTOCOL_VERSION = "2025-06-18"

ADD_TOOL = {
    "name": "add",
    "title": "Add tool",
    "description": "A simple addition tool",
    "inputSchema": {
        "type": "object",
        "properties": {
            "a": {"type": "number", "description": "First number"},
            "b": {"type": "number", "description": "Second number"},
        },
        "required": ["a", "b"],
    },
}


class JsonRpcHandler(Protocol):
    async def handle(self, message: Any) -> dict | None: ...

    def close(self) -> None: ...


def _format_number(value: int | float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class AdditionServer:
    """Answers initialize, ping, tools/list and tools/call(add). Returns None for notifications."""

    def __init__(self, name: str, version: str = "1.0.0") -> None:
        self.name = name
        self.version = version
        self.closed = False

    async def handle(self, message: Any) -> dict | None:
        if not isinstance(message, dict) or message.get("jsonrpc") != "2.0" or not isinstance(message.get("method"), str):
            msg_id = message.get("id") if isinstance(message, dict) else None
            return jsonrpc_error(JSONRPC_INVALID_REQUEST, "Invalid Request", msg_id)

        method = message["method"]
        params = message.get("params") or {}
        if "id" not in message:
            logger.debug("Notification %s", method)
            return None
        msg_id = message["id"]
        if not isinstance(params, dict):
            return jsonrpc_error(JSONRPC_INVALID_PARAMS, "params must be an object", msg_id)

        if method == "initialize":
            result = {
                "protocolVersion": params.get("protocolVersion") or DEFAULT_PROTOCOL_VERSION,
                "capabilities": {"tools": {"listChanged": False}},
                "serverInfo": {"name": self.name, "version": self.version},
            }
        elif method == "ping":
            result = {}
        elif method == "tools/list":
            result = {"tools": [ADD_TOOL]}
        elif method == "tools/call":
            return self._call_tool(msg_id, params)
        else:
            return jsonrpc_error(JSONRPC_METHOD_NOT_FOUND, f"Method not found: {method}", msg_id)
        return {"jsonrpc": "2.0", "id": msg_id, "result": result}

    def _call_tool(self, msg_id: Any, params: dict) -> dict:
        if params.get("name") != ADD_TOOL["name"]:
            return jsonrpc_error(JSONRPC_INVALID_PARAMS, f"Unknown tool: {params.get('name')}", msg_id)
        arguments = params.get("arguments") or {}
        a, b = arguments.get("a"), arguments.get("b")
        if not (_is_number(a) and _is_number(b)):
            return jsonrpc_error(JSONRPC_INVALID_PARAMS, "Arguments a and b must be numbers", msg_id)
        text = f"{_format_number(a)} + {_format_number(b)} = {_format_number(a + b)}"
        return {
            "jsonrpc": "2.0",
            "id": msg_id,
            "result": {"content": [{"type": "text", "text": text}]},
        }

    def close(self) -> None:
        self.closed = True
