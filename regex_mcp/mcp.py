from __future__ import annotations
import sys
import json
import asyncio
from typing import Dict, Optional, Any, IO
from dataclasses import dataclass
import logging

from . import __version__
from .config import Settings
from .tools import TOOL_SPECS, ToolRegistry

"""
MCP (Model Context Protocol) server exposing regex_search and regex_replace.
JSON-RPC 2.0 messages, one per line, over stdin/stdout.
"""

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "2025-06-18"
INSTRUCTIONS = (
    "Regex find-and-replace MCP server. Use regex_replace for replacements, "
    "regex_search for searching."
)

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


@dataclass
class MCPTool:
    """A tool exposed by the server."""
    name: str
    description: str
    inputSchema: Dict[str, Any]


class MCPServer:
    def __init__(self, settings: Optional[Settings] = None, registry: Optional[ToolRegistry] = None):
        self.settings = settings or Settings()
        self.registry = registry or ToolRegistry(self.settings)
        self.tools: Dict[str, MCPTool] = {}
        self._register_tools()

    def _register_tools(self):
        for name in self.registry.names:
            spec = TOOL_SPECS[name]
            self.add_tool(MCPTool(name=name, description=spec["description"], inputSchema=spec["inputSchema"]))

    def add_tool(self, tool: MCPTool):
        self.tools[tool.name] = tool

    async def handle_request(self, request: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Handle one JSON-RPC message. Notifications return None."""
        if not isinstance(request, dict) or request.get("jsonrpc") != "2.0" or "method" not in request:
            return self._error_response(request.get("id") if isinstance(request, dict) else None,
                                        INVALID_REQUEST, "Invalid Request")
        method = request.get("method")
        params = request.get("params") or {}
        request_id = request.get("id")
        if "id" not in request:
            logger.debug("notification %s", method)
            return None
        if not isinstance(params, dict):
            return self._error_response(request_id, INVALID_PARAMS, "params must be an object")

        try:
            if method == "initialize":
                return self._handle_initialize(request_id)
            elif method == "ping":
                return {"jsonrpc": "2.0", "id": request_id, "result": {}}
            elif method == "tools/list":
                return self._handle_list_tools(request_id)
            elif method == "tools/call":
                return await self._handle_tool_call(params, request_id)
            else:
                return self._error_response(request_id, METHOD_NOT_FOUND, f"Method not found: {method}")
        except Exception as e:
            logger.exception("request %s failed", method)
            return self._error_response(request_id, INTERNAL_ERROR, str(e))

    def _handle_initialize(self, request_id: Any) -> Dict[str, Any]:
        return {
            "jsonrpc": "2.0",
            "id": request_id,
            "result": {
                "protocolVersion": PROTOCOL_VERSION,
                "capabilities": {"tools": {"listChanged": False}},
                "serverInfo": {"name": "regex-mcp", "version": __version__},
                "instructions": INSTRUCTIONS,
            },
        }

    def _handle_list_tools(self, request_id: Any) -> Dict[str, Any]:
        return {
            "jsonrpc": "2.0",
            "id": request_id,
            "result": {
                "tools": [
                    {"name": t.name, "description": t.description, "inputSchema": t.inputSchema}
                    for t in self.tools.values()
                ]
            },
        }

    async def _handle_tool_call(self, params: Dict[str, Any], request_id: Any) -> Dict[str, Any]:
        tool_name = params.get("name")
        tool_args = params.get("arguments") or {}
        if tool_name not in self.tools:
            return self._error_response(request_id, INVALID_PARAMS, f"Unknown tool: {tool_name}")

        # tools are synchronous file work; keep the event loop free
        envelope = await asyncio.to_thread(self.registry.invoke, tool_name, tool_args)
        if envelope["status"] == "ok":
            result = {
                "content": [{"type": "text", "text": envelope["output"]}],
                "structuredContent": envelope["data"],
                "isError": False,
            }
        else:
            result = {
                "content": [{"type": "text", "text": f"Error: {envelope['error']}"}],
                "isError": True,
            }
        return {"jsonrpc": "2.0", "id": request_id, "result": result}

    def _error_response(self, request_id: Any, code: int, message: str) -> Dict[str, Any]:
        return {"jsonrpc": "2.0", "id": request_id, "error": {"code": code, "message": message}}

    async def handle_line(self, line: str) -> Optional[Dict[str, Any]]:
        try:
            request = json.loads(line)
        except json.JSONDecodeError as e:
            return self._error_response(None, PARSE_ERROR, f"Parse error: {e}")
        return await self.handle_request(request)

    async def serve(self, reader: Optional[IO[str]] = None, writer: Optional[IO[str]] = None):
        """Serve newline-delimited JSON-RPC until EOF on `reader`."""
        reader = reader or sys.stdin
        writer = writer or sys.stdout
        logger.info("regex-mcp serving on stdio (root=%s)", self.settings.root)
        while True:
            line = await asyncio.to_thread(reader.readline)
            if not line:
                break
            if not line.strip():
                continue
            response = await self.handle_line(line)
            if response is not None:
                writer.write(json.dumps(response) + "\n")
                writer.flush()
        logger.info("stdin closed, shutting down")


def serve_stdio(settings: Optional[Settings] = None):
    asyncio.run(MCPServer(settings).serve())
