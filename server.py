"""
Configure the FastMCP server instance.

This module creates the shared `FastMCP` server and imports the tool
module so that its decorated function is registered.

You typically do not run this module directly. Instead, use
``python main.py`` (or the ``youtube-transcript-mcp`` console script),
which imports the server and calls ``mcp.run()``.
"""

from __future__ import annotations

from mcp import types
from mcp.server.fastmcp import FastMCP
from mcp.shared.exceptions import McpError

from config import settings


# Create the shared MCP server instance.
mcp = FastMCP(settings.SERVER_NAME, log_level=settings.LOG_LEVEL.upper())


# Import the tool module so its decorator registers ``get_transcript``
# with the server.  Use absolute imports rather than package-relative
# ones so that the code works when run from the project root.
from tools import transcript_tools  # noqa: E402,F401


# FastMCP reports an unknown tool name as an ``isError`` tool result,
# which a client cannot tell apart from a failed fetch.  Reject it
# before dispatch so it travels as a JSON-RPC error instead.
_dispatch_call_tool = mcp._mcp_server.request_handlers[types.CallToolRequest]


async def _call_registered_tool(req: types.CallToolRequest) -> types.ServerResult:
    name = req.params.name
    if name not in {tool.name for tool in await mcp.list_tools()}:
        raise McpError(types.ErrorData(code=types.INVALID_PARAMS, message=f"Unknown tool: {name}"))
    return await _dispatch_call_tool(req)


mcp._mcp_server.request_handlers[types.CallToolRequest] = _call_registered_tool
