"""
Perplexity MCP Server — three tools exposed to MCP clients.

Tools
-----
  perplexity_ask        → Sonar / Sonar Pro answer with citations
  perplexity_research   → sonar-deep-research report with citations
  perplexity_reason     → Sonar Reasoning answer with citations

Invoked by an MCP client via ``python -m perplexity_mcp`` (stdio transport).
The low-level SDK server is used instead of FastMCP so that the advertised
input schemas and the error envelopes are exactly ours.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from . import settings as _settings
from .dispatcher import Dispatcher
from .settings import Settings
from .tools import list_tools

logger = logging.getLogger(__name__)


def build_server(settings: Settings, dispatcher: Dispatcher | None = None) -> Server:
    """Create the MCP server with list/call handlers bound to *dispatcher*."""
    dispatcher = dispatcher or Dispatcher(settings)

    @asynccontextmanager
    async def lifespan(_: Server) -> AsyncIterator[dict[str, Any]]:
        try:
            yield {}
        finally:
            await dispatcher.aclose()

    server = Server(
        _settings.SERVER_NAME,
        version=_settings.SERVER_VERSION,
        lifespan=lifespan,
    )

    @server.list_tools()
    async def handle_list_tools() -> list[types.Tool]:
        return list_tools()

    # Validation is ours: the dispatcher reports bad input with tool-specific text.
    @server.call_tool(validate_input=False)
    async def handle_call_tool(name: str, arguments: dict[str, Any] | None) -> types.CallToolResult:
        return await dispatcher.call_tool(name, arguments)

    return server


async def run_stdio(settings: Settings) -> None:
    """Serve over stdin/stdout until the client closes the stream."""
    server = build_server(settings)
    async with stdio_server() as (read_stream, write_stream):
        logger.info(
            "Perplexity MCP Server running on stdio with Ask, Research, and Reason tools"
        )
        await server.run(read_stream, write_stream, server.create_initialization_options())
