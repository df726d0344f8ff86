"""Perplexity MCP - ask, research and reason tools backed by the Perplexity Sonar API."""

from perplexity_mcp.client import ChatCompletionClient
from perplexity_mcp.dispatcher import Dispatcher
from perplexity_mcp.errors import ConfigError, ErrorKind, PerplexityError
from perplexity_mcp.settings import Settings, load_settings
from perplexity_mcp.tools import TOOLS, ToolDescriptor

__all__ = [
    "ChatCompletionClient",
    "ConfigError",
    "Dispatcher",
    "ErrorKind",
    "PerplexityError",
    "Settings",
    "TOOLS",
    "ToolDescriptor",
    "load_settings",
]
