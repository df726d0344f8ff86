"""MCP client config generator.

Builds the ``mcpServers`` JSON block that MCP clients (Claude Desktop, IDE
agents, ...) read to launch this server over stdio.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

from . import settings


def build_mcp_config(
    project_dir: Path | None = None,
    domain_filter: list[str] | None = None,
    api_key: str | None = None,
    python: str | None = None,
) -> dict:
    """Return a client config dict for the perplexity-ask server.

    With *project_dir* the server is launched through ``uv --directory``;
    otherwise the given (or current) Python interpreter runs the module.
    The API key is only embedded when passed explicitly; by default the
    entry holds a placeholder for the user to fill in.
    """
    if project_dir is not None:
        command = "uv"
        args = [
            "--directory", str(project_dir),
            "run", "python", "-m", "perplexity_mcp",
        ]
    else:
        command = python or sys.executable
        args = ["-m", "perplexity_mcp"]

    env = {settings.ENV_API_KEY: api_key or "YOUR_API_KEY_HERE"}
    if domain_filter:
        env[settings.ENV_DOMAIN_FILTER] = ",".join(domain_filter)

    return {
        "mcpServers": {
            settings.SERVER_NAME: {
                "command": command,
                "args": args,
                "env": env,
            },
        },
    }


def render_mcp_config(**kwargs) -> str:
    return json.dumps(build_mcp_config(**kwargs), indent=2) + "\n"
