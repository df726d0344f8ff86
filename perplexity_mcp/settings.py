"""
Constants and process configuration for the Perplexity MCP server.

Everything environment-derived is read once, at process entry, into an
immutable ``Settings`` value that is passed explicitly to the dispatcher and
the chat completion client.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping

from .errors import ConfigError

# ---------------------------------------------------------------------------
# Server identity
# ---------------------------------------------------------------------------

SERVER_NAME    = "perplexity-ask"
SERVER_VERSION = "0.1.0"

# ---------------------------------------------------------------------------
# Perplexity API
# ---------------------------------------------------------------------------

API_URL = "https://api.perplexity.ai/chat/completions"

ASK_MODELS:    tuple[str, ...] = ("sonar", "sonar-pro")
REASON_MODELS: tuple[str, ...] = ("sonar-reasoning", "sonar-reasoning-pro")

DEFAULT_ASK_MODEL      = "sonar-pro"
DEFAULT_REASON_MODEL   = "sonar-reasoning-pro"
RESEARCH_MODEL         = "sonar-deep-research"

MAX_DOMAIN_FILTER = 10   # upstream rejects longer allow/deny lists

# ---------------------------------------------------------------------------
# Environment variables
# ---------------------------------------------------------------------------

ENV_API_KEY       = "PERPLEXITY_API_KEY"
ENV_DOMAIN_FILTER = "PERPLEXITY_SEARCH_DOMAIN_FILTER"
ENV_API_URL       = "PERPLEXITY_API_URL"
ENV_TIMEOUT       = "PERPLEXITY_TIMEOUT"
ENV_LOG_LEVEL     = "LOG_LEVEL"

DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class Settings:
    """Read-only configuration shared by every request."""
    api_key: str = field(repr=False)
    default_domain_filter: tuple[str, ...] = ()
    api_url: str = API_URL
    timeout: float | None = None


def parse_domain_filter(raw: str | None) -> tuple[str, ...]:
    """Split a comma-separated domain list, trimming entries and dropping blanks."""
    if not raw:
        return ()
    return tuple(d.strip() for d in raw.split(",") if d.strip())


def _parse_timeout(raw: str | None) -> float | None:
    if raw is None or not raw.strip():
        return None
    try:
        timeout = float(raw)
    except ValueError:
        raise ConfigError(f"{ENV_TIMEOUT} must be a number of seconds, got {raw!r}") from None
    if timeout <= 0:
        raise ConfigError(f"{ENV_TIMEOUT} must be positive, got {raw!r}")
    return timeout


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from the environment.

    Raises ConfigError when the API key is missing or a value is malformed.
    """
    env = os.environ if environ is None else environ

    api_key = env.get(ENV_API_KEY, "").strip()
    if not api_key:
        raise ConfigError(f"{ENV_API_KEY} environment variable is required")

    return Settings(
        api_key=api_key,
        default_domain_filter=parse_domain_filter(env.get(ENV_DOMAIN_FILTER)),
        api_url=env.get(ENV_API_URL) or API_URL,
        timeout=_parse_timeout(env.get(ENV_TIMEOUT)),
    )
