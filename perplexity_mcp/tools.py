"""
Tool registry — static descriptors for the three Perplexity tools.

Tools
-----
  perplexity_ask(messages, model?, search_domain_filter?)       → Sonar answer
  perplexity_research(messages, search_domain_filter?)          → deep research
  perplexity_reason(messages, model?, search_domain_filter?)    → reasoning answer
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from mcp import types

from . import settings


@dataclass(frozen=True)
class ToolDescriptor:
    """One tool as advertised to MCP clients, plus its model policy."""
    name: str
    description: str
    input_schema: Mapping[str, Any]
    default_model: str
    allowed_models: tuple[str, ...] = field(default=())

    @property
    def accepts_model(self) -> bool:
        """False when the model is fixed and callers cannot choose one."""
        return bool(self.allowed_models)

    def to_mcp(self) -> types.Tool:
        return types.Tool(
            name=self.name,
            description=self.description,
            inputSchema=_thaw(self.input_schema),
        )


def _thaw(value: Any) -> Any:
    # Hand the SDK plain dicts/lists so schema validation and JSON dumping work.
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


def _freeze(value: Any) -> Any:
    if isinstance(value, dict):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, list):
        return tuple(_freeze(v) for v in value)
    return value


# ---------------------------------------------------------------------------
# Shared schema fragments
# ---------------------------------------------------------------------------

_MESSAGES_SCHEMA = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "role": {
                "type": "string",
                "description": "Role of the message (e.g., system, user, assistant)",
            },
            "content": {
                "type": "string",
                "description": "The content of the message",
            },
        },
        "required": ["role", "content"],
    },
    "description": "Array of conversation messages",
}

_DOMAIN_FILTER_SCHEMA = {
    "type": "array",
    "items": {"type": "string"},
    "maxItems": settings.MAX_DOMAIN_FILTER,
    "description": (
        f"A list of domains to limit search results to. Max {settings.MAX_DOMAIN_FILTER}. "
        "Add a - at the beginning of the domain string for denylisting."
    ),
}


def _input_schema(model_property: dict | None = None) -> dict:
    properties: dict[str, Any] = {"messages": _MESSAGES_SCHEMA}
    if model_property is not None:
        properties["model"] = model_property
    properties["search_domain_filter"] = _DOMAIN_FILTER_SCHEMA
    return {
        "type": "object",
        "properties": properties,
        "required": ["messages"],
    }


def _model_property(purpose: str, allowed: tuple[str, ...], default: str) -> dict:
    first, second = allowed
    return {
        "type": "string",
        "description": (
            f"The model to use for {purpose}. Can be '{first}' or '{second}'. "
            f"Defaults to '{default}'."
        ),
        "enum": list(allowed),
    }


# ---------------------------------------------------------------------------
# The three tools
# ---------------------------------------------------------------------------

ASK_TOOL = ToolDescriptor(
    name="perplexity_ask",
    description=(
        "Engages in a conversation using the Sonar API. "
        "Accepts an array of messages (each with a role and content) "
        "and returns a chat completion response from the Perplexity model."
    ),
    input_schema=_freeze(_input_schema(
        _model_property("the completion", settings.ASK_MODELS, settings.DEFAULT_ASK_MODEL)
    )),
    default_model=settings.DEFAULT_ASK_MODEL,
    allowed_models=settings.ASK_MODELS,
)

RESEARCH_TOOL = ToolDescriptor(
    name="perplexity_research",
    description=(
        "Performs deep research using the Perplexity API. "
        "Accepts an array of messages (each with a role and content) "
        "and returns a comprehensive research response with citations."
    ),
    input_schema=_freeze(_input_schema()),
    default_model=settings.RESEARCH_MODEL,
)

REASON_TOOL = ToolDescriptor(
    name="perplexity_reason",
    description=(
        "Performs reasoning tasks using the Perplexity API. "
        "Accepts an array of messages (each with a role and content) "
        "and returns a well-reasoned response using the sonar-reasoning-pro model."
    ),
    input_schema=_freeze(_input_schema(
        _model_property("reasoning", settings.REASON_MODELS, settings.DEFAULT_REASON_MODEL)
    )),
    default_model=settings.DEFAULT_REASON_MODEL,
    allowed_models=settings.REASON_MODELS,
)

TOOLS: tuple[ToolDescriptor, ...] = (ASK_TOOL, RESEARCH_TOOL, REASON_TOOL)

_BY_NAME: Mapping[str, ToolDescriptor] = MappingProxyType({t.name: t for t in TOOLS})


def list_tools() -> list[types.Tool]:
    """Wire descriptors for every tool, in registration order."""
    return [tool.to_mcp() for tool in TOOLS]


def get_tool(name: str) -> ToolDescriptor | None:
    return _BY_NAME.get(name)
