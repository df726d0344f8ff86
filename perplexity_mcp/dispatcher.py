"""Validate a tool call, run the completion, and wrap the answer in an envelope."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from mcp import types

from .client import ChatCompletionClient
from .errors import ErrorKind, PerplexityError, text_result, to_result
from .settings import Settings
from .tools import ToolDescriptor, get_tool

logger = logging.getLogger(__name__)


def resolve_domain_filter(
    tool_name: str,
    arguments: Mapping[str, Any],
    default: tuple[str, ...],
) -> list[str]:
    """Request argument wins, then the configured default, then no filter.

    Only a missing key falls back to the default; an explicit null sends no filter.
    """
    if "search_domain_filter" not in arguments:
        return list(default)
    value = arguments["search_domain_filter"]
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(d, str) for d in value):
        raise PerplexityError(
            ErrorKind.VALIDATION,
            f"Invalid arguments for {tool_name}: search_domain_filter must be a list of strings",
        )
    return value


def resolve_model(tool: ToolDescriptor, arguments: Mapping[str, Any]) -> str:
    if not tool.accepts_model:
        return tool.default_model

    model = arguments.get("model")
    if model is None:
        return tool.default_model
    if not isinstance(model, str) or model not in tool.allowed_models:
        choices = " or ".join(f"'{m}'" for m in tool.allowed_models)
        raise PerplexityError(
            ErrorKind.VALIDATION,
            f"Invalid model for {tool.name}. Must be {choices}.",
        )
    return model


class Dispatcher:
    """Maps a ``tools/call`` request onto a ``CallToolResult``.

    ``call_tool`` never raises: every failure comes back as an ``isError``
    envelope so the server can keep serving.
    """

    def __init__(self, settings: Settings, client: ChatCompletionClient | None = None):
        self.settings = settings
        self.client = client or ChatCompletionClient(settings)

    async def aclose(self) -> None:
        await self.client.aclose()

    async def call_tool(
        self, name: str, arguments: Mapping[str, Any] | None,
    ) -> types.CallToolResult:
        try:
            answer = await self._run(name, arguments)
        except PerplexityError as exc:
            logger.info("Tool %s failed (%s): %s", name, exc.kind.value, exc.message)
            return to_result(exc)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unexpected error while running tool %s", name)
            return to_result(exc)
        return text_result(answer)

    async def _run(self, name: str, arguments: Mapping[str, Any] | None) -> str:
        # The SDK substitutes {} for missing arguments, so treat both as absent.
        if not arguments:
            raise PerplexityError(ErrorKind.VALIDATION, "No arguments provided")

        domain_filter = resolve_domain_filter(
            name, arguments, self.settings.default_domain_filter,
        )

        tool = get_tool(name)
        if tool is None:
            raise PerplexityError(ErrorKind.UNKNOWN_TOOL, f"Unknown tool: {name}")

        messages = arguments.get("messages")
        if not isinstance(messages, list):
            raise PerplexityError(
                ErrorKind.VALIDATION,
                f"Invalid arguments for {tool.name}: 'messages' must be a list",
            )

        model = resolve_model(tool, arguments)

        logger.info(
            "Calling %s with model=%s, %d message(s), %d domain filter(s)",
            tool.name, model, len(messages), len(domain_filter),
        )
        return await self.client.complete(messages, model, domain_filter)
