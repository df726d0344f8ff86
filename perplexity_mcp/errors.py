"""Error types and the single mapping from failures to tool-call envelopes."""

from __future__ import annotations

from enum import Enum

from mcp import types


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    NETWORK = "network"
    UPSTREAM_STATUS = "upstream_status"
    PARSE = "parse"
    UNKNOWN_TOOL = "unknown_tool"


class ConfigError(RuntimeError):
    """Startup configuration is missing or malformed. Fatal."""


class PerplexityError(Exception):
    """A per-request failure. The server reports it and keeps serving."""

    def __init__(self, kind: ErrorKind, message: str, status_code: int | None = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code

    def __repr__(self) -> str:
        return f"PerplexityError(kind={self.kind.value!r}, message={self.message!r})"


def text_result(text: str, is_error: bool = False) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=text)],
        isError=is_error,
    )


def to_result(exc: Exception) -> types.CallToolResult:
    """Convert any failure into an ``isError`` envelope.

    Unknown tools carry their message as-is; everything else is prefixed
    with ``Error: ``.
    """
    if isinstance(exc, PerplexityError):
        if exc.kind is ErrorKind.UNKNOWN_TOOL:
            return text_result(exc.message, is_error=True)
        return text_result(f"Error: {exc.message}", is_error=True)
    return text_result(f"Error: {exc}", is_error=True)
