"""
Perplexity chat completion client.

One POST per call, no retries. The answer text is taken from the first
choice and any citations returned by the API are appended as a numbered
list.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence, TypedDict

import httpx

from . import settings as _settings
from .errors import ErrorKind, PerplexityError
from .settings import Settings

logger = logging.getLogger(__name__)


class Message(TypedDict):
    role: str
    content: str


def build_payload(
    messages: Sequence[Message],
    model: str,
    search_domain_filter: Sequence[str] | None = None,
) -> dict[str, Any]:
    """Build the request body; raises before any I/O if the filter is too long."""
    payload: dict[str, Any] = {"model": model, "messages": list(messages)}
    if search_domain_filter:
        if len(search_domain_filter) > _settings.MAX_DOMAIN_FILTER:
            raise PerplexityError(
                ErrorKind.VALIDATION,
                f"search_domain_filter cannot contain more than "
                f"{_settings.MAX_DOMAIN_FILTER} domains.",
            )
        payload["search_domain_filter"] = list(search_domain_filter)
    return payload


def format_answer(data: Any) -> str:
    """Extract the answer text and append numbered citations, if any."""
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as exc:
        raise PerplexityError(
            ErrorKind.PARSE,
            f"Unexpected response shape from Perplexity API: missing {exc!r}",
        ) from exc
    if not isinstance(content, str):
        raise PerplexityError(
            ErrorKind.PARSE,
            "Unexpected response shape from Perplexity API: message content is not a string",
        )

    citations = data.get("citations") if isinstance(data, dict) else None
    if isinstance(citations, list) and citations:
        lines = "".join(f"[{i}] {citation}\n" for i, citation in enumerate(citations, 1))
        content += "\n\nCitations:\n" + lines
    return content


def _headers(api_key: str) -> dict:
    return {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }


def _network_error(exc: httpx.RequestError) -> PerplexityError:
    # repr, because some httpx errors have an empty str()
    return PerplexityError(
        ErrorKind.NETWORK,
        f"Network error while calling Perplexity API: {exc!r}",
    )


async def _read_error_text(response: httpx.Response) -> str:
    try:
        await response.aread()
    except httpx.RequestError:
        logger.debug("Could not read error body for status %d", response.status_code, exc_info=True)
        return "Unable to parse error response"
    return response.text


class ChatCompletionClient:
    """Thin async wrapper around the Perplexity chat completions endpoint.

    Pass *http_client* to reuse an existing ``httpx.AsyncClient`` (tests inject
    one backed by ``httpx.MockTransport``); it is then left open on ``aclose``.
    """

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient | None = None):
        self._settings = settings
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=settings.timeout)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def __aenter__(self) -> ChatCompletionClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def complete(
        self,
        messages: Sequence[Message],
        model: str,
        search_domain_filter: Sequence[str] | None = None,
    ) -> str:
        """Run one chat completion and return the answer with citations appended.

        Raises:
            PerplexityError: validation (filter too long), network, upstream_status
                (non-2xx) or parse (bad JSON / unexpected shape).
        """
        payload = build_payload(messages, model, search_domain_filter)
        request = self._http.build_request(
            "POST",
            self._settings.api_url,
            headers=_headers(self._settings.api_key),
            json=payload,
        )

        # Stream so that a failed body read on an error status can still be reported.
        try:
            response = await self._http.send(request, stream=True)
        except httpx.RequestError as exc:
            raise _network_error(exc) from exc

        try:
            if not response.is_success:
                error_text = await _read_error_text(response)
                logger.warning(
                    "Perplexity API returned %d %s", response.status_code, response.reason_phrase,
                )
                raise PerplexityError(
                    ErrorKind.UPSTREAM_STATUS,
                    f"Perplexity API error: {response.status_code} {response.reason_phrase}\n{error_text}",
                    status_code=response.status_code,
                )

            try:
                await response.aread()
            except httpx.RequestError as exc:
                raise _network_error(exc) from exc
        finally:
            await response.aclose()

        try:
            data = response.json()
        except ValueError as exc:
            raise PerplexityError(
                ErrorKind.PARSE,
                f"Failed to parse JSON response from Perplexity API: {exc}",
            ) from exc

        return format_answer(data)
