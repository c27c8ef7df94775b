"""OpenAI-compatible adapter — implements the LlmBackend port.

Serves every backend that speaks the chat-completions wire format
(OpenRouter, OpenAI).  Streams are opened through the SDK's streaming
response and read line by line, so :func:`decode_stream_line` can drop a
malformed frame without ending the stream.
"""

from __future__ import annotations

import logging
from contextlib import AsyncExitStack
from typing import Any, AsyncIterator, Awaitable, Mapping, Sequence

import httpx
from openai import (
    APIConnectionError,
    APIError,
    APIStatusError,
    AsyncOpenAI,
    AuthenticationError,
    RateLimitError,
)
from openai.types.chat import ChatCompletion, ChatCompletionChunk
from pydantic import ValidationError

from thaina_juridico.domain.entities import ChatMessage, StreamChunk
from thaina_juridico.domain.exceptions import UpstreamError, UpstreamRateLimitError

logger = logging.getLogger(__name__)

_SSE_DATA_PREFIX = "data:"


# ── Wire format (pure) ──────────────────────────────────────────────────────


def encode_messages(
    system_prompt: str, messages: Sequence[ChatMessage]
) -> list[dict[str, str]]:
    """Build the chat-completions ``messages`` array, system prompt first."""
    encoded = [{"role": "system", "content": system_prompt}]
    encoded.extend({"role": m.role.value, "content": m.content} for m in messages)
    return encoded


def decode_chunk(chunk: ChatCompletionChunk) -> list[StreamChunk]:
    """Extract the non-empty text deltas carried by one streamed chunk."""
    deltas: list[StreamChunk] = []
    for choice in chunk.choices or []:
        content = choice.delta.content if choice.delta else None
        if content:
            deltas.append(StreamChunk(delta_content=content))
    return deltas


def decode_stream_line(line: str) -> list[StreamChunk]:
    """Translate one SSE line into zero or more canonical deltas.

    Comments (OpenRouter's ``: OPENROUTER PROCESSING``), blank lines,
    ``[DONE]`` and frames that are not a valid chunk yield nothing.
    """
    line = line.strip()
    if not line.startswith(_SSE_DATA_PREFIX):
        return []
    raw = line[len(_SSE_DATA_PREFIX) :].strip()
    if not raw or raw == "[DONE]":
        return []
    try:
        chunk = ChatCompletionChunk.model_validate_json(raw)
    except ValidationError:
        return []
    return decode_chunk(chunk)


def decode_completion(completion: ChatCompletion) -> str:
    """Return the assistant text of a non-streamed completion."""
    if not completion.choices:
        raise UpstreamError("LLM returned no choices.")
    content = completion.choices[0].message.content
    if not content:
        raise UpstreamError("LLM returned an empty response.")
    return content


# ── Adapter ─────────────────────────────────────────────────────────────────


class OpenAICompatibleAdapter:
    """Concrete ``LlmBackend`` backed by a chat-completions endpoint."""

    def __init__(
        self,
        name: str,
        api_key: str,
        model: str,
        base_url: str,
        *,
        timeout: float = 60.0,
        extra_headers: Mapping[str, str] | None = None,
        extra_body: Mapping[str, Any] | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.name = name
        # Failover replaces retries: one 429 is enough to move on.
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
            default_headers=dict(extra_headers) if extra_headers else None,
            http_client=http_client,
        )
        self._model = model
        self._extra_body = dict(extra_body) if extra_body else None

    async def open_stream(
        self, system_prompt: str, messages: Sequence[ChatMessage]
    ) -> AsyncIterator[StreamChunk]:
        """Start a streamed completion; raises before returning if the call fails."""
        stack = AsyncExitStack()
        response = await self._call(
            stack.enter_async_context(
                self._client.chat.completions.with_streaming_response.create(
                    model=self._model,
                    messages=encode_messages(system_prompt, messages),  # type: ignore[arg-type]
                    stream=True,
                    extra_body=self._extra_body,
                )
            )
        )
        return self._relay(response.http_response, stack)

    async def complete(
        self, system_prompt: str, messages: Sequence[ChatMessage]
    ) -> str:
        """Send the conversation and return the completion text."""
        completion: ChatCompletion = await self._call(
            self._client.chat.completions.create(
                model=self._model,
                messages=encode_messages(system_prompt, messages),  # type: ignore[arg-type]
                extra_body=self._extra_body,
            )
        )
        return decode_completion(completion)

    async def close(self) -> None:
        """Release underlying HTTP resources."""
        await self._client.close()

    # ── Internals ───────────────────────────────────────────────────────

    async def _call(self, request: Awaitable[Any]) -> Any:
        try:
            return await request

        except RateLimitError as exc:
            logger.warning("%s rate limited: %s", self.name, exc)
            raise UpstreamRateLimitError(
                f"{self.name} rate limit exceeded."
            ) from exc

        except AuthenticationError as exc:
            raise UpstreamError(f"{self.name} rejected the configured API key.") from exc

        except APIStatusError as exc:
            logger.error("%s API error: %s %s", self.name, exc.status_code, exc.message)
            raise UpstreamError(f"{self.name} API error: {exc.status_code}") from exc

        except APIConnectionError as exc:
            raise UpstreamError(f"{self.name} is unreachable: {exc}") from exc

        except APIError as exc:
            raise UpstreamError(f"{self.name} call failed: {exc}") from exc

    async def _relay(
        self, resp: httpx.Response, stack: AsyncExitStack
    ) -> AsyncIterator[StreamChunk]:
        try:
            async for line in resp.aiter_lines():
                for delta in decode_stream_line(line):
                    yield delta
        except httpx.HTTPError as exc:
            logger.warning("%s stream ended early: %s", self.name, exc)
        finally:
            await stack.aclose()
