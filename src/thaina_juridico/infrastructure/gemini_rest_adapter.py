"""Gemini REST adapter — implements the LlmBackend port.

Gemini streams ``GenerateContentResponse`` objects over SSE
(``:streamGenerateContent?alt=sse``), a different shape from the
chat-completions chunks.  The pure functions below translate requests and
frames; the adapter only moves bytes.
"""

from __future__ import annotations

import json
import logging
from typing import Any, AsyncIterator, Sequence

import httpx

from thaina_juridico.domain.entities import ChatMessage, Role, StreamChunk
from thaina_juridico.domain.exceptions import UpstreamError, UpstreamRateLimitError

logger = logging.getLogger(__name__)

_SSE_DATA_PREFIX = "data:"


# ── Wire format (pure) ──────────────────────────────────────────────────────


def encode_request(
    system_prompt: str, messages: Sequence[ChatMessage]
) -> dict[str, Any]:
    """Build a ``generateContent`` body; the assistant role is called ``model``."""
    return {
        "systemInstruction": {"parts": [{"text": system_prompt}]},
        "contents": [
            {
                "role": "model" if m.role is Role.ASSISTANT else "user",
                "parts": [{"text": m.content}],
            }
            for m in messages
        ],
    }


def _candidate_texts(payload: Any) -> list[str]:
    """Visible text parts of every candidate, skipping thought summaries."""
    if not isinstance(payload, dict):
        return []
    texts: list[str] = []
    for candidate in payload.get("candidates") or []:
        if not isinstance(candidate, dict):
            continue
        content = candidate.get("content") or {}
        for part in content.get("parts") or []:
            if not isinstance(part, dict) or part.get("thought"):
                continue
            text = part.get("text")
            if isinstance(text, str) and text:
                texts.append(text)
    return texts


def decode_stream_line(line: str) -> list[StreamChunk]:
    """Translate one SSE line into zero or more canonical deltas.

    Comments, blank lines, non-``data`` fields and malformed JSON yield
    nothing.
    """
    line = line.strip()
    if not line.startswith(_SSE_DATA_PREFIX):
        return []
    raw = line[len(_SSE_DATA_PREFIX) :].strip()
    if not raw or raw == "[DONE]":
        return []
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError:
        return []
    return [StreamChunk(delta_content=t) for t in _candidate_texts(payload)]


def decode_completion(payload: Any) -> str:
    """Return the concatenated text of a non-streamed response."""
    texts = _candidate_texts(payload)
    if not texts:
        raise UpstreamError("LLM returned an empty response.")
    return "".join(texts)


# ── Adapter ─────────────────────────────────────────────────────────────────


class GeminiRestAdapter:
    """Concrete ``LlmBackend`` backed by the Gemini ``generateContent`` API."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        model: str,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        *,
        name: str = "gemini",
        timeout: float = 60.0,
    ) -> None:
        self.name = name
        self._client = client
        self._model_url = f"{base_url.rstrip('/')}/models/{model}"
        self._headers = {
            "x-goog-api-key": api_key,
            "Content-Type": "application/json",
        }
        self._timeout = httpx.Timeout(timeout)

    async def open_stream(
        self, system_prompt: str, messages: Sequence[ChatMessage]
    ) -> AsyncIterator[StreamChunk]:
        """POST :streamGenerateContent and return the translated delta stream."""
        request = self._client.build_request(
            "POST",
            f"{self._model_url}:streamGenerateContent",
            params={"alt": "sse"},
            headers=self._headers,
            json=encode_request(system_prompt, messages),
            timeout=self._timeout,
        )
        try:
            resp = await self._client.send(request, stream=True)
        except httpx.HTTPError as exc:
            raise UpstreamError(f"{self.name} is unreachable: {exc}") from exc

        if resp.status_code != 200:
            body = await resp.aread()
            await resp.aclose()
            self._raise_for_status(resp.status_code, body)

        return self._relay(resp)

    async def complete(
        self, system_prompt: str, messages: Sequence[ChatMessage]
    ) -> str:
        """POST :generateContent and return the full text."""
        try:
            resp = await self._client.post(
                f"{self._model_url}:generateContent",
                headers=self._headers,
                json=encode_request(system_prompt, messages),
                timeout=self._timeout,
            )
        except httpx.HTTPError as exc:
            raise UpstreamError(f"{self.name} is unreachable: {exc}") from exc

        if resp.status_code != 200:
            self._raise_for_status(resp.status_code, resp.content)

        try:
            payload = resp.json()
        except ValueError as exc:
            raise UpstreamError(f"{self.name} returned invalid JSON: {exc}") from exc
        return decode_completion(payload)

    # ── Internals ───────────────────────────────────────────────────────

    async def _relay(self, resp: httpx.Response) -> AsyncIterator[StreamChunk]:
        try:
            async for line in resp.aiter_lines():
                for delta in decode_stream_line(line):
                    yield delta
        except httpx.HTTPError as exc:
            logger.warning("%s stream ended early: %s", self.name, exc)
        finally:
            await resp.aclose()

    def _raise_for_status(self, status_code: int, body: bytes) -> None:
        detail = body.decode("utf-8", errors="replace")[:500]
        if status_code == 429:
            logger.warning("%s rate limited: %s", self.name, detail)
            raise UpstreamRateLimitError(f"{self.name} rate limit exceeded.")
        logger.error("%s API error: %s %s", self.name, status_code, detail)
        raise UpstreamError(f"{self.name} API error: {status_code}")
