"""Port: LLM backend — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import AsyncIterator, Protocol, Sequence

from thaina_juridico.domain.entities import ChatMessage, StreamChunk


class LlmBackend(Protocol):
    """Abstract contract for one interchangeable chat-completion provider.

    Implementations raise :class:`UpstreamRateLimitError` on HTTP 429 and
    :class:`UpstreamError` on any other failure *before* returning from
    :meth:`open_stream` / :meth:`complete`.
    """

    name: str

    async def open_stream(
        self, system_prompt: str, messages: Sequence[ChatMessage]
    ) -> AsyncIterator[StreamChunk]:
        """Establish the upstream call and return an iterator of normalized deltas."""
        ...

    async def complete(
        self, system_prompt: str, messages: Sequence[ChatMessage]
    ) -> str:
        """Run a non-streamed completion and return the full text."""
        ...
