"""Chat gateway use case — the chat request orchestration pipeline.

Steps, all awaited sequentially:

1. refuse immediately when no backend is configured;
2. look up knowledge excerpts for the latest user message (optional);
3. synthesize the system prompt and filter the caller's turns;
4. try each backend in preference order, failing over **only** on
   rate-limit, and hand back the first successfully established stream or
   completion.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import AsyncIterator, Awaitable, Callable, Sequence, TypeVar

from thaina_juridico.domain.entities import (
    ChatCompletion,
    ChatMessage,
    KnowledgeExcerpt,
    Mode,
    StreamChunk,
)
from thaina_juridico.domain.exceptions import ConfigError, UpstreamRateLimitError
from thaina_juridico.domain.ports.llm_backend import LlmBackend
from thaina_juridico.services.knowledge_retriever import KnowledgeRetriever
from thaina_juridico.services.prompt_builder import (
    build_system_prompt,
    filter_conversation,
    latest_user_query,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please try again later."


@dataclass(frozen=True)
class ChatStream:
    """An established upstream stream and the backend serving it."""

    backend: str
    chunks: AsyncIterator[StreamChunk]


@dataclass(frozen=True)
class PreparedPrompt:
    system_prompt: str
    messages: list[ChatMessage]
    excerpts: list[KnowledgeExcerpt]


class ChatGatewayUseCase:
    """Orchestrates prompt synthesis, retrieval and backend failover.

    Parameters
    ----------
    backends:
        Eligible backends in preference order (only those with credentials).
    retriever:
        Knowledge retriever; when ``None`` no lookup is ever made.
    """

    def __init__(
        self,
        backends: Sequence[LlmBackend],
        retriever: KnowledgeRetriever | None = None,
    ) -> None:
        self._backends = list(backends)
        self._retriever = retriever

    # ── Public entry points ─────────────────────────────────────────────

    async def stream(
        self,
        messages: Sequence[ChatMessage],
        mode: Mode,
        user_id: str | None = None,
    ) -> ChatStream:
        """Establish a streamed completion on the first backend that accepts it."""
        prepared = await self.prepare(messages, mode, user_id)
        backend, chunks = await self._with_failover(
            lambda b: b.open_stream(prepared.system_prompt, prepared.messages)
        )
        return ChatStream(backend=backend, chunks=chunks)

    async def complete(
        self,
        messages: Sequence[ChatMessage],
        mode: Mode,
        user_id: str | None = None,
    ) -> ChatCompletion:
        """Return a full, non-streamed answer."""
        prepared = await self.prepare(messages, mode, user_id)
        backend, content = await self._with_failover(
            lambda b: b.complete(prepared.system_prompt, prepared.messages)
        )
        return ChatCompletion(backend=backend, content=content)

    async def prepare(
        self,
        messages: Sequence[ChatMessage],
        mode: Mode,
        user_id: str | None = None,
    ) -> PreparedPrompt:
        """Build the system prompt and outbound turns (runs the knowledge lookup)."""
        self._ensure_configured()

        excerpts: list[KnowledgeExcerpt] = []
        query = latest_user_query(messages)
        if user_id and query and self._retriever is not None:
            excerpts = await self._retriever.retrieve(user_id, query)

        return PreparedPrompt(
            system_prompt=build_system_prompt(mode, excerpts),
            messages=filter_conversation(messages),
            excerpts=excerpts,
        )

    # ── Backend selection ───────────────────────────────────────────────

    def _ensure_configured(self) -> None:
        if not self._backends:
            raise ConfigError(
                "No LLM backend is configured. Set OPENROUTER_API_KEY, "
                "OPENAI_API_KEY or GEMINI_API_KEY."
            )

    async def _with_failover(
        self, attempt: Callable[[LlmBackend], Awaitable[T]]
    ) -> tuple[str, T]:
        """TRY(i) → done | TRY(i+1) on rate-limit | FAIL.

        Any error other than a rate-limit propagates at once; a rate-limit on
        the last backend surfaces as :class:`UpstreamRateLimitError`.
        """
        self._ensure_configured()

        last = len(self._backends) - 1
        for index, backend in enumerate(self._backends):
            try:
                result = await attempt(backend)
            except UpstreamRateLimitError as exc:
                if index == last:
                    raise UpstreamRateLimitError(RATE_LIMIT_MESSAGE) from exc
                logger.warning(
                    "Backend %s rate limited, failing over to %s",
                    backend.name,
                    self._backends[index + 1].name,
                )
                continue
            logger.info("Chat served by backend %s", backend.name)
            return backend.name, result

        raise AssertionError("unreachable: the loop returns or raises")
