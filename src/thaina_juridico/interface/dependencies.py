"""FastAPI dependency injection wiring."""

from __future__ import annotations

import httpx

from thaina_juridico.domain.ports.llm_backend import LlmBackend
from thaina_juridico.infrastructure.backends import build_backends
from thaina_juridico.infrastructure.config import get_settings
from thaina_juridico.infrastructure.openai_adapter import OpenAICompatibleAdapter
from thaina_juridico.infrastructure.planalto_adapter import PlanaltoAdapter
from thaina_juridico.infrastructure.supabase_rest_adapter import SupabaseRestAdapter
from thaina_juridico.services.chat_gateway import ChatGatewayUseCase
from thaina_juridico.services.extract_document import ExtractDocumentUseCase
from thaina_juridico.services.import_legislation import ImportLegislationUseCase
from thaina_juridico.services.knowledge_retriever import KnowledgeRetriever

_http_client: httpx.AsyncClient | None = None
_backends: list[LlmBackend] = []


async def startup() -> None:
    """Initialise shared resources; called from the lifespan context manager."""
    global _http_client, _backends  # noqa: PLW0603

    settings = get_settings()
    _http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(settings.llm_timeout_seconds, connect=10.0)
    )
    _backends = build_backends(settings, _http_client)


async def shutdown() -> None:
    """Release shared resources."""
    global _http_client, _backends  # noqa: PLW0603

    for backend in _backends:
        if isinstance(backend, OpenAICompatibleAdapter):
            await backend.close()
    _backends = []
    if _http_client:
        await _http_client.aclose()
        _http_client = None


def _document_store() -> SupabaseRestAdapter:
    settings = get_settings()

    assert _http_client is not None, "startup() was not called"

    key = settings.supabase_service_role_key
    return SupabaseRestAdapter(
        client=_http_client,
        base_url=settings.supabase_url,
        service_key=key.get_secret_value() if key else None,
        bucket=settings.supabase_documents_bucket,
    )


def get_chat_use_case() -> ChatGatewayUseCase:
    """Build the chat use case with the configured backends and retriever."""
    return ChatGatewayUseCase(
        backends=_backends,
        retriever=KnowledgeRetriever(_document_store()),
    )


def get_extract_use_case() -> ExtractDocumentUseCase:
    return ExtractDocumentUseCase(store=_document_store())


def get_import_use_case() -> ImportLegislationUseCase:
    assert _http_client is not None, "startup() was not called"
    return ImportLegislationUseCase(
        store=_document_store(),
        fetcher=PlanaltoAdapter(client=_http_client),
    )
