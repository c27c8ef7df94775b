"""LLM backend catalog.

Each backend is a descriptor: which settings hold its credential, model and
endpoint, which wire format it speaks, and any provider-specific extras.
Adding a backend of a known wire format is a catalog entry, not new code.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Literal, Mapping

import httpx

from thaina_juridico.domain.ports.llm_backend import LlmBackend
from thaina_juridico.infrastructure.config import Settings
from thaina_juridico.infrastructure.gemini_rest_adapter import GeminiRestAdapter
from thaina_juridico.infrastructure.openai_adapter import OpenAICompatibleAdapter

logger = logging.getLogger(__name__)

WireFormat = Literal["chat_completions", "gemini"]


@dataclass(frozen=True)
class BackendDescriptor:
    """Static description of one LLM provider."""

    name: str
    wire_format: WireFormat
    api_key_setting: str
    model_setting: str
    base_url_setting: str
    extra_headers: Mapping[str, str] = field(default_factory=dict)
    extra_body: Mapping[str, Any] = field(default_factory=dict)


BACKEND_CATALOG: Mapping[str, BackendDescriptor] = {
    "openrouter": BackendDescriptor(
        name="openrouter",
        wire_format="chat_completions",
        api_key_setting="openrouter_api_key",
        model_setting="openrouter_model",
        base_url_setting="openrouter_base_url",
        extra_headers={
            "HTTP-Referer": "https://lovable.dev",
            "X-Title": "Thaina Juridico",
        },
        extra_body={"reasoning": {"enabled": True}},
    ),
    "openai": BackendDescriptor(
        name="openai",
        wire_format="chat_completions",
        api_key_setting="openai_api_key",
        model_setting="openai_model",
        base_url_setting="openai_base_url",
    ),
    "gemini": BackendDescriptor(
        name="gemini",
        wire_format="gemini",
        api_key_setting="gemini_api_key",
        model_setting="gemini_model",
        base_url_setting="gemini_base_url",
    ),
}


def _chat_completions(
    desc: BackendDescriptor, api_key: str, settings: Settings, client: httpx.AsyncClient
) -> LlmBackend:
    return OpenAICompatibleAdapter(
        name=desc.name,
        api_key=api_key,
        model=getattr(settings, desc.model_setting),
        base_url=getattr(settings, desc.base_url_setting),
        timeout=settings.llm_timeout_seconds,
        extra_headers=desc.extra_headers,
        extra_body=desc.extra_body,
    )


def _gemini(
    desc: BackendDescriptor, api_key: str, settings: Settings, client: httpx.AsyncClient
) -> LlmBackend:
    return GeminiRestAdapter(
        client=client,
        api_key=api_key,
        model=getattr(settings, desc.model_setting),
        base_url=getattr(settings, desc.base_url_setting),
        name=desc.name,
        timeout=settings.llm_timeout_seconds,
    )


_FACTORIES: Mapping[
    WireFormat,
    Callable[[BackendDescriptor, str, Settings, httpx.AsyncClient], LlmBackend],
] = {
    "chat_completions": _chat_completions,
    "gemini": _gemini,
}


def eligible_descriptors(
    settings: Settings,
    catalog: Mapping[str, BackendDescriptor] = BACKEND_CATALOG,
) -> list[tuple[BackendDescriptor, str]]:
    """Return ``(descriptor, api_key)`` pairs in preference order.

    Only backends named in ``LLM_BACKEND_ORDER`` that have a non-empty
    credential are eligible.
    """
    eligible: list[tuple[BackendDescriptor, str]] = []
    for name in settings.backend_order:
        desc = catalog.get(name)
        if desc is None:
            logger.warning("Unknown LLM backend %r in LLM_BACKEND_ORDER, ignored", name)
            continue
        secret = getattr(settings, desc.api_key_setting)
        api_key = secret.get_secret_value() if secret else ""
        if api_key:
            eligible.append((desc, api_key))
    return eligible


def build_backends(settings: Settings, client: httpx.AsyncClient) -> list[LlmBackend]:
    """Instantiate one adapter per eligible backend, in preference order."""
    backends = [
        _FACTORIES[desc.wire_format](desc, api_key, settings, client)
        for desc, api_key in eligible_descriptors(settings)
    ]
    logger.info(
        "LLM backends in preference order: %s",
        ", ".join(b.name for b in backends) or "(none configured)",
    )
    return backends
