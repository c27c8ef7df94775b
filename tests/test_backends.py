import httpx
from fakes import run

from thaina_juridico.infrastructure.backends import build_backends, eligible_descriptors
from thaina_juridico.infrastructure.config import Settings
from thaina_juridico.infrastructure.gemini_rest_adapter import GeminiRestAdapter
from thaina_juridico.infrastructure.openai_adapter import OpenAICompatibleAdapter


def _settings(**kwargs):
    values = {
        "openrouter_api_key": None,
        "openai_api_key": None,
        "gemini_api_key": None,
        "llm_backend_order": "openrouter,openai,gemini",
    }
    values.update(kwargs)
    return Settings(_env_file=None, **values)


def test_only_backends_with_credentials_are_eligible():
    settings = _settings(gemini_api_key="g", openrouter_api_key="or")
    assert [d.name for d, _ in eligible_descriptors(settings)] == ["openrouter", "gemini"]


def test_order_follows_configuration():
    settings = _settings(
        openrouter_api_key="or",
        openai_api_key="oa",
        gemini_api_key="g",
        llm_backend_order="gemini, OpenRouter,gemini,unknown",
    )
    assert [d.name for d, _ in eligible_descriptors(settings)] == ["gemini", "openrouter"]


def test_empty_key_is_not_a_credential():
    settings = _settings(openrouter_api_key="", openai_api_key="oa")
    assert [(d.name, key) for d, key in eligible_descriptors(settings)] == [("openai", "oa")]


def test_no_credentials_means_no_backends():
    async def scenario():
        async with httpx.AsyncClient() as client:
            return build_backends(_settings(), client)

    assert run(scenario()) == []


def test_build_backends_picks_adapter_per_wire_format():
    async def scenario():
        async with httpx.AsyncClient() as client:
            backends = build_backends(
                _settings(openrouter_api_key="or", gemini_api_key="g"), client
            )
            for backend in backends:
                if isinstance(backend, OpenAICompatibleAdapter):
                    await backend.close()
            return backends

    backends = run(scenario())
    assert [b.name for b in backends] == ["openrouter", "gemini"]
    assert isinstance(backends[0], OpenAICompatibleAdapter)
    assert isinstance(backends[1], GeminiRestAdapter)
