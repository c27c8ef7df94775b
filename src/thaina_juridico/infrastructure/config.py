"""Application configuration — loaded from environment variables."""

from __future__ import annotations

from functools import lru_cache

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration loaded from env vars (or ``.env`` file)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # LLM backends: a backend is eligible only when its key is set
    openrouter_api_key: SecretStr | None = None
    openrouter_model: str = "openai/gpt-oss-120b:free"
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    openai_api_key: SecretStr | None = None
    openai_model: str = "gpt-4o-mini"
    openai_base_url: str = "https://api.openai.com/v1"
    gemini_api_key: SecretStr | None = None
    gemini_model: str = "gemini-2.0-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    llm_backend_order: str = "openrouter,openai,gemini"
    llm_timeout_seconds: float = 60.0

    # Supabase (documents table + storage bucket)
    supabase_url: str | None = None
    supabase_service_role_key: SecretStr | None = None
    supabase_documents_bucket: str = "documents"

    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    @property
    def backend_order(self) -> list[str]:
        """Backend names in preference order, lower-cased and de-duplicated."""
        names = [n.strip().lower() for n in self.llm_backend_order.split(",")]
        return list(dict.fromkeys(n for n in names if n))


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the singleton application settings (cached after first call)."""
    return Settings()
