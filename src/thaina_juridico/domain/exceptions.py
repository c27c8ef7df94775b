"""Domain exception hierarchy.

Each exception maps to a specific HTTP status code at the interface layer.
Inner layers raise these; the outermost error-handler translates them.
"""

from __future__ import annotations


class ThainaError(Exception):
    """Base exception for the entire application."""


# ── Input validation ────────────────────────────────────────────────────────


class InvalidRequestError(ThainaError):
    """A required request field is missing or malformed."""


# ── Configuration ───────────────────────────────────────────────────────────


class ConfigError(ThainaError):
    """No LLM backend (or other collaborator) is configured."""


# ── LLM backend errors ──────────────────────────────────────────────────────


class UpstreamError(ThainaError):
    """An LLM backend failed (non-2xx, network or parse failure)."""


class UpstreamRateLimitError(UpstreamError):
    """An LLM backend answered HTTP 429."""


# ── Collaborator errors ─────────────────────────────────────────────────────


class DocumentStoreError(ThainaError):
    """The hosted document table or storage bucket could not be reached."""


class LegislationFetchError(ThainaError):
    """An official legislation page could not be downloaded."""


class ExtractionError(ThainaError):
    """Text could not be extracted from an uploaded file."""
