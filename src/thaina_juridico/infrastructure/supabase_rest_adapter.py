"""Supabase REST adapter — implements the DocumentStore port.

Talks to PostgREST (``/rest/v1``) for the ``documents`` table and to the
Storage API (``/storage/v1``) for uploaded files, authenticated with the
service-role key.
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any

import httpx

from thaina_juridico.domain.entities import KnowledgeDocument, NewDocument
from thaina_juridico.domain.exceptions import DocumentStoreError

logger = logging.getLogger(__name__)

_TABLE = "documents"


class SupabaseRestAdapter:
    """Concrete DocumentStore backed by the Supabase REST and Storage APIs."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str | None,
        service_key: str | None,
        bucket: str = "documents",
    ) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/") if base_url else None
        self._bucket = bucket
        self._headers: dict[str, str] = {}
        if service_key:
            self._headers = {
                "apikey": service_key,
                "Authorization": f"Bearer {service_key}",
            }

    async def fetch_knowledge_documents(self, user_id: str) -> list[KnowledgeDocument]:
        """GET documents?user_id=eq.{id}&is_knowledge_base=eq.true → [KnowledgeDocument]."""
        resp = await self._request(
            "GET",
            f"/rest/v1/{_TABLE}",
            params={
                "select": "name,content_text",
                "user_id": f"eq.{user_id}",
                "is_knowledge_base": "eq.true",
                "content_text": "not.is.null",
            },
        )
        rows: list[dict[str, Any]] = resp.json()
        return [
            KnowledgeDocument(name=row.get("name", ""), content_text=row.get("content_text"))
            for row in rows
            if row.get("content_text")
        ]

    async def knowledge_document_exists(self, user_id: str, name: str) -> bool:
        resp = await self._request(
            "GET",
            f"/rest/v1/{_TABLE}",
            params={
                "select": "id",
                "user_id": f"eq.{user_id}",
                "name": f"eq.{name}",
                "is_knowledge_base": "eq.true",
                "limit": "1",
            },
        )
        return bool(resp.json())

    async def insert_document(self, document: NewDocument) -> None:
        """POST documents with a single row."""
        await self._request(
            "POST",
            f"/rest/v1/{_TABLE}",
            json=asdict(document),
            headers={"Prefer": "return=minimal"},
        )

    async def download_file(self, file_path: str) -> bytes:
        """GET /storage/v1/object/{bucket}/{path} → raw bytes."""
        resp = await self._request(
            "GET", f"/storage/v1/object/{self._bucket}/{file_path.lstrip('/')}"
        )
        return resp.content

    async def update_document_text(self, document_id: str, content_text: str) -> None:
        """PATCH documents?id=eq.{id} with the extracted text."""
        await self._request(
            "PATCH",
            f"/rest/v1/{_TABLE}",
            params={"id": f"eq.{document_id}"},
            json={"content_text": content_text, "is_knowledge_base": True},
            headers={"Prefer": "return=minimal"},
        )

    async def _request(
        self,
        method: str,
        endpoint: str,
        *,
        params: dict[str, str] | None = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Perform a Supabase request with error translation."""
        if not self._base_url or not self._headers:
            raise DocumentStoreError(
                "Supabase is not configured. Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY."
            )

        url = f"{self._base_url}{endpoint}"
        try:
            resp = await self._client.request(
                method,
                url,
                params=params,
                json=json,
                headers={**self._headers, **(headers or {})},
            )
        except httpx.HTTPError as exc:
            raise DocumentStoreError(f"Network error calling {url}: {exc}") from exc

        if resp.is_success:
            return resp

        logger.error("Supabase %s %s → HTTP %s: %s", method, endpoint, resp.status_code, resp.text[:500])
        raise DocumentStoreError(
            f"Supabase returned HTTP {resp.status_code} for {method} {endpoint}"
        )
