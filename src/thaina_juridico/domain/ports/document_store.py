"""Port: document store — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import Protocol

from thaina_juridico.domain.entities import KnowledgeDocument, NewDocument


class DocumentStore(Protocol):
    """Abstract contract for the hosted documents table and storage bucket."""

    async def fetch_knowledge_documents(self, user_id: str) -> list[KnowledgeDocument]:
        """Return the user's knowledge-base documents that have extracted text."""
        ...

    async def knowledge_document_exists(self, user_id: str, name: str) -> bool:
        """Return True when the user already has a knowledge-base document named *name*."""
        ...

    async def insert_document(self, document: NewDocument) -> None:
        """Insert a new document row."""
        ...

    async def download_file(self, file_path: str) -> bytes:
        """Return the raw bytes of an uploaded file."""
        ...

    async def update_document_text(self, document_id: str, content_text: str) -> None:
        """Store extracted text and flag the document as knowledge base."""
        ...
