"""Extract-document use case: turn an uploaded file into knowledge-base text."""

from __future__ import annotations

import logging

from thaina_juridico.domain.entities import ExtractionResult
from thaina_juridico.domain.exceptions import DocumentStoreError, InvalidRequestError
from thaina_juridico.domain.ports.document_store import DocumentStore
from thaina_juridico.domain.value_objects import StoragePath
from thaina_juridico.services.text_extractor import (
    MAX_STORED_CHARS,
    PREVIEW_CHARS,
    extract_text,
)

logger = logging.getLogger(__name__)


class ExtractDocumentUseCase:
    """Download → extract → store text and flag the document as knowledge base."""

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    async def execute(
        self, document_id: str | None, file_path: str | None
    ) -> ExtractionResult:
        if not document_id or not file_path:
            raise InvalidRequestError("documentId and filePath are required")
        path = StoragePath.from_string(file_path)

        try:
            data = await self._store.download_file(path.raw)
        except DocumentStoreError as exc:
            logger.error("Download error for %s: %s", path.raw, exc)
            raise DocumentStoreError("Failed to download file") from exc

        text = extract_text(path.extension, data)
        logger.info("Extracted %d chars from %s", len(text), path.raw)

        try:
            await self._store.update_document_text(document_id, text[:MAX_STORED_CHARS])
        except DocumentStoreError as exc:
            logger.error("Update error for document %s: %s", document_id, exc)
            raise DocumentStoreError("Failed to update document") from exc

        return ExtractionResult(text_length=len(text), preview=text[:PREVIEW_CHARS])
