"""Import-legislation use case: fills a user's knowledge base from Planalto."""

from __future__ import annotations

import logging
from typing import Sequence

from thaina_juridico.domain.entities import (
    ImportOutcome,
    ImportStatus,
    Legislation,
    NewDocument,
)
from thaina_juridico.domain.exceptions import InvalidRequestError, ThainaError
from thaina_juridico.domain.ports.document_store import DocumentStore
from thaina_juridico.domain.ports.legislation_fetcher import LegislationFetcher
from thaina_juridico.domain.value_objects import planalto_file_path
from thaina_juridico.services.legislation_catalog import LEGISLATIONS
from thaina_juridico.services.text_extractor import MAX_STORED_CHARS, clean_html

logger = logging.getLogger(__name__)

KNOWLEDGE_FOLDER = "Banco de Dados"


class ImportLegislationUseCase:
    """Fetch each catalog entry and store it as a knowledge-base document.

    Entries are processed one at a time; a failure is recorded in the
    outcome list and the run moves on to the next entry.
    """

    def __init__(
        self,
        store: DocumentStore,
        fetcher: LegislationFetcher,
        legislations: Sequence[Legislation] = LEGISLATIONS,
    ) -> None:
        self._store = store
        self._fetcher = fetcher
        self._legislations = legislations

    async def execute(self, user_id: str | None) -> list[ImportOutcome]:
        if not user_id:
            raise InvalidRequestError("userId is required")

        outcomes: list[ImportOutcome] = []
        for leg in self._legislations:
            try:
                outcomes.append(await self._import_one(user_id, leg))
            except ThainaError as exc:
                logger.error("Error processing %s: %s", leg.name, exc)
                outcomes.append(
                    ImportOutcome(name=leg.name, status=ImportStatus.ERROR, error=str(exc))
                )
        return outcomes

    async def _import_one(self, user_id: str, leg: Legislation) -> ImportOutcome:
        if await self._store.knowledge_document_exists(user_id, leg.name):
            return ImportOutcome(name=leg.name, status=ImportStatus.ALREADY_EXISTS)

        logger.info("Fetching %s...", leg.name)
        text = clean_html(await self._fetcher.fetch_html(leg.url))[:MAX_STORED_CHARS]

        await self._store.insert_document(
            NewDocument(
                user_id=user_id,
                name=leg.name,
                file_path=planalto_file_path(leg.name),
                file_type="TXT",
                file_size=len(text),
                folder=KNOWLEDGE_FOLDER,
                content_text=text,
            )
        )
        return ImportOutcome(name=leg.name, status=ImportStatus.SUCCESS, chars=len(text))
