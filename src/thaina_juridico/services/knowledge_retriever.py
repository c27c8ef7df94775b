"""Knowledge retriever — keyword-overlap ranking of knowledge-base documents.

A document's score is the number of *distinct* qualifying query tokens that
occur anywhere in its text (presence, not frequency).  Ties keep the order
in which the store returned the documents.
"""

from __future__ import annotations

import logging
from typing import Sequence

from thaina_juridico.domain.entities import KnowledgeDocument, KnowledgeExcerpt
from thaina_juridico.domain.exceptions import DocumentStoreError
from thaina_juridico.domain.ports.document_store import DocumentStore

logger = logging.getLogger(__name__)

MAX_DOCUMENTS = 3
MAX_EXCERPT_CHARS = 3000
_MIN_TOKEN_LENGTH = 4


def query_tokens(query: str) -> list[str]:
    """Lower-cased, de-duplicated whitespace tokens longer than 3 characters."""
    tokens = (t.lower() for t in query.split())
    return list(dict.fromkeys(t for t in tokens if len(t) >= _MIN_TOKEN_LENGTH))


def rank_documents(
    query: str,
    documents: Sequence[KnowledgeDocument],
    limit: int = MAX_DOCUMENTS,
    excerpt_chars: int = MAX_EXCERPT_CHARS,
) -> list[KnowledgeExcerpt]:
    """Return up to *limit* excerpts ordered by descending score."""
    tokens = query_tokens(query)
    if not tokens:
        return []

    scored: list[tuple[int, KnowledgeDocument]] = []
    for doc in documents:
        if not doc.content_text:
            continue
        haystack = doc.content_text.lower()
        score = sum(1 for t in tokens if t in haystack)
        if score > 0:
            scored.append((score, doc))

    # list.sort is stable, so equal scores stay in fetch order
    scored.sort(key=lambda item: item[0], reverse=True)
    return [
        KnowledgeExcerpt(name=doc.name, excerpt=(doc.content_text or "")[:excerpt_chars])
        for _, doc in scored[:limit]
    ]


class KnowledgeRetriever:
    """Look up a user's knowledge base and rank it against a query.

    Store failures are logged and treated as "no context" so a chat request
    never fails because of retrieval.
    """

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    async def retrieve(self, user_id: str, query: str) -> list[KnowledgeExcerpt]:
        if not query_tokens(query):
            return []
        try:
            documents = await self._store.fetch_knowledge_documents(user_id)
        except DocumentStoreError as exc:
            logger.warning("Knowledge lookup failed for user %s: %s", user_id, exc)
            return []

        excerpts = rank_documents(query, documents)
        logger.info(
            "Knowledge lookup for user %s: %d candidate(s), %d selected",
            user_id,
            len(documents),
            len(excerpts),
        )
        return excerpts
