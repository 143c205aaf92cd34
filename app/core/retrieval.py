"""Document retrieval for the coach: embed the query, search the corpus.

Retrieval is best-effort context enrichment. Any failure (embedding or
store) degrades to an empty result so the conversation can proceed
without citations.

Usage:
    from app.core.retrieval import retrieve_documents

    documents = await retrieve_documents("How long should my taper be?")
"""

from __future__ import annotations

import asyncio
from typing import Any

from pydantic import ValidationError

from app.core.config import get_settings
from app.core.embeddings import embed_text_async
from app.core.logging import get_logger
from app.core.schemas_coach import RetrievedDocument
from app.db.training_documents import match_training_documents

logger = get_logger(__name__)


def _to_document(row: dict[str, Any]) -> RetrievedDocument | None:
    """Map a store row to a RetrievedDocument, skipping unusable rows."""
    authors = row.get("authors") or []
    if isinstance(authors, str):
        authors = [authors]
    try:
        # 1 - cosine distance can overshoot the unit range by rounding
        similarity = float(row.get("similarity", 0.0))
        return RetrievedDocument(
            title=row.get("title") or "Untitled",
            content=row.get("content") or "",
            document_type=row.get("document_type") or "research",
            authors=[str(a) for a in authors],
            similarity=min(max(similarity, 0.0), 1.0),
        )
    except (ValidationError, TypeError, ValueError) as e:
        logger.debug(f"Skipping malformed document row: {e}")
        return None


async def retrieve_documents(
    query: str,
    match_threshold: float | None = None,
    match_count: int | None = None,
) -> list[RetrievedDocument]:
    """Return the most similar training documents for a query.

    Args:
        query: Free text to search for (usually the latest user message)
        match_threshold: Minimum similarity, inclusive (default from settings)
        match_count: Max documents returned (default from settings)

    Returns:
        Documents ordered most similar first; empty on any failure
    """
    if not query or not query.strip():
        return []

    settings = get_settings()
    threshold = settings.RETRIEVAL_MATCH_THRESHOLD if match_threshold is None else match_threshold
    count = settings.RETRIEVAL_MATCH_COUNT if match_count is None else match_count

    try:
        embedding = await embed_text_async(query)
    except Exception as e:
        logger.warning(f"Query embedding failed, continuing without context: {e}")
        return []

    try:
        rows = await asyncio.to_thread(match_training_documents, embedding, threshold, count)
    except Exception as e:
        logger.warning(f"Document search failed, continuing without context: {e}")
        return []

    documents = [doc for doc in (_to_document(row) for row in rows) if doc is not None]

    # The store applies the threshold too; enforce it here so the prompt never
    # carries a document below it.
    documents = [doc for doc in documents if doc.similarity >= threshold]
    documents.sort(key=lambda d: d.similarity, reverse=True)
    documents = documents[:count]

    logger.info(
        f"Retrieved {len(documents)} training documents "
        f"(threshold={threshold}, count={count})"
    )
    return documents
