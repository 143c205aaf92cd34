"""Training-document corpus: vector search and chunk storage.

Rows live in ``training_documents``; similarity search goes through the
``match_training_documents(query_embedding, match_threshold, match_count)``
RPC, which returns rows ordered by descending ``similarity``.
"""

from typing import Any

from app.core.logging import get_logger
from app.db.supabase_client import get_supabase

logger = get_logger(__name__)

TABLE = "training_documents"


def match_training_documents(
    query_embedding: list[float],
    match_threshold: float,
    match_count: int,
) -> list[dict[str, Any]]:
    """Run the similarity-search RPC and return the raw rows."""
    supabase = get_supabase()
    result = supabase.rpc(
        "match_training_documents",
        {
            "query_embedding": query_embedding,
            "match_threshold": match_threshold,
            "match_count": match_count,
        },
    ).execute()
    return result.data or []


def insert_document_chunk(row: dict[str, Any]) -> str | None:
    """Insert one embedded chunk. Returns the new row id, if reported."""
    supabase = get_supabase()
    result = supabase.table(TABLE).insert(row).execute()
    if result.data:
        return result.data[0].get("id")
    return None
