"""Append-only log of completed coach conversations."""

from typing import Any

from app.core.schemas_coach import ConversationRecord
from app.db.supabase_client import get_supabase


def insert_coaching_session(record: ConversationRecord) -> dict[str, Any] | None:
    """Insert one ``ai_coaching_sessions`` row. Rows are never updated."""
    supabase = get_supabase()
    result = (
        supabase.table("ai_coaching_sessions")
        .insert(
            {
                "user_id": record.user_id,
                "conversation": [m.model_dump(mode="json") for m in record.conversation],
                "plan_generated": record.plan_generated,
                "workouts_created": record.workouts_created,
            }
        )
        .execute()
    )
    return result.data[0] if result.data else None
