"""Per-user training profile, one row per user."""

from datetime import datetime, timezone
from typing import Any

from app.core.schemas_coach import TrainingProfile
from app.db.supabase_client import get_supabase


def upsert_fitness_profile(user_id: str, profile: TrainingProfile) -> dict[str, Any] | None:
    """Insert or replace the ``user_fitness_profiles`` row for ``user_id``."""
    supabase = get_supabase()
    row = {
        "user_id": user_id,
        "experience_level": profile.experience_level,
        "weekly_mileage_avg": profile.weekly_mileage,
        "target_race": profile.target_race,
        "training_paces": profile.pace_information,
        "injuries_history": profile.injury_history,
        "updated_at": datetime.now(timezone.utc).isoformat(),
    }
    result = supabase.table("user_fitness_profiles").upsert(row, on_conflict="user_id").execute()
    return result.data[0] if result.data else None
