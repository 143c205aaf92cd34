"""Training plans and their planned workouts."""

from typing import Any

from app.core.schemas_coach import RunWorkout, WeightliftingWorkout
from app.db.supabase_client import get_supabase


def create_training_plan(
    user_id: str,
    name: str,
    description: str,
    goal: str,
    start_date: str,
    end_date: str,
    metadata: dict[str, Any],
) -> dict[str, Any]:
    """Insert a ``training_plans`` row created by the coach."""
    supabase = get_supabase()
    result = (
        supabase.table("training_plans")
        .insert(
            {
                "user_id": user_id,
                "name": name,
                "description": description,
                "goal": goal,
                "start_date": start_date,
                "end_date": end_date,
                "created_by": "AI",
                "metadata": metadata,
            }
        )
        .execute()
    )
    if not result.data:
        raise RuntimeError("Training plan insert returned no row")
    return result.data[0]


def create_planned_workout(
    user_id: str,
    training_plan_id: str,
    workout: RunWorkout | WeightliftingWorkout,
) -> str:
    """Insert a planned workout and its type-specific detail row.

    Returns:
        The new workout id
    """
    supabase = get_supabase()
    result = (
        supabase.table("workouts")
        .insert(
            {
                "user_id": user_id,
                "title": workout.title,
                "date": workout.date.isoformat(),
                "type": workout.type,
                "notes": workout.notes or "",
                "status": "planned",
                "training_plan_id": training_plan_id,
            }
        )
        .execute()
    )
    if not result.data:
        raise RuntimeError(f"Workout insert returned no row for {workout.title!r}")
    workout_id = result.data[0]["id"]

    if isinstance(workout, RunWorkout):
        supabase.table("run_workouts").insert(
            {
                "id": workout_id,
                "run_type": workout.run_type,
                "planned_distance": workout.distance,
                "planned_pace": workout.pace,
            }
        ).execute()
    else:
        supabase.table("weightlifting_workouts").insert(
            {
                "id": workout_id,
                "focus_area": workout.focus_area,
                "planned_duration": workout.duration,
            }
        ).execute()

    return workout_id


def update_training_plan_metadata(training_plan_id: str, metadata: dict[str, Any]) -> None:
    supabase = get_supabase()
    supabase.table("training_plans").update({"metadata": metadata}).eq(
        "id", training_plan_id
    ).execute()
