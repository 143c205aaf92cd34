"""Structural validation of generated plans at the persistence boundary.

The plan extractor hands plans over unvalidated. Before anything is written,
each workout is checked for its required fields and for a date on or after
the save date; workouts that fail are skipped, not repaired.
"""

import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from pydantic import TypeAdapter, ValidationError

from app.core.logging import get_logger
from app.core.schemas_coach import RunWorkout, WeightliftingWorkout, Workout

logger = get_logger(__name__)

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_WORKOUT_ADAPTER = TypeAdapter(Workout)

WORKOUT_TYPES = ("run", "weightlifting")
DEFAULT_GOAL = "General fitness"
DEFAULT_PLAN_NAME = "AI Training Plan"


@dataclass
class PlanValidation:
    """Workouts that may be stored, and the ones skipped with a reason."""

    valid_workouts: list[RunWorkout | WeightliftingWorkout] = field(default_factory=list)
    skipped: list[tuple[int, str]] = field(default_factory=list)
    total_received: int = 0


def _skip_reason(raw: Any, today: date) -> str | None:
    """Reason a raw workout cannot be stored, or None."""
    if not isinstance(raw, dict):
        return "not an object"
    if not raw.get("title") or not raw.get("date") or not raw.get("type"):
        return "missing title, date or type"
    if not isinstance(raw["date"], str) or not _ISO_DATE_RE.match(raw["date"]):
        return f"date {raw['date']!r} is not YYYY-MM-DD"
    if raw["type"] not in WORKOUT_TYPES:
        return f"unknown workout type {raw['type']!r}"
    if raw["type"] == "run" and (not raw.get("runType") or raw.get("distance") is None):
        return "run workout missing runType or distance"
    if raw["type"] == "weightlifting" and (not raw.get("focusArea") or not raw.get("duration")):
        return "weightlifting workout missing focusArea or duration"
    try:
        if date.fromisoformat(raw["date"]) < today:
            return f"date {raw['date']} is in the past"
    except ValueError:
        return f"date {raw['date']!r} is not a calendar date"
    return None


def validate_plan_workouts(plan: dict[str, Any], today: date) -> PlanValidation:
    """
    Split a plan's workouts into storable and skipped.

    Args:
        plan: Plan object as produced by the extractor (camelCase keys)
        today: Save date; earlier workout dates are rejected

    Returns:
        PlanValidation, valid workouts in their original order

    Raises:
        ValueError: If the plan has no workouts list
    """
    workouts = plan.get("workouts") if isinstance(plan, dict) else None
    if not isinstance(workouts, list):
        raise ValueError("Invalid workout plan: workouts must be a list")

    result = PlanValidation(total_received=len(workouts))
    for index, raw in enumerate(workouts):
        reason = _skip_reason(raw, today)
        if reason is None:
            try:
                result.valid_workouts.append(_WORKOUT_ADAPTER.validate_python(raw))
                continue
            except ValidationError as e:
                reason = f"invalid fields: {e.error_count()} errors"
        logger.warning(f"Skipping workout {index}: {reason}")
        result.skipped.append((index, reason))

    return result
