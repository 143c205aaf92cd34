"""Save coach-generated workout plans to the user's calendar."""

from datetime import date, datetime, timezone

from fastapi import APIRouter, Depends, HTTPException

from app.core.auth_middleware import AuthContext, require_auth
from app.core.logging import get_logger
from app.core.plan_validation import DEFAULT_GOAL, DEFAULT_PLAN_NAME, validate_plan_workouts
from app.core.schemas_coach import SavePlanRequest, SavePlanResponse
from app.db.training_plans import (
    create_planned_workout,
    create_training_plan,
    update_training_plan_metadata,
)

logger = get_logger(__name__)

router = APIRouter()


@router.post("/coach/plans", response_model=SavePlanResponse, response_model_by_alias=True)
async def save_coach_plan(
    request: SavePlanRequest,
    auth: AuthContext = Depends(require_auth),
) -> SavePlanResponse:
    """
    Persist a plan produced by the coach.

    Workouts missing required fields or dated before today are skipped.
    A failing workout insert does not stop the remaining ones.
    """
    plan = request.workout_plan
    try:
        validation = validate_plan_workouts(plan, today=date.today())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    logger.info(
        f"Received {validation.total_received} workouts, "
        f"{len(validation.valid_workouts)} valid, for user {auth.user_id}"
    )

    if not validation.valid_workouts:
        raise HTTPException(
            status_code=400,
            detail={
                "error": "No valid workouts found in plan",
                "totalReceived": validation.total_received,
            },
        )

    valid = validation.valid_workouts
    metadata = {
        "conversation_id": request.conversation_id,
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "total_workouts_received": validation.total_received,
        "valid_workouts_count": len(valid),
    }

    try:
        training_plan = create_training_plan(
            user_id=auth.user_id,
            name=plan.get("planName") or DEFAULT_PLAN_NAME,
            description=plan.get("planDescription") or "",
            goal=plan.get("targetRace") or DEFAULT_GOAL,
            start_date=valid[0].date.isoformat(),
            end_date=valid[-1].date.isoformat(),
            metadata=metadata,
        )
    except Exception as e:
        logger.error(f"Error creating training plan: {e}")
        raise HTTPException(status_code=500, detail="Failed to create training plan") from e

    training_plan_id = str(training_plan["id"])

    saved = 0
    for workout in valid:
        try:
            create_planned_workout(auth.user_id, training_plan_id, workout)
            saved += 1
        except Exception as e:
            logger.error(f"Error creating workout {workout.title!r} on {workout.date}: {e}")

    try:
        update_training_plan_metadata(
            training_plan_id,
            {**metadata, "workouts_created": saved, "workouts_attempted": len(valid)},
        )
    except Exception as e:
        logger.warning(f"Could not update plan metadata for {training_plan_id}: {e}")

    return SavePlanResponse(
        success=True,
        training_plan_id=training_plan_id,
        saved_workouts=saved,
        total_workouts=validation.total_received,
        valid_workouts=len(valid),
    )
