"""Post-stream persistence for coach conversations.

Two independent side effects run after a turn completes, both detached from
the response stream and both best-effort: failures are logged, never
surfaced, never retried.

1. Append a ConversationRecord to the coaching-session log.
2. For longer conversations, derive and upsert a training profile.
"""

import asyncio
import logging
from typing import Any

from app.chains.extract_training_profile import extract_training_profile
from app.core.background import fire_and_forget
from app.core.config import get_settings
from app.core.logging import get_logger, log_with_context
from app.core.schemas_coach import ConversationRecord, Message, MessageRole
from app.db.coaching_sessions import insert_coaching_session
from app.db.fitness_profiles import upsert_fitness_profile

logger = get_logger(__name__)


def _workout_count(plan: dict[str, Any] | None) -> int:
    if not plan:
        return 0
    workouts = plan.get("workouts")
    return len(workouts) if isinstance(workouts, list) else 0


async def save_coaching_session(
    user_id: str,
    conversation: list[Message],
    plan: dict[str, Any] | None,
) -> None:
    """Append the conversation to the session log. Never raises."""
    record = ConversationRecord(
        user_id=user_id,
        conversation=conversation,
        plan_generated=plan is not None,
        workouts_created=_workout_count(plan),
    )
    try:
        await asyncio.to_thread(insert_coaching_session, record)
        log_with_context(
            logger,
            logging.INFO,
            "Saved coaching session",
            user_id=user_id,
            messages=len(conversation),
            plan_generated=record.plan_generated,
        )
    except Exception as e:
        logger.error(f"Error saving coaching session for {user_id}: {e}")


async def update_training_profile(user_id: str, conversation: list[Message]) -> None:
    """Derive and upsert the user's training profile. Never raises."""
    try:
        profile = await extract_training_profile(conversation)
        if profile is None:
            return
        await asyncio.to_thread(upsert_fitness_profile, user_id, profile)
        log_with_context(logger, logging.INFO, "Updated training profile", user_id=user_id)
    except Exception as e:
        # Non-critical, the conversation continues without it
        logger.warning(f"Training profile update failed for {user_id}: {e}")


def dispatch_session_persistence(
    user_id: str,
    caller_messages: list[Message],
    assistant_text: str,
    plan: dict[str, Any] | None,
) -> list[asyncio.Task]:
    """Start both persistence side effects without awaiting them.

    The caller's messages are not modified; the assistant reply is appended
    to a new list.
    """
    settings = get_settings()
    conversation = [*caller_messages, Message(role=MessageRole.ASSISTANT, content=assistant_text)]

    tasks = [
        fire_and_forget(
            save_coaching_session(user_id, conversation, plan),
            name=f"save-coaching-session-{user_id}",
        )
    ]
    if len(caller_messages) > settings.PROFILE_MIN_MESSAGES:
        tasks.append(
            fire_and_forget(
                update_training_profile(user_id, conversation),
                name=f"update-training-profile-{user_id}",
            )
        )
    return tasks
