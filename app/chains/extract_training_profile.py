"""LLM chain for deriving a runner's training profile from a conversation.

Reads only what the runner said (user turns) and asks a small model for
experience level, weekly mileage, target race, paces and injury history.
"""

from pydantic import ValidationError

from app.core.config import get_settings
from app.core.llm import get_anthropic_client, parse_llm_json, response_text
from app.core.logging import get_logger
from app.core.schemas_coach import Message, MessageRole, TrainingProfile

logger = get_logger(__name__)


SYSTEM_PROMPT = """You're an exercise physiologist analyzing a conversation between a runner and coach.
Extract key training information:
1. Runner's experience level
2. Weekly mileage
3. Target race distance
4. Training pace information
5. Injury history

Output a ```json fenced block with exactly these fields:
{
  "experience_level": "string or null",
  "weekly_mileage": "number or null",
  "target_race": "string or null",
  "pace_information": "string or null",
  "injury_history": "string or null"
}
If information is not available, use null."""

USER_TEMPLATE = "Here is a conversation with a runner. Extract key training information: {user_text}"


async def extract_training_profile(conversation: list[Message]) -> TrainingProfile | None:
    """
    Derive a training profile from the runner's side of a conversation.

    Args:
        conversation: Full message history

    Returns:
        TrainingProfile, or None when the runner said nothing usable or the
        model reply could not be parsed

    Raises:
        anthropic.APIError: If the completion request fails
    """
    user_text = " ".join(
        m.content for m in conversation if m.role == MessageRole.USER and m.content.strip()
    )
    if not user_text:
        return None

    settings = get_settings()
    client = get_anthropic_client()

    response = await client.messages.create(
        model=settings.PROFILE_MODEL,
        max_tokens=settings.PROFILE_MAX_TOKENS,
        system=SYSTEM_PROMPT,
        messages=[{"role": "user", "content": USER_TEMPLATE.format(user_text=user_text)}],
    )

    text = response_text(response)
    try:
        profile = parse_llm_json(text, TrainingProfile)
    except (ValueError, ValidationError) as e:
        # json.JSONDecodeError is a ValueError
        logger.warning(f"Could not parse training profile reply: {e}")
        return None

    if profile.is_empty():
        logger.debug("Training profile reply had no usable fields")
        return None
    return profile
