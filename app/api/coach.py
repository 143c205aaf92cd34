"""AI coach conversation API endpoint."""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse

from app.core.auth_middleware import AuthContext, require_auth
from app.core.coach_stream import CoachStreamConfig, generate_coach_stream
from app.core.config import get_settings
from app.core.logging import get_logger
from app.core.schemas_coach import CoachRequest

logger = get_logger(__name__)

router = APIRouter()


@router.post("/coach")
async def coach_conversation(
    request: CoachRequest,
    auth: AuthContext = Depends(require_auth),
) -> StreamingResponse:
    """
    Continue a coaching conversation with a streamed reply.

    The reply is grounded in retrieved training documents. When the coach
    produces a plan, the terminal ``complete`` event carries it.

    Args:
        request: Conversation so far and the caller's current date
        auth: Authenticated caller

    Returns:
        StreamingResponse with Server-Sent Events
    """
    settings = get_settings()

    if not settings.ANTHROPIC_API_KEY:
        raise HTTPException(
            status_code=500,
            detail="Anthropic API key not configured. Please set ANTHROPIC_API_KEY in environment.",
        )

    config = CoachStreamConfig(
        user_id=auth.user_id,
        messages=list(request.messages),
        current_date=request.current_date or date.today(),
        anthropic_api_key=settings.ANTHROPIC_API_KEY,
        anthropic_base_url=settings.ANTHROPIC_BASE_URL,
        anthropic_version=settings.ANTHROPIC_VERSION,
        coach_model=settings.COACH_MODEL,
        max_tokens=settings.COACH_MAX_TOKENS,
        timeout=settings.COACH_STREAM_TIMEOUT,
    )

    logger.info(f"Coach request from {auth.user_id}: {len(request.messages)} messages")

    return StreamingResponse(
        generate_coach_stream(config),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )
