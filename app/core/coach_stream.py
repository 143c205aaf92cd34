"""Coach streaming engine: retrieval-grounded prompt, upstream SSE, plan extraction.

One call to ``generate_coach_stream`` handles one conversation turn:

    retrieve documents -> compose system prompt -> open upstream stream
    -> forward text deltas -> on message_stop: extract plan, dispatch
    persistence, emit the complete event

Every yielded string is one SSE record carrying one StreamEvent. Exactly one
terminal event (complete or error) ends the stream.
"""

import json
from collections.abc import AsyncGenerator
from dataclasses import dataclass
from datetime import date
from typing import Any

import httpx

from app.core.coach_prompts import BASE_SYSTEM_PROMPT
from app.core.errors import UpstreamError
from app.core.logging import get_logger
from app.core.plan_extractor import extract_plan
from app.core.prompt_composer import compose_system_prompt, find_cited_documents
from app.core.retrieval import retrieve_documents
from app.core.schemas_coach import (
    CompleteEvent,
    ErrorEvent,
    Message,
    MessageRole,
    RetrievedDocument,
    SourceSummary,
    StreamEvent,
    TextDeltaEvent,
)
from app.core.session_persistence import dispatch_session_persistence

logger = get_logger(__name__)

MESSAGES_PATH = "/v1/messages"
SSE_DATA_PREFIX = "data:"


@dataclass
class CoachStreamConfig:
    """Explicit inputs for a coach streaming session."""

    user_id: str
    messages: list[Message]
    current_date: date
    anthropic_api_key: str = ""
    anthropic_base_url: str = "https://api.anthropic.com"
    anthropic_version: str = "2023-06-01"
    coach_model: str = "claude-3-opus-20240229"
    max_tokens: int = 4000
    timeout: float = 120.0


def _sse_event(event: StreamEvent) -> str:
    """Format a StreamEvent as an SSE data record."""
    return f"data: {event.model_dump_json(by_alias=True, exclude_none=True)}\n\n"


def parse_sse_record(line: str) -> dict[str, Any] | None:
    """Parse one upstream SSE line.

    Returns None for lines that are not data records (``event:`` lines,
    keep-alive blank lines). Raises ValueError for data records that are not
    a JSON object.
    """
    if not line.startswith(SSE_DATA_PREFIX):
        return None
    payload = line[len(SSE_DATA_PREFIX):].strip()
    if not payload:
        return None
    record = json.loads(payload)
    if not isinstance(record, dict):
        raise ValueError(f"SSE record is not an object: {payload[:80]}")
    return record


def _latest_user_message(messages: list[Message]) -> str:
    for message in reversed(messages):
        if message.role == MessageRole.USER and message.content.strip():
            return message.content
    return ""


def _split_messages(messages: list[Message]) -> tuple[list[dict[str, str]], list[str]]:
    """Upstream turns (user/assistant) and caller system instructions."""
    turns: list[dict[str, str]] = []
    system_texts: list[str] = []
    for message in messages:
        if not message.content.strip():
            continue
        if message.role == MessageRole.SYSTEM:
            system_texts.append(message.content)
        else:
            turns.append({"role": message.role.value, "content": message.content})
    return turns, system_texts


def _upstream_error_message(status_code: int, body: bytes) -> str:
    """Best-effort extraction of the upstream error message."""
    detail = ""
    try:
        parsed = json.loads(body.decode("utf-8", errors="replace"))
        if isinstance(parsed, dict):
            error = parsed.get("error")
            if isinstance(error, dict):
                detail = error.get("message", "")
            elif isinstance(error, str):
                detail = error
    except ValueError:
        detail = body.decode("utf-8", errors="replace")[:200]
    message = f"Coach model request failed with status {status_code}"
    return f"{message}: {detail}" if detail else message


def _complete_turn(
    config: CoachStreamConfig,
    full_text: str,
    documents: list[RetrievedDocument],
) -> CompleteEvent:
    """Extract the plan, start persistence, and build the complete event."""
    extraction = extract_plan(full_text)

    try:
        dispatch_session_persistence(config.user_id, config.messages, full_text, extraction.plan)
    except Exception as e:
        logger.error(f"Could not dispatch session persistence: {e}")

    return CompleteEvent(
        plan_found=extraction.plan_found,
        plan=extraction.plan,
        parse_error=extraction.parse_error,
        parse_error_message=extraction.parse_error_message,
        raw_json_string=extraction.raw_json_string,
        citations=find_cited_documents(full_text, documents),
        sources=[
            SourceSummary(title=d.title, authors=d.authors, similarity=d.similarity)
            for d in documents
        ],
    )


async def generate_coach_stream(
    config: CoachStreamConfig,
    http_client: httpx.AsyncClient | None = None,
) -> AsyncGenerator[str, None]:
    """Generate the SSE stream for one coach turn.

    Yields SSE events: textDelta* then exactly one of complete/error.

    Args:
        config: Turn inputs
        http_client: Client to reuse (tests inject a mock transport here);
            a private client is created and closed otherwise
    """
    # Owned by this turn only, discarded at the terminal event
    accumulated: list[str] = []
    owns_client = http_client is None
    client = http_client or httpx.AsyncClient(timeout=httpx.Timeout(config.timeout))

    try:
        documents = await retrieve_documents(_latest_user_message(config.messages))
        turns, system_texts = _split_messages(config.messages)
        system_prompt = compose_system_prompt(
            BASE_SYSTEM_PROMPT, documents, config.current_date, system_texts
        )

        payload = {
            "model": config.coach_model,
            "max_tokens": config.max_tokens,
            "system": system_prompt,
            "messages": turns,
            "stream": True,
        }
        headers = {
            "x-api-key": config.anthropic_api_key,
            "anthropic-version": config.anthropic_version,
            "content-type": "application/json",
            "accept": "text/event-stream",
        }
        url = config.anthropic_base_url.rstrip("/") + MESSAGES_PATH

        logger.info(
            f"Coach turn: messages={len(turns)}, documents={len(documents)}, "
            f"model={config.coach_model}"
        )

        async with client.stream("POST", url, headers=headers, json=payload) as response:
            if not response.is_success:
                body = await response.aread()
                message = _upstream_error_message(response.status_code, body)
                logger.error(message)
                yield _sse_event(ErrorEvent(message=message))
                return

            async for line in response.aiter_lines():
                try:
                    record = parse_sse_record(line)
                except ValueError as e:
                    logger.warning(f"Skipping malformed SSE record: {e}")
                    continue
                if record is None:
                    continue

                record_type = record.get("type")
                if record_type == "content_block_delta":
                    delta = record.get("delta") or {}
                    text = delta.get("text") if delta.get("type") == "text_delta" else None
                    if text:
                        accumulated.append(text)
                        yield _sse_event(TextDeltaEvent(text=text))
                elif record_type == "message_stop":
                    full_text = "".join(accumulated)
                    yield _sse_event(_complete_turn(config, full_text, documents))
                    return
                elif record_type == "error":
                    error = record.get("error") or {}
                    raise UpstreamError(error.get("message") or "Coach model stream error")

            raise UpstreamError("Coach model stream ended before message_stop")

    except Exception as e:
        logger.error(f"Error in coach stream: {e}", exc_info=True)
        yield _sse_event(ErrorEvent(message=str(e)))
    finally:
        if owns_client:
            await client.aclose()
