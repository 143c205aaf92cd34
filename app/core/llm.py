"""LLM client utilities for one-shot (non-streaming) coach chains."""

import json
import re
from typing import TypeVar

from anthropic import AsyncAnthropic
from pydantic import BaseModel

from app.core.config import get_settings
from app.core.plan_extractor import sanitize_json_text

T = TypeVar("T", bound=BaseModel)


def get_anthropic_client(api_key: str | None = None) -> AsyncAnthropic:
    """
    Get an async Anthropic client.

    Args:
        api_key: Key override (defaults to ANTHROPIC_API_KEY)

    Returns:
        AsyncAnthropic instance
    """
    settings = get_settings()
    return AsyncAnthropic(api_key=api_key or settings.ANTHROPIC_API_KEY)


def response_text(response) -> str:
    """Join the text blocks of an Anthropic messages response."""
    return "".join(
        block.text for block in response.content if getattr(block, "type", None) == "text"
    )


def _strip_llm_fences(raw_output: str) -> str:
    """Strip markdown code fences from LLM output.

    Handles: ```json ... ```, ``` ... ```, leading/trailing whitespace.
    """
    cleaned = raw_output.strip()

    fence_match = re.search(r"```(?:json)?\s*\n?(.*?)```", cleaned, re.DOTALL)
    if fence_match:
        return fence_match.group(1).strip()

    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    return cleaned.strip()


def parse_llm_json(raw_output: str, model: type[T]) -> T:
    """
    Parse LLM output as JSON and validate against a Pydantic model.

    Handles common LLM response quirks:
    - Markdown code fences (```json ... ```)
    - Comments and trailing commas
    - Leading/trailing whitespace

    Args:
        raw_output: Raw string from LLM response
        model: Pydantic model class to validate against

    Returns:
        Validated Pydantic model instance

    Raises:
        json.JSONDecodeError: If JSON parsing fails after cleanup
        pydantic.ValidationError: If parsed JSON doesn't match schema
    """
    cleaned = sanitize_json_text(_strip_llm_fences(raw_output))
    parsed = json.loads(cleaned)
    return model.model_validate(parsed)
