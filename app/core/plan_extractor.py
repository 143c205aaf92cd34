"""Workout plan extraction from accumulated coach replies.

The coach embeds its final plan in a ```json fenced block. The model is told
to emit strict JSON but occasionally adds comments or trailing commas, so the
captured block goes through ``sanitize_json_text`` before parsing. The
sanitizer only removes those constructs and leaves string literals untouched.
"""

import json
import re
from dataclasses import dataclass
from typing import Any

from app.core.logging import get_logger

logger = get_logger(__name__)

_FENCED_JSON_RE = re.compile(r"```json\s*(.*?)\s*```", re.DOTALL | re.IGNORECASE)

# String literals are matched first so comment markers inside them survive
_STRING = r'(?P<string>"(?:\\.|[^"\\])*")'
_COMMENT_RE = re.compile(
    _STRING + r"|(?P<block>/\*.*?\*/)|(?P<line>(?://|#)[^\n]*)",
    re.DOTALL,
)
_TRAILING_COMMA_RE = re.compile(_STRING + r"|(?P<comma>,(?:\s*,)*(?=\s*[}\]]))", re.DOTALL)


@dataclass
class PlanExtraction:
    """Outcome of scanning one assistant reply for a plan."""

    plan_found: bool = False
    plan: dict[str, Any] | None = None
    parse_error: bool = False
    parse_error_message: str | None = None
    raw_json_string: str | None = None


def _keep_strings(match: re.Match) -> str:
    return match.group("string") or ""


def strip_json_comments(text: str) -> str:
    """Remove ``//`` and ``#`` line comments and ``/* */`` block comments."""
    return _COMMENT_RE.sub(_keep_strings, text)


def strip_trailing_commas(text: str) -> str:
    """Remove commas, or runs of commas, that directly precede a closing ``]`` or ``}``."""
    return _TRAILING_COMMA_RE.sub(_keep_strings, text)


def sanitize_json_text(text: str) -> str:
    """Strip comments, then trailing commas. Idempotent on its own output."""
    return strip_trailing_commas(strip_json_comments(text))


def find_fenced_json(text: str) -> str | None:
    """Return the contents of the first ```json fenced block, if any."""
    match = _FENCED_JSON_RE.search(text or "")
    if not match:
        return None
    return match.group(1)


def extract_plan(full_text: str) -> PlanExtraction:
    """
    Find, sanitize and parse the plan block in an assistant reply.

    No block is a normal outcome (the coach may still be asking questions).
    A block that fails to parse is reported with the original, unsanitized
    text so the caller can show or salvage it. Plan fields and dates are not
    validated here.

    Args:
        full_text: The complete accumulated assistant text

    Returns:
        PlanExtraction describing what was found
    """
    raw_block = find_fenced_json(full_text)
    if raw_block is None:
        return PlanExtraction()

    cleaned = sanitize_json_text(raw_block)
    try:
        parsed = json.loads(cleaned)
    except (json.JSONDecodeError, RecursionError) as e:
        # Deeply nested blocks exhaust the decoder instead of failing to parse
        logger.warning(f"Plan block failed to parse: {e}")
        return PlanExtraction(
            parse_error=True,
            parse_error_message=str(e),
            raw_json_string=raw_block,
        )

    plan = None
    if isinstance(parsed, dict):
        nested = parsed.get("workoutPlan")
        if isinstance(nested, dict):
            plan = nested
        elif "workouts" in parsed:
            plan = parsed

    if plan is None:
        logger.debug("Fenced JSON block carries no workoutPlan object")
        return PlanExtraction()

    workouts = plan.get("workouts")
    logger.info(
        f"Extracted workout plan with "
        f"{len(workouts) if isinstance(workouts, list) else 0} workouts"
    )
    return PlanExtraction(plan_found=True, plan=plan)
