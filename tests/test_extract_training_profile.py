"""Tests for the training profile extraction chain (Anthropic mocked)."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from app.chains.extract_training_profile import extract_training_profile
from app.core.schemas_coach import Message, MessageRole


def _response(text: str):
    block = MagicMock()
    block.type = "text"
    block.text = text
    response = MagicMock()
    response.content = [block]
    return response


def _client(text: str):
    client = MagicMock()
    client.messages.create = AsyncMock(return_value=_response(text))
    return client


CONVERSATION = [
    Message(role=MessageRole.USER, content="I run about 25 miles a week."),
    Message(role=MessageRole.ASSISTANT, content="What race are you targeting?"),
    Message(role=MessageRole.USER, content="A half marathon in May. My knee hurt last year."),
]


@pytest.mark.asyncio
async def test_extracts_profile_from_fenced_reply():
    reply = """```json
{
  "experience_level": "intermediate",
  "weekly_mileage": 25,
  "target_race": "half marathon",
  "pace_information": null,
  "injury_history": "knee pain last year", // from second message
}
```"""
    client = _client(reply)
    with patch("app.chains.extract_training_profile.get_anthropic_client", return_value=client):
        profile = await extract_training_profile(CONVERSATION)

    assert profile.weekly_mileage == 25
    assert profile.target_race == "half marathon"
    assert profile.injury_history == "knee pain last year"

    kwargs = client.messages.create.call_args.kwargs
    user_content = kwargs["messages"][0]["content"]
    assert "25 miles a week" in user_content
    assert "half marathon in May" in user_content
    assert "What race are you targeting?" not in user_content


@pytest.mark.asyncio
async def test_unparseable_reply_returns_none():
    with patch(
        "app.chains.extract_training_profile.get_anthropic_client",
        return_value=_client("I could not find anything useful."),
    ):
        assert await extract_training_profile(CONVERSATION) is None


@pytest.mark.asyncio
async def test_all_null_reply_returns_none():
    reply = (
        '{"experience_level": null, "weekly_mileage": null, "target_race": null, '
        '"pace_information": null, "injury_history": null}'
    )
    with patch(
        "app.chains.extract_training_profile.get_anthropic_client",
        return_value=_client(reply),
    ):
        assert await extract_training_profile(CONVERSATION) is None


@pytest.mark.asyncio
async def test_no_user_text_skips_model_call():
    with patch("app.chains.extract_training_profile.get_anthropic_client") as get_client:
        profile = await extract_training_profile(
            [Message(role=MessageRole.ASSISTANT, content="Hi! What are your goals?")]
        )

    assert profile is None
    get_client.assert_not_called()
