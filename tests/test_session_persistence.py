"""Tests for post-stream session persistence."""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from app.core.schemas_coach import Message, MessageRole, TrainingProfile
from app.core.session_persistence import (
    dispatch_session_persistence,
    save_coaching_session,
    update_training_profile,
)

USER_ID = "user-123"


def _conversation(n: int) -> list[Message]:
    roles = [MessageRole.USER, MessageRole.ASSISTANT]
    return [Message(role=roles[i % 2], content=f"message {i}") for i in range(n)]


class TestDispatch:
    @pytest.mark.asyncio
    async def test_short_conversation_only_saves_session(self):
        messages = _conversation(3)
        with patch(
            "app.core.session_persistence.save_coaching_session", new_callable=AsyncMock
        ) as save, patch(
            "app.core.session_persistence.update_training_profile", new_callable=AsyncMock
        ) as update:
            tasks = dispatch_session_persistence(USER_ID, messages, "Reply", None)
            await asyncio.gather(*tasks)

        assert len(tasks) == 1
        save.assert_awaited_once()
        update.assert_not_called()

    @pytest.mark.asyncio
    async def test_longer_conversation_updates_profile(self):
        messages = _conversation(4)
        plan = {"planName": "Base", "workouts": []}
        with patch(
            "app.core.session_persistence.save_coaching_session", new_callable=AsyncMock
        ) as save, patch(
            "app.core.session_persistence.update_training_profile", new_callable=AsyncMock
        ) as update:
            tasks = dispatch_session_persistence(USER_ID, messages, "Reply", plan)
            await asyncio.gather(*tasks)

        assert len(tasks) == 2
        user_id, conversation, saved_plan = save.call_args.args
        assert user_id == USER_ID
        assert saved_plan is plan
        assert conversation[-1] == Message(role=MessageRole.ASSISTANT, content="Reply")
        assert len(conversation) == 5
        update.assert_awaited_once_with(USER_ID, conversation)

    @pytest.mark.asyncio
    async def test_caller_messages_are_not_modified(self):
        messages = _conversation(2)
        with patch(
            "app.core.session_persistence.save_coaching_session", new_callable=AsyncMock
        ):
            tasks = dispatch_session_persistence(USER_ID, messages, "Reply", None)
            await asyncio.gather(*tasks)

        assert messages == _conversation(2)


class TestSaveCoachingSession:
    @pytest.mark.asyncio
    async def test_record_contents(self):
        plan = {"workouts": [{"title": "a"}, {"title": "b"}]}
        with patch("app.core.session_persistence.insert_coaching_session") as insert:
            await save_coaching_session(USER_ID, _conversation(2), plan)

        record = insert.call_args.args[0]
        assert record.user_id == USER_ID
        assert record.plan_generated is True
        assert record.workouts_created == 2
        assert len(record.conversation) == 2

    @pytest.mark.asyncio
    async def test_no_plan(self):
        with patch("app.core.session_persistence.insert_coaching_session") as insert:
            await save_coaching_session(USER_ID, _conversation(2), None)

        record = insert.call_args.args[0]
        assert record.plan_generated is False
        assert record.workouts_created == 0

    @pytest.mark.asyncio
    async def test_store_failure_is_swallowed(self):
        with patch(
            "app.core.session_persistence.insert_coaching_session",
            side_effect=RuntimeError("db down"),
        ):
            await save_coaching_session(USER_ID, _conversation(2), None)


class TestUpdateTrainingProfile:
    @pytest.mark.asyncio
    async def test_upserts_extracted_profile(self):
        profile = TrainingProfile(experience_level="intermediate", weekly_mileage=30)
        with patch(
            "app.core.session_persistence.extract_training_profile",
            new_callable=AsyncMock,
            return_value=profile,
        ), patch("app.core.session_persistence.upsert_fitness_profile") as upsert:
            await update_training_profile(USER_ID, _conversation(5))

        upsert.assert_called_once_with(USER_ID, profile)

    @pytest.mark.asyncio
    async def test_no_profile_skips_upsert(self):
        with patch(
            "app.core.session_persistence.extract_training_profile",
            new_callable=AsyncMock,
            return_value=None,
        ), patch("app.core.session_persistence.upsert_fitness_profile") as upsert:
            await update_training_profile(USER_ID, _conversation(5))

        upsert.assert_not_called()

    @pytest.mark.asyncio
    async def test_extraction_failure_is_swallowed(self):
        with patch(
            "app.core.session_persistence.extract_training_profile",
            new_callable=AsyncMock,
            side_effect=RuntimeError("model unavailable"),
        ), patch("app.core.session_persistence.upsert_fitness_profile") as upsert:
            await update_training_profile(USER_ID, _conversation(5))

        upsert.assert_not_called()
