"""Tests for coach document retrieval (embedding and store mocked)."""

from unittest.mock import AsyncMock, patch

import pytest

from app.core.errors import UpstreamError
from app.core.retrieval import retrieve_documents


def _row(title, similarity, **overrides):
    row = {
        "title": title,
        "content": f"{title} content",
        "authors": ["Coach"],
        "document_type": "research",
        "similarity": similarity,
    }
    row.update(overrides)
    return row


@pytest.fixture
def embed_mock():
    with patch(
        "app.core.retrieval.embed_text_async",
        new_callable=AsyncMock,
        return_value=[0.1] * 1536,
    ) as mock:
        yield mock


@pytest.mark.asyncio
async def test_threshold_is_inclusive(embed_mock):
    rows = [_row("Exact", 0.65), _row("Below", 0.6499)]
    with patch("app.core.retrieval.match_training_documents", return_value=rows):
        documents = await retrieve_documents("taper", match_threshold=0.65, match_count=3)

    assert [d.title for d in documents] == ["Exact"]


@pytest.mark.asyncio
async def test_results_sorted_and_capped(embed_mock):
    rows = [_row("B", 0.7), _row("A", 0.9), _row("D", 0.66), _row("C", 0.8)]
    with patch("app.core.retrieval.match_training_documents", return_value=rows) as mock_match:
        documents = await retrieve_documents("taper", match_threshold=0.65, match_count=3)

    assert [d.title for d in documents] == ["A", "C", "B"]
    mock_match.assert_called_once_with([0.1] * 1536, 0.65, 3)


@pytest.mark.asyncio
async def test_defaults_come_from_settings(embed_mock):
    with patch("app.core.retrieval.match_training_documents", return_value=[]) as mock_match:
        await retrieve_documents("taper")

    _, threshold, count = mock_match.call_args.args
    assert threshold == 0.65
    assert count == 3


@pytest.mark.asyncio
async def test_embedding_failure_returns_empty():
    with patch(
        "app.core.retrieval.embed_text_async",
        new_callable=AsyncMock,
        side_effect=UpstreamError("embedding service down", status_code=503),
    ), patch("app.core.retrieval.match_training_documents") as mock_match:
        documents = await retrieve_documents("taper")

    assert documents == []
    mock_match.assert_not_called()


@pytest.mark.asyncio
async def test_store_failure_returns_empty(embed_mock):
    with patch(
        "app.core.retrieval.match_training_documents",
        side_effect=RuntimeError("connection refused"),
    ):
        assert await retrieve_documents("taper") == []


@pytest.mark.asyncio
async def test_empty_query_skips_lookup(embed_mock):
    assert await retrieve_documents("   ") == []
    embed_mock.assert_not_called()


@pytest.mark.asyncio
async def test_malformed_rows_are_skipped(embed_mock):
    rows = [_row("Good", 0.8), _row("Bad", "not a number"), _row("Single author", 0.7, authors="Noakes")]
    with patch("app.core.retrieval.match_training_documents", return_value=rows):
        documents = await retrieve_documents("taper")

    assert [d.title for d in documents] == ["Good", "Single author"]
    assert documents[1].authors == ["Noakes"]


@pytest.mark.asyncio
async def test_similarity_rounding_overshoot_is_kept(embed_mock):
    rows = [_row("Identical", 1.0000000000000002), _row("Close", 0.9)]
    with patch("app.core.retrieval.match_training_documents", return_value=rows):
        documents = await retrieve_documents("taper", match_threshold=0.65, match_count=3)

    assert [d.title for d in documents] == ["Identical", "Close"]
    assert documents[0].similarity == 1.0
