"""Tests for training document ingestion (embeddings and store mocked)."""

from pathlib import Path
from unittest.mock import patch

import pytest

from app.core.document_ingestion import (
    DocumentMetadata,
    ingest_directory,
    ingest_document,
    metadata_from_file,
)
from app.core.errors import UpstreamError


def _fake_embed(texts):
    return [[0.1] * 1536 for _ in texts]


@pytest.fixture
def embed_mock():
    with patch("app.core.document_ingestion.embed_texts", side_effect=_fake_embed) as mock:
        yield mock


def test_ingest_document_stores_one_row_per_chunk(embed_mock):
    metadata = DocumentMetadata(title="Taper", source="Local document: taper.md", authors=["Mujika"])
    with patch(
        "app.core.document_ingestion.insert_document_chunk", side_effect=["id-1"]
    ) as insert:
        result = ingest_document("Reduce volume. Keep intensity.", metadata)

    assert result.chunks_total == 1
    assert result.chunks_inserted == 1
    assert result.chunk_ids == ["id-1"]

    row = insert.call_args.args[0]
    assert row["title"] == "Taper"
    assert row["content"] == "Reduce volume. Keep intensity."
    assert row["authors"] == ["Mujika"]
    assert row["document_type"] == "research"
    assert len(row["embedding"]) == 1536


def test_ingest_document_counts_failed_inserts(embed_mock):
    metadata = DocumentMetadata(title="Long", source="test")
    content = ". ".join(["x" * 600] * 3)
    with patch(
        "app.core.document_ingestion.insert_document_chunk",
        side_effect=["id-1", RuntimeError("insert failed"), "id-3"],
    ):
        result = ingest_document(content, metadata)

    assert result.chunks_total == 3
    assert result.chunks_inserted == 2
    assert result.chunks_failed == 1
    embed_mock.assert_called_once()


def test_ingest_document_empty_text(embed_mock):
    result = ingest_document("   ", DocumentMetadata(title="Empty", source="test"))

    assert result.chunks_total == 0
    embed_mock.assert_not_called()


def test_ingest_document_embedding_failure_propagates():
    with patch(
        "app.core.document_ingestion.embed_texts",
        side_effect=UpstreamError("embedding service down"),
    ), patch("app.core.document_ingestion.insert_document_chunk") as insert:
        with pytest.raises(UpstreamError):
            ingest_document("Some text.", DocumentMetadata(title="T", source="test"))

    insert.assert_not_called()


def test_metadata_from_file():
    metadata = metadata_from_file(Path("docs/taper.md"), "# The Science of Tapering\n\nBody.")

    assert metadata.title == "The Science of Tapering"
    assert metadata.source == "Local document: taper.md"
    assert metadata.authors == ["Unknown"]
    assert metadata.document_type == "research"


def test_metadata_from_file_keeps_hash_inside_title():
    metadata = metadata_from_file(Path("drills.md"), "## C# Drills\nBody.")
    assert metadata.title == "C# Drills"


def test_metadata_from_file_without_first_line():
    metadata = metadata_from_file(Path("hills.txt"), "\nHill repeats build strength.")
    assert metadata.title == "hills"


def test_ingest_directory(tmp_path, embed_mock):
    (tmp_path / "taper.md").write_text("# Taper\nReduce volume.", encoding="utf-8")
    (tmp_path / "hills.txt").write_text("Hills\nRun uphill.", encoding="utf-8")
    (tmp_path / "image.png").write_bytes(b"\x89PNG")

    with patch("app.core.document_ingestion.insert_document_chunk", return_value="id"):
        results = ingest_directory(tmp_path)

    assert [r.title for r in results] == ["Hills", "Taper"]
    assert all(r.chunks_inserted == 1 for r in results)
