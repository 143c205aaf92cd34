"""Ingest training documents into the retrieval corpus.

A document is chunked by sentence, each chunk is embedded, and one
``training_documents`` row is written per chunk with the document's metadata.
"""

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

from app.core.chunking import chunk_document
from app.core.config import get_settings
from app.core.embeddings import embed_texts
from app.core.logging import get_logger
from app.db.training_documents import insert_document_chunk

logger = get_logger(__name__)

INGESTIBLE_SUFFIXES = (".txt", ".md")


@dataclass
class DocumentMetadata:
    """Metadata copied onto every chunk of a document."""

    title: str
    source: str
    authors: list[str] = field(default_factory=lambda: ["Unknown"])
    publication_date: str = field(default_factory=lambda: date.today().isoformat())
    document_type: str = "research"


@dataclass
class IngestionResult:
    """Chunk counts for one ingested document."""

    title: str
    chunks_total: int = 0
    chunks_inserted: int = 0
    chunk_ids: list[str] = field(default_factory=list)

    @property
    def chunks_failed(self) -> int:
        return self.chunks_total - self.chunks_inserted


def ingest_document(content: str, metadata: DocumentMetadata) -> IngestionResult:
    """
    Chunk, embed and store one document.

    Args:
        content: Full document text
        metadata: Title, source, authors, date and type for every chunk

    Returns:
        IngestionResult; chunks whose insert failed are logged and counted

    Raises:
        UpstreamError: If embedding fails (nothing is stored in that case)
    """
    settings = get_settings()
    chunks = chunk_document(content, max_chars=settings.DOCUMENT_CHUNK_CHARS)
    result = IngestionResult(title=metadata.title, chunks_total=len(chunks))
    if not chunks:
        logger.warning(f"Document {metadata.title!r} has no text to ingest")
        return result

    logger.info(f"Processing {metadata.title!r}: {len(chunks)} chunks")
    embeddings = embed_texts(chunks)

    for i, (chunk, embedding) in enumerate(zip(chunks, embeddings)):
        try:
            chunk_id = insert_document_chunk(
                {
                    "title": metadata.title,
                    "content": chunk,
                    "source": metadata.source,
                    "authors": metadata.authors,
                    "publication_date": metadata.publication_date,
                    "document_type": metadata.document_type,
                    "embedding": embedding,
                }
            )
        except Exception as e:
            logger.error(f"Error inserting chunk {i} of {metadata.title!r}: {e}")
            continue
        result.chunks_inserted += 1
        if chunk_id:
            result.chunk_ids.append(str(chunk_id))

    logger.info(
        f"Ingested {metadata.title!r}: {result.chunks_inserted}/{result.chunks_total} chunks"
    )
    return result


def metadata_from_file(path: Path, content: str) -> DocumentMetadata:
    """Derive metadata from a local file: title from its first line."""
    first_line = content.split("\n", 1)[0].lstrip("#").strip()
    return DocumentMetadata(
        title=first_line or path.stem,
        source=f"Local document: {path.name}",
    )


def ingest_directory(directory: Path) -> list[IngestionResult]:
    """Ingest every .txt/.md file in ``directory`` (non-recursive).

    A file that fails is logged and skipped.
    """
    results: list[IngestionResult] = []
    for path in sorted(directory.iterdir()):
        if not path.is_file() or path.suffix.lower() not in INGESTIBLE_SUFFIXES:
            continue
        try:
            content = path.read_text(encoding="utf-8")
            results.append(ingest_document(content, metadata_from_file(path, content)))
        except Exception as e:
            logger.error(f"Error ingesting document {path}: {e}")
    return results
