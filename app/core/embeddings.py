"""OpenAI embeddings for training documents and coach queries."""

import asyncio

from openai import APIError, OpenAI

from app.core.config import get_settings
from app.core.errors import UpstreamError
from app.core.logging import get_logger

logger = get_logger(__name__)

# OpenAI accepts up to 2048 inputs per request
MAX_BATCH_SIZE = 512


def _get_client() -> OpenAI:
    """Get OpenAI client instance."""
    settings = get_settings()
    return OpenAI(api_key=settings.OPENAI_API_KEY)


def embed_texts(texts: list[str]) -> list[list[float]]:
    """
    Generate embeddings for a list of texts using OpenAI.

    Args:
        texts: List of text strings to embed

    Returns:
        List of embedding vectors, in input order

    Raises:
        UpstreamError: If the embedding service reports an error or returns
            vectors of the wrong dimension
    """
    if not texts:
        return []

    settings = get_settings()
    client = _get_client()
    embeddings: list[list[float]] = []

    for start in range(0, len(texts), MAX_BATCH_SIZE):
        batch = texts[start : start + MAX_BATCH_SIZE]
        try:
            response = client.embeddings.create(
                model=settings.EMBEDDING_MODEL,
                input=batch,
            )
        except APIError as e:
            logger.error(f"Embedding request failed: {e.message}")
            raise UpstreamError(e.message, status_code=getattr(e, "status_code", None)) from e

        for i, embedding_obj in enumerate(response.data):
            embedding = embedding_obj.embedding
            if len(embedding) != settings.EMBEDDING_DIM:
                raise UpstreamError(
                    f"Embedding dimension mismatch for text {start + i}: "
                    f"expected {settings.EMBEDDING_DIM}, got {len(embedding)}"
                )
            embeddings.append(embedding)

    logger.info(
        f"Generated {len(embeddings)} embeddings using {settings.EMBEDDING_MODEL}",
        extra={"extra_data": {"model": settings.EMBEDDING_MODEL, "count": len(embeddings)}},
    )
    return embeddings


def embed_text(text: str) -> list[float]:
    """Embed a single text. Raises UpstreamError on failure."""
    embeddings = embed_texts([text])
    if not embeddings:
        raise UpstreamError("Embedding service returned no vectors")
    return embeddings[0]


async def embed_text_async(text: str) -> list[float]:
    """Async wrapper around embed_text using thread pool."""
    return await asyncio.to_thread(embed_text, text)
