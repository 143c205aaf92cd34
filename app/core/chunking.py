"""Sentence-packing chunker for training documents."""

SENTENCE_DELIMITER = ". "


def chunk_document(content: str, max_chars: int = 1000) -> list[str]:
    """
    Split a document into chunks of whole sentences.

    Sentences (split on ". ") are packed into the current chunk until adding
    the next one would exceed ``max_chars``; a single sentence longer than
    ``max_chars`` becomes its own chunk.

    Args:
        content: Document text
        max_chars: Soft maximum characters per chunk

    Returns:
        List of stripped, non-empty chunk strings

    Raises:
        ValueError: If max_chars is not positive
    """
    if max_chars <= 0:
        raise ValueError(f"max_chars ({max_chars}) must be positive")

    if not content or not content.strip():
        return []

    chunks: list[str] = []
    current = ""

    for sentence in content.split(SENTENCE_DELIMITER):
        if not sentence.strip():
            continue
        piece = sentence if sentence.rstrip().endswith(".") else sentence + "."

        if current and len(current) + len(piece) > max_chars:
            chunks.append(current.strip())
            current = ""
        current += piece + " "

    if current.strip():
        chunks.append(current.strip())

    return chunks
