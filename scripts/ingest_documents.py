"""Ingest a directory of training documents into the coach's retrieval corpus.

Usage:
    uv run python scripts/ingest_documents.py [directory]

Every .txt and .md file directly inside the directory is chunked by sentence,
embedded, and stored in ``training_documents``. The first line of each file
(with leading ``#`` removed) becomes the document title.

Examples:
    # Default directory
    uv run python scripts/ingest_documents.py

    # Custom directory
    uv run python scripts/ingest_documents.py ~/running-research
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Ensure app is importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

DEFAULT_DIRECTORY = "training-docs"


def main() -> int:
    parser = argparse.ArgumentParser(description="Ingest training documents")
    parser.add_argument(
        "directory",
        nargs="?",
        default=DEFAULT_DIRECTORY,
        help=f"Directory of .txt/.md documents (default: {DEFAULT_DIRECTORY})",
    )
    args = parser.parse_args()

    from app.core.document_ingestion import ingest_directory

    directory = Path(args.directory).expanduser()
    if not directory.is_dir():
        print(f"Directory not found: {directory}")
        return 1

    print(f"Ingesting documents from {directory}")
    results = ingest_directory(directory)

    if not results:
        print("No documents ingested")
        return 0

    for result in results:
        status = "ok" if result.chunks_failed == 0 else f"{result.chunks_failed} failed"
        print(f"  {result.title}: {result.chunks_inserted}/{result.chunks_total} chunks ({status})")

    total = sum(r.chunks_inserted for r in results)
    print(f"\nDone: {len(results)} documents, {total} chunks stored")
    return 0


if __name__ == "__main__":
    sys.exit(main())
