"""Upload training resources for the coach to reference."""

import asyncio
from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from pydantic import BaseModel

from app.core.auth_middleware import AuthContext, require_auth
from app.core.config import get_settings
from app.core.document_ingestion import DocumentMetadata, ingest_document
from app.core.file_text import extract_text_from_upload
from app.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


class UploadedDocument(BaseModel):
    """Ingestion outcome for one accepted file."""

    filename: str
    chunks_created: int
    chunk_ids: list[str]


class SkippedDocument(BaseModel):
    """A file that was not ingested, and why."""

    filename: str
    reason: str


class DocumentUploadResponse(BaseModel):
    """Response for a training-document upload."""

    success: bool
    message: str
    documents: list[UploadedDocument]
    skipped: list[SkippedDocument]


@router.post("/coach/documents", response_model=DocumentUploadResponse)
async def upload_coach_documents(
    files: Annotated[list[UploadFile], File(description="Training resources (.txt, .md, .pdf)")],
    auth: AuthContext = Depends(require_auth),
) -> DocumentUploadResponse:
    """
    Ingest uploaded training resources into the retrieval corpus.

    Oversized, unsupported or unreadable files are skipped and reported.
    """
    if not files:
        raise HTTPException(status_code=400, detail="No files uploaded")

    settings = get_settings()
    documents: list[UploadedDocument] = []
    skipped: list[SkippedDocument] = []

    for upload in files:
        filename = upload.filename or "Untitled Document"
        raw_bytes = await upload.read()

        if len(raw_bytes) > settings.MAX_UPLOAD_BYTES:
            skipped.append(SkippedDocument(
                filename=filename,
                reason=f"File exceeds {settings.MAX_UPLOAD_BYTES} bytes",
            ))
            continue

        try:
            extracted = extract_text_from_upload(filename, upload.content_type, raw_bytes)
        except ValueError as e:
            skipped.append(SkippedDocument(filename=filename, reason=str(e)))
            continue

        metadata = DocumentMetadata(
            title=filename,
            source=f"Upload by {auth.user_id}: {filename}",
            authors=["Unknown"],
            document_type=extracted.document_type,
        )
        try:
            result = await asyncio.to_thread(ingest_document, extracted.text, metadata)
        except Exception as e:
            logger.error(f"Error ingesting {filename}: {e}")
            skipped.append(SkippedDocument(filename=filename, reason="Ingestion failed"))
            continue

        if result.chunks_inserted == 0:
            skipped.append(SkippedDocument(filename=filename, reason="No text could be stored"))
            continue

        documents.append(UploadedDocument(
            filename=filename,
            chunks_created=result.chunks_inserted,
            chunk_ids=result.chunk_ids,
        ))

    return DocumentUploadResponse(
        success=bool(documents),
        message=f"{len(documents)} documents uploaded successfully",
        documents=documents,
        skipped=skipped,
    )
