"""Document upload, processing, listing, and deletion routes."""

import json
from datetime import datetime

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.responses import StreamingResponse
from flashdeck_core.errors import ProcessingError
from flashdeck_core.model_adapters import BaseModelAdapter
from flashdeck_core.schemas.document import ProcessingState
from flashdeck_core.utils.logging import get_logger
from minio.error import S3Error
from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db import models
from app.db.session import get_db
from app.schemas.api import (
    DocumentDeleteResponse,
    DocumentListResponse,
    DocumentResponse,
    DocumentUploadResponse,
)
from app.services.flashcards import reindex_flashcards
from app.services.processing import get_model_adapter, process_document
from app.services.progress import subscribe_progress
from app.services.storage import (
    build_object_key,
    delete_file,
    download_file,
    get_presigned_url,
    upload_file,
)
from app.settings import settings

logger = get_logger(__name__)

router = APIRouter()

PDF_MIME_TYPE = "application/pdf"

# Bounds of Document.language, which is also forced onto every generated card
LANGUAGE_MIN_LENGTH = 2
LANGUAGE_MAX_LENGTH = 16


async def _get_document_or_404(db: AsyncSession, document_id: int) -> models.Document:
    document = await db.get(models.Document, document_id)
    if not document:
        raise HTTPException(status_code=404, detail="Document not found")
    return document


@router.get("/documents", response_model=DocumentListResponse)
async def list_documents(
    db: AsyncSession = Depends(get_db),
) -> DocumentListResponse:
    """List uploaded documents, newest first."""
    result = await db.execute(
        select(models.Document).order_by(
            models.Document.created_at.desc(), models.Document.id.desc()
        )
    )
    documents = result.scalars().all()
    return DocumentListResponse(
        documents=[DocumentResponse.model_validate(d) for d in documents]
    )


@router.get("/documents/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: int,
    db: AsyncSession = Depends(get_db),
) -> DocumentResponse:
    """Get a document and its processing state."""
    document = await _get_document_or_404(db, document_id)
    return DocumentResponse.model_validate(document)


@router.post("/documents", response_model=DocumentUploadResponse)
async def upload_document(
    file: UploadFile | None = File(None),
    language: str | None = Form(None),
    db: AsyncSession = Depends(get_db),
    adapter: BaseModelAdapter = Depends(get_model_adapter),
) -> DocumentUploadResponse:
    """Upload a PDF, store it, and generate flashcards from it batch by batch.

    Processing runs inside the request, so the response arrives only once
    every batch is stored. The document row is committed in the pending
    state before the first batch starts; clients watch a running upload
    through GET /documents and GET /documents/{id}/stream.
    """
    if file is None or not file.filename:
        raise ProcessingError("File is required", status=400)

    content = await file.read()
    if len(content) > settings.max_file_size:
        raise ProcessingError("File size exceeds limit", status=400)

    content_type = file.content_type or PDF_MIME_TYPE
    if content_type != PDF_MIME_TYPE and not file.filename.lower().endswith(".pdf"):
        raise ProcessingError("Only PDF files are allowed", status=400)

    language = (language or "").strip() or settings.default_language
    if not LANGUAGE_MIN_LENGTH <= len(language) <= LANGUAGE_MAX_LENGTH:
        raise ProcessingError(
            f"Language must be between {LANGUAGE_MIN_LENGTH} and "
            f"{LANGUAGE_MAX_LENGTH} characters",
            status=400,
        )

    logger.info(f"Processing upload {file.filename} ({len(content)} bytes)")
    object_key = build_object_key(file.filename)
    try:
        await upload_file(object_key, content, content_type=PDF_MIME_TYPE)
        file_url = await get_presigned_url(object_key)
    except S3Error as e:
        logger.error(f"Error uploading {file.filename}: {e}")
        raise ProcessingError("Failed to upload file", status=500) from e

    document = models.Document(
        filename=file.filename,
        object_key=object_key,
        url=file_url,
        mime_type=PDF_MIME_TYPE,
        size=len(content),
        language=language,
        batch_size=settings.pages_per_batch,
        processing_state=ProcessingState.PENDING.value,
        metadata_json={
            "originalName": file.filename,
            "uploadedAt": datetime.utcnow().isoformat(),
        },
    )
    db.add(document)
    await db.commit()
    await db.refresh(document)
    logger.info(f"Stored document {document.id} at {object_key}")

    result = await process_document(db, document, content, adapter)

    return DocumentUploadResponse(
        message="File processed successfully",
        file_url=file_url,
        document_id=document.id,
        flashcard_count=result.flashcards_created,
    )


@router.post("/documents/{document_id}/process", response_model=DocumentUploadResponse)
async def resume_document(
    document_id: int,
    db: AsyncSession = Depends(get_db),
    adapter: BaseModelAdapter = Depends(get_model_adapter),
) -> DocumentUploadResponse:
    """Resume generation after the last fully stored batch of a document."""
    document = await _get_document_or_404(db, document_id)
    if document.processing_state == ProcessingState.COMPLETE.value:
        raise HTTPException(status_code=400, detail="Document is already processed")

    content = await download_file(document.object_key)
    start_batch = document.last_batch_index + 1
    logger.info(f"Resuming document {document.id} from batch {start_batch + 1}")

    result = await process_document(
        db, document, content, adapter, start_batch=start_batch
    )

    return DocumentUploadResponse(
        message="File processed successfully",
        file_url=document.url,
        document_id=document.id,
        flashcard_count=result.flashcards_created,
    )


@router.get("/documents/{document_id}/stream")
async def stream_document_progress(
    document_id: int,
    db: AsyncSession = Depends(get_db),
) -> StreamingResponse:
    """Stream batch progress for a document over Server-Sent Events."""
    await _get_document_or_404(db, document_id)

    async def event_generator():
        """Yield progress events in SSE format."""
        async for event in subscribe_progress(document_id):
            yield f"data: {json.dumps(event)}\n\n"

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache"},
    )


@router.delete("/documents/{document_id}", response_model=DocumentDeleteResponse)
async def delete_document(
    document_id: int,
    db: AsyncSession = Depends(get_db),
) -> DocumentDeleteResponse:
    """Delete a document, its stored file, and its flashcards."""
    document = await _get_document_or_404(db, document_id)

    try:
        await delete_file(document.object_key)
    except S3Error as e:
        # Database cleanup proceeds even if the object is already gone
        logger.warning(f"Error deleting {document.object_key} from storage: {e}")

    result = await db.execute(
        delete(models.Flashcard).where(
            or_(
                models.Flashcard.document_id == document.id,
                models.Flashcard.source == document.filename,
            )
        )
    )
    deleted_flashcards = result.rowcount or 0
    await db.delete(document)
    await db.flush()
    await reindex_flashcards(db)
    await db.commit()

    logger.info(
        f"Deleted document {document_id} and {deleted_flashcards} flashcards"
    )
    return DocumentDeleteResponse(success=True, deleted_flashcards=deleted_flashcards)
