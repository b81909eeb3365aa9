"""Chunked upload API routes."""

from fastapi import APIRouter, status

from dropserver import config
from dropserver.schemas.upload import (
    ChunkRequest,
    ChunkResponse,
    CompleteUploadRequest,
    CompleteUploadResponse,
    StartUploadRequest,
    StartUploadResponse,
)
from dropserver.services.upload_service import UploadService

router = APIRouter(prefix="/upload", tags=["Upload"])


@router.post("/start", response_model=StartUploadResponse, status_code=status.HTTP_201_CREATED)
def start_upload(request: StartUploadRequest):
    """
    Open a chunked upload session (valid for 30 minutes).

    Parameters:
        - fileName, fileType, fileSize, totalChunks (all required)

    Returns:
        - uploadId: Session id for chunk and complete calls
        - chunkSize: Raw bytes per chunk the client should send
        - maxChunks: Number of chunks the session expects

    Raises:
        - 400: Missing fields or file too large
    """
    upload_service = UploadService()

    session = upload_service.start_upload(
        file_name=request.file_name,
        file_type=request.file_type,
        file_size=request.file_size,
        total_chunks=request.total_chunks,
    )

    return StartUploadResponse(
        upload_id=session.upload_id,
        chunk_size=config.CHUNK_SIZE,
        max_chunks=session.total_chunks,
        expires_at=session.expires_at,
    )


@router.post("/chunk", response_model=ChunkResponse)
def upload_chunk(request: ChunkRequest):
    """
    Submit one base64 chunk. Order is free and resending an index is allowed.

    Raises:
        - 400: Missing fields or index out of range
        - 404: Session not found
        - 410: Session expired
    """
    upload_service = UploadService()

    session = upload_service.submit_chunk(
        upload_id=request.upload_id,
        chunk_index=request.chunk_index,
        chunk_data=request.chunk_data,
    )

    return ChunkResponse(
        progress=round(session.uploaded_chunks / session.total_chunks * 100),
        uploaded_chunks=session.uploaded_chunks,
        total_chunks=session.total_chunks,
        is_complete=session.is_complete,
    )


@router.post("/complete", response_model=CompleteUploadResponse, status_code=status.HTTP_201_CREATED)
def complete_upload(request: CompleteUploadRequest):
    """
    Reassemble the uploaded chunks into a file paste.

    Returns:
        - code, expiresAt: The new paste
        - fileName, fileSize: As declared when the session started

    Raises:
        - 400: Chunks missing or file too large
        - 404: Session not found
        - 409: Completion already in progress
    """
    upload_service = UploadService()

    paste, session = upload_service.complete_upload(
        upload_id=request.upload_id,
        expiration_option=request.expiration_option,
        allow_editing=request.allow_editing,
    )

    return CompleteUploadResponse(
        code=paste.code,
        expires_at=paste.expires_at,
        file_name=session.file_name,
        file_size=session.total_size,
    )
