"""Pydantic schemas for chunked upload endpoints."""

from typing import Optional

from dropserver.schemas.common import CamelModel


class StartUploadRequest(CamelModel):
    """Request model for opening a chunked upload session."""
    file_name: Optional[str] = None
    file_type: Optional[str] = None
    file_size: Optional[int] = None
    total_chunks: Optional[int] = None


class StartUploadResponse(CamelModel):
    """Response model for a new upload session."""
    upload_id: str
    chunk_size: int
    max_chunks: int
    expires_at: int


class ChunkRequest(CamelModel):
    """Request model for submitting one chunk."""
    upload_id: Optional[str] = None
    chunk_index: Optional[int] = None
    chunk_data: Optional[str] = None


class ChunkResponse(CamelModel):
    """Response model for chunk progress."""
    success: bool = True
    progress: int
    uploaded_chunks: int
    total_chunks: int
    is_complete: bool


class CompleteUploadRequest(CamelModel):
    """Request model for finishing an upload."""
    upload_id: Optional[str] = None
    expiration_option: Optional[str] = None
    allow_editing: bool = False


class CompleteUploadResponse(CamelModel):
    """Response model for a finished upload."""
    code: str
    expires_at: int
    file_name: str
    file_size: int
