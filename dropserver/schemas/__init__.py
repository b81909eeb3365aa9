"""Pydantic schemas for API requests and responses."""

from dropserver.schemas.paste import (
    PasteFileModel,
    CreatePasteRequest,
    CreatePasteResponse,
    PasteResponse,
    UpdatePasteRequest,
)
from dropserver.schemas.upload import (
    StartUploadRequest,
    StartUploadResponse,
    ChunkRequest,
    ChunkResponse,
    CompleteUploadRequest,
    CompleteUploadResponse,
)
from dropserver.schemas.common import ErrorResponse, SuccessResponse, LimitsResponse

__all__ = [
    "PasteFileModel",
    "CreatePasteRequest",
    "CreatePasteResponse",
    "PasteResponse",
    "UpdatePasteRequest",
    "StartUploadRequest",
    "StartUploadResponse",
    "ChunkRequest",
    "ChunkResponse",
    "CompleteUploadRequest",
    "CompleteUploadResponse",
    "ErrorResponse",
    "SuccessResponse",
    "LimitsResponse",
]
