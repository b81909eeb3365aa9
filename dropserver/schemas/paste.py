"""Pydantic schemas for paste endpoints."""

from typing import List, Optional

from dropserver.schemas.common import CamelModel


class PasteFileModel(CamelModel):
    """One file of a multi-file paste."""
    name: Optional[str] = None
    type: Optional[str] = None
    content: Optional[str] = None


class CreatePasteRequest(CamelModel):
    """Request model for creating a paste."""
    content: Optional[str] = None
    files: Optional[List[PasteFileModel]] = None
    is_file: bool = False
    is_multi_file: bool = False
    file_name: Optional[str] = None
    file_type: Optional[str] = None
    expiration_option: Optional[str] = None
    allow_editing: bool = False


class CreatePasteResponse(CamelModel):
    """Response model for paste creation."""
    code: str
    expires_at: int


class PasteResponse(CamelModel):
    """Response model for reading a paste."""
    code: str
    content: str
    created_at: int
    expires_at: int
    time_remaining: int
    file_name: Optional[str] = None
    file_type: Optional[str] = None
    is_file: bool
    files: List[PasteFileModel]
    is_multi_file: bool
    allow_editing: bool
    download_count: int


class UpdatePasteRequest(CamelModel):
    """Request model for editing a paste."""
    code: Optional[str] = None
    content: Optional[str] = None
