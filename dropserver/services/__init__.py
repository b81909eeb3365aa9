"""Service layer for business logic."""

from dropserver.services.paste_service import PasteService
from dropserver.services.upload_service import UploadService

__all__ = [
    "PasteService",
    "UploadService",
]
