"""Service locator for the process-wide storage backends."""

import logging
import threading
from typing import Optional

from dropserver import config
from dropserver.repositories import PasteRepository, UploadRepository, build_repositories

logger = logging.getLogger(__name__)

_paste_repository: Optional[PasteRepository] = None
_upload_repository: Optional[UploadRepository] = None
_lock = threading.Lock()


def _ensure_repositories() -> None:
    global _paste_repository, _upload_repository
    with _lock:
        if _paste_repository is None or _upload_repository is None:
            logger.info(f"Initializing '{config.STORAGE_BACKEND}' storage backend")
            _paste_repository, _upload_repository = build_repositories(
                config.STORAGE_BACKEND, config.REDIS_URL
            )


def set_repositories(paste_repository: PasteRepository, upload_repository: UploadRepository):
    """Set global repository instances"""
    global _paste_repository, _upload_repository
    with _lock:
        _paste_repository = paste_repository
        _upload_repository = upload_repository


def get_paste_repository() -> PasteRepository:
    """Get global paste repository, building it from config on first use"""
    _ensure_repositories()
    return _paste_repository


def get_upload_repository() -> UploadRepository:
    """Get global upload repository, building it from config on first use"""
    _ensure_repositories()
    return _upload_repository


def reset_repositories():
    """Drop global repository instances"""
    global _paste_repository, _upload_repository
    with _lock:
        _paste_repository = None
        _upload_repository = None
