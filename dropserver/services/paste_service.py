"""Paste service: creation, retrieval, editing and deletion of pastes."""

import logging
from typing import Any, Dict, List, Optional

from dropcommon.formatting import format_expiration_time
from dropcommon.types import Paste, PasteFile
from dropserver import config, expiry, utils
from dropserver.allocator import CodeAllocator
from dropserver.exceptions import (
    CodeSpaceExhaustedError,
    EditForbiddenError,
    PasteNotFoundError,
    PayloadTooLargeError,
    ValidationError,
)
from dropserver.repositories import PasteRepository, UploadRepository
from dropserver.service_locator import get_paste_repository, get_upload_repository

logger = logging.getLogger(__name__)


def format_limit(size_bytes: int) -> str:
    return f"{size_bytes // (1024 * 1024)}MB"


class PasteService:
    def __init__(
        self,
        paste_repo: Optional[PasteRepository] = None,
        upload_repo: Optional[UploadRepository] = None,
    ):
        self.paste_repo = paste_repo or get_paste_repository()
        self.upload_repo = upload_repo or get_upload_repository()
        self.allocator = CodeAllocator(self.paste_repo.exists)

    def sweep(self) -> int:
        """Purge expired pastes and sessions before touching the store."""
        return expiry.sweep(self.paste_repo, self.upload_repo, utils.now_ms())

    def create_paste(
        self,
        content: Optional[str] = None,
        files: Optional[List[Dict[str, Any]]] = None,
        is_file: bool = False,
        is_multi_file: bool = False,
        file_name: Optional[str] = None,
        file_type: Optional[str] = None,
        expiration_option: Optional[str] = None,
        allow_editing: bool = False,
    ) -> Paste:
        """
        Validate a submission and store it under a fresh code.

        Multi-file wins when both representation flags are set. Files and
        file batches are never editable.

        Raises:
            ValidationError: Missing or malformed content
            PayloadTooLargeError: A size or count limit is exceeded
        """
        if is_multi_file:
            fields = {
                "content": "",
                "files": self._validate_files(files),
                "is_multi_file": True,
                "allow_editing": False,
            }
        elif is_file:
            mime_type = self._validate_file_content(content, file_name)
            fields = {
                "content": content,
                "file_name": file_name,
                "file_type": file_type or mime_type,
                "is_file": True,
                "allow_editing": False,
            }
        else:
            self._validate_text(content)
            fields = {
                "content": content,
                "allow_editing": bool(allow_editing),
            }

        self.sweep()
        return self.store(fields, expiration_option)

    def store(self, fields: Dict[str, Any], expiration_option: Optional[str]) -> Paste:
        """
        Stamp timestamps, claim a code and insert an already validated record.

        Falls back to a composite code when the numeric space is saturated.
        A lost insert race draws a new code.
        """
        ttl = expiry.resolve_ttl(expiration_option)

        for attempt in range(self.allocator.attempts):
            try:
                code = self.allocator.allocate()
            except CodeSpaceExhaustedError:
                code = self.allocator.composite_code(utils.now_ms())
                logger.warning(f"Code space exhausted, falling back to composite code {code}")

            created_at = utils.now_ms()
            paste = Paste(code=code, created_at=created_at, expires_at=created_at + ttl, **fields)

            if self.paste_repo.insert_if_absent(paste):
                logger.info(
                    f"Stored paste {code} (kind={self._kind(paste)}, ttl={format_expiration_time(ttl)})"
                )
                return paste

            logger.info(f"Code {code} was claimed concurrently (attempt {attempt + 1})")

        raise CodeSpaceExhaustedError("Could not claim a paste code")

    def get_paste(self, code: str, record_access: bool = True) -> Paste:
        """
        Return the live paste for a code.

        Args:
            code: Paste code
            record_access: Increment the download counter on success

        Raises:
            InvalidCodeFormatError: Malformed code
            PasteNotFoundError: Absent or expired
        """
        utils.validate_code(code)
        self.sweep()

        paste = self.paste_repo.get(code)
        if paste is None:
            raise PasteNotFoundError()

        if not expiry.is_live(paste.expires_at, utils.now_ms()):
            self.paste_repo.delete(code)
            raise PasteNotFoundError()

        if record_access:
            paste.download_count = self.record_access(code)

        return paste

    def record_access(self, code: str) -> int:
        count = self.paste_repo.increment_download_count(code)
        if count is None:
            raise PasteNotFoundError()
        return count

    def update_paste(self, code: Optional[str], content: Optional[str]) -> None:
        """
        Overwrite the content of an editable text paste.

        Raises:
            ValidationError: Missing code or content
            PasteNotFoundError: Absent or expired
            EditForbiddenError: Editing disabled or not a text paste
        """
        if not code or not content:
            raise ValidationError("Code and content are required")

        paste = self.get_paste(code, record_access=False)

        if not paste.is_text:
            raise EditForbiddenError("Files cannot be edited")
        if not paste.allow_editing:
            raise EditForbiddenError("Editing is not allowed for this content")

        self._check_text_size(content)

        if not self.paste_repo.update_content(code, content):
            raise PasteNotFoundError()
        logger.info(f"Updated content of paste {code}")

    def delete_paste(self, code: str) -> bool:
        utils.validate_code(code)
        deleted = self.paste_repo.delete(code)
        if deleted:
            logger.info(f"Deleted paste {code}")
        return deleted

    def _validate_text(self, content: Optional[str]) -> None:
        if not isinstance(content, str) or not content.strip():
            raise ValidationError("Content is required")
        self._check_text_size(content)

    def _check_text_size(self, content: str) -> None:
        if len(content.encode("utf-8")) > config.MAX_FILE_SIZE:
            raise PayloadTooLargeError(f"Content exceeds {format_limit(config.MAX_FILE_SIZE)} limit")

    def _validate_file_content(self, content: Optional[str], file_name: Optional[str]) -> str:
        if not content:
            raise ValidationError("File content is required")
        if not file_name:
            raise ValidationError("File name is required")

        mime_type, body = utils.parse_data_uri(content)
        if utils.decoded_size(body) > config.MAX_FILE_SIZE:
            raise PayloadTooLargeError(f"File size exceeds {format_limit(config.MAX_FILE_SIZE)} limit")
        return mime_type

    def _validate_files(self, files: Optional[List[Dict[str, Any]]]) -> List[PasteFile]:
        if not files:
            raise ValidationError("At least one file is required")
        if len(files) > config.MAX_FILE_COUNT:
            raise PayloadTooLargeError(f"Maximum {config.MAX_FILE_COUNT} files allowed")

        validated = []
        total_size = 0
        for entry in files:
            name = entry.get("name")
            if not name:
                raise ValidationError("Every file needs a name")

            mime_type, body = utils.parse_data_uri(entry.get("content"))
            size = utils.decoded_size(body)
            if size > config.MAX_FILE_SIZE:
                raise PayloadTooLargeError(
                    f"File '{name}' exceeds {format_limit(config.MAX_FILE_SIZE)} limit"
                )
            total_size += size

            validated.append(PasteFile(name=name, type=entry.get("type") or mime_type, content=entry["content"]))

        if total_size > config.MAX_TOTAL_FILES_SIZE:
            raise PayloadTooLargeError(
                f"Total size of files exceeds {format_limit(config.MAX_TOTAL_FILES_SIZE)} limit"
            )
        return validated

    @staticmethod
    def _kind(paste: Paste) -> str:
        if paste.is_multi_file:
            return f"files[{len(paste.files)}]"
        if paste.is_file:
            return "file"
        return "text"
