"""Chunked upload service: session start, chunk accumulation and reassembly."""

import logging
from typing import Optional, Tuple

from dropcommon.constants import UPLOAD_SESSION_TTL_MS
from dropcommon.types import Paste, UploadSession
from dropserver import config, expiry, utils
from dropserver.allocator import allocate_upload_id
from dropserver.exceptions import (
    InvalidChunkIndexError,
    MissingChunkError,
    PayloadTooLargeError,
    StorageError,
    UploadExpiredError,
    UploadIncompleteError,
    UploadInProgressError,
    UploadNotFoundError,
    ValidationError,
)
from dropserver.services.paste_service import PasteService, format_limit

logger = logging.getLogger(__name__)


class UploadService:
    def __init__(self, paste_service: Optional[PasteService] = None):
        self.paste_service = paste_service or PasteService()
        self.upload_repo = self.paste_service.upload_repo

    def start_upload(
        self,
        file_name: Optional[str],
        file_type: Optional[str],
        file_size: Optional[int],
        total_chunks: Optional[int],
    ) -> UploadSession:
        """
        Open a session for a file that will arrive in ``total_chunks`` pieces.

        Raises:
            ValidationError: Missing fields or an impossible chunk count
            PayloadTooLargeError: Declared size above the per-file limit
        """
        if not file_name or not file_type or not file_size or not total_chunks:
            raise ValidationError("Missing required fields")
        if file_size < 0 or total_chunks < 0:
            raise ValidationError("File size and chunk count must be positive")
        if file_size > config.MAX_FILE_SIZE:
            raise PayloadTooLargeError(f"File size exceeds {format_limit(config.MAX_FILE_SIZE)} limit")
        if total_chunks > file_size:
            raise ValidationError("Chunk count cannot exceed file size")

        self.paste_service.sweep()

        while True:
            upload_id = allocate_upload_id(self.upload_repo.exists)
            now = utils.now_ms()
            session = UploadSession(
                upload_id=upload_id,
                file_name=file_name,
                file_type=file_type,
                total_size=file_size,
                total_chunks=total_chunks,
                created_at=now,
                expires_at=now + UPLOAD_SESSION_TTL_MS,
            )
            if self.upload_repo.create(session):
                break

        logger.info(
            f"Started upload {upload_id} for '{file_name}' ({file_size} bytes in {total_chunks} chunks)"
        )
        return session

    def submit_chunk(self, upload_id: Optional[str], chunk_index: Optional[int], chunk_data: Optional[str]) -> UploadSession:
        """
        Store one chunk. Chunks may arrive in any order and may be resent.

        Returns:
            The session with ``uploaded_chunks`` reflecting this write

        Raises:
            UploadNotFoundError: Unknown session
            UploadExpiredError: Session found past its TTL
            InvalidChunkIndexError: Index outside [0, total_chunks)
            ValidationError: Malformed base64, or padding before the last chunk
        """
        if not upload_id or chunk_index is None or not chunk_data:
            raise ValidationError("Missing required fields")
        if not utils.is_base64(chunk_data):
            raise ValidationError("Chunk data is not valid base64")

        self.paste_service.sweep()

        session = self.upload_repo.get(upload_id)
        if session is None:
            raise UploadNotFoundError()

        if not expiry.is_live(session.expires_at, utils.now_ms()):
            self.upload_repo.delete(upload_id)
            raise UploadExpiredError()

        if chunk_index < 0 or chunk_index >= session.total_chunks:
            raise InvalidChunkIndexError("Invalid chunk index")
        if chunk_data.endswith("=") and chunk_index != session.total_chunks - 1:
            raise ValidationError("Only the last chunk may carry base64 padding")

        uploaded = self.upload_repo.put_chunk(upload_id, chunk_index, chunk_data)
        if uploaded is None:
            raise UploadNotFoundError()

        session.uploaded_chunks = uploaded
        logger.debug(f"Upload {upload_id}: chunk {chunk_index} stored ({uploaded}/{session.total_chunks})")
        return session

    def complete_upload(
        self,
        upload_id: Optional[str],
        expiration_option: Optional[str] = None,
        allow_editing: bool = False,
    ) -> Tuple[Paste, UploadSession]:
        """
        Reassemble a fully uploaded file into a paste and drop the session.

        ``allow_editing`` is accepted for symmetry with text pastes but files
        are always stored read-only. Failures keep the session so the client
        can resend missing chunks.

        Raises:
            UploadNotFoundError: Unknown or expired session
            UploadIncompleteError: Not every chunk has been received
            MissingChunkError: A chunk payload is absent
            UploadInProgressError: Another request is completing this session
        """
        if not upload_id:
            raise ValidationError("Upload ID is required")

        self.paste_service.sweep()

        session = self.upload_repo.get(upload_id)
        if session is None or not expiry.is_live(session.expires_at, utils.now_ms()):
            raise UploadNotFoundError()

        if session.uploaded_chunks != session.total_chunks:
            raise UploadIncompleteError(
                f"Upload incomplete. {session.uploaded_chunks}/{session.total_chunks} chunks uploaded."
            )

        if not self.upload_repo.claim_completion(upload_id):
            raise UploadInProgressError("Upload is already being completed")

        try:
            body = self._assemble(upload_id, session.total_chunks)
            if utils.exact_decoded_size(body) > config.MAX_FILE_SIZE:
                raise PayloadTooLargeError(f"File size exceeds {format_limit(config.MAX_FILE_SIZE)} limit")

            paste = self.paste_service.store(
                {
                    "content": utils.build_data_uri(session.file_type, body),
                    "file_name": session.file_name,
                    "file_type": session.file_type,
                    "is_file": True,
                    "allow_editing": False,
                },
                expiration_option,
            )
        except Exception:
            self._release_claim(upload_id)
            raise

        self.upload_repo.delete(upload_id)
        logger.info(f"Completed upload {upload_id} as paste {paste.code}")
        return paste, session

    def _release_claim(self, upload_id: str) -> None:
        try:
            self.upload_repo.release_completion(upload_id)
        except StorageError as e:
            logger.error(f"Could not release completion claim for upload {upload_id}: {e}")

    def _assemble(self, upload_id: str, total_chunks: int) -> str:
        chunks = self.upload_repo.get_chunks(upload_id)
        parts = []
        for index in range(total_chunks):
            chunk = chunks.get(index)
            if not chunk:
                raise MissingChunkError(f"Missing chunk {index}. Please retry upload.")
            parts.append(chunk)
        return "".join(parts)
