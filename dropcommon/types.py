"""Shared record types (Paste, PasteFile, UploadSession)."""

from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional, Any


@dataclass(frozen=True)
class PasteFile:
    """
    One file of a multi-file paste. ``content`` is a data URI.
    """
    name: str
    type: str
    content: str


@dataclass
class Paste:
    """
    A stored shareable record: plain text, one file, or a batch of files.

    Timestamps are epoch milliseconds.
    """
    code: str
    content: str
    created_at: int
    expires_at: int
    file_name: Optional[str] = None
    file_type: Optional[str] = None
    is_file: bool = False
    files: List[PasteFile] = field(default_factory=list)
    is_multi_file: bool = False
    allow_editing: bool = False
    download_count: int = 0

    @property
    def is_text(self) -> bool:
        return not self.is_file and not self.is_multi_file

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Paste":
        """Rebuild a Paste from :meth:`to_dict` output."""
        files = [PasteFile(**f) for f in data.get("files") or []]
        return cls(
            code=data["code"],
            content=data.get("content", ""),
            created_at=int(data["created_at"]),
            expires_at=int(data["expires_at"]),
            file_name=data.get("file_name"),
            file_type=data.get("file_type"),
            is_file=bool(data.get("is_file", False)),
            files=files,
            is_multi_file=bool(data.get("is_multi_file", False)),
            allow_editing=bool(data.get("allow_editing", False)),
            download_count=int(data.get("download_count", 0)),
        )


@dataclass
class UploadSession:
    """
    Staging area for a file uploaded in chunks.

    ``uploaded_chunks`` counts distinct indices received. ``chunks`` maps
    zero-based chunk index to its base64 payload and is only populated when
    payloads were explicitly loaded.
    """
    upload_id: str
    file_name: str
    file_type: str
    total_size: int
    total_chunks: int
    created_at: int
    expires_at: int
    uploaded_chunks: int = 0
    chunks: Dict[int, str] = field(default_factory=dict)

    @property
    def is_complete(self) -> bool:
        return self.uploaded_chunks == self.total_chunks

    def metadata(self) -> Dict[str, Any]:
        """Session fields without chunk payloads."""
        return {
            "upload_id": self.upload_id,
            "file_name": self.file_name,
            "file_type": self.file_type,
            "total_size": self.total_size,
            "total_chunks": self.total_chunks,
            "created_at": self.created_at,
            "expires_at": self.expires_at,
        }

    @classmethod
    def from_metadata(cls, data: Dict[str, Any], uploaded_chunks: int = 0) -> "UploadSession":
        return cls(
            upload_id=data["upload_id"],
            file_name=data["file_name"],
            file_type=data["file_type"],
            total_size=int(data["total_size"]),
            total_chunks=int(data["total_chunks"]),
            created_at=int(data["created_at"]),
            expires_at=int(data["expires_at"]),
            uploaded_chunks=uploaded_chunks,
        )
