"""Utility functions for CLI operations."""

import base64
import mimetypes
import re
from pathlib import Path
from typing import Tuple

DATA_URI_PATTERN = re.compile(r"^data:(?P<mime>[^;,]*)(?:;[^;,]+)*?;base64,(?P<body>.*)$", re.DOTALL)


def guess_mime_type(path: Path) -> str:
    mime_type, _ = mimetypes.guess_type(str(path))
    return mime_type or "application/octet-stream"


def to_data_uri(data: bytes, mime_type: str) -> str:
    """
    Encode raw bytes as a ``data:<mime>;base64,<body>`` payload.
    """
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def from_data_uri(data_uri: str) -> Tuple[str, bytes]:
    """
    Decode a data URI payload.

    Returns:
        Tuple of (mime_type, raw_bytes)

    Raises:
        ValueError: If the payload is not a base64 data URI
    """
    match = DATA_URI_PATTERN.match(data_uri or "")
    if not match:
        raise ValueError("Content is not a base64 data URI")
    return match.group("mime") or "application/octet-stream", base64.b64decode(match.group("body"))


def safe_file_name(name: str) -> str:
    """
    Strip directory components from a server-provided file name.
    """
    cleaned = Path(name.replace("\\", "/")).name
    return cleaned or "download"


def preview(text: str, width: int = 40) -> str:
    flat = " ".join(text.split())
    return flat if len(flat) <= width else flat[:width - 3] + "..."
