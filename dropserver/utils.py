"""Utility helper functions for the CodeDrop server."""

import re
import time
import uuid
from typing import Tuple

from dropserver.exceptions import InvalidCodeFormatError, ValidationError

CODE_PATTERN = re.compile(r"^\d{4}(?:-\d+)?$")

DATA_URI_PATTERN = re.compile(r"^data:(?P<mime>[^;,]*)(?P<params>(?:;[^;,]+)*?);base64,(?P<body>.*)$", re.DOTALL)

BASE64_PATTERN = re.compile(r"^(?:[A-Za-z0-9+/]{4})*(?:[A-Za-z0-9+/]{2}==|[A-Za-z0-9+/]{3}=)?$")


def now_ms() -> int:
    """
    Current time as epoch milliseconds.
    """
    return int(time.time() * 1000)


def generate_uuid() -> str:
    """
    Generate a new UUID4 hex string.

    Returns:
        32-character hex string
    """
    return uuid.uuid4().hex


def validate_code(code: str) -> str:
    """
    Check that a paste code has the public numeric format.

    Raises:
        InvalidCodeFormatError: If the code is malformed
    """
    if not isinstance(code, str) or not CODE_PATTERN.match(code):
        raise InvalidCodeFormatError("Invalid code format")
    return code


def is_base64(data: str) -> bool:
    """Padded base64 text whose length is a multiple of 4."""
    return bool(BASE64_PATTERN.fullmatch(data))


def decoded_size(base64_body: str) -> int:
    """
    Approximate decoded byte size of a base64 body, as the paste size limits count it.

    Args:
        base64_body: base64 text without the data URI prefix

    Returns:
        (len * 3) // 4
    """
    return (len(base64_body) * 3) // 4


def exact_decoded_size(base64_body: str) -> int:
    """Byte length of a padded base64 body once decoded."""
    padding = len(base64_body) - len(base64_body.rstrip("="))
    return (len(base64_body) * 3) // 4 - padding


def parse_data_uri(data_uri: str) -> Tuple[str, str]:
    """
    Split a ``data:<mime>;base64,<body>`` payload.

    Returns:
        Tuple of (mime_type, base64_body)

    Raises:
        ValidationError: If the payload is not a base64 data URI
    """
    if not isinstance(data_uri, str):
        raise ValidationError("File content must be a data URI string")

    match = DATA_URI_PATTERN.match(data_uri)
    if not match:
        raise ValidationError("File content must be a base64 data URI")

    body = match.group("body")
    if not is_base64(body):
        raise ValidationError("File content is not valid base64")

    return match.group("mime") or "application/octet-stream", body


def build_data_uri(mime_type: str, base64_body: str) -> str:
    return f"data:{mime_type};base64,{base64_body}"
