"""Configuration settings for the CodeDrop server."""

import os
from dropcommon.constants import (
    CHUNK_SIZE_BYTES,
    DEFAULT_SERVER_PORT,
    MAX_FILE_SIZE_BYTES,
    MAX_FILES,
    MAX_TOTAL_FILES_SIZE_BYTES,
    SWEEP_INTERVAL_SECONDS,
)


SERVER_HOST = os.environ.get("DROP_HOST", "0.0.0.0")

SERVER_PORT = int(os.environ.get("DROP_PORT", str(DEFAULT_SERVER_PORT)))

STORAGE_BACKEND = os.environ.get("DROP_STORAGE_BACKEND", "memory").lower()

REDIS_URL = os.environ.get("DROP_REDIS_URL", "redis://localhost:6379/0")

DEFAULT_TTL_MS = int(os.environ.get("DROP_DEFAULT_TTL_SECONDS", "1800")) * 1000

MAX_FILE_SIZE = int(os.environ.get("DROP_MAX_FILE_SIZE", str(MAX_FILE_SIZE_BYTES)))

MAX_TOTAL_FILES_SIZE = int(os.environ.get("DROP_MAX_TOTAL_FILES_SIZE", str(MAX_TOTAL_FILES_SIZE_BYTES)))

MAX_FILE_COUNT = int(os.environ.get("DROP_MAX_FILES", str(MAX_FILES)))

CHUNK_SIZE = int(os.environ.get("DROP_CHUNK_SIZE", str(CHUNK_SIZE_BYTES)))

SWEEP_INTERVAL = int(os.environ.get("DROP_SWEEP_INTERVAL_SECONDS", str(SWEEP_INTERVAL_SECONDS)))


def validate_settings() -> None:
    """
    Check settings that stored records and chunk reassembly depend on.

    Chunks are base64-encoded one by one, so only a chunk size divisible by 3
    lets every chunk but the last come out unpadded.

    Raises:
        ValueError: If a setting is out of range
    """
    if DEFAULT_TTL_MS <= 0:
        raise ValueError("DROP_DEFAULT_TTL_SECONDS must be positive")
    if CHUNK_SIZE <= 0 or CHUNK_SIZE % 3 != 0:
        raise ValueError("DROP_CHUNK_SIZE must be a positive multiple of 3")


validate_settings()
