"""Repository layer for paste and upload session storage."""

from typing import Optional, Tuple

from dropserver.repositories.paste_repository import (
    PasteRepository,
    MemoryPasteRepository,
    RedisPasteRepository,
)
from dropserver.repositories.upload_repository import (
    UploadRepository,
    MemoryUploadRepository,
    RedisUploadRepository,
)

BACKENDS = ("memory", "redis")


def build_repositories(backend: str, redis_url: Optional[str] = None) -> Tuple[PasteRepository, UploadRepository]:
    """
    Create the paste and upload repositories for the configured backend.

    Args:
        backend: 'memory' or 'redis'
        redis_url: Connection URL, required for 'redis'

    Raises:
        ValueError: If the backend name is unknown
    """
    if backend == "memory":
        return MemoryPasteRepository(), MemoryUploadRepository()

    if backend == "redis":
        from dropserver.repositories.redis_client import create_redis_client

        client = create_redis_client(redis_url)
        return RedisPasteRepository(client), RedisUploadRepository(client)

    raise ValueError(f"Unknown storage backend '{backend}', expected one of {BACKENDS}")


__all__ = [
    "PasteRepository",
    "MemoryPasteRepository",
    "RedisPasteRepository",
    "UploadRepository",
    "MemoryUploadRepository",
    "RedisUploadRepository",
    "build_repositories",
]
