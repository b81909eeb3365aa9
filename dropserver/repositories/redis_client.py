"""Redis connection helpers shared by the redis-backed repositories."""

import logging
from contextlib import contextmanager

import redis

from dropserver.exceptions import StorageError

logger = logging.getLogger(__name__)


def create_redis_client(url: str) -> "redis.Redis":
    """
    Create a Redis client from a URL and check connectivity.

    Raises:
        StorageError: If the server cannot be reached
    """
    client = redis.Redis.from_url(url, decode_responses=True)
    with translate_redis_errors("ping"):
        client.ping()
    logger.info(f"Connected to redis at {url}")
    return client


@contextmanager
def translate_redis_errors(operation: str):
    """
    Re-raise redis failures as StorageError so callers see one error type.
    """
    try:
        yield
    except redis.RedisError as e:
        logger.error(f"Redis {operation} failed: {e}", exc_info=True)
        raise StorageError(f"Storage backend failure during {operation}") from e
