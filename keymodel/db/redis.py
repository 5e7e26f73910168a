"""
Redis Connection Management Module

Provides the process-wide Redis client used by models that were
defined without an explicit client.
"""

import logging
import warnings
from typing import Optional
from urllib.parse import urlparse

from redis.asyncio import Redis

from keymodel.config import get_settings

logger = logging.getLogger(__name__)

# Global Redis client instance
_redis_client: Optional[Redis] = None


def _check_redis_security(redis_url: str) -> None:
    """
    Check Redis connection security.

    Warns if Redis URL has no password and is not a localhost connection.
    """
    parsed = urlparse(redis_url)

    has_password = bool(parsed.password)
    is_localhost = parsed.hostname in ("localhost", "127.0.0.1", "::1")

    if not has_password and not is_localhost:
        warnings.warn(
            "Redis connection has no password and is not connecting to localhost. "
            "Set a password in REDIS_URL using the format: redis://:password@host:port/db",
            UserWarning,
            stacklevel=3,
        )
        logger.warning("Redis connection without password to non-localhost host detected")


async def init_redis(url: Optional[str] = None) -> Redis:
    """
    Initialize Redis Connection

    Creates an async Redis client from the given URL or the configured REDIS_URL
    and verifies connectivity.

    Args:
        url: Redis URL overriding the REDIS_URL setting

    Returns:
        Redis: The initialized client
    """
    global _redis_client

    if _redis_client is not None:
        logger.warning("Redis client already initialized")
        return _redis_client

    redis_url = url or get_settings().REDIS_URL
    _check_redis_security(redis_url)

    client = Redis.from_url(redis_url, decode_responses=True)
    await client.ping()
    _redis_client = client
    logger.info(f"Redis connection established: {redis_url}")
    return client


async def close_redis() -> None:
    """
    Close Redis Connection

    Gracefully closes the process-wide client, if any.
    """
    global _redis_client

    if _redis_client is None:
        return

    await _redis_client.aclose()
    _redis_client = None
    logger.info("Redis connection closed")


def get_redis() -> Redis:
    """
    Get Redis Client Instance

    Returns:
        Redis: The async Redis client

    Raises:
        RuntimeError: If Redis has not been initialized
    """
    if _redis_client is None:
        raise RuntimeError(
            "Redis client not initialized. "
            "Call init_redis() or pass a client to define_model()."
        )
    return _redis_client
