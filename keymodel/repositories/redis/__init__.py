"""
Redis Repository Implementation Module Initialization
"""

from keymodel.repositories.redis.instance_repo import RedisInstanceRepository

__all__ = [
    "RedisInstanceRepository",
]
