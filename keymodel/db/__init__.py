"""
Database Connection Module Initialization
"""

from keymodel.db.redis import close_redis, get_redis, init_redis

__all__ = [
    "init_redis",
    "close_redis",
    "get_redis",
]
