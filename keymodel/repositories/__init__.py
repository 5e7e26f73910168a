"""
Data Access Layer Module Initialization
"""

from keymodel.repositories.instance_repo import InstanceRepository
from keymodel.repositories.redis import RedisInstanceRepository

__all__ = [
    "InstanceRepository",
    "RedisInstanceRepository",
]
