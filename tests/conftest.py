"""
Test Configuration Module
"""

import time
from typing import Any, Optional

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import ResponseError

from keymodel.types.registry import TypeRegistry

WRONGTYPE = "WRONGTYPE Operation against a key holding the wrong kind of value"


class FakeRedis:
    """
    In-memory stand-in for redis.asyncio.Redis

    Supports the pipeline commands used by the instance repository,
    honours key expiry and records every executed batch.
    """

    def __init__(self) -> None:
        # Structure: {key: (value, expires_at)}
        self._data: dict[str, tuple[Any, Optional[float]]] = {}
        self.batches: list[list[tuple]] = []
        self.transactions: list[bool] = []
        self.fail_with: Optional[Exception] = None

    def _live(self, key: str) -> Any:
        entry = self._data.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and time.monotonic() >= expires_at:
            del self._data[key]
            return None
        return value

    def pipeline(self, transaction: bool = True) -> "FakePipeline":
        return FakePipeline(self, transaction)

    def raw(self, key: str) -> Any:
        return self._live(key)

    def put(self, key: str, value: Any) -> None:
        self._data[key] = (value, None)

    def ttl_ms(self, key: str) -> Optional[float]:
        entry = self._data.get(key)
        if entry is None or entry[1] is None:
            return None
        return (entry[1] - time.monotonic()) * 1000

    def keys(self) -> list[str]:
        return [key for key in list(self._data) if self._live(key) is not None]

    # ============ Command Implementation ============

    def _cmd_get(self, key):
        value = self._live(key)
        if isinstance(value, set):
            return ResponseError(WRONGTYPE)
        return value

    def _cmd_smembers(self, key):
        value = self._live(key)
        if value is None:
            return set()
        if not isinstance(value, set):
            return ResponseError(WRONGTYPE)
        return set(value)

    def _cmd_set(self, key, value, ex=None, px=None):
        if isinstance(value, bool) or not isinstance(value, (str, int, float, bytes)):
            raise TypeError(f"Invalid input of type: {type(value).__name__!r}")
        expires_at = None
        if px is not None:
            expires_at = time.monotonic() + px / 1000
        elif ex is not None:
            expires_at = time.monotonic() + ex
        self._data[key] = (str(value), expires_at)
        return True

    def _cmd_sadd(self, key, *members):
        value = self._live(key)
        if value is None:
            value = set()
            self._data[key] = (value, None)
        elif not isinstance(value, set):
            return ResponseError(WRONGTYPE)
        before = len(value)
        value.update(str(member) for member in members)
        return len(value) - before

    def _expire_at(self, key, expires_at):
        value = self._live(key)
        if value is None:
            return False
        self._data[key] = (value, expires_at)
        return True

    def _cmd_expire(self, key, seconds):
        return self._expire_at(key, time.monotonic() + seconds)

    def _cmd_pexpire(self, key, millis):
        return self._expire_at(key, time.monotonic() + millis / 1000)

    def _cmd_delete(self, *keys):
        deleted = 0
        for key in keys:
            if self._live(key) is not None:
                del self._data[key]
                deleted += 1
        return deleted


class FakePipeline:
    """Buffers commands and applies them in order on execute()"""

    def __init__(self, store: FakeRedis, transaction: bool):
        self.store = store
        self.transaction = transaction
        self.commands: list[tuple] = []

    async def __aenter__(self) -> "FakePipeline":
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.commands = []

    def _queue(self, name, *args, **kwargs) -> "FakePipeline":
        self.commands.append((name, args, kwargs))
        return self

    def get(self, key):
        return self._queue("get", key)

    def smembers(self, key):
        return self._queue("smembers", key)

    def set(self, key, value, ex=None, px=None):
        kwargs = {}
        if ex is not None:
            kwargs["ex"] = ex
        if px is not None:
            kwargs["px"] = px
        return self._queue("set", key, value, **kwargs)

    def sadd(self, key, *members):
        return self._queue("sadd", key, *members)

    def expire(self, key, seconds):
        return self._queue("expire", key, seconds)

    def pexpire(self, key, millis):
        return self._queue("pexpire", key, millis)

    def delete(self, *keys):
        return self._queue("delete", *keys)

    async def execute(self, raise_on_error: bool = True) -> list[Any]:
        if self.store.fail_with is not None:
            raise self.store.fail_with
        self.store.batches.append(list(self.commands))
        self.store.transactions.append(self.transaction)
        replies = [
            getattr(self.store, f"_cmd_{name}")(*args, **kwargs)
            for name, args, kwargs in self.commands
        ]
        self.commands = []
        if raise_on_error:
            for reply in replies:
                if isinstance(reply, Exception):
                    raise reply
        return replies


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def broken_redis() -> FakeRedis:
    client = FakeRedis()
    client.fail_with = RedisConnectionError("Connection refused")
    return client


@pytest.fixture
def registry() -> TypeRegistry:
    """Fresh registry so registrations do not leak between tests"""
    return TypeRegistry()
