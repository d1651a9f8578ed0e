"""Key-value string backends for RecordStore.

Backends never raise: read failures come back as None and write failures
as False, after being logged.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol

import redis
from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError

from .schema import KeyValueEntry
from .transaction import delete_entry, transaction, upsert_entry

if TYPE_CHECKING:
    from sqlalchemy.orm import sessionmaker

logger = logging.getLogger(__name__)


class KeyValueBackend(Protocol):
    """Durable string-keyed store consumed by RecordStore."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> bool: ...

    def delete(self, key: str) -> bool: ...


class InMemoryBackend:
    """Process-local backend.

    With `quota_bytes` set, a write that would push the total stored size
    over the quota is refused, the way a browser refuses a localStorage
    write once the origin quota is exhausted.
    """

    def __init__(self, quota_bytes: int | None = None) -> None:
        self.quota_bytes = quota_bytes
        self._data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> bool:
        if self.quota_bytes is not None:
            used = sum(
                len(k) + len(v.encode()) for k, v in self._data.items() if k != key
            )
            if used + len(key) + len(value.encode()) > self.quota_bytes:
                logger.error(
                    "Quota exceeded writing %s (%d bytes allowed)", key, self.quota_bytes
                )
                return False
        self._data[key] = value
        return True

    def delete(self, key: str) -> bool:
        self._data.pop(key, None)
        return True

    def keys(self) -> list[str]:
        return list(self._data)


class SQLiteBackend:
    """Backend storing each key as a row of the `kv_store` table."""

    def __init__(self, session_maker: sessionmaker[Any]) -> None:
        self._session_maker = session_maker

    def get(self, key: str) -> str | None:
        try:
            with self._session_maker() as session:
                entry = session.get(KeyValueEntry, key)
                return entry.value if entry is not None else None
        except SQLAlchemyError as e:
            logger.error(f"Failed to read {key} from SQLite: {e}")
            return None

    def set(self, key: str, value: str) -> bool:
        try:
            with transaction(self._session_maker) as session:
                upsert_entry(session, key, value)
        except SQLAlchemyError as e:
            logger.error(f"Failed to write {key} to SQLite: {e}")
            return False
        return True

    def delete(self, key: str) -> bool:
        try:
            with transaction(self._session_maker) as session:
                delete_entry(session, key)
        except SQLAlchemyError as e:
            logger.error(f"Failed to delete {key} from SQLite: {e}")
            return False
        return True


class RedisBackend:
    """Backend storing each key as a plain Redis string."""

    def __init__(self, client: redis.Redis) -> None:
        self._client = client

    def get(self, key: str) -> str | None:
        try:
            value = self._client.get(key)
        except RedisError as e:
            logger.error(f"Failed to read {key} from Redis: {e}")
            return None
        if isinstance(value, bytes):
            return value.decode()
        return value

    def set(self, key: str, value: str) -> bool:
        try:
            return bool(self._client.set(key, value))
        except RedisError as e:
            logger.error(f"Failed to write {key} to Redis: {e}")
            return False

    def delete(self, key: str) -> bool:
        try:
            self._client.delete(key)
        except RedisError as e:
            logger.error(f"Failed to delete {key} from Redis: {e}")
            return False
        return True
