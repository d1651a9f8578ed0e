"""Record persistence module."""

import logging
from typing import TYPE_CHECKING

import redis

from .backends import InMemoryBackend, KeyValueBackend, RedisBackend, SQLiteBackend
from .database import init_database
from .record_store import RecordStore
from .transaction import transaction

if TYPE_CHECKING:
    from rideflow.settings import Settings

logger = logging.getLogger(__name__)

__all__ = [
    "InMemoryBackend",
    "KeyValueBackend",
    "RecordStore",
    "RedisBackend",
    "SQLiteBackend",
    "get_backend",
    "get_record_store",
    "init_database",
    "transaction",
]


def get_backend(settings: "Settings") -> KeyValueBackend:
    """Get key-value backend based on configuration.

    Args:
        settings: Application settings

    Returns:
        InMemoryBackend, SQLiteBackend or RedisBackend

    Raises:
        ValueError: If the storage backend is unknown
    """
    backend_type = settings.storage.backend

    if backend_type == "memory":
        logger.info("Using in-memory storage backend")
        return InMemoryBackend(quota_bytes=settings.storage.memory_quota_bytes)

    if backend_type == "sqlite":
        logger.info("Using SQLite storage backend: %s", settings.storage.sqlite_path)
        return SQLiteBackend(init_database(settings.storage.sqlite_path))

    if backend_type == "redis":
        redis_settings = settings.redis
        client = redis.Redis(
            host=redis_settings.host,
            port=redis_settings.port,
            db=redis_settings.db,
            password=redis_settings.password or None,
            ssl=redis_settings.ssl,
            decode_responses=True,
            socket_connect_timeout=2,
        )
        logger.info(
            "Using Redis storage backend: %s:%d/%d",
            redis_settings.host,
            redis_settings.port,
            redis_settings.db,
        )
        return RedisBackend(client)

    raise ValueError(
        f"Unknown storage backend: {backend_type}. Expected 'memory', 'sqlite' or 'redis'"
    )


def get_record_store(settings: "Settings") -> RecordStore:
    return RecordStore(get_backend(settings), key_prefix=settings.storage.key_prefix)
