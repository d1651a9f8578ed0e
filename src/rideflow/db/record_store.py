"""Named JSON collections and counters on top of a key-value backend."""

import json
import logging
from collections.abc import Iterable, Sequence
from typing import Any

from ..core.exceptions import StorageError
from .backends import KeyValueBackend

logger = logging.getLogger(__name__)

DEFAULT_KEY_PREFIX = "rideflow_"


class RecordStore:
    """Persists whole collections of JSON-serializable records.

    Every save overwrites the entire collection, so callers load, modify
    and save the full sequence.
    """

    def __init__(self, backend: KeyValueBackend, key_prefix: str = DEFAULT_KEY_PREFIX):
        self.backend = backend
        self.key_prefix = key_prefix

    def key_for(self, name: str) -> str:
        return f"{self.key_prefix}{name}"

    def load(self, collection: str) -> list[dict[str, Any]]:
        """Return the persisted records, or an empty list if absent or corrupt."""
        key = self.key_for(collection)
        raw = self.backend.get(key)
        if raw is None:
            return []

        try:
            records = json.loads(raw)
        except ValueError as e:
            logger.error(
                "Discarding unparsable collection %s: %s",
                key,
                e,
                extra={"collection": collection},
            )
            return []

        if not isinstance(records, list):
            logger.error(
                "Discarding collection %s: expected a JSON array, got %s",
                key,
                type(records).__name__,
                extra={"collection": collection},
            )
            return []
        return records

    def save(self, collection: str, records: Sequence[dict[str, Any]]) -> bool:
        """Overwrite the collection. Returns False and keeps the old value on failure."""
        key = self.key_for(collection)
        try:
            payload = json.dumps(list(records))
        except (TypeError, ValueError) as e:
            logger.error(
                "Failed to serialize collection %s: %s",
                key,
                e,
                extra={"collection": collection},
            )
            return False

        if not self.backend.set(key, payload):
            logger.error("Failed to save collection %s", key, extra={"collection": collection})
            return False

        logger.debug(
            "Saved %d records to %s", len(records), key, extra={"collection": collection}
        )
        return True

    def _read_counter(self, key: str) -> int | None:
        raw = self.backend.get(key)
        if raw is None:
            return None
        try:
            return int(raw)
        except ValueError:
            logger.warning("Counter %s holds unparsable value %r", key, raw)
            return None

    def next_counter(self, name: str, initial_value: int) -> int:
        """Current value of a counter, initializing it to `initial_value` if absent."""
        key = self.key_for(name)
        current = self._read_counter(key)
        if current is None:
            self.backend.set(key, str(initial_value))
            return initial_value
        return current

    def set_counter(self, name: str, value: int) -> None:
        key = self.key_for(name)
        if not self.backend.set(key, str(value)):
            raise StorageError(f"Failed to write counter {key}", {"counter": name})
        logger.warning("Counter %s reset to %d", key, value)

    def bump_counter(self, name: str, initial_value: int = 0) -> None:
        """Persist counter + 1. An absent or corrupt counter counts as `initial_value`."""
        key = self.key_for(name)
        current = self._read_counter(key)
        if current is None:
            current = initial_value

        if not self.backend.set(key, str(current + 1)):
            raise StorageError(f"Failed to advance counter {key}", {"counter": name})

    def clear(self, names: Iterable[str]) -> None:
        """Remove the given collections and counters."""
        keys = [self.key_for(name) for name in names]
        for key in keys:
            self.backend.delete(key)
        logger.info("Cleared %s", ", ".join(keys))
