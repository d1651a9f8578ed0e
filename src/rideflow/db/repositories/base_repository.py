"""Base repository for record CRUD operations using generics."""

import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any, ClassVar, Generic, TypeVar

import pydantic

from ...core.exceptions import StorageError, ValidationError
from ...models.base import PatchModel, StoredRecord
from ...ride_logging import log_context
from ..record_store import RecordStore
from ..utils import utc_now

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=StoredRecord)
ModelT = TypeVar("ModelT", bound=pydantic.BaseModel)


def coerce(model_class: type[ModelT], data: ModelT | Mapping[str, Any]) -> ModelT:
    """Validate caller input into `model_class`, raising ValidationError on failure."""
    if isinstance(data, model_class):
        return data
    try:
        return model_class.model_validate(data)
    except pydantic.ValidationError as e:
        raise ValidationError(
            f"Invalid {model_class.__name__}",
            {"errors": _describe_errors(e)},
        ) from e


def _describe_errors(error: pydantic.ValidationError) -> list[dict[str, str]]:
    return [
        {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
        for err in error.errors()
    ]


def entry_id(entry: Any) -> str | None:
    """Id of a stored entry, whether it validated into a model or stayed raw."""
    if isinstance(entry, StoredRecord):
        return entry.id
    if isinstance(entry, dict):
        value = entry.get("id")
        return value if isinstance(value, str) else None
    return None


class BaseRecordRepository(Generic[RecordT]):
    """Generic repository over one RecordStore collection.

    Records are loaded, modified and saved as a whole sequence on every
    mutation. Stored entries that fail validation are hidden from queries
    but written back unchanged, in their original position, by every save.
    """

    collection: ClassVar[str]
    model_class: ClassVar[type[Any]]
    patch_class: ClassVar[type[PatchModel]]
    log_field: ClassVar[str]

    def __init__(
        self, store: RecordStore, clock: Callable[[], datetime] = utc_now
    ) -> None:
        self.store = store
        self.clock = clock

    def _read(self) -> list[RecordT | Any]:
        """Stored entries in order: validated models, or the raw value if invalid."""
        entries: list[RecordT | Any] = []
        for raw in self.store.load(self.collection):
            try:
                entries.append(self.model_class.model_validate(raw))
            except pydantic.ValidationError as e:
                logger.warning(
                    "Keeping unreadable %s entry %r as stored (%d validation errors)",
                    self.collection,
                    entry_id(raw) or raw,
                    e.error_count(),
                )
                entries.append(raw)
        return entries

    def _load(self) -> list[RecordT]:
        return [entry for entry in self._read() if isinstance(entry, self.model_class)]

    def _save(self, entries: list[RecordT | Any]) -> None:
        payload = [
            entry.to_record() if isinstance(entry, StoredRecord) else entry
            for entry in entries
        ]
        if not self.store.save(self.collection, payload):
            raise StorageError(
                f"Failed to persist {self.store.key_for(self.collection)}",
                {"collection": self.collection},
            )

    def _append(self, record: RecordT, entries: list[RecordT | Any] | None = None) -> RecordT:
        if entries is None:
            entries = self._read()
        entries.append(record)
        with log_context(collection=self.collection, **{self.log_field: record.id}):
            self._save(entries)
            logger.info("Created %s", record.id)
        return record

    def _stamp(self, changes: dict[str, Any]) -> dict[str, Any]:
        """Hook for fields every update sets besides the patch."""
        return changes

    def get_by_id(self, record_id: str) -> RecordT | None:
        for record in self._load():
            if record.id == record_id:
                return record
        return None

    def update(
        self, record_id: str, patch: PatchModel | Mapping[str, Any]
    ) -> RecordT | None:
        """Merge the explicitly set patch fields into the record.

        Returns None, leaving the collection unchanged, if no record has
        `record_id`. Stored keys the model does not declare survive the merge.
        """
        changes = self._stamp(coerce(self.patch_class, patch).changes())
        entries = self._read()

        with log_context(collection=self.collection, **{self.log_field: record_id}):
            for index, existing in enumerate(entries):
                if not isinstance(existing, self.model_class) or existing.id != record_id:
                    continue
                merged = {**existing.model_dump(), **changes}
                updated: RecordT = coerce(self.model_class, merged)
                entries[index] = updated
                self._save(entries)
                logger.info("Updated %s (%s)", record_id, ", ".join(sorted(changes)))
                return updated

            logger.debug("Update skipped, %s not found", record_id)
        return None

    def delete(self, record_id: str) -> bool:
        """Remove the record if present. Deleting an absent id still succeeds."""
        entries = self._read()
        remaining = [entry for entry in entries if entry_id(entry) != record_id]

        with log_context(collection=self.collection, **{self.log_field: record_id}):
            self._save(remaining)
            if len(remaining) != len(entries):
                logger.info("Deleted %s", record_id)
        return True
