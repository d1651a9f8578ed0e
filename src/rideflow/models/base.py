"""Shared configuration for persisted record models."""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class RecordModel(BaseModel):
    """Base for caller input and records stored as camelCase JSON objects."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class StoredRecord(RecordModel):
    """A persisted record.

    Keys the model does not declare are kept as extras, so loading and
    saving a record written by an older client leaves them in place.
    """

    model_config = ConfigDict(extra="allow")

    def to_record(self) -> dict[str, Any]:
        """JSON-ready dict with camelCase keys; declared fields left as None are omitted."""
        unset = {name for name in type(self).model_fields if getattr(self, name) is None}
        return self.model_dump(mode="json", by_alias=True, exclude=unset)


class PatchModel(RecordModel):
    """Partial update. Only fields the caller explicitly set are merged."""

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)
