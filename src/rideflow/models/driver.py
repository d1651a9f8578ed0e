"""Driver record, draft and patch models."""

from datetime import datetime
from enum import Enum

from pydantic import Field

from .base import PatchModel, RecordModel, StoredRecord

MIN_RATING = 1.0
MAX_RATING = 5.0


class DriverStatus(str, Enum):
    AVAILABLE = "available"
    BUSY = "busy"
    OFFLINE = "offline"


class DriverDraft(RecordModel):
    name: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    vehicle: str = Field(min_length=1)
    plate: str = Field(min_length=1)
    rating: float = Field(ge=MIN_RATING, le=MAX_RATING)
    status: DriverStatus = DriverStatus.AVAILABLE


class Driver(StoredRecord):
    id: str
    name: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    vehicle: str = Field(min_length=1)
    plate: str = Field(min_length=1)
    rating: float = Field(ge=MIN_RATING, le=MAX_RATING)
    status: DriverStatus = DriverStatus.AVAILABLE
    created_at: datetime


class DriverPatch(PatchModel):
    name: str | None = Field(default=None, min_length=1)
    phone: str | None = Field(default=None, min_length=1)
    vehicle: str | None = Field(default=None, min_length=1)
    plate: str | None = Field(default=None, min_length=1)
    rating: float | None = Field(default=None, ge=MIN_RATING, le=MAX_RATING)
    status: DriverStatus | None = None
