"""Exception hierarchy for the record layer."""

from typing import Any


class RideflowError(Exception):
    """Base exception for all rideflow errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class PermanentError(RideflowError):
    """Errors that will not succeed on retry."""

    pass


class ValidationError(PermanentError):
    """Invalid draft or patch. Raised before anything is persisted."""

    pass


class NotFoundError(PermanentError):
    """Requested record does not exist."""

    pass


class StorageError(RideflowError):
    """Writing to the backing key-value store failed."""

    pass
