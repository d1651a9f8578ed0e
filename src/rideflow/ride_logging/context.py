"""Record-layer fields attached to every log record emitted inside a block."""

import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

_fields: ContextVar[Mapping[str, Any]] = ContextVar("rideflow_log_context", default={})


def current_log_context() -> dict[str, Any]:
    return dict(_fields.get())


class ContextFilter(logging.Filter):
    """Copies the active log_context fields onto each record.

    Values passed explicitly through `extra=` take precedence.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _fields.get().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


@contextmanager
def log_context(**fields: Any) -> Iterator[None]:
    """Layer `fields` over the enclosing context until the block exits.

    The CLI opens one with the command name and each repository mutation
    nests another with the collection and record id. Leaving the inner
    block restores the command-only context.
    """
    token = _fields.set({**_fields.get(), **fields})
    try:
        yield
    finally:
        _fields.reset(token)
