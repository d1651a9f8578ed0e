"""Single-key writes against the `kv_store` table.

Each write runs in its own session and commits once, so a failure leaves
the previously committed value for that key in place.
"""

from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

from sqlalchemy.orm import Session, sessionmaker

from .schema import KeyValueEntry


@contextmanager
def transaction(session_maker: sessionmaker[Any]) -> Generator[Session]:
    """Open a session that commits on exit and rolls back if the block raises.

    Example:
        with transaction(session_maker) as session:
            upsert_entry(session, "rideflow_rides", "[]")

    Raises:
        Any exception raised within the block, after rollback
    """
    with session_maker() as session:
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise


def upsert_entry(session: Session, key: str, value: str) -> None:
    """Insert the key or replace its value."""
    entry = session.get(KeyValueEntry, key)
    if entry is None:
        session.add(KeyValueEntry(key=key, value=value))
        return
    entry.value = value


def delete_entry(session: Session, key: str) -> bool:
    """Delete the key. Returns False if it was not stored."""
    entry = session.get(KeyValueEntry, key)
    if entry is None:
        return False
    session.delete(entry)
    return True
