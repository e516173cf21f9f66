# animevote/database/tx.py
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession


@asynccontextmanager
async def transactional(session: AsyncSession) -> AsyncIterator[None]:
    """
    Unit of work on top of SQLAlchemy 2.x autobegin.

    - Inside an active transaction: SAVEPOINT (begin_nested), the caller commits
    - Otherwise: a new transaction committed on exit
    Either way an exception rolls back everything done inside the block.
    """
    if session.in_transaction():
        async with session.begin_nested():
            yield
    else:
        async with session.begin():
            yield


_LOCK_CONFLICT_MARKERS = (
    "database is locked",  # sqlite: SQLITE_BUSY / SQLITE_BUSY_SNAPSHOT
    "database is busy",
    "could not serialize access",  # postgres serialization failure
    "deadlock detected",
    "could not obtain lock",
)


def is_lock_conflict(exc: OperationalError) -> bool:
    """True when the store refused a write because another writer holds or moved past our snapshot."""
    message = str(exc.orig or exc).lower()
    return any(marker in message for marker in _LOCK_CONFLICT_MARKERS)
