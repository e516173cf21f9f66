# animevote/database/repo/quarter_repo.py
from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from animevote.database.models import Quarter
from animevote.database.tx import is_lock_conflict, transactional
from animevote.errors import RaceLostError
from animevote.utils.quarters import anchor_for_quarter

log = logging.getLogger(__name__)


async def find_quarter(session: AsyncSession, year_value: int, quarter_value: int) -> Quarter | None:
    res = await session.execute(
        select(Quarter).where(
            Quarter.year_value == year_value,
            Quarter.quarter_value == quarter_value,
        )
    )
    return res.scalar_one_or_none()


async def find_or_create_quarter(session: AsyncSession, year_value: int, quarter_value: int) -> Quarter:
    """
    Idempotent get-or-insert keyed by (year_value, quarter_value).

    Insert runs in a SAVEPOINT; a unique-constraint conflict means another
    writer created the row first, so re-read and return the winner.
    A lock conflict (the winner committed after this transaction's snapshot)
    raises RaceLostError; retry in a fresh transaction.
    """
    quarter = await find_quarter(session, year_value, quarter_value)
    if quarter is not None:
        return quarter

    quarter = Quarter(
        year_value=year_value,
        quarter_value=quarter_value,
        anchor_datetime=anchor_for_quarter(year_value, quarter_value),
    )
    try:
        async with transactional(session):
            session.add(quarter)
            await session.flush()
        log.info("Created quarter %s Q%s (anchor %s)", year_value, quarter_value, quarter.anchor_datetime)
        return quarter
    except IntegrityError:
        log.info("Quarter %s Q%s created concurrently, re-reading", year_value, quarter_value)
    except OperationalError as e:
        if not is_lock_conflict(e):
            raise
        # our read snapshot predates the winner's commit; only a new transaction can see it
        raise RaceLostError(f"quarter {year_value} Q{quarter_value}: write lock lost to a concurrent writer") from e

    quarter = await find_quarter(session, year_value, quarter_value)
    if quarter is None:
        raise RaceLostError(f"quarter {year_value} Q{quarter_value} insert conflicted but row is not visible")
    return quarter
