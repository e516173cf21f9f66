# animevote/database/repo/season_repo.py
from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from animevote.database.models import Quarter, Season
from animevote.database.tx import is_lock_conflict, transactional
from animevote.errors import RaceLostError

log = logging.getLogger(__name__)


async def find_season_by_quarter(session: AsyncSession, quarter_id: int) -> Season | None:
    res = await session.execute(select(Season).where(Season.quarter_id == quarter_id))
    return res.scalar_one_or_none()


async def find_or_create_season(session: AsyncSession, quarter: Quarter) -> Season:
    """Same get-or-insert discipline as find_or_create_quarter, keyed by quarter_id."""
    season = await find_season_by_quarter(session, quarter.id)
    if season is not None:
        return season

    season = Season.create(quarter)
    try:
        async with transactional(session):
            session.add(season)
            await session.flush()
        log.info("Created season %s %s", season.year_value, season.season_type.value)
        return season
    except IntegrityError:
        log.info("Season for quarter id=%s created concurrently, re-reading", quarter.id)
    except OperationalError as e:
        if not is_lock_conflict(e):
            raise
        raise RaceLostError(f"season for quarter id={quarter.id}: write lock lost to a concurrent writer") from e

    season = await find_season_by_quarter(session, quarter.id)
    if season is None:
        raise RaceLostError(f"season for quarter id={quarter.id} insert conflicted but row is not visible")
    return season


async def list_prepared_seasons(session: AsyncSession) -> list[Season]:
    res = await session.execute(
        select(Season)
        .where(Season.is_prepared.is_(True))
        .order_by(Season.year_value.asc(), Season.type_order.asc())
    )
    return list(res.scalars().all())
