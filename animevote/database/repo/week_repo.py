# animevote/database/repo/week_repo.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from animevote.database.models import Quarter, VoteStatus, Week


async def find_week_by_id(session: AsyncSession, week_id: int) -> Week | None:
    res = await session.execute(select(Week).where(Week.id == week_id))
    return res.scalar_one_or_none()


async def find_open_week(session: AsyncSession) -> Week | None:
    res = await session.execute(select(Week).where(Week.vote_status == VoteStatus.OPEN))
    return res.scalar_one_or_none()


async def find_week_by_time(session: AsyncSession, instant: datetime) -> Week | None:
    res = await session.execute(
        select(Week).where(
            Week.start_datetime <= instant,
            Week.end_datetime > instant,
        )
    )
    return res.scalar_one_or_none()


async def find_week_by_yqw(
    session: AsyncSession,
    year_value: int,
    quarter_value: int,
    week_value: int,
) -> Week | None:
    res = await session.execute(
        select(Week)
        .join(Quarter, Quarter.id == Week.quarter_id)
        .where(
            Quarter.year_value == year_value,
            Quarter.quarter_value == quarter_value,
            Week.week_value == week_value,
        )
    )
    return res.scalar_one_or_none()


async def save_week(session: AsyncSession, week: Week) -> Week:
    session.add(week)
    await session.flush()
    return week
