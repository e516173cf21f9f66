# animevote/database/repo/vote_repo.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from animevote.database.models import Episode, EpisodeStar, WeekVoteSubmission


async def find_submission(session: AsyncSession, week_id: int, principal_key: str) -> WeekVoteSubmission | None:
    res = await session.execute(
        select(WeekVoteSubmission).where(
            WeekVoteSubmission.week_id == week_id,
            WeekVoteSubmission.principal_key == principal_key,
        )
    )
    return res.scalar_one_or_none()


async def latest_starred_episode_at(session: AsyncSession, submission_id: int) -> datetime | None:
    res = await session.execute(
        select(func.max(Episode.scheduled_at))
        .select_from(EpisodeStar)
        .join(Episode, Episode.id == EpisodeStar.episode_id)
        .where(EpisodeStar.submission_id == submission_id)
    )
    return res.scalar()
