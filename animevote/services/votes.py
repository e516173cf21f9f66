# animevote/services/votes.py
from __future__ import annotations

from datetime import datetime, timedelta

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from animevote.database.models import VoteStatus, Week, WeekVoteSubmission
from animevote.database.repo.vote_repo import find_submission, latest_starred_episode_at
from animevote.database.repo.week_repo import find_week_by_id
from animevote.database.tx import transactional
from animevote.errors import NotFoundError, VoteClosedError
from animevote.services.principal import principal_key


class VoteWindowService:
    # episode stars stay editable this long after the episode airs
    EPISODE_VOTE_WINDOW = timedelta(hours=36)

    @staticmethod
    async def require_votable_week(session: AsyncSession, *, week_id: int, now: datetime) -> Week:
        week = await find_week_by_id(session, week_id)
        if week is None:
            raise NotFoundError(f"week id={week_id} not found")
        if week.vote_status != VoteStatus.OPEN:
            raise VoteClosedError(f"week id={week_id} is {week.vote_status.value}")
        if not week.contains(now):
            raise VoteClosedError(f"week id={week_id} does not cover {now.isoformat()}")
        return week

    @staticmethod
    async def find_submission(
        session: AsyncSession,
        *,
        week_id: int,
        member_id: int | None,
        cookie_id: str | None,
    ) -> WeekVoteSubmission | None:
        return await find_submission(session, week_id, principal_key(member_id, cookie_id))

    @staticmethod
    async def record_submission_first_only(
        session: AsyncSession,
        *,
        week_id: int,
        member_id: int | None,
        cookie_id: str | None,
        now: datetime,
    ) -> WeekVoteSubmission | None:
        """
        Creates the principal's submission for an OPEN week.
        Returns None if this principal already submitted (unique constraint).
        """
        key = principal_key(member_id, cookie_id)
        await VoteWindowService.require_votable_week(session, week_id=week_id, now=now)

        submission = WeekVoteSubmission(
            week_id=week_id,
            principal_key=key,
            member_id=member_id,
            cookie_id=cookie_id,
        )
        try:
            async with transactional(session):
                session.add(submission)
                await session.flush()
            return submission
        except IntegrityError:
            return None

    @staticmethod
    async def episode_vote_time_left(session: AsyncSession, *, submission_id: int, now: datetime) -> int:
        """Seconds until the latest starred episode's vote window closes (0 if none / closed)."""
        latest = await latest_starred_episode_at(session, submission_id)
        if latest is None:
            return 0
        closes_at = latest + VoteWindowService.EPISODE_VOTE_WINDOW
        if now >= closes_at:
            return 0
        return int((closes_at - now).total_seconds())
