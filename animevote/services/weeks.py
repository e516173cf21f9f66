# animevote/services/weeks.py
from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from animevote.database.models import Season, Week
from animevote.database.repo.anime_repo import bulk_create_candidates, list_candidate_anime_ids
from animevote.database.repo.quarter_repo import find_or_create_quarter, find_quarter
from animevote.database.repo.season_repo import find_or_create_season
from animevote.database.repo.week_repo import (
    find_open_week,
    find_week_by_id,
    find_week_by_time,
    find_week_by_yqw,
    save_week,
)
from animevote.database.tx import is_lock_conflict, transactional
from animevote.errors import InvalidTransitionError, NotFoundError, RaceLostError
from animevote.services.candidates import CandidateSource, SeasonLineupSource
from animevote.services.seasons import SeasonService
from animevote.utils.quarters import CycleRecord, resolve, weeks_in_quarter

log = logging.getLogger(__name__)


def week_cycle(week: Week) -> CycleRecord:
    return CycleRecord(week.quarter.year_value, week.quarter.quarter_value, week.week_value)


async def _flush_or_race(session: AsyncSession, what: str) -> None:
    try:
        await session.flush()
    except StaleDataError as e:
        raise RaceLostError(f"{what}: week row changed concurrently") from e
    except IntegrityError as e:
        raise RaceLostError(f"{what}: conflicting row already exists") from e
    except OperationalError as e:
        if not is_lock_conflict(e):
            raise
        raise RaceLostError(f"{what}: write lock lost to a concurrent writer") from e


async def _save_new_week(session: AsyncSession, week: Week, cycle: CycleRecord) -> None:
    try:
        await save_week(session, week)
    except IntegrityError as e:
        raise RaceLostError(f"week {cycle.as_tuple()} already exists") from e
    except OperationalError as e:
        if not is_lock_conflict(e):
            raise
        raise RaceLostError(f"week {cycle.as_tuple()}: write lock lost to a concurrent writer") from e


async def _seed_candidates(
    session: AsyncSession,
    source: CandidateSource,
    *,
    week: Week,
    season: Season,
    as_of: datetime,
) -> int:
    anime_ids = sorted(set(await source.titles_eligible_for(session, season, as_of)))
    return await bulk_create_candidates(session, week.id, anime_ids)


class WeekService:
    # ---------- read path ----------
    @staticmethod
    async def get_current_week(session: AsyncSession, now: datetime) -> Week:
        """Always resolved against the clock, never a cached pointer."""
        cycle = resolve(now)
        week = await find_week_by_yqw(session, cycle.year_value, cycle.quarter_value, cycle.week_value)
        if week is None:
            raise NotFoundError(
                f"week {cycle.year_value} Q{cycle.quarter_value} W{cycle.week_value} not found"
            )
        return week

    @staticmethod
    async def get_week_by_time(session: AsyncSession, instant: datetime) -> Week:
        week = await find_week_by_time(session, instant)
        if week is None:
            raise NotFoundError(f"no week contains {instant.isoformat()}")
        return week

    @staticmethod
    async def get_quarter_id_by_yq(session: AsyncSession, year_value: int, quarter_value: int) -> int:
        quarter = await find_quarter(session, year_value, quarter_value)
        if quarter is None:
            raise NotFoundError(f"quarter {year_value} Q{quarter_value} not found")
        return quarter.id

    @staticmethod
    async def get_week_id_by_yqw(session: AsyncSession, year_value: int, quarter_value: int, week_value: int) -> int:
        week = await find_week_by_yqw(session, year_value, quarter_value, week_value)
        if week is None:
            raise NotFoundError(f"week {year_value} Q{quarter_value} W{week_value} not found")
        return week.id

    @staticmethod
    async def get_candidate_anime_ids(session: AsyncSession, week_id: int) -> list[int]:
        week = await find_week_by_id(session, week_id)
        if week is None:
            raise NotFoundError(f"week id={week_id} not found")
        return await list_candidate_anime_ids(session, week.id)

    # ---------- write path ----------
    @staticmethod
    async def advance_cycle(
        session: AsyncSession,
        *,
        now: datetime,
        current_open_week_id: int,
        expected_cycle: CycleRecord | None = None,
        candidate_source: CandidateSource | None = None,
    ) -> int:
        """
        Rollover: close the OPEN week, find-or-create the next quarter/season,
        create the next week, seed its candidates and open it.

        Runs as one unit of work. Calling it again for a week that is already
        CLOSED raises InvalidTransitionError and leaves nothing behind;
        losing to a concurrent rollover raises RaceLostError.
        """
        expected = expected_cycle or resolve(now)
        source = candidate_source or SeasonLineupSource()

        async with transactional(session):
            last_week = await find_week_by_id(session, current_open_week_id)
            if last_week is None:
                raise NotFoundError(f"week id={current_open_week_id} not found")

            # === close outgoing week (double-rollover guard) ===
            last_week.close_vote()

            last_cycle = week_cycle(last_week)
            if expected.as_tuple() <= last_cycle.as_tuple():
                raise InvalidTransitionError(
                    f"rollover target {expected.as_tuple()} is not after closing week {last_cycle.as_tuple()}"
                )
            last_week_value = weeks_in_quarter(expected.year_value, expected.quarter_value)
            if expected.week_value > last_week_value:
                raise InvalidTransitionError(
                    f"rollover target {expected.as_tuple()} is past the quarter's last week {last_week_value}"
                )
            await _flush_or_race(session, "close week")

            # === quarter / season (lazy) ===
            is_quarter_changed = not expected.same_quarter(last_cycle.year_value, last_cycle.quarter_value)
            quarter = await SeasonService.get_or_create_quarter(
                session,
                is_quarter_changed=is_quarter_changed,
                year_value=expected.year_value,
                quarter_value=expected.quarter_value,
            )
            season = await SeasonService.get_or_create_season(
                session,
                is_quarter_changed=is_quarter_changed,
                quarter=quarter,
            )

            # === new week ===
            new_week = Week.create(quarter, expected.week_value)
            await _save_new_week(session, new_week, expected)

            n = await _seed_candidates(session, source, week=new_week, season=season, as_of=now)

            # === open new week ===
            new_week.open_vote()
            await _flush_or_race(session, "open week")

        log.info(
            "Rolled over week id=%s %s -> id=%s %s (candidates=%s, quarter_changed=%s)",
            last_week.id,
            last_cycle.as_tuple(),
            new_week.id,
            expected.as_tuple(),
            n,
            is_quarter_changed,
        )
        return new_week.id

    @staticmethod
    async def open_initial_week(
        session: AsyncSession,
        *,
        now: datetime,
        candidate_source: CandidateSource | None = None,
    ) -> int:
        """Bootstrap for an empty cycle: open the week containing `now`."""
        cycle = resolve(now)
        source = candidate_source or SeasonLineupSource()

        async with transactional(session):
            open_week = await find_open_week(session)
            if open_week is not None:
                raise InvalidTransitionError(f"week id={open_week.id} is already OPEN")

            quarter = await find_or_create_quarter(session, cycle.year_value, cycle.quarter_value)
            season = await find_or_create_season(session, quarter)

            existing = await find_week_by_yqw(session, cycle.year_value, cycle.quarter_value, cycle.week_value)
            if existing is not None:
                raise InvalidTransitionError(
                    f"week {cycle.as_tuple()} already exists as {existing.vote_status.value}"
                )

            week = Week.create(quarter, cycle.week_value)
            await _save_new_week(session, week, cycle)

            n = await _seed_candidates(session, source, week=week, season=season, as_of=now)

            week.open_vote()
            await _flush_or_race(session, "open initial week")

        log.info("Opened initial week id=%s %s (candidates=%s)", week.id, cycle.as_tuple(), n)
        return week.id
