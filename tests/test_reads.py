"""
Read path: week lookups, season listing, schedules, vote window.
"""
from datetime import datetime, time

import pytest
from sqlalchemy import select

from animevote.database.models import Anime, AnimeSeason, Episode, EpisodeStar, Quarter, Season, SeasonType
from animevote.database.repo.quarter_repo import find_or_create_quarter
from animevote.database.repo.season_repo import find_or_create_season
from animevote.errors import AuthRequiredError, NotFoundError, VoteClosedError
from animevote.services.schedule import DayOfWeekShort, ScheduleService
from animevote.services.seasons import SeasonService
from animevote.services.votes import VoteWindowService
from animevote.services.weeks import WeekService


async def _open_initial(db, now) -> int:
    async with db.session() as session:
        return await WeekService.open_initial_week(session, now=now)


@pytest.mark.asyncio
async def test_current_week_not_found_on_empty_store(db):
    async with db.session() as session:
        with pytest.raises(NotFoundError):
            await WeekService.get_current_week(session, datetime(2025, 1, 8, 12, 0))


@pytest.mark.asyncio
async def test_week_lookups(db):
    week_id = await _open_initial(db, datetime(2025, 1, 8, 12, 0))

    async with db.session() as session:
        assert (await WeekService.get_current_week(session, datetime(2025, 1, 13, 17, 59, 59))).id == week_id
        assert (await WeekService.get_week_by_time(session, datetime(2025, 1, 6, 18, 0))).id == week_id
        assert await WeekService.get_week_id_by_yqw(session, 2025, 1, 2) == week_id

        quarter_id = await WeekService.get_quarter_id_by_yq(session, 2025, 1)
        quarter = await session.get(Quarter, quarter_id)
        assert (quarter.year_value, quarter.quarter_value) == (2025, 1)

        # right edge is exclusive and the next week does not exist yet
        with pytest.raises(NotFoundError):
            await WeekService.get_week_by_time(session, datetime(2025, 1, 13, 18, 0))
        with pytest.raises(NotFoundError):
            await WeekService.get_current_week(session, datetime(2025, 1, 13, 18, 0))
        with pytest.raises(NotFoundError):
            await WeekService.get_week_id_by_yqw(session, 2025, 1, 3)
        with pytest.raises(NotFoundError):
            await WeekService.get_quarter_id_by_yq(session, 2025, 2)


@pytest.mark.asyncio
async def test_find_or_create_is_idempotent(db):
    async with db.session() as session:
        q1 = await find_or_create_quarter(session, 2025, 3)
        q2 = await find_or_create_quarter(session, 2025, 3)
        s1 = await find_or_create_season(session, q1)
        s2 = await find_or_create_season(session, q2)
        await session.commit()

        assert q1.id == q2.id
        assert s1.id == s2.id
        assert q1.anchor_datetime == datetime(2025, 6, 30, 18, 0)

    async with db.session() as session:
        again = await find_or_create_quarter(session, 2025, 3)
        assert again.id == q1.id
        assert len((await session.execute(select(Quarter))).scalars().all()) == 1
        assert len((await session.execute(select(Season))).scalars().all()) == 1


@pytest.mark.asyncio
async def test_get_or_create_quarter_unchanged_must_exist(db):
    async with db.session() as session:
        with pytest.raises(NotFoundError):
            await SeasonService.get_or_create_quarter(
                session,
                is_quarter_changed=False,
                year_value=2030,
                quarter_value=1,
            )


@pytest.mark.asyncio
async def test_get_seasons_lists_prepared_grouped_by_year(db):
    async with db.session() as session:
        for year, quarter_value, prepared in [
            (2025, 3, True),
            (2024, 4, True),
            (2025, 1, True),
            (2025, 2, False),
            (2024, 2, True),
        ]:
            quarter = await find_or_create_quarter(session, year, quarter_value)
            season = await find_or_create_season(session, quarter)
            season.is_prepared = prepared
        await session.commit()

    async with db.session() as session:
        seasons = await SeasonService.get_seasons(session)

    assert list(seasons.keys()) == [2024, 2025]
    assert seasons[2024] == [SeasonType.SPRING, SeasonType.AUTUMN]
    assert seasons[2025] == [SeasonType.WINTER, SeasonType.SUMMER]


@pytest.mark.asyncio
async def test_weekly_schedule_groups_by_weekday(db):
    async with db.session() as session:
        a = Anime(title="Mon show")
        b = Anime(title="Sat show")
        session.add_all([a, b])
        await session.flush()
        session.add_all([
            Episode(anime_id=a.id, episode_number=1, scheduled_at=datetime(2025, 1, 6, 23, 0)),  # Mon, in window
            Episode(anime_id=b.id, episode_number=3, scheduled_at=datetime(2025, 1, 11, 1, 0)),  # Sat, in window
            Episode(anime_id=a.id, episode_number=2, scheduled_at=datetime(2025, 1, 13, 23, 0)),  # next window
            Episode(anime_id=b.id, episode_number=2, scheduled_at=datetime(2025, 1, 4, 1, 0)),  # previous window
        ])
        await session.commit()

    async with db.session() as session:
        schedule = await ScheduleService.get_weekly_schedule(
            session,
            now=datetime(2025, 1, 8, 12, 0),
            offset=time(18, 0),
        )

    assert set(schedule.keys()) == set(DayOfWeekShort)
    assert [(r.title, r.episode_number) for r in schedule[DayOfWeekShort.MON]] == [("Mon show", 1)]
    assert [(r.title, r.episode_number) for r in schedule[DayOfWeekShort.SAT]] == [("Sat show", 3)]
    assert schedule[DayOfWeekShort.TUE] == []
    assert schedule[DayOfWeekShort.NONE] == []


@pytest.mark.asyncio
async def test_schedule_by_quarter(db):
    async with db.session() as session:
        quarter = await find_or_create_quarter(session, 2025, 2)
        season = await find_or_create_season(session, quarter)
        wed = Anime(title="Wed show", air_start_datetime=datetime(2025, 4, 2, 22, 0))
        tba = Anime(title="TBA")
        session.add_all([wed, tba])
        await session.flush()
        session.add_all([AnimeSeason(anime_id=wed.id, season_id=season.id), AnimeSeason(anime_id=tba.id, season_id=season.id)])
        await session.commit()

    async with db.session() as session:
        schedule = await ScheduleService.get_schedule_by_quarter(session, year_value=2025, quarter_value=2)
        with pytest.raises(NotFoundError):
            await ScheduleService.get_schedule_by_quarter(session, year_value=2025, quarter_value=3)

    assert [r.title for r in schedule[DayOfWeekShort.WED]] == ["Wed show"]
    assert [r.title for r in schedule[DayOfWeekShort.NONE]] == ["TBA"]


@pytest.mark.asyncio
async def test_vote_window_and_one_submission_per_principal(db):
    week_id = await _open_initial(db, datetime(2025, 1, 8, 12, 0))
    now = datetime(2025, 1, 9, 12, 0)

    async with db.session() as session:
        first = await VoteWindowService.record_submission_first_only(
            session, week_id=week_id, member_id=None, cookie_id="abc", now=now
        )
        dup = await VoteWindowService.record_submission_first_only(
            session, week_id=week_id, member_id=None, cookie_id="abc", now=now
        )
        member = await VoteWindowService.record_submission_first_only(
            session, week_id=week_id, member_id=42, cookie_id="abc", now=now
        )
        await session.commit()

        assert first is not None and first.principal_key == "c:abc"
        assert dup is None
        assert member is not None and member.principal_key == "m:42"

        found = await VoteWindowService.find_submission(session, week_id=week_id, member_id=None, cookie_id="abc")
        assert found.id == first.id

        with pytest.raises(AuthRequiredError):
            await VoteWindowService.record_submission_first_only(
                session, week_id=week_id, member_id=None, cookie_id="", now=now
            )
        with pytest.raises(VoteClosedError):
            await VoteWindowService.require_votable_week(session, week_id=week_id, now=datetime(2025, 1, 13, 18, 0))
        with pytest.raises(NotFoundError):
            await VoteWindowService.require_votable_week(session, week_id=999, now=now)


@pytest.mark.asyncio
async def test_closed_week_rejects_votes(db):
    first_id = await _open_initial(db, datetime(2025, 1, 8, 12, 0))
    async with db.session() as session:
        await WeekService.advance_cycle(session, now=datetime(2025, 1, 13, 18, 0), current_open_week_id=first_id)

    async with db.session() as session:
        with pytest.raises(VoteClosedError):
            await VoteWindowService.require_votable_week(session, week_id=first_id, now=datetime(2025, 1, 10))


@pytest.mark.asyncio
async def test_episode_vote_time_left(db):
    week_id = await _open_initial(db, datetime(2025, 1, 8, 12, 0))

    async with db.session() as session:
        anime = Anime(title="Show")
        session.add(anime)
        await session.flush()
        ep1 = Episode(anime_id=anime.id, episode_number=1, scheduled_at=datetime(2025, 1, 7, 0, 0))
        ep2 = Episode(anime_id=anime.id, episode_number=2, scheduled_at=datetime(2025, 1, 8, 0, 0))
        session.add_all([ep1, ep2])
        await session.flush()

        submission = await VoteWindowService.record_submission_first_only(
            session, week_id=week_id, member_id=1, cookie_id=None, now=datetime(2025, 1, 8, 12, 0)
        )
        empty = await VoteWindowService.episode_vote_time_left(
            session, submission_id=submission.id, now=datetime(2025, 1, 8, 12, 0)
        )
        session.add_all([
            EpisodeStar(submission_id=submission.id, episode_id=ep1.id, star_score=8),
            EpisodeStar(submission_id=submission.id, episode_id=ep2.id, star_score=6),
        ])
        await session.flush()

        # latest episode 2025-01-08 00:00 + 36h = 2025-01-09 12:00
        left = await VoteWindowService.episode_vote_time_left(
            session, submission_id=submission.id, now=datetime(2025, 1, 9, 11, 0)
        )
        expired = await VoteWindowService.episode_vote_time_left(
            session, submission_id=submission.id, now=datetime(2025, 1, 9, 12, 0)
        )

    assert empty == 0
    assert left == 3600
    assert expired == 0
