# animevote/services/schedule.py
from __future__ import annotations

import enum
from datetime import datetime, time

from sqlalchemy.ext.asyncio import AsyncSession

from animevote.database.repo.anime_repo import AnimePreviewRow, list_episode_previews, list_season_previews
from animevote.database.repo.quarter_repo import find_quarter
from animevote.database.repo.season_repo import find_season_by_quarter
from animevote.errors import NotFoundError
from animevote.utils.quarters import weekly_window_from_offset


class DayOfWeekShort(str, enum.Enum):
    MON = "MON"
    TUE = "TUE"
    WED = "WED"
    THU = "THU"
    FRI = "FRI"
    SAT = "SAT"
    SUN = "SUN"
    NONE = "NONE"  # no air time known


_WEEKDAYS = list(DayOfWeekShort)[:7]

Schedule = dict[DayOfWeekShort, list[AnimePreviewRow]]


def _day_of(row: AnimePreviewRow) -> DayOfWeekShort:
    if row.airs_at is None:
        return DayOfWeekShort.NONE
    return _WEEKDAYS[row.airs_at.weekday()]


def group_by_weekday(rows: list[AnimePreviewRow]) -> Schedule:
    """Every key is present, empty days included; row order is kept."""
    out: Schedule = {day: [] for day in DayOfWeekShort}
    for row in rows:
        out[_day_of(row)].append(row)
    return out


class ScheduleService:
    @staticmethod
    async def get_weekly_schedule(session: AsyncSession, *, now: datetime, offset: time) -> Schedule:
        start, end = weekly_window_from_offset(now, offset)
        return group_by_weekday(await list_episode_previews(session, start, end))

    @staticmethod
    async def get_schedule_by_quarter(session: AsyncSession, *, year_value: int, quarter_value: int) -> Schedule:
        quarter = await find_quarter(session, year_value, quarter_value)
        if quarter is None:
            raise NotFoundError(f"quarter {year_value} Q{quarter_value} not found")
        season = await find_season_by_quarter(session, quarter.id)
        if season is None:
            raise NotFoundError(f"season for quarter {year_value} Q{quarter_value} not found")
        return group_by_weekday(await list_season_previews(session, season.id))
