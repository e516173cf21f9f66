# animevote/services/seasons.py
from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from animevote.database.models import Quarter, Season, SeasonType
from animevote.database.repo.quarter_repo import find_or_create_quarter, find_quarter
from animevote.database.repo.season_repo import (
    find_or_create_season,
    find_season_by_quarter,
    list_prepared_seasons,
)
from animevote.errors import NotFoundError


class SeasonService:
    @staticmethod
    async def get_or_create_quarter(
        session: AsyncSession,
        *,
        is_quarter_changed: bool,
        year_value: int,
        quarter_value: int,
    ) -> Quarter:
        """A new quarter may be created lazily; an unchanged one must already exist."""
        if is_quarter_changed:
            return await find_or_create_quarter(session, year_value, quarter_value)

        quarter = await find_quarter(session, year_value, quarter_value)
        if quarter is None:
            raise NotFoundError(f"quarter {year_value} Q{quarter_value} not found")
        return quarter

    @staticmethod
    async def get_or_create_season(session: AsyncSession, *, is_quarter_changed: bool, quarter: Quarter) -> Season:
        if is_quarter_changed:
            return await find_or_create_season(session, quarter)

        season = await find_season_by_quarter(session, quarter.id)
        if season is None:
            raise NotFoundError(f"season for quarter {quarter.year_value} Q{quarter.quarter_value} not found")
        return season

    @staticmethod
    async def get_seasons(session: AsyncSession) -> dict[int, list[SeasonType]]:
        """Prepared seasons grouped by year (ascending), each year in type_order."""
        out: dict[int, list[SeasonType]] = {}
        for season in await list_prepared_seasons(session):
            out.setdefault(season.year_value, []).append(season.season_type)
        return out
