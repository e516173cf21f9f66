# animevote/services/candidates.py
from __future__ import annotations

from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from animevote.database.models import Season
from animevote.database.repo.anime_repo import list_airing_anime_ids


class CandidateSource(Protocol):
    async def titles_eligible_for(self, session: AsyncSession, season: Season, as_of: datetime) -> list[int]:
        """Anime ids allowed to receive votes in a week of `season` opening at `as_of`."""
        ...


class SeasonLineupSource:
    """Default source: the season's anime that are on air at `as_of`."""

    async def titles_eligible_for(self, session: AsyncSession, season: Season, as_of: datetime) -> list[int]:
        return await list_airing_anime_ids(session, season.id, as_of)
