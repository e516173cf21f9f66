# animevote/database/repo/anime_repo.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from animevote.database.models import Anime, AnimeCandidate, AnimeSeason, Episode


@dataclass(frozen=True, slots=True)
class AnimePreviewRow:
    anime_id: int
    title: str
    airs_at: datetime | None
    episode_number: int | None = None


async def list_airing_anime_ids(session: AsyncSession, season_id: int, as_of: datetime) -> list[int]:
    """Anime in the season's line-up whose airing window contains `as_of`."""
    q = (
        select(Anime.id)
        .join(AnimeSeason, AnimeSeason.anime_id == Anime.id)
        .where(
            AnimeSeason.season_id == season_id,
            Anime.air_start_datetime.is_not(None),
            Anime.air_start_datetime <= as_of,
            or_(Anime.air_end_datetime.is_(None), Anime.air_end_datetime > as_of),
        )
        .order_by(Anime.id.asc())
    )
    res = await session.execute(q)
    return [int(x) for x in res.scalars().all()]


async def bulk_create_candidates(session: AsyncSession, week_id: int, anime_ids: list[int]) -> int:
    rows = [AnimeCandidate(week_id=week_id, anime_id=anime_id) for anime_id in anime_ids]
    session.add_all(rows)
    await session.flush()
    return len(rows)


async def list_candidate_anime_ids(session: AsyncSession, week_id: int) -> list[int]:
    res = await session.execute(
        select(AnimeCandidate.anime_id)
        .where(AnimeCandidate.week_id == week_id)
        .order_by(AnimeCandidate.anime_id.asc())
    )
    return [int(x) for x in res.scalars().all()]


async def list_episode_previews(session: AsyncSession, start: datetime, end: datetime) -> list[AnimePreviewRow]:
    q = (
        select(Anime.id, Anime.title, Episode.scheduled_at, Episode.episode_number)
        .join(Episode, Episode.anime_id == Anime.id)
        .where(Episode.scheduled_at >= start, Episode.scheduled_at < end)
        .order_by(Episode.scheduled_at.asc(), Anime.id.asc())
    )
    res = await session.execute(q)
    return [
        AnimePreviewRow(anime_id=int(anime_id), title=title, airs_at=airs_at, episode_number=int(number))
        for anime_id, title, airs_at, number in res.all()
    ]


async def list_season_previews(session: AsyncSession, season_id: int) -> list[AnimePreviewRow]:
    q = (
        select(Anime.id, Anime.title, Anime.air_start_datetime)
        .join(AnimeSeason, AnimeSeason.anime_id == Anime.id)
        .where(AnimeSeason.season_id == season_id)
        .order_by(Anime.air_start_datetime.asc(), Anime.id.asc())
    )
    res = await session.execute(q)
    return [
        AnimePreviewRow(anime_id=int(anime_id), title=title, airs_at=airs_at)
        for anime_id, title, airs_at in res.all()
    ]
