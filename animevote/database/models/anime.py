# animevote/database/models/anime.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from animevote.database.base import Base


class Anime(Base):
    __tablename__ = "animes"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(200))

    # airing window, end is exclusive; NULL end = still airing
    air_start_datetime: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)
    air_end_datetime: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), server_default=func.now())


class AnimeSeason(Base):
    """Links an anime into a season's line-up (an anime may span seasons)."""
    __tablename__ = "anime_seasons"
    __table_args__ = (
        UniqueConstraint("anime_id", "season_id", name="uq_anime_seasons_anime_season"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    anime_id: Mapped[int] = mapped_column(ForeignKey("animes.id", ondelete="CASCADE"), index=True)
    season_id: Mapped[int] = mapped_column(ForeignKey("seasons.id", ondelete="CASCADE"), index=True)


class Episode(Base):
    __tablename__ = "episodes"
    __table_args__ = (
        UniqueConstraint("anime_id", "episode_number", name="uq_episodes_anime_number"),
        Index("ix_episodes_scheduled_at", "scheduled_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    anime_id: Mapped[int] = mapped_column(ForeignKey("animes.id", ondelete="CASCADE"), index=True)
    episode_number: Mapped[int] = mapped_column(Integer)

    scheduled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)
