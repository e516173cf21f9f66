# animevote/database/models/season.py
from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Integer, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from animevote.database.base import Base
from animevote.database.models.quarter import Quarter


class SeasonType(str, enum.Enum):
    WINTER = "WINTER"
    SPRING = "SPRING"
    SUMMER = "SUMMER"
    AUTUMN = "AUTUMN"

    @classmethod
    def for_quarter(cls, quarter_value: int) -> "SeasonType":
        return _QUARTER_SEASONS[quarter_value]


_QUARTER_SEASONS = {
    1: SeasonType.WINTER,
    2: SeasonType.SPRING,
    3: SeasonType.SUMMER,
    4: SeasonType.AUTUMN,
}


class Season(Base):
    """
    Anime season for one quarter (1:1, created lazily with its quarter).
    is_prepared gates visibility in season listings.
    """
    __tablename__ = "seasons"

    id: Mapped[int] = mapped_column(primary_key=True)

    quarter_id: Mapped[int] = mapped_column(
        ForeignKey("quarters.id", ondelete="CASCADE"),
        unique=True,
        index=True,
    )

    year_value: Mapped[int] = mapped_column(Integer, index=True)
    season_type: Mapped[SeasonType] = mapped_column(Enum(SeasonType, native_enum=False))
    type_order: Mapped[int] = mapped_column(Integer)

    is_prepared: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), server_default=func.now())

    quarter: Mapped[Quarter] = relationship(lazy="joined")

    @classmethod
    def create(cls, quarter: Quarter) -> "Season":
        return cls(
            quarter=quarter,
            year_value=quarter.year_value,
            season_type=SeasonType.for_quarter(quarter.quarter_value),
            type_order=quarter.quarter_value,
            is_prepared=False,
        )
