# animevote/database/models/candidate.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from animevote.database.base import Base


class AnimeCandidate(Base):
    """
    Eligibility of one anime to receive votes in one week.
    Bulk-created when the week opens, never updated afterwards.
    """
    __tablename__ = "anime_candidates"
    __table_args__ = (
        UniqueConstraint("week_id", "anime_id", name="uq_anime_candidates_week_anime"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    week_id: Mapped[int] = mapped_column(ForeignKey("weeks.id", ondelete="CASCADE"), index=True)
    anime_id: Mapped[int] = mapped_column(ForeignKey("animes.id", ondelete="CASCADE"), index=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), server_default=func.now())
