# animevote/database/models/week.py
from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, Index, Integer, UniqueConstraint, func, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from animevote.database.base import Base
from animevote.database.models.quarter import Quarter
from animevote.errors import InvalidTransitionError
from animevote.utils.quarters import week_bounds


class VoteStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    OPEN = "OPEN"
    CLOSED = "CLOSED"


class Week(Base):
    """
    One voting week inside a quarter: [start_datetime, end_datetime).

    Lifecycle: DRAFT -> OPEN -> CLOSED, never skipped or reversed.
    version_id makes a concurrent close fail with StaleDataError instead of
    silently closing twice; the partial unique index keeps a single OPEN row.
    """
    __tablename__ = "weeks"
    __table_args__ = (
        UniqueConstraint("quarter_id", "week_value", name="uq_weeks_quarter_week"),
        Index("ix_weeks_start_end", "start_datetime", "end_datetime"),
        Index(
            "uq_weeks_single_open",
            "vote_status",
            unique=True,
            sqlite_where=text("vote_status = 'OPEN'"),
            postgresql_where=text("vote_status = 'OPEN'"),
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    quarter_id: Mapped[int] = mapped_column(ForeignKey("quarters.id", ondelete="CASCADE"), index=True)
    week_value: Mapped[int] = mapped_column(Integer)

    start_datetime: Mapped[datetime] = mapped_column(DateTime(timezone=False))
    end_datetime: Mapped[datetime] = mapped_column(DateTime(timezone=False))

    vote_status: Mapped[VoteStatus] = mapped_column(
        Enum(VoteStatus, native_enum=False),
        default=VoteStatus.DRAFT,
        nullable=False,
    )

    version_id: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), server_default=func.now())

    quarter: Mapped[Quarter] = relationship(lazy="joined")

    __mapper_args__ = {"version_id_col": version_id}

    @classmethod
    def create(cls, quarter: Quarter, week_value: int) -> "Week":
        start, end = week_bounds(quarter.anchor_datetime, week_value)
        return cls(
            quarter=quarter,
            week_value=week_value,
            start_datetime=start,
            end_datetime=end,
            vote_status=VoteStatus.DRAFT,
        )

    def contains(self, instant: datetime) -> bool:
        return self.start_datetime <= instant < self.end_datetime

    def open_vote(self) -> None:
        if self.vote_status != VoteStatus.DRAFT:
            raise InvalidTransitionError(
                f"week id={self.id} cannot open from {self.vote_status.value}"
            )
        self.vote_status = VoteStatus.OPEN

    def close_vote(self) -> None:
        if self.vote_status != VoteStatus.OPEN:
            raise InvalidTransitionError(
                f"week id={self.id} cannot close from {self.vote_status.value}"
            )
        self.vote_status = VoteStatus.CLOSED

    def __repr__(self) -> str:
        return f"<Week id={self.id} week={self.week_value} {self.vote_status.value}>"
