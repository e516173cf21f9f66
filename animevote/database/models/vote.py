# animevote/database/models/vote.py
from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from animevote.database.base import Base


class BallotType(str, enum.Enum):
    NORMAL = "NORMAL"
    BONUS = "BONUS"


class WeekVoteSubmission(Base):
    """
    One submission per (week, principal_key).
    principal_key is "m:<member_id>" or "c:<cookie_id>".
    """
    __tablename__ = "week_vote_submissions"
    __table_args__ = (
        UniqueConstraint("week_id", "principal_key", name="uq_week_vote_submissions_week_principal"),
        Index("ix_week_vote_submissions_week_cookie", "week_id", "cookie_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    week_id: Mapped[int] = mapped_column(ForeignKey("weeks.id", ondelete="CASCADE"), index=True)
    principal_key: Mapped[str] = mapped_column(String(80))

    member_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True, index=True)
    cookie_id: Mapped[str | None] = mapped_column(String(64), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), server_default=func.now())


class Ballot(Base):
    __tablename__ = "ballots"
    __table_args__ = (
        UniqueConstraint("submission_id", "candidate_id", name="uq_ballots_submission_candidate"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    submission_id: Mapped[int] = mapped_column(
        ForeignKey("week_vote_submissions.id", ondelete="CASCADE"),
        index=True,
    )
    candidate_id: Mapped[int] = mapped_column(ForeignKey("anime_candidates.id", ondelete="CASCADE"), index=True)

    ballot_type: Mapped[BallotType] = mapped_column(Enum(BallotType, native_enum=False), default=BallotType.NORMAL)


class EpisodeStar(Base):
    """Per-episode star rating inside a submission. 0 means "not rated"."""
    __tablename__ = "episode_stars"
    __table_args__ = (
        UniqueConstraint("submission_id", "episode_id", name="uq_episode_stars_submission_episode"),
        CheckConstraint("star_score BETWEEN 0 AND 10", name="ck_episode_stars_score_range"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    submission_id: Mapped[int] = mapped_column(
        ForeignKey("week_vote_submissions.id", ondelete="CASCADE"),
        index=True,
    )
    episode_id: Mapped[int] = mapped_column(ForeignKey("episodes.id", ondelete="CASCADE"), index=True)

    star_score: Mapped[int] = mapped_column(Integer, default=0)
