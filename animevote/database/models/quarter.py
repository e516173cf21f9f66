# animevote/database/models/quarter.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Integer, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from animevote.database.base import Base


class Quarter(Base):
    """
    Business quarter. Immutable once created.
    One row per (year_value, quarter_value); the unique constraint backs find-or-create.
    """
    __tablename__ = "quarters"
    __table_args__ = (
        UniqueConstraint("year_value", "quarter_value", name="uq_quarters_year_quarter"),
        CheckConstraint("quarter_value BETWEEN 1 AND 4", name="ck_quarters_quarter_value"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    year_value: Mapped[int] = mapped_column(Integer, index=True)
    quarter_value: Mapped[int] = mapped_column(Integer)

    # Monday 18:00 (business wall clock) that starts week 1
    anchor_datetime: Mapped[datetime] = mapped_column(DateTime(timezone=False))

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), server_default=func.now())

    def __repr__(self) -> str:
        return f"<Quarter {self.year_value} Q{self.quarter_value}>"
