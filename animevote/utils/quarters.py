# animevote/utils/quarters.py
"""
Business quarter / week coordinate system.

Every quarter starts at its *anchor*: Monday 18:00 of the week that contains
the quarter's first calendar day (1 Jan / 1 Apr / 1 Jul / 1 Oct). A quarter is
the half-open interval [anchor(y, q), anchor(next quarter)) and is split into
168-hour weeks numbered from 1.

All instants are naive datetimes on the business wall clock, treated as a
fixed-offset timeline (see TimeProvider in animevote.utils.dt).
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

ANCHOR_TIME = time(18, 0)
WEEK_LENGTH = timedelta(hours=7 * 24)  # 168h


@dataclass(frozen=True, slots=True)
class AnchorInfo:
    year: int
    quarter: int
    anchor_start: datetime


@dataclass(frozen=True, slots=True)
class CycleRecord:
    year_value: int
    quarter_value: int
    week_value: int

    def same_quarter(self, year_value: int, quarter_value: int) -> bool:
        return self.year_value == year_value and self.quarter_value == quarter_value

    def as_tuple(self) -> tuple[int, int, int]:
        return self.year_value, self.quarter_value, self.week_value


# ---- helpers ----

def _require_naive(instant: datetime) -> None:
    if instant.tzinfo is not None:
        raise ValueError(f"expected a naive business-local datetime, got {instant!r}")


def calendar_quarter(month: int) -> int:
    return (month - 1) // 3 + 1


def first_day_of_quarter(year: int, quarter: int) -> date:
    if quarter not in (1, 2, 3, 4):
        raise ValueError(f"quarter must be 1..4, got {quarter!r}")
    return date(year, (quarter - 1) * 3 + 1, 1)  # 1, 4, 7, 10


def next_quarter(year: int, quarter: int) -> tuple[int, int]:
    return (year + 1, 1) if quarter == 4 else (year, quarter + 1)


def previous_quarter(year: int, quarter: int) -> tuple[int, int]:
    return (year - 1, 4) if quarter == 1 else (year, quarter - 1)


def monday_on_or_before(d: date) -> date:
    # Monday = 0 ... Sunday = 6
    return d - timedelta(days=d.weekday())


# ---- public API ----

def anchor_for_quarter(year: int, quarter: int) -> datetime:
    """Monday 18:00 on or before the quarter's first calendar day."""
    first = first_day_of_quarter(year, quarter)
    return datetime.combine(monday_on_or_before(first), ANCHOR_TIME)


def resolve_anchor(instant: datetime) -> AnchorInfo:
    """
    Finds the business quarter whose interval [anchor(y, q), anchor(y', q'))
    contains `instant` (left-inclusive, right-exclusive).

    The calendar quarter is only a seed: an anchor can fall a few days before
    the quarter's first calendar day, so the last days of a calendar quarter
    may already belong to the next business quarter, and the first days may
    still belong to the previous one.
    """
    _require_naive(instant)

    y = instant.year
    q = calendar_quarter(instant.month)

    curr_anchor = anchor_for_quarter(y, q)
    next_y, next_q = next_quarter(y, q)
    next_anchor = anchor_for_quarter(next_y, next_q)

    if instant < curr_anchor:
        prev_y, prev_q = previous_quarter(y, q)
        return AnchorInfo(prev_y, prev_q, anchor_for_quarter(prev_y, prev_q))
    if instant < next_anchor:
        return AnchorInfo(y, q, curr_anchor)
    return AnchorInfo(next_y, next_q, next_anchor)


def week_of_quarter(instant: datetime, anchor: datetime) -> int:
    """1-based week number: whole hours since the anchor, in 168h blocks."""
    hours = (instant - anchor) // timedelta(hours=1)
    return hours // 168 + 1


def week_bounds(anchor: datetime, week_value: int) -> tuple[datetime, datetime]:
    if week_value < 1:
        raise ValueError(f"week_value must be >= 1, got {week_value!r}")
    start = anchor + WEEK_LENGTH * (week_value - 1)
    return start, start + WEEK_LENGTH


def weeks_in_quarter(year: int, quarter: int) -> int:
    """Number of weeks before the next quarter's anchor (13 or 14)."""
    span = anchor_for_quarter(*next_quarter(year, quarter)) - anchor_for_quarter(year, quarter)
    return span // WEEK_LENGTH


def resolve(instant: datetime) -> CycleRecord:
    """
    Maps an instant to its (business year, quarter, week).

    The business year is the resolved quarter's own year. It matches the
    anchor's calendar year for Q2..Q4; a Q1 anchor may fall in December of
    the previous calendar year and still belongs to the new year.
    """
    ai = resolve_anchor(instant)
    return CycleRecord(ai.year, ai.quarter, week_of_quarter(instant, ai.anchor_start))


def weekly_window_from_offset(now: datetime, offset: time) -> tuple[datetime, datetime]:
    """
    [Monday at `offset`, +7 days) window used by the airing schedule.
    The Monday is the one on or before `now`'s date, regardless of `offset`.
    """
    _require_naive(now)
    start = datetime.combine(monday_on_or_before(now.date()), offset.replace(second=0, microsecond=0))
    return start, start + timedelta(days=7)
