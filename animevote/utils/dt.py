from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from zoneinfo import ZoneInfo


@dataclass(frozen=True, slots=True)
class TimeProvider:
    """
    Business clock. Returns naive wall-clock datetimes in `timezone`,
    the form every vote-cycle computation and DateTime column expects.
    """
    timezone: str = "Asia/Seoul"

    def now(self) -> datetime:
        return datetime.now(tz=ZoneInfo(self.timezone)).replace(tzinfo=None)

    def localize(self, instant: datetime) -> datetime:
        """Aware datetime -> naive business wall clock. Naive input passes through."""
        if instant.tzinfo is None:
            return instant
        return instant.astimezone(ZoneInfo(self.timezone)).replace(tzinfo=None)
