# animevote/config/settings.py
from __future__ import annotations

import os
from dataclasses import dataclass
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./animevote.db"


def _to_int(value: str, key_name: str) -> int:
    try:
        return int(value)
    except ValueError as e:
        raise RuntimeError(f"Invalid integer for {key_name}: {value!r}") from e


def _optional_int(env, key: str, default: int, *, minimum: int = 0) -> int:
    raw = (env.get(key) or "").strip()
    if not raw:
        return default
    v = _to_int(raw, key)
    if v < minimum:
        raise RuntimeError(f"{key} must be >= {minimum}, got {v}")
    return v


def _timezone(raw: str) -> str:
    try:
        ZoneInfo(raw)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise RuntimeError(f"Unknown TIMEZONE: {raw!r}") from e
    return raw


@dataclass(frozen=True, slots=True)
class Settings:
    database_url: str = DEFAULT_DATABASE_URL

    # --- business clock (all week/quarter math runs on this wall clock) ---
    timezone: str = "Asia/Seoul"

    # --- rollover job ---
    rollover_max_attempts: int = 3
    rollover_retry_seconds: int = 5
    rollover_misfire_grace_seconds: int = 600

    # --- environment ---
    environment: str = "production"  # production | development

    @property
    def is_dev(self) -> bool:
        return self.environment.lower() in {"dev", "development", "local"}

    @classmethod
    def load(cls) -> "Settings":
        """
        Loads from process env (and .env if present).
        Fails fast on malformed values.
        """
        load_dotenv()
        env = os.environ

        database_url = (env.get("DATABASE_URL") or DEFAULT_DATABASE_URL).strip()
        timezone = _timezone((env.get("TIMEZONE") or "Asia/Seoul").strip() or "Asia/Seoul")
        environment = (env.get("ENVIRONMENT") or "production").strip() or "production"

        return cls(
            database_url=database_url,
            timezone=timezone,
            rollover_max_attempts=_optional_int(env, "ROLLOVER_MAX_ATTEMPTS", 3, minimum=1),
            rollover_retry_seconds=_optional_int(env, "ROLLOVER_RETRY_SECONDS", 5),
            rollover_misfire_grace_seconds=_optional_int(env, "ROLLOVER_MISFIRE_GRACE_SECONDS", 600, minimum=1),
            environment=environment,
        )
