# animevote/scheduler/__init__.py
from __future__ import annotations

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from animevote.config.settings import Settings
from animevote.database import Database
from animevote.scheduler.jobs import build_scheduler


def setup_scheduler(db: Database, settings: Settings) -> AsyncIOScheduler:
    scheduler = build_scheduler(db=db, settings=settings)
    scheduler.start()
    return scheduler
