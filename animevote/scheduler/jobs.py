from __future__ import annotations

import asyncio
import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from sqlalchemy.exc import SQLAlchemyError

from animevote.config.settings import Settings
from animevote.database import Database
from animevote.database.repo.week_repo import find_open_week
from animevote.errors import InvalidTransitionError, RaceLostError
from animevote.services.candidates import CandidateSource
from animevote.services.weeks import WeekService, week_cycle
from animevote.utils.dt import TimeProvider
from animevote.utils.quarters import ANCHOR_TIME, resolve

log = logging.getLogger(__name__)


# -------------------------------------------------
# Main job: weekly rollover
# -------------------------------------------------

async def rollover_weekly_vote(
    db: Database,
    settings: Settings,
    *,
    clock: TimeProvider | None = None,
    candidate_source: CandidateSource | None = None,
) -> int | None:
    """
    Moves the vote cycle to the week containing "now".

    - no OPEN week      -> bootstrap the current week
    - OPEN week current -> nothing to do (overlapping fire / restart)
    - otherwise         -> advance_cycle

    Retries only when the failure is transient (lost race, store error).
    An InvalidTransitionError means another run already rolled over.
    Returns the OPEN week id, or None when the rollover was already done.
    """
    clock = clock or TimeProvider(settings.timezone)
    max_attempts = max(1, settings.rollover_max_attempts)

    for attempt in range(1, max_attempts + 1):
        now = clock.now()
        cycle = resolve(now)

        try:
            async with db.session() as session:
                open_week = await find_open_week(session)

                if open_week is None:
                    log.warning("No OPEN week found, bootstrapping %s", cycle.as_tuple())
                    week_id = await WeekService.open_initial_week(
                        session,
                        now=now,
                        candidate_source=candidate_source,
                    )
                elif week_cycle(open_week) == cycle:
                    log.info("Week id=%s %s is already current, skipping", open_week.id, cycle.as_tuple())
                    return open_week.id
                else:
                    week_id = await WeekService.advance_cycle(
                        session,
                        now=now,
                        current_open_week_id=open_week.id,
                        expected_cycle=cycle,
                        candidate_source=candidate_source,
                    )

                await session.commit()
                return week_id

        except InvalidTransitionError as e:
            log.info("Rollover already completed, not retrying: %s", e)
            return None
        except (RaceLostError, SQLAlchemyError):
            if attempt >= max_attempts:
                log.exception("Rollover failed after %s attempts", attempt)
                raise
            log.warning("Rollover attempt %s/%s failed, retrying", attempt, max_attempts, exc_info=True)
            await asyncio.sleep(settings.rollover_retry_seconds)

    return None


# -------------------------------------------------
# Scheduler setup
# -------------------------------------------------

def build_scheduler(db: Database, settings: Settings) -> AsyncIOScheduler:
    """
    Creates and returns an AsyncIOScheduler with our jobs registered.
    """
    scheduler = AsyncIOScheduler(timezone=settings.timezone)

    # Weeks start on Monday at the anchor time, business timezone
    scheduler.add_job(
        rollover_weekly_vote,
        trigger=CronTrigger(
            day_of_week="mon",
            hour=ANCHOR_TIME.hour,
            minute=ANCHOR_TIME.minute,
            timezone=settings.timezone,
        ),
        kwargs={"db": db, "settings": settings},
        id="rollover_weekly_vote",
        replace_existing=True,
        coalesce=True,
        max_instances=1,
        misfire_grace_time=settings.rollover_misfire_grace_seconds,
    )

    return scheduler
