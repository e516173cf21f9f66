# animevote/main.py
import asyncio
import logging

from animevote.config import Settings
from animevote.database import Database
from animevote.scheduler import setup_scheduler
from animevote.scheduler.jobs import rollover_weekly_vote


def setup_logging(is_dev: bool) -> None:
    """
    Clean production logging:
    - app logs: INFO (or DEBUG in dev)
    - SQLAlchemy logs: WARNING+ (no query/pool spam)
    """
    app_level = logging.DEBUG if is_dev else logging.INFO

    logging.basicConfig(
        level=app_level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )

    for name in (
        "sqlalchemy",
        "sqlalchemy.engine",
        "sqlalchemy.pool",
        "sqlalchemy.orm",
        "asyncpg",
        "aiosqlite",
        "apscheduler",
    ):
        logging.getLogger(name).setLevel(logging.WARNING)


async def main() -> None:
    settings = Settings.load()
    setup_logging(settings.is_dev)
    log = logging.getLogger("animevote")

    db = Database(settings.database_url)
    await db.init_models()
    log.info("DB initialized")

    # Catch up after downtime (or bootstrap an empty DB) before waiting for Monday
    week_id = await rollover_weekly_vote(db, settings)
    log.info("Current OPEN week id=%s", week_id)

    scheduler = setup_scheduler(db=db, settings=settings)
    log.info("Scheduler started (timezone=%s)", settings.timezone)

    stop = asyncio.Event()
    try:
        await stop.wait()
    except (asyncio.CancelledError, KeyboardInterrupt):
        pass
    except Exception:
        log.exception("Service crashed")
        raise
    finally:
        try:
            scheduler.shutdown(wait=False)
        except Exception:
            log.exception("Failed to shutdown scheduler")

        try:
            await db.close()
        except Exception:
            log.exception("Failed to close DB")


if __name__ == "__main__":
    asyncio.run(main())
