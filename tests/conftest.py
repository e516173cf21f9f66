"""
Pytest configuration and fixtures.

Each test gets its own file-backed SQLite database under tmp_path.
"""
from __future__ import annotations

from pathlib import Path

import pytest
import pytest_asyncio

from animevote.database import Database
from animevote.database.models import Quarter
from animevote.utils.quarters import anchor_for_quarter


@pytest_asyncio.fixture
async def db(tmp_path: Path):
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'animevote_test.db'}")
    await database.init_models()
    try:
        yield database
    finally:
        await database.close()


@pytest.fixture
def make_quarter():
    """Transient Quarter (not persisted) for pure model tests."""
    def _make(year_value: int = 2025, quarter_value: int = 1) -> Quarter:
        return Quarter(
            year_value=year_value,
            quarter_value=quarter_value,
            anchor_datetime=anchor_for_quarter(year_value, quarter_value),
        )
    return _make
