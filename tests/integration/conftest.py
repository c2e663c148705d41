"""Integration test fixtures.

Integration tests need a migrated PostgreSQL at DATABASE__URL and are
skipped when it can't be reached.
"""

import pytest
import pytest_asyncio
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from forum.config import Settings
from forum.persistence.database import create_engine


@pytest_asyncio.fixture
async def postgres_available():
    """Skip the test unless the forum schema is reachable."""
    engine = create_engine(Settings())
    try:
        async with engine.connect() as connection:
            await connection.execute(text("SELECT 1 FROM votes LIMIT 0"))
    except (OSError, SQLAlchemyError) as e:
        pytest.skip(f"PostgreSQL not available: {e}")
    finally:
        await engine.dispose()
