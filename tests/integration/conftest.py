from __future__ import annotations

import pytest
from sqlalchemy import text

from lootpacks.core.integration_db_safety import reset_integration_schema
from lootpacks.db.session import engine
from lootpacks.economy.lootpacks.pool_cache import clear_reward_pool_cache


@pytest.fixture(autouse=True)
async def cleanup_db() -> None:
    # Dispose pooled connections between tests to avoid cross-event-loop asyncpg reuse.
    await engine.dispose()

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as exc:  # pragma: no cover - environment-dependent
        pytest.skip(f"Postgres is required for integration tests: {exc}")

    await reset_integration_schema(engine)
    clear_reward_pool_cache()

    yield

    await engine.dispose()
