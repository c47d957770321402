from __future__ import annotations

import re
from dataclasses import dataclass

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine

from lootpacks.db.models.base import Base

TEST_DB_NAME_RE = re.compile(r"test", re.IGNORECASE)
ALLOWED_LOCAL_HOSTS = frozenset({"localhost", "127.0.0.1", "::1", "postgres", "lootpacks_postgres"})


@dataclass(frozen=True, slots=True)
class IntegrationDbSafetyResult:
    database_name: str
    host: str
    reasons: tuple[str, ...]

    @property
    def is_safe(self) -> bool:
        return not self.reasons


def lootpack_table_names() -> tuple[str, ...]:
    """Every table ``create_all`` builds, children before the tables they reference."""
    return tuple(table.name for table in reversed(Base.metadata.sorted_tables))


def build_truncate_sql() -> str:
    return f"TRUNCATE TABLE {', '.join(lootpack_table_names())} RESTART IDENTITY CASCADE"


def assess_integration_db_safety(database_url: str) -> IntegrationDbSafetyResult:
    parsed = make_url(database_url)
    db_name = (parsed.database or "").strip()
    host = (parsed.host or "").strip().lower()

    reasons: list[str] = []
    if parsed.get_backend_name() != "postgresql":
        reasons.append("backend is not PostgreSQL")
    if not db_name:
        reasons.append("database name is empty")
    elif TEST_DB_NAME_RE.search(db_name) is None:
        reasons.append("database name does not contain 'test'")
    if host not in ALLOWED_LOCAL_HOSTS:
        reasons.append(f"host '{host}' is not a local integration-test host")

    return IntegrationDbSafetyResult(database_name=db_name, host=host, reasons=tuple(reasons))


def assert_safe_integration_db(database_url: str) -> None:
    result = assess_integration_db_safety(database_url)
    if result.is_safe:
        return

    raise RuntimeError(
        f"Refusing to create and truncate lootpack tables ({', '.join(lootpack_table_names())}).\n"
        f"Reasons: {'; '.join(result.reasons)}\n"
        f"Resolved DB: name='{result.database_name}' host='{result.host}'\n"
        "Required: a dedicated local PostgreSQL test DB, e.g. 'lootpacks_test'."
    )


async def reset_integration_schema(engine: AsyncEngine) -> None:
    """Creates the lootpack schema on a verified test database and empties every table."""
    assert_safe_integration_db(engine.url.render_as_string(hide_password=True))

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        await conn.execute(text(build_truncate_sql()))
