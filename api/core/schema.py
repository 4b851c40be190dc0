"""
Schema setup, run once per process from the FastAPI lifespan.

Steps:
1) create `companies`
2) create `votes` with unique voter_email / voter_phone, or migrate a
   legacy unconstrained `votes` table by renaming it aside
3) seed the default companies (insert-or-ignore, safe on every start)

Table and column names are the persisted compatibility surface; do not
rename them.
"""

from __future__ import annotations

import logging

from . import settings
from .db import Database, StoreError

logger = logging.getLogger(__name__)

DEFAULT_COMPANIES: tuple[tuple[str, str, str], ...] = (
    ("Apple", "https://apple.com", "apple.com"),
    ("Google", "https://google.com", "google.com"),
)

CREATE_COMPANIES_SQL = """
CREATE TABLE IF NOT EXISTS companies (
  id SERIAL PRIMARY KEY,
  name VARCHAR(255) NOT NULL UNIQUE,
  website VARCHAR(255),
  logo_url VARCHAR(500),
  active BOOLEAN DEFAULT true,
  created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
)
"""

# `{table}` is one of two fixed names, never user input.
CREATE_VOTES_SQL = """
CREATE TABLE IF NOT EXISTS {table} (
  id SERIAL PRIMARY KEY,
  voter_name VARCHAR(255) NOT NULL,
  voter_email VARCHAR(255) NOT NULL UNIQUE,
  voter_phone VARCHAR(20) NOT NULL UNIQUE,
  company_id INTEGER NOT NULL REFERENCES companies(id),
  created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
)
"""

VOTES_STATE_SQL = """
SELECT
  to_regclass('votes') IS NOT NULL AS has_votes,
  EXISTS (
    SELECT 1
    FROM pg_constraint
    WHERE conrelid = to_regclass('votes')
      AND contype = 'u'
  ) AS has_unique
"""

SEED_COMPANY_SQL = """
INSERT INTO companies (name, website, logo_url)
VALUES ($1, $2, $3)
ON CONFLICT (name) DO NOTHING
"""


async def migrate_legacy_votes(database: Database) -> bool:
    """
    Swap a legacy `votes` table for a constrained one.

    The old rows stay in `votes_old`. Returns False when the rename sequence
    fails, which means another process (or an earlier start) already did it.
    """
    await database.execute(CREATE_VOTES_SQL.format(table="votes_new"))
    try:
        async with database.transaction() as tx:
            await tx.execute("DROP TABLE IF EXISTS votes_old")
            await tx.execute("ALTER TABLE votes RENAME TO votes_old")
            await tx.execute("ALTER TABLE votes_new RENAME TO votes")
    except StoreError as exc:
        logger.info("votes_migration_skipped reason=%s", exc)
        return False

    logger.info("votes_migration_complete legacy_table=votes_old")
    return True


async def seed_default_companies(database: Database) -> None:
    base = settings.logo_service_url()
    for name, website, domain in DEFAULT_COMPANIES:
        await database.execute(SEED_COMPANY_SQL, name, website, f"{base}/{domain}")


async def init_schema(database: Database) -> None:
    await database.execute(CREATE_COMPANIES_SQL)

    state = await database.fetch_one(VOTES_STATE_SQL) or {}
    if not state.get("has_votes"):
        await database.execute(CREATE_VOTES_SQL.format(table="votes"))
    elif not state.get("has_unique"):
        await migrate_legacy_votes(database)

    await seed_default_companies(database)
    logger.info("schema_ready")
