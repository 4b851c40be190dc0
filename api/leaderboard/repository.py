"""
Leaderboard queries (raw SQL).
"""

from __future__ import annotations

from typing import Any

from fastapi import Depends

from core import db


class LeaderboardRepository:
    def __init__(self, database: db.Database) -> None:
        self.database = database

    async def active_company_tallies(self) -> list[dict[str, Any]]:
        """
        One row per active company with its vote count, plus `total_votes`:
        the count of every stored vote, inactive companies included.
        """
        return await self.database.fetch_all(
            """
            SELECT
              c.id,
              c.name,
              c.website,
              c.logo_url,
              COUNT(v.id)::int AS vote_count,
              (SELECT COUNT(*) FROM votes)::int AS total_votes
            FROM companies c
            LEFT JOIN votes v ON v.company_id = c.id
            WHERE c.active = true
            GROUP BY c.id, c.name, c.website, c.logo_url
            ORDER BY vote_count DESC, c.name
            """
        )


def get_repository(database: db.Database = Depends(db.get_database)) -> LeaderboardRepository:
    return LeaderboardRepository(database)
