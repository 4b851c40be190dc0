"""
Company persistence (raw SQL).
"""

from __future__ import annotations

from typing import Any

from fastapi import Depends

from core import db

COMPANY_COLUMNS = "id, name, website, logo_url, active, created_at"


class CompanyRepository:
    def __init__(self, database: db.Database) -> None:
        self.database = database

    async def list_active(self) -> list[dict[str, Any]]:
        return await self.database.fetch_all(
            """
            SELECT id, name
            FROM companies
            WHERE active = true
            ORDER BY name
            """
        )

    async def list_with_vote_counts(self) -> list[dict[str, Any]]:
        """
        Every company (inactive included) with its number of votes.
        """
        return await self.database.fetch_all(
            """
            SELECT
              c.id,
              c.name,
              c.website,
              c.logo_url,
              c.active,
              c.created_at,
              COUNT(v.id)::int AS vote_count
            FROM companies c
            LEFT JOIN votes v ON v.company_id = c.id
            GROUP BY c.id
            ORDER BY c.active DESC, c.name
            """
        )

    async def get_active(self, company_id: int) -> dict[str, Any] | None:
        return await self.database.fetch_one(
            f"""
            SELECT {COMPANY_COLUMNS}
            FROM companies
            WHERE id = $1
              AND active = true
            """,
            company_id,
        )

    async def create(self, *, name: str, website: str | None, logo_url: str | None) -> dict[str, Any]:
        row = await self.database.fetch_one(
            f"""
            INSERT INTO companies (name, website, logo_url)
            VALUES ($1, $2, $3)
            RETURNING {COMPANY_COLUMNS}
            """,
            name,
            website,
            logo_url,
        )
        if row is None:
            raise db.StoreError("Failed to create company.")
        return row

    async def set_active(self, company_id: int, *, active: bool) -> dict[str, Any] | None:
        """
        Soft-delete / restore. Returns the updated row, or None for an unknown id.
        """
        return await self.database.fetch_one(
            f"""
            UPDATE companies
            SET active = $2
            WHERE id = $1
            RETURNING {COMPANY_COLUMNS}
            """,
            company_id,
            active,
        )


def get_repository(database: db.Database = Depends(db.get_database)) -> CompanyRepository:
    return CompanyRepository(database)
