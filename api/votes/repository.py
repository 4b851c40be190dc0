"""
Vote persistence (raw SQL).

There is no "has this email voted?" lookup: the unique
constraints on voter_email / voter_phone decide, atomically, in the store.
"""

from __future__ import annotations

from typing import Any

from fastapi import Depends

from core import db


class VoteRepository:
    def __init__(self, database: db.Database) -> None:
        self.database = database

    async def insert(
        self,
        *,
        voter_name: str,
        voter_email: str,
        voter_phone: str,
        company_id: int,
    ) -> int:
        """
        Insert one vote and return its id.
        Raises `db.UniqueViolation` when the email or phone already voted.
        """
        row = await self.database.fetch_one(
            """
            INSERT INTO votes (voter_name, voter_email, voter_phone, company_id)
            VALUES ($1, $2, $3, $4)
            RETURNING id
            """,
            voter_name,
            voter_email,
            voter_phone,
            company_id,
        )
        if row is None:
            raise db.StoreError("Failed to insert vote.")
        return int(row["id"])

    async def list_with_company(self) -> list[dict[str, Any]]:
        return await self.database.fetch_all(
            """
            SELECT
              v.id,
              v.voter_name,
              v.voter_email,
              v.voter_phone,
              v.company_id,
              v.created_at,
              c.name AS company_name
            FROM votes v
            JOIN companies c ON c.id = v.company_id
            ORDER BY v.created_at DESC, v.id DESC
            """
        )


def get_repository(database: db.Database = Depends(db.get_database)) -> VoteRepository:
    return VoteRepository(database)
