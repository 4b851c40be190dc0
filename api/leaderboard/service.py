"""
Leaderboard ranking.

Percentages use the count of all stored votes as the denominator and are
rounded half-up to one decimal, matching Postgres ROUND(numeric, 1).
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal

from core import db, errors

from .repository import LeaderboardRepository

logger = logging.getLogger(__name__)

ONE_DECIMAL = Decimal("0.1")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def percentage(votes: int, total: int) -> float:
    if total <= 0:
        return 0.0
    share = Decimal(votes * 100) / Decimal(total)
    return float(share.quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP))


def rank_rows(rows: list[dict]) -> list[dict]:
    """
    Number rows from 1 in the order the store returned them
    (votes desc, then name).
    """
    ranked: list[dict] = []
    for index, row in enumerate(rows, start=1):
        votes = int(row["vote_count"] or 0)
        ranked.append(
            {
                "rank": index,
                "id": int(row["id"]),
                "name": str(row["name"]),
                "website": row.get("website"),
                "logoUrl": row.get("logo_url"),
                "votes": votes,
                "percentage": percentage(votes, int(row.get("total_votes") or 0)),
            }
        )
    return ranked


async def leaderboard(repository: LeaderboardRepository) -> dict:
    try:
        rows = await repository.active_company_tallies()
    except db.StoreError as exc:
        logger.exception("leaderboard_failed")
        raise errors.DependencyError("Failed to fetch leaderboard") from exc

    ranked = rank_rows(rows)
    return {
        "leaderboard": ranked,
        "totalVotes": sum(item["votes"] for item in ranked),
        "lastUpdated": _utc_now().isoformat(),
    }
