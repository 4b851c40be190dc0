"""
Public leaderboard endpoint.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from . import service
from .repository import LeaderboardRepository, get_repository

router = APIRouter()


@router.get("/api/leaderboard")
async def get_leaderboard(repository: LeaderboardRepository = Depends(get_repository)) -> dict:
    return await service.leaderboard(repository)
