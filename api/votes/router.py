"""
Voting endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, Depends, status

from companies import repository as company_repository

from . import notifications, schemas, service
from .repository import VoteRepository, get_repository

router = APIRouter()


@router.post("/api/vote", status_code=status.HTTP_201_CREATED)
async def submit_vote(
    request: schemas.VoteRequest,
    background_tasks: BackgroundTasks,
    votes: VoteRepository = Depends(get_repository),
    companies: company_repository.CompanyRepository = Depends(company_repository.get_repository),
) -> dict:
    """
    Cast one vote. Repeat voters (same email or phone) get a 400 naming the
    field that collided.
    """
    receipt = await service.submit_vote(request, votes=votes, companies=companies)

    # Forward to the webhook after the response is sent.
    background_tasks.add_task(
        notifications.notify_vote_background,
        receipt.notification_payload(),
    )

    return {"message": "Vote submitted successfully", "voteId": receipt.vote_id}


@router.get("/api/admin/votes")
async def list_votes(votes: VoteRepository = Depends(get_repository)) -> list[dict]:
    """
    All votes with their company name, newest first. Not paginated.
    """
    return await service.list_for_admin(votes)
