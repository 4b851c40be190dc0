"""
Vote submission logic.

Flow:
1) Validate and normalize the form fields
2) Check the target company exists and is active
3) Insert; the store's unique constraints reject repeat voters
4) Hand back the data the notification needs
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any

from companies.repository import CompanyRepository
from core import db, errors

from . import schemas
from .repository import VoteRepository

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MAX_COMPANY_ID = 2**31 - 1
# Column widths of votes.voter_name / voter_email and votes.voter_phone.
MAX_TEXT_LENGTH = 255
MAX_PHONE_LENGTH = 20

DUPLICATE_MESSAGES = {
    "voter_email": "This email has already voted",
    "voter_phone": "This phone number has already voted",
}
DUPLICATE_FALLBACK = "You have already voted"


@dataclass(frozen=True)
class VoteReceipt:
    vote_id: int
    ballot: schemas.Ballot
    company_name: str
    company_website: str | None

    def notification_payload(self) -> dict:
        return {
            "voterName": self.ballot.voter_name,
            "voterEmail": self.ballot.voter_email,
            "voterPhone": self.ballot.voter_phone,
            "companyName": self.company_name,
            "companyWebsite": self.company_website,
            "voteId": self.vote_id,
        }


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def _parse_company_id(value: Any) -> int:
    if isinstance(value, bool):
        raise errors.ValidationError("Invalid company selection")
    if isinstance(value, float):
        if not value.is_integer():
            raise errors.ValidationError("Invalid company selection")
        company_id = int(value)
    elif isinstance(value, int):
        company_id = value
    elif isinstance(value, str):
        try:
            company_id = int(value.strip())
        except ValueError as exc:
            raise errors.ValidationError("Invalid company selection") from exc
    else:
        raise errors.ValidationError("Invalid company selection")
    # companies.id is a SERIAL (positive int4).
    if not 0 < company_id <= MAX_COMPANY_ID:
        raise errors.ValidationError("Invalid company selection")
    return company_id


def validate_vote(payload: schemas.VoteRequest) -> schemas.Ballot:
    name = (payload.voter_name or "").strip()
    email = normalize_email(payload.voter_email or "")
    phone = (payload.voter_phone or "").strip()
    company = payload.company_vote
    if isinstance(company, str):
        company = company.strip()

    if not name or not email or not phone or company is None or company == "":
        raise errors.ValidationError("All fields are required")

    if not EMAIL_PATTERN.match(email):
        raise errors.ValidationError("Invalid email format")

    if len(name) > MAX_TEXT_LENGTH or len(email) > MAX_TEXT_LENGTH or len(phone) > MAX_PHONE_LENGTH:
        raise errors.ValidationError("Field value is too long")

    return schemas.Ballot(
        voter_name=name,
        voter_email=email,
        voter_phone=phone,
        company_id=_parse_company_id(company),
    )


def duplicate_error(exc: db.UniqueViolation) -> errors.ConflictError:
    for column, message in DUPLICATE_MESSAGES.items():
        if exc.involves(column):
            return errors.ConflictError(message, field=column)
    return errors.ConflictError(DUPLICATE_FALLBACK)


async def submit_vote(
    payload: schemas.VoteRequest,
    *,
    votes: VoteRepository,
    companies: CompanyRepository,
) -> VoteReceipt:
    ballot = validate_vote(payload)

    try:
        company = await companies.get_active(ballot.company_id)
        if company is None:
            raise errors.ValidationError("Invalid company selection")

        vote_id = await votes.insert(
            voter_name=ballot.voter_name,
            voter_email=ballot.voter_email,
            voter_phone=ballot.voter_phone,
            company_id=ballot.company_id,
        )
    except db.UniqueViolation as exc:
        conflict = duplicate_error(exc)
        logger.info("vote_rejected reason=duplicate field=%s", conflict.field)
        raise conflict from exc
    except db.StoreError as exc:
        logger.exception("submit_vote_failed company_id=%s", ballot.company_id)
        raise errors.DependencyError("Failed to submit vote") from exc

    logger.info("vote_recorded vote_id=%s company_id=%s", vote_id, ballot.company_id)
    return VoteReceipt(
        vote_id=vote_id,
        ballot=ballot,
        company_name=str(company["name"]),
        company_website=company.get("website"),
    )


async def list_for_admin(votes: VoteRepository) -> list[dict]:
    try:
        return await votes.list_with_company()
    except db.StoreError as exc:
        logger.exception("list_votes_failed")
        raise errors.DependencyError("Failed to fetch votes") from exc
