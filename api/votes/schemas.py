"""
Vote submission schemas.

Field names follow the front-end form (camelCase). Everything is optional
here; presence and format are checked in `service.validate_vote` so the
client gets the documented 400 messages.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class VoteRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    voter_name: str | None = Field(default=None, alias="voterName")
    voter_email: str | None = Field(default=None, alias="voterEmail")
    voter_phone: str | None = Field(default=None, alias="voterPhone")
    # Any: JSON true / 1.5 must reach the service uncoerced.
    company_vote: Any = Field(default=None, alias="companyVote")


class Ballot(BaseModel):
    """
    A validated, normalized vote ready to be stored.
    """

    voter_name: str
    voter_email: str
    voter_phone: str
    company_id: int
