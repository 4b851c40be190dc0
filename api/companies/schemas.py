"""
Pydantic schemas for company administration endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class AddCompanyRequest(BaseModel):
    # Optional at the schema level so a missing name is a 400, not a 422.
    name: str | None = Field(default=None, max_length=255)
    website: str | None = Field(default=None, max_length=255)
