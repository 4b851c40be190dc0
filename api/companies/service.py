"""
Company administration business logic.

Companies are never hard-deleted: deactivation keeps historical votes
pointing at a valid row, and the unique name stays reserved.
"""

from __future__ import annotations

import logging
from urllib.parse import urlsplit

from core import db, errors, settings

from . import schemas
from .repository import CompanyRepository

logger = logging.getLogger(__name__)


def logo_url_for(website: str | None) -> str | None:
    """
    Derive a logo URL from the website hostname, e.g.
    "www.acme.com/about" -> "https://logo.clearbit.com/acme.com".
    """
    website = (website or "").strip()
    if not website:
        return None

    if "://" not in website:
        website = f"https://{website}"
    try:
        hostname = urlsplit(website).hostname
    except ValueError:
        return None
    if not hostname:
        return None

    domain = hostname.removeprefix("www.")
    return f"{settings.logo_service_url()}/{domain}"


async def list_active(companies: CompanyRepository) -> list[dict]:
    try:
        rows = await companies.list_active()
    except db.StoreError as exc:
        logger.exception("list_companies_failed")
        raise errors.DependencyError("Failed to fetch companies") from exc
    return [{"id": int(row["id"]), "name": str(row["name"])} for row in rows]


async def list_for_admin(companies: CompanyRepository) -> list[dict]:
    try:
        rows = await companies.list_with_vote_counts()
    except db.StoreError as exc:
        logger.exception("list_admin_companies_failed")
        raise errors.DependencyError("Failed to fetch companies") from exc
    return [{**row, "vote_count": int(row["vote_count"] or 0)} for row in rows]


async def add_company(payload: schemas.AddCompanyRequest, companies: CompanyRepository) -> dict:
    name = (payload.name or "").strip()
    if not name:
        raise errors.ValidationError("Company name is required")

    website = (payload.website or "").strip() or None
    try:
        row = await companies.create(name=name, website=website, logo_url=logo_url_for(website))
    except db.UniqueViolation as exc:
        raise errors.ConflictError("Company already exists", field="name") from exc
    except db.StoreError as exc:
        logger.exception("add_company_failed name=%s", name)
        raise errors.DependencyError("Failed to add company") from exc

    logger.info("company_added id=%s name=%s", row["id"], row["name"])
    return row


async def set_active(company_id: int, *, active: bool, companies: CompanyRepository) -> dict:
    action = "reactivate" if active else "deactivate"
    try:
        row = await companies.set_active(company_id, active=active)
    except db.StoreError as exc:
        logger.exception("%s_company_failed id=%s", action, company_id)
        raise errors.DependencyError(f"Failed to {action} company") from exc

    if row is None:
        raise errors.NotFoundError("Company not found")

    logger.info("company_%sd id=%s", action, company_id)
    return row
