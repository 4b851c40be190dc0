"""
Company endpoints: the public voting list and the admin management API.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from . import schemas, service
from .repository import CompanyRepository, get_repository

router = APIRouter()


@router.get("/api/companies")
async def list_companies(companies: CompanyRepository = Depends(get_repository)) -> list[dict]:
    """
    Active companies for the voting dropdown, alphabetical.
    """
    return await service.list_active(companies)


@router.get("/api/admin/companies")
async def list_admin_companies(companies: CompanyRepository = Depends(get_repository)) -> list[dict]:
    return await service.list_for_admin(companies)


@router.post("/api/admin/companies", status_code=status.HTTP_201_CREATED)
async def add_company(
    request: schemas.AddCompanyRequest,
    companies: CompanyRepository = Depends(get_repository),
) -> dict:
    row = await service.add_company(request, companies)
    return {"message": "Company added successfully", "company": row}


@router.delete("/api/admin/companies/{company_id}")
async def deactivate_company(
    company_id: int,
    companies: CompanyRepository = Depends(get_repository),
) -> dict:
    """
    Soft delete: the row and its votes stay, it just stops being votable.
    """
    row = await service.set_active(company_id, active=False, companies=companies)
    return {"message": "Company deactivated successfully", "company": row}


@router.patch("/api/admin/companies/{company_id}/activate")
async def activate_company(
    company_id: int,
    companies: CompanyRepository = Depends(get_repository),
) -> dict:
    row = await service.set_active(company_id, active=True, companies=companies)
    return {"message": "Company reactivated successfully", "company": row}
