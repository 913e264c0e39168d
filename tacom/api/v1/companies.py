from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from tacom.core.database import get_session
from tacom.schemas.company import CompanyCreate, CompanyRead, CompanyListResponse
from tacom.services.company_service import (
    create_company, list_companies, get_company, update_company, delete_company,
)
from tacom.services.movement_service import refresh_movement_context

router = APIRouter(prefix="/companies", tags=["companies"])


@router.post("", response_model=CompanyRead, status_code=status.HTTP_201_CREATED)
async def add_company(payload: CompanyCreate, request: Request, session: AsyncSession = Depends(get_session)):
    obj = await create_company(session, payload.model_dump())
    await refresh_movement_context(request, session)
    return CompanyRead.model_validate(obj)


@router.get("", response_model=CompanyListResponse)
async def get_companies(q: Optional[str] = None, session: AsyncSession = Depends(get_session)):
    items = await list_companies(session, q=q)
    return CompanyListResponse(items=[CompanyRead.model_validate(i) for i in items], total=len(items))


@router.get("/{company_id}", response_model=CompanyRead)
async def read_company(company_id: str, session: AsyncSession = Depends(get_session)):
    obj = await get_company(session, company_id)
    if not obj:
        raise HTTPException(status_code=404, detail="Company not found")
    return CompanyRead.model_validate(obj)


@router.put("/{company_id}", response_model=CompanyRead)
async def put_company(company_id: str, payload: CompanyCreate, request: Request, session: AsyncSession = Depends(get_session)):
    obj = await update_company(session, company_id, payload.model_dump())
    if not obj:
        raise HTTPException(status_code=404, detail="Company not found")
    await refresh_movement_context(request, session)
    return CompanyRead.model_validate(obj)


@router.delete("/{company_id}")
async def del_company(company_id: str, request: Request, session: AsyncSession = Depends(get_session)):
    ok = await delete_company(session, company_id)
    if not ok:
        raise HTTPException(status_code=404, detail="Company not found")
    await refresh_movement_context(request, session)
    return {"ok": True}
