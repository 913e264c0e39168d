from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from tacom.core.database import get_session
from tacom.core.identity import get_responsible_user
from tacom.schemas.fleet import (
    FleetRecordCreate, FleetRecordUpdate, FleetRecordRead, FleetListResponse, FleetSummary,
)
from tacom.services.fleet_service import (
    create_fleet_record, list_fleet_records, get_fleet_record,
    update_fleet_record, delete_fleet_record, summarize_fleet,
)

router = APIRouter(prefix="/fleet", tags=["fleet"])


@router.post("", response_model=FleetRecordRead, status_code=status.HTTP_201_CREATED)
async def add_fleet_record(
    payload: FleetRecordCreate,
    session: AsyncSession = Depends(get_session),
    responsible_user: str = Depends(get_responsible_user),
):
    obj = await create_fleet_record(session, payload.model_dump(), responsible_user)
    return FleetRecordRead.model_validate(obj)


@router.get("", response_model=FleetListResponse)
async def get_fleet_records(
    cod_operadora: Optional[str] = None,
    nome_empresa: Optional[str] = None,
    mes: Optional[int] = Query(default=None, ge=1, le=12),
    ano: Optional[int] = None,
    session: AsyncSession = Depends(get_session),
):
    items = await list_fleet_records(session, cod_operadora=cod_operadora, nome_empresa=nome_empresa, mes=mes, ano=ano)
    return FleetListResponse(items=[FleetRecordRead.model_validate(i) for i in items], total=len(items))


@router.get("/summary", response_model=FleetSummary)
async def get_fleet_summary(
    nome_empresa: Optional[str] = None,
    mes: Optional[int] = Query(default=None, ge=1, le=12),
    ano: Optional[int] = None,
    session: AsyncSession = Depends(get_session),
):
    """Billing totals per service for the filtered records."""
    items = await list_fleet_records(session, nome_empresa=nome_empresa, mes=mes, ano=ano)
    return FleetSummary(**summarize_fleet(items))


@router.get("/{record_id}", response_model=FleetRecordRead)
async def read_fleet_record(record_id: str, session: AsyncSession = Depends(get_session)):
    obj = await get_fleet_record(session, record_id)
    if not obj:
        raise HTTPException(status_code=404, detail="Fleet record not found")
    return FleetRecordRead.model_validate(obj)


@router.put("/{record_id}", response_model=FleetRecordRead)
async def put_fleet_record(
    record_id: str,
    payload: FleetRecordUpdate,
    session: AsyncSession = Depends(get_session),
    responsible_user: str = Depends(get_responsible_user),
):
    obj = await update_fleet_record(session, record_id, payload.model_dump(exclude_unset=True), responsible_user)
    if not obj:
        raise HTTPException(status_code=404, detail="Fleet record not found")
    return FleetRecordRead.model_validate(obj)


@router.delete("/{record_id}")
async def del_fleet_record(record_id: str, session: AsyncSession = Depends(get_session)):
    ok = await delete_fleet_record(session, record_id)
    if not ok:
        raise HTTPException(status_code=404, detail="Fleet record not found")
    return {"ok": True}
