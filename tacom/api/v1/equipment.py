from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from tacom.core.database import get_session
from tacom.models.equipment import EquipmentStatus
from tacom.schemas.equipment import (
    EquipmentCreate, EquipmentUpdate, EquipmentRead, EquipmentListResponse,
)
from tacom.services.company_service import get_company
from tacom.services.equipment_service import (
    create_equipment, list_equipment, get_equipment, get_by_serial,
    update_equipment,
)

router = APIRouter(prefix="/equipment", tags=["equipment"])


async def _ensure_company(session: AsyncSession, company_id: Optional[str]) -> None:
    if company_id and not await get_company(session, company_id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid company_id")


@router.post("", response_model=EquipmentRead, status_code=status.HTTP_201_CREATED)
async def add_equipment(payload: EquipmentCreate, session: AsyncSession = Depends(get_session)):
    await _ensure_company(session, payload.company_id)
    obj = await create_equipment(session, payload.model_dump())
    return EquipmentRead.model_validate(obj)


@router.get("", response_model=EquipmentListResponse)
async def get_equipment_list(
    company_id: Optional[str] = None,
    status: Optional[EquipmentStatus] = None,
    tipo: Optional[str] = None,
    q: Optional[str] = None,
    session: AsyncSession = Depends(get_session),
):
    items = await list_equipment(session, company_id=company_id, status=status, tipo=tipo, q=q)
    return EquipmentListResponse(items=[EquipmentRead.model_validate(i) for i in items], total=len(items))


@router.get("/by-serial/{numero_serie}", response_model=EquipmentRead)
async def read_by_serial(numero_serie: str, session: AsyncSession = Depends(get_session)):
    obj = await get_by_serial(session, numero_serie)
    if not obj:
        raise HTTPException(status_code=404, detail="Equipment not found")
    return EquipmentRead.model_validate(obj)


@router.get("/{equipment_id}", response_model=EquipmentRead)
async def read_equipment(equipment_id: str, session: AsyncSession = Depends(get_session)):
    obj = await get_equipment(session, equipment_id)
    if not obj:
        raise HTTPException(status_code=404, detail="Equipment not found")
    return EquipmentRead.model_validate(obj)


@router.patch("/{equipment_id}", response_model=EquipmentRead)
async def patch_equipment(equipment_id: str, payload: EquipmentUpdate, session: AsyncSession = Depends(get_session)):
    data = payload.model_dump(exclude_unset=True)
    await _ensure_company(session, data.get("company_id"))
    obj = await update_equipment(session, equipment_id, data)
    if not obj:
        raise HTTPException(status_code=404, detail="Equipment not found")
    return EquipmentRead.model_validate(obj)

