from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from tacom.core.database import get_session
from tacom.schemas.catalog import (
    MaintenanceTypeCreate, MaintenanceTypeUpdate, MaintenanceTypeRead,
    EquipmentTypeCreate, EquipmentTypeRead, StateCreate, StateUpdate, StateRead, ListResponse,
)
from tacom.services.catalog_service import (
    create_maintenance_type, list_maintenance_types, get_maintenance_type,
    update_maintenance_type, delete_maintenance_type, recategorize_all,
    create_equipment_type, list_equipment_types, delete_equipment_type,
    create_state, list_states, update_state, delete_state,
)

router = APIRouter(tags=["catalog"])


# Maintenance types (defect classification)
@router.post("/maintenance-types", response_model=MaintenanceTypeRead, status_code=status.HTTP_201_CREATED)
async def add_maintenance_type(payload: MaintenanceTypeCreate, session: AsyncSession = Depends(get_session)):
    obj = await create_maintenance_type(session, payload.model_dump())
    return MaintenanceTypeRead.model_validate(obj)


@router.get("/maintenance-types", response_model=ListResponse)
async def get_maintenance_types(active_only: bool = False, session: AsyncSession = Depends(get_session)):
    items = await list_maintenance_types(session, active_only=active_only)
    return ListResponse(items=[MaintenanceTypeRead.model_validate(i) for i in items], total=len(items))


@router.post("/maintenance-types/recategorize")
async def recategorize_maintenance_types(session: AsyncSession = Depends(get_session)):
    changed = await recategorize_all(session)
    return {"changed": changed}


@router.get("/maintenance-types/{record_id}", response_model=MaintenanceTypeRead)
async def read_maintenance_type(record_id: str, session: AsyncSession = Depends(get_session)):
    obj = await get_maintenance_type(session, record_id)
    if not obj:
        raise HTTPException(status_code=404, detail="Maintenance type not found")
    return MaintenanceTypeRead.model_validate(obj)


@router.put("/maintenance-types/{record_id}", response_model=MaintenanceTypeRead)
async def put_maintenance_type(record_id: str, payload: MaintenanceTypeUpdate, session: AsyncSession = Depends(get_session)):
    obj = await update_maintenance_type(session, record_id, payload.model_dump(exclude_unset=True))
    if not obj:
        raise HTTPException(status_code=404, detail="Maintenance type not found")
    return MaintenanceTypeRead.model_validate(obj)


@router.delete("/maintenance-types/{record_id}")
async def del_maintenance_type(record_id: str, session: AsyncSession = Depends(get_session)):
    ok = await delete_maintenance_type(session, record_id)
    if not ok:
        raise HTTPException(status_code=404, detail="Maintenance type not found")
    return {"ok": True}


# Equipment types
@router.post("/equipment-types", response_model=EquipmentTypeRead, status_code=status.HTTP_201_CREATED)
async def add_equipment_type(payload: EquipmentTypeCreate, session: AsyncSession = Depends(get_session)):
    obj = await create_equipment_type(session, payload.model_dump())
    return EquipmentTypeRead.model_validate(obj)


@router.get("/equipment-types", response_model=ListResponse)
async def get_equipment_types(active_only: bool = False, session: AsyncSession = Depends(get_session)):
    items = await list_equipment_types(session, active_only=active_only)
    return ListResponse(items=[EquipmentTypeRead.model_validate(i) for i in items], total=len(items))


@router.delete("/equipment-types/{record_id}")
async def del_equipment_type(record_id: str, session: AsyncSession = Depends(get_session)):
    ok = await delete_equipment_type(session, record_id)
    if not ok:
        raise HTTPException(status_code=404, detail="Equipment type not found")
    return {"ok": True}


# States / regions
@router.post("/states", response_model=StateRead, status_code=status.HTTP_201_CREATED)
async def add_state(payload: StateCreate, session: AsyncSession = Depends(get_session)):
    obj = await create_state(session, payload.model_dump())
    return StateRead.model_validate(obj)


@router.get("/states", response_model=ListResponse)
async def get_states(active_only: bool = False, session: AsyncSession = Depends(get_session)):
    items = await list_states(session, active_only=active_only)
    return ListResponse(items=[StateRead.model_validate(i) for i in items], total=len(items))


@router.put("/states/{record_id}", response_model=StateRead)
async def put_state(record_id: str, payload: StateUpdate, session: AsyncSession = Depends(get_session)):
    obj = await update_state(session, record_id, payload.model_dump(exclude_unset=True))
    if not obj:
        raise HTTPException(status_code=404, detail="State not found")
    return StateRead.model_validate(obj)


@router.delete("/states/{record_id}")
async def del_state(record_id: str, session: AsyncSession = Depends(get_session)):
    ok = await delete_state(session, record_id)
    if not ok:
        raise HTTPException(status_code=404, detail="State not found")
    return {"ok": True}
