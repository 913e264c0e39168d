from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from tacom.core.database import get_session
from tacom.core.identity import get_responsible_user
from tacom.models.movement import MovementType
from tacom.schemas.movement import (
    MovementRequest, MovementRead, MovementBatchResult, MovementPreview,
    MovementListResponse, PlannedUpdate,
)
from tacom.services.movement_service import (
    MovementContext, get_movement_context, prepare_movement, process_movement,
    list_movements, get_movement,
)

router = APIRouter(prefix="/movements", tags=["movements"])


@router.post("", response_model=MovementBatchResult, status_code=status.HTTP_201_CREATED)
async def create_movement(
    payload: MovementRequest,
    session: AsyncSession = Depends(get_session),
    ctx: MovementContext = Depends(get_movement_context),
    responsible_user: str = Depends(get_responsible_user),
):
    return await process_movement(session, payload, ctx, responsible_user)


@router.post("/preview", response_model=MovementPreview)
async def preview_movement(
    payload: MovementRequest,
    session: AsyncSession = Depends(get_session),
    ctx: MovementContext = Depends(get_movement_context),
    responsible_user: str = Depends(get_responsible_user),
):
    """Validate a movement and show what it would write, without writing it."""
    plans = await prepare_movement(session, payload, ctx, responsible_user)
    items = [
        PlannedUpdate(
            equipment_id=p.equipment.id,
            numero_serie=p.equipment.numero_serie,
            patch=p.patch,
            movement=p.movement,
        )
        for p in plans
    ]
    return MovementPreview(items=items, total=len(items))


@router.get("", response_model=MovementListResponse)
async def get_movements(
    equipment_id: Optional[str] = None,
    tipo: Optional[MovementType] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    session: AsyncSession = Depends(get_session),
):
    items = await list_movements(session, equipment_id=equipment_id, tipo=tipo, date_from=date_from, date_to=date_to)
    return MovementListResponse(items=[MovementRead.model_validate(i) for i in items], total=len(items))


@router.get("/{movement_id}", response_model=MovementRead)
async def read_movement(movement_id: str, session: AsyncSession = Depends(get_session)):
    obj = await get_movement(session, movement_id)
    if not obj:
        raise HTTPException(status_code=404, detail="Movement not found")
    return MovementRead.model_validate(obj)
