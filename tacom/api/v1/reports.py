from typing import List, Optional
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tacom.core.database import get_session
from tacom.schemas.equipment import EquipmentRead
from tacom.schemas.movement import MovementRead
from tacom.schemas.reports import StockStatusRow, DistributionRow, EquipmentHistory
from tacom.services.report_service import stock_status_report, equipment_history, distribution_report

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/stock-status", response_model=List[StockStatusRow])
async def get_stock_status(
    company_id: Optional[str] = None,
    tipo: Optional[str] = None,
    stock_status: Optional[str] = None,
    session: AsyncSession = Depends(get_session),
):
    return await stock_status_report(session, company_id=company_id, tipo=tipo, stock_status=stock_status)


@router.get("/equipment/{equipment_id}/history", response_model=EquipmentHistory)
async def get_equipment_history(equipment_id: str, session: AsyncSession = Depends(get_session)):
    history = await equipment_history(session, equipment_id)
    return EquipmentHistory(
        equipment=EquipmentRead.model_validate(history["equipment"]),
        movements=[MovementRead.model_validate(m) for m in history["movements"]],
    )


@router.get("/distribution", response_model=List[DistributionRow])
async def get_distribution(session: AsyncSession = Depends(get_session)):
    return await distribution_report(session)
