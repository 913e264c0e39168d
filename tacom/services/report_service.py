from datetime import date
from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from tacom.core.exceptions import EquipmentNotFound
from tacom.models.company import Company
from tacom.models.equipment import Equipment
from tacom.services.equipment_service import list_equipment
from tacom.services.movement_service import list_movements

RECENT_DAYS = 7
LONG_TERM_DAYS = 90


def classify_stock(data_entrada: date, data_saida: Optional[date], today: date) -> Tuple[int, str]:
    """Days in stock and the stock bucket for one equipment."""
    if data_saida:
        return (data_saida - data_entrada).days, "out"
    days = (today - data_entrada).days
    if days <= RECENT_DAYS:
        return days, "recent"
    if days > LONG_TERM_DAYS:
        return days, "long_term"
    return days, "available"


async def stock_status_report(
    session: AsyncSession,
    company_id: Optional[str] = None,
    tipo: Optional[str] = None,
    stock_status: Optional[str] = None,
    today: Optional[date] = None,
) -> List[Dict[str, Any]]:
    today = today or date.today()
    rows = []
    for eq in await list_equipment(session, company_id=company_id, tipo=tipo):
        days, bucket = classify_stock(eq.data_entrada, eq.data_saida, today)
        if stock_status and bucket != stock_status:
            continue
        rows.append({
            "equipment_id": eq.id,
            "numero_serie": eq.numero_serie,
            "tipo": eq.tipo,
            "company_id": eq.company_id,
            "status": eq.status,
            "data_entrada": eq.data_entrada,
            "data_saida": eq.data_saida,
            "days_in_stock": days,
            "stock_status": bucket,
        })
    return rows


async def equipment_history(session: AsyncSession, equipment_id: str) -> Dict[str, Any]:
    equipment = await session.get(Equipment, equipment_id)
    if equipment is None:
        raise EquipmentNotFound(equipment_id)
    movements = await list_movements(session, equipment_id=equipment_id)
    return {"equipment": equipment, "movements": movements}


async def distribution_report(session: AsyncSession) -> List[Dict[str, Any]]:
    """Equipment counts per holding company and status."""
    stmt = (
        select(Equipment.company_id, Company.name, Equipment.status, func.count(Equipment.id))
        .select_from(Equipment)
        .join(Company, Company.id == Equipment.company_id, isouter=True)
        .group_by(Equipment.company_id, Company.name, Equipment.status)
        .order_by(Company.name)
    )
    res = await session.execute(stmt)
    return [
        {"company_id": company_id, "company_name": name, "status": status, "total": total}
        for company_id, name, status, total in res.all()
    ]
