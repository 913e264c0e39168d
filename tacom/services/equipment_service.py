from typing import List, Optional, Sequence
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tacom.core.exceptions import ConflictError, EquipmentNotFound
from tacom.models.equipment import Equipment, EquipmentStatus


async def get_by_serial(session: AsyncSession, numero_serie: str) -> Optional[Equipment]:
    res = await session.execute(select(Equipment).where(Equipment.numero_serie == numero_serie))
    return res.scalars().first()


async def create_equipment(session: AsyncSession, payload: dict) -> Equipment:
    if await get_by_serial(session, payload["numero_serie"]):
        raise ConflictError(f"serial number {payload['numero_serie']} already registered")
    obj = Equipment(**payload)
    session.add(obj)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise ConflictError(f"serial number {payload['numero_serie']} already registered") from exc
    await session.refresh(obj)
    return obj


async def list_equipment(
    session: AsyncSession,
    company_id: Optional[str] = None,
    status: Optional[EquipmentStatus] = None,
    tipo: Optional[str] = None,
    q: Optional[str] = None,
) -> List[Equipment]:
    stmt = select(Equipment).order_by(Equipment.numero_serie)
    if company_id:
        stmt = stmt.where(Equipment.company_id == company_id)
    if status:
        stmt = stmt.where(Equipment.status == status)
    if tipo:
        stmt = stmt.where(Equipment.tipo == tipo)
    if q:
        like = f"%{q}%"
        stmt = stmt.where((Equipment.numero_serie.ilike(like)) | (Equipment.modelo.ilike(like)))
    res = await session.execute(stmt)
    return res.scalars().all()


async def get_equipment(session: AsyncSession, equipment_id: str) -> Optional[Equipment]:
    return await session.get(Equipment, equipment_id)


async def get_equipment_batch(session: AsyncSession, equipment_ids: Sequence[str]) -> List[Equipment]:
    """Load equipment in the requested order; any missing id fails the whole batch."""
    items = []
    for equipment_id in equipment_ids:
        obj = await session.get(Equipment, equipment_id)
        if obj is None:
            raise EquipmentNotFound(equipment_id)
        items.append(obj)
    return items


async def update_equipment(session: AsyncSession, equipment_id: str, data: dict) -> Optional[Equipment]:
    obj = await session.get(Equipment, equipment_id)
    if not obj:
        return None
    for k, v in data.items():
        setattr(obj, k, v)
    session.add(obj)
    await session.commit()
    await session.refresh(obj)
    return obj
