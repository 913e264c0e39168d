import logging
from typing import List, Optional
from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from tacom.core.exceptions import ConflictError
from tacom.models.equipment_type import EquipmentType
from tacom.models.maintenance_type import MaintenanceType
from tacom.models.movement import Movement
from tacom.models.state import State
from tacom.services.movement_rules import categorize_defect_code

logger = logging.getLogger(__name__)


# Maintenance types / defect classification
async def get_by_code(session: AsyncSession, codigo: str) -> Optional[MaintenanceType]:
    res = await session.execute(select(MaintenanceType).where(MaintenanceType.codigo == codigo))
    return res.scalars().first()


async def create_maintenance_type(session: AsyncSession, payload: dict) -> MaintenanceType:
    if await get_by_code(session, payload["codigo"]):
        raise ConflictError(f"maintenance type code {payload['codigo']} already exists")
    obj = MaintenanceType(**payload)
    obj.categoria_defeito = categorize_defect_code(obj.codigo)
    session.add(obj)
    await session.commit()
    await session.refresh(obj)
    return obj


async def list_maintenance_types(session: AsyncSession, active_only: bool = False) -> List[MaintenanceType]:
    stmt = select(MaintenanceType).order_by(MaintenanceType.categoria_defeito, MaintenanceType.descricao)
    if active_only:
        stmt = stmt.where(MaintenanceType.ativo == True)  # noqa: E712
    res = await session.execute(stmt)
    return res.scalars().all()


async def get_maintenance_type(session: AsyncSession, record_id: str) -> Optional[MaintenanceType]:
    return await session.get(MaintenanceType, record_id)


async def update_maintenance_type(session: AsyncSession, record_id: str, data: dict) -> Optional[MaintenanceType]:
    obj = await session.get(MaintenanceType, record_id)
    if not obj:
        return None
    codigo = data.get("codigo")
    if codigo and codigo != obj.codigo:
        existing = await get_by_code(session, codigo)
        if existing and existing.id != obj.id:
            raise ConflictError(f"maintenance type code {codigo} already exists")
    for k, v in data.items():
        setattr(obj, k, v)
    obj.categoria_defeito = categorize_defect_code(obj.codigo)
    session.add(obj)
    await session.commit()
    await session.refresh(obj)
    return obj


async def is_maintenance_type_in_use(session: AsyncSession, record_id: str) -> bool:
    stmt = select(Movement.id).where(or_(
        Movement.tipo_manutencao_id == record_id,
        Movement.defeito_reclamado_id == record_id,
        Movement.defeito_encontrado_id == record_id,
        Movement.outro_defeito_id == record_id,
    )).limit(1)
    res = await session.execute(stmt)
    return res.first() is not None


async def delete_maintenance_type(session: AsyncSession, record_id: str) -> bool:
    obj = await session.get(MaintenanceType, record_id)
    if not obj:
        return False
    if await is_maintenance_type_in_use(session, record_id):
        raise ConflictError(f"maintenance type {obj.codigo} is referenced by movements")
    await session.delete(obj)
    await session.commit()
    return True


async def recategorize_all(session: AsyncSession) -> int:
    """Recompute every category from its code. Returns how many changed."""
    changed = 0
    for obj in await list_maintenance_types(session):
        category = categorize_defect_code(obj.codigo)
        if obj.categoria_defeito != category:
            obj.categoria_defeito = category
            session.add(obj)
            changed += 1
    await session.commit()
    logger.info("Recategorized maintenance types", extra={"changed": changed})
    return changed


# Equipment types
async def create_equipment_type(session: AsyncSession, payload: dict) -> EquipmentType:
    res = await session.execute(select(EquipmentType).where(EquipmentType.nome == payload["nome"]))
    if res.scalars().first():
        raise ConflictError(f"equipment type {payload['nome']} already exists")
    obj = EquipmentType(**payload)
    session.add(obj)
    await session.commit()
    await session.refresh(obj)
    return obj


async def list_equipment_types(session: AsyncSession, active_only: bool = False) -> List[EquipmentType]:
    stmt = select(EquipmentType).order_by(EquipmentType.nome)
    if active_only:
        stmt = stmt.where(EquipmentType.ativo == True)  # noqa: E712
    res = await session.execute(stmt)
    return res.scalars().all()


async def delete_equipment_type(session: AsyncSession, record_id: str) -> bool:
    obj = await session.get(EquipmentType, record_id)
    if not obj:
        return False
    await session.delete(obj)
    await session.commit()
    return True


# States / regions
async def get_state_by_name(session: AsyncSession, nome: str) -> Optional[State]:
    res = await session.execute(select(State).where(State.nome == nome))
    return res.scalars().first()


async def create_state(session: AsyncSession, payload: dict) -> State:
    if await get_state_by_name(session, payload["nome"]):
        raise ConflictError(f"state {payload['nome']} already exists")
    obj = State(**payload)
    session.add(obj)
    await session.commit()
    await session.refresh(obj)
    return obj


async def list_states(session: AsyncSession, active_only: bool = False) -> List[State]:
    stmt = select(State).order_by(State.nome)
    if active_only:
        stmt = stmt.where(State.ativo == True)  # noqa: E712
    res = await session.execute(stmt)
    return res.scalars().all()


async def update_state(session: AsyncSession, record_id: str, data: dict) -> Optional[State]:
    obj = await session.get(State, record_id)
    if not obj:
        return None
    nome = data.get("nome")
    if nome and nome != obj.nome and await get_state_by_name(session, nome):
        raise ConflictError(f"state {nome} already exists")
    for k, v in data.items():
        setattr(obj, k, v)
    session.add(obj)
    await session.commit()
    await session.refresh(obj)
    return obj


async def delete_state(session: AsyncSession, record_id: str) -> bool:
    obj = await session.get(State, record_id)
    if not obj:
        return False
    await session.delete(obj)
    await session.commit()
    return True
