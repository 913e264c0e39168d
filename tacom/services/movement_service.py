import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from fastapi import Request
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tacom.core.config import settings
from tacom.core.exceptions import MovementValidationError, PersistenceError
from tacom.models.company import Company
from tacom.models.maintenance_type import MaintenanceType
from tacom.models.movement import Movement, MovementType
from tacom.schemas.movement import MovementBatchResult, MovementRequest
from tacom.services.company_service import list_companies
from tacom.services.equipment_service import get_equipment_batch
from tacom.services.movement_rules import (
    CompanyRoles,
    PlannedMovement,
    apply_patch,
    plan_movement,
    resolve_company_roles,
    validate_request,
)

logger = logging.getLogger(__name__)


@dataclass
class MovementContext:
    """Resolved once at startup and handed to every movement call."""

    roles: CompanyRoles = field(default_factory=CompanyRoles)
    supports_defect_classification: bool = True


async def load_movement_context(session: AsyncSession) -> MovementContext:
    companies = await list_companies(session)
    roles = resolve_company_roles(
        companies,
        settings.HOME_COMPANY_MARKERS,
        home_name=settings.HOME_COMPANY_NAME,
        partner_name=settings.MAINTENANCE_PARTNER_NAME,
    )
    logger.info(
        "Movement context resolved",
        extra={"home": roles.home_company_id, "partner": roles.maintenance_partner_id},
    )
    return MovementContext(
        roles=roles,
        supports_defect_classification=settings.DEFECT_CLASSIFICATION_ENABLED,
    )


async def get_movement_context(request: Request) -> MovementContext:
    ctx = getattr(request.app.state, "movement_context", None)
    return ctx or MovementContext(supports_defect_classification=settings.DEFECT_CLASSIFICATION_ENABLED)


async def check_references(session: AsyncSession, payload: MovementRequest) -> None:
    """Referenced companies and classifications must exist before anything is written."""
    for name in ("destination_company_id", "origin_company_id"):
        value = getattr(payload, name)
        if value and await session.get(Company, value) is None:
            raise MovementValidationError(name, f"company {value} not found")

    for name in ("maintenance_type_id", "defect_reported_id", "defect_found_id", "other_defect_id"):
        value = getattr(payload, name)
        if value and await session.get(MaintenanceType, value) is None:
            raise MovementValidationError(name, f"classification {value} not found")


async def prepare_movement(
    session: AsyncSession,
    payload: MovementRequest,
    ctx: MovementContext,
    responsible_user: str,
) -> List[PlannedMovement]:
    validate_request(payload, ctx.roles, ctx.supports_defect_classification)
    equipment_list = await get_equipment_batch(session, payload.equipment_ids)
    await check_references(session, payload)
    return plan_movement(
        payload,
        equipment_list,
        ctx.roles,
        responsible_user,
        ctx.supports_defect_classification,
    )


async def insert_movement(session: AsyncSession, record: dict) -> Movement:
    """Stage one movement row; the caller commits it with the equipment update."""
    obj = Movement(**record)
    session.add(obj)
    await session.flush()
    return obj


async def process_movement(
    session: AsyncSession,
    payload: MovementRequest,
    ctx: MovementContext,
    responsible_user: str,
) -> MovementBatchResult:
    """Apply one movement to every selected equipment, in order.

    Each equipment is committed on its own (movement insert + equipment
    update). The first failure stops the loop; units already committed stay.
    """
    plans = await prepare_movement(session, payload, ctx, responsible_user)
    logger.info(
        "Processing movement",
        extra={"type": payload.movement_type, "count": len(plans), "user": responsible_user},
    )

    movement_ids: List[str] = []
    committed: List[str] = []
    for index, plan in enumerate(plans):
        equipment_id = plan.equipment.id
        try:
            movement = await insert_movement(session, plan.movement)
            apply_patch(plan.equipment, plan.patch)
            session.add(plan.equipment)
            await session.commit()
        except SQLAlchemyError as exc:
            pending = [p.movement["equipment_id"] for p in plans[index + 1:]]
            await session.rollback()
            logger.error("Movement failed", extra={"equipment_id": equipment_id})
            raise PersistenceError(equipment_id, committed=committed, pending=pending) from exc
        movement_ids.append(movement.id)
        committed.append(equipment_id)

    return MovementBatchResult(movement_ids=movement_ids, equipment_ids=committed, total=len(committed))


async def list_movements(
    session: AsyncSession,
    equipment_id: Optional[str] = None,
    tipo: Optional[MovementType] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> List[Movement]:
    stmt = select(Movement).order_by(Movement.data_movimento.desc(), Movement.data_criacao.desc())
    if equipment_id:
        stmt = stmt.where(Movement.equipment_id == equipment_id)
    if tipo:
        stmt = stmt.where(Movement.tipo_movimento == tipo)
    if date_from:
        stmt = stmt.where(Movement.data_movimento >= date_from)
    if date_to:
        stmt = stmt.where(Movement.data_movimento <= date_to)
    res = await session.execute(stmt)
    return res.scalars().all()


async def get_movement(session: AsyncSession, movement_id: str) -> Optional[Movement]:
    return await session.get(Movement, movement_id)


async def refresh_movement_context(request: Request, session: AsyncSession) -> None:
    """Re-resolve company roles after the company table changed."""
    request.app.state.movement_context = await load_movement_context(session)
