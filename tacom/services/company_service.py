from typing import List, Optional
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from tacom.core.exceptions import ConflictError
from tacom.models.company import Company
from tacom.models.equipment import Equipment


async def create_company(session: AsyncSession, payload: dict) -> Company:
    obj = Company(**payload)
    session.add(obj)
    await session.commit()
    await session.refresh(obj)
    return obj


async def list_companies(session: AsyncSession, q: Optional[str] = None) -> List[Company]:
    stmt = select(Company).order_by(Company.name)
    if q:
        like = f"%{q}%"
        stmt = stmt.where((Company.name.ilike(like)) | (Company.cnpj.ilike(like)))
    res = await session.execute(stmt)
    return res.scalars().all()


async def get_company(session: AsyncSession, company_id: str) -> Optional[Company]:
    return await session.get(Company, company_id)


async def update_company(session: AsyncSession, company_id: str, data: dict) -> Optional[Company]:
    obj = await session.get(Company, company_id)
    if not obj:
        return None
    for k, v in data.items():
        setattr(obj, k, v)
    session.add(obj)
    await session.commit()
    await session.refresh(obj)
    return obj


async def delete_company(session: AsyncSession, company_id: str) -> bool:
    obj = await session.get(Company, company_id)
    if not obj:
        return False
    held = (await session.execute(
        select(func.count()).select_from(Equipment).where(Equipment.company_id == company_id)
    )).scalar_one()
    if held:
        raise ConflictError(f"company {obj.name} still holds {held} equipment")
    await session.delete(obj)
    await session.commit()
    return True
