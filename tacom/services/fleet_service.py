"""Monthly fleet counts per bus operator, the basis for service billing."""
import logging
from typing import Dict, List, Optional
from sqlalchemy import select, extract
from sqlalchemy.ext.asyncio import AsyncSession

from tacom.core.exceptions import FieldValidationError
from tacom.models.fleet import FleetRecord

logger = logging.getLogger(__name__)

# operator code -> operator name, used when the name is not given
OPERATORS: Dict[str, str] = {
    "9": "Guaíba",
    "11": "Itapuã",
    "12": "Sogal",
    "13": "Sogil",
    "14": "Soul",
    "15": "Transcal",
    "16": "Viamão",
    "20": "Sti",
    "21": "Transbus",
    "23": "Tc_Sapi",
    "26": "Sapucaia",
    "27": "Cmt",
    "29": "Central",
    "32": "Catsul",
    "34": "Trensurb",
    "41": "Nova Santa Rita",
    "42": "Hamburguesa",
    "46": "Parobe",
    "47": "Soul Municipal",
}

SERVICE_FIELDS = ("simples_com_imagem", "simples_sem_imagem", "secao", "citgis", "buszoom", "telemetria")


def fleet_total(record: FleetRecord) -> int:
    """Fleet size: vehicles with the simple validator (with or without camera) plus section counters."""
    return (record.simples_com_imagem or 0) + (record.simples_sem_imagem or 0) + (record.secao or 0)


def _finalize(record: FleetRecord) -> FleetRecord:
    record.cod_operadora = (record.cod_operadora or "").strip()
    if not record.cod_operadora:
        raise FieldValidationError("cod_operadora", "operator code is required")
    if not record.nome_empresa:
        record.nome_empresa = OPERATORS.get(record.cod_operadora, "")
    if not record.nome_empresa:
        raise FieldValidationError("nome_empresa", f"unknown operator {record.cod_operadora}, give its name")
    record.mes_referencia = record.mes_referencia.replace(day=1)
    record.total = fleet_total(record)
    # every vehicle in the fleet is billed for cloud storage
    record.nuvem = record.total
    return record


async def create_fleet_record(session: AsyncSession, payload: dict, responsible_user: str) -> FleetRecord:
    obj = _finalize(FleetRecord(**payload, usuario_responsavel=responsible_user))
    session.add(obj)
    await session.commit()
    await session.refresh(obj)
    logger.info("Fleet record saved", extra={"operator": obj.cod_operadora, "month": str(obj.mes_referencia)})
    return obj


async def list_fleet_records(
    session: AsyncSession,
    cod_operadora: Optional[str] = None,
    nome_empresa: Optional[str] = None,
    mes: Optional[int] = None,
    ano: Optional[int] = None,
) -> List[FleetRecord]:
    stmt = select(FleetRecord).order_by(FleetRecord.mes_referencia.desc(), FleetRecord.nome_empresa)
    if cod_operadora:
        stmt = stmt.where(FleetRecord.cod_operadora == cod_operadora)
    if nome_empresa:
        stmt = stmt.where(FleetRecord.nome_empresa == nome_empresa)
    if mes:
        stmt = stmt.where(extract("month", FleetRecord.mes_referencia) == mes)
    if ano:
        stmt = stmt.where(extract("year", FleetRecord.mes_referencia) == ano)
    res = await session.execute(stmt)
    return res.scalars().all()


async def get_fleet_record(session: AsyncSession, record_id: str) -> Optional[FleetRecord]:
    return await session.get(FleetRecord, record_id)


async def update_fleet_record(
    session: AsyncSession, record_id: str, data: dict, responsible_user: str
) -> Optional[FleetRecord]:
    obj = await session.get(FleetRecord, record_id)
    if not obj:
        return None
    for k, v in data.items():
        setattr(obj, k, v)
    if "cod_operadora" in data and "nome_empresa" not in data:
        obj.nome_empresa = None
    obj.usuario_responsavel = responsible_user
    _finalize(obj)
    session.add(obj)
    await session.commit()
    await session.refresh(obj)
    return obj


async def delete_fleet_record(session: AsyncSession, record_id: str) -> bool:
    obj = await session.get(FleetRecord, record_id)
    if not obj:
        return False
    await session.delete(obj)
    await session.commit()
    return True


def summarize_fleet(records: List[FleetRecord]) -> Dict[str, int]:
    summary = {name: sum(getattr(r, name) or 0 for r in records) for name in SERVICE_FIELDS}
    summary["total"] = summary["simples_com_imagem"] + summary["simples_sem_imagem"] + summary["secao"]
    summary["records"] = len(records)
    return summary
