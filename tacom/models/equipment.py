from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional
from uuid import uuid4

from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime, Enum as SAEnum


class EquipmentStatus(str, Enum):
    DISPONIVEL = "disponivel"
    EM_USO = "em_uso"
    MANUTENCAO = "manutencao"
    AGUARDANDO_MANUTENCAO = "aguardando_manutencao"
    DANIFICADO = "danificado"
    INDISPONIVEL = "indisponivel"
    DEVOLVIDO = "devolvido"


class Equipment(SQLModel, table=True):
    __tablename__ = "equipamentos"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    numero_serie: str = Field(index=True, sa_column_kwargs={"unique": True})
    tipo: str
    modelo: Optional[str] = None
    company_id: Optional[str] = Field(default=None, foreign_key="empresas.id", index=True)
    data_entrada: date = Field(default_factory=date.today)
    data_saida: Optional[date] = None
    status: EquipmentStatus = Field(
        default=EquipmentStatus.DISPONIVEL,
        sa_column=Column(
            SAEnum(EquipmentStatus, values_callable=lambda e: [m.value for m in e]),
            nullable=False,
            default=EquipmentStatus.DISPONIVEL,
        ),
    )
    estado: Optional[str] = None
    em_manutencao: bool = False
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
