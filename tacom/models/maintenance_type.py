from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4

from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime, Enum as SAEnum


class DefectCategory(str, Enum):
    DEFEITO_RECLAMADO = "defeito_reclamado"
    DEFEITO_ENCONTRADO = "defeito_encontrado"
    OUTRO = "outro"


class MaintenanceType(SQLModel, table=True):
    """Defect classification catalog entry (``tipos_manutencao``)."""

    __tablename__ = "tipos_manutencao"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    codigo: str = Field(index=True, sa_column_kwargs={"unique": True})
    descricao: str
    categoria_defeito: DefectCategory = Field(
        default=DefectCategory.OUTRO,
        sa_column=Column(
            SAEnum(DefectCategory, values_callable=lambda e: [m.value for m in e]),
            nullable=False,
            default=DefectCategory.OUTRO,
        ),
    )
    ativo: bool = True
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
