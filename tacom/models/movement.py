from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional
from uuid import uuid4

from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime, Enum as SAEnum, func

from tacom.models.equipment import EquipmentStatus


class MovementType(str, Enum):
    MOVIMENTACAO = "movimentacao"
    MANUTENCAO = "manutencao"
    DEVOLUCAO = "devolucao"
    RETORNO_MANUTENCAO = "retorno_manutencao"
    TRANSFERENCIA_INTERNA = "transferencia_interna"
    ENVIO_MANUTENCAO = "envio_manutencao"
    ENTRADA = "entrada"
    SAIDA = "saida"
    TRANSFERENCIA = "transferencia"


class Movement(SQLModel, table=True):
    """Append-only audit record of one movement applied to one equipment unit."""

    __tablename__ = "movimentacoes"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    equipment_id: str = Field(foreign_key="equipamentos.id", index=True)
    tipo_movimento: MovementType = Field(
        sa_column=Column(
            SAEnum(MovementType, values_callable=lambda e: [m.value for m in e]),
            nullable=False,
        )
    )
    data_movimento: date
    empresa_origem_id: Optional[str] = Field(default=None, foreign_key="empresas.id")
    empresa_destino_id: Optional[str] = Field(default=None, foreign_key="empresas.id")
    usuario_responsavel: Optional[str] = None
    observacoes: Optional[str] = None

    # legacy single-column classification
    tipo_manutencao_id: Optional[str] = Field(default=None, foreign_key="tipos_manutencao.id")
    defeito_reclamado_id: Optional[str] = Field(default=None, foreign_key="tipos_manutencao.id")
    defeito_encontrado_id: Optional[str] = Field(default=None, foreign_key="tipos_manutencao.id")
    outro_defeito_id: Optional[str] = Field(default=None, foreign_key="tipos_manutencao.id")

    status_resultante: Optional[EquipmentStatus] = Field(
        default=None,
        sa_column=Column(
            SAEnum(EquipmentStatus, values_callable=lambda e: [m.value for m in e]),
            nullable=True,
        ),
    )
    data_criacao: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(
            DateTime(timezone=True),
            server_default=func.now(),
            nullable=False,
        ),
    )
