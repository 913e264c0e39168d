from datetime import date, datetime, timezone
from typing import Optional
from uuid import uuid4

from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime


class FleetRecord(SQLModel, table=True):
    """Monthly fleet count per bus operator, used for service billing (``frota``)."""

    __tablename__ = "frota"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    cod_operadora: str = Field(index=True)
    nome_empresa: str
    # always the first day of the reference month
    mes_referencia: date = Field(index=True)
    simples_com_imagem: int = 0
    simples_sem_imagem: int = 0
    secao: int = 0
    citgis: int = 0
    buszoom: int = 0
    nuvem: int = 0
    telemetria: int = 0
    total: int = 0
    usuario_responsavel: Optional[str] = None
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
