from typing import Optional, List
from datetime import date, datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator


def _month_start(value):
    # accepts "YYYY-MM" as well as full dates
    if isinstance(value, str) and len(value) == 7:
        value = f"{value}-01"
    return value


class FleetRecordCreate(BaseModel):
    cod_operadora: str
    nome_empresa: Optional[str] = None
    mes_referencia: date
    simples_com_imagem: int = Field(default=0, ge=0)
    simples_sem_imagem: int = Field(default=0, ge=0)
    secao: int = Field(default=0, ge=0)
    citgis: int = Field(default=0, ge=0)
    buszoom: int = Field(default=0, ge=0)
    telemetria: int = Field(default=0, ge=0)

    normalize_month = field_validator("mes_referencia", mode="before")(_month_start)


class FleetRecordUpdate(BaseModel):
    cod_operadora: Optional[str] = None
    nome_empresa: Optional[str] = None
    mes_referencia: Optional[date] = None
    simples_com_imagem: Optional[int] = Field(default=None, ge=0)
    simples_sem_imagem: Optional[int] = Field(default=None, ge=0)
    secao: Optional[int] = Field(default=None, ge=0)
    citgis: Optional[int] = Field(default=None, ge=0)
    buszoom: Optional[int] = Field(default=None, ge=0)
    telemetria: Optional[int] = Field(default=None, ge=0)

    normalize_month = field_validator("mes_referencia", mode="before")(_month_start)


class FleetRecordRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    cod_operadora: str
    nome_empresa: str
    mes_referencia: date
    simples_com_imagem: int
    simples_sem_imagem: int
    secao: int
    citgis: int
    buszoom: int
    nuvem: int
    telemetria: int
    total: int
    usuario_responsavel: Optional[str]
    created_at: datetime


class FleetListResponse(BaseModel):
    items: List[FleetRecordRead]
    total: int


class FleetSummary(BaseModel):
    """Service totals over a filtered set of fleet records."""

    records: int
    simples_com_imagem: int
    simples_sem_imagem: int
    secao: int
    citgis: int
    buszoom: int
    telemetria: int
    total: int
