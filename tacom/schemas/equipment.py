from typing import Optional, List
from datetime import date
from pydantic import BaseModel, ConfigDict

from tacom.models.equipment import EquipmentStatus


class EquipmentCreate(BaseModel):
    numero_serie: str
    tipo: str
    modelo: Optional[str] = None
    company_id: Optional[str] = None
    data_entrada: date
    data_saida: Optional[date] = None
    status: EquipmentStatus = EquipmentStatus.DISPONIVEL
    estado: Optional[str] = None
    em_manutencao: bool = False


class EquipmentUpdate(BaseModel):
    tipo: Optional[str] = None
    modelo: Optional[str] = None
    company_id: Optional[str] = None
    data_entrada: Optional[date] = None
    data_saida: Optional[date] = None
    status: Optional[EquipmentStatus] = None
    estado: Optional[str] = None
    em_manutencao: Optional[bool] = None


class EquipmentRead(EquipmentCreate):
    model_config = ConfigDict(from_attributes=True)

    id: str


class EquipmentListResponse(BaseModel):
    items: List[EquipmentRead]
    total: int
