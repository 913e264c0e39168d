from typing import Optional, List
from pydantic import BaseModel, ConfigDict

from tacom.models.maintenance_type import DefectCategory


class MaintenanceTypeCreate(BaseModel):
    codigo: str
    descricao: str
    ativo: bool = True


class MaintenanceTypeUpdate(BaseModel):
    codigo: Optional[str] = None
    descricao: Optional[str] = None
    ativo: Optional[bool] = None


class MaintenanceTypeRead(MaintenanceTypeCreate):
    model_config = ConfigDict(from_attributes=True)

    id: str
    categoria_defeito: DefectCategory


class EquipmentTypeCreate(BaseModel):
    nome: str
    ativo: bool = True


class EquipmentTypeRead(EquipmentTypeCreate):
    model_config = ConfigDict(from_attributes=True)

    id: str


class StateCreate(BaseModel):
    nome: str
    ativo: bool = True


class StateUpdate(BaseModel):
    nome: Optional[str] = None
    ativo: Optional[bool] = None


class StateRead(StateCreate):
    model_config = ConfigDict(from_attributes=True)

    id: str


class ListResponse(BaseModel):
    items: List
    total: int
