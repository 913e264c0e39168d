from typing import Optional, List
from datetime import date
from pydantic import BaseModel

from tacom.models.equipment import EquipmentStatus
from tacom.schemas.equipment import EquipmentRead
from tacom.schemas.movement import MovementRead


class StockStatusRow(BaseModel):
    equipment_id: str
    numero_serie: str
    tipo: str
    company_id: Optional[str]
    status: EquipmentStatus
    data_entrada: date
    data_saida: Optional[date]
    days_in_stock: int
    stock_status: str


class DistributionRow(BaseModel):
    company_id: Optional[str]
    company_name: Optional[str]
    status: EquipmentStatus
    total: int


class EquipmentHistory(BaseModel):
    equipment: EquipmentRead
    movements: List[MovementRead]
