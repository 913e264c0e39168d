from typing import Optional, List, Dict, Any
from datetime import date, datetime
from pydantic import BaseModel, ConfigDict, Field

from tacom.models.equipment import EquipmentStatus
from tacom.models.movement import MovementType


class MovementRequest(BaseModel):
    """One movement applied to a batch of equipment.

    ``movement_type`` stays a plain string so that an unknown value is
    reported by the rule engine with the offending field name.
    """

    movement_type: str = ""
    equipment_ids: List[str] = Field(default_factory=list)
    movement_date: Optional[date] = None
    destination_company_id: Optional[str] = None
    origin_company_id: Optional[str] = None
    maintenance_type_id: Optional[str] = None
    defect_reported_id: Optional[str] = None
    defect_found_id: Optional[str] = None
    other_defect_id: Optional[str] = None
    status_override: Optional[EquipmentStatus] = None
    equipment_type: Optional[str] = None
    equipment_model: Optional[str] = None
    notes: Optional[str] = None


class MovementRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    equipment_id: str
    tipo_movimento: MovementType
    data_movimento: date
    empresa_origem_id: Optional[str]
    empresa_destino_id: Optional[str]
    usuario_responsavel: Optional[str]
    observacoes: Optional[str]
    tipo_manutencao_id: Optional[str]
    defeito_reclamado_id: Optional[str]
    defeito_encontrado_id: Optional[str]
    outro_defeito_id: Optional[str]
    status_resultante: Optional[EquipmentStatus]
    data_criacao: datetime


class PlannedUpdate(BaseModel):
    equipment_id: str
    numero_serie: str
    patch: Dict[str, Any]
    movement: Dict[str, Any]


class MovementPreview(BaseModel):
    items: List[PlannedUpdate]
    total: int


class MovementBatchResult(BaseModel):
    movement_ids: List[str]
    equipment_ids: List[str]
    total: int


class MovementListResponse(BaseModel):
    items: List[MovementRead]
    total: int
