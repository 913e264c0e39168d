"""Movement rule engine.

Pure functions that decide, for one movement request, which fields of each
selected equipment change and what the movement record looks like. Nothing
here touches the database; ``movement_service`` persists the result.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

from tacom.core.exceptions import MovementValidationError
from tacom.models.company import Company
from tacom.models.equipment import Equipment, EquipmentStatus
from tacom.models.maintenance_type import DefectCategory
from tacom.models.movement import MovementType
from tacom.schemas.movement import MovementRequest


DESTINATION_REQUIRED = frozenset({
    MovementType.MOVIMENTACAO,
    MovementType.SAIDA,
    MovementType.TRANSFERENCIA,
})

CLASSIFICATION_REQUIRED = frozenset({
    MovementType.MANUTENCAO,
    MovementType.TRANSFERENCIA_INTERNA,
    MovementType.ENVIO_MANUTENCAO,
    MovementType.DEVOLUCAO,
    MovementType.RETORNO_MANUTENCAO,
})

RETURN_TYPES = frozenset({MovementType.DEVOLUCAO, MovementType.RETORNO_MANUTENCAO})

# destination is fixed by the movement type and not user-editable
FIXED_DESTINATION = frozenset({MovementType.TRANSFERENCIA_INTERNA, MovementType.ENVIO_MANUTENCAO})


@dataclass(frozen=True)
class CompanyRoles:
    home_company_id: Optional[str] = None
    maintenance_partner_id: Optional[str] = None
    home_family_ids: FrozenSet[str] = field(default_factory=frozenset)

    def in_home_family(self, company_id: Optional[str]) -> bool:
        if company_id is None:
            return False
        return company_id == self.home_company_id or company_id in self.home_family_ids


def resolve_company_roles(
    companies: Iterable[Company],
    markers: Sequence[str],
    home_name: Optional[str] = None,
    partner_name: Optional[str] = None,
) -> CompanyRoles:
    """Pick the home company, its family and the maintenance partner by name."""
    companies = sorted(companies, key=lambda c: c.name.upper())
    upper_markers = [m.upper() for m in markers if m]

    family = [c for c in companies if any(m in c.name.upper() for m in upper_markers)]

    home = None
    if home_name:
        home = next((c for c in companies if c.name.upper() == home_name.upper()), None)
    if home is None and family:
        home = family[0]

    partner = None
    if partner_name:
        partner = next((c for c in companies if c.name.upper() == partner_name.upper()), None)

    family_ids = {c.id for c in family}
    if home is not None:
        family_ids.add(home.id)

    return CompanyRoles(
        home_company_id=home.id if home else None,
        maintenance_partner_id=partner.id if partner else None,
        home_family_ids=frozenset(family_ids),
    )


def categorize_defect_code(codigo: str) -> DefectCategory:
    code = (codigo or "").strip().upper()
    if code.startswith("DR"):
        return DefectCategory.DEFEITO_RECLAMADO
    if code.startswith("DE") or code.startswith("ER"):
        return DefectCategory.DEFEITO_ENCONTRADO
    return DefectCategory.OUTRO


def parse_movement_type(value: Optional[str]) -> MovementType:
    if not value:
        raise MovementValidationError("movement_type", "movement type is required")
    try:
        return MovementType(value)
    except ValueError:
        raise MovementValidationError("movement_type", f"unknown movement type '{value}'") from None


def validate_request(
    request: MovementRequest,
    roles: CompanyRoles,
    supports_defect_classification: bool = True,
) -> MovementType:
    """Check a request before anything is written. Returns the parsed type."""
    if not request.equipment_ids:
        raise MovementValidationError("equipment_ids", "select at least one equipment")

    movement_type = parse_movement_type(request.movement_type)

    if request.movement_date is None:
        raise MovementValidationError("movement_date", "movement date is required")

    if movement_type in DESTINATION_REQUIRED and not request.destination_company_id:
        raise MovementValidationError(
            "destination_company_id",
            f"destination company is required for '{movement_type.value}'",
        )

    if movement_type == MovementType.TRANSFERENCIA_INTERNA and not roles.home_company_id:
        raise MovementValidationError("destination_company_id", "no home company is configured")

    if movement_type == MovementType.ENVIO_MANUTENCAO:
        if not (roles.maintenance_partner_id or request.destination_company_id):
            raise MovementValidationError("destination_company_id", "no maintenance partner is configured")
        if not request.origin_company_id:
            raise MovementValidationError("origin_company_id", "origin company is required")
        if not roles.in_home_family(request.origin_company_id):
            raise MovementValidationError(
                "origin_company_id", "origin must be one of the home companies"
            )

    if request.defect_reported_id and request.other_defect_id:
        raise MovementValidationError(
            "other_defect_id", "defect reported and other defect are mutually exclusive"
        )

    if movement_type in CLASSIFICATION_REQUIRED:
        if supports_defect_classification:
            if not (request.defect_reported_id or request.other_defect_id):
                raise MovementValidationError(
                    "defect_reported_id",
                    f"a reported or other defect is required for '{movement_type.value}'",
                )
        elif not request.maintenance_type_id:
            raise MovementValidationError(
                "maintenance_type_id",
                f"maintenance type is required for '{movement_type.value}'",
            )

    return movement_type


def resolve_companies(
    movement_type: MovementType,
    request: MovementRequest,
    roles: CompanyRoles,
    equipment: Optional[Equipment] = None,
) -> Tuple[Optional[str], Optional[str]]:
    """Return (origin, destination) company ids for one equipment."""
    if movement_type == MovementType.TRANSFERENCIA_INTERNA:
        return roles.home_company_id, roles.home_company_id
    if movement_type == MovementType.ENVIO_MANUTENCAO:
        return request.origin_company_id, roles.maintenance_partner_id or request.destination_company_id

    origin = request.origin_company_id
    if origin is None and equipment is not None:
        origin = equipment.company_id
    return origin, request.destination_company_id


def clamp_status(status: EquipmentStatus, destination_id: Optional[str], roles: CompanyRoles) -> EquipmentStatus:
    # only the home companies may hold equipment flagged as in maintenance
    if status == EquipmentStatus.MANUTENCAO and not roles.in_home_family(destination_id):
        return EquipmentStatus.EM_USO
    return status


def derive_equipment_patch(
    request: MovementRequest,
    equipment: Optional[Equipment],
    roles: CompanyRoles,
) -> Dict[str, Any]:
    """Fields to write on one equipment for this request.

    Deterministic in its inputs: the same request against the same equipment
    always yields the same patch.
    """
    movement_type = parse_movement_type(request.movement_type)
    _, destination = resolve_companies(movement_type, request, roles, equipment)
    override = request.status_override
    patch: Dict[str, Any] = {}

    if movement_type == MovementType.SAIDA:
        patch["company_id"] = destination
        patch["data_saida"] = request.movement_date
        if override is not None:
            patch["status"] = override
    elif movement_type in RETURN_TYPES:
        patch["status"] = override or EquipmentStatus.DISPONIVEL
        patch["em_manutencao"] = False
    elif movement_type == MovementType.MANUTENCAO:
        patch["status"] = override or EquipmentStatus.AGUARDANDO_MANUTENCAO
        patch["em_manutencao"] = True
    elif movement_type == MovementType.ENTRADA:
        patch["status"] = override or EquipmentStatus.DISPONIVEL
        patch["data_saida"] = None
        if destination:
            patch["company_id"] = destination
    elif movement_type == MovementType.ENVIO_MANUTENCAO:
        patch["status"] = clamp_status(override or EquipmentStatus.AGUARDANDO_MANUTENCAO, destination, roles)
        patch["company_id"] = destination
        patch["em_manutencao"] = True
    else:
        patch["status"] = clamp_status(override or EquipmentStatus.EM_USO, destination, roles)
        if destination:
            patch["company_id"] = destination

    if request.equipment_type:
        patch["tipo"] = request.equipment_type
    if request.equipment_model:
        patch["modelo"] = request.equipment_model

    return patch


def apply_patch(equipment: Equipment, patch: Dict[str, Any]) -> Equipment:
    for k, v in patch.items():
        setattr(equipment, k, v)
    return equipment


def build_movement_record(
    request: MovementRequest,
    equipment: Equipment,
    roles: CompanyRoles,
    responsible_user: str,
    patch: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    movement_type = parse_movement_type(request.movement_type)
    origin, destination = resolve_companies(movement_type, request, roles, equipment)
    if patch is None:
        patch = derive_equipment_patch(request, equipment, roles)

    return {
        "equipment_id": equipment.id,
        "tipo_movimento": movement_type,
        "data_movimento": request.movement_date,
        "empresa_origem_id": origin,
        "empresa_destino_id": destination,
        "usuario_responsavel": responsible_user,
        "observacoes": request.notes or None,
        "tipo_manutencao_id": request.maintenance_type_id,
        "defeito_reclamado_id": request.defect_reported_id,
        "defeito_encontrado_id": request.defect_found_id,
        "outro_defeito_id": request.other_defect_id,
        "status_resultante": patch.get("status", equipment.status),
    }


@dataclass
class PlannedMovement:
    equipment: Equipment
    patch: Dict[str, Any]
    movement: Dict[str, Any]


def plan_movement(
    request: MovementRequest,
    equipment_list: Sequence[Equipment],
    roles: CompanyRoles,
    responsible_user: str,
    supports_defect_classification: bool = True,
) -> List[PlannedMovement]:
    """Validate once, then derive one patch and one record per equipment, in order."""
    validate_request(request, roles, supports_defect_classification)
    plans = []
    for equipment in equipment_list:
        patch = derive_equipment_patch(request, equipment, roles)
        record = build_movement_record(request, equipment, roles, responsible_user, patch)
        plans.append(PlannedMovement(equipment=equipment, patch=patch, movement=record))
    return plans


class MovementDraft:
    """Builds a MovementRequest field by field, the way a movement form fills in.

    Keeps the input-time rules: the reported defect and the "other" defect
    clear each other, and the companies fixed by the movement type are filled
    in as soon as the type is chosen.
    """

    EXCLUSIVE = {
        "defect_reported_id": "other_defect_id",
        "other_defect_id": "defect_reported_id",
    }

    def __init__(self, roles: CompanyRoles, movement_date=None):
        self.roles = roles
        self.data: Dict[str, Any] = {"movement_date": movement_date, "equipment_ids": []}
        self._origin_from_equipment = True
        self._selected_origin: Optional[str] = None

    @property
    def movement_type(self) -> Optional[MovementType]:
        try:
            return MovementType(self.data.get("movement_type"))
        except ValueError:
            return None

    def set_field(self, name: str, value: Any) -> "MovementDraft":
        if name not in MovementRequest.model_fields:
            raise MovementValidationError(name, "unknown field")

        if name == "destination_company_id" and self.movement_type in FIXED_DESTINATION:
            raise MovementValidationError(
                name, f"destination is fixed for '{self.movement_type.value}'"
            )

        previous_type = self.movement_type
        if isinstance(value, MovementType):
            value = value.value
        self.data[name] = value

        if value and name in self.EXCLUSIVE:
            self.data[self.EXCLUSIVE[name]] = None
        if name == "movement_type":
            self._apply_fixed_companies(previous_type)
        if name == "origin_company_id":
            self._origin_from_equipment = False
        return self

    def select_equipment(self, equipment_list: Sequence[Equipment]) -> "MovementDraft":
        self.data["equipment_ids"] = [e.id for e in equipment_list]
        self._selected_origin = equipment_list[0].company_id if equipment_list else None
        if self._origin_from_equipment and self.movement_type not in FIXED_DESTINATION:
            self.data["origin_company_id"] = self._selected_origin
        return self

    def _apply_fixed_companies(self, previous_type: Optional[MovementType] = None) -> None:
        if self.movement_type == MovementType.TRANSFERENCIA_INTERNA:
            self.data["origin_company_id"] = self.roles.home_company_id
            self.data["destination_company_id"] = self.roles.home_company_id
            self._origin_from_equipment = False
        elif self.movement_type == MovementType.ENVIO_MANUTENCAO:
            self.data["destination_company_id"] = self.roles.maintenance_partner_id
            # origin must be picked from the home family
            self.data["origin_company_id"] = None
            self._origin_from_equipment = False
        elif previous_type in FIXED_DESTINATION:
            # back to a free type: drop the pinned companies
            self.data["destination_company_id"] = None
            self.data["origin_company_id"] = self._selected_origin
            self._origin_from_equipment = True

    def build(self) -> MovementRequest:
        return MovementRequest(**{k: v for k, v in self.data.items() if v is not None})
