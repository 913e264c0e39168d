from datetime import date

import pytest

from tacom.core.exceptions import MovementValidationError
from tacom.models import Equipment
from tacom.models.movement import MovementType
from tacom.services.movement_rules import MovementDraft, validate_request


def unit(equipment_id, company_id):
    return Equipment(id=equipment_id, numero_serie=f"SN-{equipment_id}", tipo="Validador",
                     company_id=company_id, data_entrada=date(2024, 1, 10))


def test_reported_defect_clears_other_defect(roles):
    draft = MovementDraft(roles, movement_date=date(2024, 3, 1))
    draft.set_field("other_defect_id", "OUT1")
    draft.set_field("defect_reported_id", "DR01")

    request = draft.build()
    assert request.defect_reported_id == "DR01"
    assert request.other_defect_id is None


def test_other_defect_clears_reported_defect(roles):
    draft = MovementDraft(roles, movement_date=date(2024, 3, 1))
    draft.set_field("defect_reported_id", "DR01")
    draft.set_field("other_defect_id", "OUT1")

    request = draft.build()
    assert request.other_defect_id == "OUT1"
    assert request.defect_reported_id is None


def test_internal_transfer_pins_both_companies(roles):
    draft = MovementDraft(roles, movement_date=date(2024, 3, 1))
    draft.set_field("movement_type", MovementType.TRANSFERENCIA_INTERNA)
    draft.select_equipment([unit("E1", "home-poa")])

    assert draft.data["origin_company_id"] == "home"
    assert draft.data["destination_company_id"] == "home"
    with pytest.raises(MovementValidationError) as info:
        draft.set_field("destination_company_id", "client")
    assert info.value.field == "destination_company_id"


def test_send_to_maintenance_uses_partner_and_asks_for_origin(roles):
    draft = MovementDraft(roles, movement_date=date(2024, 3, 1))
    draft.set_field("movement_type", "envio_manutencao")
    draft.select_equipment([unit("E1", "client")])
    assert draft.data["destination_company_id"] == "partner"
    assert draft.data["origin_company_id"] is None

    draft.set_field("origin_company_id", "home-poa").set_field("defect_reported_id", "DR01")
    request = draft.build()
    assert validate_request(request, roles) == MovementType.ENVIO_MANUTENCAO
    assert request.equipment_ids == ["E1"]


def test_origin_follows_first_selected_equipment(roles):
    draft = MovementDraft(roles, movement_date=date(2024, 3, 1))
    draft.set_field("movement_type", "movimentacao")
    draft.select_equipment([unit("E1", "client"), unit("E2", "home")])
    assert draft.data["origin_company_id"] == "client"

    draft.select_equipment([])
    assert draft.data["origin_company_id"] is None


def test_unknown_field_is_rejected(roles):
    with pytest.raises(MovementValidationError):
        MovementDraft(roles).set_field("responsible_user", "Ana")


@pytest.mark.parametrize("fixed_type", ["transferencia_interna", "envio_manutencao"])
def test_leaving_fixed_type_releases_companies(roles, fixed_type):
    draft = MovementDraft(roles, movement_date=date(2024, 3, 1))
    draft.select_equipment([unit("E1", "client")])
    draft.set_field("movement_type", fixed_type)
    assert draft.data["destination_company_id"] is not None

    draft.set_field("movement_type", "movimentacao")
    assert draft.data["destination_company_id"] is None
    assert draft.data["origin_company_id"] == "client"

    draft.set_field("destination_company_id", "home-poa")
    draft.select_equipment([unit("E2", "home")])
    assert draft.data["origin_company_id"] == "home"
    assert draft.build().destination_company_id == "home-poa"
