"""HTTP tests against the seeded database."""


def send_to_maintenance(client, **overrides):
    payload = {
        "movement_type": "envio_manutencao",
        "equipment_ids": ["E1"],
        "origin_company_id": "home",
        "destination_company_id": "partner",
        "defect_reported_id": "DR01",
        "movement_date": "2024-03-01",
    }
    payload.update(overrides)
    return client.post("/api/v1/movements", json=payload, headers={"X-User-Name": "Maria"})


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "database": "ok"}


def test_correlation_id_is_echoed(client):
    response = client.get("/api/health", headers={"X-Correlation-ID": "abc-123"})
    assert response.headers["x-correlation-id"] == "abc-123"
    assert client.get("/api/health").headers["x-correlation-id"]


def test_company_crud(client):
    created = client.post("/api/v1/companies", json={"name": "Nova Empresa", "cnpj": "12.345.678/0001-90"})
    assert created.status_code == 201
    company_id = created.json()["id"]

    listed = client.get("/api/v1/companies", params={"q": "Nova"}).json()
    assert listed["total"] == 1

    updated = client.put(f"/api/v1/companies/{company_id}", json={"name": "Nova Empresa LTDA"})
    assert updated.json()["name"] == "Nova Empresa LTDA"

    assert client.delete(f"/api/v1/companies/{company_id}").json() == {"ok": True}
    assert client.get(f"/api/v1/companies/{company_id}").status_code == 404


def test_company_holding_equipment_cannot_be_deleted(client):
    response = client.delete("/api/v1/companies/client")
    assert response.status_code == 409


def test_equipment_registration_and_filters(client):
    created = client.post("/api/v1/equipment", json={
        "numero_serie": "SN-100",
        "tipo": "Validador",
        "modelo": "VL-9",
        "company_id": "home",
        "data_entrada": "2024-05-01",
    })
    assert created.status_code == 201
    assert created.json()["status"] == "disponivel"

    duplicate = client.post("/api/v1/equipment", json={
        "numero_serie": "SN-100", "tipo": "Validador", "data_entrada": "2024-05-01",
    })
    assert duplicate.status_code == 409

    bad_company = client.post("/api/v1/equipment", json={
        "numero_serie": "SN-101", "tipo": "Validador", "data_entrada": "2024-05-01", "company_id": "nope",
    })
    assert bad_company.status_code == 400

    at_client = client.get("/api/v1/equipment", params={"company_id": "client"}).json()
    assert [e["numero_serie"] for e in at_client["items"]] == ["SN-004"]

    in_use = client.get("/api/v1/equipment", params={"status": "em_uso"}).json()
    assert in_use["total"] == 1

    by_serial = client.get("/api/v1/equipment/by-serial/SN-100").json()
    assert by_serial["modelo"] == "VL-9"


def test_equipment_patch(client):
    response = client.patch("/api/v1/equipment/E1", json={"estado": "Santa Catarina"})
    assert response.status_code == 200
    assert response.json()["estado"] == "Santa Catarina"
    assert response.json()["status"] == "disponivel"
    assert client.patch("/api/v1/equipment/nope", json={"estado": "SC"}).status_code == 404


def test_maintenance_type_is_categorized_from_code(client):
    response = client.post("/api/v1/maintenance-types", json={"codigo": "dr10", "descricao": "Tela quebrada"})
    assert response.status_code == 201
    assert response.json()["categoria_defeito"] == "defeito_reclamado"

    record_id = response.json()["id"]
    updated = client.put(f"/api/v1/maintenance-types/{record_id}", json={"codigo": "ER10"})
    assert updated.json()["categoria_defeito"] == "defeito_encontrado"

    duplicate = client.post("/api/v1/maintenance-types", json={"codigo": "DR01", "descricao": "x"})
    assert duplicate.status_code == 409


def test_maintenance_type_listing_and_recategorize(client):
    client.put("/api/v1/maintenance-types/OUT1", json={"ativo": False})
    active = client.get("/api/v1/maintenance-types", params={"active_only": True}).json()
    assert "OUT1" not in [i["id"] for i in active["items"]]

    response = client.post("/api/v1/maintenance-types/recategorize")
    assert response.status_code == 200
    assert response.json() == {"changed": 0}


def test_referenced_maintenance_type_cannot_be_deleted(client):
    assert send_to_maintenance(client).status_code == 201
    assert client.delete("/api/v1/maintenance-types/DR01").status_code == 409
    assert client.delete("/api/v1/maintenance-types/DE02").json() == {"ok": True}


def test_equipment_types(client):
    created = client.post("/api/v1/equipment-types", json={"nome": "Catraca"})
    assert created.status_code == 201
    assert client.post("/api/v1/equipment-types", json={"nome": "Catraca"}).status_code == 409
    assert client.get("/api/v1/equipment-types").json()["total"] == 1
    assert client.delete(f"/api/v1/equipment-types/{created.json()['id']}").json() == {"ok": True}


def test_movement_is_recorded_with_responsible_user(client):
    response = send_to_maintenance(client)
    assert response.status_code == 201
    body = response.json()
    assert body["total"] == 1

    movement = client.get(f"/api/v1/movements/{body['movement_ids'][0]}").json()
    assert movement["usuario_responsavel"] == "Maria"
    assert movement["tipo_movimento"] == "envio_manutencao"
    assert movement["defeito_reclamado_id"] == "DR01"
    assert movement["data_movimento"] == "2024-03-01"

    equipment = client.get("/api/v1/equipment/E1").json()
    assert equipment["status"] == "aguardando_manutencao"
    assert equipment["company_id"] == "partner"


def test_movement_defaults_responsible_user(client):
    response = client.post("/api/v1/movements", json={
        "movement_type": "saida",
        "equipment_ids": ["E2"],
        "destination_company_id": "client",
        "movement_date": "2024-03-02",
    })
    assert response.status_code == 201
    listed = client.get("/api/v1/movements", params={"equipment_id": "E2"}).json()
    assert listed["items"][0]["usuario_responsavel"] == "Sistema"


def test_movement_validation_error_names_field(client):
    response = client.post("/api/v1/movements", json={
        "movement_type": "movimentacao",
        "equipment_ids": ["E1"],
        "movement_date": "2024-03-01",
    })
    assert response.status_code == 422
    assert response.json()["field"] == "destination_company_id"
    assert client.get("/api/v1/movements").json()["total"] == 0


def test_movement_for_unknown_equipment(client):
    response = send_to_maintenance(client, equipment_ids=["nope"])
    assert response.status_code == 404


def test_preview_does_not_write(client):
    response = client.post("/api/v1/movements/preview", json={
        "movement_type": "movimentacao",
        "equipment_ids": ["E1", "E2"],
        "destination_company_id": "client",
        "status_override": "manutencao",
        "movement_date": "2024-03-01",
    })
    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 2
    assert body["items"][0]["patch"] == {"status": "em_uso", "company_id": "client"}
    assert client.get("/api/v1/movements").json()["total"] == 0
    assert client.get("/api/v1/equipment/E1").json()["company_id"] == "home"


def test_movement_filters(client):
    send_to_maintenance(client)
    client.post("/api/v1/movements", json={
        "movement_type": "retorno_manutencao",
        "equipment_ids": ["E1"],
        "defect_reported_id": "DR01",
        "movement_date": "2024-03-20",
    })
    everything = client.get("/api/v1/movements", params={"equipment_id": "E1"}).json()
    assert [m["tipo_movimento"] for m in everything["items"]] == ["retorno_manutencao", "envio_manutencao"]

    march_tenth_on = client.get("/api/v1/movements", params={"date_from": "2024-03-10"}).json()
    assert march_tenth_on["total"] == 1
    by_type = client.get("/api/v1/movements", params={"tipo": "envio_manutencao"}).json()
    assert by_type["total"] == 1


def test_reports(client):
    send_to_maintenance(client)

    history = client.get("/api/v1/reports/equipment/E1/history").json()
    assert history["equipment"]["numero_serie"] == "SN-001"
    assert len(history["movements"]) == 1
    assert client.get("/api/v1/reports/equipment/nope/history").status_code == 404

    stock = client.get("/api/v1/reports/stock-status", params={"stock_status": "out"}).json()
    assert [row["numero_serie"] for row in stock] == ["SN-004"]
    assert stock[0]["days_in_stock"] == 22

    distribution = client.get("/api/v1/reports/distribution").json()
    counts = {(row["company_id"], row["status"]): row["total"] for row in distribution}
    assert counts[("home", "disponivel")] == 2
    assert counts[("partner", "aguardando_manutencao")] == 1
    assert counts[("client", "em_uso")] == 1


def test_state_catalog(client):
    created = client.post("/api/v1/states", json={"nome": "Santa Catarina"})
    assert created.status_code == 201
    assert client.post("/api/v1/states", json={"nome": "Santa Catarina"}).status_code == 409

    state_id = created.json()["id"]
    client.post("/api/v1/states", json={"nome": "Bahia"})
    names = [s["nome"] for s in client.get("/api/v1/states").json()["items"]]
    assert names == ["Bahia", "Santa Catarina"]

    deactivated = client.put(f"/api/v1/states/{state_id}", json={"ativo": False})
    assert deactivated.json()["ativo"] is False
    active = client.get("/api/v1/states", params={"active_only": True}).json()
    assert [s["nome"] for s in active["items"]] == ["Bahia"]

    assert client.put(f"/api/v1/states/{state_id}", json={"nome": "Bahia"}).status_code == 409
    assert client.delete(f"/api/v1/states/{state_id}").json() == {"ok": True}
    assert client.delete(f"/api/v1/states/{state_id}").status_code == 404


def test_move_to_second_home_company_keeps_maintenance_status(client):
    response = client.post("/api/v1/movements", json={
        "movement_type": "movimentacao",
        "equipment_ids": ["E4"],
        "destination_company_id": "home-poa",
        "status_override": "manutencao",
        "movement_date": "2024-03-01",
    })
    assert response.status_code == 201
    assert client.get("/api/v1/equipment/E4").json()["status"] == "manutencao"
