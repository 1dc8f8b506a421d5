# tests/test_installments_api.py


def test_mie_rate(client, auth_headers, scenario):
    response = client.get("/api/rate/me", headers=auth_headers("mario@test.it"))

    assert response.status_code == 200
    assert [r["id"] for r in response.json()] == [r.id for r in scenario.contratto_mario.rate]


def test_dettaglio_rata_propria_e_altrui(client, auth_headers, scenario):
    headers = auth_headers("mario@test.it")
    propria = scenario.contratto_mario.rate[0]
    altrui = scenario.contratto_luigi.rate[0]

    response = client.get(f"/api/rate/{propria.id}", headers=headers)
    assert response.status_code == 200
    assert response.json()["pagata_bool"] is False

    assert client.get(f"/api/rate/{altrui.id}", headers=headers).status_code == 403


def test_rate_del_contratto(client, auth_headers, scenario):
    response = client.get(
        f"/api/rate/contratto/{scenario.contratto_luigi.id}", headers=auth_headers("luigi@test.it")
    )
    assert response.status_code == 200
    assert [r["numero_rata"] for r in response.json()] == [1, 2, 3, 4]

    response = client.get(
        f"/api/rate/contratto/{scenario.contratto_luigi.id}", headers=auth_headers("mario@test.it")
    )
    assert response.status_code == 403


def test_lista_rate_solo_gestione(client, auth_headers):
    assert client.get("/api/rate", headers=auth_headers("mario@test.it")).status_code == 403

    response = client.get("/api/rate", headers=auth_headers("admin@test.it"))
    assert response.status_code == 200
    assert len(response.json()) == 8


def test_segna_pagata(client, auth_headers, scenario):
    rata = scenario.contratto_mario.rate[0]

    response = client.put(f"/api/rate/{rata.id}/pagata", params={"pagata": "s"},
                          headers=auth_headers("manager@test.it"))

    assert response.status_code == 200
    assert response.json()["pagata"] == "S"
    assert response.json()["pagata_bool"] is True


def test_segna_pagata_valore_non_valido(client, auth_headers, scenario):
    rata = scenario.contratto_mario.rate[0]

    response = client.put(f"/api/rate/{rata.id}/pagata", params={"pagata": "X"},
                          headers=auth_headers("manager@test.it"))

    assert response.status_code == 400
    assert response.json()["error"] == "Validation Error"
    assert "pagata" in response.json()["errors"]


def test_segna_pagata_senza_parametro(client, auth_headers, scenario):
    rata = scenario.contratto_mario.rate[0]

    response = client.put(f"/api/rate/{rata.id}/pagata", headers=auth_headers("manager@test.it"))

    assert response.status_code == 400
    assert "pagata" in response.json()["errors"]


def test_segna_pagata_rata_inesistente(client, auth_headers):
    response = client.put("/api/rate/999/pagata", params={"pagata": "S"}, headers=auth_headers("admin@test.it"))

    assert response.status_code == 404
    assert response.json()["message"] == "Rata non trovato con id: 999"


def test_locatario_non_puo_segnare_pagata(client, auth_headers, scenario):
    rata = scenario.contratto_mario.rate[0]

    response = client.put(f"/api/rate/{rata.id}/pagata", params={"pagata": "S"},
                          headers=auth_headers("mario@test.it"))
    assert response.status_code == 403


def test_non_pagate_e_scadute(client, auth_headers, scenario):
    headers = auth_headers("manager@test.it")

    assert len(client.get("/api/rate/non-pagate", headers=headers).json()) == 8

    # al 2024-06-01 sono scadute le rate del 15 gennaio e del 15 aprile di ogni contratto
    scadute = client.get("/api/rate/scadute", headers=headers).json()
    assert len(scadute) == 4
    assert {r["data_scadenza"] for r in scadute} == {"2024-01-15", "2024-04-15"}

    client.put(f"/api/rate/{scenario.contratto_mario.rate[0].id}/pagata", params={"pagata": "S"}, headers=headers)
    assert len(client.get("/api/rate/scadute", headers=headers).json()) == 3
