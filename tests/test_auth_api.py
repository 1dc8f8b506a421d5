# tests/test_auth_api.py

from datetime import timedelta

from common.error_mapper import MSG_CREDENZIALI, MSG_LOGIN_RICHIESTO
from conftest import PASSWORD


def test_login_ok(client, token_service):
    response = client.post("/api/auth/login", json={"email": "mario@test.it", "password": PASSWORD})

    assert response.status_code == 200
    data = response.json()
    assert data["type"] == "Bearer"
    assert data["email"] == "mario@test.it"
    assert data["ruoli"] == ["ROLE_LOCATARIO"]
    assert token_service.validate(data["token"], "mario@test.it")


def test_login_password_errata(client):
    response = client.post("/api/auth/login", json={"email": "mario@test.it", "password": "sbagliata"})

    assert response.status_code == 401
    assert response.json()["message"] == MSG_CREDENZIALI
    assert response.headers["www-authenticate"] == "Bearer"


def test_login_utente_inesistente(client):
    response = client.post("/api/auth/login", json={"email": "nessuno@test.it", "password": PASSWORD})

    assert response.status_code == 401
    assert response.json()["message"] == MSG_CREDENZIALI


def test_login_utente_disabilitato(client, db, scenario):
    db.utenti[scenario.mario.id].abilitato = False

    response = client.post("/api/auth/login", json={"email": "mario@test.it", "password": PASSWORD})
    assert response.status_code == 401


def test_registrazione(client, db):
    response = client.post("/api/auth/register", json={
        "email": "nuovo@test.it",
        "password": "segreta1",
        "nome": "Nuovo",
        "cognome": "Utente",
    })

    assert response.status_code == 201
    data = response.json()
    assert data["ruoli"] == ["ROLE_LOCATARIO"]
    assert db.utente_per_email("nuovo@test.it").password_hash != "segreta1"


def test_registrazione_email_duplicata(client):
    response = client.post("/api/auth/register", json={
        "email": "MARIO@test.it",
        "password": "segreta1",
        "nome": "Mario",
        "cognome": "Bis",
    })

    assert response.status_code == 400
    assert response.json()["error"] == "Business Error"
    assert response.json()["message"] == "Email già registrata"


def test_registrazione_password_corta(client):
    response = client.post("/api/auth/register", json={
        "email": "corta@test.it",
        "password": "abc",
        "nome": "Corta",
        "cognome": "Password",
    })

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Validation Error"
    assert "password" in body["errors"]


def test_me(client, auth_headers):
    response = client.get("/api/auth/me", headers=auth_headers("manager@test.it"))

    assert response.status_code == 200
    assert response.json()["email"] == "manager@test.it"
    assert response.json()["ruoli"] == ["ROLE_MANAGER"]


def test_me_senza_token(client):
    response = client.get("/api/auth/me")

    assert response.status_code == 401
    assert response.json()["message"] == MSG_LOGIN_RICHIESTO
    assert response.json()["path"] == "/api/auth/me"


def test_token_malformato_equivale_a_nessuna_identita(client):
    response = client.get("/api/auth/me", headers={"Authorization": "Bearer non-un-token"})
    assert response.status_code == 401


def test_header_senza_schema_bearer(client, token_service):
    token = token_service.issue("mario@test.it")
    response = client.get("/api/auth/me", headers={"Authorization": token})
    assert response.status_code == 401


def test_token_scaduto(client, auth_headers, orologio):
    headers = auth_headers("mario@test.it")
    orologio.avanza(timedelta(hours=25))

    assert client.get("/api/auth/me", headers=headers).status_code == 401


def test_token_di_utente_disabilitato(client, auth_headers, db, scenario):
    headers = auth_headers("mario@test.it")
    db.utenti[scenario.mario.id].abilitato = False

    assert client.get("/api/auth/me", headers=headers).status_code == 401


def test_health_pubblico(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_rotta_inesistente(client):
    response = client.get("/api/non-esiste")

    assert response.status_code == 404
    assert response.json()["error"] == "Not Found"
