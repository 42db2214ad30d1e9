"""Bearer-token gate in front of every protected route."""

import pytest

import app.main as main_module
from app.core.security import create_access_token, create_oauth_state
from conftest import create_patient, register


PROTECTED_REQUESTS = [
    ("GET", "/api/patients"),
    ("POST", "/api/patients"),
    ("GET", "/api/patients/65f1c0ffee0000000000abcd"),
    ("GET", "/api/patients/65f1c0ffee0000000000abcd/prescriptions"),
    ("GET", "/api/appointments"),
    ("PUT", "/api/appointments/65f1c0ffee0000000000abcd"),
    ("GET", "/api/medical-records"),
    ("DELETE", "/api/medical-records/65f1c0ffee0000000000abcd"),
    ("GET", "/api/prescriptions"),
    ("PATCH", "/api/prescriptions/65f1c0ffee0000000000abcd"),
    ("GET", "/api/dashboard"),
    ("GET", "/api/calendar/export"),
    ("POST", "/api/calendar/sync"),
    ("GET", "/api/auth/me"),
    ("POST", "/api/auth/change-password"),
    ("GET", "/api/auth/google/calendar"),
]


@pytest.mark.parametrize("method,path", PROTECTED_REQUESTS)
def test_protected_route_without_token(client, method, path):
    response = client.request(method, path)

    assert response.status_code == 401
    assert response.json()["detail"] == "Unauthorized - No token provided"
    assert response.headers["www-authenticate"] == "Bearer"


@pytest.mark.parametrize("method,path", PROTECTED_REQUESTS)
def test_protected_route_with_invalid_token(client, method, path):
    response = client.request(method, path, headers={"Authorization": "Bearer not-a-token"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Unauthorized - Invalid token"


def test_token_for_deleted_or_unknown_user(client):
    token = create_access_token({"sub": "65f1c0ffee0000000000abcd"})

    response = client.get("/api/patients", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Unauthorized - User not found"


def test_non_bearer_scheme_is_rejected(client, doctor):
    token = doctor["Authorization"].split(" ", 1)[1]

    response = client.get("/api/patients", headers={"Authorization": f"Basic {token}"})

    assert response.status_code == 401


def test_oauth_state_cannot_be_used_as_bearer_token(client, doctor):
    me = client.get("/api/auth/me", headers=doctor).json()
    state = create_oauth_state(me["id"])

    response = client.get("/api/patients", headers={"Authorization": f"Bearer {state}"})

    assert response.status_code == 401


def test_public_routes_skip_the_gate(client):
    assert client.post("/api/auth/login", json={}).status_code == 400
    assert client.get("/api/auth/google/callback").status_code == 400


def test_client_supplied_user_id_header_is_replaced(client, doctor, other_doctor):
    create_patient(client, other_doctor, first_name="Other")
    other_id = client.get("/api/auth/me", headers=other_doctor).json()["id"]

    response = client.get("/api/patients", headers={**doctor, "X-User-ID": other_id})

    assert response.status_code == 200
    assert response.json() == []


def test_dev_user_bypass(client, monkeypatch):
    register(client, "dev@x.com")
    monkeypatch.setattr(main_module.authenticator, "dev_user_email", "dev@x.com")

    response = client.get("/api/auth/me")

    assert response.status_code == 200
    assert response.json()["email"] == "dev@x.com"


def test_dev_user_bypass_with_unknown_user(client, monkeypatch):
    monkeypatch.setattr(main_module.authenticator, "dev_user_email", "ghost@x.com")

    response = client.get("/api/auth/me")

    assert response.status_code == 401


def test_dev_user_bypass_still_checks_supplied_tokens(client, monkeypatch):
    register(client, "dev@x.com")
    monkeypatch.setattr(main_module.authenticator, "dev_user_email", "dev@x.com")

    response = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-token"})

    assert response.status_code == 401
