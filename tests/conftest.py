"""Shared fixtures: an in-memory MongoDB per test and helpers for common API calls."""

import os
import uuid

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.pop("AUTH_DEV_USER_EMAIL", None)

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

import app.database as database_module
from app.config import settings
from app.main import app


@pytest.fixture(autouse=True)
def mock_mongo(monkeypatch):
    """Point the app at a fresh in-memory database."""
    monkeypatch.setattr(database_module, "AsyncIOMotorClient", AsyncMongoMockClient)
    monkeypatch.setattr(settings, "DATABASE_NAME", f"clinic_test_{uuid.uuid4().hex}")


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


def register(client, email, password="secret123", first_name="Jane", last_name="Doe"):
    """Register a doctor and return their auth headers."""
    response = client.post("/api/auth/register", json={
        "email": email,
        "password": password,
        "first_name": first_name,
        "last_name": last_name,
    })
    assert response.status_code == 201, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


def create_patient(client, headers, **overrides):
    payload = {
        "first_name": "Peter",
        "last_name": "Parker",
        "date_of_birth": "1990-05-15T00:00:00.000Z",
        "gender": "Male",
        "contact_number": "555-0100",
        "email": "peter@example.com",
        "address": "20 Ingram Street",
        "blood_type": "O+",
        "allergies": "Penicillin",
    }
    payload.update(overrides)
    response = client.post("/api/patients", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def create_appointment(client, headers, patient_id, **overrides):
    payload = {
        "patient_id": patient_id,
        "appointment_date": "2030-01-10T09:30:00.000Z",
        "notes": "Annual checkup",
    }
    payload.update(overrides)
    response = client.post("/api/appointments", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def doctor(client):
    return register(client, "a@x.com")


@pytest.fixture
def other_doctor(client):
    return register(client, "b@x.com", first_name="Bruce", last_name="Banner")
