"""Default doctor seeding."""

from app.seed import DEFAULT_EMAIL, DEFAULT_PASSWORD, seed_default_user


def test_seed_creates_default_doctor_once(client):
    assert client.portal.call(seed_default_user) is True
    assert client.portal.call(seed_default_user) is False

    login = client.post("/api/auth/login", json={"email": DEFAULT_EMAIL, "password": DEFAULT_PASSWORD})

    assert login.status_code == 200
    assert login.json()["user"]["first_name"] == "John"
    assert login.json()["user"]["last_name"] == "Smith"


def test_seed_skips_populated_database(client, doctor):
    assert client.portal.call(seed_default_user) is False
