"""Registration, login and profile endpoints."""

from conftest import register


def test_register_returns_user_and_token(client):
    response = client.post("/api/auth/register", json={
        "email": "a@x.com",
        "password": "secret123",
        "first_name": "Jane",
        "last_name": "Doe",
    })

    assert response.status_code == 201
    body = response.json()
    assert body["token"]
    assert body["user"]["email"] == "a@x.com"
    assert body["user"]["role"] == "DOCTOR"
    assert body["user"]["calendar_connected"] is False
    assert "password_hash" not in body["user"]


def test_register_duplicate_email(client):
    register(client, "a@x.com")

    response = client.post("/api/auth/register", json={
        "email": "a@x.com",
        "password": "another1",
        "first_name": "Jane",
        "last_name": "Doe",
    })

    assert response.status_code == 400
    assert response.json()["detail"] == "User with this email already exists"


def test_register_short_password_is_bad_request(client):
    response = client.post("/api/auth/register", json={
        "email": "a@x.com",
        "password": "123",
        "first_name": "Jane",
        "last_name": "Doe",
    })

    assert response.status_code == 400
    assert "password" in response.json()["detail"]


def test_register_missing_field_is_bad_request(client):
    response = client.post("/api/auth/register", json={"email": "a@x.com", "password": "secret123"})

    assert response.status_code == 400
    assert "first_name" in response.json()["detail"]


def test_login(client):
    register(client, "a@x.com")

    response = client.post("/api/auth/login", json={"email": "a@x.com", "password": "secret123"})

    assert response.status_code == 200
    assert response.json()["user"]["email"] == "a@x.com"
    assert response.json()["token"]


def test_login_wrong_password(client):
    register(client, "a@x.com")

    response = client.post("/api/auth/login", json={"email": "a@x.com", "password": "wrong-pass"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid email or password"


def test_login_unknown_email(client):
    response = client.post("/api/auth/login", json={"email": "nobody@x.com", "password": "secret123"})

    assert response.status_code == 401


def test_me_and_profile_update(client, doctor):
    me = client.get("/api/auth/me", headers=doctor)
    assert me.status_code == 200
    assert me.json()["first_name"] == "Jane"

    updated = client.put("/api/auth/me", json={"last_name": "Foster"}, headers=doctor)
    assert updated.status_code == 200
    assert updated.json()["first_name"] == "Jane"
    assert updated.json()["last_name"] == "Foster"


def test_change_password(client, doctor):
    response = client.post("/api/auth/change-password", json={
        "current_password": "secret123",
        "new_password": "newsecret1",
    }, headers=doctor)
    assert response.status_code == 200

    old_login = client.post("/api/auth/login", json={"email": "a@x.com", "password": "secret123"})
    new_login = client.post("/api/auth/login", json={"email": "a@x.com", "password": "newsecret1"})
    assert old_login.status_code == 401
    assert new_login.status_code == 200


def test_change_password_wrong_current(client, doctor):
    response = client.post("/api/auth/change-password", json={
        "current_password": "not-it",
        "new_password": "newsecret1",
    }, headers=doctor)

    assert response.status_code == 400
    assert response.json()["detail"] == "Current password is incorrect"


def test_root_and_health_are_public(client):
    assert client.get("/").status_code == 200
    health = client.get("/health")
    assert health.status_code == 200
    assert health.json()["status"] == "healthy"
