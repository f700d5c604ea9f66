from datetime import UTC, datetime, timedelta

import pytest

from tests.conftest import ADMIN_NAME, ADMIN_PASSWORD, ADMIN_USERNAME

AUTH_REQUIRED = {"status": "error", "message": "Authentication required"}


def test_login_returns_token_and_user(client, admin_id):
    response = client.post(
        "/api/auth/login",
        json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "success"
    assert body["message"] == "Login successful"
    assert body["data"]["token"]
    user = body["data"]["user"]
    assert user["id"] == admin_id
    assert user["username"] == ADMIN_USERNAME
    assert user["name"] == ADMIN_NAME
    assert "password_hash" not in user
    assert "password" not in user


def test_login_token_opens_protected_routes(client):
    token = client.post(
        "/api/auth/login",
        json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD},
    ).json()["data"]["token"]

    response = client.get("/api/tasks", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200


@pytest.mark.parametrize(
    "username, password",
    [(ADMIN_USERNAME, "wrong-password"), ("nobody", ADMIN_PASSWORD)],
)
def test_bad_credentials_look_the_same(client, username, password):
    response = client.post(
        "/api/auth/login", json={"username": username, "password": password}
    )

    assert response.status_code == 401
    assert response.json() == {"status": "error", "message": "Invalid credentials"}


@pytest.mark.parametrize(
    "payload, message",
    [
        ({"username": "", "password": "x"}, "Username is required"),
        ({"username": "admin", "password": "  "}, "Password is required"),
    ],
)
def test_blank_credentials_are_rejected(client, payload, message):
    response = client.post("/api/auth/login", json=payload)

    assert response.status_code == 400
    assert response.json() == {"status": "error", "message": message}


def test_logout_requires_and_accepts_token(client, auth_headers):
    response = client.post("/api/auth/logout", headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {
        "status": "success",
        "message": "Successfully logout from the system",
        "data": True,
    }
    assert client.post("/api/auth/logout").status_code == 401


def test_me_returns_current_user(client, auth_headers, admin_id):
    response = client.get("/api/auth/me", headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Successfully retrieved user data"
    assert body["data"]["id"] == admin_id
    assert body["data"]["username"] == ADMIN_USERNAME


def test_me_for_deleted_account_is_null(client, app):
    token = app.state.token_service.issue(9999, "ghost", "Ghost")

    response = client.get(
        "/api/auth/me", headers={"Authorization": f"Bearer {token}"}
    )

    assert response.status_code == 200
    assert response.json()["data"] is None


def _expired_token(app, admin_id):
    issued = datetime.now(UTC) - timedelta(days=2)
    return app.state.token_service.issue(
        admin_id, ADMIN_USERNAME, ADMIN_NAME, now=issued
    )


@pytest.mark.parametrize(
    "header_for",
    [
        lambda app, admin_id: None,
        lambda app, admin_id: "Basic YWRtaW46YWRtaW4xMjM=",
        lambda app, admin_id: "Bearer",
        lambda app, admin_id: "Bearer not.a.jwt",
        lambda app, admin_id: f"Bearer {_expired_token(app, admin_id)}",
    ],
    ids=["missing", "wrong-scheme", "empty-bearer", "garbage", "expired"],
)
def test_every_rejection_is_the_same_401(client, app, admin_id, header_for):
    header = header_for(app, admin_id)
    headers = {"Authorization": header} if header is not None else {}

    response = client.get("/api/auth/me", headers=headers)

    assert response.status_code == 401
    assert response.json() == AUTH_REQUIRED
    assert response.headers["WWW-Authenticate"] == "Bearer"
