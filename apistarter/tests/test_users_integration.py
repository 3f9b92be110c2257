from __future__ import annotations

import jwt as pyjwt
import pytest
from flask.testing import FlaskClient

from apistarter.app import create_app
from apistarter.shared.config import AppConfig, SecurityConfig

REGISTER_URL = "/api/v1/users/register"
LOGIN_URL = "/api/v1/users/login"


def _register(client: FlaskClient, email: str = "a@example.com", name: str = "A"):
    return client.post(REGISTER_URL, json={"name": name, "email": email, "password": "password123"})


def _auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def test_register_then_duplicate(client: FlaskClient) -> None:
    first = _register(client)

    assert first.status_code == 201
    payload = first.get_json()
    assert payload["message"] == "User registered successfully"
    assert payload["data"]["user"]["email"] == "a@example.com"
    assert set(payload["data"]["user"]) == {"id", "name", "email"}
    assert isinstance(payload["data"]["token"], str) and payload["data"]["token"]

    second = _register(client)

    assert second.status_code == 409
    assert second.get_json()["status"] == "error"
    assert "Email already in use" in second.get_json()["message"]


def test_login_token_identifies_registered_user(client: FlaskClient, config: AppConfig) -> None:
    user_id = _register(client).get_json()["data"]["user"]["id"]

    response = client.post(LOGIN_URL, json={"email": "a@example.com", "password": "password123"})

    assert response.status_code == 200
    payload = response.get_json()
    assert payload["message"] == "Login successful"
    assert payload["data"]["user"] == {"id": user_id, "name": "A", "email": "a@example.com"}
    claims = pyjwt.decode(payload["data"]["token"], config.jwt.secret, algorithms=["HS256"])
    assert claims["id"] == user_id
    assert claims["exp"] - claims["iat"] == 3600


@pytest.mark.parametrize(
    "body",
    [
        {"email": "a@example.com", "password": "wrong-password"},
        {"email": "unknown@example.com", "password": "password123"},
    ],
)
def test_bad_credentials_are_indistinguishable(client: FlaskClient, body: dict) -> None:
    _register(client)

    response = client.post(LOGIN_URL, json=body)

    assert response.status_code == 401
    assert response.get_json() == {
        "status": "error",
        "statusCode": 401,
        "message": "Invalid credentials",
    }


@pytest.mark.parametrize(
    ("url", "body"),
    [
        (REGISTER_URL, {"email": "a@example.com", "password": "password123"}),
        (REGISTER_URL, {"name": "A", "email": "nope", "password": "password123"}),
        (REGISTER_URL, {"name": "A", "email": "a@example.com"}),
        (LOGIN_URL, {"password": "password123"}),
        (LOGIN_URL, {"email": "not-an-email", "password": "password123"}),
    ],
)
def test_schema_violations_return_400(client: FlaskClient, url: str, body: dict) -> None:
    response = client.post(url, json=body)

    assert response.status_code == 400
    assert response.get_json()["message"].startswith("body: ")


@pytest.mark.parametrize("url", [REGISTER_URL, LOGIN_URL])
def test_non_json_body_returns_400(client: FlaskClient, url: str) -> None:
    response = client.post(url, data="not json", content_type="text/plain")

    assert response.status_code == 400
    assert response.get_json()["message"].startswith("body: ")


def test_password_is_never_returned_or_logged(client: FlaskClient, log_records) -> None:
    response = _register(client, email="secret@example.com")

    assert "password" not in response.get_data(as_text=True)
    assert all("password123" not in record["message"] for record in log_records)


def test_user_management_flow(client: FlaskClient) -> None:
    alice = _register(client, email="alice@example.com", name="Alice").get_json()["data"]
    bob = _register(client, email="bob@example.com", name="Bob").get_json()["data"]
    alice_id, token = alice["user"]["id"], alice["token"]

    me = client.get("/api/v1/users/me", headers=_auth(token))
    assert me.status_code == 200
    assert me.get_json()["data"]["user"]["email"] == "alice@example.com"

    listing = client.get("/api/v1/users?limit=1&skip=0", headers=_auth(token))
    assert listing.status_code == 200
    data = listing.get_json()["data"]
    assert data["total"] == 2
    assert len(data["users"]) == 1
    assert (data["limit"], data["skip"]) == (1, 0)

    fetched = client.get(f"/api/v1/users/{bob['user']['id']}", headers=_auth(token))
    assert fetched.get_json()["data"]["user"]["name"] == "Bob"

    missing = client.get("/api/v1/users/999", headers=_auth(token))
    assert missing.status_code == 404
    assert missing.get_json()["message"] == "User not found"

    taken = client.patch(
        f"/api/v1/users/{alice_id}", json={"email": "bob@example.com"}, headers=_auth(token)
    )
    assert taken.status_code == 409

    updated = client.patch(
        f"/api/v1/users/{alice_id}",
        json={"name": "Alicia", "password": "new-password-1"},
        headers=_auth(token),
    )
    assert updated.status_code == 200
    assert updated.get_json()["data"]["user"]["name"] == "Alicia"

    relogin = client.post(
        LOGIN_URL, json={"email": "alice@example.com", "password": "new-password-1"}
    )
    assert relogin.status_code == 200

    empty = client.patch(f"/api/v1/users/{alice_id}", json={}, headers=_auth(token))
    assert empty.status_code == 400

    deleted = client.delete(f"/api/v1/users/{alice_id}", headers=_auth(token))
    assert deleted.status_code == 200
    assert deleted.get_json() == {"message": "User deleted successfully"}

    gone = client.get("/api/v1/users/me", headers=_auth(token))
    assert gone.status_code == 404


def test_expired_token_is_rejected(client: FlaskClient, config: AppConfig) -> None:
    user_id = _register(client).get_json()["data"]["user"]["id"]
    expired = pyjwt.encode({"id": user_id, "iat": 1, "exp": 2}, config.jwt.secret, algorithm="HS256")

    response = client.get("/api/v1/users/me", headers=_auth(expired))

    assert response.status_code == 401
    assert response.get_json()["message"] == "Invalid token"


def test_responses_carry_request_id(client: FlaskClient) -> None:
    ok = client.get("/api/v1/health/live")
    failed = client.post(LOGIN_URL, json={})

    assert ok.headers.get("X-Request-ID")
    assert failed.headers.get("X-Request-ID")


def test_register_rate_limit(config_factory) -> None:
    config = config_factory(
        security=SecurityConfig(ENABLE_RATE_LIMIT=True, AUTH_RL_LIMIT=2, AUTH_RL_WINDOW=60),
    )
    client = create_app(config).test_client()

    statuses = [
        _register(client, email=f"user{index}@example.com").status_code for index in range(3)
    ]

    assert statuses == [201, 201, 429]


def test_login_limit_ignores_forwarded_for_without_trusted_proxy(config_factory) -> None:
    config = config_factory(
        security=SecurityConfig(ENABLE_RATE_LIMIT=True, AUTH_RL_LIMIT=2, AUTH_RL_WINDOW=60),
    )
    client = create_app(config).test_client()

    statuses = [
        client.post(
            LOGIN_URL,
            json={"email": "a@example.com", "password": f"guess-{i}-password"},
            headers={"X-Forwarded-For": f"203.0.113.{i}"},
        ).status_code
        for i in range(5)
    ]

    assert statuses == [401, 401, 429, 429, 429]


def test_trusted_proxy_hop_identifies_clients(config_factory) -> None:
    config = config_factory(
        security=SecurityConfig(
            ENABLE_RATE_LIMIT=True, AUTH_RL_LIMIT=1, AUTH_RL_WINDOW=60, TRUSTED_PROXY_HOPS=1
        ),
    )
    client = create_app(config).test_client()

    def attempt(forwarded_for: str) -> int:
        return client.post(
            LOGIN_URL,
            json={"email": "a@example.com", "password": "password123"},
            headers={"X-Forwarded-For": forwarded_for},
        ).status_code

    assert attempt("198.51.100.1") == 401
    assert attempt("198.51.100.2") == 401
    assert attempt("198.51.100.1") == 429
    # Only the hop appended by the trusted proxy counts.
    assert attempt("198.51.100.7, 198.51.100.2") == 429


def test_general_limit_covers_all_routes(config_factory) -> None:
    config = config_factory(
        security=SecurityConfig(ENABLE_RATE_LIMIT=True, GENERAL_RL_LIMIT=3, GENERAL_RL_WINDOW=60),
    )
    client = create_app(config).test_client()

    statuses = [client.get("/api/v1/health/live").status_code for _ in range(4)]
    blocked = client.get("/api/v1/health/live")

    assert statuses == [200, 200, 200, 429]
    assert blocked.get_json()["message"] == "Too many requests from this IP, please try again later."
    assert blocked.headers.get("X-Request-ID")


def test_unknown_route_uses_status_phrase(client: FlaskClient) -> None:
    response = client.get("/api/v1/nowhere")

    assert response.status_code == 404
    assert response.get_json() == {"status": "error", "statusCode": 404, "message": "Not Found"}
