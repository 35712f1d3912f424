from fastapi.testclient import TestClient
from requests.exceptions import ConnectionError

from conftest import PARENT_USER_ID, FakeHTTPSession, FakeResponse, auth_headers
from harakapay.clients.supabase import SupabaseClient
from harakapay.clients.web_api import WebApiError
from harakapay.dependencies.remote import get_supabase_client, get_web_api_factory
from harakapay.main import app

client = TestClient(app)

SESSION_PAYLOAD = {
    "access_token": "at-123",
    "refresh_token": "rt-456",
    "expires_at": 1760000000,
    "user": {"id": PARENT_USER_ID, "email": "amani@example.com"},
}


def _backend_responding(*responses):
    session = FakeHTTPSession(*responses)
    app.dependency_overrides[get_supabase_client] = lambda: SupabaseClient(
        "https://demo.supabase.co", "anon-key", session=session
    )
    return session


class FakeProfileApi:
    def __init__(self, error=None):
        self.error = error
        self.profiles = []
        self.tokens = []

    def __call__(self, access_token):
        self.tokens.append(access_token)
        return self

    def create_parent_profile(self, profile):
        if self.error:
            raise self.error
        self.profiles.append(profile)
        return {"id": "parent-1", **profile}


def test_login_returns_backend_session():
    session = _backend_responding(
        FakeResponse(
            200,
            {
                "access_token": "at-123",
                "refresh_token": "rt-456",
                "expires_at": 1760000000,
                "user": {"id": PARENT_USER_ID, "email": "amani@example.com"},
            },
        )
    )
    try:
        resp = client.post("/auth/login", json={"email": "amani@example.com", "password": "secret"})
    finally:
        app.dependency_overrides.clear()
    assert resp.status_code == 200
    data = resp.json()
    assert data["access_token"] == "at-123"
    assert data["refresh_token"] == "rt-456"
    assert data["token_type"] == "bearer"
    assert data["user_id"] == PARENT_USER_ID
    assert session.calls[0].json == {"email": "amani@example.com", "password": "secret"}


def test_login_with_wrong_password():
    _backend_responding(FakeResponse(400, {"error": "invalid_grant", "error_description": "Invalid login credentials"}))
    try:
        resp = client.post("/auth/login", json={"email": "amani@example.com", "password": "wrong"})
    finally:
        app.dependency_overrides.clear()
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Invalid credentials"


def test_login_requires_valid_email():
    resp = client.post("/auth/login", json={"email": "not-an-email", "password": "x"})
    assert resp.status_code == 422


def test_me_returns_token_claims():
    resp = client.get("/auth/me", headers=auth_headers())
    assert resp.status_code == 200
    assert resp.json() == {"id": PARENT_USER_ID, "email": "amani@example.com"}


def test_me_rejects_missing_or_malformed_header():
    assert client.get("/auth/me").status_code == 401
    assert client.get("/auth/me", headers={"Authorization": "Token abc"}).status_code == 401
    assert client.get("/auth/me", headers={"Authorization": "Bearer abc.def.ghi"}).status_code == 401


def test_login_network_failure_is_bad_gateway():
    _backend_responding(ConnectionError("connection refused"))
    try:
        resp = client.post("/auth/login", json={"email": "amani@example.com", "password": "secret"})
    finally:
        app.dependency_overrides.clear()
    assert resp.status_code == 502


def test_login_server_error_is_bad_gateway():
    _backend_responding(FakeResponse(500, {"code": "unexpected_failure", "msg": "Database error"}))
    try:
        resp = client.post("/auth/login", json={"email": "amani@example.com", "password": "secret"})
    finally:
        app.dependency_overrides.clear()
    assert resp.status_code == 502


def test_login_with_pin_sends_backend_password():
    session = _backend_responding(FakeResponse(200, SESSION_PAYLOAD))
    try:
        resp = client.post("/auth/login", json={"email": "Amani@Example.com", "password": "123456"})
    finally:
        app.dependency_overrides.clear()
    assert resp.status_code == 200
    assert session.calls[0].json == {"email": "amani@example.com", "password": "HP123456@Sec"}


def test_refresh_returns_new_session():
    session = _backend_responding(FakeResponse(200, {**SESSION_PAYLOAD, "access_token": "at-789"}))
    try:
        resp = client.post("/auth/refresh", json={"refresh_token": "rt-456"})
    finally:
        app.dependency_overrides.clear()
    assert resp.status_code == 200
    assert resp.json()["access_token"] == "at-789"
    assert session.calls[0].params == {"grant_type": "refresh_token"}
    assert session.calls[0].json == {"refresh_token": "rt-456"}


def test_refresh_with_revoked_token():
    _backend_responding(FakeResponse(400, {"error": "invalid_grant", "error_description": "Invalid Refresh Token"}))
    try:
        resp = client.post("/auth/refresh", json={"refresh_token": "rt-old"})
    finally:
        app.dependency_overrides.clear()
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Session expired - please log in again"


def test_register_creates_account_and_profile():
    session = _backend_responding(FakeResponse(200, SESSION_PAYLOAD))
    profiles = FakeProfileApi()
    app.dependency_overrides[get_web_api_factory] = lambda: profiles
    try:
        resp = client.post(
            "/auth/register",
            json={
                "first_name": " Amani ",
                "last_name": "Kabila",
                "phone": "081 234 5678",
                "email": "Amani@Example.com",
                "pin": "123456",
            },
        )
    finally:
        app.dependency_overrides.clear()
    assert resp.status_code == 201
    data = resp.json()
    assert data["user_id"] == PARENT_USER_ID
    assert data["phone"] == "+243812345678"
    assert data["confirmation_required"] is False
    assert data["profile_created"] is True
    assert data["session"]["access_token"] == "at-123"
    assert session.calls[0].json == {
        "email": "amani@example.com",
        "password": "HP123456@Sec",
        "data": {"first_name": "Amani", "last_name": "Kabila", "phone": "+243812345678"},
    }
    assert profiles.tokens == ["at-123"]
    assert profiles.profiles[0]["user_id"] == PARENT_USER_ID
    assert profiles.profiles[0]["phone"] == "+243812345678"


def test_register_without_email_uses_phone_address():
    session = _backend_responding(FakeResponse(200, {"id": PARENT_USER_ID, "email": "243812345678@harakapay.app"}))
    app.dependency_overrides[get_web_api_factory] = lambda: FakeProfileApi()
    try:
        resp = client.post(
            "/auth/register",
            json={"first_name": "Amani", "last_name": "Kabila", "phone": "+243812345678", "pin": "123456"},
        )
    finally:
        app.dependency_overrides.clear()
    assert resp.status_code == 201
    data = resp.json()
    assert data["email"] == "243812345678@harakapay.app"
    assert data["confirmation_required"] is True
    assert data["session"] is None
    assert session.calls[0].json["email"] == "243812345678@harakapay.app"


def test_register_keeps_account_when_profile_fails():
    _backend_responding(FakeResponse(200, SESSION_PAYLOAD))
    app.dependency_overrides[get_web_api_factory] = lambda: FakeProfileApi(error=WebApiError("boom", status_code=500))
    try:
        resp = client.post(
            "/auth/register",
            json={"first_name": "Amani", "last_name": "Kabila", "phone": "0812345678", "pin": "123456"},
        )
    finally:
        app.dependency_overrides.clear()
    assert resp.status_code == 201
    assert resp.json()["profile_created"] is False
    assert resp.json()["session"]["access_token"] == "at-123"


def test_register_rejects_short_phone():
    session = _backend_responding()
    app.dependency_overrides[get_web_api_factory] = lambda: FakeProfileApi()
    try:
        resp = client.post(
            "/auth/register",
            json={"first_name": "Amani", "last_name": "Kabila", "phone": "08123", "pin": "123456"},
            headers={"Accept-Language": "en"},
        )
    finally:
        app.dependency_overrides.clear()
    assert resp.status_code == 422
    assert resp.json()["detail"] == {"code": "invalid_phone", "message": "The number must contain exactly 9 digits."}
    assert session.calls == []


def test_register_rejects_non_numeric_pin():
    resp = client.post(
        "/auth/register",
        json={"first_name": "Amani", "last_name": "Kabila", "phone": "0812345678", "pin": "12a456"},
    )
    assert resp.status_code == 422


def test_register_existing_account():
    _backend_responding(FakeResponse(422, {"code": 422, "error_code": "user_already_exists", "msg": "User already registered"}))
    app.dependency_overrides[get_web_api_factory] = lambda: FakeProfileApi()
    try:
        resp = client.post(
            "/auth/register",
            json={"first_name": "Amani", "last_name": "Kabila", "phone": "0812345678", "pin": "123456"},
        )
    finally:
        app.dependency_overrides.clear()
    assert resp.status_code == 409


def test_forgot_password_sends_reset_link():
    session = _backend_responding(FakeResponse(200, {}))
    try:
        resp = client.post(
            "/auth/password/forgot",
            json={"email": "Amani@Example.com"},
            headers={"Accept-Language": "en"},
        )
    finally:
        app.dependency_overrides.clear()
    assert resp.status_code == 202
    assert resp.json() == {"detail": "A password reset email has been sent."}
    call = session.calls[0]
    assert call.url == "https://demo.supabase.co/auth/v1/recover"
    assert call.params == {"redirect_to": "harakapay://reset-password"}
    assert call.json == {"email": "amani@example.com"}


def test_reset_password_updates_user():
    session = _backend_responding(FakeResponse(200, {"id": PARENT_USER_ID}))
    try:
        resp = client.post(
            "/auth/password/reset",
            json={"password": "654321", "confirm_password": "654321"},
            headers=auth_headers(**{"Accept-Language": "en"}),
        )
    finally:
        app.dependency_overrides.clear()
    assert resp.status_code == 200
    assert resp.json() == {"detail": "Your password has been updated."}
    call = session.calls[0]
    assert call.method == "PUT"
    assert call.url == "https://demo.supabase.co/auth/v1/user"
    assert call.json == {"password": "HP654321@Sec"}
    assert call.headers["Authorization"].startswith("Bearer ")


def test_reset_password_mismatch():
    resp = client.post(
        "/auth/password/reset",
        json={"password": "654321", "confirm_password": "654322"},
        headers=auth_headers(),
    )
    assert resp.status_code == 422


def test_delete_account(backend):
    resp = client.delete("/auth/account", headers=auth_headers())
    assert resp.status_code == 200
    assert resp.json() == {"detail": "Account deleted successfully"}
    assert backend.web.calls == [("delete_account",)]
