from requests.exceptions import ConnectionError

from conftest import FakeHTTPSession, FakeResponse
from harakapay.clients.supabase import (
    NETWORK_ERROR,
    NO_ROWS_CODE,
    AuthSession,
    SupabaseClient,
)


def _client(*responses, access_token=None):
    session = FakeHTTPSession(*responses)
    return SupabaseClient("https://demo.supabase.co/", "anon-key", access_token=access_token, session=session), session


def test_select_builds_postgrest_params():
    client, session = _client(FakeResponse(200, [{"id": "a"}]))
    result = client.select(
        "student_fee_assignments",
        "id, status",
        filters={"student_id": "s1", "cancelled_at": None, "is_active": True},
        in_filters={"status": ("active", "fully_paid")},
        order="created_at.desc",
        limit=1,
    )
    assert result.ok
    assert result.data == [{"id": "a"}]
    call = session.calls[0]
    assert call.method == "GET"
    assert call.url == "https://demo.supabase.co/rest/v1/student_fee_assignments"
    assert call.params == [
        ("select", "id, status"),
        ("student_id", "eq.s1"),
        ("cancelled_at", "is.null"),
        ("is_active", "eq.true"),
        ("status", "in.(active,fully_paid)"),
        ("order", "created_at.desc"),
        ("limit", "1"),
    ]


def test_select_any_of_becomes_or_param():
    client, session = _client(FakeResponse(200, []))
    client.select("students", any_of=["parent_email.ilike.a@b.c", "parent_phone.ilike.*812345678"])
    assert ("or", "(parent_email.ilike.a@b.c,parent_phone.ilike.*812345678)") in session.calls[0].params


def test_anonymous_and_user_headers():
    client, session = _client(FakeResponse(200, []), FakeResponse(200, []))
    client.select("parents")
    client.with_token("user-token").select("parents")
    anon, user = session.calls
    assert anon.headers["apikey"] == "anon-key"
    assert anon.headers["Authorization"] == "Bearer anon-key"
    assert user.headers["apikey"] == "anon-key"
    assert user.headers["Authorization"] == "Bearer user-token"


def test_single_returns_one_row():
    client, _ = _client(FakeResponse(200, [{"id": "p1"}]))
    result = client.select("parents", filters={"user_id": "u1"}, single=True)
    assert result.data == {"id": "p1"}


def test_single_with_no_rows_reports_pgrst116():
    client, _ = _client(FakeResponse(200, []))
    result = client.select("parents", filters={"user_id": "u1"}, single=True)
    assert not result.ok
    assert result.error.code == NO_ROWS_CODE
    assert result.error.status == 406


def test_error_body_is_parsed():
    client, _ = _client(
        FakeResponse(403, {"code": "42501", "message": "permission denied for table parents", "hint": None})
    )
    result = client.select("parents")
    assert result.data is None
    assert result.error.code == "42501"
    assert result.error.message == "permission denied for table parents"
    assert result.error.status == 403


def test_error_without_json_body():
    client, _ = _client(FakeResponse(500, text="upstream exploded"))
    result = client.select("parents")
    assert result.error.code == "500"
    assert result.error.message == "upstream exploded"


def test_network_error_is_returned_not_raised():
    client, _ = _client(ConnectionError("connection refused"))
    result = client.select("parents")
    assert result.error.code == NETWORK_ERROR
    assert "connection refused" in result.error.message


def test_empty_body_gives_none():
    client, _ = _client(FakeResponse(201))
    result = client.insert("parent_students", {"parent_id": "p1"}, returning=False)
    assert result.ok
    assert result.data is None


def test_insert_and_update_requests():
    client, session = _client(FakeResponse(201, [{"id": "x"}]), FakeResponse(200, [{"id": "x"}]))
    client.insert("parents", {"first_name": "A"})
    client.update("parents", {"first_name": "B"}, {"id": "x"})
    insert, update = session.calls
    assert insert.method == "POST"
    assert insert.headers["Prefer"] == "return=representation"
    assert update.method == "PATCH"
    assert update.params == [("id", "eq.x")]
    assert update.json == {"first_name": "B"}


def test_delete_requires_filter():
    client, session = _client()
    result = client.delete("parents", {})
    assert not result.ok
    assert session.calls == []


def test_sign_in_returns_session():
    payload = {
        "access_token": "at",
        "refresh_token": "rt",
        "expires_at": 1760000000,
        "user": {"id": "u1", "email": "amani@example.com"},
    }
    client, session = _client(FakeResponse(200, payload))
    result = client.sign_in_with_password("amani@example.com", "secret")
    assert isinstance(result.data, AuthSession)
    assert result.data.user_id == "u1"
    assert result.data.refresh_token == "rt"
    call = session.calls[0]
    assert call.url == "https://demo.supabase.co/auth/v1/token"
    assert call.params == {"grant_type": "password"}
    assert call.json == {"email": "amani@example.com", "password": "secret"}


def test_sign_in_failure():
    client, _ = _client(FakeResponse(400, {"error": "invalid_grant", "error_description": "Invalid login credentials"}))
    result = client.sign_in_with_password("amani@example.com", "wrong")
    assert result.error.code == "invalid_grant"
    assert result.error.message == "Invalid login credentials"


def test_sign_up_awaiting_confirmation_returns_user():
    client, session = _client(FakeResponse(200, {"id": "u2", "email": "new@example.com"}))
    result = client.sign_up("new@example.com", "pw", {"first_name": "Neo"})
    assert result.data == {"id": "u2", "email": "new@example.com"}
    assert session.calls[0].json["data"] == {"first_name": "Neo"}


def test_update_user_without_session():
    client, session = _client()
    assert client.update_user({"password": "x"}).error.status == 401
    assert session.calls == []


def test_update_user_sends_attributes_as_the_user():
    client, session = _client(FakeResponse(200, {"id": "u1"}), access_token="recovery-token")
    result = client.update_user({"password": "HP123456@Sec"})
    assert result.data == {"id": "u1"}
    call = session.calls[0]
    assert call.method == "PUT"
    assert call.url == "https://demo.supabase.co/auth/v1/user"
    assert call.headers["Authorization"] == "Bearer recovery-token"
    assert call.json == {"password": "HP123456@Sec"}


def test_recover_password_passes_redirect():
    client, session = _client(FakeResponse(200, {}))
    assert client.recover_password("amani@example.com", "harakapay://reset-password").ok
    call = session.calls[0]
    assert call.url == "https://demo.supabase.co/auth/v1/recover"
    assert call.params == {"redirect_to": "harakapay://reset-password"}
    assert call.json == {"email": "amani@example.com"}


def test_auth_error_code_wins_over_numeric_code():
    client, _ = _client(FakeResponse(422, {"code": 422, "error_code": "user_already_exists", "msg": "User already registered"}))
    result = client.sign_up("amani@example.com", "pw")
    assert result.error.code == "user_already_exists"
    assert result.error.message == "User already registered"
