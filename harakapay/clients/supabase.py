"""Thin REST client for the HarakaPay Supabase backend.

Table operations go through the PostgREST surface (``/rest/v1``) and session
operations through the auth surface (``/auth/v1``). Backend failures are never
raised: every call returns a :class:`RemoteResult` whose ``error`` callers
inspect. Only the typed repositories interpret error codes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional

import requests
from requests.exceptions import RequestException

logger = logging.getLogger(__name__)

NO_ROWS_CODE = "PGRST116"
NETWORK_ERROR = "network_error"
INVALID_RESPONSE = "invalid_response"


@dataclass
class RemoteError:
    code: str
    message: str
    status: Optional[int] = None
    details: Optional[str] = None
    hint: Optional[str] = None


@dataclass
class RemoteResult:
    data: Any = None
    error: Optional[RemoteError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class AuthSession:
    access_token: str
    refresh_token: Optional[str] = None
    user_id: Optional[str] = None
    email: Optional[str] = None
    expires_at: Optional[int] = None
    user: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "AuthSession":
        user = payload.get("user") or {}
        return cls(
            access_token=payload.get("access_token") or "",
            refresh_token=payload.get("refresh_token"),
            user_id=user.get("id"),
            email=user.get("email"),
            expires_at=payload.get("expires_at"),
            user=user,
        )


def _filter_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


def quote_filter_value(value: str) -> str:
    """Double-quote a value for a PostgREST logical filter such as ``or=(...)``.

    Commas, dots and parentheses are reserved there; quoting makes them literal.
    """
    escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _error_from_response(resp) -> RemoteError:
    try:
        body = resp.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}
    # Auth errors carry a numeric "code" next to the symbolic "error_code"
    code = body.get("error_code") or body.get("code") or body.get("error") or str(resp.status_code)
    message = (
        body.get("message")
        or body.get("msg")
        or body.get("error_description")
        or body.get("error")
        or resp.text
        or f"HTTP {resp.status_code}"
    )
    return RemoteError(
        code=str(code),
        message=str(message),
        status=resp.status_code,
        details=body.get("details"),
        hint=body.get("hint"),
    )


class SupabaseClient:
    def __init__(
        self,
        url: str,
        anon_key: str,
        access_token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 30,
    ):
        self.url = url.rstrip("/")
        self.anon_key = anon_key
        self.access_token = access_token
        self.timeout = timeout
        self._session = session or requests.Session()

    def with_token(self, access_token: Optional[str]) -> "SupabaseClient":
        """Return a client acting as the user who owns ``access_token``."""
        return SupabaseClient(
            self.url,
            self.anon_key,
            access_token=access_token,
            session=self._session,
            timeout=self.timeout,
        )

    def _headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {self.access_token or self.anon_key}",
            "Content-Type": "application/json",
        }
        if extra:
            headers.update(extra)
        return headers

    def _request(
        self,
        method: str,
        path: str,
        params: Any = None,
        json: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> RemoteResult:
        url = f"{self.url}{path}"
        try:
            resp = self._session.request(
                method,
                url,
                params=params,
                json=json,
                headers=self._headers(headers),
                timeout=self.timeout,
            )
        except RequestException as exc:
            logger.warning("%s %s failed: %s: %s", method, path, type(exc).__name__, exc)
            return RemoteResult(error=RemoteError(code=NETWORK_ERROR, message=str(exc)))

        if resp.status_code >= 400:
            error = _error_from_response(resp)
            logger.warning("%s %s returned %s (%s): %s", method, path, resp.status_code, error.code, error.message)
            return RemoteResult(error=error)

        if resp.status_code == 204 or not resp.content:
            return RemoteResult(data=None)
        try:
            return RemoteResult(data=resp.json())
        except ValueError:
            return RemoteResult(
                error=RemoteError(code=INVALID_RESPONSE, message="Non-JSON response from backend", status=resp.status_code)
            )

    @staticmethod
    def _filter_params(
        filters: Optional[Dict[str, Any]] = None,
        in_filters: Optional[Dict[str, Iterable[Any]]] = None,
    ) -> list[tuple[str, str]]:
        params: list[tuple[str, str]] = []
        for column, value in (filters or {}).items():
            op = "is" if value is None else "eq"
            params.append((column, f"{op}.{_filter_value(value)}"))
        for column, values in (in_filters or {}).items():
            joined = ",".join(_filter_value(v) for v in values)
            params.append((column, f"in.({joined})"))
        return params

    # Table operations

    def select(
        self,
        table: str,
        columns: str = "*",
        filters: Optional[Dict[str, Any]] = None,
        in_filters: Optional[Dict[str, Iterable[Any]]] = None,
        any_of: Optional[Iterable[str]] = None,
        order: Optional[str] = None,
        limit: Optional[int] = None,
        single: bool = False,
    ) -> RemoteResult:
        params = [("select", columns)] + self._filter_params(filters, in_filters)
        if any_of:
            params.append(("or", "(" + ",".join(any_of) + ")"))
        if order:
            params.append(("order", order))
        if limit is not None:
            params.append(("limit", str(limit)))
        result = self._request("GET", f"/rest/v1/{table}", params=params)
        if not single or not result.ok:
            return result
        rows = result.data or []
        if isinstance(rows, dict):
            return result
        if len(rows) != 1:
            return RemoteResult(
                error=RemoteError(
                    code=NO_ROWS_CODE,
                    message=f"JSON object requested, multiple (or no) rows returned ({len(rows)})",
                    status=406,
                )
            )
        return RemoteResult(data=rows[0])

    def insert(self, table: str, values: Any, returning: bool = True) -> RemoteResult:
        prefer = "return=representation" if returning else "return=minimal"
        return self._request("POST", f"/rest/v1/{table}", json=values, headers={"Prefer": prefer})

    def update(self, table: str, values: Dict[str, Any], filters: Dict[str, Any]) -> RemoteResult:
        return self._request(
            "PATCH",
            f"/rest/v1/{table}",
            params=self._filter_params(filters),
            json=values,
            headers={"Prefer": "return=representation"},
        )

    def delete(self, table: str, filters: Dict[str, Any]) -> RemoteResult:
        if not filters:
            # PostgREST refuses unfiltered deletes; fail before the round trip
            return RemoteResult(error=RemoteError(code="21000", message="DELETE requires a filter"))
        return self._request(
            "DELETE",
            f"/rest/v1/{table}",
            params=self._filter_params(filters),
            headers={"Prefer": "return=representation"},
        )

    # Auth operations

    def _session_result(self, result: RemoteResult) -> RemoteResult:
        if not result.ok:
            return result
        payload = result.data or {}
        if not payload.get("access_token"):
            # Sign-ups awaiting email confirmation return the user without a session
            return RemoteResult(data=payload)
        return RemoteResult(data=AuthSession.from_payload(payload))

    def sign_in_with_password(self, email: str, password: str) -> RemoteResult:
        result = self._request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        return self._session_result(result)

    def refresh_session(self, refresh_token: str) -> RemoteResult:
        result = self._request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "refresh_token"},
            json={"refresh_token": refresh_token},
        )
        return self._session_result(result)

    def sign_up(self, email: str, password: str, metadata: Optional[Dict[str, Any]] = None) -> RemoteResult:
        result = self._request(
            "POST",
            "/auth/v1/signup",
            json={"email": email, "password": password, "data": metadata or {}},
        )
        return self._session_result(result)

    def recover_password(self, email: str, redirect_to: Optional[str] = None) -> RemoteResult:
        """Ask the auth service to email a password-reset link."""
        params = {"redirect_to": redirect_to} if redirect_to else None
        return self._request("POST", "/auth/v1/recover", params=params, json={"email": email})

    def update_user(self, attributes: Dict[str, Any]) -> RemoteResult:
        if not self.access_token:
            return RemoteResult(error=RemoteError(code="no_session", message="No active session", status=401))
        return self._request("PUT", "/auth/v1/user", json=attributes)
