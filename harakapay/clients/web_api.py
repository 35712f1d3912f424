from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

import requests
from requests.exceptions import RequestException

logger = logging.getLogger(__name__)

NOTIFICATIONS_PATH = "/api/notifications"
STUDENT_FEES_PATH = "/api/parent/student-fees-detailed"
CREATE_PROFILE_PATH = "/api/parent/create-profile"
DELETE_ACCOUNT_PATH = "/api/parent/delete-account"


class WebApiError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class WebApiClient:
    """Client for the HarakaPay web API acting as one signed-in parent.

    ``refresh`` is called at most once per request, after a 401, and returns a
    fresh access token (or None when the session cannot be renewed).
    """

    def __init__(
        self,
        base_url: str,
        access_token: str,
        session: Optional[requests.Session] = None,
        timeout: float = 30,
        refresh: Optional[Callable[[], Optional[str]]] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.access_token = access_token
        self.timeout = timeout
        self._refresh = refresh
        self._session = session or requests.Session()

    def _send(self, method: str, path: str, params: Any = None, json: Any = None):
        headers = {
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json",
        }
        try:
            return self._session.request(
                method,
                f"{self.base_url}{path}",
                params=params,
                json=json,
                headers=headers,
                timeout=self.timeout,
            )
        except RequestException as e:
            err = f"Network error contacting web API: {type(e).__name__}: {e}"
            logger.warning(err)
            raise WebApiError(err) from e

    def _request(self, method: str, path: str, params: Any = None, json: Any = None) -> Any:
        r = self._send(method, path, params=params, json=json)
        if r.status_code == 401 and self._refresh is not None:
            logger.info("%s %s returned 401, refreshing session and retrying once", method, path)
            token = self._refresh()
            if not token:
                raise WebApiError("Session expired - please log in again", status_code=401)
            self.access_token = token
            r = self._send(method, path, params=params, json=json)

        if r.status_code == 204 or not r.content:
            data = None
        else:
            try:
                data = r.json()
            except ValueError:
                if 200 <= r.status_code < 300:
                    logger.warning("Web API returned non-JSON body for %s %s", method, path)
                    raise WebApiError("Invalid response from web API", status_code=r.status_code)
                data = None

        if not 200 <= r.status_code < 300:
            message = None
            if isinstance(data, dict):
                message = data.get("error") or data.get("message")
            message = message or f"{method} {path} failed: {r.status_code}"
            logger.warning("%s %s returned %s: %s", method, path, r.status_code, message)
            raise WebApiError(str(message), status_code=r.status_code)
        return data

    # Notifications

    def list_notifications(self, limit: int = 20, offset: int = 0, unread_only: bool = False) -> Dict[str, Any]:
        params = {
            "limit": str(limit),
            "offset": str(offset),
            "unreadOnly": "true" if unread_only else "false",
        }
        data = self._request("GET", f"{NOTIFICATIONS_PATH}/user", params=params)
        if not isinstance(data, dict):
            raise WebApiError("Invalid response from web API")
        return data

    def mark_notification_read(self, notification_id: str) -> None:
        self._request("PUT", f"{NOTIFICATIONS_PATH}/{notification_id}/read")

    def mark_all_notifications_read(self) -> None:
        self._request("POST", f"{NOTIFICATIONS_PATH}/mark-all-read")

    def delete_notification(self, notification_id: str) -> None:
        self._request("DELETE", f"{NOTIFICATIONS_PATH}/{notification_id}/read")

    # Parent account

    def student_fees(self) -> list:
        """Fee categories and payment schedules for every linked student."""
        data = self._request("GET", STUDENT_FEES_PATH)
        fees = data.get("student_fees") if isinstance(data, dict) else None
        return fees if isinstance(fees, list) else []

    def create_parent_profile(self, profile: Dict[str, Any]) -> Dict[str, Any]:
        data = self._request("POST", CREATE_PROFILE_PATH, json=profile)
        return (data or {}).get("profile") or {}

    def delete_account(self) -> Dict[str, Any]:
        return self._request("DELETE", DELETE_ACCOUNT_PATH) or {}
