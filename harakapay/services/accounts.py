"""Parent accounts: sign-in, session refresh, registration and password resets.

Passwords and sessions belong to the backend auth service; this module only
shapes what is sent to it and interprets its answers.
"""

import logging
from typing import Any, Callable

from harakapay.clients.supabase import AuthSession, RemoteError, SupabaseClient
from harakapay.clients.web_api import WebApiClient, WebApiError
from harakapay.repositories.errors import BackendUnavailable, raise_for_error
from harakapay.schemas.auth import RegisterRequest, RegistrationRead, SessionRead
from harakapay.services.validation import COUNTRY_PREFIX, NON_DIGITS

logger = logging.getLogger(__name__)

PIN_LENGTH = 6
LOCAL_NUMBER_LENGTH = 9
PHONE_EMAIL_DOMAIN = "harakapay.app"
REJECTED_GRANT_CODES = ("invalid_grant", "invalid_credentials", "refresh_token_not_found")
EXISTING_ACCOUNT_CODES = ("user_already_exists", "email_exists")


class AccountError(Exception):
    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


class InvalidCredentials(AccountError):
    pass


class SessionExpired(AccountError):
    pass


class AccountExists(AccountError):
    pass


class RegistrationInvalid(AccountError):
    pass


def backend_password(secret: str) -> str:
    """Map a six-digit PIN onto a password the auth service's policy accepts."""
    if len(secret) == PIN_LENGTH and secret.isascii() and secret.isdigit():
        return f"HP{secret}@Sec"
    return secret


def registration_phone(raw: str | None) -> str:
    """Return ``+243`` followed by the nine-digit local number."""
    digits = NON_DIGITS.sub("", raw or "")
    if digits.startswith(COUNTRY_PREFIX):
        digits = digits[len(COUNTRY_PREFIX):]
    elif digits.startswith("0"):
        digits = digits[1:]
    if len(digits) != LOCAL_NUMBER_LENGTH:
        raise RegistrationInvalid("invalid_phone", "The number must contain exactly 9 digits")
    return f"+{COUNTRY_PREFIX}{digits}"


def _rejected_grant(error: RemoteError) -> bool:
    return error.code in REJECTED_GRANT_CODES or error.status == 400


def session_read(session: AuthSession) -> SessionRead:
    return SessionRead(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        expires_at=session.expires_at,
        user_id=session.user_id,
        email=session.email,
    )


def _session_or_unavailable(data: Any) -> SessionRead:
    if not isinstance(data, AuthSession):
        raise BackendUnavailable("Backend unavailable while reading session: no access token in response")
    return session_read(data)


def sign_in(client: SupabaseClient, email: str, password: str) -> SessionRead:
    result = client.sign_in_with_password(email.strip().lower(), backend_password(password))
    if not result.ok:
        if _rejected_grant(result.error):
            raise InvalidCredentials("invalid_credentials", "Invalid credentials")
        raise_for_error(result.error, "session")
    return _session_or_unavailable(result.data)


def refresh(client: SupabaseClient, refresh_token: str) -> SessionRead:
    result = client.refresh_session(refresh_token)
    if not result.ok:
        if _rejected_grant(result.error):
            raise SessionExpired("session_expired", "Session expired - please log in again")
        raise_for_error(result.error, "session")
    return _session_or_unavailable(result.data)


def signup_user_id(data: Any) -> str | None:
    if isinstance(data, AuthSession):
        return data.user_id
    if isinstance(data, dict):
        return data.get("id") or (data.get("user") or {}).get("id")
    return None


def register_parent(
    client: SupabaseClient,
    form: RegisterRequest,
    web_api_for: Callable[[str], WebApiClient],
) -> RegistrationRead:
    """Create the auth account, then the parent profile when a session came back.

    Projects requiring email confirmation return no session; the parent row
    then comes from the backend's signup trigger alone.
    """
    phone = registration_phone(form.phone)
    email = str(form.email or f"{phone[1:]}@{PHONE_EMAIL_DOMAIN}").strip().lower()
    result = client.sign_up(
        email,
        backend_password(form.pin),
        {"first_name": form.first_name, "last_name": form.last_name, "phone": phone},
    )
    if not result.ok:
        error = result.error
        if error.code in EXISTING_ACCOUNT_CODES or "already registered" in error.message.lower():
            raise AccountExists("account_exists", "An account already exists for this email")
        raise_for_error(error, "account")

    user_id = signup_user_id(result.data)
    if not isinstance(result.data, AuthSession):
        logger.info("Registered user %s; email confirmation pending", user_id)
        return RegistrationRead(user_id=user_id, email=email, phone=phone, confirmation_required=True)

    session = result.data
    profile_created = True
    try:
        web_api_for(session.access_token).create_parent_profile(
            {
                "user_id": user_id,
                "first_name": form.first_name,
                "last_name": form.last_name,
                "email": email,
                "phone": phone,
            }
        )
    except WebApiError as exc:
        # The account exists either way; the client retries profile creation later
        logger.warning("Parent profile creation failed for user %s: %s", user_id, exc.message)
        profile_created = False
    logger.info("Registered parent user %s", user_id)
    return RegistrationRead(
        user_id=user_id,
        email=email,
        phone=phone,
        confirmation_required=False,
        profile_created=profile_created,
        session=session_read(session),
    )


def request_password_reset(client: SupabaseClient, email: str, redirect_to: str | None) -> None:
    result = client.recover_password(email.strip().lower(), redirect_to)
    if not result.ok:
        raise_for_error(result.error, "password reset")


def reset_password(client: SupabaseClient, password: str) -> None:
    """Set a new password for the session ``client`` acts as (a recovery session)."""
    result = client.update_user({"password": backend_password(password)})
    if not result.ok:
        raise_for_error(result.error, "password")
