"""Typed failures raised by the repositories.

Callers handle these instead of raw backend error codes.
"""

from harakapay.clients.supabase import INVALID_RESPONSE, NETWORK_ERROR, NO_ROWS_CODE, RemoteError

PERMISSION_DENIED_CODE = "42501"


class RepositoryError(Exception):
    def __init__(self, message: str, remote: RemoteError | None = None):
        super().__init__(message)
        self.message = message
        self.remote = remote


class RecordNotFound(RepositoryError):
    pass


class PermissionDenied(RepositoryError):
    pass


class ValidationFailed(RepositoryError):
    pass


class BackendUnavailable(RepositoryError):
    pass


def raise_for_error(error: RemoteError, what: str) -> None:
    """Raise the RepositoryError subclass matching a backend error."""
    if error.code == NO_ROWS_CODE:
        raise RecordNotFound(f"{what} not found", error)
    if error.code == PERMISSION_DENIED_CODE or error.status in (401, 403):
        raise PermissionDenied(f"Permission denied reading {what}: {error.message}", error)
    if error.code in (NETWORK_ERROR, INVALID_RESPONSE):
        raise BackendUnavailable(f"Backend unavailable while reading {what}: {error.message}", error)
    if error.code[:2] in ("22", "23") or error.status in (400, 422):
        raise ValidationFailed(f"Invalid {what}: {error.message}", error)
    raise RepositoryError(f"Backend error for {what}: {error.message}", error)
