"""Providers for backend clients and repositories.

Tests replace these through ``app.dependency_overrides``.
"""

from typing import Callable

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.orm import Session

from harakapay.clients.payment_gateway import PaymentGatewayClient
from harakapay.clients.supabase import AuthSession, SupabaseClient
from harakapay.clients.web_api import WebApiClient
from harakapay.core.i18n import resolve_language
from harakapay.core.settings import get_settings
from harakapay.db.session import get_db
from harakapay.dependencies.auth import CurrentUser, get_current_user
from harakapay.repositories.errors import PermissionDenied, RecordNotFound
from harakapay.repositories.fee_assignments import AcademicYearRepository, FeeAssignmentRepository
from harakapay.repositories.parents import ParentRepository
from harakapay.repositories.payments import PaymentRepository
from harakapay.repositories.students import StudentRepository
from harakapay.schemas.parent import Parent
from harakapay.services.payments import SubmissionGuard, submission_guard
from harakapay.services.preferences import get_saved_language

_client_instance = None


def get_supabase_client() -> SupabaseClient:
    """Anonymous backend client shared by all requests."""
    global _client_instance
    if _client_instance is None:
        settings = get_settings()
        _client_instance = SupabaseClient(
            settings.supabase_url,
            settings.supabase_anon_key,
            timeout=settings.http_timeout_seconds,
        )
    return _client_instance


def get_user_client(
    current_user: CurrentUser = Depends(get_current_user),
    client: SupabaseClient = Depends(get_supabase_client),
) -> SupabaseClient:
    return client.with_token(current_user.access_token)


def get_parent_repository(client: SupabaseClient = Depends(get_user_client)) -> ParentRepository:
    return ParentRepository(client)


def get_student_repository(client: SupabaseClient = Depends(get_user_client)) -> StudentRepository:
    return StudentRepository(client)


def get_academic_year_repository(client: SupabaseClient = Depends(get_user_client)) -> AcademicYearRepository:
    return AcademicYearRepository(client)


def get_fee_assignment_repository(client: SupabaseClient = Depends(get_user_client)) -> FeeAssignmentRepository:
    return FeeAssignmentRepository(client)


def get_payment_repository(client: SupabaseClient = Depends(get_user_client)) -> PaymentRepository:
    return PaymentRepository(client)


def get_payment_gateway() -> PaymentGatewayClient:
    settings = get_settings()
    return PaymentGatewayClient(settings.payment_api_url, timeout=settings.http_timeout_seconds)


def get_submission_guard() -> SubmissionGuard:
    return submission_guard


def get_web_api_client(
    current_user: CurrentUser = Depends(get_current_user),
    client: SupabaseClient = Depends(get_supabase_client),
    x_refresh_token: str | None = Header(default=None),
) -> WebApiClient:
    """Web API client acting as the caller.

    When the caller sends its refresh token in ``X-Refresh-Token`` the client
    renews the session once after a 401 and retries.
    """
    refresh = None
    if x_refresh_token:

        def renew():
            result = client.refresh_session(x_refresh_token)
            if result.ok and isinstance(result.data, AuthSession):
                return result.data.access_token
            return None

        refresh = renew

    settings = get_settings()
    return WebApiClient(
        settings.web_api_url,
        current_user.access_token,
        timeout=settings.http_timeout_seconds,
        refresh=refresh,
    )


def get_web_api_factory() -> Callable[[str], WebApiClient]:
    """Builds web API clients for sessions created mid-request (registration)."""
    settings = get_settings()
    return lambda access_token: WebApiClient(
        settings.web_api_url, access_token, timeout=settings.http_timeout_seconds
    )


def get_current_parent(
    current_user: CurrentUser = Depends(get_current_user),
    parents: ParentRepository = Depends(get_parent_repository),
) -> Parent:
    try:
        return parents.get_by_user_id(current_user.id)
    except RecordNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Parent profile not found")
    except PermissionDenied:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not a parent user")


def get_language(
    request: Request,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    accept_language: str | None = Header(default=None),
) -> str:
    language = resolve_language(get_saved_language(db, current_user.id), accept_language)
    # Read back by the exception handlers
    request.state.language = language
    return language
