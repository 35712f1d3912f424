"""Account endpoints backed by the backend auth service."""

from typing import Callable

from fastapi import APIRouter, Depends, Header, HTTPException, status

from harakapay.clients.supabase import SupabaseClient
from harakapay.clients.web_api import WebApiClient
from harakapay.core.i18n import resolve_language, translate
from harakapay.core.settings import get_settings
from harakapay.dependencies.auth import CurrentUser, get_current_user
from harakapay.dependencies.remote import (
    get_language,
    get_supabase_client,
    get_user_client,
    get_web_api_client,
    get_web_api_factory,
)
from harakapay.schemas.auth import (
    ForgotPasswordRequest,
    LoginRequest,
    MessageRead,
    RefreshRequest,
    RegisterRequest,
    RegistrationRead,
    ResetPasswordRequest,
    SessionRead,
)
from harakapay.services import accounts
from harakapay.services.accounts import AccountExists, InvalidCredentials, RegistrationInvalid, SessionExpired

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=SessionRead)
def login(credentials: LoginRequest, client: SupabaseClient = Depends(get_supabase_client)):
    try:
        return accounts.sign_in(client, credentials.email, credentials.password)
    except InvalidCredentials:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid credentials")


@router.post("/refresh", response_model=SessionRead)
def refresh_session(payload: RefreshRequest, client: SupabaseClient = Depends(get_supabase_client)):
    try:
        return accounts.refresh(client, payload.refresh_token)
    except SessionExpired as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=exc.message)


@router.post("/register", response_model=RegistrationRead, status_code=status.HTTP_201_CREATED)
def register(
    form: RegisterRequest,
    accept_language: str | None = Header(default=None),
    client: SupabaseClient = Depends(get_supabase_client),
    web_api_for: Callable[[str], WebApiClient] = Depends(get_web_api_factory),
):
    try:
        return accounts.register_parent(client, form, web_api_for)
    except RegistrationInvalid as exc:
        language = resolve_language(None, accept_language)
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"code": exc.code, "message": translate(f"auth.errors.{exc.code}", language)},
        )
    except AccountExists as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=exc.message)


@router.post("/password/forgot", response_model=MessageRead, status_code=status.HTTP_202_ACCEPTED)
def forgot_password(
    payload: ForgotPasswordRequest,
    accept_language: str | None = Header(default=None),
    client: SupabaseClient = Depends(get_supabase_client),
):
    accounts.request_password_reset(client, payload.email, get_settings().password_reset_redirect_url)
    return MessageRead(detail=translate("auth.password_reset_sent", resolve_language(None, accept_language)))


@router.post("/password/reset", response_model=MessageRead)
def reset_password(
    payload: ResetPasswordRequest,
    client: SupabaseClient = Depends(get_user_client),
    language: str = Depends(get_language),
):
    accounts.reset_password(client, payload.password)
    return MessageRead(detail=translate("auth.password_updated", language))


@router.delete("/account", response_model=MessageRead)
def delete_account(web: WebApiClient = Depends(get_web_api_client)):
    result = web.delete_account()
    return MessageRead(detail=str(result.get("message") or "Account deleted"))


@router.get("/me", response_model=CurrentUser, response_model_exclude={"access_token"})
def read_me(current_user: CurrentUser = Depends(get_current_user)):
    return current_user
