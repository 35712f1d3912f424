"""HTTP mapping for repository, validation and payment failures."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from harakapay.clients.payment_gateway import PaymentInitiationError
from harakapay.clients.web_api import WebApiError
from harakapay.core.i18n import resolve_language, translate
from harakapay.repositories.errors import (
    PermissionDenied,
    RecordNotFound,
    RepositoryError,
    ValidationFailed,
)
from harakapay.services.fee_plans import FeePlanUnavailable
from harakapay.services.linking import AlreadyLinked
from harakapay.services.payments import DuplicateSubmission
from harakapay.services.validation import PaymentValidationError

logger = logging.getLogger(__name__)


def _language(request: Request) -> str:
    return getattr(request.state, "language", None) or resolve_language(None, request.headers.get("accept-language"))


def _repository_status(exc: RepositoryError) -> int:
    if isinstance(exc, RecordNotFound):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, PermissionDenied):
        return status.HTTP_403_FORBIDDEN
    if isinstance(exc, ValidationFailed):
        return status.HTTP_422_UNPROCESSABLE_ENTITY
    return status.HTTP_502_BAD_GATEWAY


async def repository_error_handler(request: Request, exc: RepositoryError):
    code = _repository_status(exc)
    logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=code, content={"detail": exc.message})


async def payment_validation_handler(request: Request, exc: PaymentValidationError):
    message = translate(f"payment.errors.{exc.code}", _language(request))
    if message == f"payment.errors.{exc.code}":
        message = exc.message
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": {"code": exc.code, "message": message}},
    )


async def fee_plan_unavailable_handler(request: Request, exc: FeePlanUnavailable):
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": {"code": exc.reason, "message": exc.message}},
    )


async def payment_initiation_handler(request: Request, exc: PaymentInitiationError):
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"detail": {"code": "payment_failed", "message": exc.message}},
    )


async def web_api_error_handler(request: Request, exc: WebApiError):
    code = exc.status_code if exc.status_code in (401, 403, 404) else status.HTTP_502_BAD_GATEWAY
    logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=code, content={"detail": exc.message})


async def duplicate_submission_handler(request: Request, exc: DuplicateSubmission):
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})


async def already_linked_handler(request: Request, exc: AlreadyLinked):
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RepositoryError, repository_error_handler)
    app.add_exception_handler(PaymentValidationError, payment_validation_handler)
    app.add_exception_handler(FeePlanUnavailable, fee_plan_unavailable_handler)
    app.add_exception_handler(PaymentInitiationError, payment_initiation_handler)
    app.add_exception_handler(WebApiError, web_api_error_handler)
    app.add_exception_handler(DuplicateSubmission, duplicate_submission_handler)
    app.add_exception_handler(AlreadyLinked, already_linked_handler)
