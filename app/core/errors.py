"""
Error kinds shared by the API and the API client.

Services and repositories raise ``AppError`` with a kind; the HTTP layer turns
the kind into a status code and the client turns it back into a fixed
user-facing sentence. Nothing matches on message text.
"""
import enum
import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import InterfaceError, OperationalError

logger = logging.getLogger(__name__)


class ErrorKind(str, enum.Enum):
    service_unavailable = "service_unavailable"
    wrong_code = "wrong_code"
    unauthorized = "unauthorized"
    admin_required = "admin_required"
    forbidden = "forbidden"
    not_found = "not_found"
    already_exists = "already_exists"
    identity_exists = "identity_exists"
    validation = "validation"
    network = "network"
    unknown = "unknown"


STATUS_BY_KIND = {
    ErrorKind.service_unavailable: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorKind.wrong_code: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.unauthorized: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.admin_required: status.HTTP_403_FORBIDDEN,
    ErrorKind.forbidden: status.HTTP_403_FORBIDDEN,
    ErrorKind.not_found: status.HTTP_404_NOT_FOUND,
    ErrorKind.already_exists: status.HTTP_409_CONFLICT,
    ErrorKind.identity_exists: status.HTTP_409_CONFLICT,
    ErrorKind.validation: status.HTTP_400_BAD_REQUEST,
    ErrorKind.network: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.unknown: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

USER_MESSAGES = {
    ErrorKind.service_unavailable: "Service is temporarily unavailable. Please try again in a moment.",
    ErrorKind.wrong_code: "The access code you entered is incorrect. Please try again.",
    ErrorKind.unauthorized: "You are not authorized to perform this action. Please log in again.",
    ErrorKind.admin_required: "Admin access required. Please log in as an administrator.",
    ErrorKind.forbidden: "Access denied. You do not have permission to access this area.",
    ErrorKind.not_found: "The requested item was not found. It may have been deleted.",
    ErrorKind.identity_exists: "Your name has already been registered. You cannot change it at this time.",
    ErrorKind.network: "Network error. Please check your connection and try again.",
    ErrorKind.unknown: "An unexpected error occurred. Please try again.",
}

# Details of these kinds are already written for the end user
PASS_THROUGH_KINDS = {ErrorKind.validation, ErrorKind.already_exists}


def user_message(kind: ErrorKind, detail: Optional[str] = None) -> str:
    if kind in PASS_THROUGH_KINDS and detail:
        return detail
    return USER_MESSAGES.get(kind, USER_MESSAGES[ErrorKind.unknown])


def kind_for_status(status_code: int) -> ErrorKind:
    """Best guess for responses that carry no explicit kind (e.g. framework 401/422)."""
    if status_code == status.HTTP_401_UNAUTHORIZED:
        return ErrorKind.unauthorized
    if status_code == status.HTTP_403_FORBIDDEN:
        return ErrorKind.forbidden
    if status_code == status.HTTP_404_NOT_FOUND:
        return ErrorKind.not_found
    if status_code == status.HTTP_409_CONFLICT:
        return ErrorKind.already_exists
    if status_code in (status.HTTP_400_BAD_REQUEST, 422):
        return ErrorKind.validation
    if status_code == status.HTTP_503_SERVICE_UNAVAILABLE:
        return ErrorKind.service_unavailable
    return ErrorKind.unknown


class AppError(Exception):
    kind = ErrorKind.unknown

    def __init__(self, detail: str = "", kind: Optional[ErrorKind] = None):
        super().__init__(detail)
        if kind is not None:
            self.kind = kind
        self.detail = detail

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]


class ValidationFailed(AppError):
    kind = ErrorKind.validation


class NotFound(AppError):
    kind = ErrorKind.not_found


class AlreadyExists(AppError):
    kind = ErrorKind.already_exists


class Forbidden(AppError):
    kind = ErrorKind.forbidden


class WrongCode(AppError):
    kind = ErrorKind.wrong_code


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s (%s)", request.method, request.url.path, exc.kind.value, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"kind": exc.kind.value, "detail": exc.detail or user_message(exc.kind)},
    )


async def database_unavailable_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Database unavailable during %s %s: %s", request.method, request.url.path, exc)
    kind = ErrorKind.service_unavailable
    return JSONResponse(
        status_code=STATUS_BY_KIND[kind],
        content={"kind": kind.value, "detail": user_message(kind)},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(OperationalError, database_unavailable_handler)
    app.add_exception_handler(InterfaceError, database_unavailable_handler)
