"""Translation of domain errors into HTTP responses."""

import logging
import uuid

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from keydesk.domain.errors import (
    AlreadyExistsError,
    CannotExtendReservationError,
    CascadeError,
    ConcurrentModificationError,
    DomainError,
    InternalError,
    InvalidCredentialsError,
    InvalidTokenError,
    KeyHasActiveReservationError,
    KeyInactiveError,
    KeyReservedError,
    NotFoundError,
    OverdueProcessingError,
    ReservationAlreadyExistsError,
    ReservationNotActiveError,
    UnauthorizedError,
    UserAlreadyBlockedError,
    UserBlockedError,
    UserNotBlockedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Primer match gana; el orden importa para las subclases.
STATUS_BY_ERROR: tuple[tuple[type[DomainError], int], ...] = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (AlreadyExistsError, status.HTTP_409_CONFLICT),
    (KeyReservedError, status.HTTP_409_CONFLICT),
    (KeyInactiveError, status.HTTP_409_CONFLICT),
    (KeyHasActiveReservationError, status.HTTP_409_CONFLICT),
    (ReservationAlreadyExistsError, status.HTTP_409_CONFLICT),
    (ReservationNotActiveError, status.HTTP_409_CONFLICT),
    (CannotExtendReservationError, status.HTTP_409_CONFLICT),
    (ConcurrentModificationError, status.HTTP_409_CONFLICT),
    (UserAlreadyBlockedError, status.HTTP_409_CONFLICT),
    (UserNotBlockedError, status.HTTP_409_CONFLICT),
    (UserBlockedError, status.HTTP_403_FORBIDDEN),
    (UnauthorizedError, status.HTTP_403_FORBIDDEN),
    (InvalidCredentialsError, status.HTTP_401_UNAUTHORIZED),
    (InvalidTokenError, status.HTTP_401_UNAUTHORIZED),
    (ValidationError, 422),
    (InternalError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (CascadeError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (OverdueProcessingError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def retryable_conflict(exc: DomainError) -> DomainError:
    """Cascade failures caused by a lost optimistic-lock race surface as the conflict itself."""
    if isinstance(exc, (CascadeError, OverdueProcessingError)) and isinstance(
        exc.__cause__, ConcurrentModificationError
    ):
        return exc.__cause__
    return exc


def status_for(exc: DomainError) -> int:
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    exc = retryable_conflict(exc)
    status_code = status_for(exc)

    if status_code >= 500:
        error_id = str(uuid.uuid4())
        logger.error(
            "Domain operation failed",
            exc_info=exc,
            extra={
                "error_id": error_id,
                "code": exc.code,
                "path": request.url.path,
                "method": request.method,
            },
        )
        return JSONResponse(
            status_code=status_code,
            content={"detail": "Internal server error", "code": exc.code, "error_id": error_id},
        )

    headers = None
    if status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "code": exc.code},
        headers=headers,
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler to prevent stack trace exposure to clients.
    All unhandled exceptions are logged internally and return a generic error message.
    """
    error_id = str(uuid.uuid4())

    logger.error(
        "Unhandled exception occurred",
        exc_info=exc,
        extra={
            "error_id": error_id,
            "path": request.url.path,
            "method": request.method,
            "client_host": request.client.host if request.client else None,
        },
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "Internal server error",
            "code": "INTERNAL_ERROR",
            "error_id": error_id,
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)
