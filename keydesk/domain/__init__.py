"""
Capa de Dominio - Reserva de llaves.

Esta capa contiene la lógica de negocio pura, sin dependencias de frameworks.
Incluye entidades, la política de validación y excepciones de dominio.

Estructura:
- entities/: Entidades del dominio (Key, User, Reservation)
- validation.py: Política de validación inyectable
- errors.py: Excepciones específicas del dominio
"""

from keydesk.domain.entities import Key, Reservation, ReservationStatus, User, UserRole
from keydesk.domain.errors import (
    AlreadyExistsError,
    CannotExtendReservationError,
    CascadeError,
    ConcurrentModificationError,
    DomainError,
    InternalError,
    InvalidCredentialsError,
    InvalidDueTimeError,
    InvalidTokenError,
    KeyAlreadyExistsError,
    KeyHasActiveReservationError,
    KeyInactiveError,
    KeyNotFoundError,
    KeyReservedError,
    NotFoundError,
    OverdueProcessingError,
    ReservationAlreadyExistsError,
    ReservationNotActiveError,
    ReservationNotFoundError,
    StorageError,
    UnauthorizedError,
    UserAlreadyBlockedError,
    UserAlreadyExistsError,
    UserBlockedError,
    UserNotBlockedError,
    UserNotFoundError,
    ValidationError,
)
from keydesk.domain.validation import ValidationPolicy

__all__ = [
    # Entities
    "Key",
    "User",
    "UserRole",
    "Reservation",
    "ReservationStatus",
    # Validation
    "ValidationPolicy",
    # Errors
    "DomainError",
    "NotFoundError",
    "KeyNotFoundError",
    "UserNotFoundError",
    "ReservationNotFoundError",
    "AlreadyExistsError",
    "KeyAlreadyExistsError",
    "UserAlreadyExistsError",
    "UnauthorizedError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "UserBlockedError",
    "UserAlreadyBlockedError",
    "UserNotBlockedError",
    "KeyInactiveError",
    "KeyReservedError",
    "KeyHasActiveReservationError",
    "ReservationAlreadyExistsError",
    "ReservationNotActiveError",
    "CannotExtendReservationError",
    "ConcurrentModificationError",
    "ValidationError",
    "InvalidDueTimeError",
    "InternalError",
    "StorageError",
    "CascadeError",
    "OverdueProcessingError",
]
