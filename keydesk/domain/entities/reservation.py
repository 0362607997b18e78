"""Entidad Reservation - reserva de una llave por un usuario."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

from keydesk.domain.errors import (
    CannotExtendReservationError,
    InvalidDueTimeError,
    ReservationNotActiveError,
    ValidationError,
)
from keydesk.domain.timeutils import ensure_utc


class ReservationStatus(str, Enum):
    """Estados posibles de una reservación."""

    ACTIVE = "active"
    RETURNED = "returned"
    OVERDUE = "overdue"


@dataclass
class Reservation:
    """
    Reserva de una llave.

    Las transiciones de estado son de un solo sentido:
    ACTIVE -> RETURNED o ACTIVE -> OVERDUE. Las reservaciones nunca se
    eliminan; quedan como historial.
    """

    # Referencias (por id, sin FKs)
    key_id: str
    user_id: str

    # Fechas
    due_at: datetime
    reserved_at: datetime | None = None
    returned_at: datetime | None = None

    status: ReservationStatus = ReservationStatus.ACTIVE

    id: str | None = None

    # Control de concurrencia
    version: int = 0

    # Timestamps
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        self.status = ReservationStatus(self.status)
        self.due_at = ensure_utc(self.due_at)
        self.reserved_at = ensure_utc(self.reserved_at)
        self.returned_at = ensure_utc(self.returned_at)
        self.created_at = ensure_utc(self.created_at)
        self.updated_at = ensure_utc(self.updated_at)

    # === Propiedades calculadas ===

    @property
    def is_active(self) -> bool:
        return self.status == ReservationStatus.ACTIVE

    def is_overdue(self, now: datetime) -> bool:
        """Una reservación activa cuyo vencimiento ya pasó."""
        return self.is_active and now > self.due_at

    def overdue_time(self, now: datetime) -> timedelta:
        """Retorna cuánto tiempo lleva vencida (cero si no lo está)."""
        if self.is_overdue(now):
            return now - self.due_at
        return timedelta(0)

    def can_be_extended(self) -> bool:
        return self.is_active

    # === Validaciones ===

    def validate_for_creation(self, now: datetime) -> None:
        if not self.key_id:
            raise ValidationError("key_id", "es obligatorio")
        if not self.user_id:
            raise ValidationError("user_id", "es obligatorio")
        if self.due_at is None or self.due_at <= now:
            raise ValidationError("due_at", "debe ser posterior al momento actual")

    def validate_return_time(self) -> None:
        """returned_at no puede ser anterior a reserved_at."""
        if (
            self.returned_at is not None
            and self.reserved_at is not None
            and self.returned_at < self.reserved_at
        ):
            raise ValidationError("returned_at", "no puede ser anterior a reserved_at")

    # === Métodos de negocio ===

    def mark_as_returned(self, now: datetime) -> None:
        """Marca la reservación como devuelta."""
        if not self.is_active:
            raise ReservationNotActiveError(self.id, self.status.value)
        if self.reserved_at is not None and now < self.reserved_at:
            raise ValidationError("returned_at", "no puede ser anterior a reserved_at")
        self.returned_at = now
        self.status = ReservationStatus.RETURNED
        self.updated_at = now

    def mark_as_overdue(self, now: datetime) -> None:
        """Marca la reservación como vencida."""
        if not self.is_active:
            raise ReservationNotActiveError(self.id, self.status.value)
        self.status = ReservationStatus.OVERDUE
        self.updated_at = now

    def extend(self, new_due_at: datetime, now: datetime) -> None:
        """Extiende el plazo; el nuevo vencimiento no puede ser anterior al actual."""
        if not self.can_be_extended():
            raise CannotExtendReservationError(self.id, self.status.value)
        new_due_at = ensure_utc(new_due_at)
        if new_due_at < self.due_at:
            raise InvalidDueTimeError("el nuevo vencimiento no puede ser anterior al actual")
        self.due_at = new_due_at
        self.updated_at = now
