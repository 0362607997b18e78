"""Entidades del dominio de reserva de llaves."""

from keydesk.domain.entities.key import Key
from keydesk.domain.entities.reservation import Reservation, ReservationStatus
from keydesk.domain.entities.user import User, UserRole

__all__ = [
    # Key
    "Key",
    # User
    "User",
    "UserRole",
    # Reservation
    "Reservation",
    "ReservationStatus",
]
