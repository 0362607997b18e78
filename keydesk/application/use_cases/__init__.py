"""Casos de uso del sistema."""

from keydesk.application.use_cases.keys import KeyUseCase
from keydesk.application.use_cases.reservations import ReservationUseCase
from keydesk.application.use_cases.users import UserUseCase

__all__ = [
    "KeyUseCase",
    "ReservationUseCase",
    "UserUseCase",
]
