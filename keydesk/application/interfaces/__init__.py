"""Interfaces (Puertos) de la capa de aplicación."""

from keydesk.application.interfaces.clock import Clock, FakeClock, SystemClock
from keydesk.application.interfaces.key_repo import KeyRepo
from keydesk.application.interfaces.password_hasher import PasswordHasher
from keydesk.application.interfaces.reservation_repo import ReservationRepo
from keydesk.application.interfaces.token_issuer import IssuedToken, TokenClaims, TokenIssuer
from keydesk.application.interfaces.user_repo import UserRepo
from keydesk.application.interfaces.uuid_generator import (
    FakeUUIDGenerator,
    RealUUIDGenerator,
    UUIDGenerator,
)

__all__ = [
    # Repositories
    "KeyRepo",
    "UserRepo",
    "ReservationRepo",
    # Security
    "PasswordHasher",
    "TokenIssuer",
    "TokenClaims",
    "IssuedToken",
    # Utilities
    "Clock",
    "SystemClock",
    "FakeClock",
    "UUIDGenerator",
    "RealUUIDGenerator",
    "FakeUUIDGenerator",
]
