"""
Capa de Aplicación - Reserva de llaves.

Esta capa contiene los casos de uso, DTOs e interfaces (puertos).
Orquesta la lógica de negocio y define los contratos con la infraestructura.

Estructura:
- use_cases/: Casos de uso del sistema
- dtos/: Data Transfer Objects (drafts y resultados)
- interfaces/: Puertos (contratos para adaptadores)
"""

from keydesk.application.dtos import KeyDraft, LoginResult, RegisterUserDTO, ReservationDraft
from keydesk.application.interfaces import (
    Clock,
    FakeClock,
    FakeUUIDGenerator,
    IssuedToken,
    KeyRepo,
    PasswordHasher,
    RealUUIDGenerator,
    ReservationRepo,
    SystemClock,
    TokenClaims,
    TokenIssuer,
    UserRepo,
    UUIDGenerator,
)
from keydesk.application.use_cases import KeyUseCase, ReservationUseCase, UserUseCase

__all__ = [
    # DTOs
    "KeyDraft",
    "RegisterUserDTO",
    "ReservationDraft",
    "LoginResult",
    # Interfaces - Repositories
    "KeyRepo",
    "UserRepo",
    "ReservationRepo",
    # Interfaces - Security
    "PasswordHasher",
    "TokenIssuer",
    "TokenClaims",
    "IssuedToken",
    # Interfaces - Utilities
    "Clock",
    "SystemClock",
    "FakeClock",
    "UUIDGenerator",
    "RealUUIDGenerator",
    "FakeUUIDGenerator",
    # Use cases
    "KeyUseCase",
    "ReservationUseCase",
    "UserUseCase",
]
