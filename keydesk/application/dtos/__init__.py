"""DTOs (Data Transfer Objects) de la capa de aplicación."""

from keydesk.application.dtos.drafts import KeyDraft, RegisterUserDTO, ReservationDraft
from keydesk.application.dtos.results import LoginResult

__all__ = [
    # Drafts
    "KeyDraft",
    "RegisterUserDTO",
    "ReservationDraft",
    # Results
    "LoginResult",
]
