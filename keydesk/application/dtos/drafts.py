"""Drafts: datos aportados por el cliente, aún no persistidos."""

from dataclasses import dataclass
from datetime import datetime

from keydesk.domain.entities import UserRole


@dataclass
class KeyDraft:
    """Campos editables de una llave."""

    name: str
    description: str = ""
    is_active: bool = True


@dataclass
class RegisterUserDTO:
    """DTO para registrar un nuevo usuario."""

    name: str
    email: str
    password: str
    role: UserRole = UserRole.RESIDENT

    @property
    def normalized_email(self) -> str:
        return self.email.strip().lower()


@dataclass
class ReservationDraft:
    """DTO para crear una reservación."""

    key_id: str
    user_id: str
    due_at: datetime
