"""Entidad User - residente o administrador."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from keydesk.domain.timeutils import ensure_utc
from keydesk.domain.validation import ValidationPolicy


class UserRole(str, Enum):
    """Roles posibles de un usuario."""

    RESIDENT = "resident"
    ADMIN = "admin"


@dataclass
class User:
    """
    Usuario del sistema.

    La contraseña solo se guarda como hash (bcrypt) y nunca se serializa
    hacia afuera.
    """

    name: str
    email: str
    password_hash: str = field(default="", repr=False)
    role: UserRole = UserRole.RESIDENT
    is_blocked: bool = False

    id: str | None = None

    # Control de concurrencia
    version: int = 0

    # Timestamps
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        self.role = UserRole(self.role)
        self.created_at = ensure_utc(self.created_at)
        self.updated_at = ensure_utc(self.updated_at)

    @property
    def is_admin(self) -> bool:
        """Verifica si el usuario tiene rol de administrador."""
        return self.role == UserRole.ADMIN

    def can_make_reservation(self) -> bool:
        """Un usuario bloqueado no puede reservar."""
        return not self.is_blocked

    def validate(self, policy: ValidationPolicy) -> None:
        policy.validate_user_name(self.name)
        policy.validate_email(self.email)

    def block(self, now: datetime) -> None:
        self.is_blocked = True
        self.updated_at = now

    def unblock(self, now: datetime) -> None:
        self.is_blocked = False
        self.updated_at = now
