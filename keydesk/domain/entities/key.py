"""Entidad Key - llave física del edificio."""

from dataclasses import dataclass
from datetime import datetime

from keydesk.domain.timeutils import ensure_utc
from keydesk.domain.validation import ValidationPolicy


@dataclass
class Key:
    """
    Llave física que los residentes pueden reservar.

    El nombre es único en todo el inventario. Una llave solo puede
    reservarse mientras esté activa y sin reservación activa.
    """

    name: str
    description: str = ""
    is_active: bool = True

    id: str | None = None

    # Control de concurrencia
    version: int = 0

    # Timestamps
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        self.created_at = ensure_utc(self.created_at)
        self.updated_at = ensure_utc(self.updated_at)

    def can_be_reserved(self) -> bool:
        """Verifica si la llave puede ser reservada (solo si está activa)."""
        return self.is_active

    def validate(self, policy: ValidationPolicy) -> None:
        policy.validate_key_name(self.name)
        policy.validate_description(self.description)

    def apply_changes(self, name: str, description: str, is_active: bool, now: datetime) -> None:
        """Aplica los campos editables; id y timestamps de creación no cambian."""
        self.name = name
        self.description = description
        self.is_active = is_active
        self.updated_at = now
