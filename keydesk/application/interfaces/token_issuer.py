"""Interface TokenIssuer - emisión y lectura de credenciales bearer."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

from keydesk.domain.entities import UserRole


@dataclass(frozen=True)
class TokenClaims:
    user_id: str
    role: UserRole
    expires_at: datetime


@dataclass(frozen=True)
class IssuedToken:
    access_token: str
    expires_at: datetime
    token_type: str = "bearer"


class TokenIssuer(ABC):
    @abstractmethod
    def issue(self, user_id: str, role: UserRole) -> IssuedToken:
        """Emite un token firmado con id, rol y expiración."""
        raise NotImplementedError

    @abstractmethod
    def decode(self, token: str) -> TokenClaims:
        """
        Recupera los claims del token.

        Raises:
            InvalidTokenError: Si la firma es inválida, expiró o faltan claims.
        """
        raise NotImplementedError
