"""DTOs de resultado."""

from dataclasses import dataclass
from datetime import datetime

from keydesk.domain.entities import User


@dataclass
class LoginResult:
    """Resultado de un login exitoso."""

    user: User
    access_token: str
    expires_at: datetime
    token_type: str = "bearer"
