from datetime import datetime, timedelta, timezone

from jose import ExpiredSignatureError, JWTError, jwt

from keydesk.application.interfaces.clock import Clock
from keydesk.application.interfaces.token_issuer import IssuedToken, TokenClaims, TokenIssuer
from keydesk.domain.entities import UserRole
from keydesk.domain.errors import InvalidTokenError


class JoseTokenIssuer(TokenIssuer):
    """JWT firmados (HS256 por defecto) con claims sub, role y exp."""

    def __init__(
        self,
        secret: str,
        clock: Clock,
        algorithm: str = "HS256",
        expire_hours: int = 24,
    ) -> None:
        self._secret = secret
        self._clock = clock
        self._algorithm = algorithm
        self._ttl = timedelta(hours=expire_hours)

    def issue(self, user_id: str, role: UserRole) -> IssuedToken:
        expires_at = self._clock.now() + self._ttl
        payload = {
            "sub": user_id,
            "role": UserRole(role).value,
            "exp": int(expires_at.timestamp()),
        }
        token = jwt.encode(payload, self._secret, algorithm=self._algorithm)
        return IssuedToken(access_token=token, expires_at=expires_at)

    def decode(self, token: str) -> TokenClaims:
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except ExpiredSignatureError as exc:
            raise InvalidTokenError("token expirado") from exc
        except JWTError as exc:
            raise InvalidTokenError() from exc

        user_id = payload.get("sub")
        role = payload.get("role")
        exp = payload.get("exp")
        if not user_id or exp is None:
            raise InvalidTokenError("faltan claims obligatorios")
        try:
            role = UserRole(role)
        except ValueError as exc:
            raise InvalidTokenError("rol desconocido") from exc

        return TokenClaims(
            user_id=user_id,
            role=role,
            expires_at=datetime.fromtimestamp(exp, tz=timezone.utc),
        )
