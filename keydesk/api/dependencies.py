from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer

from keydesk.api.deps import Container
from keydesk.domain.entities import UserRole
from keydesk.domain.errors import InvalidTokenError, UnauthorizedError

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)


@dataclass(frozen=True)
class Principal:
    """Identity carried by a valid bearer token."""

    user_id: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_use_cases(container: Annotated[Container, Depends(get_container)]) -> dict:
    return container.use_cases


async def get_current_principal(
    container: Annotated[Container, Depends(get_container)],
    token: Annotated[str | None, Depends(oauth2_scheme)],
) -> Principal:
    if not token:
        raise InvalidTokenError("token ausente")
    claims = container.token_issuer.decode(token)
    return Principal(user_id=claims.user_id, role=claims.role)


async def require_admin(
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> Principal:
    if not principal.is_admin:
        raise UnauthorizedError("acceder a rutas de administración")
    return principal


UseCases = Annotated[dict, Depends(get_use_cases)]
CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]
AdminPrincipal = Annotated[Principal, Depends(require_admin)]
