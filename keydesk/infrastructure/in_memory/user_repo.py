"""Implementación in-memory del repositorio de usuarios."""

from copy import deepcopy

from keydesk.application.interfaces.user_repo import UserRepo
from keydesk.domain.entities import User
from keydesk.domain.errors import (
    ConcurrentModificationError,
    UserAlreadyExistsError,
    UserNotFoundError,
)


class InMemoryUserRepo(UserRepo):
    """Implementación in-memory del repositorio de usuarios para testing."""

    def __init__(self) -> None:
        self._users: dict[str, User] = {}

    async def create(self, user: User) -> None:
        if any(stored.email == user.email for stored in self._users.values()):
            raise UserAlreadyExistsError(user.email)
        user.version = 1
        self._users[user.id] = deepcopy(user)

    async def get_by_id(self, user_id: str) -> User | None:
        stored = self._users.get(user_id)
        return deepcopy(stored) if stored else None

    async def get_by_email(self, email: str) -> User | None:
        for stored in self._users.values():
            if stored.email == email:
                return deepcopy(stored)
        return None

    async def list_all(self) -> list[User]:
        return [deepcopy(u) for u in sorted(self._users.values(), key=lambda u: u.email)]

    async def update(self, user: User) -> None:
        stored = self._users.get(user.id)
        if stored is None:
            raise UserNotFoundError(user.id)
        if stored.version != user.version:
            raise ConcurrentModificationError("user", user.id, user.version)
        user.version += 1
        self._users[user.id] = deepcopy(user)

    def clear(self) -> None:
        """Limpia todos los datos (para testing)."""
        self._users.clear()
