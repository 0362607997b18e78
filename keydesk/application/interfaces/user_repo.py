from keydesk.domain.entities import User


class UserRepo:
    async def create(self, user: User) -> None:
        raise NotImplementedError

    async def get_by_id(self, user_id: str) -> User | None:
        raise NotImplementedError

    async def get_by_email(self, email: str) -> User | None:
        raise NotImplementedError

    async def list_all(self) -> list[User]:
        raise NotImplementedError

    async def update(self, user: User) -> None:
        """Actualiza si `user.version` coincide con la almacenada; incrementa la versión."""
        raise NotImplementedError
