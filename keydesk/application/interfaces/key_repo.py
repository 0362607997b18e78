from keydesk.domain.entities import Key


class KeyRepo:
    async def create(self, key: Key) -> None:
        raise NotImplementedError

    async def get_by_id(self, key_id: str) -> Key | None:
        raise NotImplementedError

    async def get_by_name(self, name: str) -> Key | None:
        raise NotImplementedError

    async def list_all(self) -> list[Key]:
        raise NotImplementedError

    async def list_available(self) -> list[Key]:
        """Llaves activas sin reservación activa."""
        raise NotImplementedError

    async def update(self, key: Key) -> None:
        """Actualiza si `key.version` coincide con la almacenada; incrementa la versión."""
        raise NotImplementedError

    async def delete(self, key_id: str) -> None:
        raise NotImplementedError
