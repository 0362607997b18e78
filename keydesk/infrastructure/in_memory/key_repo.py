"""Implementación in-memory del repositorio de llaves."""

from copy import deepcopy

from keydesk.application.interfaces.key_repo import KeyRepo
from keydesk.domain.entities import Key
from keydesk.domain.errors import (
    ConcurrentModificationError,
    KeyAlreadyExistsError,
    KeyNotFoundError,
)
from keydesk.infrastructure.in_memory.reservation_repo import InMemoryReservationRepo


class InMemoryKeyRepo(KeyRepo):
    """Implementación in-memory del repositorio de llaves para testing."""

    def __init__(self, reservation_repo: InMemoryReservationRepo | None = None) -> None:
        self._keys: dict[str, Key] = {}
        # Necesario para excluir llaves con reservación activa en list_available
        self._reservation_repo = reservation_repo

    async def create(self, key: Key) -> None:
        if any(stored.name == key.name for stored in self._keys.values()):
            raise KeyAlreadyExistsError(key.name)
        key.version = 1
        self._keys[key.id] = deepcopy(key)

    async def get_by_id(self, key_id: str) -> Key | None:
        stored = self._keys.get(key_id)
        return deepcopy(stored) if stored else None

    async def get_by_name(self, name: str) -> Key | None:
        for stored in self._keys.values():
            if stored.name == name:
                return deepcopy(stored)
        return None

    async def list_all(self) -> list[Key]:
        return [deepcopy(k) for k in sorted(self._keys.values(), key=lambda k: k.name)]

    async def list_available(self) -> list[Key]:
        available = []
        for key in sorted(self._keys.values(), key=lambda k: k.name):
            if not key.is_active:
                continue
            if self._reservation_repo and self._reservation_repo.has_active_for_key(key.id):
                continue
            available.append(deepcopy(key))
        return available

    async def update(self, key: Key) -> None:
        stored = self._keys.get(key.id)
        if stored is None:
            raise KeyNotFoundError(key.id)
        if stored.version != key.version:
            raise ConcurrentModificationError("key", key.id, key.version)
        if any(k.name == key.name and k.id != key.id for k in self._keys.values()):
            raise KeyAlreadyExistsError(key.name)
        key.version += 1
        self._keys[key.id] = deepcopy(key)

    async def delete(self, key_id: str) -> None:
        if key_id not in self._keys:
            raise KeyNotFoundError(key_id)
        del self._keys[key_id]

    def clear(self) -> None:
        """Limpia todos los datos (para testing)."""
        self._keys.clear()
