import logging

from keydesk.application.dtos import KeyDraft
from keydesk.application.interfaces.clock import Clock
from keydesk.application.interfaces.key_repo import KeyRepo
from keydesk.application.interfaces.reservation_repo import ReservationRepo
from keydesk.application.interfaces.uuid_generator import UUIDGenerator
from keydesk.domain.entities import Key, UserRole
from keydesk.domain.errors import (
    KeyAlreadyExistsError,
    KeyHasActiveReservationError,
    KeyNotFoundError,
    UnauthorizedError,
)
from keydesk.domain.validation import ValidationPolicy


class KeyUseCase:
    """Inventario de llaves; las escrituras requieren rol admin."""

    def __init__(
        self,
        key_repo: KeyRepo,
        reservation_repo: ReservationRepo,
        clock: Clock,
        id_generator: UUIDGenerator,
        validation_policy: ValidationPolicy,
    ) -> None:
        self._key_repo = key_repo
        self._reservation_repo = reservation_repo
        self._clock = clock
        self._id_generator = id_generator
        self._policy = validation_policy
        self._logger = logging.getLogger(__name__)

    async def create_key(self, draft: KeyDraft, requester_role: UserRole) -> Key:
        if requester_role != UserRole.ADMIN:
            raise UnauthorizedError("crear llaves")

        key = Key(name=draft.name.strip(), description=draft.description or "")
        key.validate(self._policy)

        if await self._key_repo.get_by_name(key.name):
            raise KeyAlreadyExistsError(key.name)

        now = self._clock.now()
        key.id = self._id_generator.generate_uuid()
        key.is_active = True
        key.created_at = now
        key.updated_at = now
        await self._key_repo.create(key)

        self._logger.info("Key created", extra={"key_id": key.id, "key_name": key.name})
        return key

    async def get_key_by_id(self, key_id: str) -> Key:
        key = await self._key_repo.get_by_id(key_id)
        if not key:
            raise KeyNotFoundError(key_id)
        return key

    async def get_all_keys(self) -> list[Key]:
        return await self._key_repo.list_all()

    async def get_available_keys(self) -> list[Key]:
        return await self._key_repo.list_available()

    async def update_key(self, key_id: str, draft: KeyDraft, requester_role: UserRole) -> Key:
        """Aplica solo name/description/is_active sobre la llave almacenada."""
        if requester_role != UserRole.ADMIN:
            raise UnauthorizedError("actualizar llaves")

        key = await self._key_repo.get_by_id(key_id)
        if not key:
            raise KeyNotFoundError(key_id)

        new_name = draft.name.strip()
        if new_name != key.name:
            existing = await self._key_repo.get_by_name(new_name)
            if existing and existing.id != key.id:
                raise KeyAlreadyExistsError(new_name)

        key.apply_changes(
            name=new_name,
            description=draft.description or "",
            is_active=draft.is_active,
            now=self._clock.now(),
        )
        key.validate(self._policy)
        await self._key_repo.update(key)

        self._logger.info(
            "Key updated",
            extra={"key_id": key.id, "key_name": key.name, "is_active": key.is_active},
        )
        return key

    async def delete_key(self, key_id: str, requester_role: UserRole) -> None:
        if requester_role != UserRole.ADMIN:
            raise UnauthorizedError("eliminar llaves")

        key = await self._key_repo.get_by_id(key_id)
        if not key:
            raise KeyNotFoundError(key_id)

        if await self._reservation_repo.get_active_by_key(key_id):
            raise KeyHasActiveReservationError(key_id)

        await self._key_repo.delete(key_id)
        self._logger.info("Key deleted", extra={"key_id": key_id})
