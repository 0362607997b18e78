"""Implementación SQL del repositorio de llaves."""

from sqlalchemy import and_, delete, exists, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from keydesk.application.interfaces.key_repo import KeyRepo
from keydesk.domain.entities import Key
from keydesk.domain.errors import ConcurrentModificationError, KeyAlreadyExistsError, KeyNotFoundError
from keydesk.infrastructure.db.engine import session_scope
from keydesk.infrastructure.db.tables import keys, reservations


class KeyRepoSQL(KeyRepo):
    """Implementación SQL del repositorio de llaves usando SQLAlchemy Core."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]) -> None:
        self._session_maker = session_maker

    async def create(self, key: Key) -> None:
        values = self._to_row(key)
        values["version"] = 1
        async with session_scope(self._session_maker, "keys.create") as session:
            try:
                await session.execute(insert(keys).values(values))
            except IntegrityError as exc:
                raise KeyAlreadyExistsError(key.name) from exc
        key.version = 1

    async def get_by_id(self, key_id: str) -> Key | None:
        async with session_scope(self._session_maker, "keys.get_by_id") as session:
            result = await session.execute(select(keys).where(keys.c.id == key_id))
            row = result.mappings().first()
        return self._row_to_entity(row) if row else None

    async def get_by_name(self, name: str) -> Key | None:
        async with session_scope(self._session_maker, "keys.get_by_name") as session:
            result = await session.execute(select(keys).where(keys.c.name == name))
            row = result.mappings().first()
        return self._row_to_entity(row) if row else None

    async def list_all(self) -> list[Key]:
        async with session_scope(self._session_maker, "keys.list_all") as session:
            result = await session.execute(select(keys).order_by(keys.c.name))
            rows = result.mappings().all()
        return [self._row_to_entity(row) for row in rows]

    async def list_available(self) -> list[Key]:
        """Llaves activas sin reservación activa."""
        active_reservation = exists().where(
            and_(reservations.c.key_id == keys.c.id, reservations.c.status == "active")
        )
        stmt = (
            select(keys)
            .where(keys.c.is_active.is_(True), ~active_reservation)
            .order_by(keys.c.name)
        )
        async with session_scope(self._session_maker, "keys.list_available") as session:
            result = await session.execute(stmt)
            rows = result.mappings().all()
        return [self._row_to_entity(row) for row in rows]

    async def update(self, key: Key) -> None:
        stmt = (
            update(keys)
            .where(keys.c.id == key.id, keys.c.version == key.version)
            .values(
                name=key.name,
                description=key.description,
                is_active=key.is_active,
                updated_at=key.updated_at,
                version=key.version + 1,
            )
        )
        async with session_scope(self._session_maker, "keys.update") as session:
            try:
                result = await session.execute(stmt)
            except IntegrityError as exc:
                raise KeyAlreadyExistsError(key.name) from exc
            if result.rowcount == 0:
                found = await session.execute(select(keys.c.id).where(keys.c.id == key.id))
                if found.first() is None:
                    raise KeyNotFoundError(key.id)
                raise ConcurrentModificationError("key", key.id, key.version)
        key.version += 1

    async def delete(self, key_id: str) -> None:
        async with session_scope(self._session_maker, "keys.delete") as session:
            result = await session.execute(delete(keys).where(keys.c.id == key_id))
            if result.rowcount == 0:
                raise KeyNotFoundError(key_id)

    @staticmethod
    def _to_row(key: Key) -> dict:
        return {
            "id": key.id,
            "name": key.name,
            "description": key.description,
            "is_active": key.is_active,
            "version": key.version,
            "created_at": key.created_at,
            "updated_at": key.updated_at,
        }

    @staticmethod
    def _row_to_entity(row) -> Key:
        return Key(
            id=row["id"],
            name=row["name"],
            description=row["description"] or "",
            is_active=bool(row["is_active"]),
            version=row["version"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
