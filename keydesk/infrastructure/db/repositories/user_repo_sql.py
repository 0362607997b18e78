"""Implementación SQL del repositorio de usuarios."""

from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from keydesk.application.interfaces.user_repo import UserRepo
from keydesk.domain.entities import User
from keydesk.domain.errors import (
    ConcurrentModificationError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from keydesk.infrastructure.db.engine import session_scope
from keydesk.infrastructure.db.tables import users


class UserRepoSQL(UserRepo):
    def __init__(self, session_maker: async_sessionmaker[AsyncSession]) -> None:
        self._session_maker = session_maker

    async def create(self, user: User) -> None:
        values = {
            "id": user.id,
            "name": user.name,
            "email": user.email,
            "password_hash": user.password_hash,
            "role": user.role.value,
            "is_blocked": user.is_blocked,
            "version": 1,
            "created_at": user.created_at,
            "updated_at": user.updated_at,
        }
        async with session_scope(self._session_maker, "users.create") as session:
            try:
                await session.execute(insert(users).values(values))
            except IntegrityError as exc:
                raise UserAlreadyExistsError(user.email) from exc
        user.version = 1

    async def get_by_id(self, user_id: str) -> User | None:
        async with session_scope(self._session_maker, "users.get_by_id") as session:
            result = await session.execute(select(users).where(users.c.id == user_id))
            row = result.mappings().first()
        return self._row_to_entity(row) if row else None

    async def get_by_email(self, email: str) -> User | None:
        async with session_scope(self._session_maker, "users.get_by_email") as session:
            result = await session.execute(select(users).where(users.c.email == email))
            row = result.mappings().first()
        return self._row_to_entity(row) if row else None

    async def list_all(self) -> list[User]:
        async with session_scope(self._session_maker, "users.list_all") as session:
            result = await session.execute(select(users).order_by(users.c.email))
            rows = result.mappings().all()
        return [self._row_to_entity(row) for row in rows]

    async def update(self, user: User) -> None:
        stmt = (
            update(users)
            .where(users.c.id == user.id, users.c.version == user.version)
            .values(
                name=user.name,
                email=user.email,
                password_hash=user.password_hash,
                role=user.role.value,
                is_blocked=user.is_blocked,
                updated_at=user.updated_at,
                version=user.version + 1,
            )
        )
        async with session_scope(self._session_maker, "users.update") as session:
            try:
                result = await session.execute(stmt)
            except IntegrityError as exc:
                raise UserAlreadyExistsError(user.email) from exc
            if result.rowcount == 0:
                found = await session.execute(select(users.c.id).where(users.c.id == user.id))
                if found.first() is None:
                    raise UserNotFoundError(user.id)
                raise ConcurrentModificationError("user", user.id, user.version)
        user.version += 1

    @staticmethod
    def _row_to_entity(row) -> User:
        return User(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            password_hash=row["password_hash"],
            role=row["role"],
            is_blocked=bool(row["is_blocked"]),
            version=row["version"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
