"""Implementación SQL del repositorio de reservaciones."""

from datetime import datetime

from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from keydesk.application.interfaces.reservation_repo import ReservationRepo
from keydesk.domain.entities import Reservation, ReservationStatus
from keydesk.domain.errors import (
    ConcurrentModificationError,
    DomainError,
    KeyReservedError,
    ReservationAlreadyExistsError,
    ReservationNotFoundError,
    StorageError,
)
from keydesk.infrastructure.db.engine import session_scope
from keydesk.infrastructure.db.tables import reservations


class ReservationRepoSQL(ReservationRepo):
    """
    Repositorio SQL de reservaciones.

    La unicidad de reservaciones activas la imponen los índices parciales
    uq_reservations_active_key y uq_reservations_active_user; aquí solo se
    traduce la violación al error de dominio correspondiente.
    """

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]) -> None:
        self._session_maker = session_maker

    async def create(self, reservation: Reservation) -> None:
        values = self._to_row(reservation)
        values["version"] = 1
        async with session_scope(self._session_maker, "reservations.create") as session:
            try:
                await session.execute(insert(reservations).values(values))
            except IntegrityError as exc:
                raise self._uniqueness_error(exc, reservation) from exc
        reservation.version = 1

    async def get_by_id(self, reservation_id: str) -> Reservation | None:
        async with session_scope(self._session_maker, "reservations.get_by_id") as session:
            result = await session.execute(
                select(reservations).where(reservations.c.id == reservation_id)
            )
            row = result.mappings().first()
        return self._row_to_entity(row) if row else None

    async def list_by_user(self, user_id: str) -> list[Reservation]:
        stmt = (
            select(reservations)
            .where(reservations.c.user_id == user_id)
            .order_by(reservations.c.reserved_at.desc())
        )
        async with session_scope(self._session_maker, "reservations.list_by_user") as session:
            result = await session.execute(stmt)
            rows = result.mappings().all()
        return [self._row_to_entity(row) for row in rows]

    async def list_all(self) -> list[Reservation]:
        stmt = select(reservations).order_by(reservations.c.reserved_at.desc())
        async with session_scope(self._session_maker, "reservations.list_all") as session:
            result = await session.execute(stmt)
            rows = result.mappings().all()
        return [self._row_to_entity(row) for row in rows]

    async def get_active_by_key(self, key_id: str) -> Reservation | None:
        stmt = select(reservations).where(
            reservations.c.key_id == key_id,
            reservations.c.status == ReservationStatus.ACTIVE.value,
        )
        async with session_scope(self._session_maker, "reservations.get_active_by_key") as session:
            result = await session.execute(stmt)
            row = result.mappings().first()
        return self._row_to_entity(row) if row else None

    async def list_overdue(self, now: datetime) -> list[Reservation]:
        stmt = (
            select(reservations)
            .where(
                reservations.c.status == ReservationStatus.ACTIVE.value,
                reservations.c.due_at < now,
            )
            .order_by(reservations.c.due_at)
        )
        async with session_scope(self._session_maker, "reservations.list_overdue") as session:
            result = await session.execute(stmt)
            rows = result.mappings().all()
        return [self._row_to_entity(row) for row in rows]

    async def update(self, reservation: Reservation) -> None:
        stmt = (
            update(reservations)
            .where(
                reservations.c.id == reservation.id,
                reservations.c.version == reservation.version,
            )
            .values(
                due_at=reservation.due_at,
                returned_at=reservation.returned_at,
                status=reservation.status.value,
                updated_at=reservation.updated_at,
                version=reservation.version + 1,
            )
        )
        async with session_scope(self._session_maker, "reservations.update") as session:
            result = await session.execute(stmt)
            if result.rowcount == 0:
                found = await session.execute(
                    select(reservations.c.id).where(reservations.c.id == reservation.id)
                )
                if found.first() is None:
                    raise ReservationNotFoundError(reservation.id)
                raise ConcurrentModificationError("reservation", reservation.id, reservation.version)
        reservation.version += 1

    @staticmethod
    def _uniqueness_error(exc: IntegrityError, reservation: Reservation) -> DomainError:
        message = str(exc.orig).lower()
        if "active_key" in message or "key_id" in message:
            return KeyReservedError(reservation.key_id)
        if "active_user" in message or "user_id" in message:
            return ReservationAlreadyExistsError(reservation.user_id)
        return StorageError("reservations.create")

    @staticmethod
    def _to_row(reservation: Reservation) -> dict:
        return {
            "id": reservation.id,
            "key_id": reservation.key_id,
            "user_id": reservation.user_id,
            "reserved_at": reservation.reserved_at,
            "due_at": reservation.due_at,
            "returned_at": reservation.returned_at,
            "status": reservation.status.value,
            "version": reservation.version,
            "created_at": reservation.created_at,
            "updated_at": reservation.updated_at,
        }

    @staticmethod
    def _row_to_entity(row) -> Reservation:
        return Reservation(
            id=row["id"],
            key_id=row["key_id"],
            user_id=row["user_id"],
            reserved_at=row["reserved_at"],
            due_at=row["due_at"],
            returned_at=row["returned_at"],
            status=row["status"],
            version=row["version"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
