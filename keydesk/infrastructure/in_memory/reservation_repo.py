"""Implementación in-memory del repositorio de reservaciones."""

from copy import deepcopy
from datetime import datetime

from keydesk.application.interfaces.reservation_repo import ReservationRepo
from keydesk.domain.entities import Reservation, ReservationStatus
from keydesk.domain.errors import (
    ConcurrentModificationError,
    KeyReservedError,
    ReservationAlreadyExistsError,
    ReservationNotFoundError,
)


class InMemoryReservationRepo(ReservationRepo):
    """
    Repositorio en memoria para testing y modo sin base de datos.

    Las comprobaciones de unicidad y la escritura ocurren sin puntos de
    suspensión, así que son atómicas dentro del event loop.
    """

    def __init__(self) -> None:
        self._reservations: dict[str, Reservation] = {}

    async def create(self, reservation: Reservation) -> None:
        if reservation.status == ReservationStatus.ACTIVE:
            for stored in self._reservations.values():
                if stored.status != ReservationStatus.ACTIVE:
                    continue
                if stored.key_id == reservation.key_id:
                    raise KeyReservedError(reservation.key_id)
                if stored.user_id == reservation.user_id:
                    raise ReservationAlreadyExistsError(reservation.user_id)
        reservation.version = 1
        self._reservations[reservation.id] = deepcopy(reservation)

    async def get_by_id(self, reservation_id: str) -> Reservation | None:
        stored = self._reservations.get(reservation_id)
        return deepcopy(stored) if stored else None

    async def list_by_user(self, user_id: str) -> list[Reservation]:
        return self._sorted(r for r in self._reservations.values() if r.user_id == user_id)

    async def list_all(self) -> list[Reservation]:
        return self._sorted(self._reservations.values())

    async def get_active_by_key(self, key_id: str) -> Reservation | None:
        for stored in self._reservations.values():
            if stored.key_id == key_id and stored.status == ReservationStatus.ACTIVE:
                return deepcopy(stored)
        return None

    async def list_overdue(self, now: datetime) -> list[Reservation]:
        return self._sorted(r for r in self._reservations.values() if r.is_overdue(now))

    async def update(self, reservation: Reservation) -> None:
        stored = self._reservations.get(reservation.id)
        if stored is None:
            raise ReservationNotFoundError(reservation.id)
        if stored.version != reservation.version:
            raise ConcurrentModificationError("reservation", reservation.id, reservation.version)
        reservation.version += 1
        self._reservations[reservation.id] = deepcopy(reservation)

    def has_active_for_key(self, key_id: str) -> bool:
        return any(
            r.key_id == key_id and r.status == ReservationStatus.ACTIVE
            for r in self._reservations.values()
        )

    def clear(self) -> None:
        """Limpia todos los datos (para testing)."""
        self._reservations.clear()

    @staticmethod
    def _sorted(reservations) -> list[Reservation]:
        return [
            deepcopy(r)
            for r in sorted(reservations, key=lambda r: r.reserved_at or r.due_at, reverse=True)
        ]
