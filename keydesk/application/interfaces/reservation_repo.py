from datetime import datetime

from keydesk.domain.entities import Reservation


class ReservationRepo:
    async def create(self, reservation: Reservation) -> None:
        """
        Persiste una reservación nueva.

        Debe rechazar de forma atómica una segunda reservación activa para la
        misma llave (KeyReservedError) o el mismo usuario
        (ReservationAlreadyExistsError).
        """
        raise NotImplementedError

    async def get_by_id(self, reservation_id: str) -> Reservation | None:
        raise NotImplementedError

    async def list_by_user(self, user_id: str) -> list[Reservation]:
        raise NotImplementedError

    async def list_all(self) -> list[Reservation]:
        raise NotImplementedError

    async def get_active_by_key(self, key_id: str) -> Reservation | None:
        raise NotImplementedError

    async def list_overdue(self, now: datetime) -> list[Reservation]:
        """Reservaciones activas con due_at < now."""
        raise NotImplementedError

    async def update(self, reservation: Reservation) -> None:
        """Actualiza si la versión coincide con la almacenada; incrementa la versión."""
        raise NotImplementedError
