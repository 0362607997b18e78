import logging
from datetime import datetime

from keydesk.application.dtos import ReservationDraft
from keydesk.application.interfaces.clock import Clock
from keydesk.application.interfaces.key_repo import KeyRepo
from keydesk.application.interfaces.reservation_repo import ReservationRepo
from keydesk.application.interfaces.user_repo import UserRepo
from keydesk.application.interfaces.uuid_generator import UUIDGenerator
from keydesk.domain.entities import Reservation, ReservationStatus, User, UserRole
from keydesk.domain.errors import (
    CascadeError,
    DomainError,
    KeyInactiveError,
    KeyNotFoundError,
    KeyReservedError,
    OverdueProcessingError,
    ReservationAlreadyExistsError,
    ReservationNotActiveError,
    ReservationNotFoundError,
    UnauthorizedError,
    UserBlockedError,
    UserNotFoundError,
)


class ReservationUseCase:
    """
    Ciclo de vida de las reservaciones.

    Garantiza a lo sumo una reservación activa por llave y por usuario,
    detecta vencimientos y aplica las cascadas (bloqueo del usuario al
    devolver tarde o al barrer vencidas).
    """

    def __init__(
        self,
        reservation_repo: ReservationRepo,
        key_repo: KeyRepo,
        user_repo: UserRepo,
        clock: Clock,
        id_generator: UUIDGenerator,
    ) -> None:
        self._reservation_repo = reservation_repo
        self._key_repo = key_repo
        self._user_repo = user_repo
        self._clock = clock
        self._id_generator = id_generator
        self._logger = logging.getLogger(__name__)

    async def create_reservation(self, draft: ReservationDraft) -> Reservation:
        """
        Crea una reservación activa.

        Las precondiciones se verifican en orden y gana el primer fallo:
        draft válido, usuario existe, usuario no bloqueado, llave existe,
        llave activa, llave sin reservación activa, usuario sin reservación
        activa. El repositorio vuelve a imponer las dos últimas de forma
        atómica.
        """
        now = self._clock.now()
        reservation = Reservation(
            key_id=draft.key_id,
            user_id=draft.user_id,
            due_at=draft.due_at,
        )
        reservation.validate_for_creation(now)

        user = await self._user_repo.get_by_id(draft.user_id)
        if not user:
            raise UserNotFoundError(draft.user_id)
        if not user.can_make_reservation():
            raise UserBlockedError(user.id)

        key = await self._key_repo.get_by_id(draft.key_id)
        if not key:
            raise KeyNotFoundError(draft.key_id)
        if not key.can_be_reserved():
            raise KeyInactiveError(key.id)

        if await self._reservation_repo.get_active_by_key(key.id):
            raise KeyReservedError(key.id)

        for existing in await self._reservation_repo.list_by_user(user.id):
            if existing.status == ReservationStatus.ACTIVE:
                raise ReservationAlreadyExistsError(user.id)

        reservation.id = self._id_generator.generate_uuid()
        reservation.status = ReservationStatus.ACTIVE
        reservation.reserved_at = now
        reservation.created_at = now
        reservation.updated_at = now
        await self._reservation_repo.create(reservation)

        self._logger.info(
            "Reservation created",
            extra={
                "reservation_id": reservation.id,
                "key_id": reservation.key_id,
                "user_id": reservation.user_id,
                "due_at": reservation.due_at.isoformat(),
            },
        )
        return reservation

    async def return_key(self, reservation_id: str, acting_user_id: str) -> Reservation:
        """
        Registra la devolución de la llave.

        Solo el dueño de la reservación o un admin pueden devolverla. Si la
        devolución llega después de due_at, el dueño queda bloqueado.
        """
        reservation = await self._reservation_repo.get_by_id(reservation_id)
        if not reservation:
            raise ReservationNotFoundError(reservation_id)

        acting_user = await self._user_repo.get_by_id(acting_user_id)
        if not acting_user:
            raise UserNotFoundError(acting_user_id)

        if reservation.user_id != acting_user.id and not acting_user.is_admin:
            raise UnauthorizedError("devolver una reservación ajena")

        if reservation.status != ReservationStatus.ACTIVE:
            raise ReservationNotActiveError(reservation.id, reservation.status.value)

        now = self._clock.now()
        was_overdue = reservation.is_overdue(now)
        if was_overdue:
            # Bloqueo primero: si falla, la reservación sigue activa
            await self._block_owner(reservation, now, step="block_user_on_late_return")

        reservation.mark_as_returned(now)
        await self._reservation_repo.update(reservation)

        self._logger.info(
            "Key returned",
            extra={
                "reservation_id": reservation.id,
                "key_id": reservation.key_id,
                "user_id": reservation.user_id,
                "late": was_overdue,
            },
        )
        return reservation

    async def get_user_reservations(self, user_id: str) -> list[Reservation]:
        return await self._reservation_repo.list_by_user(user_id)

    async def get_all_reservations(self, requester_role: UserRole) -> list[Reservation]:
        if requester_role != UserRole.ADMIN:
            raise UnauthorizedError("listar todas las reservaciones")
        return await self._reservation_repo.list_all()

    async def extend_reservation(
        self,
        reservation_id: str,
        new_due_at: datetime,
        requester_role: UserRole,
    ) -> Reservation:
        if requester_role != UserRole.ADMIN:
            raise UnauthorizedError("extender reservaciones")

        reservation = await self._reservation_repo.get_by_id(reservation_id)
        if not reservation:
            raise ReservationNotFoundError(reservation_id)

        previous_due_at = reservation.due_at
        reservation.extend(new_due_at, self._clock.now())
        await self._reservation_repo.update(reservation)

        self._logger.info(
            "Reservation extended",
            extra={
                "reservation_id": reservation.id,
                "previous_due_at": previous_due_at.isoformat(),
                "due_at": reservation.due_at.isoformat(),
            },
        )
        return reservation

    async def process_overdue_reservations(self) -> int:
        """
        Barrido de reservaciones vencidas (job periódico).

        Por cada reservación activa con due_at < now se bloquea al dueño y
        luego la reservación pasa a OVERDUE. Un fallo aborta el barrido con
        OverdueProcessingError; lo ya procesado queda aplicado. Como la
        reservación sigue activa hasta el último paso, una nueva ejecución la
        vuelve a encontrar y el bloqueo repetido no escribe nada.

        Returns:
            Número de reservaciones marcadas como vencidas.
        """
        now = self._clock.now()
        overdue = await self._reservation_repo.list_overdue(now)

        processed = 0
        for reservation in overdue:
            if not reservation.is_overdue(now):
                continue
            try:
                await self._block_user(reservation.user_id, now)
            except DomainError as exc:
                raise OverdueProcessingError(
                    reservation.id, reservation.user_id, step="block_user"
                ) from exc

            try:
                reservation.mark_as_overdue(now)
                await self._reservation_repo.update(reservation)
            except DomainError as exc:
                raise OverdueProcessingError(
                    reservation.id, reservation.user_id, step="mark_overdue"
                ) from exc

            processed += 1
            self._logger.warning(
                "Reservation marked overdue",
                extra={
                    "reservation_id": reservation.id,
                    "user_id": reservation.user_id,
                    "due_at": reservation.due_at.isoformat(),
                },
            )

        if processed:
            self._logger.info("Overdue sweep finished", extra={"processed": processed})
        return processed

    async def _block_owner(self, reservation: Reservation, now: datetime, step: str) -> None:
        try:
            await self._block_user(reservation.user_id, now)
        except DomainError as exc:
            raise CascadeError(step, reservation.user_id) from exc

    async def _block_user(self, user_id: str, now: datetime) -> User:
        """Bloquea al usuario; si ya lo está no escribe nada."""
        user = await self._user_repo.get_by_id(user_id)
        if not user:
            raise UserNotFoundError(user_id)
        if user.is_blocked:
            return user
        user.block(now)
        await self._user_repo.update(user)
        self._logger.warning("User blocked for overdue reservation", extra={"user_id": user_id})
        return user
