import logging
from datetime import datetime

from keydesk.application.dtos import LoginResult, RegisterUserDTO
from keydesk.application.interfaces.clock import Clock
from keydesk.application.interfaces.password_hasher import PasswordHasher
from keydesk.application.interfaces.reservation_repo import ReservationRepo
from keydesk.application.interfaces.token_issuer import TokenIssuer
from keydesk.application.interfaces.user_repo import UserRepo
from keydesk.application.interfaces.uuid_generator import UUIDGenerator
from keydesk.domain.entities import ReservationStatus, User, UserRole
from keydesk.domain.errors import (
    CascadeError,
    DomainError,
    InvalidCredentialsError,
    UnauthorizedError,
    UserAlreadyBlockedError,
    UserAlreadyExistsError,
    UserBlockedError,
    UserNotBlockedError,
    UserNotFoundError,
)
from keydesk.domain.validation import ValidationPolicy

# Se verifica contra este valor cuando el email no existe, para que el tiempo
# de respuesta no revele si la cuenta existe.
_DUMMY_PASSWORD = "keydesk-dummy-password"


class UserUseCase:
    """Registro, login y bloqueo de usuarios."""

    def __init__(
        self,
        user_repo: UserRepo,
        reservation_repo: ReservationRepo,
        password_hasher: PasswordHasher,
        token_issuer: TokenIssuer,
        clock: Clock,
        id_generator: UUIDGenerator,
        validation_policy: ValidationPolicy,
    ) -> None:
        self._user_repo = user_repo
        self._reservation_repo = reservation_repo
        self._password_hasher = password_hasher
        self._token_issuer = token_issuer
        self._clock = clock
        self._id_generator = id_generator
        self._policy = validation_policy
        self._dummy_hash: str | None = None
        self._logger = logging.getLogger(__name__)

    async def register_user(
        self,
        draft: RegisterUserDTO,
        requester_role: UserRole | None = None,
    ) -> User:
        """
        Registra un usuario nuevo.

        El rol por defecto es resident; crear un admin requiere que el
        solicitante sea admin.
        """
        role = UserRole(draft.role)
        if role == UserRole.ADMIN and requester_role != UserRole.ADMIN:
            raise UnauthorizedError("registrar administradores")

        user = User(name=draft.name, email=draft.normalized_email, role=role)
        user.validate(self._policy)
        self._policy.validate_password(draft.password)

        if await self._user_repo.get_by_email(user.email):
            raise UserAlreadyExistsError(user.email)

        now = self._clock.now()
        user.id = self._id_generator.generate_uuid()
        user.password_hash = await self._password_hasher.hash(draft.password)
        user.is_blocked = False
        user.created_at = now
        user.updated_at = now
        await self._user_repo.create(user)

        self._logger.info("User registered", extra={"user_id": user.id, "role": user.role.value})
        return user

    async def login_user(self, email: str, password: str) -> LoginResult:
        """
        Autentica y emite un token bearer.

        "Email inexistente" y "contraseña incorrecta" colapsan en
        InvalidCredentialsError. El estado bloqueado solo se informa a quien
        presenta la contraseña correcta.
        """
        user = await self._user_repo.get_by_email(email.strip().lower())
        if not user:
            await self._password_hasher.verify(password, await self._get_dummy_hash())
            raise InvalidCredentialsError()

        if not await self._password_hasher.verify(password, user.password_hash):
            raise InvalidCredentialsError()

        if user.is_blocked:
            raise UserBlockedError(user.id)

        issued = self._token_issuer.issue(user.id, user.role)
        self._logger.info("User logged in", extra={"user_id": user.id})
        return LoginResult(
            user=user,
            access_token=issued.access_token,
            expires_at=issued.expires_at,
            token_type=issued.token_type,
        )

    async def get_user(self, user_id: str) -> User:
        user = await self._user_repo.get_by_id(user_id)
        if not user:
            raise UserNotFoundError(user_id)
        return user

    async def list_users(self, requester_role: UserRole) -> list[User]:
        if requester_role != UserRole.ADMIN:
            raise UnauthorizedError("listar usuarios")
        return await self._user_repo.list_all()

    async def block_user(self, user_id: str, requester_role: UserRole) -> User:
        """
        Bloquea al usuario y marca como vencidas sus reservaciones activas.

        La cascada no es transaccional: si falla a mitad, lo aplicado queda y
        se reporta el paso con CascadeError. Reintentar sobre un usuario ya
        bloqueado completa las revocaciones pendientes; solo cuando no queda
        ninguna se responde UserAlreadyBlockedError.
        """
        if requester_role != UserRole.ADMIN:
            raise UnauthorizedError("bloquear usuarios")

        user = await self._user_repo.get_by_id(user_id)
        if not user:
            raise UserNotFoundError(user_id)

        now = self._clock.now()
        if user.is_blocked:
            if not await self._revoke_active_reservations(user_id, now):
                raise UserAlreadyBlockedError(user_id)
            return user

        user.block(now)
        await self._user_repo.update(user)
        self._logger.warning("User blocked", extra={"user_id": user_id})

        await self._revoke_active_reservations(user_id, now)
        return user

    async def _revoke_active_reservations(self, user_id: str, now: datetime) -> int:
        """Marca como vencidas las reservaciones activas del usuario."""
        try:
            reservations = await self._reservation_repo.list_by_user(user_id)
        except DomainError as exc:
            raise CascadeError("list_user_reservations", user_id) from exc

        revoked = 0
        for reservation in reservations:
            if reservation.status != ReservationStatus.ACTIVE:
                continue
            try:
                reservation.mark_as_overdue(now)
                await self._reservation_repo.update(reservation)
            except DomainError as exc:
                raise CascadeError("mark_reservation_overdue", reservation.id) from exc
            revoked += 1
            self._logger.warning(
                "Reservation revoked by user block",
                extra={"reservation_id": reservation.id, "user_id": user_id},
            )

        return revoked

    async def unblock_user(self, user_id: str, requester_role: UserRole) -> User:
        if requester_role != UserRole.ADMIN:
            raise UnauthorizedError("desbloquear usuarios")

        user = await self._user_repo.get_by_id(user_id)
        if not user:
            raise UserNotFoundError(user_id)
        if not user.is_blocked:
            raise UserNotBlockedError(user_id)

        user.unblock(self._clock.now())
        await self._user_repo.update(user)
        self._logger.info("User unblocked", extra={"user_id": user_id})
        return user

    async def _get_dummy_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = await self._password_hasher.hash(_DUMMY_PASSWORD)
        return self._dummy_hash
