"""Pruebas de registro, login y bloqueo de usuarios."""

from datetime import timedelta

import pytest

from keydesk.application.dtos import RegisterUserDTO, ReservationDraft
from keydesk.domain.entities import ReservationStatus, UserRole
from keydesk.domain.errors import (
    CascadeError,
    InvalidCredentialsError,
    StorageError,
    UnauthorizedError,
    UserAlreadyBlockedError,
    UserAlreadyExistsError,
    UserBlockedError,
    UserNotBlockedError,
    UserNotFoundError,
    ValidationError,
)

PASSWORD = "Secret123!"


def _alice(**overrides) -> RegisterUserDTO:
    values = {"name": "Alice", "email": "alice@example.com", "password": PASSWORD}
    values.update(overrides)
    return RegisterUserDTO(**values)


class TestRegisterUser:
    @pytest.mark.asyncio
    async def test_registers_resident(self, user_use_case, user_repo, password_hasher):
        user = await user_use_case.register_user(_alice(email="  Alice@Example.COM "))

        assert user.email == "alice@example.com"
        assert user.role == UserRole.RESIDENT
        assert not user.is_blocked
        assert user.password_hash != PASSWORD
        assert await password_hasher.verify(PASSWORD, user.password_hash)
        assert await user_repo.get_by_email("alice@example.com") == user

    @pytest.mark.asyncio
    async def test_duplicate_email(self, user_use_case):
        await user_use_case.register_user(_alice())
        with pytest.raises(UserAlreadyExistsError):
            await user_use_case.register_user(_alice(email="ALICE@example.com"))

    @pytest.mark.asyncio
    async def test_weak_password(self, user_use_case, user_repo):
        with pytest.raises(ValidationError):
            await user_use_case.register_user(_alice(password="password"))
        assert await user_repo.list_all() == []

    @pytest.mark.asyncio
    async def test_invalid_name(self, user_use_case):
        with pytest.raises(ValidationError):
            await user_use_case.register_user(_alice(name="<script>"))

    @pytest.mark.asyncio
    async def test_admin_role_requires_admin_requester(self, user_use_case):
        with pytest.raises(UnauthorizedError):
            await user_use_case.register_user(_alice(role=UserRole.ADMIN))

        admin = await user_use_case.register_user(_alice(role=UserRole.ADMIN), requester_role=UserRole.ADMIN)
        assert admin.is_admin


class TestLoginUser:
    @pytest.mark.asyncio
    async def test_login_round_trip(self, user_use_case, token_issuer):
        """Escenario A: login correcto emite token; contraseña incorrecta no."""
        user = await user_use_case.register_user(_alice())

        result = await user_use_case.login_user("alice@example.com", PASSWORD)

        assert result.user.id == user.id
        assert result.token_type == "bearer"
        claims = token_issuer.decode(result.access_token)
        assert claims.user_id == user.id
        assert claims.role == UserRole.RESIDENT

        with pytest.raises(InvalidCredentialsError):
            await user_use_case.login_user("alice@example.com", "Wrong123!")

    @pytest.mark.asyncio
    async def test_unknown_email_looks_like_wrong_password(self, user_use_case):
        with pytest.raises(InvalidCredentialsError):
            await user_use_case.login_user("nobody@example.com", PASSWORD)

    @pytest.mark.asyncio
    async def test_email_lookup_is_case_insensitive(self, user_use_case):
        await user_use_case.register_user(_alice())
        result = await user_use_case.login_user("ALICE@example.com", PASSWORD)
        assert result.access_token

    @pytest.mark.asyncio
    async def test_blocked_user_with_correct_password(self, user_use_case):
        user = await user_use_case.register_user(_alice())
        await user_use_case.block_user(user.id, UserRole.ADMIN)

        with pytest.raises(UserBlockedError):
            await user_use_case.login_user("alice@example.com", PASSWORD)

    @pytest.mark.asyncio
    async def test_blocked_status_hidden_behind_wrong_password(self, user_use_case):
        user = await user_use_case.register_user(_alice())
        await user_use_case.block_user(user.id, UserRole.ADMIN)

        with pytest.raises(InvalidCredentialsError):
            await user_use_case.login_user("alice@example.com", "Wrong123!")


class TestBlockUser:
    @pytest.mark.asyncio
    async def test_block_revokes_active_reservations(
        self, user_use_case, reservation_use_case, reservation_repo, make_user, make_key, clock
    ):
        user = await make_user()
        key = await make_key()
        reservation = await reservation_use_case.create_reservation(
            ReservationDraft(key_id=key.id, user_id=user.id, due_at=clock.now() + timedelta(hours=1))
        )

        blocked = await user_use_case.block_user(user.id, UserRole.ADMIN)

        assert blocked.is_blocked
        stored = await reservation_repo.get_by_id(reservation.id)
        assert stored.status == ReservationStatus.OVERDUE
        # La llave vuelve a estar disponible
        assert await reservation_repo.get_active_by_key(key.id) is None

    @pytest.mark.asyncio
    async def test_resident_cannot_block(self, user_use_case, make_user):
        user = await make_user()
        with pytest.raises(UnauthorizedError):
            await user_use_case.block_user(user.id, UserRole.RESIDENT)

    @pytest.mark.asyncio
    async def test_block_twice(self, user_use_case, make_user):
        user = await make_user()
        await user_use_case.block_user(user.id, UserRole.ADMIN)
        with pytest.raises(UserAlreadyBlockedError):
            await user_use_case.block_user(user.id, UserRole.ADMIN)

    @pytest.mark.asyncio
    async def test_block_unknown(self, user_use_case):
        with pytest.raises(UserNotFoundError):
            await user_use_case.block_user("missing", UserRole.ADMIN)

    @pytest.mark.asyncio
    async def test_cascade_failure_keeps_block(
        self, user_use_case, reservation_use_case, reservation_repo, user_repo, make_user, make_key, clock, monkeypatch
    ):
        user = await make_user()
        key = await make_key()
        reservation = await reservation_use_case.create_reservation(
            ReservationDraft(key_id=key.id, user_id=user.id, due_at=clock.now() + timedelta(hours=1))
        )

        async def failing_update(_reservation):
            raise StorageError("reservations.update")

        monkeypatch.setattr(reservation_repo, "update", failing_update)

        with pytest.raises(CascadeError) as exc_info:
            await user_use_case.block_user(user.id, UserRole.ADMIN)

        assert exc_info.value.entity_id == reservation.id
        assert (await user_repo.get_by_id(user.id)).is_blocked

        # Reintentar completa la revocación pendiente
        monkeypatch.undo()
        retried = await user_use_case.block_user(user.id, UserRole.ADMIN)

        assert retried.is_blocked
        assert (await reservation_repo.get_by_id(reservation.id)).status == ReservationStatus.OVERDUE

        # Sin nada pendiente, un tercer intento es un conflicto
        with pytest.raises(UserAlreadyBlockedError):
            await user_use_case.block_user(user.id, UserRole.ADMIN)


class TestUnblockUser:
    @pytest.mark.asyncio
    async def test_unblock(self, user_use_case, make_user):
        user = await make_user(is_blocked=True)
        unblocked = await user_use_case.unblock_user(user.id, UserRole.ADMIN)
        assert not unblocked.is_blocked

    @pytest.mark.asyncio
    async def test_unblock_not_blocked(self, user_use_case, make_user):
        user = await make_user()
        with pytest.raises(UserNotBlockedError):
            await user_use_case.unblock_user(user.id, UserRole.ADMIN)

    @pytest.mark.asyncio
    async def test_resident_cannot_unblock(self, user_use_case, make_user):
        user = await make_user(is_blocked=True)
        with pytest.raises(UnauthorizedError):
            await user_use_case.unblock_user(user.id, UserRole.RESIDENT)


class TestListUsers:
    @pytest.mark.asyncio
    async def test_admin_lists_users(self, user_use_case, make_user):
        await make_user(email="b@building.com")
        await make_user(email="a@building.com")
        users = await user_use_case.list_users(UserRole.ADMIN)
        assert [u.email for u in users] == ["a@building.com", "b@building.com"]

    @pytest.mark.asyncio
    async def test_resident_cannot_list(self, user_use_case):
        with pytest.raises(UnauthorizedError):
            await user_use_case.list_users(UserRole.RESIDENT)
