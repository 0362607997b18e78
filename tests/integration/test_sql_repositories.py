"""
Repositorios SQL sobre SQLite (aiosqlite) en archivo temporal.

Verifican la unicidad física de reservaciones activas (índices parciales),
el bloqueo optimista por versión y la traducción de errores del driver.
"""

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio

from keydesk.config import Settings
from keydesk.domain.entities import Key, Reservation, ReservationStatus, User, UserRole
from keydesk.domain.errors import (
    ConcurrentModificationError,
    KeyAlreadyExistsError,
    KeyNotFoundError,
    KeyReservedError,
    ReservationAlreadyExistsError,
    ReservationNotFoundError,
    StorageError,
    UserAlreadyExistsError,
)
from keydesk.infrastructure.db.engine import build_engine, build_sessionmaker, create_schema
from keydesk.infrastructure.db.repositories import KeyRepoSQL, ReservationRepoSQL, UserRepoSQL

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def session_maker(tmp_path):
    engine = build_engine(Settings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'keydesk.db'}"))
    await create_schema(engine)
    yield build_sessionmaker(engine)
    await engine.dispose()


@pytest.fixture
def key_repo(session_maker):
    return KeyRepoSQL(session_maker)


@pytest.fixture
def user_repo(session_maker):
    return UserRepoSQL(session_maker)


@pytest.fixture
def reservation_repo(session_maker):
    return ReservationRepoSQL(session_maker)


def _key(key_id: str, name: str, is_active: bool = True) -> Key:
    return Key(id=key_id, name=name, description="", is_active=is_active, created_at=NOW, updated_at=NOW)


def _user(user_id: str, email: str) -> User:
    return User(
        id=user_id,
        name="Ana",
        email=email,
        password_hash="hash",
        role=UserRole.RESIDENT,
        created_at=NOW,
        updated_at=NOW,
    )


def _reservation(reservation_id: str, key_id: str, user_id: str, due_in: timedelta = timedelta(hours=1)) -> Reservation:
    return Reservation(
        id=reservation_id,
        key_id=key_id,
        user_id=user_id,
        reserved_at=NOW,
        due_at=NOW + due_in,
        created_at=NOW,
        updated_at=NOW,
    )


class TestKeyRepoSQL:
    @pytest.mark.asyncio
    async def test_round_trip(self, key_repo):
        key = _key("k1", "101-A")
        await key_repo.create(key)

        stored = await key_repo.get_by_id("k1")

        assert stored == key
        assert stored.version == 1
        assert stored.created_at.tzinfo is not None
        assert await key_repo.get_by_name("101-A") == key

    @pytest.mark.asyncio
    async def test_unique_name(self, key_repo):
        await key_repo.create(_key("k1", "101-A"))
        with pytest.raises(KeyAlreadyExistsError):
            await key_repo.create(_key("k2", "101-A"))

    @pytest.mark.asyncio
    async def test_optimistic_locking(self, key_repo):
        await key_repo.create(_key("k1", "101-A"))
        first = await key_repo.get_by_id("k1")
        second = await key_repo.get_by_id("k1")

        first.apply_changes("101-B", "", True, NOW)
        await key_repo.update(first)
        assert first.version == 2

        second.apply_changes("101-C", "", True, NOW)
        with pytest.raises(ConcurrentModificationError):
            await key_repo.update(second)
        assert (await key_repo.get_by_id("k1")).name == "101-B"

    @pytest.mark.asyncio
    async def test_update_and_delete_unknown(self, key_repo):
        with pytest.raises(KeyNotFoundError):
            await key_repo.update(_key("missing", "101-A"))
        with pytest.raises(KeyNotFoundError):
            await key_repo.delete("missing")

    @pytest.mark.asyncio
    async def test_list_available(self, key_repo, reservation_repo):
        await key_repo.create(_key("k1", "A libre"))
        await key_repo.create(_key("k2", "B inactiva", is_active=False))
        await key_repo.create(_key("k3", "C reservada"))
        await reservation_repo.create(_reservation("r1", "k3", "u1"))

        available = await key_repo.list_available()

        assert [k.id for k in available] == ["k1"]
        assert [k.id for k in await key_repo.list_all()] == ["k1", "k2", "k3"]


class TestUserRepoSQL:
    @pytest.mark.asyncio
    async def test_round_trip_and_unique_email(self, user_repo):
        user = _user("u1", "ana@building.com")
        await user_repo.create(user)

        assert await user_repo.get_by_email("ana@building.com") == user
        with pytest.raises(UserAlreadyExistsError):
            await user_repo.create(_user("u2", "ana@building.com"))

    @pytest.mark.asyncio
    async def test_block_persists(self, user_repo):
        await user_repo.create(_user("u1", "ana@building.com"))
        user = await user_repo.get_by_id("u1")

        user.block(NOW + timedelta(minutes=1))
        await user_repo.update(user)

        stored = await user_repo.get_by_id("u1")
        assert stored.is_blocked
        assert stored.version == 2


class TestReservationRepoSQL:
    @pytest.mark.asyncio
    async def test_second_active_for_same_key_is_rejected(self, reservation_repo):
        await reservation_repo.create(_reservation("r1", "k1", "u1"))

        with pytest.raises(KeyReservedError):
            await reservation_repo.create(_reservation("r2", "k1", "u2"))

    @pytest.mark.asyncio
    async def test_second_active_for_same_user_is_rejected(self, reservation_repo):
        await reservation_repo.create(_reservation("r1", "k1", "u1"))

        with pytest.raises(ReservationAlreadyExistsError):
            await reservation_repo.create(_reservation("r2", "k2", "u1"))

    @pytest.mark.asyncio
    async def test_returned_reservation_frees_the_index(self, reservation_repo):
        reservation = _reservation("r1", "k1", "u1")
        await reservation_repo.create(reservation)
        reservation.mark_as_returned(NOW + timedelta(minutes=10))
        await reservation_repo.update(reservation)

        await reservation_repo.create(_reservation("r2", "k1", "u1"))

        active = await reservation_repo.get_active_by_key("k1")
        assert active.id == "r2"
        assert {r.id for r in await reservation_repo.list_by_user("u1")} == {"r1", "r2"}

    @pytest.mark.asyncio
    async def test_list_overdue(self, reservation_repo):
        await reservation_repo.create(_reservation("r1", "k1", "u1", due_in=timedelta(minutes=30)))
        await reservation_repo.create(_reservation("r2", "k2", "u2", due_in=timedelta(hours=3)))

        overdue = await reservation_repo.list_overdue(NOW + timedelta(hours=1))

        assert [r.id for r in overdue] == ["r1"]
        assert overdue[0].status == ReservationStatus.ACTIVE
        assert overdue[0].due_at == NOW + timedelta(minutes=30)

    @pytest.mark.asyncio
    async def test_stale_update(self, reservation_repo):
        await reservation_repo.create(_reservation("r1", "k1", "u1"))
        first = await reservation_repo.get_by_id("r1")
        second = await reservation_repo.get_by_id("r1")

        first.mark_as_returned(NOW + timedelta(minutes=5))
        await reservation_repo.update(first)

        second.mark_as_overdue(NOW + timedelta(hours=2))
        with pytest.raises(ConcurrentModificationError):
            await reservation_repo.update(second)
        assert (await reservation_repo.get_by_id("r1")).status == ReservationStatus.RETURNED

    @pytest.mark.asyncio
    async def test_update_unknown(self, reservation_repo):
        with pytest.raises(ReservationNotFoundError):
            await reservation_repo.update(_reservation("missing", "k1", "u1"))


class TestStorageErrors:
    @pytest.mark.asyncio
    async def test_driver_error_becomes_storage_error(self, tmp_path):
        engine = build_engine(Settings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}"))
        repo = KeyRepoSQL(build_sessionmaker(engine))

        # Sin create_schema: la tabla no existe
        with pytest.raises(StorageError) as exc_info:
            await repo.get_by_id("k1")

        assert exc_info.value.operation == "keys.get_by_id"
        await engine.dispose()
