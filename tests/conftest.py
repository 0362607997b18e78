"""
Fixtures compartidas.

- Reloj y generador de ids fake para pruebas deterministas
- Repositorios in-memory y casos de uso cableados sobre ellos
- Fábricas para sembrar usuarios y llaves directamente en los repositorios
"""

from datetime import timedelta

import pytest

from keydesk.application.interfaces.clock import FakeClock
from keydesk.application.interfaces.uuid_generator import FakeUUIDGenerator
from keydesk.application.use_cases import KeyUseCase, ReservationUseCase, UserUseCase
from keydesk.domain.entities import Key, User, UserRole
from keydesk.domain.validation import ValidationPolicy
from keydesk.infrastructure.in_memory import (
    InMemoryKeyRepo,
    InMemoryReservationRepo,
    InMemoryUserRepo,
)
from keydesk.infrastructure.security import BcryptPasswordHasher, JoseTokenIssuer

TEST_SECRET = "test-secret-key"
# Costo mínimo de bcrypt para que las pruebas sean rápidas
TEST_BCRYPT_ROUNDS = 4


@pytest.fixture
def clock() -> FakeClock:
    # Hora real al crear el fixture: los JWT se validan contra el reloj del sistema
    return FakeClock()


@pytest.fixture
def id_generator() -> FakeUUIDGenerator:
    return FakeUUIDGenerator()


@pytest.fixture
def policy() -> ValidationPolicy:
    return ValidationPolicy()


@pytest.fixture
def reservation_repo() -> InMemoryReservationRepo:
    return InMemoryReservationRepo()


@pytest.fixture
def key_repo(reservation_repo) -> InMemoryKeyRepo:
    return InMemoryKeyRepo(reservation_repo=reservation_repo)


@pytest.fixture
def user_repo() -> InMemoryUserRepo:
    return InMemoryUserRepo()


@pytest.fixture
def password_hasher() -> BcryptPasswordHasher:
    return BcryptPasswordHasher(rounds=TEST_BCRYPT_ROUNDS)


@pytest.fixture
def jwt_secret() -> str:
    return TEST_SECRET


@pytest.fixture
def token_issuer(clock, jwt_secret) -> JoseTokenIssuer:
    return JoseTokenIssuer(secret=jwt_secret, clock=clock)


@pytest.fixture
def reservation_use_case(reservation_repo, key_repo, user_repo, clock, id_generator):
    return ReservationUseCase(
        reservation_repo=reservation_repo,
        key_repo=key_repo,
        user_repo=user_repo,
        clock=clock,
        id_generator=id_generator,
    )


@pytest.fixture
def key_use_case(key_repo, reservation_repo, clock, id_generator, policy):
    return KeyUseCase(
        key_repo=key_repo,
        reservation_repo=reservation_repo,
        clock=clock,
        id_generator=id_generator,
        validation_policy=policy,
    )


@pytest.fixture
def user_use_case(user_repo, reservation_repo, password_hasher, token_issuer, clock, id_generator, policy):
    return UserUseCase(
        user_repo=user_repo,
        reservation_repo=reservation_repo,
        password_hasher=password_hasher,
        token_issuer=token_issuer,
        clock=clock,
        id_generator=id_generator,
        validation_policy=policy,
    )


@pytest.fixture
def make_user(user_repo, clock, id_generator):
    """Fábrica: persiste un usuario sin pasar por el registro."""

    async def _make_user(
        name: str = "Ana Resident",
        email: str | None = None,
        role: UserRole = UserRole.RESIDENT,
        is_blocked: bool = False,
    ) -> User:
        user_id = id_generator.generate_uuid()
        user = User(
            id=user_id,
            name=name,
            email=email or f"user-{user_id[-4:]}@building.com",
            password_hash="not-a-real-hash",
            role=role,
            is_blocked=is_blocked,
            created_at=clock.now(),
            updated_at=clock.now(),
        )
        await user_repo.create(user)
        return user

    return _make_user


@pytest.fixture
def make_key(key_repo, clock, id_generator):
    """Fábrica: persiste una llave sin pasar por el caso de uso."""

    async def _make_key(name: str | None = None, is_active: bool = True) -> Key:
        key_id = id_generator.generate_uuid()
        key = Key(
            id=key_id,
            name=name or f"Llave {key_id[-4:]}",
            description="Sala común",
            is_active=is_active,
            created_at=clock.now(),
            updated_at=clock.now(),
        )
        await key_repo.create(key)
        return key

    return _make_key


@pytest.fixture
def in_one_hour(clock):
    return clock.now() + timedelta(hours=1)
