"""Wiring of repositories, security adapters and use cases."""

from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncEngine

from keydesk.application.interfaces.clock import Clock, SystemClock
from keydesk.application.interfaces.token_issuer import TokenIssuer
from keydesk.application.interfaces.uuid_generator import RealUUIDGenerator, UUIDGenerator
from keydesk.application.use_cases import KeyUseCase, ReservationUseCase, UserUseCase
from keydesk.config import Settings
from keydesk.domain.validation import ValidationPolicy
from keydesk.infrastructure.db.engine import build_engine, build_sessionmaker
from keydesk.infrastructure.db.repositories import KeyRepoSQL, ReservationRepoSQL, UserRepoSQL
from keydesk.infrastructure.in_memory import (
    InMemoryKeyRepo,
    InMemoryReservationRepo,
    InMemoryUserRepo,
)
from keydesk.infrastructure.security import BcryptPasswordHasher, JoseTokenIssuer


@dataclass
class Container:
    settings: Settings
    token_issuer: TokenIssuer
    use_cases: dict = field(default_factory=dict)
    engine: AsyncEngine | None = None


def build_container(
    settings: Settings,
    clock: Clock | None = None,
    id_generator: UUIDGenerator | None = None,
) -> Container:
    clock = clock or SystemClock()
    id_generator = id_generator or RealUUIDGenerator()
    policy = ValidationPolicy()

    engine = None
    if settings.use_in_memory:
        reservation_repo = InMemoryReservationRepo()
        key_repo = InMemoryKeyRepo(reservation_repo=reservation_repo)
        user_repo = InMemoryUserRepo()
    else:
        engine = build_engine(settings)
        session_maker = build_sessionmaker(engine)
        reservation_repo = ReservationRepoSQL(session_maker)
        key_repo = KeyRepoSQL(session_maker)
        user_repo = UserRepoSQL(session_maker)

    token_issuer = JoseTokenIssuer(
        secret=settings.jwt_secret,
        clock=clock,
        algorithm=settings.jwt_algorithm,
        expire_hours=settings.access_token_expire_hours,
    )
    password_hasher = BcryptPasswordHasher(rounds=settings.bcrypt_rounds)

    use_cases = {
        "reservations": ReservationUseCase(
            reservation_repo=reservation_repo,
            key_repo=key_repo,
            user_repo=user_repo,
            clock=clock,
            id_generator=id_generator,
        ),
        "keys": KeyUseCase(
            key_repo=key_repo,
            reservation_repo=reservation_repo,
            clock=clock,
            id_generator=id_generator,
            validation_policy=policy,
        ),
        "users": UserUseCase(
            user_repo=user_repo,
            reservation_repo=reservation_repo,
            password_hasher=password_hasher,
            token_issuer=token_issuer,
            clock=clock,
            id_generator=id_generator,
            validation_policy=policy,
        ),
    }
    return Container(
        settings=settings,
        token_issuer=token_issuer,
        use_cases=use_cases,
        engine=engine,
    )
