import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from keydesk import __version__
from keydesk.api.deps import Container, build_container
from keydesk.api.errors import register_exception_handlers
from keydesk.api.routers.admin import router as admin_router
from keydesk.api.routers.auth import router as auth_router
from keydesk.api.routers.health import router as health_router
from keydesk.api.routers.keys import router as keys_router
from keydesk.api.routers.reservations import router as reservations_router
from keydesk.application.dtos import RegisterUserDTO
from keydesk.config import Settings, get_settings
from keydesk.domain.entities import UserRole
from keydesk.domain.errors import UserAlreadyExistsError
from keydesk.infrastructure.db.engine import create_schema
from keydesk.infrastructure.messaging import OverdueSweepWorker

logger = logging.getLogger(__name__)


async def bootstrap_admin(container: Container) -> None:
    """Creates the configured admin account when it does not exist yet."""
    settings = container.settings
    if not (settings.admin_email and settings.admin_password):
        return
    try:
        await container.use_cases["users"].register_user(
            RegisterUserDTO(
                name=settings.admin_name or "Administrador",
                email=settings.admin_email,
                password=settings.admin_password,
                role=UserRole.ADMIN,
            ),
            requester_role=UserRole.ADMIN,
        )
        logger.info("Bootstrap admin created", extra={"email": settings.admin_email.lower()})
    except UserAlreadyExistsError:
        logger.info("Bootstrap admin already present")


@asynccontextmanager
async def lifespan(app: FastAPI):
    container: Container = app.state.container
    if container.engine is not None:
        await create_schema(container.engine)
    await bootstrap_admin(container)

    worker = None
    worker_task = None
    if container.settings.overdue_sweep_enabled:
        worker = OverdueSweepWorker(
            container.use_cases["reservations"],
            interval_seconds=container.settings.overdue_sweep_interval_seconds,
        )
        worker_task = asyncio.create_task(worker.start())

    yield

    if worker is not None:
        await worker.stop()
        with contextlib.suppress(asyncio.CancelledError):
            await worker_task
    if container.engine is not None:
        await container.engine.dispose()


def create_app(settings: Settings | None = None, container: Container | None = None) -> FastAPI:
    settings = settings or get_settings()
    container = container or build_container(settings)

    app = FastAPI(title="Keydesk API", version=__version__, lifespan=lifespan)
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials="*" not in settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(health_router, tags=["Health"])
    app.include_router(auth_router, prefix="/api/v1", tags=["Auth"])
    app.include_router(keys_router, prefix="/api/v1", tags=["Keys"])
    app.include_router(reservations_router, prefix="/api/v1", tags=["Reservations"])
    app.include_router(admin_router, prefix="/api/v1", tags=["Admin"])
    return app


logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = create_app()
