import logging

from fastapi import APIRouter, status

from keydesk.api.dependencies import AdminPrincipal, UseCases
from keydesk.api.schemas.auth import AdminCreateUserRequest, UserResponse
from keydesk.api.schemas.reservations import (
    ExtendReservationRequest,
    ProcessOverdueResponse,
    ReservationResponse,
)
from keydesk.application.dtos import RegisterUserDTO
from keydesk.infrastructure.db.retry import retry_on_deadlock

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin")


@router.get("/reservations", response_model=list[ReservationResponse])
async def list_all_reservations(
    principal: AdminPrincipal,
    use_cases: UseCases,
) -> list[ReservationResponse]:
    reservations = await use_cases["reservations"].get_all_reservations(principal.role)
    return [ReservationResponse.from_entity(r) for r in reservations]


@router.put("/reservations/{reservation_id}/extend", response_model=ReservationResponse)
async def extend_reservation(
    reservation_id: str,
    payload: ExtendReservationRequest,
    principal: AdminPrincipal,
    use_cases: UseCases,
) -> ReservationResponse:
    reservation = await use_cases["reservations"].extend_reservation(
        reservation_id, payload.new_due_at, principal.role
    )
    if payload.reason:
        logger.info(
            "Extension reason recorded",
            extra={"reservation_id": reservation_id, "reason": payload.reason},
        )
    return ReservationResponse.from_entity(reservation)


@router.post("/reservations/process-overdue", response_model=ProcessOverdueResponse)
async def process_overdue(principal: AdminPrincipal, use_cases: UseCases) -> ProcessOverdueResponse:
    """
    Runs the overdue sweep on demand, retrying on database deadlocks.

    Reservations already marked overdue are skipped on a retry.
    """

    async def execute_sweep():
        return await use_cases["reservations"].process_overdue_reservations()

    processed = await retry_on_deadlock(execute_sweep, max_attempts=3, base_delay=0.1)
    return ProcessOverdueResponse(processed=processed)


@router.get("/users", response_model=list[UserResponse])
async def list_users(principal: AdminPrincipal, use_cases: UseCases) -> list[UserResponse]:
    users = await use_cases["users"].list_users(principal.role)
    return [UserResponse.from_entity(u) for u in users]


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: AdminCreateUserRequest,
    principal: AdminPrincipal,
    use_cases: UseCases,
) -> UserResponse:
    user = await use_cases["users"].register_user(
        RegisterUserDTO(
            name=payload.name,
            email=payload.email,
            password=payload.password,
            role=payload.role,
        ),
        requester_role=principal.role,
    )
    return UserResponse.from_entity(user)


@router.post("/users/{user_id}/block", response_model=UserResponse)
async def block_user(user_id: str, principal: AdminPrincipal, use_cases: UseCases) -> UserResponse:
    user = await use_cases["users"].block_user(user_id, principal.role)
    return UserResponse.from_entity(user)


@router.post("/users/{user_id}/unblock", response_model=UserResponse)
async def unblock_user(user_id: str, principal: AdminPrincipal, use_cases: UseCases) -> UserResponse:
    user = await use_cases["users"].unblock_user(user_id, principal.role)
    return UserResponse.from_entity(user)
