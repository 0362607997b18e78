from fastapi import APIRouter, status

from keydesk.api.dependencies import CurrentPrincipal, UseCases
from keydesk.api.schemas.reservations import CreateReservationRequest, ReservationResponse
from keydesk.application.dtos import ReservationDraft
from keydesk.domain.entities import ReservationStatus

router = APIRouter(prefix="/reservations")


@router.post("", response_model=ReservationResponse, status_code=status.HTTP_201_CREATED)
async def create_reservation(
    payload: CreateReservationRequest,
    principal: CurrentPrincipal,
    use_cases: UseCases,
) -> ReservationResponse:
    reservation = await use_cases["reservations"].create_reservation(
        ReservationDraft(key_id=payload.key_id, user_id=principal.user_id, due_at=payload.due_at)
    )
    return ReservationResponse.from_entity(reservation)


@router.get("", response_model=list[ReservationResponse])
async def list_my_active_reservations(
    principal: CurrentPrincipal,
    use_cases: UseCases,
) -> list[ReservationResponse]:
    """Reservaciones activas del usuario autenticado."""
    reservations = await use_cases["reservations"].get_user_reservations(principal.user_id)
    return [
        ReservationResponse.from_entity(r)
        for r in reservations
        if r.status == ReservationStatus.ACTIVE
    ]


@router.get("/history", response_model=list[ReservationResponse])
async def list_my_reservation_history(
    principal: CurrentPrincipal,
    use_cases: UseCases,
) -> list[ReservationResponse]:
    reservations = await use_cases["reservations"].get_user_reservations(principal.user_id)
    return [ReservationResponse.from_entity(r) for r in reservations]


@router.put("/{reservation_id}/return", response_model=ReservationResponse)
async def return_key(
    reservation_id: str,
    principal: CurrentPrincipal,
    use_cases: UseCases,
) -> ReservationResponse:
    reservation = await use_cases["reservations"].return_key(reservation_id, principal.user_id)
    return ReservationResponse.from_entity(reservation)
