from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from keydesk.domain.entities import Reservation, ReservationStatus


class CreateReservationRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    key_id: str = Field(min_length=1)
    due_at: datetime


class ExtendReservationRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    new_due_at: datetime
    reason: str | None = Field(default=None, max_length=500)


class ReservationResponse(BaseModel):
    id: str
    key_id: str
    user_id: str
    status: ReservationStatus
    reserved_at: datetime | None = None
    due_at: datetime
    returned_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_entity(cls, reservation: Reservation) -> "ReservationResponse":
        return cls(
            id=reservation.id,
            key_id=reservation.key_id,
            user_id=reservation.user_id,
            status=reservation.status,
            reserved_at=reservation.reserved_at,
            due_at=reservation.due_at,
            returned_at=reservation.returned_at,
            created_at=reservation.created_at,
            updated_at=reservation.updated_at,
        )


class ProcessOverdueResponse(BaseModel):
    processed: int
