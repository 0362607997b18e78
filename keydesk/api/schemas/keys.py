from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from keydesk.domain.entities import Key


class KeyRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=200)
    description: str = ""
    is_active: bool = True


class KeyResponse(BaseModel):
    id: str
    name: str
    description: str
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_entity(cls, key: Key) -> "KeyResponse":
        return cls(
            id=key.id,
            name=key.name,
            description=key.description,
            is_active=key.is_active,
            created_at=key.created_at,
            updated_at=key.updated_at,
        )
