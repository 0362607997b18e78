from fastapi import APIRouter, Response, status

from keydesk.api.dependencies import AdminPrincipal, CurrentPrincipal, UseCases
from keydesk.api.schemas.keys import KeyRequest, KeyResponse
from keydesk.application.dtos import KeyDraft

router = APIRouter(prefix="/keys")


@router.get("", response_model=list[KeyResponse])
async def list_keys(_: CurrentPrincipal, use_cases: UseCases) -> list[KeyResponse]:
    keys = await use_cases["keys"].get_all_keys()
    return [KeyResponse.from_entity(key) for key in keys]


@router.get("/available", response_model=list[KeyResponse])
async def list_available_keys(_: CurrentPrincipal, use_cases: UseCases) -> list[KeyResponse]:
    keys = await use_cases["keys"].get_available_keys()
    return [KeyResponse.from_entity(key) for key in keys]


@router.get("/{key_id}", response_model=KeyResponse)
async def get_key(key_id: str, _: CurrentPrincipal, use_cases: UseCases) -> KeyResponse:
    key = await use_cases["keys"].get_key_by_id(key_id)
    return KeyResponse.from_entity(key)


@router.post("", response_model=KeyResponse, status_code=status.HTTP_201_CREATED)
async def create_key(
    payload: KeyRequest,
    principal: AdminPrincipal,
    use_cases: UseCases,
) -> KeyResponse:
    key = await use_cases["keys"].create_key(
        KeyDraft(name=payload.name, description=payload.description),
        principal.role,
    )
    return KeyResponse.from_entity(key)


@router.put("/{key_id}", response_model=KeyResponse)
async def update_key(
    key_id: str,
    payload: KeyRequest,
    principal: AdminPrincipal,
    use_cases: UseCases,
) -> KeyResponse:
    key = await use_cases["keys"].update_key(
        key_id,
        KeyDraft(name=payload.name, description=payload.description, is_active=payload.is_active),
        principal.role,
    )
    return KeyResponse.from_entity(key)


@router.delete("/{key_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_key(key_id: str, principal: AdminPrincipal, use_cases: UseCases) -> Response:
    await use_cases["keys"].delete_key(key_id, principal.role)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
