from fastapi import APIRouter, status

from keydesk.api.dependencies import CurrentPrincipal, UseCases
from keydesk.api.schemas.auth import LoginRequest, RegisterRequest, TokenResponse, UserResponse
from keydesk.application.dtos import RegisterUserDTO

router = APIRouter(prefix="/auth")


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(payload: RegisterRequest, use_cases: UseCases) -> UserResponse:
    user = await use_cases["users"].register_user(
        RegisterUserDTO(name=payload.name, email=payload.email, password=payload.password)
    )
    return UserResponse.from_entity(user)


@router.post("/login", response_model=TokenResponse)
async def login(payload: LoginRequest, use_cases: UseCases) -> TokenResponse:
    result = await use_cases["users"].login_user(payload.email, payload.password)
    return TokenResponse(
        access_token=result.access_token,
        token_type=result.token_type,
        expires_at=result.expires_at,
        user=UserResponse.from_entity(result.user),
    )


@router.get("/me", response_model=UserResponse)
async def me(principal: CurrentPrincipal, use_cases: UseCases) -> UserResponse:
    user = await use_cases["users"].get_user(principal.user_id)
    return UserResponse.from_entity(user)
