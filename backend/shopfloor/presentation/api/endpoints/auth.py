"""Personnel endpoints — registration, login and admin-gated updates."""

from fastapi import APIRouter, Depends, Header, HTTPException, status

from shopfloor.application.schemas import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    UpdatePersonnelRequest,
    UpdatePersonnelResponse,
    UsernameSchema,
    UserSummarySchema,
)
from shopfloor.application.services import AuthService
from shopfloor.domain.exceptions import (
    AccessDeniedError,
    DuplicateEntityError,
    EntityNotFoundError,
    InvalidCredentialsError,
)
from shopfloor.infrastructure.dependencies import get_auth_service

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(
    data: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
) -> RegisterResponse:
    """Create a personnel account. Requires the master setup key."""
    try:
        user = await service.register(data.username, data.password, data.setup_key)
    except AccessDeniedError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid Master Setup Key"
        )
    except DuplicateEntityError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User exists")
    return RegisterResponse(data=UsernameSchema(username=user.username))


@router.post("/login", response_model=LoginResponse)
async def login(
    data: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    try:
        user = await service.login(data.username, data.password)
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    return LoginResponse(user=UserSummarySchema(username=user.username, role=user.role))


@router.post("/update", response_model=UpdatePersonnelResponse)
async def update_personnel(
    data: UpdatePersonnelRequest,
    x_admin_key: str | None = Header(None),
    service: AuthService = Depends(get_auth_service),
) -> UpdatePersonnelResponse:
    """Rename a user and/or reset their password. Requires the admin key."""
    try:
        user = await service.update_personnel(
            data.current_username,
            new_username=data.new_username,
            new_password=data.new_password,
            admin_key=data.key or x_admin_key,
        )
    except AccessDeniedError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    except EntityNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    except DuplicateEntityError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return UpdatePersonnelResponse(
        message="Personnel record updated",
        data=UsernameSchema(username=user.username),
    )
