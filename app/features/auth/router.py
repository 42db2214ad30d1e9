from fastapi import APIRouter, Depends, status
from app.features.auth.schemas import (
    RegisterRequest,
    LoginRequest,
    ChangePasswordRequest,
    UpdateProfileRequest,
    AuthResponse,
    UserResponse,
)
from app.features.auth.service import AuthService
from app.features.auth.dependencies import get_current_user
from app.features.auth.models import User
from app.shared.schemas import MessageResponse


router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(register_data: RegisterRequest):
    """
    Register a new doctor account.

    - **email**: Doctor's email address
    - **password**: Password (min 6 chars)
    - **first_name** / **last_name**: Doctor's name
    """
    user, token = await AuthService.register(register_data)

    return AuthResponse(user=AuthService.user_to_response(user), token=token)


@router.post("/login", response_model=AuthResponse)
async def login(login_data: LoginRequest):
    """
    Authenticate user and return access token.

    - **email**: User's email address
    - **password**: User's password
    """
    user, token = await AuthService.login(login_data)

    return AuthResponse(user=AuthService.user_to_response(user), token=token)


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: User = Depends(get_current_user)):
    """
    Get current authenticated user's information.

    Requires authentication.
    """
    return AuthService.user_to_response(current_user)


@router.put("/me", response_model=UserResponse)
async def update_profile(
    update_data: UpdateProfileRequest,
    current_user: User = Depends(get_current_user)
):
    """
    Update current user's profile information.

    Requires authentication.
    """
    updated_user = await AuthService.update_profile(
        current_user,
        update_data.model_dump(exclude_unset=True)
    )

    return AuthService.user_to_response(updated_user)


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    request: ChangePasswordRequest,
    current_user: User = Depends(get_current_user)
):
    """
    Change current user's password.

    Requires authentication.
    """
    await AuthService.change_password(
        current_user,
        request.current_password,
        request.new_password
    )

    return MessageResponse(message="Password changed successfully")
