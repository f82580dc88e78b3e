from fastapi import APIRouter, status

from app.auth.dependencies import AuthServiceDep, CurrentUser
from app.auth.schemas import (
    AuthResponse,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    UpdateProfileRequest,
    UserResponse,
)

router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    data: RegisterRequest,
    auth_service: AuthServiceDep,
):
    """Register a new user with email and password. New users start with 0 points."""
    return auth_service.register(data)


@router.post("/login", response_model=AuthResponse)
def login(
    data: LoginRequest,
    auth_service: AuthServiceDep,
):
    """Login with email and password."""
    return auth_service.login(data.email, data.password)


@router.get("/me", response_model=UserResponse)
def get_me(
    current_user: CurrentUser,
    auth_service: AuthServiceDep,
):
    """Get current user profile, including the cached points balance."""
    return auth_service.get_me(current_user.id)


@router.patch("/me", response_model=UserResponse)
def update_profile(
    data: UpdateProfileRequest,
    current_user: CurrentUser,
    auth_service: AuthServiceDep,
):
    """Update display name or profile image URL."""
    return auth_service.update_profile(current_user.id, data)


@router.post("/logout-all", response_model=MessageResponse)
def logout_all(
    current_user: CurrentUser,
    auth_service: AuthServiceDep,
):
    """Revoke all access tokens of the current user."""
    auth_service.logout_all(current_user.id)
    return MessageResponse(message="Logged out from all devices.")
