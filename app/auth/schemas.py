from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from app.auth.models import UserRole


# ============ Request Schemas ============

class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    display_name: str | None = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class UpdateProfileRequest(BaseModel):
    display_name: str | None = None
    profile_image_url: str | None = Field(
        None, description="URL returned by the image hosting service"
    )


# ============ Response Schemas ============

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds


class UserResponse(BaseModel):
    id: int
    email: str | None
    display_name: str | None
    role: UserRole
    profile_image_url: str | None
    points: int
    created_at: datetime

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    user: UserResponse
    tokens: TokenResponse


class MessageResponse(BaseModel):
    message: str
