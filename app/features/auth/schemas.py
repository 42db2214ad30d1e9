from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from app.shared.schemas import ApiDateTime


# Request Schemas
class RegisterRequest(BaseModel):
    """Registration request schema."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=100)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)

    @field_validator('password')
    @classmethod
    def validate_password(cls, v: str) -> str:
        if len(v) < 6:
            raise ValueError('Password must be at least 6 characters long')
        return v


class LoginRequest(BaseModel):
    """Login request schema."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class ChangePasswordRequest(BaseModel):
    """Change password request schema."""

    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, max_length=100)


class UpdateProfileRequest(BaseModel):
    """Update profile request schema."""

    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)


# Response Schemas
class UserResponse(BaseModel):
    """User response schema."""

    id: str
    email: EmailStr
    first_name: str
    last_name: str
    role: str
    is_active: bool
    calendar_connected: bool = False
    created_at: ApiDateTime
    updated_at: ApiDateTime


class AuthResponse(BaseModel):
    """Login and registration response schema."""

    user: UserResponse
    token: str
    token_type: str = "bearer"


class GoogleAuthUrlResponse(BaseModel):
    """Google Calendar authorization URL."""

    auth_url: str
