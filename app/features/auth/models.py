from beanie import Document, Indexed
from pydantic import EmailStr
from typing import Optional
from datetime import datetime
from app.shared.models import TimestampMixin


class User(Document, TimestampMixin):
    """User document model. Every user is a doctor owning their own patients."""

    email: Indexed(EmailStr, unique=True)
    password_hash: str
    first_name: str
    last_name: str
    role: str = "DOCTOR"
    is_active: bool = True

    # Google Calendar link, filled by the OAuth callback
    google_access_token: Optional[str] = None
    google_refresh_token: Optional[str] = None
    google_token_expiry: Optional[datetime] = None
    google_calendar_id: Optional[str] = None

    class Settings:
        name = "users"
        use_state_management = True

    class Config:
        json_schema_extra = {
            "example": {
                "email": "doctor@example.com",
                "first_name": "John",
                "last_name": "Smith",
                "role": "DOCTOR",
            }
        }

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def calendar_connected(self) -> bool:
        return bool(self.google_access_token)
