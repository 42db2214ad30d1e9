# Patient Management Feature - Models

from typing import Optional
from datetime import datetime
from beanie import Document, Indexed
from app.shared.models import TimestampMixin


class Patient(Document, TimestampMixin):
    """Patient document model. Each patient belongs to exactly one doctor."""

    # Owning doctor (User._id)
    doctor_id: Indexed(str)

    # Personal information
    first_name: str
    last_name: str
    date_of_birth: datetime
    gender: str
    contact_number: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None

    # Health information
    blood_type: Optional[str] = None
    allergies: Optional[str] = None

    class Settings:
        name = "patients"
        use_state_management = True
        indexes = [
            [("doctor_id", 1), ("updated_at", -1)],
        ]

    class Config:
        json_schema_extra = {
            "example": {
                "doctor_id": "65f1c0ffee0000000000abcd",
                "first_name": "Sarah",
                "last_name": "Johnson",
                "date_of_birth": "1990-05-15T00:00:00",
                "gender": "Female",
                "contact_number": "555-1234",
                "email": "sarah.johnson@email.com",
                "address": "123 Main St",
                "blood_type": "A+",
                "allergies": "Penicillin",
            }
        }

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
