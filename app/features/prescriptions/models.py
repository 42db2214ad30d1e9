# Prescriptions Feature - Models

from typing import Optional
from datetime import datetime
from beanie import Document, Indexed
from pydantic import Field
from app.shared.models import TimestampMixin, utc_now


class Prescription(Document, TimestampMixin):
    """
    Prescription document model.
    Issued by a doctor for one of their patients; active until expiry_date.
    """

    patient_id: Indexed(str)
    doctor_id: Indexed(str)

    medication: str
    dosage: str
    frequency: str
    duration: Optional[str] = None
    notes: Optional[str] = None

    issued_date: datetime = Field(default_factory=utc_now)
    expiry_date: Optional[datetime] = None

    class Settings:
        name = "prescriptions"
        use_state_management = True
        indexes = [
            [("patient_id", 1), ("issued_date", -1)],
        ]

    def is_active(self, now: datetime) -> bool:
        return self.expiry_date is not None and self.expiry_date >= now
