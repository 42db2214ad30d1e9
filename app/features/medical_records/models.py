# Medical Records Feature - Models

from typing import Optional
from datetime import datetime
from beanie import Document, Indexed
from pydantic import Field
from app.shared.models import TimestampMixin, utc_now


class MedicalRecord(Document, TimestampMixin):
    """
    Medical record document model.
    A dated clinical entry for a patient, owned through that patient.
    """

    patient_id: Indexed(str)

    # Doctor who wrote the record
    doctor_id: Optional[str] = None

    diagnosis: str
    symptoms: Optional[str] = None
    vital_signs: Optional[str] = None
    notes: Optional[str] = None
    treatment_plan: Optional[str] = None

    record_date: datetime = Field(default_factory=utc_now)
    follow_up_date: Optional[datetime] = None

    class Settings:
        name = "medical_records"
        use_state_management = True
        indexes = [
            [("patient_id", 1), ("record_date", -1)],
        ]
