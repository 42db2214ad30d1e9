# Appointments Feature - Models

from enum import Enum
from typing import Optional
from datetime import datetime
from beanie import Document, Indexed
from app.shared.models import TimestampMixin


class AppointmentStatus(str, Enum):
    """Appointment lifecycle: created SCHEDULED, then COMPLETED or CANCELLED."""
    SCHEDULED = "SCHEDULED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class Appointment(Document, TimestampMixin):
    """Appointment document model. Owned through its patient."""

    patient_id: Indexed(str)
    appointment_date: datetime
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    notes: Optional[str] = None

    # Set while the appointment is mirrored on the doctor's Google Calendar
    google_calendar_event_id: Optional[str] = None

    class Settings:
        name = "appointments"
        use_state_management = True
        indexes = [
            [("patient_id", 1), ("appointment_date", 1)],
        ]
