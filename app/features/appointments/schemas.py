# Appointments Feature - Schemas

from typing import Optional
from pydantic import BaseModel, Field
from app.features.appointments.models import AppointmentStatus
from app.shared.schemas import ApiDateTime, PatientSummary


class CreateAppointmentRequest(BaseModel):
    """Request schema for booking an appointment."""
    patient_id: str = Field(..., min_length=1)
    appointment_date: ApiDateTime
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    notes: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "patient_id": "65f1c0ffee0000000000abcd",
                "appointment_date": "2026-03-01T09:30:00.000Z",
                "notes": "Follow-up on blood pressure",
            }
        }


class UpdateAppointmentRequest(BaseModel):
    """Request schema for changing an appointment. Omitted fields are left as they are."""
    appointment_date: Optional[ApiDateTime] = None
    status: Optional[AppointmentStatus] = None
    notes: Optional[str] = None


class AppointmentResponse(BaseModel):
    """Response schema for appointment data."""
    id: str
    patient_id: str
    appointment_date: ApiDateTime
    status: AppointmentStatus
    notes: Optional[str] = None
    google_calendar_event_id: Optional[str] = None
    patient: Optional[PatientSummary] = None
    created_at: ApiDateTime
    updated_at: ApiDateTime
