# Patient Management Feature - Schemas

from typing import Optional, List
from pydantic import BaseModel, EmailStr, Field, field_validator
from app.shared.schemas import ApiDateTime
from app.features.appointments.schemas import AppointmentResponse
from app.features.medical_records.schemas import MedicalRecordResponse
from app.features.prescriptions.schemas import PrescriptionResponse


# ============== Create / Update Patient ==============

class PatientRequest(BaseModel):
    """Patient fields accepted on create and on full update."""
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    date_of_birth: ApiDateTime
    gender: str = Field(..., min_length=1, max_length=20)
    contact_number: Optional[str] = Field(None, max_length=30)
    email: Optional[EmailStr] = None
    address: Optional[str] = Field(None, max_length=500)
    blood_type: Optional[str] = Field(None, max_length=5)
    allergies: Optional[str] = None

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class CreatePatientRequest(PatientRequest):
    """Request schema for creating a new patient."""


class UpdatePatientRequest(PatientRequest):
    """Request schema for replacing a patient's information."""


# ============== Patient Response ==============

class PatientResponse(BaseModel):
    """Response schema for patient data."""
    id: str
    doctor_id: str
    first_name: str
    last_name: str
    date_of_birth: ApiDateTime
    gender: str
    contact_number: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    blood_type: Optional[str] = None
    allergies: Optional[str] = None
    created_at: ApiDateTime
    updated_at: ApiDateTime


class PatientDetailResponse(PatientResponse):
    """Patient with their clinical history, newest first."""
    medical_records: List[MedicalRecordResponse] = []
    prescriptions: List[PrescriptionResponse] = []
    appointments: List[AppointmentResponse] = []
