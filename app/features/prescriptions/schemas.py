# Prescriptions Feature - Schemas

from typing import Optional
from pydantic import BaseModel, Field
from app.shared.schemas import ApiDateTime, PatientSummary


class PatientPrescriptionRequest(BaseModel):
    """Schema for issuing a prescription under /patients/{patient_id}/prescriptions."""
    medication: str = Field(..., min_length=1, max_length=200)
    dosage: str = Field(..., min_length=1, max_length=100)
    frequency: str = Field(..., min_length=1, max_length=100)
    duration: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = None
    expiry_date: Optional[ApiDateTime] = None


class CreatePrescriptionRequest(PatientPrescriptionRequest):
    """Schema for issuing a prescription."""
    patient_id: str = Field(..., min_length=1)

    class Config:
        json_schema_extra = {
            "example": {
                "patient_id": "65f1c0ffee0000000000abcd",
                "medication": "Amoxicillin",
                "dosage": "500mg",
                "frequency": "Three times daily",
                "duration": "7 days",
                "expiry_date": "2026-04-01T00:00:00.000Z",
            }
        }


class UpdatePrescriptionRequest(BaseModel):
    """Schema for updating a prescription. Omitted fields are left as they are."""
    medication: Optional[str] = Field(None, min_length=1, max_length=200)
    dosage: Optional[str] = Field(None, min_length=1, max_length=100)
    frequency: Optional[str] = Field(None, min_length=1, max_length=100)
    duration: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = None
    issued_date: Optional[ApiDateTime] = None
    expiry_date: Optional[ApiDateTime] = None


class PrescriptionResponse(BaseModel):
    """Schema for prescription response."""
    id: str
    patient_id: str
    doctor_id: str
    medication: str
    dosage: str
    frequency: str
    duration: Optional[str] = None
    notes: Optional[str] = None
    issued_date: ApiDateTime
    expiry_date: Optional[ApiDateTime] = None
    is_active: bool = False
    patient: Optional[PatientSummary] = None
    created_at: ApiDateTime
    updated_at: ApiDateTime
