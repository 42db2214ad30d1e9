# Medical Records Feature - Schemas

from typing import Optional
from pydantic import BaseModel, Field
from app.shared.schemas import ApiDateTime, PatientSummary


class CreateMedicalRecordRequest(BaseModel):
    """Schema for creating a medical record."""
    patient_id: str = Field(..., min_length=1)
    diagnosis: str = Field(..., min_length=1)
    symptoms: Optional[str] = None
    vital_signs: Optional[str] = None
    notes: Optional[str] = None
    treatment_plan: Optional[str] = None
    record_date: Optional[ApiDateTime] = None
    follow_up_date: Optional[ApiDateTime] = None

    class Config:
        json_schema_extra = {
            "example": {
                "patient_id": "65f1c0ffee0000000000abcd",
                "diagnosis": "Seasonal allergic rhinitis",
                "symptoms": "Sneezing, congestion",
                "vital_signs": "BP 120/80, HR 72",
                "treatment_plan": "Antihistamines for two weeks",
                "follow_up_date": "2026-04-01T09:00:00.000Z",
            }
        }


class PatientMedicalRecordRequest(BaseModel):
    """Schema for creating a record under /patients/{patient_id}/medical-records."""
    diagnosis: str = Field(..., min_length=1)
    symptoms: Optional[str] = None
    vital_signs: Optional[str] = None
    notes: Optional[str] = None
    treatment_plan: Optional[str] = None
    record_date: Optional[ApiDateTime] = None
    follow_up_date: Optional[ApiDateTime] = None


class UpdateMedicalRecordRequest(BaseModel):
    """Schema for updating a medical record. Omitted fields are left as they are."""
    diagnosis: Optional[str] = Field(None, min_length=1)
    symptoms: Optional[str] = None
    vital_signs: Optional[str] = None
    notes: Optional[str] = None
    treatment_plan: Optional[str] = None
    record_date: Optional[ApiDateTime] = None
    follow_up_date: Optional[ApiDateTime] = None


class MedicalRecordResponse(BaseModel):
    """Schema for medical record response."""
    id: str
    patient_id: str
    doctor_id: Optional[str] = None
    diagnosis: str
    symptoms: Optional[str] = None
    vital_signs: Optional[str] = None
    notes: Optional[str] = None
    treatment_plan: Optional[str] = None
    record_date: ApiDateTime
    follow_up_date: Optional[ApiDateTime] = None
    patient: Optional[PatientSummary] = None
    created_at: ApiDateTime
    updated_at: ApiDateTime
