# Medical Records Feature - Router

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from app.features.medical_records.schemas import (
    CreateMedicalRecordRequest,
    UpdateMedicalRecordRequest,
    MedicalRecordResponse,
)
from app.features.medical_records.service import MedicalRecordService
from app.features.auth.dependencies import get_current_user_id
from app.shared.schemas import MessageResponse


router = APIRouter(prefix="/medical-records", tags=["Medical Records"])


@router.get("", response_model=List[MedicalRecordResponse])
async def list_medical_records(
    patient_id: Optional[str] = Query(None, description="Only this patient's records"),
    doctor_id: str = Depends(get_current_user_id)
):
    """List the current doctor's medical records, newest first."""
    return await MedicalRecordService.list_records(doctor_id, patient_id=patient_id)


@router.post("", response_model=MedicalRecordResponse, status_code=status.HTTP_201_CREATED)
async def create_medical_record(
    request: CreateMedicalRecordRequest,
    doctor_id: str = Depends(get_current_user_id)
):
    """
    Create a medical record.

    - **patient_id**: Patient ID
    - **diagnosis**: Diagnosis (required)
    - **record_date**: Defaults to now
    """
    record, patient = await MedicalRecordService.create_record(doctor_id, request)
    return MedicalRecordService.record_to_response(record, patient)


@router.get("/{record_id}", response_model=MedicalRecordResponse)
async def get_medical_record(
    record_id: str,
    doctor_id: str = Depends(get_current_user_id)
):
    """Get one medical record."""
    record, patient = await MedicalRecordService.get_record(record_id, doctor_id)
    return MedicalRecordService.record_to_response(record, patient)


@router.put("/{record_id}", response_model=MedicalRecordResponse)
async def update_medical_record(
    record_id: str,
    request: UpdateMedicalRecordRequest,
    doctor_id: str = Depends(get_current_user_id)
):
    """Update a medical record. Omitted fields are left unchanged."""
    record, patient = await MedicalRecordService.update_record(record_id, doctor_id, request)
    return MedicalRecordService.record_to_response(record, patient)


@router.delete("/{record_id}", response_model=MessageResponse)
async def delete_medical_record(
    record_id: str,
    doctor_id: str = Depends(get_current_user_id)
):
    """Delete a medical record."""
    await MedicalRecordService.delete_record(record_id, doctor_id)
    return MessageResponse(message="Medical record deleted successfully")
