# Prescriptions Feature - Router

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from app.features.prescriptions.schemas import (
    CreatePrescriptionRequest,
    UpdatePrescriptionRequest,
    PrescriptionResponse,
)
from app.features.prescriptions.service import PrescriptionService
from app.features.auth.dependencies import get_current_user_id
from app.shared.schemas import MessageResponse


router = APIRouter(prefix="/prescriptions", tags=["Prescriptions"])


@router.get("", response_model=List[PrescriptionResponse])
async def list_prescriptions(
    patient_id: Optional[str] = Query(None, description="Only this patient's prescriptions"),
    doctor_id: str = Depends(get_current_user_id)
):
    """List the current doctor's prescriptions, most recently issued first."""
    return await PrescriptionService.list_prescriptions(doctor_id, patient_id=patient_id)


@router.post("", response_model=PrescriptionResponse, status_code=status.HTTP_201_CREATED)
async def create_prescription(
    request: CreatePrescriptionRequest,
    doctor_id: str = Depends(get_current_user_id)
):
    """
    Issue a prescription.

    - **patient_id**, **medication**, **dosage**, **frequency** are required
    - **expiry_date**: The prescription counts as active until this date
    """
    prescription, patient = await PrescriptionService.create_prescription(doctor_id, request)
    return PrescriptionService.prescription_to_response(prescription, patient)


@router.get("/{prescription_id}", response_model=PrescriptionResponse)
async def get_prescription(
    prescription_id: str,
    doctor_id: str = Depends(get_current_user_id)
):
    """Get one prescription."""
    prescription, patient = await PrescriptionService.get_prescription(prescription_id, doctor_id)
    return PrescriptionService.prescription_to_response(prescription, patient)


@router.patch("/{prescription_id}", response_model=PrescriptionResponse)
async def update_prescription(
    prescription_id: str,
    request: UpdatePrescriptionRequest,
    doctor_id: str = Depends(get_current_user_id)
):
    """Update a prescription. Omitted fields are left unchanged."""
    prescription, patient = await PrescriptionService.update_prescription(prescription_id, doctor_id, request)
    return PrescriptionService.prescription_to_response(prescription, patient)


@router.delete("/{prescription_id}", response_model=MessageResponse)
async def delete_prescription(
    prescription_id: str,
    doctor_id: str = Depends(get_current_user_id)
):
    """Delete a prescription."""
    await PrescriptionService.delete_prescription(prescription_id, doctor_id)
    return MessageResponse(message="Prescription deleted successfully")
