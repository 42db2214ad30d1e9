# Appointments Feature - Router

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from app.features.appointments.models import AppointmentStatus
from app.features.appointments.schemas import (
    CreateAppointmentRequest,
    UpdateAppointmentRequest,
    AppointmentResponse,
)
from app.features.appointments.service import AppointmentService
from app.features.auth.dependencies import get_current_user_id
from app.shared.schemas import MessageResponse


router = APIRouter(prefix="/appointments", tags=["Appointments"])


@router.get("", response_model=List[AppointmentResponse])
async def list_appointments(
    patient_id: Optional[str] = Query(None, description="Only this patient's appointments"),
    status: Optional[AppointmentStatus] = Query(None, description="Only appointments in this status"),
    doctor_id: str = Depends(get_current_user_id)
):
    """
    List the current doctor's appointments, earliest first.

    Requires authentication.
    """
    return await AppointmentService.list_appointments(doctor_id, patient_id=patient_id, status=status)


@router.post("", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
async def create_appointment(
    request: CreateAppointmentRequest,
    doctor_id: str = Depends(get_current_user_id)
):
    """
    Book an appointment for one of the current doctor's patients.

    - **patient_id**: Patient ID
    - **appointment_date**: Start time (ISO 8601)
    - **status**: SCHEDULED (default), COMPLETED or CANCELLED
    """
    appointment, patient = await AppointmentService.create_appointment(doctor_id, request)
    return AppointmentService.appointment_to_response(appointment, patient)


@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
    appointment_id: str,
    doctor_id: str = Depends(get_current_user_id)
):
    """Get one appointment."""
    appointment, patient = await AppointmentService.get_appointment(appointment_id, doctor_id)
    return AppointmentService.appointment_to_response(appointment, patient)


@router.put("/{appointment_id}", response_model=AppointmentResponse)
async def update_appointment(
    appointment_id: str,
    request: UpdateAppointmentRequest,
    doctor_id: str = Depends(get_current_user_id)
):
    """Update an appointment's date, status or notes. Omitted fields are left unchanged."""
    appointment, patient = await AppointmentService.update_appointment(appointment_id, doctor_id, request)
    return AppointmentService.appointment_to_response(appointment, patient)


@router.delete("/{appointment_id}", response_model=MessageResponse)
async def delete_appointment(
    appointment_id: str,
    doctor_id: str = Depends(get_current_user_id)
):
    """Delete an appointment."""
    await AppointmentService.delete_appointment(appointment_id, doctor_id)
    return MessageResponse(message="Appointment deleted successfully")
