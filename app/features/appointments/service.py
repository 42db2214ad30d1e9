# Appointments Feature - Service

from typing import List, Optional, Tuple
from app.features.appointments.models import Appointment, AppointmentStatus
from app.features.appointments.schemas import (
    CreateAppointmentRequest,
    UpdateAppointmentRequest,
    AppointmentResponse,
)
from app.features.patients.models import Patient
from app.features.patients.service import PatientService
from app.shared.repository import PatientOwnedRepository
from app.core.logging import logger


class AppointmentService:
    """Service class for appointment operations."""

    repository = PatientOwnedRepository(Appointment, "Appointment", PatientService.repository)

    @staticmethod
    def appointment_to_response(
        appointment: Appointment,
        patient: Optional[Patient] = None
    ) -> AppointmentResponse:
        """Convert Appointment document to response schema."""
        return AppointmentResponse(
            id=str(appointment.id),
            patient_id=appointment.patient_id,
            appointment_date=appointment.appointment_date,
            status=appointment.status,
            notes=appointment.notes,
            google_calendar_event_id=appointment.google_calendar_event_id,
            patient=PatientService.patient_to_summary(patient),
            created_at=appointment.created_at,
            updated_at=appointment.updated_at,
        )

    @staticmethod
    async def list_appointments(
        doctor_id: str,
        patient_id: Optional[str] = None,
        status: Optional[AppointmentStatus] = None,
    ) -> List[AppointmentResponse]:
        """
        Get the doctor's appointments, earliest first.

        Args:
            doctor_id: Owning doctor
            patient_id: Restrict to one of the doctor's patients
            status: Restrict to one status
        """
        criteria = []
        if patient_id:
            patient = await PatientService.get_patient(patient_id, doctor_id)
            criteria.append(Appointment.patient_id == str(patient.id))
        if status:
            criteria.append(Appointment.status == status)

        appointments = await AppointmentService.repository.list_owned(
            doctor_id,
            *criteria,
            sort=[("appointment_date", 1)],
        )
        patients = await PatientService.patients_by_id(doctor_id)

        return [
            AppointmentService.appointment_to_response(a, patients.get(a.patient_id))
            for a in appointments
        ]

    @staticmethod
    async def create_appointment(doctor_id: str, request: CreateAppointmentRequest) -> Tuple[Appointment, Patient]:
        """Book an appointment for one of the doctor's patients."""
        patient = await PatientService.get_patient(request.patient_id, doctor_id)

        appointment = Appointment(
            patient_id=str(patient.id),
            appointment_date=request.appointment_date,
            status=request.status,
            notes=request.notes,
        )
        await appointment.insert()

        logger.info(f"Created appointment {appointment.id} for patient {patient.id}")
        return appointment, patient

    @staticmethod
    async def get_appointment(appointment_id: str, doctor_id: str) -> Tuple[Appointment, Patient]:
        """Get an appointment and its patient, or raise NotFoundException."""
        appointment = await AppointmentService.repository.get_owned(appointment_id, doctor_id)
        patient = await PatientService.get_patient(appointment.patient_id, doctor_id)
        return appointment, patient

    @staticmethod
    async def update_appointment(
        appointment_id: str,
        doctor_id: str,
        request: UpdateAppointmentRequest
    ) -> Tuple[Appointment, Patient]:
        """Apply the supplied fields to an appointment."""
        appointment, patient = await AppointmentService.get_appointment(appointment_id, doctor_id)
        update_data = request.model_dump(exclude_unset=True)

        if update_data.get("appointment_date") is not None:
            appointment.appointment_date = update_data["appointment_date"]
        if update_data.get("status") is not None:
            appointment.status = update_data["status"]
        if "notes" in update_data:
            appointment.notes = update_data["notes"]

        appointment.update_timestamp()
        await appointment.save()

        logger.info(f"Updated appointment {appointment_id} (status={appointment.status.value})")
        return appointment, patient

    @staticmethod
    async def delete_appointment(appointment_id: str, doctor_id: str) -> bool:
        """Delete an appointment."""
        appointment = await AppointmentService.repository.get_owned(appointment_id, doctor_id)
        await appointment.delete()

        logger.info(f"Deleted appointment {appointment_id} by doctor {doctor_id}")
        return True
