# Patient Management Feature - Service

from typing import Dict, List, Optional
from app.features.patients.models import Patient
from app.features.patients.schemas import (
    CreatePatientRequest,
    UpdatePatientRequest,
    PatientResponse,
)
from app.features.appointments.models import Appointment
from app.features.medical_records.models import MedicalRecord
from app.features.prescriptions.models import Prescription
from app.shared.repository import DoctorOwnedRepository
from app.shared.schemas import PatientSummary
from app.core.logging import logger


class PatientService:
    """Service class for patient management operations."""

    repository = DoctorOwnedRepository(Patient, "Patient")

    @staticmethod
    def patient_to_response(patient: Patient) -> PatientResponse:
        """Convert Patient document to response schema."""
        return PatientResponse(
            id=str(patient.id),
            doctor_id=patient.doctor_id,
            first_name=patient.first_name,
            last_name=patient.last_name,
            date_of_birth=patient.date_of_birth,
            gender=patient.gender,
            contact_number=patient.contact_number,
            email=patient.email,
            address=patient.address,
            blood_type=patient.blood_type,
            allergies=patient.allergies,
            created_at=patient.created_at,
            updated_at=patient.updated_at,
        )

    @staticmethod
    async def create_patient(doctor_id: str, request: CreatePatientRequest) -> Patient:
        """Create a new patient owned by the doctor."""
        patient = Patient(doctor_id=doctor_id, **request.model_dump())
        await patient.insert()

        logger.info(f"Created patient {patient.id} for doctor {doctor_id}")
        return patient

    @staticmethod
    async def list_patients(doctor_id: str) -> List[Patient]:
        """Get all of the doctor's patients, most recently updated first."""
        return await PatientService.repository.list_owned(
            doctor_id,
            sort=[("updated_at", -1)],
        )

    @staticmethod
    async def get_patient(patient_id: str, doctor_id: str) -> Patient:
        """Get one of the doctor's patients or raise NotFoundException."""
        return await PatientService.repository.get_owned(patient_id, doctor_id)

    @staticmethod
    async def update_patient(patient_id: str, doctor_id: str, request: UpdatePatientRequest) -> Patient:
        """Replace a patient's information."""
        patient = await PatientService.get_patient(patient_id, doctor_id)

        for field, value in request.model_dump().items():
            setattr(patient, field, value)

        patient.update_timestamp()
        await patient.save()

        logger.info(f"Updated patient {patient_id} by doctor {doctor_id}")
        return patient

    @staticmethod
    async def delete_patient(patient_id: str, doctor_id: str) -> bool:
        """Permanently delete a patient together with their appointments, records and prescriptions."""
        patient = await PatientService.get_patient(patient_id, doctor_id)
        key = str(patient.id)

        await Appointment.find(Appointment.patient_id == key).delete()
        await MedicalRecord.find(MedicalRecord.patient_id == key).delete()
        await Prescription.find(Prescription.patient_id == key).delete()
        await patient.delete()

        logger.info(f"Deleted patient {patient_id} and dependent records by doctor {doctor_id}")
        return True

    @staticmethod
    async def patients_by_id(doctor_id: str) -> Dict[str, Patient]:
        """Map of the doctor's patients keyed by id, for embedding patient summaries."""
        patients = await PatientService.repository.list_owned(doctor_id)
        return {str(patient.id): patient for patient in patients}

    @staticmethod
    def patient_to_summary(patient: Optional[Patient]) -> Optional[PatientSummary]:
        if patient is None:
            return None
        return PatientSummary(
            id=str(patient.id),
            first_name=patient.first_name,
            last_name=patient.last_name,
            email=patient.email,
        )
