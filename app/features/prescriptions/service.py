# Prescriptions Feature - Service

from typing import List, Optional, Tuple
from app.features.prescriptions.models import Prescription
from app.features.prescriptions.schemas import (
    CreatePrescriptionRequest,
    UpdatePrescriptionRequest,
    PrescriptionResponse,
)
from app.features.patients.models import Patient
from app.features.patients.service import PatientService
from app.shared.models import utc_now
from app.shared.repository import PatientOwnedRepository
from app.core.logging import logger


class PrescriptionService:
    """Service class for prescription operations."""

    repository = PatientOwnedRepository(Prescription, "Prescription", PatientService.repository)

    @staticmethod
    def prescription_to_response(
        prescription: Prescription,
        patient: Optional[Patient] = None
    ) -> PrescriptionResponse:
        """Convert Prescription document to response schema."""
        return PrescriptionResponse(
            id=str(prescription.id),
            patient_id=prescription.patient_id,
            doctor_id=prescription.doctor_id,
            medication=prescription.medication,
            dosage=prescription.dosage,
            frequency=prescription.frequency,
            duration=prescription.duration,
            notes=prescription.notes,
            issued_date=prescription.issued_date,
            expiry_date=prescription.expiry_date,
            is_active=prescription.is_active(utc_now()),
            patient=PatientService.patient_to_summary(patient),
            created_at=prescription.created_at,
            updated_at=prescription.updated_at,
        )

    @staticmethod
    async def list_prescriptions(doctor_id: str, patient_id: Optional[str] = None) -> List[PrescriptionResponse]:
        """Get the doctor's prescriptions, most recently issued first."""
        criteria = []
        if patient_id:
            patient = await PatientService.get_patient(patient_id, doctor_id)
            criteria.append(Prescription.patient_id == str(patient.id))

        prescriptions = await PrescriptionService.repository.list_owned(
            doctor_id,
            *criteria,
            sort=[("issued_date", -1)],
        )
        patients = await PatientService.patients_by_id(doctor_id)

        return [
            PrescriptionService.prescription_to_response(p, patients.get(p.patient_id))
            for p in prescriptions
        ]

    @staticmethod
    async def create_prescription(doctor_id: str, request: CreatePrescriptionRequest) -> Tuple[Prescription, Patient]:
        """Issue a prescription for one of the doctor's patients."""
        patient = await PatientService.get_patient(request.patient_id, doctor_id)

        prescription = Prescription(
            patient_id=str(patient.id),
            doctor_id=doctor_id,
            medication=request.medication,
            dosage=request.dosage,
            frequency=request.frequency,
            duration=request.duration,
            notes=request.notes,
            issued_date=utc_now(),
            expiry_date=request.expiry_date,
        )
        await prescription.insert()

        logger.info(f"Issued prescription {prescription.id} ({prescription.medication}) for patient {patient.id}")
        return prescription, patient

    @staticmethod
    async def get_prescription(prescription_id: str, doctor_id: str) -> Tuple[Prescription, Patient]:
        """Get a prescription and its patient, or raise NotFoundException."""
        prescription = await PrescriptionService.repository.get_owned(prescription_id, doctor_id)
        patient = await PatientService.get_patient(prescription.patient_id, doctor_id)
        return prescription, patient

    @staticmethod
    async def update_prescription(
        prescription_id: str,
        doctor_id: str,
        request: UpdatePrescriptionRequest
    ) -> Tuple[Prescription, Patient]:
        """Apply the supplied fields to a prescription."""
        prescription, patient = await PrescriptionService.get_prescription(prescription_id, doctor_id)
        update_data = request.model_dump(exclude_unset=True)

        for field in ("medication", "dosage", "frequency", "issued_date"):
            if update_data.get(field) is not None:
                setattr(prescription, field, update_data[field])
        for field in ("duration", "notes", "expiry_date"):
            if field in update_data:
                setattr(prescription, field, update_data[field])

        prescription.update_timestamp()
        await prescription.save()

        logger.info(f"Updated prescription {prescription_id} by doctor {doctor_id}")
        return prescription, patient

    @staticmethod
    async def delete_prescription(prescription_id: str, doctor_id: str) -> bool:
        """Delete a prescription."""
        prescription = await PrescriptionService.repository.get_owned(prescription_id, doctor_id)
        await prescription.delete()

        logger.info(f"Deleted prescription {prescription_id} by doctor {doctor_id}")
        return True
