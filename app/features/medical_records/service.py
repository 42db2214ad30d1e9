# Medical Records Feature - Service

from typing import List, Optional, Tuple
from app.features.medical_records.models import MedicalRecord
from app.features.medical_records.schemas import (
    CreateMedicalRecordRequest,
    UpdateMedicalRecordRequest,
    MedicalRecordResponse,
)
from app.features.patients.models import Patient
from app.features.patients.service import PatientService
from app.shared.models import utc_now
from app.shared.repository import PatientOwnedRepository
from app.core.logging import logger


# Fields that may be cleared by sending null
NULLABLE_FIELDS = ("symptoms", "vital_signs", "notes", "treatment_plan", "follow_up_date")


class MedicalRecordService:
    """Service class for medical record operations."""

    repository = PatientOwnedRepository(MedicalRecord, "Medical record", PatientService.repository)

    @staticmethod
    def record_to_response(
        record: MedicalRecord,
        patient: Optional[Patient] = None
    ) -> MedicalRecordResponse:
        """Convert MedicalRecord document to response schema."""
        return MedicalRecordResponse(
            id=str(record.id),
            patient_id=record.patient_id,
            doctor_id=record.doctor_id,
            diagnosis=record.diagnosis,
            symptoms=record.symptoms,
            vital_signs=record.vital_signs,
            notes=record.notes,
            treatment_plan=record.treatment_plan,
            record_date=record.record_date,
            follow_up_date=record.follow_up_date,
            patient=PatientService.patient_to_summary(patient),
            created_at=record.created_at,
            updated_at=record.updated_at,
        )

    @staticmethod
    async def list_records(doctor_id: str, patient_id: Optional[str] = None) -> List[MedicalRecordResponse]:
        """
        Get the doctor's medical records, newest first.

        Args:
            doctor_id: Owning doctor
            patient_id: Restrict to one of the doctor's patients
        """
        criteria = []
        if patient_id:
            patient = await PatientService.get_patient(patient_id, doctor_id)
            criteria.append(MedicalRecord.patient_id == str(patient.id))

        records = await MedicalRecordService.repository.list_owned(
            doctor_id,
            *criteria,
            sort=[("record_date", -1)],
        )
        patients = await PatientService.patients_by_id(doctor_id)

        return [
            MedicalRecordService.record_to_response(r, patients.get(r.patient_id))
            for r in records
        ]

    @staticmethod
    async def create_record(doctor_id: str, request: CreateMedicalRecordRequest) -> Tuple[MedicalRecord, Patient]:
        """Create a medical record for one of the doctor's patients."""
        patient = await PatientService.get_patient(request.patient_id, doctor_id)

        record = MedicalRecord(
            patient_id=str(patient.id),
            doctor_id=doctor_id,
            diagnosis=request.diagnosis,
            symptoms=request.symptoms,
            vital_signs=request.vital_signs,
            notes=request.notes,
            treatment_plan=request.treatment_plan,
            record_date=request.record_date or utc_now(),
            follow_up_date=request.follow_up_date,
        )
        await record.insert()

        logger.info(f"Created medical record {record.id} for patient {patient.id}")
        return record, patient

    @staticmethod
    async def get_record(record_id: str, doctor_id: str) -> Tuple[MedicalRecord, Patient]:
        """Get a medical record and its patient, or raise NotFoundException."""
        record = await MedicalRecordService.repository.get_owned(record_id, doctor_id)
        patient = await PatientService.get_patient(record.patient_id, doctor_id)
        return record, patient

    @staticmethod
    async def update_record(
        record_id: str,
        doctor_id: str,
        request: UpdateMedicalRecordRequest
    ) -> Tuple[MedicalRecord, Patient]:
        """Apply the supplied fields to a medical record."""
        record, patient = await MedicalRecordService.get_record(record_id, doctor_id)
        update_data = request.model_dump(exclude_unset=True)

        if update_data.get("diagnosis") is not None:
            record.diagnosis = update_data["diagnosis"]
        if update_data.get("record_date") is not None:
            record.record_date = update_data["record_date"]
        for field in NULLABLE_FIELDS:
            if field in update_data:
                setattr(record, field, update_data[field])

        record.update_timestamp()
        await record.save()

        logger.info(f"Updated medical record {record_id} by doctor {doctor_id}")
        return record, patient

    @staticmethod
    async def delete_record(record_id: str, doctor_id: str) -> bool:
        """Delete a medical record."""
        record = await MedicalRecordService.repository.get_owned(record_id, doctor_id)
        await record.delete()

        logger.info(f"Deleted medical record {record_id} by doctor {doctor_id}")
        return True
