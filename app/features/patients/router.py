# Patient Management Feature - Router

from typing import List
from fastapi import APIRouter, Depends, status
from app.features.patients.schemas import (
    CreatePatientRequest,
    UpdatePatientRequest,
    PatientResponse,
    PatientDetailResponse,
)
from app.features.patients.service import PatientService
from app.features.appointments.service import AppointmentService
from app.features.medical_records.schemas import (
    CreateMedicalRecordRequest,
    PatientMedicalRecordRequest,
    MedicalRecordResponse,
)
from app.features.medical_records.service import MedicalRecordService
from app.features.prescriptions.schemas import (
    CreatePrescriptionRequest,
    PatientPrescriptionRequest,
    PrescriptionResponse,
)
from app.features.prescriptions.service import PrescriptionService
from app.features.auth.dependencies import get_current_user_id
from app.shared.schemas import MessageResponse


router = APIRouter(prefix="/patients", tags=["Patients"])


@router.get("", response_model=List[PatientResponse])
async def list_patients(doctor_id: str = Depends(get_current_user_id)):
    """
    List the current doctor's patients, most recently updated first.

    Requires authentication.
    """
    patients = await PatientService.list_patients(doctor_id)
    return [PatientService.patient_to_response(p) for p in patients]


@router.post("", response_model=PatientResponse, status_code=status.HTTP_201_CREATED)
async def create_patient(
    request: CreatePatientRequest,
    doctor_id: str = Depends(get_current_user_id)
):
    """
    Create a new patient owned by the current doctor.

    - **first_name**, **last_name**, **date_of_birth**, **gender** are required
    """
    patient = await PatientService.create_patient(doctor_id, request)
    return PatientService.patient_to_response(patient)


@router.get("/{patient_id}", response_model=PatientDetailResponse)
async def get_patient(
    patient_id: str,
    doctor_id: str = Depends(get_current_user_id)
):
    """
    Get a patient with their medical records, prescriptions and appointments.

    Returns 404 if the patient does not exist or belongs to another doctor.
    """
    patient = await PatientService.get_patient(patient_id, doctor_id)

    records = await MedicalRecordService.list_records(doctor_id, patient_id=patient_id)
    prescriptions = await PrescriptionService.list_prescriptions(doctor_id, patient_id=patient_id)
    appointments = await AppointmentService.list_appointments(doctor_id, patient_id=patient_id)
    # Appointments list earliest first everywhere else
    appointments.reverse()

    return PatientDetailResponse(
        **PatientService.patient_to_response(patient).model_dump(),
        medical_records=records,
        prescriptions=prescriptions,
        appointments=appointments,
    )


@router.put("/{patient_id}", response_model=PatientResponse)
async def update_patient(
    patient_id: str,
    request: UpdatePatientRequest,
    doctor_id: str = Depends(get_current_user_id)
):
    """Replace a patient's information."""
    patient = await PatientService.update_patient(patient_id, doctor_id, request)
    return PatientService.patient_to_response(patient)


@router.delete("/{patient_id}", response_model=MessageResponse)
async def delete_patient(
    patient_id: str,
    doctor_id: str = Depends(get_current_user_id)
):
    """
    Permanently delete a patient.

    WARNING: The patient's appointments, medical records and prescriptions are deleted too.
    """
    await PatientService.delete_patient(patient_id, doctor_id)
    return MessageResponse(message="Patient deleted successfully")


# ============== Nested Views ==============

@router.get("/{patient_id}/medical-records", response_model=List[MedicalRecordResponse])
async def list_patient_medical_records(
    patient_id: str,
    doctor_id: str = Depends(get_current_user_id)
):
    """List one patient's medical records, newest first."""
    return await MedicalRecordService.list_records(doctor_id, patient_id=patient_id)


@router.post(
    "/{patient_id}/medical-records",
    response_model=MedicalRecordResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_patient_medical_record(
    patient_id: str,
    request: PatientMedicalRecordRequest,
    doctor_id: str = Depends(get_current_user_id)
):
    """Add a medical record to a patient."""
    record, patient = await MedicalRecordService.create_record(
        doctor_id,
        CreateMedicalRecordRequest(patient_id=patient_id, **request.model_dump()),
    )
    return MedicalRecordService.record_to_response(record, patient)


@router.get("/{patient_id}/prescriptions", response_model=List[PrescriptionResponse])
async def list_patient_prescriptions(
    patient_id: str,
    doctor_id: str = Depends(get_current_user_id)
):
    """List one patient's prescriptions, most recently issued first."""
    return await PrescriptionService.list_prescriptions(doctor_id, patient_id=patient_id)


@router.post(
    "/{patient_id}/prescriptions",
    response_model=PrescriptionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_patient_prescription(
    patient_id: str,
    request: PatientPrescriptionRequest,
    doctor_id: str = Depends(get_current_user_id)
):
    """Issue a prescription to a patient."""
    prescription, patient = await PrescriptionService.create_prescription(
        doctor_id,
        CreatePrescriptionRequest(patient_id=patient_id, **request.model_dump()),
    )
    return PrescriptionService.prescription_to_response(prescription, patient)
