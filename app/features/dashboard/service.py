# Dashboard Feature - Service

import calendar
from typing import List
from datetime import datetime, timedelta

from app.features.dashboard.schemas import (
    ActivityDay,
    DashboardResponse,
    DashboardStats,
    DashboardTrends,
    TrendItem,
)
from app.features.patients.models import Patient
from app.features.patients.service import PatientService
from app.features.appointments.models import Appointment, AppointmentStatus
from app.features.appointments.service import AppointmentService
from app.features.medical_records.service import MedicalRecordService
from app.features.prescriptions.models import Prescription
from app.features.prescriptions.service import PrescriptionService
from app.shared.models import utc_now
from app.core.logging import logger


WEEKDAY_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
RECENT_LIMIT = 5


def months_before(moment: datetime, months: int) -> datetime:
    """Same day and time `months` calendar months earlier, clamped to the month's last day."""
    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def start_of_week(moment: datetime) -> datetime:
    """Midnight of the Sunday that starts moment's week."""
    days_since_sunday = (moment.weekday() + 1) % 7
    day = moment - timedelta(days=days_since_sunday)
    return day.replace(hour=0, minute=0, second=0, microsecond=0)


def percent_change(current: int, baseline: int) -> int:
    if baseline <= 0:
        return 0
    return round(current / baseline * 100)


class DashboardService:
    """Service for the doctor's dashboard summary."""

    @staticmethod
    async def get_stats(doctor_id: str, now: datetime) -> DashboardStats:
        """
        Count the doctor's data and compute month-over-month trends.

        Args:
            doctor_id: The doctor ID
            now: Reference time (naive UTC)

        Returns:
            DashboardStats with counts and trends
        """
        patients = PatientService.repository
        appointments = AppointmentService.repository

        total_patients = await patients.count_owned(doctor_id)
        scheduled_appointments = await appointments.count_owned(
            doctor_id,
            Appointment.status == AppointmentStatus.SCHEDULED,
            Appointment.appointment_date >= now,
        )
        active_prescriptions = await PrescriptionService.repository.count_owned(
            doctor_id,
            Prescription.expiry_date >= now,
        )
        medical_records = await MedicalRecordService.repository.count_owned(doctor_id)

        last_month = months_before(now, 1)
        month_before_last = months_before(now, 2)

        # Patients: growth of the patient list during the last month
        new_patients = await patients.count_owned(doctor_id, Patient.created_at >= last_month)
        earlier_patients = await patients.count_owned(doctor_id, Patient.created_at < last_month)
        patient_change = percent_change(new_patients, earlier_patients)

        # Appointments: bookings in the last month against the month before
        recent_bookings = await appointments.count_owned(doctor_id, Appointment.created_at >= last_month)
        previous_bookings = await appointments.count_owned(
            doctor_id,
            Appointment.created_at >= month_before_last,
            Appointment.created_at < last_month,
        )
        appointment_change = percent_change(recent_bookings - previous_bookings, previous_bookings)

        return DashboardStats(
            total_patients=total_patients,
            scheduled_appointments=scheduled_appointments,
            active_prescriptions=active_prescriptions,
            medical_records=medical_records,
            trends=DashboardTrends(
                patients=TrendItem(value=patient_change, is_positive=patient_change > 0),
                appointments=TrendItem(value=abs(appointment_change), is_positive=appointment_change > 0),
            ),
        )

    @staticmethod
    async def get_weekly_activity(doctor_id: str, now: datetime) -> List[ActivityDay]:
        """Appointments per day, Sunday through Saturday of the current week."""
        week_start = start_of_week(now)
        activity = []

        for offset, name in enumerate(WEEKDAY_NAMES):
            day = week_start + timedelta(days=offset)
            count = await AppointmentService.repository.count_owned(
                doctor_id,
                Appointment.appointment_date >= day,
                Appointment.appointment_date < day + timedelta(days=1),
            )
            activity.append(ActivityDay(name=name, value=count))

        return activity

    @staticmethod
    async def get_dashboard(doctor_id: str) -> DashboardResponse:
        now = utc_now()

        stats = await DashboardService.get_stats(doctor_id, now)

        recent_patients = await PatientService.repository.list_owned(
            doctor_id,
            sort=[("updated_at", -1)],
            limit=RECENT_LIMIT,
        )
        upcoming = await AppointmentService.repository.list_owned(
            doctor_id,
            Appointment.status == AppointmentStatus.SCHEDULED,
            Appointment.appointment_date >= now,
            sort=[("appointment_date", 1)],
            limit=RECENT_LIMIT,
        )
        patients = await PatientService.patients_by_id(doctor_id)

        activity = await DashboardService.get_weekly_activity(doctor_id, now)

        logger.debug(f"Built dashboard for doctor {doctor_id}: {stats.total_patients} patients")

        return DashboardResponse(
            stats=stats,
            recent_patients=[PatientService.patient_to_response(p) for p in recent_patients],
            upcoming_appointments=[
                AppointmentService.appointment_to_response(a, patients.get(a.patient_id))
                for a in upcoming
            ],
            activity_data=activity,
        )
