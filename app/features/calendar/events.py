# Calendar Feature - Appointment to event mapping

from datetime import datetime, timedelta
from typing import Any, Dict, Tuple
from app.features.appointments.models import Appointment
from app.features.patients.models import Patient
from app.shared.schemas import format_datetime


# Appointments have no stored end time
APPOINTMENT_DURATION = timedelta(hours=1)


def appointment_window(appointment: Appointment) -> Tuple[datetime, datetime]:
    """Start and end of an appointment, naive UTC."""
    start = appointment.appointment_date
    return start, start + APPOINTMENT_DURATION


def appointment_summary(patient: Patient) -> str:
    return f"Appointment with {patient.full_name}"


def appointment_description(appointment: Appointment, patient: Patient, include_status: bool = False) -> str:
    lines = ["Medical appointment", "", f"Patient: {patient.full_name}"]
    if include_status:
        lines.append(f"Status: {appointment.status.value}")
    lines.append(f"Notes: {appointment.notes or 'No notes'}")
    return "\n".join(lines)


def appointment_to_calendar_event(
    appointment: Appointment,
    patient: Patient,
    timezone: str,
) -> Dict[str, Any]:
    """Build a Google Calendar v3 event resource for an appointment."""
    start, end = appointment_window(appointment)

    event: Dict[str, Any] = {
        "summary": appointment_summary(patient),
        "description": appointment_description(appointment, patient),
        "start": {"dateTime": format_datetime(start), "timeZone": timezone},
        "end": {"dateTime": format_datetime(end), "timeZone": timezone},
    }
    if patient.email:
        event["attendees"] = [{"email": patient.email, "displayName": patient.full_name}]

    return event
