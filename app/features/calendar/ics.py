# Calendar Feature - ICS export

from datetime import datetime, timezone
from typing import Iterable
from icalendar import Calendar, Event, vCalAddress, vText
from app.features.appointments.models import Appointment, AppointmentStatus
from app.features.auth.models import User
from app.features.patients.models import Patient
from app.features.calendar.events import (
    appointment_description,
    appointment_summary,
    appointment_window,
)


PRODID = "-//Clinic Management//Appointments//EN"
UID_DOMAIN = "clinic-management"

ICS_STATUS = {
    AppointmentStatus.COMPLETED: "CONFIRMED",
    AppointmentStatus.CANCELLED: "CANCELLED",
}


def as_utc(value: datetime) -> datetime:
    return value.replace(tzinfo=timezone.utc)


def calendar_address(email: str, name: str) -> vCalAddress:
    address = vCalAddress(f"mailto:{email}")
    address.params["cn"] = vText(name)
    return address


def appointment_uid(appointment: Appointment) -> str:
    return f"appointment-{appointment.id}@{UID_DOMAIN}"


def appointment_to_ics_event(appointment: Appointment, patient: Patient, organizer: User) -> Event:
    """
    Build a VEVENT for an appointment.

    Args:
        appointment: The appointment to export
        patient: The appointment's patient, added as attendee when they have an email
        organizer: The doctor exporting the appointment

    Returns:
        icalendar Event with times in UTC
    """
    start, end = appointment_window(appointment)

    event = Event()
    event.add("uid", appointment_uid(appointment))
    event.add("summary", appointment_summary(patient))
    event.add("description", appointment_description(appointment, patient, include_status=True))
    event.add("dtstart", as_utc(start))
    event.add("dtend", as_utc(end))
    event.add("dtstamp", datetime.now(timezone.utc))
    event.add("status", ICS_STATUS.get(appointment.status, "TENTATIVE"))
    event.add("organizer", calendar_address(organizer.email, organizer.full_name))
    if patient.email:
        event.add("attendee", calendar_address(patient.email, patient.full_name))
    event.add("categories", ["Medical", "Appointment"])
    event.add("location", "Medical Office")

    return event


def generate_ics(events: Iterable[Event]) -> bytes:
    """Wrap events in a single VCALENDAR and serialize it."""
    cal = Calendar()
    cal.add("prodid", PRODID)
    cal.add("version", "2.0")
    cal.add("calscale", "GREGORIAN")

    for event in events:
        cal.add_component(event)

    return cal.to_ical()
