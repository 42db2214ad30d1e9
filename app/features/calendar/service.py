# Calendar Feature - Service

import re
import unicodedata
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote
from app.config import settings
from app.core.logging import logger
from app.core.security import create_oauth_state, read_oauth_state
from app.features.appointments.models import Appointment, AppointmentStatus
from app.features.appointments.service import AppointmentService
from app.features.auth.models import User
from app.features.auth.service import AuthService
from app.features.calendar.events import appointment_to_calendar_event
from app.features.calendar.google import CalendarSyncError, GoogleCalendarService
from app.features.calendar.ics import appointment_to_ics_event, generate_ics
from app.features.patients.service import PatientService
from app.shared.exceptions import (
    BadRequestException,
    InternalServerException,
    NotFoundException,
)
from app.shared.schemas import normalize_datetime


def parse_date_param(value: str, name: str) -> datetime:
    """Parse an ISO 8601 query parameter to naive UTC."""
    try:
        return normalize_datetime(datetime.fromisoformat(value))
    except ValueError:
        raise BadRequestException(f"Invalid {name}: expected an ISO 8601 date")


def export_filename(
    status: Optional[AppointmentStatus],
    start_date: Optional[str],
    end_date: Optional[str],
) -> str:
    filename = "appointments"
    if status:
        filename += f"-{status.value.lower()}"
    if start_date:
        filename += f"-from-{start_date}"
    if end_date:
        filename += f"-to-{end_date}"
    return filename + ".ics"


def ascii_filename(filename: str) -> str:
    """Reduce a filename to characters that are safe inside a quoted header value."""
    decomposed = unicodedata.normalize("NFKD", filename)
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return re.sub(r"[^A-Za-z0-9._-]", "_", stripped)


def content_disposition(filename: str) -> str:
    """
    Build an attachment Content-Disposition header.

    Names with characters beyond letters, digits, dot, dash and underscore get
    an RFC 5987 filename* parameter next to a sanitized filename for older
    clients.
    """
    fallback = ascii_filename(filename)
    if fallback == filename:
        return f'attachment; filename="{filename}"'
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


class CalendarService:
    """Service for ICS export and Google Calendar synchronisation."""

    # ============== ICS Export ==============

    @staticmethod
    async def export_ics(
        user: User,
        appointment_id: Optional[str] = None,
        status: Optional[AppointmentStatus] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> Tuple[bytes, str]:
        """
        Export the doctor's appointments as an iCalendar file.

        With appointment_id only that appointment is exported and the other
        filters are ignored. Date bounds are inclusive.

        Returns:
            Tuple of (ics content, download filename)
        """
        doctor_id = str(user.id)

        if appointment_id:
            appointment, patient = await AppointmentService.get_appointment(appointment_id, doctor_id)
            content = generate_ics([appointment_to_ics_event(appointment, patient, user)])
            return content, f"appointment-{patient.first_name}-{patient.last_name}.ics"

        criteria = []
        if status:
            criteria.append(Appointment.status == status)
        if start_date:
            criteria.append(Appointment.appointment_date >= parse_date_param(start_date, "start_date"))
        if end_date:
            criteria.append(Appointment.appointment_date <= parse_date_param(end_date, "end_date"))

        appointments = await AppointmentService.repository.list_owned(
            doctor_id,
            *criteria,
            sort=[("appointment_date", 1)],
        )
        if not appointments:
            raise NotFoundException("No appointments found for export")

        patients = await PatientService.patients_by_id(doctor_id)
        content = generate_ics(
            appointment_to_ics_event(a, patients[a.patient_id], user)
            for a in appointments
        )

        logger.info(f"Exported {len(appointments)} appointments to ICS for doctor {doctor_id}")
        return content, export_filename(status, start_date, end_date)

    # ============== Google Calendar Sync ==============

    @staticmethod
    def connected_calendar(user: User, message: str) -> GoogleCalendarService:
        """Calendar client for the doctor, or BadRequestException when none is linked."""
        if not user.calendar_connected:
            raise BadRequestException(message)
        return GoogleCalendarService(user)

    @staticmethod
    async def sync_appointment(user: User, appointment_id: str) -> str:
        """
        Create or update the Google Calendar event mirroring an appointment.

        Returns:
            The Google event id
        """
        calendar = CalendarService.connected_calendar(
            user, "Google Calendar not connected. Please connect your calendar first."
        )
        appointment, patient = await AppointmentService.get_appointment(appointment_id, str(user.id))
        event = appointment_to_calendar_event(appointment, patient, settings.GOOGLE_CALENDAR_TIMEZONE)

        try:
            if appointment.google_calendar_event_id:
                await calendar.update_event(appointment.google_calendar_event_id, event)
                event_id = appointment.google_calendar_event_id
            else:
                event_id = await calendar.create_event(event)
        except CalendarSyncError:
            raise InternalServerException("Failed to sync with Google Calendar")

        if appointment.google_calendar_event_id != event_id:
            appointment.google_calendar_event_id = event_id
            appointment.update_timestamp()
            await appointment.save()

        logger.info(f"Synced appointment {appointment_id} to Google Calendar event {event_id}")
        return event_id

    @staticmethod
    async def unsync_appointment(user: User, appointment_id: str) -> None:
        """Delete an appointment's Google Calendar event and forget its id."""
        calendar = CalendarService.connected_calendar(user, "Google Calendar not connected")

        appointment = await AppointmentService.repository.find_owned(appointment_id, str(user.id))
        if appointment is None or not appointment.google_calendar_event_id:
            raise NotFoundException("Appointment not found or not synced with calendar")

        try:
            await calendar.delete_event(appointment.google_calendar_event_id)
        except CalendarSyncError:
            raise InternalServerException("Failed to remove from Google Calendar")

        appointment.google_calendar_event_id = None
        appointment.update_timestamp()
        await appointment.save()

        logger.info(f"Removed appointment {appointment_id} from Google Calendar")

    @staticmethod
    async def list_events(user: User, time_min: str, time_max: str) -> List[Dict[str, Any]]:
        calendar = CalendarService.connected_calendar(user, "Google Calendar not connected")
        try:
            return await calendar.list_events(time_min, time_max)
        except CalendarSyncError:
            raise InternalServerException("Failed to fetch calendar events")

    @staticmethod
    async def list_calendars(user: User) -> List[Dict[str, Any]]:
        calendar = CalendarService.connected_calendar(user, "Google Calendar not connected")
        try:
            return await calendar.list_calendars()
        except CalendarSyncError:
            raise InternalServerException("Failed to fetch calendars")

    @staticmethod
    async def disconnect(user: User) -> None:
        """Forget the doctor's Google Calendar credentials."""
        user.google_access_token = None
        user.google_refresh_token = None
        user.google_token_expiry = None
        user.google_calendar_id = None
        user.update_timestamp()
        await user.save()

        logger.info(f"Disconnected Google Calendar for user {user.id}")

    # ============== OAuth ==============

    @staticmethod
    def authorization_url(user: User) -> str:
        """Google consent URL whose state names the doctor."""
        try:
            return GoogleCalendarService.get_authorization_url(create_oauth_state(str(user.id)))
        except CalendarSyncError:
            raise InternalServerException("Failed to generate authorization URL")

    @staticmethod
    async def complete_authorization(code: str, state: Optional[str]) -> User:
        """
        Store the tokens from an OAuth callback on the doctor named by state.

        Raises:
            CalendarSyncError: If the state is invalid or the code exchange fails
        """
        user_id = read_oauth_state(state) if state else None
        if not user_id:
            raise CalendarSyncError("Invalid OAuth state")

        user = await AuthService.get_user_by_id(user_id)
        if user is None:
            raise CalendarSyncError("Unknown user in OAuth state")

        credentials = await GoogleCalendarService.exchange_code(code)
        if not credentials.token:
            raise CalendarSyncError("Failed to obtain access token")

        user.google_access_token = credentials.token
        if credentials.refresh_token:
            user.google_refresh_token = credentials.refresh_token
        user.google_token_expiry = credentials.expiry
        user.update_timestamp()
        await user.save()

        logger.info(f"Connected Google Calendar for user {user.id}")
        return user
