# Calendar Feature - Router

from typing import Optional
from fastapi import APIRouter, Depends, Query
from fastapi.responses import RedirectResponse, Response
from app.config import settings
from app.core.logging import logger
from app.features.appointments.models import AppointmentStatus
from app.features.auth.dependencies import get_current_user
from app.features.auth.models import User
from app.features.auth.schemas import GoogleAuthUrlResponse
from app.features.calendar.google import CalendarSyncError
from app.features.calendar.schemas import (
    CalendarEventsResponse,
    CalendarListResponse,
    CalendarSyncRequest,
    CalendarSyncResponse,
)
from app.features.calendar.service import CalendarService, content_disposition
from app.shared.exceptions import BadRequestException
from app.shared.schemas import MessageResponse


router = APIRouter(prefix="/calendar", tags=["Calendar"])

# OAuth endpoints live under /auth/google; only /calendar is behind the auth gate
google_auth_router = APIRouter(prefix="/auth/google", tags=["Calendar"])


@router.get("/export")
async def export_calendar(
    appointment_id: Optional[str] = Query(None, description="Export only this appointment"),
    status: Optional[AppointmentStatus] = Query(None, description="Only appointments in this status"),
    start_date: Optional[str] = Query(None, description="Earliest appointment date (ISO 8601)"),
    end_date: Optional[str] = Query(None, description="Latest appointment date (ISO 8601)"),
    current_user: User = Depends(get_current_user)
):
    """
    Download appointments as an iCalendar (.ics) file.

    Returns 404 if nothing matches the filters.
    """
    content, filename = await CalendarService.export_ics(
        current_user,
        appointment_id=appointment_id,
        status=status,
        start_date=start_date,
        end_date=end_date,
    )
    return Response(
        content=content,
        media_type="text/calendar; charset=utf-8",
        headers={"Content-Disposition": content_disposition(filename)},
    )


@router.post("/sync", response_model=CalendarSyncResponse)
async def sync_appointment(
    request: CalendarSyncRequest,
    current_user: User = Depends(get_current_user)
):
    """
    Push an appointment to the doctor's Google Calendar.

    Updates the existing event if the appointment was synced before.
    """
    event_id = await CalendarService.sync_appointment(current_user, request.appointment_id)
    return CalendarSyncResponse(
        event_id=event_id,
        message="Appointment synced with Google Calendar",
    )


@router.delete("/sync", response_model=CalendarSyncResponse)
async def unsync_appointment(
    request: CalendarSyncRequest,
    current_user: User = Depends(get_current_user)
):
    """Remove an appointment's event from the doctor's Google Calendar."""
    await CalendarService.unsync_appointment(current_user, request.appointment_id)
    return CalendarSyncResponse(message="Appointment removed from Google Calendar")


@router.get("/events", response_model=CalendarEventsResponse)
async def list_calendar_events(
    time_min: str = Query(..., description="Lower bound (RFC 3339) for event end time"),
    time_max: str = Query(..., description="Upper bound (RFC 3339) for event start time"),
    current_user: User = Depends(get_current_user)
):
    """List events on the doctor's linked Google Calendar."""
    events = await CalendarService.list_events(current_user, time_min, time_max)
    return CalendarEventsResponse(events=events)


@router.get("/calendars", response_model=CalendarListResponse)
async def list_calendars(current_user: User = Depends(get_current_user)):
    """List the calendars of the linked Google account."""
    calendars = await CalendarService.list_calendars(current_user)
    return CalendarListResponse(calendars=calendars)


@router.delete("/google", response_model=MessageResponse)
async def disconnect_google_calendar(current_user: User = Depends(get_current_user)):
    """Unlink Google Calendar by forgetting the stored credentials."""
    await CalendarService.disconnect(current_user)
    return MessageResponse(message="Google Calendar disconnected")


# ============== Google OAuth ==============

@google_auth_router.get("/calendar", response_model=GoogleAuthUrlResponse)
async def google_calendar_auth_url(current_user: User = Depends(get_current_user)):
    """
    Get the Google consent URL for linking the doctor's calendar.

    Requires authentication. The URL's state expires after 10 minutes.
    """
    return GoogleAuthUrlResponse(auth_url=CalendarService.authorization_url(current_user))


@google_auth_router.get("/callback")
async def google_calendar_callback(
    code: Optional[str] = Query(None),
    state: Optional[str] = Query(None),
):
    """
    OAuth redirect target. Stores the tokens and sends the browser back to the calendar page.

    No authentication required; the doctor is identified by the signed state.
    """
    if not code:
        raise BadRequestException("Authorization code not provided")

    try:
        await CalendarService.complete_authorization(code, state)
    except CalendarSyncError as e:
        logger.error(f"Google Calendar setup failed: {e}")
        return RedirectResponse(f"{settings.FRONTEND_URL}/calendar?error=setup_failed")

    return RedirectResponse(f"{settings.FRONTEND_URL}/calendar?setup=success")
