# Calendar Feature - Schemas

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class CalendarSyncRequest(BaseModel):
    """Schema for pushing an appointment to, or removing it from, Google Calendar."""
    appointment_id: str = Field(..., min_length=1)


class CalendarSyncResponse(BaseModel):
    success: bool = True
    event_id: Optional[str] = None
    message: str


class CalendarEventsResponse(BaseModel):
    """Events from the doctor's linked calendar, as returned by Google."""
    events: List[Dict[str, Any]]


class CalendarListResponse(BaseModel):
    calendars: List[Dict[str, Any]]
