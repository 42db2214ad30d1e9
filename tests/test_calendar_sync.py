"""Google Calendar linking and appointment sync, against a fake Google client."""

import asyncio
from datetime import datetime
from types import SimpleNamespace
from urllib.parse import parse_qs, urlparse

import pytest

import app.features.calendar.service as calendar_service
from app.config import settings
from app.features.appointments.models import Appointment
from app.features.calendar.events import appointment_to_calendar_event, appointment_window
from app.features.calendar.google import CalendarSyncError, GoogleCalendarService
from app.features.patients.models import Patient
from conftest import create_appointment, create_patient


class FakeGoogleCalendar:
    """Stands in for GoogleCalendarService; events live in a class-level dict."""

    events = {}
    fail = False

    def __init__(self, user):
        self.user = user

    async def create_event(self, event):
        if self.fail:
            raise CalendarSyncError("Failed to create calendar event")
        event_id = f"evt{len(self.events) + 1}"
        self.events[event_id] = event
        return event_id

    async def update_event(self, event_id, event):
        if self.fail:
            raise CalendarSyncError("Failed to update calendar event")
        self.events[event_id] = event

    async def delete_event(self, event_id):
        if self.fail:
            raise CalendarSyncError("Failed to delete calendar event")
        self.events.pop(event_id, None)

    async def list_events(self, time_min, time_max):
        return [{"id": event_id, **event} for event_id, event in self.events.items()]

    async def list_calendars(self):
        return [{"id": "primary", "summary": self.user.email}]

    @staticmethod
    def get_authorization_url(state):
        return f"https://accounts.google.test/o/oauth2/auth?state={state}"

    @staticmethod
    async def exchange_code(code):
        if code == "bad-code":
            raise CalendarSyncError("Failed to obtain access token")
        return SimpleNamespace(
            token=f"access-{code}",
            refresh_token="refresh-token",
            expiry=datetime(2030, 1, 1),
        )


@pytest.fixture
def fake_google(monkeypatch):
    monkeypatch.setattr(FakeGoogleCalendar, "events", {})
    monkeypatch.setattr(FakeGoogleCalendar, "fail", False)
    monkeypatch.setattr(calendar_service, "GoogleCalendarService", FakeGoogleCalendar)
    return FakeGoogleCalendar


def link_calendar(client, headers, code="good-code"):
    auth = client.get("/api/auth/google/calendar", headers=headers)
    assert auth.status_code == 200
    state = parse_qs(urlparse(auth.json()["auth_url"]).query)["state"][0]
    return client.get(
        "/api/auth/google/callback",
        params={"code": code, "state": state},
        follow_redirects=False,
    )


def sync(client, headers, appointment_id, method="POST"):
    return client.request(method, "/api/calendar/sync", json={"appointment_id": appointment_id}, headers=headers)


# ============== Event mapping ==============

def test_calendar_event_mapping(client):
    patient = Patient(
        doctor_id="doc",
        first_name="Peter",
        last_name="Parker",
        date_of_birth=datetime(1990, 5, 15),
        gender="Male",
        email="peter@example.com",
    )
    appointment = Appointment(patient_id="p1", appointment_date=datetime(2030, 1, 10, 9, 30), notes=None)

    start, end = appointment_window(appointment)
    event = appointment_to_calendar_event(appointment, patient, "Europe/London")

    assert (end - start).total_seconds() == 3600
    assert event["summary"] == "Appointment with Peter Parker"
    assert event["description"] == "Medical appointment\n\nPatient: Peter Parker\nNotes: No notes"
    assert event["start"] == {"dateTime": "2030-01-10T09:30:00.000Z", "timeZone": "Europe/London"}
    assert event["end"] == {"dateTime": "2030-01-10T10:30:00.000Z", "timeZone": "Europe/London"}
    assert event["attendees"] == [{"email": "peter@example.com", "displayName": "Peter Parker"}]

    patient.email = None
    assert "attendees" not in appointment_to_calendar_event(appointment, patient, "UTC")


# ============== OAuth linking ==============

def test_link_calendar(client, doctor, fake_google):
    response = link_calendar(client, doctor)

    assert response.status_code in (302, 307)
    assert response.headers["location"] == f"{settings.FRONTEND_URL}/calendar?setup=success"
    assert client.get("/api/auth/me", headers=doctor).json()["calendar_connected"] is True


def test_link_calendar_with_bad_code(client, doctor, fake_google):
    response = link_calendar(client, doctor, code="bad-code")

    assert response.headers["location"] == f"{settings.FRONTEND_URL}/calendar?error=setup_failed"
    assert client.get("/api/auth/me", headers=doctor).json()["calendar_connected"] is False


def test_callback_with_forged_state(client, doctor, fake_google):
    response = client.get(
        "/api/auth/google/callback",
        params={"code": "good-code", "state": "forged"},
        follow_redirects=False,
    )

    assert response.headers["location"] == f"{settings.FRONTEND_URL}/calendar?error=setup_failed"


def test_callback_without_code(client, fake_google):
    response = client.get("/api/auth/google/callback", follow_redirects=False)

    assert response.status_code == 400


def test_disconnect(client, doctor, fake_google):
    link_calendar(client, doctor)

    response = client.delete("/api/calendar/google", headers=doctor)

    assert response.status_code == 200
    assert client.get("/api/auth/me", headers=doctor).json()["calendar_connected"] is False


# ============== Sync ==============

def test_sync_requires_linked_calendar(client, doctor, fake_google):
    patient = create_patient(client, doctor)
    appointment = create_appointment(client, doctor, patient["id"])

    created = sync(client, doctor, appointment["id"])
    removed = sync(client, doctor, appointment["id"], method="DELETE")

    assert created.status_code == 400
    assert created.json()["detail"] == "Google Calendar not connected. Please connect your calendar first."
    assert removed.status_code == 400


def test_sync_creates_then_updates(client, doctor, fake_google):
    link_calendar(client, doctor)
    patient = create_patient(client, doctor)
    appointment = create_appointment(client, doctor, patient["id"])

    first = sync(client, doctor, appointment["id"])
    assert first.status_code == 200
    event_id = first.json()["event_id"]
    assert first.json()["success"] is True
    assert fake_google.events[event_id]["summary"] == "Appointment with Peter Parker"

    stored = client.get(f"/api/appointments/{appointment['id']}", headers=doctor).json()
    assert stored["google_calendar_event_id"] == event_id

    client.put(f"/api/appointments/{appointment['id']}", json={"notes": "Bring x-rays"}, headers=doctor)
    second = sync(client, doctor, appointment["id"])

    assert second.json()["event_id"] == event_id
    assert len(fake_google.events) == 1
    assert "Bring x-rays" in fake_google.events[event_id]["description"]


def test_sync_foreign_appointment_is_not_found(client, doctor, other_doctor, fake_google):
    link_calendar(client, other_doctor)
    patient = create_patient(client, doctor)
    appointment = create_appointment(client, doctor, patient["id"])

    response = sync(client, other_doctor, appointment["id"])

    assert response.status_code == 404
    assert fake_google.events == {}


def test_unsync(client, doctor, fake_google):
    link_calendar(client, doctor)
    patient = create_patient(client, doctor)
    appointment = create_appointment(client, doctor, patient["id"])

    not_synced = sync(client, doctor, appointment["id"], method="DELETE")
    assert not_synced.status_code == 404
    assert not_synced.json()["detail"] == "Appointment not found or not synced with calendar"

    sync(client, doctor, appointment["id"])
    removed = sync(client, doctor, appointment["id"], method="DELETE")

    assert removed.status_code == 200
    assert fake_google.events == {}
    stored = client.get(f"/api/appointments/{appointment['id']}", headers=doctor).json()
    assert stored["google_calendar_event_id"] is None


def test_google_failure_is_server_error(client, doctor, fake_google):
    link_calendar(client, doctor)
    patient = create_patient(client, doctor)
    appointment = create_appointment(client, doctor, patient["id"])
    fake_google.fail = True

    response = sync(client, doctor, appointment["id"])

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to sync with Google Calendar"
    stored = client.get(f"/api/appointments/{appointment['id']}", headers=doctor).json()
    assert stored["google_calendar_event_id"] is None


def test_list_events_and_calendars(client, doctor, fake_google):
    link_calendar(client, doctor)
    patient = create_patient(client, doctor)
    appointment = create_appointment(client, doctor, patient["id"])
    sync(client, doctor, appointment["id"])

    events = client.get(
        "/api/calendar/events",
        params={"time_min": "2030-01-01T00:00:00Z", "time_max": "2030-12-31T00:00:00Z"},
        headers=doctor,
    )
    calendars = client.get("/api/calendar/calendars", headers=doctor)

    assert events.status_code == 200
    assert len(events.json()["events"]) == 1
    assert calendars.json()["calendars"][0]["id"] == "primary"


# ============== Token refresh ==============

class RefreshingEvents:
    """Calendar client whose calls refresh the access token before answering."""

    def __init__(self, service, fail):
        self.service = service
        self.fail = fail

    def events(self):
        return self

    def insert(self, calendarId, body):
        return self

    def execute(self):
        self.service.credentials.token = "refreshed-token"
        if self.fail:
            raise RuntimeError("backend error")
        return {"id": "evt1"}


def calendar_user(saves):
    async def save():
        saves.append("save")
        raise RuntimeError("database unavailable")

    return SimpleNamespace(
        id="user1",
        google_access_token="old-token",
        google_refresh_token="refresh-token",
        google_token_expiry=None,
        google_calendar_id=None,
        update_timestamp=lambda: None,
        save=save,
    )


def test_failed_call_reports_sync_error_without_storing_token():
    saves = []
    service = GoogleCalendarService(calendar_user(saves))
    service._client = RefreshingEvents(service, fail=True)

    with pytest.raises(CalendarSyncError):
        asyncio.run(service.create_event({"summary": "x"}))
    assert saves == []


def test_token_store_failure_does_not_fail_the_call():
    saves = []
    user = calendar_user(saves)
    service = GoogleCalendarService(user)
    service._client = RefreshingEvents(service, fail=False)

    assert asyncio.run(service.create_event({"summary": "x"})) == "evt1"
    assert saves == ["save"]
    assert user.google_access_token == "refreshed-token"
