"""ICS export."""

from datetime import timedelta
from urllib.parse import unquote

from icalendar import Calendar

from conftest import create_appointment, create_patient


def parse(response):
    return Calendar.from_ical(response.content)


def events_of(calendar):
    return [component for component in calendar.walk() if component.name == "VEVENT"]


def test_export_with_no_matches(client, doctor):
    patient = create_patient(client, doctor)
    create_appointment(client, doctor, patient["id"], status="COMPLETED")

    response = client.get("/api/calendar/export", params={"status": "SCHEDULED"}, headers=doctor)

    assert response.status_code == 404
    assert response.json()["detail"] == "No appointments found for export"


def test_export_all(client, doctor):
    patient = create_patient(client, doctor)
    first = create_appointment(client, doctor, patient["id"], appointment_date="2030-01-10T09:00:00.000Z")
    create_appointment(client, doctor, patient["id"], appointment_date="2030-02-10T09:00:00.000Z", status="CANCELLED")

    response = client.get("/api/calendar/export", headers=doctor)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/calendar")
    assert response.headers["content-disposition"] == 'attachment; filename="appointments.ics"'

    calendar = parse(response)
    assert str(calendar["version"]) == "2.0"
    assert str(calendar["calscale"]) == "GREGORIAN"

    events = events_of(calendar)
    assert len(events) == 2
    event = events[0]
    assert str(event["uid"]) == f"appointment-{first['id']}@clinic-management"
    assert str(event["summary"]) == "Appointment with Peter Parker"
    assert "Status: SCHEDULED" in str(event["description"])
    assert "Notes: Annual checkup" in str(event["description"])
    assert str(event["status"]) == "TENTATIVE"
    assert str(events[1]["status"]) == "CANCELLED"
    assert str(event["location"]) == "Medical Office"
    assert event.decoded("dtend") - event.decoded("dtstart") == timedelta(hours=1)
    assert event.decoded("dtstart").utcoffset().total_seconds() == 0
    assert "peter@example.com" in str(event["attendee"])
    assert "a@x.com" in str(event["organizer"])


def test_export_filters_and_filename(client, doctor):
    patient = create_patient(client, doctor)
    create_appointment(client, doctor, patient["id"], appointment_date="2030-01-10T09:00:00.000Z")
    create_appointment(client, doctor, patient["id"], appointment_date="2030-02-10T09:00:00.000Z")
    create_appointment(client, doctor, patient["id"], appointment_date="2030-03-10T09:00:00.000Z")

    response = client.get("/api/calendar/export", params={
        "status": "SCHEDULED",
        "start_date": "2030-02-01",
        "end_date": "2030-02-28",
    }, headers=doctor)

    assert response.status_code == 200
    assert response.headers["content-disposition"] == (
        'attachment; filename="appointments-scheduled-from-2030-02-01-to-2030-02-28.ics"'
    )
    assert len(events_of(parse(response))) == 1


def test_export_single_appointment(client, doctor):
    patient = create_patient(client, doctor, email=None)
    appointment = create_appointment(client, doctor, patient["id"], status="COMPLETED")

    response = client.get("/api/calendar/export", params={"appointment_id": appointment["id"]}, headers=doctor)

    assert response.status_code == 200
    assert response.headers["content-disposition"] == 'attachment; filename="appointment-Peter-Parker.ics"'
    events = events_of(parse(response))
    assert len(events) == 1
    assert str(events[0]["status"]) == "CONFIRMED"
    assert "attendee" not in events[0]


def test_export_foreign_appointment_is_not_found(client, doctor, other_doctor):
    patient = create_patient(client, doctor)
    appointment = create_appointment(client, doctor, patient["id"])

    single = client.get("/api/calendar/export", params={"appointment_id": appointment["id"]}, headers=other_doctor)
    everything = client.get("/api/calendar/export", headers=other_doctor)

    assert single.status_code == 404
    assert everything.status_code == 404


def test_export_invalid_date_is_bad_request(client, doctor):
    response = client.get("/api/calendar/export", params={"start_date": "next tuesday"}, headers=doctor)

    assert response.status_code == 400


def download_name(content_disposition):
    """The filename a browser would save, preferring the RFC 5987 parameter."""
    for part in content_disposition.split(";"):
        key, _, value = part.strip().partition("=")
        if key == "filename*":
            return unquote(value.split("''", 1)[1])
    for part in content_disposition.split(";"):
        key, _, value = part.strip().partition("=")
        if key == "filename":
            return value.strip('"')
    return None


def test_export_single_appointment_with_non_latin_name(client, doctor):
    patient = create_patient(client, doctor, first_name="Łukasz", last_name="Żółć")
    appointment = create_appointment(client, doctor, patient["id"])

    response = client.get("/api/calendar/export", params={"appointment_id": appointment["id"]}, headers=doctor)

    assert response.status_code == 200
    header = response.headers["content-disposition"]
    header.encode("ascii")
    assert 'filename="appointment-_ukasz-Zo_c.ics"' in header
    assert download_name(header) == "appointment-Łukasz-Żółć.ics"
    assert str(events_of(parse(response))[0]["summary"]) == "Appointment with Łukasz Żółć"


def test_export_single_appointment_with_quote_in_name(client, doctor):
    patient = create_patient(client, doctor, first_name='Ann"a', last_name="Lee")
    appointment = create_appointment(client, doctor, patient["id"])

    response = client.get("/api/calendar/export", params={"appointment_id": appointment["id"]}, headers=doctor)

    assert response.status_code == 200
    assert response.headers["content-disposition"] == (
        "attachment; filename=\"appointment-Ann_a-Lee.ics\"; filename*=UTF-8''appointment-Ann%22a-Lee.ics"
    )
    assert download_name(response.headers["content-disposition"]) == 'appointment-Ann"a-Lee.ics'
