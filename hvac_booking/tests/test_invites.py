from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest
from icalendar import Calendar

from hvac_booking.config import Settings
from hvac_booking.errors import InviteEncodingError
from hvac_booking.notifications.invites import build_invite, encode_invite
from hvac_booking.schemas import BookingRequest


def _settings(**overrides) -> Settings:
    values = dict(
        email_user="bookings@example.com",
        email_pass="secret",
        business_email=None,
        business_name="J & L Climate Co.",
        business_timezone=None,
        appointment_minutes=60,
    )
    values.update(overrides)
    return Settings(**values)


def _booking() -> BookingRequest:
    return BookingRequest(
        date="2026-10-20",
        time="10:00",
        name="Ann Lee",
        email="ann@example.com",
        phone="555-0100",
        address="1 Main St",
        details="AC not cooling",
    )


def test_build_invite_describes_the_appointment() -> None:
    invite = build_invite(_booking(), _settings())

    assert invite.title == "J & L Climate Co. Appointment - Ann Lee"
    assert "555-0100" in invite.description
    assert "AC not cooling" in invite.description
    assert invite.start == datetime(2026, 10, 20, 10, 0)
    assert invite.duration == timedelta(hours=1)
    assert invite.organizer.email == "bookings@example.com"
    assert [(a.email, a.rsvp) for a in invite.attendees] == [
        ("ann@example.com", True),
        ("bookings@example.com", False),
    ]


def test_build_invite_uses_business_inbox_when_set() -> None:
    invite = build_invite(_booking(), _settings(business_email="office@example.com"))

    assert invite.organizer.email == "office@example.com"


def test_build_invite_converts_business_timezone_to_utc() -> None:
    invite = build_invite(_booking(), _settings(business_timezone="America/New_York"))

    assert invite.start == datetime(2026, 10, 20, 14, 0, tzinfo=timezone.utc)


def test_build_invite_rejects_unknown_timezone() -> None:
    with pytest.raises(InviteEncodingError):
        build_invite(_booking(), _settings(business_timezone="Mars/Olympus_Mons"))


def test_encode_invite_produces_calendar_request() -> None:
    data = encode_invite(build_invite(_booking(), _settings()))

    assert data.startswith(b"BEGIN:VCALENDAR")
    calendar = Calendar.from_ical(data)
    assert str(calendar["method"]) == "REQUEST"
    events = calendar.walk("VEVENT")
    assert len(events) == 1
    event = events[0]
    assert str(event["summary"]) == "J & L Climate Co. Appointment - Ann Lee"
    assert event.decoded("dtstart") == datetime(2026, 10, 20, 10, 0)
    assert event.decoded("duration") == timedelta(hours=1)
    assert str(event["status"]) == "CONFIRMED"
    assert "mailto:ann@example.com" in [str(a).lower() for a in event["attendee"]]


def test_encode_invite_wraps_library_errors() -> None:
    with patch.object(Calendar, "to_ical", side_effect=ValueError("bad")):
        with pytest.raises(InviteEncodingError) as excinfo:
            encode_invite(build_invite(_booking(), _settings()))

    assert excinfo.value.status_code == 500
