from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from dateutil import tz
from icalendar import Calendar, Event, vCalAddress, vText

from ..config import Settings
from ..errors import InviteEncodingError
from ..schemas import BookingRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Attendee:
    name: str
    email: str
    rsvp: bool = False


@dataclass
class InvitePayload:
    title: str
    description: str
    start: datetime
    duration: timedelta
    organizer: Attendee
    attendees: list[Attendee] = field(default_factory=list)
    status: str = "CONFIRMED"
    method: str = "REQUEST"
    uid: str = field(default_factory=lambda: f"{uuid.uuid4().hex}@hvac-booking")


def build_invite(booking: BookingRequest, settings: Settings) -> InvitePayload:
    """Describe the confirmed appointment for ``booking``.

    ``booking.date`` and ``booking.time`` must already be normalized. When
    ``BUSINESS_TIMEZONE`` is unset the start is a floating local time.
    """
    start = datetime.strptime(f"{booking.date} {booking.time}", "%Y-%m-%d %H:%M")
    if settings.business_timezone:
        zone = tz.gettz(settings.business_timezone)
        if zone is None:
            raise InviteEncodingError(f"Unknown timezone {settings.business_timezone!r}")
        start = start.replace(tzinfo=zone).astimezone(timezone.utc)

    business = Attendee(name=settings.business_name, email=settings.business_inbox or "")
    return InvitePayload(
        title=f"{settings.business_name} Appointment - {booking.name}",
        description=(
            f"Appointment for {booking.name}, Phone: {booking.phone}, "
            f"Email: {booking.email}, Address: {booking.address}, "
            f"Details: {booking.details}"
        ),
        start=start,
        duration=timedelta(minutes=settings.appointment_minutes),
        organizer=business,
        attendees=[
            Attendee(name=booking.name or "", email=booking.email or "", rsvp=True),
            business,
        ],
    )


def _address(person: Attendee) -> vCalAddress:
    address = vCalAddress(f"MAILTO:{person.email}")
    address.params["cn"] = vText(person.name)
    return address


def encode_invite(payload: InvitePayload) -> bytes:
    try:
        calendar = Calendar()
        calendar.add("prodid", "-//hvac-booking//appointments//EN")
        calendar.add("version", "2.0")
        calendar.add("method", payload.method)

        event = Event()
        event.add("uid", payload.uid)
        event.add("dtstamp", datetime.now(timezone.utc))
        event.add("summary", payload.title)
        event.add("description", payload.description)
        event.add("dtstart", payload.start)
        event.add("duration", payload.duration)
        event.add("status", payload.status)
        event.add("organizer", _address(payload.organizer), encode=0)
        for person in payload.attendees:
            attendee = _address(person)
            attendee.params["rsvp"] = vText("TRUE" if person.rsvp else "FALSE")
            event.add("attendee", attendee, encode=0)
        calendar.add_component(event)
        return calendar.to_ical()
    except Exception as exc:
        logger.error(f"ICS error: {exc}")
        raise InviteEncodingError() from exc
