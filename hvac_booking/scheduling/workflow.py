from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from ..config import Settings
from ..errors import DeliveryError, InviteEncodingError, ValidationError
from ..notifications.invites import InvitePayload, build_invite, encode_invite
from ..notifications.mailer import Notifier
from ..schemas import BookingRequest
from ..store import BookingStore
from .slots import normalize_date, normalize_time

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("date", "time", "name", "email", "phone", "address", "details")


class BookingStatus(str, Enum):
    RESERVED = "reserved"
    RESERVED_INVITE_FAILED = "reserved_invite_failed"
    RESERVED_DELIVERY_FAILED = "reserved_delivery_failed"
    CONFIRMED = "confirmed"


@dataclass
class BookingOutcome:
    status: BookingStatus
    date: str
    time: str
    detail: str

    @property
    def success(self) -> bool:
        return self.status in (BookingStatus.CONFIRMED, BookingStatus.RESERVED)


def missing_fields(request: BookingRequest) -> list[str]:
    missing = []
    for name in REQUIRED_FIELDS:
        value = getattr(request, name)
        if value is None or not value.strip():
            missing.append(name)
    return missing


class BookingService:
    """Reserve a slot, then send the invite on a best-effort basis.

    Once ``try_reserve`` succeeds the slot stays taken: invite or mail
    failures are reported through the outcome status and never release it.
    """

    def __init__(
        self,
        store: BookingStore,
        notifier: Notifier,
        settings: Settings,
        encoder: Callable[[InvitePayload], bytes] = encode_invite,
    ) -> None:
        self.store = store
        # Availability and booking must read the same catalog.
        self.catalog = store.catalog
        self.notifier = notifier
        self.settings = settings
        self.encoder = encoder

    def validate(self, request: BookingRequest) -> BookingRequest:
        missing = missing_fields(request)
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        date = normalize_date(request.date)
        time = normalize_time(request.time)
        if time not in self.catalog.values_for(date):
            raise ValidationError(f"{time} is not an available time on {date}")

        cleaned = {name: getattr(request, name).strip() for name in REQUIRED_FIELDS}
        cleaned.update(date=date, time=time)
        return BookingRequest(**cleaned)

    def book(self, request: BookingRequest) -> BookingOutcome:
        booking = self.validate(request)
        self.store.try_reserve(booking.date, booking.time)
        logger.info(f"Booked {booking.date} {booking.time} for {booking.name}")

        if not self.settings.send_notifications:
            return BookingOutcome(
                BookingStatus.RESERVED,
                booking.date,
                booking.time,
                "Booked (notifications disabled)",
            )

        try:
            invite = self.encoder(build_invite(booking, self.settings))
        except InviteEncodingError as e:
            logger.error(f"Invite for {booking.date} {booking.time} not created: {e.message}")
            return BookingOutcome(
                BookingStatus.RESERVED_INVITE_FAILED,
                booking.date,
                booking.time,
                InviteEncodingError.default_message,
            )

        try:
            self.notifier.deliver(booking, invite)
        except DeliveryError as e:
            return BookingOutcome(
                BookingStatus.RESERVED_DELIVERY_FAILED, booking.date, booking.time, e.message
            )

        return BookingOutcome(
            BookingStatus.CONFIRMED, booking.date, booking.time, "Booked & invite emailed"
        )
