from __future__ import annotations

from datetime import date, datetime

from dateutil import parser as date_parser

from ..errors import ValidationError
from ..schemas import Slot

WEEKDAY_TIMES = ("08:00", "10:00", "12:00", "14:00", "16:00")
SATURDAY_TIMES = ("09:00", "11:00", "13:00")
SUNDAY_TIMES: tuple[str, ...] = ()

SLOT_POLICIES = ("weekly", "fixed")

_FIRST_DEFAULT = datetime(2000, 1, 1)
_SECOND_DEFAULT = datetime(2001, 2, 2)


def format_slot_label(value: str) -> str:
    dt = datetime.strptime(value, "%H:%M")
    return dt.strftime("%I:%M %p").lstrip("0")


def make_slot(value: str) -> Slot:
    return Slot(label=format_slot_label(value), value=value)


def normalize_date(date_str: str) -> str:
    # Store keys are ISO dates so "2026-10-20" and "Oct 20 2026" collide.
    # Parts missing from the input would be filled from the default, so parse
    # against two different defaults and require the same answer.
    try:
        first = date_parser.parse(date_str, default=_FIRST_DEFAULT).date()
        second = date_parser.parse(date_str, default=_SECOND_DEFAULT).date()
    except (ValueError, OverflowError) as exc:
        raise ValidationError(f"Invalid date: {date_str!r}") from exc
    if first != second:
        raise ValidationError(f"Incomplete date: {date_str!r}; expected YYYY-MM-DD")
    return first.isoformat()


def normalize_time(time_str: str) -> str:
    try:
        return date_parser.parse(time_str).time().strftime("%H:%M")
    except (ValueError, OverflowError) as exc:
        raise ValidationError(f"Invalid time: {time_str!r}") from exc


class SlotCatalog:
    """Bookable times per calendar day.

    ``weekly`` offers fewer slots on Saturday and none on Sunday; ``fixed``
    offers the weekday list every day.
    """

    def __init__(self, policy: str = "weekly") -> None:
        if policy not in SLOT_POLICIES:
            raise ValueError(f"Unknown slot policy {policy!r}; expected one of {SLOT_POLICIES}")
        self.policy = policy

    def _times_for(self, day: date) -> tuple[str, ...]:
        if self.policy == "fixed":
            return WEEKDAY_TIMES
        weekday = day.weekday()
        if weekday == 5:
            return SATURDAY_TIMES
        if weekday == 6:
            return SUNDAY_TIMES
        return WEEKDAY_TIMES

    def slots_for(self, day: date | str) -> list[Slot]:
        if isinstance(day, str):
            day = date.fromisoformat(normalize_date(day))
        return [make_slot(value) for value in self._times_for(day)]

    def values_for(self, day: date | str) -> list[str]:
        return [slot.value for slot in self.slots_for(day)]
