from __future__ import annotations

import logging
import threading
from typing import Dict, Protocol, Set

from .errors import ConflictError
from .scheduling.slots import SlotCatalog
from .schemas import Slot

logger = logging.getLogger(__name__)


class BookingStore(Protocol):
    catalog: SlotCatalog

    def available(self, date: str) -> list[Slot]:
        ...

    def reserved(self, date: str) -> set[str]:
        ...

    def try_reserve(self, date: str, time: str) -> None:
        ...


class InMemoryBookingStore:
    """Reservations keyed by ISO date; lost when the process exits.

    Dates and times must already be normalized to ``YYYY-MM-DD`` / ``HH:MM``.
    """

    def __init__(self, catalog: SlotCatalog) -> None:
        self.catalog = catalog
        self.reservations: Dict[str, Set[str]] = {}
        self._lock = threading.Lock()

    def reserved(self, date: str) -> set[str]:
        with self._lock:
            return set(self.reservations.get(date, ()))

    def available(self, date: str) -> list[Slot]:
        taken = self.reserved(date)
        return [slot for slot in self.catalog.slots_for(date) if slot.value not in taken]

    def try_reserve(self, date: str, time: str) -> None:
        with self._lock:
            taken = self.reservations.setdefault(date, set())
            if time in taken:
                logger.info(f"Rejected double booking for {date} {time}")
                raise ConflictError(date, time)
            taken.add(time)
        logger.info(f"Reserved {date} {time}")
