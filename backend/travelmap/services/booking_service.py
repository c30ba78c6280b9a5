from __future__ import annotations

import logging
import threading
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, List, Optional

import pydantic
from pydantic import TypeAdapter

from travelmap.core.errors import PersistenceError, ValidationError
from travelmap.models.domain import Booking, Contact, Destination
from travelmap.models.schemas import BookingSchema
from travelmap.storage.repository import KeyValueStore

logger = logging.getLogger(__name__)

_BOOKINGS_ADAPTER = TypeAdapter(List[BookingSchema])

Clock = Callable[[], datetime]
Confirmation = Callable[[Booking], bool]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BookingLedger:
    """
    Mock bookings, most recent first. The full collection is written to the
    store after every successful create or cancel and read back on start-up.
    """

    def __init__(self, store: KeyValueStore, key: str = "tp_bookings", clock: Clock = _utcnow):
        self.store = store
        self.key = key
        self.clock = clock
        self._lock = threading.Lock()
        self._last_id = 0
        self._bookings: List[Booking] = self._load()

    def _load(self) -> List[Booking]:
        try:
            raw = self.store.get(self.key)
        except PersistenceError as exc:
            logger.warning("Booking storage unreadable, starting empty: %s", exc)
            return []
        if not raw:
            return []
        try:
            records = _BOOKINGS_ADAPTER.validate_json(raw)
            bookings = [record.to_domain() for record in records]
        except (pydantic.ValidationError, ValueError) as exc:
            logger.warning("Discarding corrupt booking data under %r: %s", self.key, exc)
            return []
        if bookings:
            self._last_id = max(b.id for b in bookings)
        logger.info("Loaded %d bookings", len(bookings))
        return bookings

    def _persist(self) -> None:
        # caller holds the lock, so snapshots hit the store in mutation order
        payload = _BOOKINGS_ADAPTER.dump_json(
            [BookingSchema.from_domain(b) for b in self._bookings]
        ).decode("utf-8")
        try:
            self.store.set(self.key, payload)
        except PersistenceError as exc:
            logger.error("Booking write skipped: %s", exc)

    def _next_id(self, created_at: datetime) -> int:
        candidate = int(created_at.timestamp() * 1000)
        self._last_id = max(candidate, self._last_id + 1)
        return self._last_id

    def list(self) -> List[Booking]:
        with self._lock:
            return list(self._bookings)

    def get(self, booking_id: int) -> Optional[Booking]:
        with self._lock:
            return next((b for b in self._bookings if b.id == booking_id), None)

    def create(self, destination: Destination, name: str, email: str) -> Booking:
        name = (name or "").strip()
        email = (email or "").strip()
        if not name or not email:
            raise ValidationError("Please enter name and email")

        with self._lock:
            created_at = self.clock()
            booking = Booking(
                id=self._next_id(created_at),
                destination=replace(destination),
                contact=Contact(name=name, email=email),
                created_at=created_at,
            )
            self._bookings.insert(0, booking)
            self._persist()
        logger.info("Booked %s for %s (booking %s)", destination.name, email, booking.id)
        return booking

    def cancel(self, booking_id: int, confirm: Confirmation) -> bool:
        with self._lock:
            booking = next((b for b in self._bookings if b.id == booking_id), None)
        if booking is None:
            return False
        if not confirm(booking):
            logger.info("Cancellation of booking %s not confirmed", booking_id)
            return False

        with self._lock:
            remaining = [b for b in self._bookings if b.id != booking_id]
            if len(remaining) == len(self._bookings):
                return False
            self._bookings = remaining
            self._persist()
        logger.info("Cancelled booking %s", booking_id)
        return True
