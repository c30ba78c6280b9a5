import logging
import threading
from typing import List, Optional

from travelmap.core.errors import ConfirmationRequired, NotFoundError, ResolutionError
from travelmap.models.domain import (
    Booking,
    Destination,
    DestinationId,
    ExplorerState,
    Viewport,
)
from travelmap.services.booking_service import BookingLedger
from travelmap.services.search_service import SearchResolver
from travelmap.services.view_state import ViewStateController
from travelmap.tools.catalog import Catalog

logger = logging.getLogger(__name__)


class ExplorerService:
    """
    Owns the application state (query, results, search generation, last
    error) and applies user actions to the resolver, the view state
    controller and the booking ledger.
    """

    def __init__(
        self,
        catalog: Catalog,
        resolver: SearchResolver,
        view: ViewStateController,
        ledger: BookingLedger,
        default_viewport: Viewport,
        found_zoom: float = 6,
        detail_zoom: float = 10,
    ):
        self.catalog = catalog
        self.resolver = resolver
        self.view = view
        self.ledger = ledger
        self.default_viewport = default_viewport
        self.found_zoom = found_zoom
        self.detail_zoom = detail_zoom
        self._lock = threading.RLock()
        self._query = ""
        self._results: List[Destination] = catalog.all()
        self._generation = 0
        self._error: Optional[str] = None
        self.view.widget.render_markers(self._results)

    def snapshot(self) -> ExplorerState:
        with self._lock:
            return ExplorerState(
                query=self._query,
                results=list(self._results),
                selected=self.view.selected,
                viewport=self.view.viewport,
                generation=self._generation,
                error=self._error,
                bookings=self.ledger.list(),
            )

    def search(self, query: str) -> ExplorerState:
        if not query.strip():
            return self.reset()

        with self._lock:
            self._generation += 1
            generation = self._generation
            self._query = query

        # the geocoder may block; other actions stay responsive meanwhile
        error: Optional[str] = None
        try:
            results = self.resolver.resolve(query)
        except ResolutionError as exc:
            logger.warning("Search for %r failed: %s", query, exc)
            results, error = [], str(exc)

        with self._lock:
            if generation != self._generation:
                logger.info(
                    "Discarding results of search %d (%r); search %d is newer",
                    generation,
                    query,
                    self._generation,
                )
                return self.snapshot()
            self._apply_results(results, error)
            return self.snapshot()

    def reset(self) -> ExplorerState:
        with self._lock:
            self._generation += 1
            self._query = ""
            self._apply_results(self.catalog.all(), None, autoselect=False)
            default = self.default_viewport
            self.view.set_viewport(default.latitude, default.longitude, default.zoom)
            return self.snapshot()

    def _apply_results(
        self, results: List[Destination], error: Optional[str], autoselect: bool = True
    ) -> None:
        self._results = results
        self._error = error
        self.view.widget.render_markers(results)
        if autoselect and results:
            self.view.select(results[0], zoom=self.found_zoom)

    def lookup(self, destination_id: DestinationId) -> Destination:
        with self._lock:
            for destination in self._results:
                if destination.id == destination_id:
                    return destination
        destination = self.catalog.get(destination_id)
        if destination is None:
            raise NotFoundError(f"Unknown destination {destination_id!r}")
        return destination

    def view_destination(
        self, destination_id: DestinationId, zoom: Optional[float] = None, detail: bool = False
    ) -> ExplorerState:
        """Select and recentre: "View" uses the found zoom, "Zoom" the detail zoom."""
        destination = self.lookup(destination_id)
        if zoom is None:
            zoom = self.detail_zoom if detail else self.found_zoom
        with self._lock:
            self.view.select(destination, zoom=zoom)
            return self.snapshot()

    def clear_selection(self) -> ExplorerState:
        with self._lock:
            self.view.clear_selection()
            return self.snapshot()

    def set_viewport(self, latitude=None, longitude=None, zoom=None) -> Viewport:
        with self._lock:
            return self.view.set_viewport(latitude, longitude, zoom)

    def report_gesture(self, latitude: float, longitude: float, zoom: float) -> Viewport:
        with self._lock:
            return self.view.on_gesture_end(latitude, longitude, zoom)

    def book(self, destination: Destination, name: str, email: str) -> Booking:
        """
        Book the destination exactly as the form showed it. Result ids are
        reused across searches, so the caller passes the record, not its id.
        Selection only moves once the ledger has accepted the booking.
        """
        booking = self.ledger.create(destination, name, email)
        with self._lock:
            self.view.select(booking.destination)
        return booking

    def cancel_booking(self, booking_id: int, confirmed: bool) -> bool:
        def _confirm(booking: Booking) -> bool:
            if not confirmed:
                raise ConfirmationRequired(
                    f"Cancel booking for {booking.destination.name}? Confirmation required."
                )
            return True

        return self.ledger.cancel(booking_id, confirm=_confirm)

    def go_to_booking(self, booking_id: int) -> Viewport:
        booking = self.ledger.get(booking_id)
        if booking is None:
            raise NotFoundError(f"Unknown booking {booking_id}")
        with self._lock:
            return self.view.set_viewport(
                booking.destination.latitude,
                booking.destination.longitude,
                self.found_zoom,
            )
