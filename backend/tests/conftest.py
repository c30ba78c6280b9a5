from typing import Callable, List, Optional, Sequence, Tuple

import pytest

from travelmap.core.errors import ResolutionError
from travelmap.models.domain import Destination, Viewport
from travelmap.services.booking_service import BookingLedger
from travelmap.services.explorer_service import ExplorerService
from travelmap.services.search_service import SearchResolver
from travelmap.services.view_state import ViewStateController
from travelmap.storage.repository import InMemoryStore
from travelmap.tools.catalog import Catalog

DEFAULT_VIEWPORT = Viewport(latitude=48.8566, longitude=2.3522, zoom=2.5)


class FakeGeocoder:
    def __init__(self, records: Optional[List[dict]] = None, error: Optional[Exception] = None):
        self.records = records or []
        self.error = error
        self.calls: List[Tuple[str, int]] = []
        self.before_return: Optional[Callable[[], None]] = None

    def search(self, query: str, limit: int = 5) -> List[dict]:
        self.calls.append((query, limit))
        if self.before_return:
            self.before_return()
        if self.error:
            raise self.error
        return self.records


class RecordingMapWidget:
    def __init__(self) -> None:
        self.markers: List[Destination] = []
        self.set_view_calls: List[Tuple[Tuple[float, float], float]] = []
        self.on_set_view: Optional[Callable[[Tuple[float, float], float], None]] = None

    def render_markers(self, destinations: Sequence[Destination]) -> None:
        self.markers = list(destinations)

    def set_view(self, center: Tuple[float, float], zoom: float) -> None:
        self.set_view_calls.append((center, zoom))
        if self.on_set_view:
            self.on_set_view(center, zoom)


@pytest.fixture
def catalog() -> Catalog:
    return Catalog()


@pytest.fixture
def geocoder() -> FakeGeocoder:
    return FakeGeocoder()


@pytest.fixture
def widget() -> RecordingMapWidget:
    return RecordingMapWidget()


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def explorer(catalog, geocoder, widget, store) -> ExplorerService:
    return ExplorerService(
        catalog=catalog,
        resolver=SearchResolver(catalog, geocoder),
        view=ViewStateController(widget, initial=DEFAULT_VIEWPORT),
        ledger=BookingLedger(store),
        default_viewport=DEFAULT_VIEWPORT,
    )


def failing_geocoder(message: str = "boom") -> FakeGeocoder:
    return FakeGeocoder(error=ResolutionError(message))
