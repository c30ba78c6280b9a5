import pytest

from travelmap.core.errors import (
    ConfirmationRequired,
    NotFoundError,
    ResolutionError,
    ValidationError,
)
from travelmap.models.domain import Destination, Viewport
from travelmap.services.booking_service import BookingLedger
from travelmap.tools.catalog import Catalog, SAMPLE_DESTINATIONS

from conftest import DEFAULT_VIEWPORT


def test_local_search_selects_first_and_recenters(explorer, geocoder, widget):
    state = explorer.search("Tokyo")

    assert [d.name for d in state.results] == ["Tokyo, Japan"]
    assert state.selected.name == "Tokyo, Japan"
    assert state.viewport == Viewport(latitude=35.6895, longitude=139.6917, zoom=6)
    assert widget.set_view_calls == [((35.6895, 139.6917), 6)]
    assert widget.markers == state.results
    assert geocoder.calls == []


def test_remote_empty_result_keeps_selection(explorer, geocoder, widget):
    explorer.search("Paris")
    before = explorer.snapshot()

    state = explorer.search("Nonexistentplace123")

    assert state.results == []
    assert state.selected == before.selected
    assert state.viewport == before.viewport
    assert state.error is None
    assert geocoder.calls == [("Nonexistentplace123", 5)]
    assert widget.markers == []


def test_remote_results_are_selected(explorer, geocoder):
    geocoder.records = [{"display_name": "Oslo, Norway", "lat": "59.91", "lon": "10.75"}]

    state = explorer.search("Oslo")

    assert state.selected.id == "osm-0"
    assert state.viewport == Viewport(latitude=59.91, longitude=10.75, zoom=6)
    assert explorer.lookup("osm-0").name == "Oslo, Norway"


def test_resolution_error_shows_empty_results(explorer, geocoder):
    geocoder.error = ResolutionError("service down")

    state = explorer.search("Atlantis")

    assert state.results == []
    assert state.error == "service down"
    assert state.viewport == DEFAULT_VIEWPORT


def test_stale_search_response_is_discarded(explorer, geocoder):
    geocoder.records = [{"display_name": "Stale, Place", "lat": "1", "lon": "1"}]
    # a newer local search lands while the remote lookup is still in flight
    geocoder.before_return = lambda: explorer.search("Goa")

    state = explorer.search("Somewhere remote")

    assert [d.name for d in state.results] == ["Goa, India"]
    assert state.selected.name == "Goa, India"
    assert state.generation == 2


def test_reset_restores_catalog_and_default_viewport(explorer, widget):
    explorer.search("Tokyo")

    state = explorer.reset()

    assert state.query == ""
    assert state.results == list(SAMPLE_DESTINATIONS)
    assert state.viewport == DEFAULT_VIEWPORT
    assert widget.set_view_calls[-1] == ((48.8566, 2.3522), 2.5)


def test_blank_search_is_a_reset(explorer):
    explorer.search("Tokyo")

    state = explorer.search("   ")

    assert state.results == list(SAMPLE_DESTINATIONS)
    assert state.viewport == DEFAULT_VIEWPORT


def test_view_and_detail_zoom(explorer):
    state = explorer.view_destination(4)

    assert state.selected.name == "Goa, India"
    assert state.viewport == Viewport(latitude=15.2993, longitude=73.7898, zoom=6)

    state = explorer.view_destination(4, detail=True)
    assert state.viewport.zoom == 10

    with pytest.raises(NotFoundError):
        explorer.view_destination(99)


def test_book_and_go_to_booking(explorer, widget):
    booking = explorer.book(explorer.catalog.get(1), "Ada", "ada@example.com")
    explorer.report_gesture(0.0, 0.0, 3)

    viewport = explorer.go_to_booking(booking.id)

    state = explorer.snapshot()
    assert state.bookings[0] == booking
    assert state.selected.name == "Paris, France"
    assert viewport == Viewport(latitude=48.8566, longitude=2.3522, zoom=6)
    assert widget.set_view_calls[-1] == ((48.8566, 2.3522), 6)


def test_cancel_booking_needs_confirmation(explorer):
    booking = explorer.book(explorer.catalog.get(2), "Ada", "ada@example.com")

    with pytest.raises(ConfirmationRequired):
        explorer.cancel_booking(booking.id, confirmed=False)
    assert explorer.ledger.list() == [booking]

    assert explorer.cancel_booking(booking.id, confirmed=True) is True
    assert explorer.cancel_booking(booking.id, confirmed=True) is False
    assert explorer.ledger.list() == []


def test_rejected_booking_keeps_selection(explorer):
    before = explorer.snapshot()

    with pytest.raises(ValidationError):
        explorer.book(explorer.catalog.get(3), " ", "")

    after = explorer.snapshot()
    assert after.selected is None
    assert after.selected == before.selected
    assert after.bookings == []


def test_booking_uses_the_record_shown_not_the_current_results(explorer, geocoder):
    geocoder.records = [{"display_name": "Oslo, Norway", "lat": "59.91", "lon": "10.75"}]
    oslo = explorer.search("Oslo").results[0]
    geocoder.records = [{"display_name": "Lisbon, Portugal", "lat": "38.71", "lon": "-9.14"}]
    explorer.search("Lisbon")

    booking = explorer.book(oslo, "Ada", "ada@example.com")

    assert booking.destination.name == "Oslo, Norway"
    assert explorer.lookup("osm-0").name == "Lisbon, Portugal"


def test_booking_snapshot_survives_catalog_swap(explorer, store):
    booking = explorer.book(explorer.lookup(1), "Ada", "ada@example.com")

    explorer.catalog = Catalog(
        [Destination(id=1, name="Paris (renamed)", coordinates=(0.0, 0.0), summary="")]
    )
    explorer.reset()

    assert explorer.lookup(1).name == "Paris (renamed)"
    assert explorer.ledger.get(booking.id).destination.name == "Paris, France"
    reloaded = BookingLedger(store).get(booking.id)
    assert reloaded == booking
    assert reloaded.destination.coordinates == (48.8566, 2.3522)
