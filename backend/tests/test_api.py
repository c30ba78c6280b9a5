import pytest
from fastapi.testclient import TestClient

from main import create_app
from travelmap.core.config import Settings
from travelmap.storage.repository import InMemoryStore

from conftest import FakeGeocoder

PARIS = {"id": 1, "name": "Paris, France", "coords": [48.8566, 2.3522], "summary": "Paris"}
NEW_YORK = {"id": 3, "name": "New York, USA", "coords": [40.7128, -74.006], "summary": "NYC"}


@pytest.fixture
def geocoder():
    return FakeGeocoder()


@pytest.fixture
def client(tmp_path, geocoder):
    config = Settings(storage_path=tmp_path / "storage.json")
    app = create_app(config=config, store=InMemoryStore(), geocoder=geocoder)
    return TestClient(app)


def test_health(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "catalog_size": 4}


def test_search_and_map_commands(client):
    resp = client.post("/search", json={"query": "tokyo"})

    assert resp.status_code == 200
    body = resp.json()
    assert [d["name"] for d in body["results"]] == ["Tokyo, Japan"]
    assert body["viewport"] == {"latitude": 35.6895, "longitude": 139.6917, "zoom": 6}

    command = {"center": [35.6895, 139.6917], "zoom": 6}
    peeked = client.get("/map").json()
    assert [m["id"] for m in peeked["markers"]] == [2]
    assert peeked["commands"] == [command]
    assert client.post("/map/drain").json()["commands"] == [command]
    assert client.post("/map/drain").json()["commands"] == []
    assert client.get("/map").json()["commands"] == []


def test_failed_geocoding_is_not_an_http_error(client, geocoder):
    geocoder.records = [{"display_name": "Broken"}]

    resp = client.post("/search", json={"query": "Atlantis"})

    assert resp.status_code == 200
    assert resp.json()["results"] == []
    assert resp.json()["error"]


def test_gesture_does_not_queue_set_view(client):
    client.post("/map/drain")

    resp = client.post(
        "/viewport/gesture", json={"latitude": 10.0, "longitude": 20.0, "zoom": 4}
    )

    assert resp.json() == {"latitude": 10.0, "longitude": 20.0, "zoom": 4}
    assert client.get("/map").json()["commands"] == []

    client.put("/viewport", json={"zoom": 5})
    assert client.get("/viewport").json() == {"latitude": 10.0, "longitude": 20.0, "zoom": 5}
    assert client.get("/map").json()["commands"] == [{"center": [10.0, 20.0], "zoom": 5}]


def test_selection_endpoints(client):
    resp = client.post("/selection", json={"destination_id": 3, "zoom": 10})

    assert resp.json()["selected"]["name"] == "New York, USA"
    assert resp.json()["viewport"]["zoom"] == 10
    assert client.delete("/selection").json()["selected"] is None
    assert client.post("/selection", json={"destination_id": 42}).status_code == 404


def test_booking_lifecycle(client):
    resp = client.post(
        "/bookings",
        json={"destination": PARIS, "name": "Ada", "email": "ada@example.com"},
    )
    assert resp.status_code == 201
    booking = resp.json()
    assert booking["destination"]["name"] == "Paris, France"
    assert booking["contact"] == {"name": "Ada", "email": "ada@example.com"}

    listed = client.get("/bookings").json()["bookings"]
    assert [b["id"] for b in listed] == [booking["id"]]

    go = client.post(f"/bookings/{booking['id']}/go").json()
    assert go == {"latitude": 48.8566, "longitude": 2.3522, "zoom": 6}

    assert client.delete(f"/bookings/{booking['id']}").status_code == 409
    assert client.delete(f"/bookings/{booking['id']}?confirm=true").status_code == 204
    assert client.get("/bookings").json()["bookings"] == []
    assert client.delete(f"/bookings/{booking['id']}?confirm=true").status_code == 204


def test_booking_requires_contact(client):
    before = client.get("/state").json()["selected"]

    resp = client.post("/bookings", json={"destination": NEW_YORK, "name": " ", "email": ""})

    assert resp.status_code == 422
    assert before is None
    assert client.get("/state").json()["selected"] is None
    assert resp.json() == {"detail": "Please enter name and email"}
    assert client.get("/bookings").json()["bookings"] == []


def test_booking_books_the_submitted_record_after_newer_search(client, geocoder):
    geocoder.records = [{"display_name": "Oslo, Norway", "lat": "59.91", "lon": "10.75"}]
    oslo = client.post("/search", json={"query": "Oslo"}).json()["results"][0]
    geocoder.records = [{"display_name": "Lisbon, Portugal", "lat": "38.71", "lon": "-9.14"}]
    lisbon = client.post("/search", json={"query": "Lisbon"}).json()["results"][0]
    assert oslo["id"] == lisbon["id"] == "osm-0"

    resp = client.post(
        "/bookings", json={"destination": oslo, "name": "Ada", "email": "ada@example.com"}
    )

    assert resp.status_code == 201
    assert resp.json()["destination"] == oslo
    assert client.get("/state").json()["selected"] == oslo


def test_booking_rejects_out_of_range_coordinates(client):
    bad = dict(PARIS, coords=[123.0, 2.0])

    resp = client.post("/bookings", json={"destination": bad, "name": "Ada", "email": "a@b.c"})

    assert resp.status_code == 422
    assert client.get("/bookings").json()["bookings"] == []
