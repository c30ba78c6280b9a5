import os
from datetime import datetime
from typing import Optional

import folium
import requests
import streamlit as st
from streamlit_folium import st_folium

BACKEND_URL = os.getenv("BACKEND_URL", "http://localhost:8000")

# smallest pan (degrees) / zoom change treated as a user gesture
CENTER_EPSILON = 1e-4
ZOOM_EPSILON = 0.5


def api(method: str, path: str, **kwargs) -> requests.Response:
    resp = requests.request(method, f"{BACKEND_URL}{path}", timeout=15, **kwargs)
    resp.raise_for_status()
    return resp


def get_state() -> dict:
    return api("GET", "/state").json()


def error_detail(exc: requests.RequestException) -> str:
    response = getattr(exc, "response", None)
    if response is not None:
        try:
            return response.json().get("detail", str(exc))
        except ValueError:
            pass
    return str(exc)


def run_action(method: str, path: str, **kwargs) -> Optional[requests.Response]:
    try:
        return api(method, path, **kwargs)
    except requests.RequestException as exc:
        st.error(error_detail(exc))
        return None


def render_map(markers: list, view: dict) -> folium.Map:
    m = folium.Map(
        location=[view["latitude"], view["longitude"]],
        zoom_start=view["zoom"],
        zoom_snap=0.5,
    )
    for dest in markers:
        folium.Marker(
            dest["coords"],
            popup=folium.Popup(f"<b>{dest['name']}</b><br>{dest['summary']}", max_width=250),
            tooltip=dest["name"],
        ).add_to(m)
    return m


def gesture_from(returned: Optional[dict], view: dict) -> Optional[dict]:
    """Return the user's pan/zoom if the map reports a position away from `view`."""
    if not returned or not returned.get("center") or returned.get("zoom") is None:
        return None
    center = returned["center"]
    moved = (
        abs(center["lat"] - view["latitude"]) > CENTER_EPSILON
        or abs(center["lng"] - view["longitude"]) > CENTER_EPSILON
        or abs(returned["zoom"] - view["zoom"]) >= ZOOM_EPSILON
    )
    if not moved:
        return None
    return {"latitude": center["lat"], "longitude": center["lng"], "zoom": returned["zoom"]}


def start_search(payload_path: str, **kwargs) -> None:
    # an open booking form refers to the old result list
    st.session_state.pop("booking_for", None)
    if run_action("POST", payload_path, **kwargs):
        st.rerun()


st.set_page_config(page_title="TravelPlanner", layout="wide")
st.title("TravelPlanner")
st.caption("Backend: FastAPI | UI: Streamlit | Map: OpenStreetMap | Bookings are mock")

try:
    state = get_state()
except requests.RequestException as exc:
    st.error(f"Backend unavailable at {BACKEND_URL}: {exc}")
    st.stop()

flash = st.session_state.pop("flash", None)
if flash:
    st.success(flash)

sidebar, main = st.columns([1, 2])

with sidebar:
    st.subheader("Find Destinations")
    with st.form("search_form"):
        query = st.text_input(
            "Search", value=state["query"], placeholder="Search city, country or landmark"
        )
        search_col, reset_col = st.columns([3, 1])
        searched = search_col.form_submit_button("Search", use_container_width=True)
        reset = reset_col.form_submit_button("Reset")
    if searched:
        start_search("/search", json={"query": query})
    if reset:
        start_search("/search/reset")

    if state["error"]:
        st.warning(f"Search failed: {state['error']}")
    if not state["results"]:
        st.caption("No results")

    selected_id = state["selected"]["id"] if state["selected"] else None
    for dest in state["results"]:
        with st.container(border=True):
            marker = "📍 " if dest["id"] == selected_id else ""
            st.markdown(f"**{marker}{dest['name']}**  \n{dest['summary']}")
            view_col, book_col = st.columns(2)
            if view_col.button("View", key=f"view-{dest['id']}"):
                if run_action("POST", "/selection", json={"destination_id": dest["id"]}):
                    st.rerun()
            if book_col.button("Book", key=f"book-{dest['id']}"):
                st.session_state["booking_for"] = dest
                st.rerun()

    st.subheader("My Bookings")
    if not state["bookings"]:
        st.caption("No bookings yet")
    for booking in state["bookings"]:
        created = datetime.fromisoformat(booking["created_at"].replace("Z", "+00:00"))
        with st.container(border=True):
            st.markdown(
                f"**{booking['destination']['name']}**  \n"
                f"{booking['contact']['name']} | {created:%Y-%m-%d %H:%M}"
            )
            go_col, cancel_col = st.columns(2)
            if go_col.button("Go", key=f"go-{booking['id']}"):
                if run_action("POST", f"/bookings/{booking['id']}/go"):
                    st.rerun()
            confirm = cancel_col.checkbox("Confirm", key=f"confirm-{booking['id']}")
            if cancel_col.button("Cancel", key=f"cancel-{booking['id']}", disabled=not confirm):
                if run_action(
                    "DELETE", f"/bookings/{booking['id']}", params={"confirm": "true"}
                ):
                    st.rerun()

with main:
    drained = run_action("POST", "/map/drain")
    map_data = drained.json() if drained is not None else {"markers": [], "commands": []}
    view = state["viewport"]
    if map_data["commands"]:
        latest = map_data["commands"][-1]
        view = {"latitude": latest["center"][0], "longitude": latest["center"][1], "zoom": latest["zoom"]}

    # a new key per pushed view makes the component start from that view
    # instead of replaying the position it last reported
    map_key = f"map-{view['latitude']:.5f}-{view['longitude']:.5f}-{view['zoom']}"
    returned = st_folium(
        render_map(map_data["markers"], view),
        key=map_key,
        height=500,
        use_container_width=True,
        returned_objects=["center", "zoom"],
    )
    gesture = gesture_from(returned, view)
    if gesture:
        run_action("POST", "/viewport/gesture", json=gesture)

    selected = state["selected"]
    if selected:
        st.subheader(selected["name"])
        st.write(selected["summary"])
        book_col, zoom_col = st.columns(2)
        if book_col.button("Book Event"):
            st.session_state["booking_for"] = selected
            st.rerun()
        if zoom_col.button("Zoom"):
            if run_action(
                "POST", "/selection", json={"destination_id": selected["id"], "detail": True}
            ):
                st.rerun()
    else:
        st.info("Select a destination to see details")

    dest = st.session_state.get("booking_for")
    if dest:
        with st.form("booking_form", clear_on_submit=True):
            st.subheader(f"Book: {dest['name']}")
            name = st.text_input("Full name")
            email = st.text_input("Email")
            confirm_col, close_col = st.columns(2)
            confirmed = confirm_col.form_submit_button("Confirm (Mock)")
            closed = close_col.form_submit_button("Cancel")
        if closed:
            st.session_state.pop("booking_for", None)
            st.rerun()
        if confirmed:
            # the form's own record is booked, whatever the result list holds now
            payload = {"destination": dest, "name": name, "email": email}
            if run_action("POST", "/bookings", json=payload):
                st.session_state.pop("booking_for", None)
                st.session_state["flash"] = "Booking successful! (mock)"
                st.rerun()
