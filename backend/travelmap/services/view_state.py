import logging
from dataclasses import replace
from typing import Callable, List, Optional

from travelmap.models.domain import Destination, Viewport, ViewPhase
from travelmap.tools.map_widget import MapWidget

logger = logging.getLogger(__name__)

ViewportListener = Callable[[Viewport], None]


class ViewStateController:
    """
    Single owner of the viewport and the selected destination.

    State flows to the widget only through set_viewport (an imperative
    set_view push) and flows back only through on_gesture_end. Neither path
    triggers the other: a gesture report received while a programmatic view
    is being applied is the widget echoing our own command and is dropped,
    and gesture handling never pushes set_view.
    """

    def __init__(self, widget: MapWidget, initial: Viewport):
        self.widget = widget
        self._viewport = initial
        self._selected: Optional[Destination] = None
        self._phase = ViewPhase.idle
        self._listeners: List[ViewportListener] = []

    @property
    def viewport(self) -> Viewport:
        return self._viewport

    @property
    def selected(self) -> Optional[Destination]:
        return self._selected

    @property
    def phase(self) -> ViewPhase:
        return self._phase

    def subscribe(self, listener: ViewportListener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def set_viewport(
        self,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        zoom: Optional[float] = None,
    ) -> Viewport:
        changes = {
            k: v
            for k, v in (("latitude", latitude), ("longitude", longitude), ("zoom", zoom))
            if v is not None
        }
        merged = replace(self._viewport, **changes)
        if merged == self._viewport:
            return self._viewport
        if self._phase is not ViewPhase.idle:
            # re-entered from the widget or a listener; applying now would loop
            logger.warning("Ignoring set_viewport during %s", self._phase.value)
            return self._viewport

        self._viewport = merged
        self._phase = ViewPhase.applying_programmatic_view
        try:
            self.widget.set_view(merged.center, merged.zoom)
            self._notify(merged)
        finally:
            self._phase = ViewPhase.idle
        return merged

    def on_gesture_end(self, latitude: float, longitude: float, zoom: float) -> Viewport:
        if self._phase is ViewPhase.applying_programmatic_view:
            logger.debug("Dropping gesture echo of programmatic view")
            return self._viewport

        reported = Viewport(latitude=latitude, longitude=longitude, zoom=zoom)
        if reported == self._viewport:
            return self._viewport
        self._phase = ViewPhase.applying_gesture_view
        try:
            self._viewport = reported
            self._notify(reported)
        finally:
            self._phase = ViewPhase.idle
        return reported

    def select(self, destination: Destination, zoom: Optional[float] = None) -> None:
        self._selected = destination
        if zoom is not None:
            self.set_viewport(destination.latitude, destination.longitude, zoom)

    def clear_selection(self) -> None:
        self._selected = None

    def _notify(self, viewport: Viewport) -> None:
        for listener in list(self._listeners):
            listener(viewport)
