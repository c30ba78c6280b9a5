from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Protocol, Sequence, Tuple

from travelmap.models.domain import Destination


class MapWidget(Protocol):
    """
    Interactive map capability. Gesture ends are reported by whoever hosts the
    widget through ViewStateController.on_gesture_end.
    """

    def render_markers(self, destinations: Sequence[Destination]) -> None:
        ...

    def set_view(self, center: Tuple[float, float], zoom: float) -> None:
        ...


@dataclass(frozen=True)
class SetView:
    center: Tuple[float, float]
    zoom: float


class QueuedMapWidget(MapWidget):
    """
    Server-side stand-in for the browser map. Keeps the markers currently on
    display and queues set-view commands until the browser shell drains them.
    """

    def __init__(self, max_pending: int = 32) -> None:
        self._lock = threading.Lock()
        self._markers: List[Destination] = []
        self._pending: Deque[SetView] = deque(maxlen=max_pending)

    def render_markers(self, destinations: Sequence[Destination]) -> None:
        with self._lock:
            self._markers = list(destinations)

    def set_view(self, center: Tuple[float, float], zoom: float) -> None:
        with self._lock:
            self._pending.append(SetView(center=center, zoom=zoom))

    @property
    def markers(self) -> List[Destination]:
        with self._lock:
            return list(self._markers)

    def pending(self) -> List[SetView]:
        with self._lock:
            return list(self._pending)

    def drain(self) -> List[SetView]:
        with self._lock:
            commands = list(self._pending)
            self._pending.clear()
        return commands
