from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple, Union

DestinationId = Union[int, str]


@dataclass(frozen=True)
class Destination:
    id: DestinationId
    name: str
    coordinates: Tuple[float, float]
    summary: str

    def __post_init__(self) -> None:
        latitude, longitude = self.coordinates
        if not -90 <= latitude <= 90:
            raise ValueError(f"latitude out of range: {latitude}")
        if not -180 <= longitude <= 180:
            raise ValueError(f"longitude out of range: {longitude}")

    @property
    def latitude(self) -> float:
        return self.coordinates[0]

    @property
    def longitude(self) -> float:
        return self.coordinates[1]


@dataclass(frozen=True)
class Viewport:
    latitude: float
    longitude: float
    zoom: float

    @property
    def center(self) -> Tuple[float, float]:
        return (self.latitude, self.longitude)


class ViewPhase(str, Enum):
    idle = "idle"
    applying_programmatic_view = "applying-programmatic-view"
    applying_gesture_view = "applying-gesture-view"


@dataclass(frozen=True)
class Contact:
    name: str
    email: str


@dataclass(frozen=True)
class Booking:
    id: int
    destination: Destination
    contact: Contact
    created_at: datetime


@dataclass
class ExplorerState:
    query: str
    results: List[Destination]
    selected: Optional[Destination]
    viewport: Viewport
    generation: int
    error: Optional[str] = None
    bookings: List[Booking] = field(default_factory=list)
