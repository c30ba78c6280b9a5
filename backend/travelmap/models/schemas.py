from datetime import datetime
from typing import List, Optional, Tuple, Union

from pydantic import BaseModel, Field, field_validator

from travelmap.models.domain import (
    Booking,
    Contact,
    Destination,
    ExplorerState,
    Viewport,
)


class DestinationSchema(BaseModel):
    id: Union[int, str]
    name: str
    coords: Tuple[float, float]
    summary: str

    @field_validator("coords")
    @classmethod
    def _check_range(cls, value: Tuple[float, float]) -> Tuple[float, float]:
        latitude, longitude = value
        if not -90 <= latitude <= 90 or not -180 <= longitude <= 180:
            raise ValueError("coordinates out of range")
        return value

    @classmethod
    def from_domain(cls, obj: Destination) -> "DestinationSchema":
        return cls(id=obj.id, name=obj.name, coords=obj.coordinates, summary=obj.summary)

    def to_domain(self) -> Destination:
        return Destination(
            id=self.id, name=self.name, coordinates=self.coords, summary=self.summary
        )


class ViewportSchema(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    # panned maps report wrapped longitudes beyond +/-180
    longitude: float
    zoom: float

    @classmethod
    def from_domain(cls, obj: Viewport) -> "ViewportSchema":
        return cls(latitude=obj.latitude, longitude=obj.longitude, zoom=obj.zoom)


class ViewportUpdate(BaseModel):
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    zoom: Optional[float] = None


class ContactSchema(BaseModel):
    name: str
    email: str


class BookingSchema(BaseModel):
    """Persisted and wire form of a booking."""

    id: int
    destination: DestinationSchema
    contact: ContactSchema
    created_at: datetime

    @classmethod
    def from_domain(cls, obj: Booking) -> "BookingSchema":
        return cls(
            id=obj.id,
            destination=DestinationSchema.from_domain(obj.destination),
            contact=ContactSchema(name=obj.contact.name, email=obj.contact.email),
            created_at=obj.created_at,
        )

    def to_domain(self) -> Booking:
        return Booking(
            id=self.id,
            destination=self.destination.to_domain(),
            contact=Contact(name=self.contact.name, email=self.contact.email),
            created_at=self.created_at,
        )


class SearchRequest(BaseModel):
    query: str = ""


class SelectionRequest(BaseModel):
    destination_id: Union[int, str]
    zoom: Optional[float] = None
    detail: bool = False


class BookingRequest(BaseModel):
    destination: DestinationSchema
    # emptiness is checked by the ledger so the form gets a single error path
    name: str = ""
    email: str = ""


class StateResponse(BaseModel):
    query: str
    results: List[DestinationSchema]
    selected: Optional[DestinationSchema] = None
    viewport: ViewportSchema
    generation: int
    error: Optional[str] = None
    bookings: List[BookingSchema] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, obj: ExplorerState) -> "StateResponse":
        return cls(
            query=obj.query,
            results=[DestinationSchema.from_domain(d) for d in obj.results],
            selected=DestinationSchema.from_domain(obj.selected) if obj.selected else None,
            viewport=ViewportSchema.from_domain(obj.viewport),
            generation=obj.generation,
            error=obj.error,
            bookings=[BookingSchema.from_domain(b) for b in obj.bookings],
        )


class SetViewCommand(BaseModel):
    center: Tuple[float, float]
    zoom: float


class MapResponse(BaseModel):
    markers: List[DestinationSchema]
    commands: List[SetViewCommand]


class BookingListResponse(BaseModel):
    bookings: List[BookingSchema]
