from fastapi import APIRouter, Depends, Response, status

from travelmap.api import get_explorer
from travelmap.models.schemas import (
    BookingListResponse,
    BookingRequest,
    BookingSchema,
    ViewportSchema,
)
from travelmap.services.explorer_service import ExplorerService

router = APIRouter()


@router.get("", response_model=BookingListResponse)
def list_bookings(explorer: ExplorerService = Depends(get_explorer)) -> BookingListResponse:
    bookings = explorer.ledger.list()
    return BookingListResponse(bookings=[BookingSchema.from_domain(b) for b in bookings])


@router.post("", response_model=BookingSchema, status_code=status.HTTP_201_CREATED)
def create_booking(
    request: BookingRequest,
    explorer: ExplorerService = Depends(get_explorer),
) -> BookingSchema:
    booking = explorer.book(request.destination.to_domain(), request.name, request.email)
    return BookingSchema.from_domain(booking)


@router.delete("/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
def cancel_booking(
    booking_id: int,
    confirm: bool = False,
    explorer: ExplorerService = Depends(get_explorer),
) -> Response:
    explorer.cancel_booking(booking_id, confirmed=confirm)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{booking_id}/go", response_model=ViewportSchema)
def go_to_booking(
    booking_id: int,
    explorer: ExplorerService = Depends(get_explorer),
) -> ViewportSchema:
    return ViewportSchema.from_domain(explorer.go_to_booking(booking_id))
