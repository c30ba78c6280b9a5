from fastapi import APIRouter, Depends

from travelmap.api import get_explorer, get_map_widget
from travelmap.models.schemas import (
    DestinationSchema,
    MapResponse,
    SelectionRequest,
    SetViewCommand,
    StateResponse,
    ViewportSchema,
    ViewportUpdate,
)
from travelmap.services.explorer_service import ExplorerService
from travelmap.tools.map_widget import QueuedMapWidget

router = APIRouter()


@router.get("/viewport", response_model=ViewportSchema)
def get_viewport(explorer: ExplorerService = Depends(get_explorer)) -> ViewportSchema:
    return ViewportSchema.from_domain(explorer.snapshot().viewport)


@router.put("/viewport", response_model=ViewportSchema)
def set_viewport(
    update: ViewportUpdate,
    explorer: ExplorerService = Depends(get_explorer),
) -> ViewportSchema:
    viewport = explorer.set_viewport(update.latitude, update.longitude, update.zoom)
    return ViewportSchema.from_domain(viewport)


@router.post("/viewport/gesture", response_model=ViewportSchema)
def report_gesture(
    reported: ViewportSchema,
    explorer: ExplorerService = Depends(get_explorer),
) -> ViewportSchema:
    viewport = explorer.report_gesture(reported.latitude, reported.longitude, reported.zoom)
    return ViewportSchema.from_domain(viewport)


@router.post("/selection", response_model=StateResponse)
def select(
    request: SelectionRequest,
    explorer: ExplorerService = Depends(get_explorer),
) -> StateResponse:
    state = explorer.view_destination(
        request.destination_id, zoom=request.zoom, detail=request.detail
    )
    return StateResponse.from_domain(state)


@router.delete("/selection", response_model=StateResponse)
def clear_selection(explorer: ExplorerService = Depends(get_explorer)) -> StateResponse:
    return StateResponse.from_domain(explorer.clear_selection())


def _map_response(widget: QueuedMapWidget, commands) -> MapResponse:
    return MapResponse(
        markers=[DestinationSchema.from_domain(d) for d in widget.markers],
        commands=[SetViewCommand(center=c.center, zoom=c.zoom) for c in commands],
    )


@router.get("/map", response_model=MapResponse)
def get_map(widget: QueuedMapWidget = Depends(get_map_widget)) -> MapResponse:
    return _map_response(widget, widget.pending())


@router.post("/map/drain", response_model=MapResponse)
def drain_map(widget: QueuedMapWidget = Depends(get_map_widget)) -> MapResponse:
    """Hand pending set-view commands to the browser map; each is returned once."""
    return _map_response(widget, widget.drain())
