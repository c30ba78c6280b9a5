from fastapi import HTTPException
from starlette.requests import Request

from travelmap.services.explorer_service import ExplorerService
from travelmap.tools.map_widget import QueuedMapWidget


def get_explorer(request: Request) -> ExplorerService:
    explorer = getattr(request.app.state, "explorer", None)
    if explorer is None:
        raise HTTPException(status_code=500, detail="Explorer not initialized")
    return explorer


def get_map_widget(request: Request) -> QueuedMapWidget:
    widget = getattr(request.app.state, "map_widget", None)
    if widget is None:
        raise HTTPException(status_code=500, detail="Map widget not initialized")
    return widget
