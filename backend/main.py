import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from travelmap.api import routes_booking, routes_health, routes_map, routes_search
from travelmap.core.config import Settings, settings
from travelmap.core.errors import (
    ConfirmationRequired,
    NotFoundError,
    TravelMapError,
    ValidationError,
)
from travelmap.core.logging import configure_logging
from travelmap.models.domain import Viewport
from travelmap.services.booking_service import BookingLedger
from travelmap.services.explorer_service import ExplorerService
from travelmap.services.search_service import SearchResolver
from travelmap.services.view_state import ViewStateController
from travelmap.storage.repository import JsonFileStore, KeyValueStore
from travelmap.tools.catalog import Catalog
from travelmap.tools.geocoder import Geocoder, NominatimGeocoder
from travelmap.tools.map_widget import QueuedMapWidget

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ValidationError: 422,
    NotFoundError: 404,
    ConfirmationRequired: 409,
}


def build_explorer(
    config: Settings,
    widget: QueuedMapWidget,
    store: KeyValueStore | None = None,
    geocoder: Geocoder | None = None,
    catalog: Catalog | None = None,
) -> ExplorerService:
    if catalog is None:
        catalog = Catalog.from_file(config.catalog_path) if config.catalog_path else Catalog()
    if geocoder is None:
        geocoder = NominatimGeocoder(
            base_url=config.geocoder_url,
            user_agent=config.geocoder_user_agent,
            timeout=config.geocoder_timeout,
        )
    if store is None:
        store = JsonFileStore(config.storage_path)

    default_viewport = Viewport(
        latitude=config.default_latitude,
        longitude=config.default_longitude,
        zoom=config.default_zoom,
    )
    return ExplorerService(
        catalog=catalog,
        resolver=SearchResolver(catalog, geocoder, limit=config.geocoder_limit),
        view=ViewStateController(widget, initial=default_viewport),
        ledger=BookingLedger(store, key=config.bookings_key),
        default_viewport=default_viewport,
        found_zoom=config.found_zoom,
        detail_zoom=config.detail_zoom,
    )


def create_app(
    config: Settings = settings,
    store: KeyValueStore | None = None,
    geocoder: Geocoder | None = None,
    catalog: Catalog | None = None,
) -> FastAPI:
    configure_logging(config.log_level)
    app = FastAPI(title=config.app_name, version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(TravelMapError)
    def handle_travelmap_error(request: Request, exc: TravelMapError) -> JSONResponse:
        status_code = ERROR_STATUS.get(type(exc), 400)
        logger.info("%s %s -> %d: %s", request.method, request.url.path, status_code, exc)
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    widget = QueuedMapWidget()
    explorer = build_explorer(config, widget, store=store, geocoder=geocoder, catalog=catalog)

    app.include_router(routes_health.router, tags=["health"])
    app.include_router(routes_search.router, tags=["search"])
    app.include_router(routes_map.router, tags=["map"])
    app.include_router(routes_booking.router, prefix="/bookings", tags=["booking"])

    app.state.explorer = explorer
    app.state.map_widget = widget
    app.state.settings = config
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
