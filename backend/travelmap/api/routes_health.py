from fastapi import APIRouter, Depends

from travelmap.api import get_explorer
from travelmap.services.explorer_service import ExplorerService

router = APIRouter()


@router.get("/health")
def healthcheck(explorer: ExplorerService = Depends(get_explorer)) -> dict:
    return {"status": "ok", "catalog_size": len(explorer.catalog)}
