from fastapi import APIRouter, Depends

from travelmap.api import get_explorer
from travelmap.models.schemas import SearchRequest, StateResponse
from travelmap.services.explorer_service import ExplorerService

router = APIRouter()


@router.get("/state", response_model=StateResponse)
def get_state(explorer: ExplorerService = Depends(get_explorer)) -> StateResponse:
    return StateResponse.from_domain(explorer.snapshot())


@router.post("/search", response_model=StateResponse)
def search(
    request: SearchRequest,
    explorer: ExplorerService = Depends(get_explorer),
) -> StateResponse:
    return StateResponse.from_domain(explorer.search(request.query))


@router.post("/search/reset", response_model=StateResponse)
def reset(explorer: ExplorerService = Depends(get_explorer)) -> StateResponse:
    return StateResponse.from_domain(explorer.reset())
