"""Knowledge graph API."""

from fastapi import APIRouter, Depends, HTTPException, Query

from mindcalm.core.deps import get_store
from mindcalm.schemas.graph import GraphResponse, LayoutRequest
from mindcalm.services import graph_service
from mindcalm.services.state_store import StateStore

router = APIRouter(prefix="/graph", tags=["graph"])


@router.get("", response_model=GraphResponse)
def get_graph(
    ticks: int = Query(default=300, ge=0, le=2000),
    seed: int | None = None,
    store: StateStore = Depends(get_store),
):
    return graph_service.knowledge_graph(store, ticks=ticks, seed=seed)


@router.post("/layout", response_model=GraphResponse)
def layout_graph(data: LayoutRequest, store: StateStore = Depends(get_store)):
    """Lay out the graph with some nodes held in place, as when dragging."""
    try:
        return graph_service.knowledge_graph(store, ticks=data.ticks, seed=data.seed, pinned=data.pinned)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
