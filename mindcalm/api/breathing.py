"""Breathing coach API."""

from fastapi import APIRouter, Depends, HTTPException, Query

from mindcalm.core.deps import get_store
from mindcalm.schemas.breathing import BreathingSession, PhaseState, SessionCreate, SessionResult, Technique
from mindcalm.services import breathing_service
from mindcalm.services.state_store import StateStore

router = APIRouter(prefix="/breathing", tags=["breathing"])


@router.get("/techniques", response_model=list[Technique])
def get_techniques():
    return list(breathing_service.TECHNIQUES.values())


@router.get("/techniques/{technique_id}/phase", response_model=PhaseState)
def get_phase(technique_id: str, elapsed_ms: int = Query(default=0, ge=0)):
    """Phase, progress and circle scale at a point in the session."""
    try:
        technique = breathing_service.get_technique(technique_id)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return breathing_service.phase_at(technique, elapsed_ms)


@router.get("/sessions", response_model=list[BreathingSession])
def get_sessions(store: StateStore = Depends(get_store)):
    return breathing_service.list_sessions(store)


@router.post("/sessions", response_model=SessionResult)
def create_session(data: SessionCreate, store: StateStore = Depends(get_store)):
    """Record a finished session; anything under 10 seconds is dropped."""
    return breathing_service.record_session(store, data)
