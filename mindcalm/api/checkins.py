"""Daily check-in and lifestyle API."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from mindcalm.core.deps import get_store
from mindcalm.schemas.checkin import (
    SLEEP_FACTORS,
    SYMPTOMS,
    CheckinCreate,
    CheckinResponse,
    LifestyleEntry,
    LifestyleTrends,
    MoodEntry,
)
from mindcalm.services import checkin_service
from mindcalm.services.state_store import LIFESTYLE_KEY, MOODS_KEY, StateStore

router = APIRouter(prefix="/checkins", tags=["checkins"])


@router.post("", response_model=CheckinResponse, status_code=201)
def create_checkin(data: CheckinCreate, store: StateStore = Depends(get_store)):
    """Log today's lifestyle and mood. High anxiety also returns a coping tip."""
    return checkin_service.record_checkin(store, data)


@router.get("/options")
def get_options() -> dict:
    return {"symptoms": SYMPTOMS, "sleep_factors": SLEEP_FACTORS}


@router.get("/moods", response_model=list[MoodEntry])
def get_moods(store: StateStore = Depends(get_store)):
    return store.load_list(MOODS_KEY, MoodEntry)


@router.get("/lifestyle", response_model=list[LifestyleEntry])
def get_lifestyle(store: StateStore = Depends(get_store)):
    return store.load_list(LIFESTYLE_KEY, LifestyleEntry)


@router.get("/trends", response_model=LifestyleTrends)
def get_trends(store: StateStore = Depends(get_store)):
    """Last 14 days merged per day, lifestyle averages and sleep metrics."""
    return checkin_service.lifestyle_trends(store)
