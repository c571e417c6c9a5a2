"""Whole-state snapshot and preferences API."""

from fastapi import APIRouter, Depends

from mindcalm.core.config import settings
from mindcalm.core.deps import get_store
from mindcalm.schemas.analytics import GAD7Result
from mindcalm.schemas.breathing import BreathingSession
from mindcalm.schemas.cbt import ActivityPlan, PostponedWorry, ThoughtRecord
from mindcalm.schemas.checkin import LifestyleEntry, MoodEntry
from mindcalm.schemas.medication import Medication, MedicationLog
from mindcalm.schemas.state import AppState, ThemePreference
from mindcalm.schemas.workout import Workout
from mindcalm.services.state_store import (
    ACTIVITIES_KEY,
    BREATHING_KEY,
    GAD7_KEY,
    LIFESTYLE_KEY,
    MED_LOGS_KEY,
    MEDICATIONS_KEY,
    MOODS_KEY,
    THEME_KEY,
    THOUGHTS_KEY,
    WORKOUTS_KEY,
    WORRIES_KEY,
    StateStore,
)

router = APIRouter(tags=["state"])


def _theme(store: StateStore) -> str:
    theme = store.load(THEME_KEY)
    return theme if theme in ("light", "dark") else settings.default_theme


@router.get("/state", response_model=AppState)
def get_state(store: StateStore = Depends(get_store)):
    """Every collection, each loaded independently."""
    return AppState(
        theme=_theme(store),
        moods=store.load_list(MOODS_KEY, MoodEntry),
        lifestyle=store.load_list(LIFESTYLE_KEY, LifestyleEntry),
        thoughts=store.load_list(THOUGHTS_KEY, ThoughtRecord),
        medications=store.load_list(MEDICATIONS_KEY, Medication),
        med_logs=store.load_list(MED_LOGS_KEY, MedicationLog),
        activities=store.load_list(ACTIVITIES_KEY, ActivityPlan),
        breathing_sessions=store.load_list(BREATHING_KEY, BreathingSession),
        gad7_history=store.load_list(GAD7_KEY, GAD7Result),
        workouts=store.load_list(WORKOUTS_KEY, Workout),
        worries=store.load_list(WORRIES_KEY, PostponedWorry),
    )


@router.get("/preferences/theme", response_model=ThemePreference)
def get_theme(store: StateStore = Depends(get_store)):
    return ThemePreference(theme=_theme(store))


@router.put("/preferences/theme", response_model=ThemePreference)
def update_theme(data: ThemePreference, store: StateStore = Depends(get_store)):
    store.save(THEME_KEY, data.theme)
    return data
