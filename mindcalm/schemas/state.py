"""Whole-app state snapshot and preference schemas."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

from mindcalm.schemas.analytics import GAD7Result
from mindcalm.schemas.breathing import BreathingSession
from mindcalm.schemas.cbt import ActivityPlan, PostponedWorry, ThoughtRecord
from mindcalm.schemas.checkin import LifestyleEntry, MoodEntry
from mindcalm.schemas.medication import Medication, MedicationLog
from mindcalm.schemas.workout import Workout

Theme = Literal["light", "dark"]


class AppState(BaseModel):
    theme: Theme
    moods: list[MoodEntry]
    lifestyle: list[LifestyleEntry]
    thoughts: list[ThoughtRecord]
    medications: list[Medication]
    med_logs: list[MedicationLog]
    activities: list[ActivityPlan]
    breathing_sessions: list[BreathingSession]
    gad7_history: list[GAD7Result]
    workouts: list[Workout]
    worries: list[PostponedWorry]


class ThemePreference(BaseModel):
    theme: Theme
