"""Mood, lifestyle and daily check-in schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from mindcalm.schemas.common import Timestamp, new_id, utcnow

SYMPTOMS = [
    "Racing Heart",
    "Muscle Tension",
    "Restlessness",
    "Fatigue",
    "Irritability",
    "Sleep Problems",
    "Difficulty Concentrating",
    "Excessive Worry",
]

SLEEP_FACTORS = ["screens", "alcohol", "caffeine", "stress", "late_meal"]


def _validate_hhmm(v: str | None) -> str | None:
    if v is None:
        return v
    try:
        datetime.strptime(v, "%H:%M")
    except ValueError:
        raise ValueError("Must be HH:MM format") from None
    return v


class MoodEntry(BaseModel):
    id: str = Field(default_factory=new_id)
    date: Timestamp = Field(default_factory=utcnow)
    score: int  # general wellness
    anxiety_score: int = 0
    symptoms: list[str] = Field(default_factory=list)
    notes: str = ""


class LifestyleEntry(BaseModel):
    date: Timestamp = Field(default_factory=utcnow)
    sleep_hours: float
    sleep_quality: int | None = None
    bed_time: str | None = None
    wake_time: str | None = None
    sleep_factors: list[str] = Field(default_factory=list)
    stress_level: int | None = None
    exercise_minutes: int = 0
    caffeine_intake: int = 0
    water_intake: int = 0
    social_minutes: int = 0


class CheckinCreate(BaseModel):
    """Daily check-in form: one lifestyle entry plus one mood entry."""

    sleep_hours: float = Field(default=7.5, ge=0, le=24)
    bed_time: str | None = Field(default=None, description="HH:MM")
    wake_time: str | None = Field(default=None, description="HH:MM")
    sleep_quality: int = Field(default=3, ge=1, le=5)
    sleep_factors: list[str] = Field(default_factory=list)
    stress_level: int = Field(default=0, ge=0, le=10)
    exercise_minutes: int = Field(default=30, ge=0)
    caffeine_intake: int = Field(default=1, ge=0)
    water_intake: int = Field(default=4, ge=0)
    social_minutes: int = Field(default=30, ge=0)
    mood_score: int = Field(default=5, ge=1, le=10)
    anxiety_score: int = Field(default=5, ge=1, le=10)
    symptoms: list[str] = Field(default_factory=list)
    notes: str = ""

    @field_validator("bed_time", "wake_time")
    @classmethod
    def validate_time_format(cls, v: str | None) -> str | None:
        return _validate_hhmm(v)


class CheckinResponse(BaseModel):
    mood: MoodEntry
    lifestyle: LifestyleEntry
    coping_tip: str | None = None


class DailyRow(BaseModel):
    """One merged per-day row for lifestyle trend charts."""

    date: str
    name: str
    sleep: float | None = None
    sleep_quality: int | None = None
    exercise: int | None = None
    social: int | None = None
    caffeine: int | None = None
    water: int | None = None
    mood: int | None = None
    anxiety: int | None = None


class LifestyleAverages(BaseModel):
    sleep: float
    sleep_quality: float
    exercise: int
    social: int
    caffeine: float


class SleepSummary(BaseModel):
    sleep_goal: float
    sleep_debt: float
    latest_score: int | None = None


class LifestyleTrends(BaseModel):
    rows: list[DailyRow]
    averages: LifestyleAverages | None
    sleep: SleepSummary


class SeverityReading(BaseModel):
    level: int
    label: str
    tone: str
    previous: int | None = None
    trend: int | None = None
