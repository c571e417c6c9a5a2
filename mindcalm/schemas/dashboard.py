"""Dashboard and stepped-care schemas."""

from __future__ import annotations

from pydantic import BaseModel

from mindcalm.schemas.checkin import SeverityReading


class MoodPoint(BaseModel):
    date: str
    mood: int
    anxiety: int


class SymptomCount(BaseModel):
    name: str
    count: int


class DashboardSummary(BaseModel):
    chart: list[MoodPoint]
    top_symptoms: list[SymptomCount]
    meds_taken_today: int
    total_meds: int
    avg_sleep: float | None
    avg_sleep_quality: float | None
    avg_anxiety: float
    anxiety_meter: SeverityReading
    thought_count: int


class CareAction(BaseModel):
    label: str
    tab: str


class CareStep(BaseModel):
    step: int
    title: str
    description: str
    target: str
    actions: list[CareAction]


class SteppedCareGuide(BaseModel):
    gad7_score: int | None
    active_step: int
    steps: list[CareStep]
