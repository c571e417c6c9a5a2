"""Analytics, GAD-7 and report schemas."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, Field

from mindcalm.schemas.common import Timestamp, new_id, utcnow

TimeRange = Literal["7d", "30d", "90d", "all"]
Interpretation = Literal["Minimal", "Mild", "Moderate", "Severe"]
Metric = Literal["Sleep", "Exercise", "Social", "Anxiety", "Mood"]


class GAD7Result(BaseModel):
    id: str = Field(default_factory=new_id)
    date: Timestamp = Field(default_factory=utcnow)
    score: int
    interpretation: Interpretation


class GAD7Submission(BaseModel):
    answers: list[Annotated[int, Field(ge=0, le=3)]] = Field(min_length=7, max_length=7)


class TrendPoint(BaseModel):
    date: str
    name: str
    anxiety: int | None = None
    mood: int | None = None
    sleep: float | None = None
    exercise: int | None = None
    social: int | None = None
    cbt_count: int | None = None
    cbt_reduction: int | None = None
    avg_reduction: float | None = None


class DistortionStat(BaseModel):
    name: str
    value: int


class RadarAxis(BaseModel):
    subject: str
    value: float
    full_mark: int = 10


class Insight(BaseModel):
    text: str
    related_metrics: list[str] = Field(default_factory=list)


class AnalyticsOverview(BaseModel):
    time_range: TimeRange
    trend: list[TrendPoint]
    distortions: list[DistortionStat]
    avg_reduction: float
    radar: list[RadarAxis]
    gad7_history: list[GAD7Result]
    med_compliance: float


class InsightsResponse(BaseModel):
    time_range: TimeRange
    summary: str | None
    insights: list[Insight]


class ReportStats(BaseModel):
    avg_anxiety: str
    avg_sleep: str
    cbt_count: int
    med_compliance: str
    latest_gad7: int | None = None


class ReportResponse(BaseModel):
    stats: ReportStats
    report: str
