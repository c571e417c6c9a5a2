"""Progress analytics API: trends, insights, GAD-7 and the clinician report."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from mindcalm.core.deps import get_store
from mindcalm.schemas.analytics import (
    AnalyticsOverview,
    GAD7Result,
    GAD7Submission,
    InsightsResponse,
    ReportResponse,
    TimeRange,
)
from mindcalm.services import analytics_service
from mindcalm.services.state_store import StateStore

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("", response_model=AnalyticsOverview)
def get_overview(
    time_range: TimeRange = Query(default="30d", alias="range"),
    store: StateStore = Depends(get_store),
):
    """Per-day trend table, distortion stats, radar and GAD-7 history for the window."""
    return analytics_service.overview(store, time_range)


@router.get("/insights", response_model=InsightsResponse)
def get_insights(
    time_range: TimeRange = Query(default="30d", alias="range"),
    store: StateStore = Depends(get_store),
):
    """Model-written correlation insights; empty until the window has enough data."""
    return analytics_service.insights(store, time_range)


@router.get("/gad7/questions")
def get_gad7_questions() -> dict:
    return {"questions": analytics_service.GAD7_QUESTIONS, "options": [0, 1, 2, 3]}


@router.get("/gad7", response_model=list[GAD7Result])
def get_gad7_history(store: StateStore = Depends(get_store)):
    return analytics_service.gad7_history(store)


@router.post("/gad7", response_model=GAD7Result, status_code=201)
def submit_gad7(data: GAD7Submission, store: StateStore = Depends(get_store)):
    return analytics_service.submit_gad7(store, data.answers)


@router.post("/report", response_model=ReportResponse)
def generate_report(store: StateStore = Depends(get_store)):
    return analytics_service.progress_report(store)
