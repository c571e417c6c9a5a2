"""Dashboard, severity meter and stepped-care API."""

from fastapi import APIRouter, Depends, Query

from mindcalm.core.deps import get_store
from mindcalm.schemas.checkin import SeverityReading
from mindcalm.schemas.dashboard import DashboardSummary, SteppedCareGuide
from mindcalm.services import dashboard_service
from mindcalm.services.severity import read_severity
from mindcalm.services.state_store import StateStore

router = APIRouter(tags=["dashboard"])


@router.get("/dashboard", response_model=DashboardSummary)
def get_dashboard(store: StateStore = Depends(get_store)):
    """Last week of moods, top symptoms, today's doses and recent averages."""
    return dashboard_service.summary(store)


@router.get("/severity", response_model=SeverityReading)
def get_severity(
    level: int = Query(ge=0, le=10),
    previous: int | None = Query(default=None, ge=0, le=10),
):
    return read_severity(level, previous)


@router.get("/stepped-care", response_model=SteppedCareGuide)
def get_stepped_care(store: StateStore = Depends(get_store)):
    """Care steps with the one matching the latest GAD-7 score marked active."""
    return dashboard_service.stepped_care(store)
