"""Dashboard and stepped-care tests."""

from datetime import datetime, timedelta, timezone

import pytest

from mindcalm.schemas.checkin import LifestyleEntry, MoodEntry
from mindcalm.schemas.medication import Medication, MedicationLog
from mindcalm.services import dashboard_service
from mindcalm.services.dashboard_service import active_care_step
from mindcalm.services.state_store import LIFESTYLE_KEY, MED_LOGS_KEY, MEDICATIONS_KEY, MOODS_KEY

NOW = datetime(2026, 10, 19, 15, tzinfo=timezone.utc)


def test_empty_dashboard(client):
    body = client.get("/dashboard").json()
    assert body["chart"] == []
    assert body["avg_sleep"] is None
    assert body["avg_sleep_quality"] is None
    assert body["avg_anxiety"] == 0
    assert body["anxiety_meter"]["label"] == "None"
    assert (body["meds_taken_today"], body["total_meds"]) == (0, 0)


def test_summary_uses_recent_entries(store):
    for i in range(9):
        day = NOW - timedelta(days=9 - i)
        symptoms = ["Fatigue"] if i % 2 else ["Fatigue", "Restlessness"]
        store.append(MOODS_KEY, MoodEntry, MoodEntry(date=day, score=6, anxiety_score=8 if i < 2 else 4, symptoms=symptoms))
        store.append(LIFESTYLE_KEY, LifestyleEntry, LifestyleEntry(date=day, sleep_hours=7, sleep_quality=4))

    summary = dashboard_service.summary(store, now=NOW)
    assert len(summary.chart) == 7
    assert summary.avg_anxiety == 4.0
    assert summary.anxiety_meter.label == "Moderate"
    assert (summary.avg_sleep, summary.avg_sleep_quality) == (7.0, 4.0)
    assert [(s.name, s.count) for s in summary.top_symptoms] == [("Fatigue", 9), ("Restlessness", 5)]


def test_meds_taken_today_counts_unique_medications(store):
    a, b = Medication(name="A", dosage="1"), Medication(name="B", dosage="1")
    store.save_list(MEDICATIONS_KEY, [a, b])
    store.save_list(
        MED_LOGS_KEY,
        [
            MedicationLog(medication_id=a.id, medication_name="A", date=NOW),
            MedicationLog(medication_id=a.id, medication_name="A", date=NOW - timedelta(hours=1)),
            MedicationLog(medication_id=b.id, medication_name="B", date=NOW - timedelta(days=1)),
        ],
    )
    summary = dashboard_service.summary(store, now=NOW)
    assert (summary.meds_taken_today, summary.total_meds) == (1, 2)


@pytest.mark.parametrize(("score", "step"), [(None, 1), (0, 1), (4, 1), (5, 2), (9, 2), (10, 3), (21, 3)])
def test_active_care_step(score, step):
    assert active_care_step(score) == step


def test_stepped_care_follows_latest_gad7(client):
    guide = client.get("/stepped-care").json()
    assert guide["gad7_score"] is None
    assert guide["active_step"] == 1
    assert [s["step"] for s in guide["steps"]] == [1, 2, 3, 4]
    assert guide["steps"][3]["actions"] == []

    client.post("/analytics/gad7", json={"answers": [1, 1, 1, 1, 1, 1, 0]})
    client.post("/analytics/gad7", json={"answers": [2, 2, 2, 2, 2, 2, 0]})
    guide = client.get("/stepped-care").json()
    assert (guide["gad7_score"], guide["active_step"]) == (12, 3)
