"""Daily check-in, sleep and severity tests."""

from datetime import datetime, timedelta, timezone

import pytest

from mindcalm.schemas.checkin import CheckinCreate, LifestyleEntry
from mindcalm.services import ai_service, checkin_service
from mindcalm.services.checkin_service import sleep_debt, sleep_hours_between, sleep_score
from mindcalm.services.severity import read_severity


def test_checkin_writes_mood_and_lifestyle(client):
    response = client.post(
        "/checkins",
        json={"sleep_hours": 6.5, "mood_score": 7, "anxiety_score": 3, "symptoms": ["Fatigue"], "notes": "ok day"},
    )
    assert response.status_code == 201
    body = response.json()
    assert body["mood"]["score"] == 7
    assert body["mood"]["anxiety_score"] == 3
    assert body["lifestyle"]["sleep_hours"] == 6.5
    assert body["mood"]["date"] == body["lifestyle"]["date"]
    assert body["coping_tip"] is None

    assert len(client.get("/checkins/moods").json()) == 1
    assert len(client.get("/checkins/lifestyle").json()) == 1


def test_high_anxiety_checkin_returns_fallback_tip(client):
    response = client.post("/checkins", json={"anxiety_score": 8})
    assert response.status_code == 201
    assert response.json()["coping_tip"] == "Focus on your breathing for a moment. Inhale for 4, exhale for 6."


def test_high_anxiety_checkin_uses_model_tip(client, monkeypatch):
    monkeypatch.setattr(ai_service, "_call_provider", lambda provider, prompt, schema: "  Ground yourself.  ")
    response = client.post("/checkins", json={"anxiety_score": 6})
    assert response.json()["coping_tip"] == "Ground yourself."


def test_checkin_derives_hours_from_bed_and_wake(client):
    response = client.post("/checkins", json={"bed_time": "23:30", "wake_time": "06:15", "sleep_hours": 9})
    assert response.status_code == 201
    assert response.json()["lifestyle"]["sleep_hours"] == 6.8


@pytest.mark.parametrize(
    "payload",
    [
        {"mood_score": 11},
        {"anxiety_score": 0},
        {"sleep_quality": 6},
        {"bed_time": "25:00", "wake_time": "07:00"},
        {"bed_time": "+7:00", "wake_time": "07:00"},
        {"bed_time": "23:00", "wake_time": " 7:00"},
        {"bed_time": "1_0:00", "wake_time": "07:00"},
        {"bed_time": "22:00", "wake_time": "07:00:00"},
    ],
)
def test_checkin_rejects_out_of_range_input(client, payload):
    assert client.post("/checkins", json=payload).status_code == 422


def test_sleep_hours_roll_over_midnight():
    assert sleep_hours_between("22:00", "06:00") == 8.0
    assert sleep_hours_between("01:00", "07:30") == 6.5


def test_sleep_debt_uses_last_seven_entries():
    history = [LifestyleEntry(sleep_hours=2)] + [LifestyleEntry(sleep_hours=h) for h in (7, 8, 9, 6, 7.5, 8, 5)]
    assert sleep_debt(history) == 6.5


def test_sleep_score_bands():
    assert sleep_score(LifestyleEntry(sleep_hours=8, sleep_quality=5)) == 100
    assert sleep_score(LifestyleEntry(sleep_hours=4, sleep_quality=1, sleep_factors=["screens", "alcohol"])) == 26
    assert sleep_score(LifestyleEntry(sleep_hours=8)) == 0


def test_trends_merge_per_day(store):
    day1 = datetime(2026, 10, 1, 9, tzinfo=timezone.utc)
    day2 = day1 + timedelta(days=1)
    checkin_service.record_checkin(store, CheckinCreate(sleep_hours=6, anxiety_score=4), now=day1)
    checkin_service.record_checkin(store, CheckinCreate(sleep_hours=8, anxiety_score=2, mood_score=8), now=day2)

    trends = checkin_service.lifestyle_trends(store)
    assert [r.date for r in trends.rows] == ["2026-10-01", "2026-10-02"]
    assert trends.rows[1].sleep == 8
    assert trends.rows[1].mood == 8
    assert trends.rows[0].name == "Oct 1"
    assert trends.averages.sleep == 7.0
    assert trends.sleep.sleep_debt == 2.0


def test_severity_bands_and_trend():
    assert read_severity(0).label == "None"
    assert read_severity(3).label == "Mild"
    assert read_severity(3).tone == "emerald"
    assert read_severity(7).label == "Moderate"
    reading = read_severity(9, previous=6)
    assert (reading.label, reading.tone, reading.trend) == ("Severe", "rose", 3)


def test_severity_endpoint(client):
    response = client.get("/severity", params={"level": 5, "previous": 7})
    assert response.json()["trend"] == -2
    assert client.get("/severity", params={"level": 11}).status_code == 422
