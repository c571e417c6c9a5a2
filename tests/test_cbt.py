"""CBT tools tests: thought records, draft, activation, worry postponement, chat."""

from datetime import datetime

import pytest

from mindcalm.schemas.cbt import ThoughtDraftUpdate, WorrySchedule
from mindcalm.services import ai_service, cbt_service
from mindcalm.services.cbt_service import is_worry_time


def _fake_analysis(provider, prompt, schema):
    return {"distortion": "Catastrophizing", "alternativeThought": "One mistake is not a disaster."}


def test_distortion_catalogue(client):
    ids = [d["id"] for d in client.get("/cbt/distortions").json()]
    assert len(ids) == 9
    assert "catastrophizing" in ids
    assert "should-statements" in ids


def test_draft_defaults_and_patch(client):
    draft = client.get("/cbt/draft").json()
    assert draft["step"] == 1
    assert draft["intensity_before"] == 6
    assert draft["intensity_after"] == 3

    response = client.patch("/cbt/draft", json={"situation": "Meeting", "thought": "I'll be fired"})
    assert response.json()["thought"] == "I'll be fired"
    assert client.get("/cbt/draft").json()["situation"] == "Meeting"


def test_draft_step_needs_situation_and_thought(client):
    response = client.post("/cbt/draft/step", json={"direction": "next"})
    assert response.status_code == 400
    assert client.get("/cbt/draft").json()["step"] == 1

    client.patch("/cbt/draft", json={"thought": "I'll be fired"})
    assert client.post("/cbt/draft/step", json={"direction": "next"}).status_code == 400

    client.patch("/cbt/draft", json={"situation": "Meeting"})
    assert client.post("/cbt/draft/step", json={"direction": "next"}).json()["step"] == 2


def test_draft_step_navigation_is_bounded(client):
    assert client.post("/cbt/draft/step", json={"direction": "back"}).json()["step"] == 1
    client.patch("/cbt/draft", json={"situation": "Meeting", "thought": "I'll be fired"})
    client.post("/cbt/draft/step", json={"direction": "next"})
    client.post("/cbt/draft/step", json={"direction": "next"})
    assert client.post("/cbt/draft/step", json={"direction": "next"}).json()["step"] == 3
    assert client.post("/cbt/draft/step", json={"direction": "back"}).json()["step"] == 2


def test_saving_draft_prepends_record_and_clears_draft(client):
    client.patch("/cbt/draft", json={"thought": "first", "alternative_thought": "maybe not", "intensity_before": 8})
    client.post("/cbt/thoughts")
    client.patch("/cbt/draft", json={"thought": "second", "alternative_thought": "it passed last time"})
    response = client.post("/cbt/thoughts")
    assert response.status_code == 201

    thoughts = client.get("/cbt/thoughts").json()
    assert [t["thought"] for t in thoughts] == ["second", "first"]
    assert thoughts[1]["intensity_before"] == 8
    assert client.get("/cbt/draft").json()["thought"] == ""


def test_save_thought_requires_alternative(client):
    assert client.post("/cbt/thoughts").status_code == 400

    client.patch("/cbt/draft", json={"thought": "kept", "alternative_thought": "   "})
    assert client.post("/cbt/thoughts").status_code == 400

    assert client.get("/cbt/thoughts").json() == []
    assert client.get("/cbt/draft").json()["thought"] == "kept"


def test_draft_survives_failed_record_write(store, monkeypatch):
    cbt_service.update_draft(store, ThoughtDraftUpdate(thought="keep me", alternative_thought="calmer view"))

    def _fail(*args, **kwargs):
        raise RuntimeError("disk full")

    monkeypatch.setattr(store, "prepend", _fail)
    with pytest.raises(RuntimeError):
        cbt_service.save_thought(store)

    assert cbt_service.get_draft(store).thought == "keep me"


def test_save_thought_from_body(client):
    response = client.post(
        "/cbt/thoughts",
        json={"thought": "direct", "alternative_thought": "not certain", "intensity_before": 9, "intensity_after": 4},
    )
    assert response.status_code == 201
    assert response.json()["intensity_after"] == 4


def test_identify_distortion_requires_thought(client):
    assert client.post("/cbt/draft/identify-distortion").status_code == 400


def test_identify_distortion_fills_fields(client, monkeypatch):
    monkeypatch.setattr(ai_service, "_call_provider", _fake_analysis)
    client.patch("/cbt/draft", json={"thought": "Everything will go wrong"})

    draft = client.post("/cbt/draft/identify-distortion").json()
    assert draft["distortion"] == "Catastrophizing"
    assert draft["alternative_thought"] == "One mistake is not a disaster."


def test_identify_distortion_keeps_existing_alternative(client, monkeypatch):
    monkeypatch.setattr(ai_service, "_call_provider", _fake_analysis)
    client.patch("/cbt/draft", json={"thought": "x", "alternative_thought": "my own"})

    draft = client.post("/cbt/draft/identify-distortion").json()
    assert draft["distortion"] == "Catastrophizing"
    assert draft["alternative_thought"] == "my own"


def test_identify_distortion_failure_returns_422(client):
    client.patch("/cbt/draft", json={"thought": "x"})
    response = client.post("/cbt/draft/identify-distortion")
    assert response.status_code == 422
    assert response.json()["detail"] == "Failed to analyze thought record."


def test_check_evidence_appends_suggestion(client):
    client.patch("/cbt/draft", json={"thought": "x", "evidence_against": "I prepared well"})
    draft = client.post("/cbt/draft/check-evidence").json()
    assert draft["evidence_against"] == (
        "I prepared well\n\nAI Suggestion:\nCould not generate evidence suggestions."
    )


def test_activity_lifecycle(client):
    created = client.post("/cbt/activities", json={"title": "Walk outside", "difficulty": 2}).json()
    assert created["completed"] is False

    toggled = client.post(f"/cbt/activities/{created['id']}/toggle").json()
    assert toggled["completed"] is True

    assert client.delete(f"/cbt/activities/{created['id']}").status_code == 204
    assert client.get("/cbt/activities").json() == []
    assert client.post(f"/cbt/activities/{created['id']}/toggle").status_code == 404


def test_activity_requires_title(client):
    assert client.post("/cbt/activities", json={"title": ""}).status_code == 422


def test_toggling_worry_moves_it_to_processed(client):
    worry = client.post("/cbt/worries", json={"text": "What if I miss the deadline?"}).json()
    board = client.get("/cbt/worries").json()
    assert [w["id"] for w in board["waiting"]] == [worry["id"]]
    assert board["processed"] == []

    client.post(f"/cbt/worries/{worry['id']}/toggle")
    board = client.get("/cbt/worries").json()
    assert board["waiting"] == []
    assert [w["id"] for w in board["processed"]] == [worry["id"]]


def test_blank_worry_rejected(client):
    assert client.post("/cbt/worries", json={"text": "   "}).status_code == 400


def test_delete_worry(client):
    worry = client.post("/cbt/worries", json={"text": "money"}).json()
    assert client.delete(f"/cbt/worries/{worry['id']}").status_code == 204
    assert client.delete(f"/cbt/worries/{worry['id']}").status_code == 404


def test_worry_schedule_roundtrip(client):
    assert client.get("/cbt/worry-schedule").json() == {"time": "17:00", "duration_minutes": 20}
    client.put("/cbt/worry-schedule", json={"time": "19:30", "duration_minutes": 15})
    assert client.get("/cbt/worry-schedule").json() == {"time": "19:30", "duration_minutes": 15}


def test_is_worry_time_window():
    schedule = WorrySchedule(time="17:00", duration_minutes=20)
    assert is_worry_time(schedule, datetime(2026, 10, 19, 17, 10))
    assert is_worry_time(schedule, datetime(2026, 10, 19, 17, 20))
    assert not is_worry_time(schedule, datetime(2026, 10, 19, 16, 59))
    assert not is_worry_time(schedule, datetime(2026, 10, 19, 17, 21))


def test_chat_intro_and_fallback(client):
    intro = client.get("/cbt/chat").json()
    assert intro["greeting"].startswith("Hi! I'm MindCalm AI.")
    assert "What are the 3Cs?" in intro["suggestions"]

    reply = client.post("/cbt/chat", json={"message": "hello"}).json()["reply"]
    assert reply == "I'm having trouble connecting right now. Please check your connection."


def test_chat_sends_only_recent_history(client, monkeypatch):
    prompts = []

    def fake_call_provider(provider, prompt, schema):
        prompts.append(prompt)
        return "Let's breathe together."

    monkeypatch.setattr(ai_service, "_call_provider", fake_call_provider)
    history = [{"role": "user", "content": f"turn {i}"} for i in range(10)]
    reply = client.post("/cbt/chat", json={"message": "help", "history": history}).json()["reply"]

    assert reply == "Let's breathe together."
    assert "turn 3" not in prompts[0]
    assert "turn 4" in prompts[0]
