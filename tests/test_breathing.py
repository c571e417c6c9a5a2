"""Breathing coach tests."""

import pytest

from mindcalm.services.breathing_service import TECHNIQUES, get_technique, phase_at


def test_six_techniques(client):
    ids = [t["id"] for t in client.get("/breathing/techniques").json()]
    assert ids == ["box", "4-7-8", "cyclic", "resonance", "panic", "deep"]


def test_cycle_lengths():
    assert TECHNIQUES["box"].cycle_ms == 16000
    assert TECHNIQUES["4-7-8"].cycle_ms == 19000
    assert TECHNIQUES["cyclic"].cycle_ms == 9000


def test_first_phase_interpolates_from_last_phase_scale():
    state = phase_at(get_technique("box"), 2000)
    assert state.index == 0
    assert state.label == "Inhale"
    assert state.progress == pytest.approx(0.5)
    assert state.scale == pytest.approx(1.25)
    assert state.remaining_ms == 2000


def test_phase_lookup_within_and_across_cycles():
    box = get_technique("box")
    assert phase_at(box, 6000).type == "hold"
    assert phase_at(box, 6000).scale == pytest.approx(1.5)
    assert phase_at(box, 10000).scale == pytest.approx(1.25)
    wrapped = phase_at(box, 16000)
    assert (wrapped.index, wrapped.scale) == (0, pytest.approx(1.0))


def test_cyclic_double_inhale():
    state = phase_at(get_technique("cyclic"), 2000)
    assert state.index == 1
    assert state.scale == pytest.approx(1.4)


def test_phase_endpoint(client):
    response = client.get("/breathing/techniques/4-7-8/phase", params={"elapsed_ms": 5000})
    assert response.json()["label"] == "Hold"
    assert client.get("/breathing/techniques/wim-hof/phase").status_code == 404


def test_short_sessions_are_not_saved(client):
    response = client.post("/breathing/sessions", json={"technique": "box", "duration_seconds": 9})
    assert response.json() == {"saved": False, "session": None}
    assert client.get("/breathing/sessions").json() == []


def test_sessions_saved_newest_first(client):
    client.post("/breathing/sessions", json={"technique": "box", "duration_seconds": 10})
    response = client.post(
        "/breathing/sessions",
        json={"technique": "panic", "duration_seconds": 120, "anxiety_before": 8, "anxiety_after": 4},
    )
    assert response.json()["saved"] is True

    sessions = client.get("/breathing/sessions").json()
    assert [s["technique"] for s in sessions] == ["panic", "box"]
    assert sessions[0]["completed"] is True
