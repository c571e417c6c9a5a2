"""Medication hub tests."""

from datetime import datetime, timedelta, timezone

from mindcalm.schemas.medication import Medication, MedicationLog
from mindcalm.services import ai_service
from mindcalm.services.medication_service import med_compliance


def _add(client, **overrides):
    payload = {"name": "Sertraline", "dosage": "50mg", "type": "SSRI"}
    payload.update(overrides)
    response = client.post("/medications", json=payload)
    assert response.status_code == 201
    return response.json()["medication"]


def test_add_medication_defaults(client):
    med = _add(client)
    assert med["frequency"] == "Daily"
    assert med["total_pills"] == 30

    statuses = client.get("/medications").json()
    assert statuses[0]["taken_today"] is False
    assert statuses[0]["low_inventory"] is False


def test_add_requires_name_and_dosage(client):
    assert client.post("/medications", json={"name": "", "dosage": "5mg"}).status_code == 422
    assert client.post("/medications", json={"name": "X"}).status_code == 422


def test_interaction_check_against_current_meds(client, monkeypatch):
    prompts = []

    def fake_call_provider(provider, prompt, schema):
        prompts.append(prompt)
        return "Both raise serotonin; ask your prescriber."

    _add(client)
    monkeypatch.setattr(ai_service, "_call_provider", fake_call_provider)
    response = client.post(
        "/medications", json={"name": "Tramadol", "dosage": "50mg", "check_interactions": True}
    )
    assert response.json()["interaction_warning"] == "Both raise serotonin; ask your prescriber."
    assert "Sertraline" in prompts[0]


def test_confirm_dose_decrements_pills_and_logs_once(client):
    med = _add(client, total_pills=10)
    response = client.post(f"/medications/{med['id']}/doses", json={"side_effects": "nausea", "efficacy_rating": 7})
    assert response.status_code == 201
    assert response.json()["medication"]["total_pills"] == 9

    logs = client.get("/medications/logs").json()
    assert len(logs) == 1
    assert logs[0]["medication_name"] == "Sertraline"
    assert logs[0]["efficacy_rating"] == 7

    status = client.get("/medications").json()[0]
    assert status["taken_today"] is True
    assert status["medication"]["total_pills"] == 9


def test_dose_logs_are_newest_first(client):
    med = _add(client)
    client.post(f"/medications/{med['id']}/doses", json={"side_effects": "first"})
    client.post(f"/medications/{med['id']}/doses", json={"side_effects": "second"})
    assert [l["side_effects"] for l in client.get("/medications/logs").json()] == ["second", "first"]


def test_low_inventory_flag(client):
    med = _add(client, total_pills=6)
    client.post(f"/medications/{med['id']}/doses", json={})
    assert client.get("/medications").json()[0]["low_inventory"] is True


def test_confirm_dose_unknown_medication(client):
    assert client.post("/medications/nope/doses", json={}).status_code == 404


def test_efficacy_out_of_range(client):
    med = _add(client)
    assert client.post(f"/medications/{med['id']}/doses", json={"efficacy_rating": 11}).status_code == 422


def test_delete_medication(client):
    med = _add(client)
    assert client.delete(f"/medications/{med['id']}").status_code == 204
    assert client.get("/medications").json() == []
    assert client.delete(f"/medications/{med['id']}").status_code == 404


def test_info_fallback(client):
    med = _add(client)
    response = client.get(f"/medications/{med['id']}/info")
    assert response.json()["text"] == "Could not retrieve medication information at this time."


def test_export_lines(client):
    med = _add(client)
    client.post(f"/medications/{med['id']}/doses", json={"efficacy_rating": 8})
    text = client.get("/medications/logs/export").json()["text"]
    assert text.endswith("- Sertraline: Taken. Eff: 8/10. SE: None")


def test_compliance():
    now = datetime(2026, 10, 19, 12, tzinfo=timezone.utc)
    meds = [Medication(name="A", dosage="1"), Medication(name="B", dosage="2")]
    logs = [
        MedicationLog(medication_id=meds[0].id, medication_name="A", date=now - timedelta(days=d))
        for d in range(7)
    ]
    logs.append(MedicationLog(medication_id=meds[0].id, medication_name="A", date=now - timedelta(days=10)))

    assert med_compliance([], logs, now) == 0
    assert med_compliance(meds, logs, now) == 50.0
    assert med_compliance(meds[:1], logs * 3, now) == 100.0
