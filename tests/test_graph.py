"""Knowledge graph and force layout tests."""

from datetime import datetime, timedelta, timezone

from mindcalm.schemas.cbt import ThoughtRecord
from mindcalm.schemas.checkin import LifestyleEntry, MoodEntry
from mindcalm.schemas.medication import Medication, MedicationLog
from mindcalm.services.graph_service import HEIGHT, MARGIN, WIDTH, ForceLayout, build_graph

DAY = datetime(2026, 10, 10, 8, tzinfo=timezone.utc)


def _days(n):
    return [DAY + timedelta(days=i) for i in range(n)]


def _links(graph):
    return {(l.source, l.target, l.type) for l in graph.links}


def test_empty_data_has_core_nodes_only():
    graph = build_graph([], [], [], [], [])
    assert list(graph.nodes) == ["root", "anxiety", "wellness", "sleep"]
    assert graph.nodes["anxiety"].label == "Avg Anxiety: 0.0"
    assert graph.nodes["sleep"].label == "Avg Sleep: 0.0h"


def test_nodes_for_symptoms_factors_meds_and_distortions():
    moods = [MoodEntry(date=d, score=5, anxiety_score=4, symptoms=["Fatigue", "Irritability"]) for d in _days(2)]
    lifestyle = [LifestyleEntry(date=DAY, sleep_hours=7, exercise_minutes=20, sleep_factors=["screens"])]
    med = Medication(name="Sertraline", dosage="50mg")
    logs = [MedicationLog(medication_id=med.id, medication_name=med.name, side_effects="Nausea, Dry mouth")]
    thoughts = [ThoughtRecord(distortion="Labeling"), ThoughtRecord(distortion="Labeling"), ThoughtRecord()]

    graph = build_graph(moods, lifestyle, thoughts, [med], logs)

    assert graph.nodes["sym-Fatigue"].val == 17
    assert graph.nodes["exercise"].label == "Exercise: 20m"
    assert graph.nodes["fac-screens"].group == "factor"
    assert f"se-{med.id}-dry-mouth" in graph.nodes
    assert graph.nodes["dist-Labeling"].val == 17
    assert graph.nodes["cbt"].label == "Thinking Traps"
    assert ("root", f"med-{med.id}", "structural") in _links(graph)
    assert ("med-" + med.id, f"se-{med.id}-nausea", "structural") in _links(graph)


def test_symptom_nodes_capped_at_six():
    symptoms = ["a", "b", "c", "d", "e", "f", "g", "h"]
    graph = build_graph([MoodEntry(score=5, symptoms=symptoms)], [], [], [], [])
    assert len([n for n in graph.nodes if n.startswith("sym-")]) == 6


def test_correlation_edges():
    days = _days(3)
    moods = [MoodEntry(date=d, score=9, anxiety_score=8) for d in days]
    lifestyle = [
        LifestyleEntry(date=d, sleep_hours=5, exercise_minutes=45, sleep_factors=["caffeine"]) for d in days
    ]

    graph = build_graph(moods, lifestyle, [], [], [])
    links = _links(graph)
    assert ("fac-caffeine", "anxiety", "correlation") in links
    assert ("sleep", "anxiety", "correlation") in links
    assert ("exercise", "wellness", "positive") in links
    assert len([l for l in graph.links if l.source == "fac-caffeine" and l.target == "anxiety"]) == 1


def test_single_coinciding_day_is_not_a_correlation():
    moods = [MoodEntry(date=DAY, score=9, anxiety_score=8)]
    lifestyle = [LifestyleEntry(date=DAY, sleep_hours=5, exercise_minutes=45)]
    links = _links(build_graph(moods, lifestyle, [], [], []))
    assert ("sleep", "anxiety", "correlation") not in links
    assert ("exercise", "wellness", "positive") not in links


def _layout(seed=7):
    lifestyle = [LifestyleEntry(date=DAY, sleep_hours=7, exercise_minutes=30, sleep_factors=["stress", "alcohol"])]
    graph = build_graph([MoodEntry(date=DAY, score=6, anxiety_score=5, symptoms=["Fatigue"])], lifestyle, [], [], [])
    return ForceLayout(list(graph.nodes.values()), graph.links, seed=seed)


def test_displacement_approaches_zero():
    layout = _layout()
    early = layout.tick()
    layout.run(600)
    late = layout.tick()
    assert late < early
    assert late < 0.01


def test_nodes_stay_on_canvas():
    layout = _layout()
    layout.run(200)
    for node in layout.nodes:
        assert MARGIN <= node.x <= WIDTH - MARGIN
        assert MARGIN <= node.y <= HEIGHT - MARGIN


def test_seeded_layout_is_reproducible():
    a, b = _layout(seed=3), _layout(seed=3)
    a.run(50)
    b.run(50)
    assert [(n.x, n.y) for n in a.nodes] == [(n.x, n.y) for n in b.nodes]


def test_pinned_node_does_not_move():
    layout = _layout()
    layout.pin("sleep", 100, 100)
    layout.run(100)
    sleep = next(n for n in layout.nodes if n.id == "sleep")
    assert (sleep.x, sleep.y, sleep.vx, sleep.vy) == (100, 100, 0, 0)

    layout.release("sleep")
    layout.run(10)
    assert (sleep.x, sleep.y) != (100, 100)


def test_graph_endpoints(client):
    body = client.get("/graph", params={"ticks": 50, "seed": 1}).json()
    assert (body["width"], body["height"], body["ticks"]) == (800, 600, 50)
    assert {n["id"] for n in body["nodes"]} == {"root", "anxiety", "wellness", "sleep"}

    pinned = client.post("/graph/layout", json={"ticks": 20, "seed": 1, "pinned": [{"id": "root", "x": 50, "y": 60}]})
    root = next(n for n in pinned.json()["nodes"] if n["id"] == "root")
    assert (root["x"], root["y"]) == (50, 60)

    missing = client.post("/graph/layout", json={"pinned": [{"id": "nope", "x": 1, "y": 1}]})
    assert missing.status_code == 404
