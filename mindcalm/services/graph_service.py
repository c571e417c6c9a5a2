"""Personal knowledge graph and its force-directed layout.

The graph links the user to symptoms, lifestyle factors, medications and
thinking traps, plus correlation edges inferred from day-level coincidences.
``ForceLayout`` positions the nodes with inverse-square repulsion, Hookean
springs, a centering pull and velocity damping on a fixed canvas.
"""

from __future__ import annotations

import logging
import math
import random
import re
from collections import Counter
from dataclasses import dataclass

from mindcalm.schemas.cbt import ThoughtRecord
from mindcalm.schemas.checkin import LifestyleEntry, MoodEntry
from mindcalm.schemas.graph import GraphLinkOut, GraphNodeOut, GraphResponse, PinnedNode
from mindcalm.schemas.medication import Medication, MedicationLog
from mindcalm.services.checkin_service import day_key
from mindcalm.services.state_store import (
    LIFESTYLE_KEY,
    MED_LOGS_KEY,
    MEDICATIONS_KEY,
    MOODS_KEY,
    THOUGHTS_KEY,
    StateStore,
)

logger = logging.getLogger(__name__)

WIDTH = 800
HEIGHT = 600
K_REPULSE = 3000.0
K_SPRING = 0.05
K_CENTER = 0.02
DAMPING = 0.85
MARGIN = 20
STRUCTURAL_REST = 100.0
CORRELATION_REST = 150.0

HIGH_ANXIETY = 7
HIGH_WELLNESS = 8
LOW_SLEEP_HOURS = 6
GOOD_EXERCISE_MINUTES = 30
MIN_SHARED_DAYS = 2

COLORS = {
    "root": "#14b8a6",
    "symptom": "#f43f5e",
    "wellness": "#10b981",
    "sleep": "#818cf8",
    "exercise": "#2dd4bf",
    "factor": "#fbbf24",
    "med": "#2dd4bf",
    "side-effect": "#fb923c",
    "cbt": "#c084fc",
}


@dataclass
class Node:
    id: str
    label: str
    group: str
    val: float
    color: str
    x: float = 0.0
    y: float = 0.0
    vx: float = 0.0
    vy: float = 0.0


@dataclass
class Link:
    source: str
    target: str
    type: str = "structural"
    value: float = 1.0


class GraphBuilder:
    """Collects nodes (first id wins) and links in insertion order."""

    def __init__(self) -> None:
        self.nodes: dict[str, Node] = {}
        self.links: list[Link] = []

    def add_node(self, node_id: str, label: str, group: str, color: str, size: float = 20) -> None:
        if node_id not in self.nodes:
            self.nodes[node_id] = Node(id=node_id, label=label, group=group, val=size, color=color)

    def add_link(self, source: str, target: str, link_type: str = "structural", strength: float = 1.0) -> None:
        self.links.append(Link(source=source, target=target, type=link_type, value=strength))

    def has_link(self, source: str, target: str) -> bool:
        return any(l.source == source and l.target == target for l in self.links)


def _slug(text: str) -> str:
    return re.sub(r"\s+", "-", text.lower())


def _mean(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def build_graph(
    moods: list[MoodEntry],
    lifestyle: list[LifestyleEntry],
    thoughts: list[ThoughtRecord],
    medications: list[Medication],
    med_logs: list[MedicationLog],
) -> GraphBuilder:
    g = GraphBuilder()
    g.add_node("root", "You", "root", COLORS["root"], 40)

    avg_anxiety = _mean([m.anxiety_score for m in moods])
    g.add_node("anxiety", f"Avg Anxiety: {avg_anxiety:.1f}", "symptom", COLORS["symptom"], 30)
    g.add_link("root", "anxiety")

    avg_mood = _mean([m.score for m in moods])
    g.add_node("wellness", f"Wellness: {avg_mood:.1f}", "wellness", COLORS["wellness"], 30)
    g.add_link("root", "wellness")

    symptom_counts = Counter(s for m in moods for s in m.symptoms)
    for symptom, count in list(symptom_counts.items())[:6]:
        g.add_node(f"sym-{symptom}", symptom, "symptom", COLORS["symptom"], 15 + count)
        g.add_link("anxiety", f"sym-{symptom}")

    avg_sleep = _mean([l.sleep_hours for l in lifestyle])
    g.add_node("sleep", f"Avg Sleep: {avg_sleep:.1f}h", "lifestyle", COLORS["sleep"], 30)
    g.add_link("root", "sleep")

    avg_exercise = _mean([l.exercise_minutes for l in lifestyle])
    if avg_exercise > 0:
        g.add_node("exercise", f"Exercise: {avg_exercise:.0f}m", "lifestyle", COLORS["exercise"], 25)
        g.add_link("root", "exercise")

    factor_counts = Counter(f for l in lifestyle for f in l.sleep_factors)
    for factor, count in factor_counts.items():
        g.add_node(f"fac-{factor}", factor, "factor", COLORS["factor"], 15 + count)
        g.add_link("sleep", f"fac-{factor}")

    for med in medications:
        med_node = f"med-{med.id}"
        g.add_node(med_node, med.name, "med", COLORS["med"], 25)
        g.add_link("root", med_node)

        side_effects: dict[str, None] = {}
        for log in med_logs:
            if log.medication_id == med.id and log.side_effects:
                for part in log.side_effects.split(","):
                    side_effects[part.strip()] = None
        for effect in side_effects:
            if effect:
                effect_node = f"se-{med.id}-{_slug(effect)}"
                g.add_node(effect_node, effect, "side-effect", COLORS["side-effect"], 15)
                g.add_link(med_node, effect_node)

    distortion_counts = Counter(t.distortion for t in thoughts if t.distortion)
    if distortion_counts:
        g.add_node("cbt", "Thinking Traps", "cbt", COLORS["cbt"], 25)
        g.add_link("root", "cbt")
        for distortion, count in list(distortion_counts.items())[:5]:
            g.add_node(f"dist-{distortion}", distortion, "cbt", COLORS["cbt"], 15 + count)
            g.add_link("cbt", f"dist-{distortion}")

    _add_correlations(g, moods, lifestyle)
    return g


def _add_correlations(g: GraphBuilder, moods: list[MoodEntry], lifestyle: list[LifestyleEntry]) -> None:
    high_anxiety_days = {day_key(m.date) for m in moods if m.anxiety_score >= HIGH_ANXIETY}
    high_wellness_days = {day_key(m.date) for m in moods if m.score >= HIGH_WELLNESS}

    for entry in lifestyle:
        if day_key(entry.date) not in high_anxiety_days:
            continue
        for factor in entry.sleep_factors:
            source = f"fac-{factor}"
            if source in g.nodes and not g.has_link(source, "anxiety"):
                g.add_link(source, "anxiety", "correlation", 2)

    low_sleep_days = [day_key(l.date) for l in lifestyle if l.sleep_hours < LOW_SLEEP_HOURS]
    if sum(1 for day in low_sleep_days if day in high_anxiety_days) >= MIN_SHARED_DAYS:
        g.add_link("sleep", "anxiety", "correlation", 3)

    good_exercise_days = [day_key(l.date) for l in lifestyle if l.exercise_minutes >= GOOD_EXERCISE_MINUTES]
    shared = sum(1 for day in good_exercise_days if day in high_wellness_days)
    if shared >= MIN_SHARED_DAYS and "exercise" in g.nodes:
        g.add_link("exercise", "wellness", "positive", 3)


class ForceLayout:
    """Force-directed layout over a fixed node/link set.

    Pinned nodes keep their position and have their velocity zeroed each tick,
    but still push and pull on the others.
    """

    def __init__(
        self,
        nodes: list[Node],
        links: list[Link],
        width: int = WIDTH,
        height: int = HEIGHT,
        seed: int | None = None,
    ) -> None:
        self.nodes = nodes
        self.links = links
        self.width = width
        self.height = height
        self.pinned: set[str] = set()
        self._index = {node.id: node for node in nodes}

        rng = random.Random(seed)
        for node in nodes:
            node.x = width / 2 + (rng.random() - 0.5) * 200
            node.y = height / 2 + (rng.random() - 0.5) * 200
            node.vx = node.vy = 0.0

    def pin(self, node_id: str, x: float, y: float) -> None:
        node = self._index.get(node_id)
        if node is None:
            raise LookupError(f"Unknown graph node: {node_id}")
        node.x, node.y = x, y
        node.vx = node.vy = 0.0
        self.pinned.add(node_id)

    def release(self, node_id: str) -> None:
        self.pinned.discard(node_id)

    def tick(self) -> float:
        """Advance one step; returns the summed distance moved by all nodes."""
        nodes = self.nodes

        for i, a in enumerate(nodes):
            for b in nodes[i + 1:]:
                dx = a.x - b.x
                dy = a.y - b.y
                dist = math.hypot(dx, dy) or 1.0
                force = K_REPULSE / (dist * dist)
                fx = dx / dist * force
                fy = dy / dist * force
                a.vx += fx
                a.vy += fy
                b.vx -= fx
                b.vy -= fy

        for link in self.links:
            source = self._index.get(link.source)
            target = self._index.get(link.target)
            if source is None or target is None:
                continue
            dx = target.x - source.x
            dy = target.y - source.y
            dist = math.hypot(dx, dy) or 1.0
            rest = STRUCTURAL_REST if link.type == "structural" else CORRELATION_REST
            force = (dist - rest) * K_SPRING
            fx = dx / dist * force
            fy = dy / dist * force
            source.vx += fx
            source.vy += fy
            target.vx -= fx
            target.vy -= fy

        displacement = 0.0
        for node in nodes:
            if node.id in self.pinned:
                node.vx = node.vy = 0.0
                continue

            old_x, old_y = node.x, node.y
            node.vx += (self.width / 2 - node.x) * K_CENTER
            node.vy += (self.height / 2 - node.y) * K_CENTER
            node.x += node.vx
            node.y += node.vy
            node.vx *= DAMPING
            node.vy *= DAMPING
            node.x = max(MARGIN, min(self.width - MARGIN, node.x))
            node.y = max(MARGIN, min(self.height - MARGIN, node.y))
            displacement += math.hypot(node.x - old_x, node.y - old_y)

        return displacement

    def run(self, ticks: int) -> float:
        displacement = 0.0
        for _ in range(ticks):
            displacement = self.tick()
        return displacement


def knowledge_graph(
    store: StateStore,
    ticks: int = 300,
    seed: int | None = None,
    pinned: list[PinnedNode] | None = None,
) -> GraphResponse:
    graph = build_graph(
        store.load_list(MOODS_KEY, MoodEntry),
        store.load_list(LIFESTYLE_KEY, LifestyleEntry),
        store.load_list(THOUGHTS_KEY, ThoughtRecord),
        store.load_list(MEDICATIONS_KEY, Medication),
        store.load_list(MED_LOGS_KEY, MedicationLog),
    )
    nodes = list(graph.nodes.values())
    layout = ForceLayout(nodes, graph.links, seed=seed)
    for pin in pinned or []:
        layout.pin(pin.id, pin.x, pin.y)

    displacement = layout.run(ticks)
    logger.debug("Laid out %d nodes / %d links in %d ticks", len(nodes), len(graph.links), ticks)

    return GraphResponse(
        width=layout.width,
        height=layout.height,
        ticks=ticks,
        displacement=round(displacement, 4),
        nodes=[
            GraphNodeOut(id=n.id, label=n.label, group=n.group, val=n.val, color=n.color, x=n.x, y=n.y)
            for n in nodes
        ],
        links=[GraphLinkOut(source=l.source, target=l.target, type=l.type, value=l.value) for l in graph.links],
    )
