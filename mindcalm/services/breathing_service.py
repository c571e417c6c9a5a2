"""Paced breathing techniques and session history."""

from __future__ import annotations

import logging

from mindcalm.schemas.breathing import (
    BreathingSession,
    BreathPhase,
    PhaseState,
    SessionCreate,
    SessionResult,
    Technique,
)
from mindcalm.services.state_store import BREATHING_KEY, StateStore

logger = logging.getLogger(__name__)

MIN_SESSION_SECONDS = 10


def _phase(label: str, duration_ms: int, scale: float, kind: str) -> BreathPhase:
    return BreathPhase(label=label, duration_ms=duration_ms, scale=scale, type=kind)


TECHNIQUES: dict[str, Technique] = {
    t.id: t
    for t in [
        Technique(
            id="box",
            name="Box Breathing",
            description="Inhale 4s, Hold 4s, Exhale 4s, Hold 4s",
            phases=[
                _phase("Inhale", 4000, 1.5, "inhale"),
                _phase("Hold", 4000, 1.5, "hold"),
                _phase("Exhale", 4000, 1.0, "exhale"),
                _phase("Hold", 4000, 1.0, "hold"),
            ],
        ),
        Technique(
            id="4-7-8",
            name="4-7-8 Relax",
            description="Inhale 4s, Hold 7s, Exhale 8s",
            phases=[
                _phase("Inhale", 4000, 1.5, "inhale"),
                _phase("Hold", 7000, 1.5, "hold"),
                _phase("Exhale", 8000, 1.0, "exhale"),
            ],
        ),
        Technique(
            id="cyclic",
            name="Cyclic Sighing",
            description="Double inhale, long exhale",
            phases=[
                _phase("Inhale", 1500, 1.3, "inhale"),
                _phase("Inhale", 1500, 1.6, "inhale"),
                _phase("Exhale", 6000, 1.0, "exhale"),
            ],
        ),
        Technique(
            id="resonance",
            name="Coherent Breathing",
            description="Inhale 6s, Exhale 6s",
            phases=[
                _phase("Inhale", 6000, 1.5, "inhale"),
                _phase("Exhale", 6000, 1.0, "exhale"),
            ],
        ),
        Technique(
            id="panic",
            name="Panic SOS",
            description="Inhale 4s, Exhale 8s",
            phases=[
                _phase("Inhale", 4000, 1.4, "inhale"),
                _phase("Exhale", 8000, 1.0, "exhale"),
            ],
        ),
        Technique(
            id="deep",
            name="Deep Calm",
            description="Inhale 4s, Hold 2s, Exhale 6s",
            phases=[
                _phase("Inhale", 4000, 1.4, "inhale"),
                _phase("Hold", 2000, 1.4, "hold"),
                _phase("Exhale", 6000, 1.0, "exhale"),
            ],
        ),
    ]
}


def get_technique(technique_id: str) -> Technique:
    try:
        return TECHNIQUES[technique_id]
    except KeyError:
        raise LookupError(f"Unknown breathing technique: {technique_id}") from None


def phase_at(technique: Technique, elapsed_ms: int) -> PhaseState:
    """Locate the phase for a point in the session and interpolate the circle scale.

    The scale moves linearly from the previous phase's target (the last phase
    wraps around to the first) to the current phase's target.
    """
    offset = max(0, elapsed_ms) % technique.cycle_ms
    phases = technique.phases
    for index, phase in enumerate(phases):
        if offset < phase.duration_ms:
            break
        offset -= phase.duration_ms

    progress = offset / phase.duration_ms
    previous = phases[index - 1].scale
    scale = previous + (phase.scale - previous) * progress
    return PhaseState(
        index=index,
        label=phase.label,
        type=phase.type,
        progress=round(progress, 4),
        scale=round(scale, 4),
        remaining_ms=phase.duration_ms - offset,
    )


def list_sessions(store: StateStore) -> list[BreathingSession]:
    return store.load_list(BREATHING_KEY, BreathingSession)


def record_session(store: StateStore, data: SessionCreate) -> SessionResult:
    if data.duration_seconds < MIN_SESSION_SECONDS:
        logger.debug("Skipping %ss %s session", data.duration_seconds, data.technique)
        return SessionResult(saved=False)

    session = BreathingSession(
        technique=data.technique,
        duration_seconds=data.duration_seconds,
        completed=True,
        anxiety_before=data.anxiety_before,
        anxiety_after=data.anxiety_after,
    )
    store.prepend(BREATHING_KEY, BreathingSession, session)
    return SessionResult(saved=True, session=session)
