"""Home dashboard summary and the stepped-care guide."""

from __future__ import annotations

from collections import Counter
from datetime import datetime

from mindcalm.schemas.cbt import ThoughtRecord
from mindcalm.schemas.checkin import LifestyleEntry, MoodEntry
from mindcalm.schemas.common import utcnow
from mindcalm.schemas.dashboard import (
    CareAction,
    CareStep,
    DashboardSummary,
    MoodPoint,
    SteppedCareGuide,
    SymptomCount,
)
from mindcalm.schemas.medication import Medication, MedicationLog
from mindcalm.services.analytics_service import latest_gad7_score
from mindcalm.services.medication_service import start_of_day
from mindcalm.services.severity import read_severity
from mindcalm.services.state_store import (
    LIFESTYLE_KEY,
    MED_LOGS_KEY,
    MEDICATIONS_KEY,
    MOODS_KEY,
    THOUGHTS_KEY,
    StateStore,
)

RECENT = 7

CARE_STEPS = [
    CareStep(
        step=1,
        title="Assessment & Monitoring",
        description="Identification of anxiety symptoms, active monitoring, and psychoeducation.",
        target="All suspected presentations",
        actions=[
            CareAction(label="Track Symptoms Daily", tab="lifestyle"),
            CareAction(label="Take GAD-7 Assessment", tab="analytics"),
        ],
    ),
    CareStep(
        step=2,
        title="Low-Intensity Interventions",
        description="Guided self-help, psychoeducational groups, and lifestyle changes.",
        target="Mild to Moderate GAD",
        actions=[
            CareAction(label="Practice CBT Tools", tab="cbt"),
            CareAction(label="Breathing Exercises", tab="breathing"),
            CareAction(label="Sleep Hygiene", tab="lifestyle"),
        ],
    ),
    CareStep(
        step=3,
        title="High-Intensity Interventions",
        description="Individual CBT with a therapist or pharmacological treatment (SSRIs/SNRIs).",
        target="Moderate to Severe GAD",
        actions=[
            CareAction(label="Medication Tracker", tab="medication"),
            CareAction(label="Generate Clinician Report", tab="analytics"),
        ],
    ),
    CareStep(
        step=4,
        title="Specialist Treatment",
        description="Multi-disciplinary care for complex, treatment-refractory, or high-risk cases.",
        target="Complex GAD",
        actions=[],
    ),
]


def _recent_mean(values: list[float]) -> float | None:
    recent = values[-RECENT:]
    if not recent:
        return None
    return round(sum(recent) / len(recent), 1)


def summary(store: StateStore, now: datetime | None = None) -> DashboardSummary:
    moods = store.load_list(MOODS_KEY, MoodEntry)
    lifestyle = store.load_list(LIFESTYLE_KEY, LifestyleEntry)
    medications = store.load_list(MEDICATIONS_KEY, Medication)
    logs = store.load_list(MED_LOGS_KEY, MedicationLog)

    chart = [MoodPoint(date=f"{m.date:%a}", mood=m.score, anxiety=m.anxiety_score) for m in moods[-RECENT:]]
    symptoms = Counter(s for m in moods for s in m.symptoms)
    cutoff = start_of_day(now or utcnow())
    taken = {log.medication_id for log in logs if log.date >= cutoff}

    avg_quality = None
    if any(entry.sleep_quality for entry in lifestyle):
        avg_quality = _recent_mean([entry.sleep_quality or 0 for entry in lifestyle])
    avg_anxiety = _recent_mean([m.anxiety_score for m in moods]) or 0.0

    return DashboardSummary(
        chart=chart,
        top_symptoms=[SymptomCount(name=name, count=count) for name, count in symptoms.most_common(5)],
        meds_taken_today=len(taken),
        total_meds=len(medications),
        avg_sleep=_recent_mean([entry.sleep_hours for entry in lifestyle]),
        avg_sleep_quality=avg_quality,
        avg_anxiety=avg_anxiety,
        anxiety_meter=read_severity(round(avg_anxiety)),
        thought_count=len(store.load_list(THOUGHTS_KEY, ThoughtRecord)),
    )


def active_care_step(gad7_score: int | None) -> int:
    if gad7_score is None:
        return 1
    if gad7_score >= 10:
        return 3
    if gad7_score >= 5:
        return 2
    return 1


def stepped_care(store: StateStore) -> SteppedCareGuide:
    score = latest_gad7_score(store)
    return SteppedCareGuide(gad7_score=score, active_step=active_care_step(score), steps=CARE_STEPS)
