"""Time-windowed analytics, GAD-7 scoring and progress reporting.

Everything here is recomputed from the stored collections on each call.
"""

from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import TypeVar

from mindcalm.schemas.analytics import (
    AnalyticsOverview,
    DistortionStat,
    GAD7Result,
    Insight,
    InsightsResponse,
    RadarAxis,
    ReportResponse,
    ReportStats,
    TimeRange,
    TrendPoint,
)
from mindcalm.schemas.cbt import ThoughtRecord
from mindcalm.schemas.checkin import LifestyleEntry, MoodEntry
from mindcalm.schemas.common import utcnow
from mindcalm.schemas.medication import Medication, MedicationLog
from mindcalm.services import ai_service
from mindcalm.services.checkin_service import day_key, day_label
from mindcalm.services.medication_service import med_compliance
from mindcalm.services.state_store import (
    GAD7_KEY,
    LIFESTYLE_KEY,
    MED_LOGS_KEY,
    MEDICATIONS_KEY,
    MOODS_KEY,
    THOUGHTS_KEY,
    StateStore,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
WINDOW_DAYS = {"7d": 7, "30d": 30, "90d": 90}

GAD7_QUESTIONS = [
    "Feeling nervous, anxious, or on edge",
    "Not being able to stop or control worrying",
    "Worrying too much about different things",
    "Trouble relaxing",
    "Being so restless that it is hard to sit still",
    "Becoming easily annoyed or irritable",
    "Feeling afraid as if something awful might happen",
]

REPORT_WINDOW = 7


def window_start(time_range: TimeRange, now: datetime | None = None) -> datetime:
    if time_range == "all":
        return EPOCH
    return (now or utcnow()) - timedelta(days=WINDOW_DAYS[time_range])


def filter_by_date(items: list[T], start: datetime) -> list[T]:
    """Entries dated at or after ``start``, oldest first."""
    return sorted((item for item in items if item.date >= start), key=lambda item: item.date)


def thought_reduction(record: ThoughtRecord) -> int:
    after = record.intensity_after or record.intensity_before
    return max(0, record.intensity_before - after)


def trend_table(
    moods: list[MoodEntry], lifestyle: list[LifestyleEntry], thoughts: list[ThoughtRecord]
) -> list[TrendPoint]:
    """Merge the windowed collections into one row per calendar day."""
    rows: dict[str, TrendPoint] = {}

    def row_for(value: datetime) -> TrendPoint:
        key = day_key(value)
        return rows.setdefault(key, TrendPoint(date=key, name=day_label(value)))

    for mood in moods:
        row = row_for(mood.date)
        row.anxiety = mood.anxiety_score
        row.mood = mood.score

    for entry in lifestyle:
        row = row_for(entry.date)
        row.sleep = entry.sleep_hours
        row.exercise = entry.exercise_minutes
        row.social = entry.social_minutes

    for record in thoughts:
        row = row_for(record.date)
        row.cbt_count = (row.cbt_count or 0) + 1
        row.cbt_reduction = (row.cbt_reduction or 0) + thought_reduction(record)

    for row in rows.values():
        if row.cbt_count:
            row.avg_reduction = round(row.cbt_reduction / row.cbt_count, 1)

    return sorted(rows.values(), key=lambda r: r.date)


def distortion_stats(thoughts: list[ThoughtRecord], limit: int = 5) -> list[DistortionStat]:
    counts = Counter(t.distortion for t in thoughts if t.distortion)
    return [DistortionStat(name=name, value=value) for name, value in counts.most_common(limit)]


def average_reduction(thoughts: list[ThoughtRecord]) -> float:
    if not thoughts:
        return 0.0
    return round(sum(thought_reduction(t) for t in thoughts) / len(thoughts), 1)


def radar(moods: list[MoodEntry], lifestyle: list[LifestyleEntry], thoughts: list[ThoughtRecord]) -> list[RadarAxis]:
    """Six wellbeing axes on a 0-10 scale; empty without both moods and lifestyle data."""
    if not moods or not lifestyle:
        return []

    def avg(values: list[float]) -> float:
        return sum(values) / len(values)

    return [
        RadarAxis(subject="Sleep", value=min(10, avg([l.sleep_hours for l in lifestyle]))),
        RadarAxis(subject="Exercise", value=min(10, avg([l.exercise_minutes for l in lifestyle]) / 6)),
        RadarAxis(subject="Social", value=min(10, avg([l.social_minutes for l in lifestyle]) / 6)),
        RadarAxis(subject="Calmness", value=10 - avg([m.anxiety_score for m in moods])),
        RadarAxis(subject="Mood", value=avg([m.score for m in moods])),
        RadarAxis(subject="CBT", value=min(10, len(thoughts) * 2)),
    ]


def interpret_gad7(score: int) -> str:
    if score >= 15:
        return "Severe"
    if score >= 10:
        return "Moderate"
    if score >= 5:
        return "Mild"
    return "Minimal"


def submit_gad7(store: StateStore, answers: list[int], now: datetime | None = None) -> GAD7Result:
    score = sum(answers)
    result = GAD7Result(date=now or utcnow(), score=score, interpretation=interpret_gad7(score))
    store.append(GAD7_KEY, GAD7Result, result)
    logger.info("GAD-7 recorded: score=%d (%s)", score, result.interpretation)
    return result


def gad7_history(store: StateStore) -> list[GAD7Result]:
    return store.load_list(GAD7_KEY, GAD7Result)


def latest_gad7_score(store: StateStore) -> int | None:
    history = gad7_history(store)
    return history[-1].score if history else None


def overview(store: StateStore, time_range: TimeRange, now: datetime | None = None) -> AnalyticsOverview:
    start = window_start(time_range, now)
    moods = filter_by_date(store.load_list(MOODS_KEY, MoodEntry), start)
    lifestyle = filter_by_date(store.load_list(LIFESTYLE_KEY, LifestyleEntry), start)
    thoughts = filter_by_date(store.load_list(THOUGHTS_KEY, ThoughtRecord), start)
    gad7 = filter_by_date(gad7_history(store), start)

    return AnalyticsOverview(
        time_range=time_range,
        trend=trend_table(moods, lifestyle, thoughts),
        distortions=distortion_stats(thoughts),
        avg_reduction=average_reduction(thoughts),
        radar=radar(moods, lifestyle, thoughts),
        gad7_history=gad7,
        med_compliance=med_compliance(
            store.load_list(MEDICATIONS_KEY, Medication),
            store.load_list(MED_LOGS_KEY, MedicationLog),
            now,
        ),
    )


def insights_summary(time_range: TimeRange, moods: list[MoodEntry], lifestyle: list[LifestyleEntry]) -> str:
    """Plain-text digest of the window handed to the model."""
    good_sleep_days = [day_key(l.date) for l in lifestyle if l.sleep_hours >= 7]
    bad_sleep_days = [day_key(l.date) for l in lifestyle if l.sleep_hours < 6]
    anxiety_good = sum(m.anxiety_score for m in moods if day_key(m.date) in good_sleep_days)
    anxiety_bad = sum(m.anxiety_score for m in moods if day_key(m.date) in bad_sleep_days)

    avg_anxiety = sum(m.anxiety_score for m in moods) / len(moods)
    avg_sleep = sum(l.sleep_hours for l in lifestyle) / len(lifestyle)
    exercise_days = len([l for l in lifestyle if l.exercise_minutes > 15])

    return (
        f"Last {time_range} data:\n"
        f"Avg Anxiety: {avg_anxiety:.1f}/10\n"
        f"Avg Sleep: {avg_sleep:.1f} hours\n"
        f"Total Exercise Days: {exercise_days}\n"
        f"Avg Anxiety after >7h sleep: {anxiety_good / (len(good_sleep_days) or 1):.1f}\n"
        f"Avg Anxiety after <6h sleep: {anxiety_bad / (len(bad_sleep_days) or 1):.1f}\n"
    )


def insights(store: StateStore, time_range: TimeRange, now: datetime | None = None) -> InsightsResponse:
    start = window_start(time_range, now)
    moods = filter_by_date(store.load_list(MOODS_KEY, MoodEntry), start)
    lifestyle = filter_by_date(store.load_list(LIFESTYLE_KEY, LifestyleEntry), start)

    if len(moods) <= 5 or len(lifestyle) <= 5:
        return InsightsResponse(time_range=time_range, summary=None, insights=[])

    summary = insights_summary(time_range, moods, lifestyle)
    items = ai_service.generate_data_insights(summary)
    return InsightsResponse(
        time_range=time_range,
        summary=summary,
        insights=[Insight(**item) for item in items],
    )


def report_stats(store: StateStore, now: datetime | None = None) -> ReportStats:
    recent_moods = store.load_list(MOODS_KEY, MoodEntry)[-REPORT_WINDOW:]
    recent_sleep = store.load_list(LIFESTYLE_KEY, LifestyleEntry)[-REPORT_WINDOW:]
    compliance = med_compliance(
        store.load_list(MEDICATIONS_KEY, Medication),
        store.load_list(MED_LOGS_KEY, MedicationLog),
        now,
    )

    avg_anxiety = "N/A"
    if recent_moods:
        avg_anxiety = f"{sum(m.anxiety_score for m in recent_moods) / len(recent_moods):.1f}"
    avg_sleep = "N/A"
    if recent_sleep:
        avg_sleep = f"{sum(l.sleep_hours for l in recent_sleep) / len(recent_sleep):.1f}"

    return ReportStats(
        avg_anxiety=avg_anxiety,
        avg_sleep=avg_sleep,
        cbt_count=len(store.load_list(THOUGHTS_KEY, ThoughtRecord)),
        med_compliance=f"{compliance:.0f}",
        latest_gad7=latest_gad7_score(store),
    )


def progress_report(store: StateStore, now: datetime | None = None) -> ReportResponse:
    stats = report_stats(store, now)
    report = ai_service.generate_progress_report(stats.model_dump())
    return ReportResponse(stats=stats, report=report)
