"""Daily check-ins: paired mood + lifestyle entries, sleep metrics and trends."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from mindcalm.schemas.checkin import (
    CheckinCreate,
    CheckinResponse,
    DailyRow,
    LifestyleAverages,
    LifestyleEntry,
    LifestyleTrends,
    MoodEntry,
    SleepSummary,
)
from mindcalm.schemas.common import new_id, utcnow
from mindcalm.services import ai_service
from mindcalm.services.state_store import LIFESTYLE_KEY, MOODS_KEY, StateStore

logger = logging.getLogger(__name__)

SLEEP_GOAL = 8.0
COPING_TIP_THRESHOLD = 6
TREND_DAYS = 14


def day_key(value: datetime) -> str:
    return value.date().isoformat()


def day_label(value: datetime) -> str:
    return f"{value:%b} {value.day}"


def sleep_hours_between(bed_time: str, wake_time: str) -> float:
    """Hours slept; a wake time earlier than bed time means the next morning."""
    start = datetime.strptime(bed_time, "%H:%M")
    end = datetime.strptime(wake_time, "%H:%M")
    if end < start:
        end += timedelta(days=1)
    return round((end - start).total_seconds() / 3600, 1)


def sleep_debt(history: list[LifestyleEntry], goal: float = SLEEP_GOAL) -> float:
    recent = history[-7:]
    deficit = sum(goal - h.sleep_hours for h in recent if h.sleep_hours < goal)
    return round(deficit, 1)


def sleep_score(entry: LifestyleEntry) -> int:
    """0-100 score from duration, quality and the number of sleep disruptors."""
    if not entry.sleep_hours or not entry.sleep_quality:
        return 0

    if 7 <= entry.sleep_hours <= 9:
        score = 50
    elif entry.sleep_hours >= 6:
        score = 40
    elif entry.sleep_hours >= 5:
        score = 20
    else:
        score = 10

    score += entry.sleep_quality * 6
    penalty = len(entry.sleep_factors) * 5
    return min(100, max(0, score + 20 - penalty))


def record_checkin(store: StateStore, data: CheckinCreate, now: datetime | None = None) -> CheckinResponse:
    """Append one lifestyle entry and one mood entry (two independent writes)."""
    today = now or utcnow()

    hours = data.sleep_hours
    if data.bed_time and data.wake_time:
        hours = sleep_hours_between(data.bed_time, data.wake_time)

    lifestyle = LifestyleEntry(
        date=today,
        sleep_hours=hours,
        sleep_quality=data.sleep_quality,
        bed_time=data.bed_time,
        wake_time=data.wake_time,
        sleep_factors=list(data.sleep_factors),
        stress_level=data.stress_level,
        exercise_minutes=data.exercise_minutes,
        caffeine_intake=data.caffeine_intake,
        water_intake=data.water_intake,
        social_minutes=data.social_minutes,
    )
    mood = MoodEntry(
        id=new_id(),
        date=today,
        score=data.mood_score,
        anxiety_score=data.anxiety_score,
        symptoms=list(data.symptoms),
        notes=data.notes,
    )

    store.append(LIFESTYLE_KEY, LifestyleEntry, lifestyle)
    store.append(MOODS_KEY, MoodEntry, mood)
    logger.info("Check-in saved: anxiety=%s wellness=%s", mood.anxiety_score, mood.score)

    tip = None
    if data.anxiety_score >= COPING_TIP_THRESHOLD:
        tip = ai_service.get_coping_strategy(data.anxiety_score, mood.symptoms, mood.notes)

    return CheckinResponse(mood=mood, lifestyle=lifestyle, coping_tip=tip)


def lifestyle_averages(history: list[LifestyleEntry]) -> LifestyleAverages | None:
    if not history:
        return None
    total = len(history)
    return LifestyleAverages(
        sleep=round(sum(h.sleep_hours for h in history) / total, 1),
        sleep_quality=round(sum(h.sleep_quality or 0 for h in history) / total, 1),
        exercise=round(sum(h.exercise_minutes for h in history) / total),
        social=round(sum(h.social_minutes for h in history) / total),
        caffeine=round(sum(h.caffeine_intake for h in history) / total, 1),
    )


def lifestyle_trends(store: StateStore) -> LifestyleTrends:
    lifestyle = store.load_list(LIFESTYLE_KEY, LifestyleEntry)
    moods = store.load_list(MOODS_KEY, MoodEntry)

    rows: dict[str, DailyRow] = {}
    for entry in lifestyle:
        key = day_key(entry.date)
        row = rows.setdefault(key, DailyRow(date=key, name=day_label(entry.date)))
        row.sleep = entry.sleep_hours
        row.sleep_quality = entry.sleep_quality or 3
        row.exercise = entry.exercise_minutes
        row.social = entry.social_minutes
        row.caffeine = entry.caffeine_intake
        row.water = entry.water_intake

    for mood in moods:
        key = day_key(mood.date)
        row = rows.setdefault(key, DailyRow(date=key, name=day_label(mood.date)))
        row.mood = mood.score
        row.anxiety = mood.anxiety_score

    ordered = sorted(rows.values(), key=lambda r: r.date)[-TREND_DAYS:]
    latest = lifestyle[-1] if lifestyle else None
    return LifestyleTrends(
        rows=ordered,
        averages=lifestyle_averages(lifestyle),
        sleep=SleepSummary(
            sleep_goal=SLEEP_GOAL,
            sleep_debt=sleep_debt(lifestyle),
            latest_score=sleep_score(latest) if latest else None,
        ),
    )
