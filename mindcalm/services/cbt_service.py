"""CBT tools: 3Cs thought records, behavioural activation, worry postponement."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from mindcalm.schemas.cbt import (
    ActivityCreate,
    ActivityPlan,
    ChatIntro,
    Distortion,
    PostponedWorry,
    ThoughtDraft,
    ThoughtDraftUpdate,
    ThoughtRecord,
    WorryBoard,
    WorrySchedule,
)
from mindcalm.schemas.common import new_id, utcnow
from mindcalm.services import ai_service
from mindcalm.services.state_store import (
    ACTIVITIES_KEY,
    CBT_DRAFT_KEY,
    THOUGHTS_KEY,
    WORRIES_KEY,
    WORRY_DURATION_KEY,
    WORRY_TIME_KEY,
    StateStore,
)

logger = logging.getLogger(__name__)

DISTORTIONS = [
    Distortion(id="catastrophizing", label="Catastrophizing", desc="Expecting the worst possible outcome."),
    Distortion(id="all-or-nothing", label="All-or-Nothing", desc="Thinking in absolutes (always, never)."),
    Distortion(id="mind-reading", label="Mind Reading", desc="Assuming you know what others are thinking."),
    Distortion(
        id="emotional-reasoning",
        label="Emotional Reasoning",
        desc="Believing that because you feel it, it must be true.",
    ),
    Distortion(id="fortune-telling", label="Fortune Telling", desc="Predicting a negative future without evidence."),
    Distortion(
        id="personalization",
        label="Personalization",
        desc="Taking responsibility for things outside your control.",
    ),
    Distortion(
        id="overgeneralization",
        label="Overgeneralization",
        desc="Applying one negative event to all situations.",
    ),
    Distortion(id="should-statements", label="Should Statements", desc="Using rigid rules for yourself or others."),
    Distortion(id="labeling", label="Labeling", desc="Assigning global negative labels to yourself."),
]

STEP_NAMES = {1: "Catch", 2: "Check", 3: "Change"}

CHAT_GREETING = (
    "Hi! I'm MindCalm AI. I can explain CBT concepts, help you identify thinking traps, "
    "or just listen. How can I support you today?"
)
CHAT_SUGGESTIONS = [
    "What are the 3Cs?",
    "How do I stop catastrophic thinking?",
    "Explain 'Mental Filtering'",
    "I feel overwhelmed right now",
]


# ---------------------------------------------------------------------------
# Thought records and the in-progress draft
# ---------------------------------------------------------------------------


def list_thoughts(store: StateStore) -> list[ThoughtRecord]:
    return store.load_list(THOUGHTS_KEY, ThoughtRecord)


def get_draft(store: StateStore) -> ThoughtDraft:
    return store.load_model(CBT_DRAFT_KEY, ThoughtDraft) or ThoughtDraft()


def update_draft(store: StateStore, changes: ThoughtDraftUpdate) -> ThoughtDraft:
    draft = get_draft(store)
    draft = draft.model_copy(update=changes.model_dump(exclude_none=True))
    store.save_model(CBT_DRAFT_KEY, draft)
    return draft


def move_draft_step(store: StateStore, direction: str) -> ThoughtDraft:
    """Move the wizard one step; going forward needs the thought (and, on step 1, the situation)."""
    draft = get_draft(store)
    if direction == "next":
        if not draft.thought.strip() or (draft.step == 1 and not draft.situation.strip()):
            raise ValueError("Describe the situation and the automatic thought first")
        if draft.step < 3:
            draft.step += 1
    elif direction == "back" and draft.step > 1:
        draft.step -= 1
    store.save_model(CBT_DRAFT_KEY, draft)
    return draft


def discard_draft(store: StateStore) -> None:
    store.delete(CBT_DRAFT_KEY)


def save_thought(store: StateStore, form: ThoughtDraft | None = None, now: datetime | None = None) -> ThoughtRecord:
    """Turn the form (or the stored draft) into a record, newest first, and clear the draft.

    Raises ValueError when there is no alternative thought yet.
    """
    form = form or get_draft(store)
    if not form.alternative_thought.strip():
        raise ValueError("Write an alternative thought before saving")

    record = ThoughtRecord(
        id=new_id(),
        date=now or utcnow(),
        **form.model_dump(exclude={"step"}),
    )
    store.prepend(THOUGHTS_KEY, ThoughtRecord, record)
    store.delete(CBT_DRAFT_KEY)
    logger.info("Thought record saved: distortion=%s", record.distortion or "-")
    return record


def identify_distortion(store: StateStore) -> ThoughtDraft:
    """Ask the model for a distortion label; only fills the alternative thought when empty.

    Raises ValueError without an automatic thought, AIServiceError when the model fails.
    """
    draft = get_draft(store)
    if not draft.thought:
        raise ValueError("Write down the automatic thought first")

    result = ai_service.analyze_thought_record(draft.situation, draft.thought, draft.emotion)
    if result.get("distortion"):
        draft.distortion = result["distortion"]
    if result.get("alternative_thought") and not draft.alternative_thought:
        draft.alternative_thought = result["alternative_thought"]
    store.save_model(CBT_DRAFT_KEY, draft)
    return draft


def check_evidence(store: StateStore) -> ThoughtDraft:
    draft = get_draft(store)
    if not draft.thought:
        raise ValueError("Write down the automatic thought first")

    suggestion = ai_service.analyze_evidence(draft.thought)
    if suggestion:
        current = draft.evidence_against + "\n\n" if draft.evidence_against else ""
        draft.evidence_against = current + "AI Suggestion:\n" + suggestion
    store.save_model(CBT_DRAFT_KEY, draft)
    return draft


# ---------------------------------------------------------------------------
# Behavioural activation
# ---------------------------------------------------------------------------


def list_activities(store: StateStore) -> list[ActivityPlan]:
    return store.load_list(ACTIVITIES_KEY, ActivityPlan)


def add_activity(store: StateStore, data: ActivityCreate) -> ActivityPlan:
    activity = ActivityPlan(title=data.title, difficulty=data.difficulty)
    store.append(ACTIVITIES_KEY, ActivityPlan, activity)
    return activity


def toggle_activity(store: StateStore, activity_id: str) -> ActivityPlan:
    activities = list_activities(store)
    for activity in activities:
        if activity.id == activity_id:
            activity.completed = not activity.completed
            store.save_list(ACTIVITIES_KEY, activities)
            return activity
    raise LookupError("Activity not found")


def delete_activity(store: StateStore, activity_id: str) -> None:
    activities = list_activities(store)
    remaining = [a for a in activities if a.id != activity_id]
    if len(remaining) == len(activities):
        raise LookupError("Activity not found")
    store.save_list(ACTIVITIES_KEY, remaining)


# ---------------------------------------------------------------------------
# Worry postponement
# ---------------------------------------------------------------------------


def list_worries(store: StateStore) -> list[PostponedWorry]:
    return store.load_list(WORRIES_KEY, PostponedWorry)


def add_worry(store: StateStore, text: str) -> PostponedWorry:
    if not text.strip():
        raise ValueError("Worry text cannot be empty")
    worry = PostponedWorry(text=text)
    store.append(WORRIES_KEY, PostponedWorry, worry)
    return worry


def toggle_worry(store: StateStore, worry_id: str) -> PostponedWorry:
    worries = list_worries(store)
    for worry in worries:
        if worry.id == worry_id:
            worry.processed = not worry.processed
            store.save_list(WORRIES_KEY, worries)
            return worry
    raise LookupError("Worry not found")


def delete_worry(store: StateStore, worry_id: str) -> None:
    worries = list_worries(store)
    remaining = [w for w in worries if w.id != worry_id]
    if len(remaining) == len(worries):
        raise LookupError("Worry not found")
    store.save_list(WORRIES_KEY, remaining)


def get_worry_schedule(store: StateStore) -> WorrySchedule:
    time = store.load(WORRY_TIME_KEY)
    duration = store.load(WORRY_DURATION_KEY)
    schedule = WorrySchedule()
    if isinstance(time, str):
        schedule.time = time
    if isinstance(duration, int) and duration > 0:
        schedule.duration_minutes = duration
    return schedule


def save_worry_schedule(store: StateStore, schedule: WorrySchedule) -> WorrySchedule:
    store.save(WORRY_TIME_KEY, schedule.time)
    store.save(WORRY_DURATION_KEY, schedule.duration_minutes)
    return schedule


def is_worry_time(schedule: WorrySchedule, now: datetime) -> bool:
    """True inside today's window; a window crossing midnight is not carried over."""
    hours, minutes = (int(part) for part in schedule.time.split(":"))
    start = now.replace(hour=hours, minute=minutes, second=0, microsecond=0)
    end = start + timedelta(minutes=schedule.duration_minutes)
    return start <= now <= end


def worry_board(store: StateStore, now: datetime | None = None) -> WorryBoard:
    schedule = get_worry_schedule(store)
    worries = list_worries(store)
    return WorryBoard(
        schedule=schedule,
        is_worry_time=is_worry_time(schedule, now or datetime.now().astimezone()),
        waiting=[w for w in worries if not w.processed],
        processed=[w for w in worries if w.processed],
    )


def chat_intro() -> ChatIntro:
    return ChatIntro(greeting=CHAT_GREETING, suggestions=CHAT_SUGGESTIONS)
