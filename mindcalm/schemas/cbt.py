"""CBT tool schemas: thought records, activation, worry postponement, chat."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from mindcalm.schemas.checkin import _validate_hhmm
from mindcalm.schemas.common import Timestamp, new_id, utcnow


class ThoughtRecord(BaseModel):
    id: str = Field(default_factory=new_id)
    date: Timestamp = Field(default_factory=utcnow)
    situation: str = ""
    thought: str = ""
    emotion: str = ""
    intensity_before: int = 6
    distortion: str = ""
    evidence_for: str | None = None
    evidence_against: str | None = None
    alternative_thought: str = ""
    intensity_after: int | None = None


class ThoughtDraft(BaseModel):
    """In-progress 3Cs form. Step 1 Catch, 2 Check, 3 Change."""

    step: int = Field(default=1, ge=1, le=3)
    situation: str = ""
    thought: str = ""
    emotion: str = ""
    intensity_before: int = Field(default=6, ge=0, le=10)
    distortion: str = ""
    evidence_for: str = ""
    evidence_against: str = ""
    alternative_thought: str = ""
    intensity_after: int = Field(default=3, ge=0, le=10)


class ThoughtDraftUpdate(BaseModel):
    situation: str | None = None
    thought: str | None = None
    emotion: str | None = None
    intensity_before: int | None = Field(default=None, ge=0, le=10)
    distortion: str | None = None
    evidence_for: str | None = None
    evidence_against: str | None = None
    alternative_thought: str | None = None
    intensity_after: int | None = Field(default=None, ge=0, le=10)


class DraftStepMove(BaseModel):
    direction: Literal["next", "back"]


class Distortion(BaseModel):
    id: str
    label: str
    desc: str


class ActivityPlan(BaseModel):
    id: str = Field(default_factory=new_id)
    title: str
    date: Timestamp = Field(default_factory=utcnow)
    difficulty: int = 1
    completed: bool = False
    mood_after: int | None = None


class ActivityCreate(BaseModel):
    title: str = Field(min_length=1)
    difficulty: int = Field(default=1, ge=1, le=3)


class PostponedWorry(BaseModel):
    id: str = Field(default_factory=new_id)
    text: str
    date_logged: Timestamp = Field(default_factory=utcnow)
    processed: bool = False


class WorryCreate(BaseModel):
    text: str


class WorrySchedule(BaseModel):
    time: str = Field(default="17:00", description="HH:MM")
    duration_minutes: int = Field(default=20, ge=1, le=240)

    @field_validator("time")
    @classmethod
    def validate_time_format(cls, v: str) -> str:
        return _validate_hhmm(v)


class WorryBoard(BaseModel):
    schedule: WorrySchedule
    is_worry_time: bool
    waiting: list[PostponedWorry]
    processed: list[PostponedWorry]


class ChatTurn(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    message: str = Field(min_length=1)
    history: list[ChatTurn] = Field(default_factory=list)


class ChatResponse(BaseModel):
    reply: str


class ChatIntro(BaseModel):
    greeting: str
    suggestions: list[str]
