"""Breathing technique and session schemas."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from mindcalm.schemas.common import Timestamp, new_id, utcnow

TechniqueId = Literal["box", "4-7-8", "cyclic", "resonance", "panic", "deep"]


class BreathPhase(BaseModel):
    label: str
    duration_ms: int
    scale: float
    type: Literal["inhale", "hold", "exhale"]


class Technique(BaseModel):
    id: TechniqueId
    name: str
    description: str
    phases: list[BreathPhase]

    @property
    def cycle_ms(self) -> int:
        return sum(p.duration_ms for p in self.phases)


class PhaseState(BaseModel):
    index: int
    label: str
    type: str
    progress: float
    scale: float
    remaining_ms: int


class BreathingSession(BaseModel):
    id: str = Field(default_factory=new_id)
    date: Timestamp = Field(default_factory=utcnow)
    technique: TechniqueId
    duration_seconds: int
    completed: bool = True
    anxiety_before: int | None = None
    anxiety_after: int | None = None


class SessionCreate(BaseModel):
    technique: TechniqueId
    duration_seconds: int = Field(ge=0)
    anxiety_before: int | None = Field(default=None, ge=0, le=10)
    anxiety_after: int | None = Field(default=None, ge=0, le=10)


class SessionResult(BaseModel):
    saved: bool
    session: BreathingSession | None = None
