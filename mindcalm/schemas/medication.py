"""Medication schemas."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from mindcalm.schemas.common import Timestamp, new_id, utcnow

MedicationType = Literal["SSRI", "SNRI", "Benzodiazepine", "Other"]


class TaperStep(BaseModel):
    date: str
    dosage: str
    notes: str | None = None
    completed: bool = False


class Medication(BaseModel):
    id: str = Field(default_factory=new_id)
    name: str
    dosage: str
    frequency: str = "Daily"
    type: MedicationType | None = "Other"
    instructions: str | None = None
    total_pills: int | None = 30
    refill_date: str | None = None
    taper_schedule: list[TaperStep] | None = None


class MedicationCreate(BaseModel):
    name: str = Field(min_length=1)
    dosage: str = Field(min_length=1)
    frequency: str = ""
    type: MedicationType = "Other"
    instructions: str | None = None
    total_pills: int | None = Field(default=30, ge=0)
    refill_date: str | None = None
    check_interactions: bool = False


class MedicationCreated(BaseModel):
    medication: Medication
    interaction_warning: str | None = None


class MedicationLog(BaseModel):
    id: str = Field(default_factory=new_id)
    medication_id: str
    medication_name: str
    date: Timestamp = Field(default_factory=utcnow)
    taken: bool = True
    side_effects: str | None = None
    efficacy_rating: int | None = None


class DoseConfirm(BaseModel):
    side_effects: str = ""
    efficacy_rating: int = Field(default=5, ge=1, le=10)


class DoseConfirmed(BaseModel):
    log: MedicationLog
    medication: Medication


class MedicationStatus(BaseModel):
    medication: Medication
    taken_today: bool
    low_inventory: bool


class InteractionCheckRequest(BaseModel):
    name: str = Field(min_length=1)


class TextResult(BaseModel):
    text: str
