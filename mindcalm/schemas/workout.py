"""Workout planner schemas."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from mindcalm.schemas.common import Timestamp, new_id

FitnessLevel = Literal["Beginner", "Intermediate", "Advanced"]


class Exercise(BaseModel):
    id: str = Field(default_factory=new_id)
    name: str
    sets: int = 3
    reps: str = "10"
    weight: str | None = None
    completed: bool = False
    notes: str | None = None


class Workout(BaseModel):
    id: str = Field(default_factory=new_id)
    title: str
    day_of_week: int = Field(default=0, ge=0, le=6)
    exercises: list[Exercise] = Field(default_factory=list)
    completed: bool = False
    date_completed: Timestamp | None = None
    duration_minutes: int | None = None
    mood_before: int | None = None
    mood_after: int | None = None
    difficulty_rating: int | None = None


class PlanRequest(BaseModel):
    level: FitnessLevel = "Beginner"
    equipment: list[str] = Field(default_factory=list)
    days_per_week: int = Field(default=3, ge=1, le=7)


class WorkoutUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1)
    day_of_week: int | None = Field(default=None, ge=0, le=6)


class ExerciseCreate(BaseModel):
    name: str = Field(min_length=1)
    sets: int = Field(default=3, ge=1)
    reps: str = "10"
    weight: str | None = None
    notes: str | None = None


class ExerciseUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    sets: int | None = Field(default=None, ge=1)
    reps: str | None = None
    weight: str | None = None
    notes: str | None = None
    completed: bool | None = None


class WorkoutCompletion(BaseModel):
    anxiety_before: int = Field(default=5, ge=0, le=10)
    anxiety_after: int = Field(default=5, ge=0, le=10)
    duration_minutes: int | None = Field(default=None, ge=0)
    difficulty_rating: int | None = Field(default=None, ge=1, le=10)
