"""Workout planner API."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from mindcalm.core.deps import get_store
from mindcalm.schemas.workout import (
    ExerciseCreate,
    ExerciseUpdate,
    PlanRequest,
    Workout,
    WorkoutCompletion,
    WorkoutUpdate,
)
from mindcalm.services import workout_service
from mindcalm.services.ai_service import AIServiceError
from mindcalm.services.state_store import StateStore

router = APIRouter(prefix="/workouts", tags=["workouts"])


@router.get("", response_model=list[Workout])
def get_workouts(store: StateStore = Depends(get_store)):
    return workout_service.list_workouts(store)


@router.post("/plan", response_model=list[Workout])
def generate_plan(data: PlanRequest, store: StateStore = Depends(get_store)):
    """Replace the weekly schedule with a generated plan."""
    try:
        return workout_service.generate_plan(store, data)
    except AIServiceError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc


@router.patch("/{workout_id}", response_model=Workout)
def update_workout(workout_id: str, data: WorkoutUpdate, store: StateStore = Depends(get_store)):
    try:
        return workout_service.update_workout(store, workout_id, data)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.post("/{workout_id}/exercises", response_model=Workout, status_code=201)
def add_exercise(workout_id: str, data: ExerciseCreate, store: StateStore = Depends(get_store)):
    try:
        return workout_service.add_exercise(store, workout_id, data)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.patch("/{workout_id}/exercises/{exercise_id}", response_model=Workout)
def update_exercise(
    workout_id: str, exercise_id: str, data: ExerciseUpdate, store: StateStore = Depends(get_store)
):
    try:
        return workout_service.update_exercise(store, workout_id, exercise_id, data)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.post("/{workout_id}/exercises/{exercise_id}/toggle", response_model=Workout)
def toggle_exercise(workout_id: str, exercise_id: str, store: StateStore = Depends(get_store)):
    try:
        return workout_service.toggle_exercise(store, workout_id, exercise_id)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.delete("/{workout_id}/exercises/{exercise_id}", response_model=Workout)
def delete_exercise(workout_id: str, exercise_id: str, store: StateStore = Depends(get_store)):
    try:
        return workout_service.delete_exercise(store, workout_id, exercise_id)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.post("/{workout_id}/complete", response_model=Workout)
def complete_workout(workout_id: str, data: WorkoutCompletion, store: StateStore = Depends(get_store)):
    """Mark the session done with the anxiety ratings taken before and after."""
    try:
        return workout_service.complete_workout(store, workout_id, data)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
