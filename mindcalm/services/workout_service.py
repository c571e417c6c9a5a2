"""Resistance-training planner: generated weekly schedule and workout sessions."""

from __future__ import annotations

import logging
from datetime import datetime

from mindcalm.schemas.common import utcnow
from mindcalm.schemas.workout import (
    Exercise,
    ExerciseCreate,
    ExerciseUpdate,
    PlanRequest,
    Workout,
    WorkoutCompletion,
    WorkoutUpdate,
)
from mindcalm.services import ai_service
from mindcalm.services.ai_service import AIServiceError
from mindcalm.services.state_store import WORKOUTS_KEY, StateStore

logger = logging.getLogger(__name__)


def list_workouts(store: StateStore) -> list[Workout]:
    return store.load_list(WORKOUTS_KEY, Workout)


def _plan_to_workouts(plan: list[dict]) -> list[Workout]:
    workouts = []
    for index, item in enumerate(plan):
        exercises = [
            Exercise(name=str(e.get("name", "Exercise")), sets=int(e.get("sets", 3)), reps=str(e.get("reps", "10")))
            for e in item.get("exercises") or []
            if isinstance(e, dict)
        ]
        workouts.append(
            Workout(
                title=str(item.get("title") or f"Workout {index + 1}"),
                day_of_week=int(item.get("dayOfWeek", index)) % 7,
                exercises=exercises,
            )
        )
    return workouts


def generate_plan(store: StateStore, request: PlanRequest) -> list[Workout]:
    """Replace the schedule with a freshly generated plan.

    An empty plan means the model call failed; the current schedule is kept and
    AIServiceError is raised instead.
    """
    plan = ai_service.generate_workout_plan(request.level, request.equipment, request.days_per_week)
    workouts = _plan_to_workouts([p for p in plan if isinstance(p, dict)])
    if not workouts:
        raise AIServiceError("Could not generate a workout plan.")

    store.save_list(WORKOUTS_KEY, workouts)
    logger.info("Generated %d workouts for level=%s", len(workouts), request.level)
    return workouts


def _find(workouts: list[Workout], workout_id: str) -> Workout:
    for workout in workouts:
        if workout.id == workout_id:
            return workout
    raise LookupError("Workout not found")


def _find_exercise(workout: Workout, exercise_id: str) -> Exercise:
    for exercise in workout.exercises:
        if exercise.id == exercise_id:
            return exercise
    raise LookupError("Exercise not found")


def update_workout(store: StateStore, workout_id: str, changes: WorkoutUpdate) -> Workout:
    workouts = list_workouts(store)
    workout = _find(workouts, workout_id)
    for field, value in changes.model_dump(exclude_none=True).items():
        setattr(workout, field, value)
    store.save_list(WORKOUTS_KEY, workouts)
    return workout


def add_exercise(store: StateStore, workout_id: str, data: ExerciseCreate) -> Workout:
    workouts = list_workouts(store)
    workout = _find(workouts, workout_id)
    workout.exercises.append(Exercise(**data.model_dump()))
    store.save_list(WORKOUTS_KEY, workouts)
    return workout


def update_exercise(store: StateStore, workout_id: str, exercise_id: str, changes: ExerciseUpdate) -> Workout:
    workouts = list_workouts(store)
    workout = _find(workouts, workout_id)
    exercise = _find_exercise(workout, exercise_id)
    for field, value in changes.model_dump(exclude_none=True).items():
        setattr(exercise, field, value)
    store.save_list(WORKOUTS_KEY, workouts)
    return workout


def toggle_exercise(store: StateStore, workout_id: str, exercise_id: str) -> Workout:
    workouts = list_workouts(store)
    workout = _find(workouts, workout_id)
    exercise = _find_exercise(workout, exercise_id)
    exercise.completed = not exercise.completed
    store.save_list(WORKOUTS_KEY, workouts)
    return workout


def delete_exercise(store: StateStore, workout_id: str, exercise_id: str) -> Workout:
    workouts = list_workouts(store)
    workout = _find(workouts, workout_id)
    _find_exercise(workout, exercise_id)
    workout.exercises = [e for e in workout.exercises if e.id != exercise_id]
    store.save_list(WORKOUTS_KEY, workouts)
    return workout


def complete_workout(
    store: StateStore, workout_id: str, data: WorkoutCompletion, now: datetime | None = None
) -> Workout:
    workouts = list_workouts(store)
    workout = _find(workouts, workout_id)
    workout.completed = True
    workout.date_completed = now or utcnow()
    # mood_before/mood_after hold the anxiety ratings taken around the session
    workout.mood_before = data.anxiety_before
    workout.mood_after = data.anxiety_after
    if data.duration_minutes is not None:
        workout.duration_minutes = data.duration_minutes
    if data.difficulty_rating is not None:
        workout.difficulty_rating = data.difficulty_rating
    store.save_list(WORKOUTS_KEY, workouts)
    logger.info("Workout %s completed: anxiety %s -> %s", workout.title, data.anxiety_before, data.anxiety_after)
    return workout
