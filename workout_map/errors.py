"""Error types raised by the workout core.

- WorkoutValidationError: user input rejected by the factory
- WorkoutNotFound: an operation referenced an id absent from the store
- DuplicateWorkoutId: the store already holds a workout with this id
- PersistenceCorrupt: a stored snapshot could not be decoded
"""
from __future__ import annotations

from typing import Any


class WorkoutError(RuntimeError):
    """Base class for workout core errors."""


class WorkoutValidationError(WorkoutError):
    """Raised when raw workout input violates a constraint.

    Attributes:
        field: Name of the offending input field
        reason: Human-readable constraint description
    """

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}")


class WorkoutNotFound(WorkoutError, LookupError):
    """Raised when no workout matches the requested identifier."""

    def __init__(self, workout_id: Any):
        self.workout_id = workout_id
        super().__init__(f"Workout {workout_id!r} not found")


class DuplicateWorkoutId(WorkoutError):
    """Raised when a workout id is added to the store twice."""

    def __init__(self, workout_id: int):
        self.workout_id = workout_id
        super().__init__(f"Workout id {workout_id} already exists")


class PersistenceCorrupt(WorkoutError):
    """Raised when a persisted snapshot cannot be turned back into workouts."""
