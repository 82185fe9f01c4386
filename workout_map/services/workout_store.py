"""In-memory ordered collection of workouts."""
from __future__ import annotations

import logging
import math
from typing import Any

from workout_map.errors import DuplicateWorkoutId, WorkoutNotFound
from workout_map.models.workouts import Workout


logger = logging.getLogger(__name__)


def normalize_workout_id(raw: Any) -> int:
    """
    Convert an externally supplied identifier to the stored integer form.

    UI layers hand ids back as text (``"1697040000000"``); numbers and
    integral floats are accepted too. Anything that cannot be converted
    without loss raises WorkoutNotFound.
    """
    if isinstance(raw, bool):
        raise WorkoutNotFound(raw)
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        if math.isfinite(raw) and raw.is_integer():
            return int(raw)
        raise WorkoutNotFound(raw)
    if isinstance(raw, str):
        text = raw.strip()
        # Plain ASCII decimal only: int() would also take "1_0" or Arabic-Indic digits.
        if text.isascii() and text.removeprefix("-").isdigit():
            return int(text)
        raise WorkoutNotFound(raw)
    raise WorkoutNotFound(raw)


class WorkoutStore:
    """Workouts in insertion order, indexed by id."""

    def __init__(self) -> None:
        self._workouts: list[Workout] = []
        self._by_id: dict[int, Workout] = {}

    def __len__(self) -> int:
        return len(self._workouts)

    def __contains__(self, workout_id: object) -> bool:
        try:
            return normalize_workout_id(workout_id) in self._by_id
        except WorkoutNotFound:
            return False

    def add(self, workout: Workout) -> None:
        if workout.id in self._by_id:
            raise DuplicateWorkoutId(workout.id)
        self._workouts.append(workout)
        self._by_id[workout.id] = workout

    def find_by_id(self, workout_id: Any) -> Workout:
        key = normalize_workout_id(workout_id)
        try:
            return self._by_id[key]
        except KeyError:
            raise WorkoutNotFound(workout_id) from None

    def remove_by_id(self, workout_id: Any) -> Workout:
        workout = self.find_by_id(workout_id)
        self._workouts = [w for w in self._workouts if w.id != workout.id]
        del self._by_id[workout.id]
        return workout

    def list(self) -> tuple[Workout, ...]:
        return tuple(self._workouts)

    def is_empty(self) -> bool:
        return not self._workouts

    def clear(self) -> None:
        logger.info("Clearing %d workouts from store", len(self._workouts))
        self._workouts.clear()
        self._by_id.clear()
