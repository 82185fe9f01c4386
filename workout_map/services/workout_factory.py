"""Validation and construction of workout records."""
from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Any, Callable, Iterable

from workout_map.errors import WorkoutValidationError
from workout_map.models.workouts import (
    WORKOUT_ICONS,
    Coords,
    CyclingStats,
    RunningStats,
    Workout,
    WorkoutType,
)


logger = logging.getLogger(__name__)

MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def describe(workout_type: WorkoutType, when: datetime) -> str:
    """
    Build the display title of a workout.

    Example:
        >>> describe(WorkoutType.running, datetime(2024, 4, 14))
        '🏃‍♂️ Running on April 14'
    """
    label = workout_type.value.capitalize()
    return f"{WORKOUT_ICONS[workout_type]} {label} on {MONTHS[when.month - 1]} {when.day}"


def calculate_pace(distance: float, duration: float) -> float:
    """Minutes per kilometre."""
    return duration / distance


def calculate_speed(distance: float, duration: float) -> float:
    """Kilometres per hour, duration given in minutes."""
    return distance / (duration / 60)


def _to_number(field: str, raw: Any) -> float:
    if isinstance(raw, bool) or raw is None:
        raise WorkoutValidationError(field, "a number is required")
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            raise WorkoutValidationError(field, "a number is required")
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise WorkoutValidationError(field, f"{raw!r} is not a number") from None
    if not math.isfinite(value):
        raise WorkoutValidationError(field, "must be a finite number")
    return value


def _positive(field: str, raw: Any) -> float:
    value = _to_number(field, raw)
    if value <= 0:
        raise WorkoutValidationError(field, "must be greater than zero")
    return value


def _finite_metric(
    name: str, calculate: Callable[[float, float], float], distance: float, duration: float
) -> float:
    try:
        value = calculate(distance, duration)
    except ZeroDivisionError:
        value = math.inf
    if not math.isfinite(value):
        # Pace blows up on tiny distances, speed on tiny durations.
        field = "distance" if name == "pace" else "duration"
        raise WorkoutValidationError(field, f"produces a non-finite {name}")
    return value


def _parse_type(raw: Any) -> WorkoutType:
    try:
        return WorkoutType(str(raw).strip().lower())
    except ValueError:
        raise WorkoutValidationError("type", f"unknown workout type {raw!r}") from None


def _parse_coords(raw: Any) -> Coords:
    try:
        lat, lng = raw
    except (TypeError, ValueError):
        raise WorkoutValidationError("coords", "expected a (latitude, longitude) pair") from None
    return (_to_number("coords", lat), _to_number("coords", lng))


class WorkoutFactory:
    """Validate raw input and build fully formed workout records.

    Identifiers come from a monotonic generator seeded by the clock, so two
    workouts created within the same millisecond still get distinct ids.
    """

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self._clock = clock
        self._last_id = 0

    def reserve(self, ids: Iterable[int]) -> None:
        """Make sure future ids are greater than every id in ``ids``."""
        for existing in ids:
            if existing > self._last_id:
                self._last_id = existing

    def _next_id(self, now: datetime) -> int:
        candidate = int(now.timestamp() * 1000)
        self._last_id = max(candidate, self._last_id + 1)
        return self._last_id

    def create(
        self,
        workout_type: WorkoutType | str,
        distance: Any,
        duration: Any,
        coords: Any,
        type_specific_value: Any,
    ) -> Workout:
        """
        Build a running or cycling workout from raw input.

        Args:
            workout_type: "running" or "cycling"
            distance: Distance in km, strictly positive
            duration: Duration in minutes, strictly positive
            coords: (latitude, longitude) pair
            type_specific_value: Cadence (running, strictly positive) or
                elevation gain (cycling, any finite value)

        Returns:
            Workout with id, description and pace/speed filled in

        Raises:
            WorkoutValidationError: If any field violates its constraint
        """
        kind = _parse_type(workout_type)
        distance = _positive("distance", distance)
        duration = _positive("duration", duration)
        location = _parse_coords(coords)

        if kind is WorkoutType.running:
            cadence = _positive("cadence", type_specific_value)
            pace = _finite_metric("pace", calculate_pace, distance, duration)
            stats = RunningStats(cadence=cadence, pace=pace)
        else:
            # Elevation may be zero or negative (downhill rides).
            elevation = _to_number("elevation", type_specific_value)
            speed = _finite_metric("speed", calculate_speed, distance, duration)
            stats = CyclingStats(elevation=elevation, speed=speed)

        now = self._clock()
        workout = Workout(
            id=self._next_id(now),
            distance=distance,
            duration=duration,
            coords=location,
            date=now,
            description=describe(kind, now),
            stats=stats,
        )
        logger.debug("Created %s workout %d", kind.value, workout.id)
        return workout
