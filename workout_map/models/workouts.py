"""Immutable workout records.

A workout is a shared record (id, distance, duration, coords, date,
description) plus a payload tagged by activity type. Records are produced by
``WorkoutFactory`` or restored from a snapshot; nothing mutates them.
"""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class WorkoutType(str, Enum):
    running = "running"
    cycling = "cycling"


Coords = tuple[float, float]

WORKOUT_ICONS: dict[WorkoutType, str] = {
    WorkoutType.running: "🏃‍♂️",
    WorkoutType.cycling: "🚴‍♀️",
}


class RunningStats(BaseModel):
    """Running payload: cadence in steps/min, pace in min/km."""

    model_config = ConfigDict(frozen=True)

    type: Literal["running"] = "running"
    cadence: float
    pace: float


class CyclingStats(BaseModel):
    """Cycling payload: elevation gain in metres, speed in km/h."""

    model_config = ConfigDict(frozen=True)

    type: Literal["cycling"] = "cycling"
    elevation: float
    speed: float


ActivityStats = Annotated[Union[RunningStats, CyclingStats], Field(discriminator="type")]


class Workout(BaseModel):
    """A single recorded activity at a point on the map."""

    model_config = ConfigDict(frozen=True)

    id: int
    distance: float  # km
    duration: float  # minutes
    coords: Coords
    date: datetime
    description: str
    stats: ActivityStats

    @property
    def type(self) -> WorkoutType:
        return WorkoutType(self.stats.type)

    @property
    def icon(self) -> str:
        return WORKOUT_ICONS[self.type]

    @property
    def metric(self) -> float:
        """Pace for running, speed for cycling."""
        if isinstance(self.stats, RunningStats):
            return self.stats.pace
        return self.stats.speed
