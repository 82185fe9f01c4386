"""Pydantic models describing the persisted snapshot and form payloads."""
from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter

RawValue = Union[float, int, str, None]


class WorkoutRecordBase(BaseModel):
    """Fields shared by every persisted workout record."""

    id: int
    distance: float = Field(gt=0)
    duration: float = Field(gt=0)
    coords: tuple[float, float]
    date: datetime
    description: str


class RunningRecord(WorkoutRecordBase):
    """Persisted running workout."""

    type: Literal["running"]
    cadence: float = Field(gt=0)
    pace: float


class CyclingRecord(WorkoutRecordBase):
    """Persisted cycling workout."""

    type: Literal["cycling"]
    elevation: float
    speed: float


WorkoutRecord = Annotated[Union[RunningRecord, CyclingRecord], Field(discriminator="type")]

# Ordered array of records, the on-disk shape of a snapshot.
snapshot_adapter: TypeAdapter[list[WorkoutRecord]] = TypeAdapter(list[WorkoutRecord])


class FormFields(BaseModel):
    """Raw values read back from the workout form, unvalidated."""

    type: str = "running"
    distance: RawValue = None
    duration: RawValue = None
    cadence: RawValue = None
    elevation: RawValue = None


class FormPrefill(BaseModel):
    """Values used to pre-populate the form when editing a workout."""

    type: Literal["running", "cycling"]
    distance: float
    duration: float
    cadence: float | None = None
    elevation: float | None = None
