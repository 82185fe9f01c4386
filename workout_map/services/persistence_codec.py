"""Serialization of the workout collection to and from its snapshot form.

The snapshot is a JSON array of flat records, one per workout, in collection
order. Derived values (description, pace, speed) are written out and read
back as-is, so a restored workout equals the one the factory produced.
Marker handles are never part of a record.
"""
from __future__ import annotations

import logging
from typing import Iterable, Sequence

from pydantic import ValidationError

from workout_map.errors import PersistenceCorrupt
from workout_map.models.schemas import (
    CyclingRecord,
    RunningRecord,
    WorkoutRecord,
    snapshot_adapter,
)
from workout_map.models.workouts import CyclingStats, RunningStats, Workout
from workout_map.services.key_value import KeyValueStore


logger = logging.getLogger(__name__)


def _to_record(workout: Workout) -> WorkoutRecord:
    common = {
        "id": workout.id,
        "distance": workout.distance,
        "duration": workout.duration,
        "coords": workout.coords,
        "date": workout.date,
        "description": workout.description,
    }
    stats = workout.stats
    if isinstance(stats, RunningStats):
        return RunningRecord(type="running", cadence=stats.cadence, pace=stats.pace, **common)
    return CyclingRecord(type="cycling", elevation=stats.elevation, speed=stats.speed, **common)


def _from_record(record: WorkoutRecord) -> Workout:
    if isinstance(record, RunningRecord):
        stats = RunningStats(cadence=record.cadence, pace=record.pace)
    else:
        stats = CyclingStats(elevation=record.elevation, speed=record.speed)
    return Workout(
        id=record.id,
        distance=record.distance,
        duration=record.duration,
        coords=record.coords,
        date=record.date,
        description=record.description,
        stats=stats,
    )


def serialize(workouts: Iterable[Workout]) -> str:
    """Encode workouts, in order, as a JSON snapshot."""
    records = [_to_record(workout) for workout in workouts]
    return snapshot_adapter.dump_json(records).decode("utf-8")


def _decode(text: str) -> list[Workout]:
    try:
        records = snapshot_adapter.validate_json(text)
    except ValidationError as exc:
        raise PersistenceCorrupt(f"snapshot failed validation ({exc.error_count()} errors)") from exc

    seen: set[int] = set()
    for record in records:
        if record.id in seen:
            raise PersistenceCorrupt(f"duplicate workout id {record.id}")
        seen.add(record.id)
    return [_from_record(record) for record in records]


def deserialize(text: str | bytes | None) -> list[Workout]:
    """
    Decode a snapshot back into workouts.

    Absent or unreadable snapshots are treated as "no prior state": the
    problem is logged and an empty list is returned.

    Args:
        text: Snapshot as produced by ``serialize`` (or None when absent)

    Returns:
        Workouts in their persisted order
    """
    if text is None:
        return []
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError:
            logger.warning("Ignoring stored workouts: snapshot is not valid UTF-8")
            return []
    if not text.strip():
        return []

    try:
        return _decode(text)
    except PersistenceCorrupt as exc:
        logger.warning("Ignoring stored workouts: %s", exc)
        return []


def save_snapshot(kv: KeyValueStore, key: str, workouts: Sequence[Workout]) -> None:
    """Overwrite the stored snapshot with the full collection."""
    kv.set(key, serialize(workouts))
    logger.info("Persisted %d workouts under %r", len(workouts), key)


def load_snapshot(kv: KeyValueStore, key: str) -> list[Workout]:
    """Read the stored snapshot, returning an empty list if there is none."""
    workouts = deserialize(kv.get(key))
    logger.info("Loaded %d workouts from %r", len(workouts), key)
    return workouts
