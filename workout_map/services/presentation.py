"""Display values for workout list entries and map popups."""
from __future__ import annotations

from dataclasses import dataclass, field

from workout_map.models.workouts import RunningStats, Workout


@dataclass(frozen=True)
class DetailRow:
    icon: str
    value: str
    unit: str


@dataclass(frozen=True)
class WorkoutListEntry:
    """Everything a list layer needs to draw one workout."""

    workout_id: int
    workout_type: str
    title: str
    rows: tuple[DetailRow, ...] = field(default_factory=tuple)


def _number(value: float) -> str:
    return f"{value:g}"


def popup_text(workout: Workout) -> str:
    return workout.description


def popup_style(workout: Workout) -> str:
    return f"{workout.type.value}-popup"


def build_list_entry(workout: Workout) -> WorkoutListEntry:
    """
    Describe a workout as list rows.

    Running shows distance, duration, pace (min/km) and cadence (spm);
    cycling shows distance, duration, speed (km/hr) and elevation (m).
    Pace and speed are rounded to one decimal.
    """
    rows = [
        DetailRow(workout.icon, _number(workout.distance), "km"),
        DetailRow("⏱", _number(workout.duration), "min"),
    ]
    stats = workout.stats
    if isinstance(stats, RunningStats):
        rows.append(DetailRow("⚡️", f"{stats.pace:.1f}", "min/km"))
        rows.append(DetailRow("🦶🏼", _number(stats.cadence), "spm"))
    else:
        rows.append(DetailRow("⚡️", f"{stats.speed:.1f}", "km/hr"))
        rows.append(DetailRow("⛰", _number(stats.elevation), "m"))
    return WorkoutListEntry(
        workout_id=workout.id,
        workout_type=workout.type.value,
        title=workout.description,
        rows=tuple(rows),
    )
