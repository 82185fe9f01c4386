"""Create/edit/delete lifecycle of workouts.

All state lives on an explicit ``WorkoutContext``; handlers are plain
functions that receive the context as their first argument and are bound to
collaborator callbacks by ``register_handlers``. Each handler runs to
completion synchronously and persists a full snapshot after every successful
mutation.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Union

from workout_map.errors import WorkoutNotFound, WorkoutValidationError
from workout_map.models.schemas import FormPrefill
from workout_map.models.workouts import Coords, RunningStats, Workout, WorkoutType
from workout_map.services.collaborators import (
    FormCollaborator,
    MapCollaborator,
    MarkerHandle,
    WorkoutListCollaborator,
)
from workout_map.services.key_value import KeyValueStore
from workout_map.services.persistence_codec import load_snapshot, save_snapshot
from workout_map.services.presentation import build_list_entry, popup_style, popup_text
from workout_map.services.workout_factory import WorkoutFactory
from workout_map.services.workout_store import WorkoutStore


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class CreateMode:
    coords: Coords


@dataclass(frozen=True)
class EditMode:
    target_id: int
    coords: Coords


@dataclass(frozen=True)
class FormOpen:
    mode: Union[CreateMode, EditMode]


State = Union[Idle, FormOpen]
IDLE = Idle()


@dataclass
class WorkoutContext:
    """Everything one session of the workout map operates on."""

    form: FormCollaborator
    list_view: WorkoutListCollaborator
    kv: KeyValueStore
    factory: WorkoutFactory = field(default_factory=WorkoutFactory)
    store: WorkoutStore = field(default_factory=WorkoutStore)
    storage_key: str = "workouts"
    zoom: int = 13
    map: MapCollaborator | None = None
    # Transient: rebuilt from the store on load, never persisted.
    markers: dict[int, MarkerHandle] = field(default_factory=dict)
    state: State = IDLE

    @property
    def ready(self) -> bool:
        return self.map is not None


def _require_map(ctx: WorkoutContext) -> MapCollaborator:
    if ctx.map is None:
        raise RuntimeError("Map is not ready; the user's location has not been acquired")
    return ctx.map


def persist(ctx: WorkoutContext) -> None:
    """Write the full collection to the key-value medium."""
    save_snapshot(ctx.kv, ctx.storage_key, ctx.store.list())


def _show_workout(ctx: WorkoutContext, workout: Workout) -> None:
    map_ = _require_map(ctx)
    ctx.markers[workout.id] = map_.create_marker(
        workout.coords, popup_text(workout), popup_style(workout)
    )
    ctx.list_view.add_entry(build_list_entry(workout))


def _add_workout(ctx: WorkoutContext, workout: Workout) -> None:
    ctx.store.add(workout)
    _show_workout(ctx, workout)


def _discard_workout(ctx: WorkoutContext, workout_id: Any) -> Workout:
    workout = ctx.store.find_by_id(workout_id)
    marker = ctx.markers.pop(workout.id, None)
    if marker is not None:
        _require_map(ctx).remove_marker(marker)
    ctx.store.remove_by_id(workout.id)
    ctx.list_view.remove_entry(workout.id)
    return workout


def register_handlers(ctx: WorkoutContext) -> None:
    """Bind collaborator events to the handlers below."""
    map_ = _require_map(ctx)
    map_.on_click(partial(on_map_click, ctx))
    ctx.form.on_submit(partial(on_submit, ctx))
    ctx.form.on_type_change(partial(on_type_change, ctx))
    ctx.list_view.on_select(partial(on_select, ctx))
    ctx.list_view.on_edit(partial(on_edit_request, ctx))
    ctx.list_view.on_delete(partial(on_delete, ctx))
    ctx.list_view.on_clear(partial(clear_all, ctx))


def restore(ctx: WorkoutContext) -> list[Workout]:
    """Load the stored snapshot into the store and draw each workout."""
    workouts = load_snapshot(ctx.kv, ctx.storage_key)
    ctx.factory.reserve(workout.id for workout in workouts)
    for workout in workouts:
        _add_workout(ctx, workout)
    ctx.list_view.set_clear_visible(not ctx.store.is_empty())
    return workouts


def start(ctx: WorkoutContext, map_: MapCollaborator, position: Coords) -> None:
    """
    Bring the session up once the user's location is known.

    Args:
        ctx: Session context
        map_: Live map collaborator
        position: (latitude, longitude) to centre the map on
    """
    ctx.map = map_
    map_.set_view(position, ctx.zoom)
    register_handlers(ctx)
    restored = restore(ctx)
    logger.info("Workout map ready at %s with %d stored workouts", position, len(restored))


def location_failed(ctx: WorkoutContext, error: Any) -> None:
    """Record that the map could not be loaded; stored workouts stay untouched."""
    logger.error("Could not get your position: %s", error)


def on_map_click(ctx: WorkoutContext, coords: Coords) -> None:
    _require_map(ctx)
    ctx.state = FormOpen(CreateMode(tuple(coords)))
    ctx.form.show()


def on_edit_request(ctx: WorkoutContext, raw_id: Any) -> None:
    """Open the form pre-populated with an existing workout."""
    _require_map(ctx)
    try:
        workout = ctx.store.find_by_id(raw_id)
    except WorkoutNotFound:
        logger.error("Edit requested for unknown workout %r", raw_id)
        return

    stats = workout.stats
    if isinstance(stats, RunningStats):
        prefill = FormPrefill(
            type="running", distance=workout.distance, duration=workout.duration, cadence=stats.cadence
        )
    else:
        prefill = FormPrefill(
            type="cycling", distance=workout.distance, duration=workout.duration, elevation=stats.elevation
        )
    ctx.state = FormOpen(EditMode(workout.id, workout.coords))
    ctx.form.show(prefill)


def on_type_change(ctx: WorkoutContext, new_type: str) -> None:
    """Log the chosen activity type; the form swaps its cadence/elevation rows itself."""
    try:
        kind = WorkoutType(str(new_type).strip().lower())
    except ValueError:
        logger.warning("Form switched to unknown workout type %r", new_type)
        return
    logger.debug("Form switched to %s", kind.value)


def on_cancel(ctx: WorkoutContext) -> None:
    ctx.state = IDLE
    ctx.form.hide()


def on_submit(ctx: WorkoutContext) -> None:
    """
    Build a workout from the form and commit it.

    In edit mode the replacement is committed before the original is
    removed, and it reuses the original's coordinates. Rejected input leaves
    the form open and changes nothing.
    """
    state = ctx.state
    if not isinstance(state, FormOpen):
        logger.warning("Ignoring form submission while no form is open")
        return
    _require_map(ctx)

    fields = ctx.form.read()
    mode = state.mode
    is_cycling = str(fields.type).strip().lower() == WorkoutType.cycling.value
    specific = fields.elevation if is_cycling else fields.cadence

    try:
        workout = ctx.factory.create(
            fields.type, fields.distance, fields.duration, mode.coords, specific
        )
    except WorkoutValidationError as exc:
        logger.info("Rejected workout input: %s", exc)
        ctx.form.notify(f"Invalid input data ({exc.field} {exc.reason})")
        return

    _add_workout(ctx, workout)
    if isinstance(mode, EditMode):
        try:
            _discard_workout(ctx, mode.target_id)
        except WorkoutNotFound:
            logger.error(
                "Edited workout %d was missing when replacing it with %d",
                mode.target_id,
                workout.id,
            )
        else:
            logger.info("Replaced workout %d with %d", mode.target_id, workout.id)

    ctx.list_view.set_clear_visible(True)
    persist(ctx)
    ctx.form.hide()
    ctx.state = IDLE


def on_delete(ctx: WorkoutContext, raw_id: Any) -> None:
    """Remove a workout, its marker and its list entry."""
    _require_map(ctx)
    try:
        workout = _discard_workout(ctx, raw_id)
    except WorkoutNotFound:
        logger.error("Delete requested for unknown workout %r", raw_id)
        return

    persist(ctx)
    logger.info("Deleted workout %d", workout.id)
    if ctx.store.is_empty():
        ctx.list_view.set_clear_visible(False)


def on_select(ctx: WorkoutContext, raw_id: Any) -> None:
    """Centre the map on the selected workout."""
    map_ = _require_map(ctx)
    try:
        workout = ctx.store.find_by_id(raw_id)
    except WorkoutNotFound:
        logger.debug("Selection of unknown workout %r ignored", raw_id)
        return
    map_.set_view(workout.coords, ctx.zoom)


def clear_all(ctx: WorkoutContext) -> None:
    """Forget every workout, in memory and in the persistence medium."""
    ctx.kv.clear()
    for workout in ctx.store.list():
        marker = ctx.markers.pop(workout.id, None)
        if marker is not None and ctx.map is not None:
            ctx.map.remove_marker(marker)
        ctx.list_view.remove_entry(workout.id)
    ctx.markers.clear()
    ctx.store.clear()
    ctx.list_view.set_clear_visible(False)
    if isinstance(ctx.state, FormOpen):
        on_cancel(ctx)
