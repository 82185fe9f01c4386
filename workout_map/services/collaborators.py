"""Interfaces of the map, form and list layers the orchestrator drives.

The core never touches map internals or DOM nodes; it only holds the opaque
marker handles a map returns and the raw values a form reads back.
"""
from __future__ import annotations

from typing import Any, Callable, Hashable, Protocol

from workout_map.models.schemas import FormFields, FormPrefill
from workout_map.models.workouts import Coords
from workout_map.services.presentation import WorkoutListEntry

MarkerHandle = Hashable
IdCallback = Callable[[Any], None]


class MapCollaborator(Protocol):
    def create_marker(self, coords: Coords, popup_text: str, style_tag: str) -> MarkerHandle:
        ...

    def remove_marker(self, handle: MarkerHandle) -> None:
        ...

    def set_view(self, coords: Coords, zoom: int) -> None:
        ...

    def on_click(self, callback: Callable[[Coords], None]) -> None:
        ...


class FormCollaborator(Protocol):
    def show(self, prefill: FormPrefill | None = None) -> None:
        ...

    def hide(self) -> None:
        ...

    def read(self) -> FormFields:
        ...

    def notify(self, message: str) -> None:
        """Tell the user why a submission was rejected."""
        ...

    def on_submit(self, callback: Callable[[], None]) -> None:
        ...

    def on_type_change(self, callback: Callable[[str], None]) -> None:
        """Report activity type switches; the form toggles its own cadence/elevation rows."""
        ...


class WorkoutListCollaborator(Protocol):
    """The rendered workout list plus its "clear all" button."""

    def add_entry(self, entry: WorkoutListEntry) -> None:
        ...

    def remove_entry(self, workout_id: int) -> None:
        ...

    def set_clear_visible(self, visible: bool) -> None:
        ...

    def on_select(self, callback: IdCallback) -> None:
        ...

    def on_edit(self, callback: IdCallback) -> None:
        ...

    def on_delete(self, callback: IdCallback) -> None:
        ...

    def on_clear(self, callback: Callable[[], None]) -> None:
        ...
