"""Pytest configuration for shared fixtures and logging setup."""
from __future__ import annotations

import os
from datetime import datetime, timedelta
from typing import Any, Callable

import pytest

os.environ["STORAGE_BACKEND"] = os.environ.get("STORAGE_BACKEND") or "memory"
os.environ["DATABASE_URL"] = os.environ.get("DATABASE_URL") or "sqlite:///:memory:"

from workout_map.logging_config import configure_logging

configure_logging()

from workout_map.models.schemas import FormFields, FormPrefill
from workout_map.services.key_value import InMemoryKeyValueStore
from workout_map.services.orchestrator import WorkoutContext
from workout_map.services.presentation import WorkoutListEntry
from workout_map.services.workout_factory import WorkoutFactory


class FakeMap:
    """Records marker and view calls instead of drawing anything."""

    def __init__(self) -> None:
        self.markers: dict[int, dict[str, Any]] = {}
        self.removed: list[int] = []
        self.views: list[tuple[tuple[float, float], int]] = []
        self.click_callback: Callable | None = None
        self._next_handle = 0

    def create_marker(self, coords, popup_text, style_tag):
        self._next_handle += 1
        self.markers[self._next_handle] = {
            "coords": coords,
            "popup": popup_text,
            "style": style_tag,
        }
        return self._next_handle

    def remove_marker(self, handle) -> None:
        del self.markers[handle]
        self.removed.append(handle)

    def set_view(self, coords, zoom) -> None:
        self.views.append((coords, zoom))

    def on_click(self, callback) -> None:
        self.click_callback = callback

    def click(self, lat: float, lng: float) -> None:
        assert self.click_callback is not None
        self.click_callback((lat, lng))


class FakeForm:
    """Holds the values a user would have typed into the form."""

    def __init__(self) -> None:
        self.visible = False
        self.prefill: FormPrefill | None = None
        self.fields = FormFields()
        self.messages: list[str] = []
        self.submit_callback: Callable | None = None
        self.type_change_callback: Callable | None = None

    def show(self, prefill: FormPrefill | None = None) -> None:
        self.visible = True
        self.prefill = prefill

    def hide(self) -> None:
        self.visible = False
        self.prefill = None

    def read(self) -> FormFields:
        return self.fields

    def notify(self, message: str) -> None:
        self.messages.append(message)

    def on_submit(self, callback) -> None:
        self.submit_callback = callback

    def on_type_change(self, callback) -> None:
        self.type_change_callback = callback

    def fill(self, **values: Any) -> None:
        self.fields = FormFields(**values)

    def submit(self) -> None:
        assert self.submit_callback is not None
        self.submit_callback()


class FakeList:
    """Keeps rendered entries in order, like the sidebar list."""

    def __init__(self) -> None:
        self.entries: list[WorkoutListEntry] = []
        self.clear_visible = False
        self.callbacks: dict[str, Callable] = {}

    def add_entry(self, entry: WorkoutListEntry) -> None:
        self.entries.append(entry)

    def remove_entry(self, workout_id: int) -> None:
        self.entries = [e for e in self.entries if e.workout_id != workout_id]

    def set_clear_visible(self, visible: bool) -> None:
        self.clear_visible = visible

    def on_select(self, callback) -> None:
        self.callbacks["select"] = callback

    def on_edit(self, callback) -> None:
        self.callbacks["edit"] = callback

    def on_delete(self, callback) -> None:
        self.callbacks["delete"] = callback

    def on_clear(self, callback) -> None:
        self.callbacks["clear"] = callback

    @property
    def ids(self) -> list[int]:
        return [e.workout_id for e in self.entries]


class StepClock:
    """Deterministic clock advancing one minute per call."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + timedelta(minutes=1)
        return current


@pytest.fixture
def clock() -> StepClock:
    return StepClock(datetime(2024, 4, 14, 7, 30))


@pytest.fixture
def factory(clock: StepClock) -> WorkoutFactory:
    return WorkoutFactory(clock=clock)


@pytest.fixture
def kv() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def fake_map() -> FakeMap:
    return FakeMap()


@pytest.fixture
def fake_form() -> FakeForm:
    return FakeForm()


@pytest.fixture
def fake_list() -> FakeList:
    return FakeList()


@pytest.fixture
def context(fake_form: FakeForm, fake_list: FakeList, kv: InMemoryKeyValueStore, factory: WorkoutFactory) -> WorkoutContext:
    """Context that has not been started yet (no map)."""

    return WorkoutContext(form=fake_form, list_view=fake_list, kv=kv, factory=factory)
