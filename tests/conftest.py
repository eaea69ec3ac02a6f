"""Shared fakes for reminder parsing and reconciliation tests."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any

import pytest

from src.backends.base import BackendError

REPO_DIR = Path(__file__).resolve().parent.parent

FIXED_NOW = datetime(2030, 6, 15, 12, 0)


class FakeCalendar:
    """In-memory calendar honouring the backend contract.

    ``calls`` records every backend call as ``(method, *args)``.
    Set ``fail_on`` to a method name to make that call raise BackendError.
    """

    def __init__(self, names: list[str] | None = None) -> None:
        self.names = ["Home", "Work"] if names is None else names
        self.events: list[tuple[str, str, datetime, datetime, int | None]] = []
        self.calls: list[tuple[Any, ...]] = []
        self.fail_on: str | None = None

    def _record(self, method: str, *args: Any) -> None:
        self.calls.append((method, *args))
        if self.fail_on == method:
            raise BackendError(f"{method} exploded")

    def list_calendar_names(self) -> list[str]:
        self._record("list_calendar_names")
        return list(self.names)

    def find_event(self, calendar: str, title: str, start: datetime, end: datetime) -> bool:
        self._record("find_event", calendar, title, start, end)
        return any(e[:4] == (calendar, title, start, end) for e in self.events)

    def create_event(
        self,
        calendar: str,
        title: str,
        start: datetime,
        end: datetime,
        alert_minutes: int | None = None,
    ) -> None:
        self._record("create_event", calendar, title, start, end, alert_minutes)
        self.events.append((calendar, title, start, end, alert_minutes))

    def delete_event(self, calendar: str, title: str, start: datetime, end: datetime) -> None:
        self._record("delete_event", calendar, title, start, end)
        self.events = [e for e in self.events if e[:4] != (calendar, title, start, end)]

    def methods(self) -> list[str]:
        return [c[0] for c in self.calls]


class RecordingNotifier:
    def __init__(self) -> None:
        self.successes: list[str] = []
        self.errors: list[str] = []

    def success(self, message: str) -> None:
        self.successes.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)


@pytest.fixture()
def calendar() -> FakeCalendar:
    return FakeCalendar()


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


def fixed_clock() -> datetime:
    return FIXED_NOW
