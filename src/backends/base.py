"""Calendar backend contract shared by the reconciler and its adapters.

Events are identified by (title, start, end) inside one calendar; no
backend-specific identifier is ever kept.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol


class BackendError(RuntimeError):
    """A calendar backend command failed."""


class CalendarBackend(Protocol):
    def list_calendar_names(self) -> list[str]:
        ...

    def find_event(self, calendar: str, title: str, start: datetime, end: datetime) -> bool:
        ...

    def create_event(
        self,
        calendar: str,
        title: str,
        start: datetime,
        end: datetime,
        alert_minutes: int | None = None,
    ) -> None:
        ...

    def delete_event(self, calendar: str, title: str, start: datetime, end: datetime) -> None:
        """Delete every event matching the triple."""
        ...
