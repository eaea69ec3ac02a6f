"""Read-only wrapper: real lookups, logged-only mutations."""

from __future__ import annotations

import logging
from datetime import datetime

from src.backends.base import CalendarBackend

logger = logging.getLogger("calreminder.dry_run")


class DryRunCalendar:
    def __init__(self, wrapped: CalendarBackend) -> None:
        self.wrapped = wrapped

    def list_calendar_names(self) -> list[str]:
        return self.wrapped.list_calendar_names()

    def find_event(self, calendar: str, title: str, start: datetime, end: datetime) -> bool:
        return self.wrapped.find_event(calendar, title, start, end)

    def create_event(
        self,
        calendar: str,
        title: str,
        start: datetime,
        end: datetime,
        alert_minutes: int | None = None,
    ) -> None:
        logger.info(
            "DRY RUN: Would create %r on %s (%s - %s, alarm=%s)",
            title, calendar, start, end, alert_minutes,
        )

    def delete_event(self, calendar: str, title: str, start: datetime, end: datetime) -> None:
        logger.info("DRY RUN: Would delete %r on %s (%s - %s)", title, calendar, start, end)
