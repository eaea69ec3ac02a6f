"""Reconcile parsed reminders against calendar state.

For each record the effective start/end are computed, expired reminders are
dropped, and the backend is asked whether an event with the same
(title, start, end) already exists.  That lookup is the only deduplication:
a create happens when nothing matches, a delete when something does.

One :class:`Reconciler` covers one processing run; the target calendar is
looked up once per run and backend failures stay confined to the record
that hit them.
"""

from __future__ import annotations

import logging
from datetime import datetime, time, timedelta
from pathlib import Path
from typing import Callable, Protocol

from src.backends.base import BackendError, CalendarBackend
from src.reminders.parser import ReminderRecord, parse_reminders

logger = logging.getLogger("calreminder.reconciler")

DEFAULT_START = time(9, 0)
DEFAULT_END = time(10, 0)

CREATED = "created"
EXISTS = "exists"
DELETED = "deleted"
MISSING = "missing"
EXPIRED = "expired"
FAILED = "failed"


class Notifier(Protocol):
    def success(self, message: str) -> None:
        ...

    def error(self, message: str) -> None:
        ...


def effective_bounds(record: ReminderRecord) -> tuple[datetime, datetime]:
    """Absolute local start/end for a record, with seconds zeroed.

    No start time means 09:00-10:00.  A start without an end lasts one
    hour; a start late in the evening therefore ends on the next day.
    """
    start_t = record.start_time or DEFAULT_START
    start = datetime.combine(record.date, start_t.replace(second=0, microsecond=0))

    if record.end_time is not None:
        end = datetime.combine(record.date, record.end_time.replace(second=0, microsecond=0))
    elif record.start_time is not None:
        end = start + timedelta(hours=1)
    else:
        end = datetime.combine(record.date, DEFAULT_END)
    return start, end


class Reconciler:
    def __init__(
        self,
        backend: CalendarBackend,
        notifier: Notifier,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.backend = backend
        self.notifier = notifier
        self.clock = clock
        self._calendar: str | None = None

    def target_calendar(self) -> str:
        """First calendar reported by the backend, cached for this run."""
        if self._calendar is None:
            names = self.backend.list_calendar_names()
            if not names:
                raise BackendError("No calendars available")
            self._calendar = names[0]
            logger.debug("Using calendar %r", self._calendar)
        return self._calendar

    def reconcile(self, record: ReminderRecord) -> str:
        """Converge the calendar with one record. Returns the outcome."""
        try:
            return self._reconcile(record)
        except BackendError as exc:
            logger.warning("Reminder %r failed: %s", record.title, exc)
            self.notifier.error(f"Calendar operation failed: {exc}")
            return FAILED

    def _reconcile(self, record: ReminderRecord) -> str:
        start, end = effective_bounds(record)
        if start < self.clock():
            logger.debug("Skipping expired reminder %r (%s)", record.title, start)
            return EXPIRED

        calendar = self.target_calendar()
        exists = self.backend.find_event(calendar, record.title, start, end)

        if record.should_delete:
            if not exists:
                return MISSING
            self.backend.delete_event(calendar, record.title, start, end)
            self.notifier.success(f"Deleted calendar event: {record.title}")
            return DELETED

        if exists:
            logger.debug("Event %r already exists, skipping", record.title)
            return EXISTS
        alert = record.alert_minutes if record.alert_minutes > 0 else None
        self.backend.create_event(calendar, record.title, start, end, alert)
        self.notifier.success(f"Created calendar event: {record.title}")
        return CREATED

    def run(self, records: list[ReminderRecord]) -> list[str]:
        """Reconcile records sequentially, in document order."""
        outcomes = [self.reconcile(r) for r in records]
        logger.info(
            "Processed %d reminder(s): %s",
            len(outcomes),
            ", ".join(f"{o}={outcomes.count(o)}" for o in sorted(set(outcomes))) or "none",
        )
        return outcomes


def process_text(
    content: str,
    backend: CalendarBackend,
    notifier: Notifier,
    clock: Callable[[], datetime] = datetime.now,
) -> list[str]:
    return Reconciler(backend, notifier, clock).run(parse_reminders(content))


def process_file(
    path: Path | str,
    backend: CalendarBackend,
    notifier: Notifier,
    clock: Callable[[], datetime] = datetime.now,
) -> list[str]:
    """Read the document and reconcile every reminder in it."""
    try:
        content = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Cannot read %s: %s", path, exc)
        notifier.error(f"Failed to process file: {exc}")
        return []
    return process_text(content, backend, notifier, clock)
