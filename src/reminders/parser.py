"""Extract ``@reminder:`` annotations from a text document.

An annotation occupies the rest of its line::

    @reminder: 2024-05-01 09:00-10:00 Dentist !15
    @reminder: 2024-05-01 Pay rent
    @reminder: 2024-05-01 14:30 Call plumber !0
    @reminder: 2024-05-01 09:00-10:00 Dentist !15 !delete

The date is required; a start time with an optional end time may follow.
The title runs up to the first ``!`` marker or the end of the line.  ``!N``
sets the alarm to N minutes before the start (default 30, ``!0`` = no
alarm), and ``!delete`` anywhere in the annotation asks for the matching
event to be removed.  Anything that does not fit is ignored.
"""

from __future__ import annotations

import logging
import re
from datetime import date, time
from typing import NamedTuple

logger = logging.getLogger("calreminder.parser")

MARKER = "@reminder:"
DELETE_MARKER = "!delete"
DEFAULT_ALERT_MINUTES = 30

_REMINDER_RE = re.compile(
    re.escape(MARKER)
    + r"[ \t]*(\d+-\d+-\d+)"                       # date
    + r"(?:[ \t]+(\d{2}:\d{2})(?:-(\d{2}:\d{2}))?)?"  # start[-end]
    + r"[ \t]+([^!\r\n]+?)"                         # title
    + r"(?:[ \t]+!(\d+))?"                          # !alert minutes
    + r"[ \t]*(?:!delete)?"
    + r"[ \t]*(?:\r?\n|\Z)"
)


class ReminderRecord(NamedTuple):
    date: date
    start_time: time | None
    end_time: time | None
    title: str
    alert_minutes: int
    should_delete: bool


def parse_reminders(content: str) -> list[ReminderRecord]:
    """Return one record per well-formed annotation, in document order."""
    reminders: list[ReminderRecord] = []
    for m in _REMINDER_RE.finditer(content):
        date_str, start_str, end_str, title, alert_str = m.groups()
        title = title.strip()
        if not title:
            continue
        try:
            day = _parse_date(date_str)
            start = _parse_time(start_str) if start_str else None
            end = _parse_time(end_str) if end_str else None
        except ValueError as exc:
            logger.debug("Skipping annotation %r: %s", m.group(0).strip(), exc)
            continue

        reminders.append(ReminderRecord(
            date=day,
            start_time=start,
            end_time=end,
            title=title,
            alert_minutes=int(alert_str) if alert_str else DEFAULT_ALERT_MINUTES,
            # The whole span is searched, not just the trailing slot.
            should_delete=DELETE_MARKER in m.group(0),
        ))

    logger.debug("Parsed %d reminder(s)", len(reminders))
    return reminders


def _parse_date(value: str) -> date:
    year, month, day = (int(p) for p in value.split("-"))
    return date(year, month, day)


def _parse_time(value: str) -> time:
    hours, minutes = (int(p) for p in value.split(":"))
    return time(hours, minutes)
