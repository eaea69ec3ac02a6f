"""macOS Calendar.app backend driven through AppleScript (osascript).

Events are matched on summary + start date + end date inside a named
calendar.  Dates are assembled field by field so the scripts do not depend
on the system's date-string locale.
"""

from __future__ import annotations

import logging
import subprocess
import time as _time
from datetime import datetime

from src.backends.base import BackendError

logger = logging.getLogger("calreminder.calendar_app")

RECORD_SEP = "\x1f"


# ── Self-healing helpers ─────────────────────────────────────────────────────

def _is_calendar_app_running() -> bool:
    result = subprocess.run(
        ["pgrep", "-f", "Calendar.app/Contents/MacOS/Calendar$"],
        capture_output=True,
    )
    return result.returncode == 0


def _ensure_calendar_app() -> bool:
    """Launch Calendar.app if not running. Returns True if a launch was needed."""
    if _is_calendar_app_running():
        return False
    logger.warning("Calendar.app is not running, launching it")
    subprocess.run(["open", "-g", "-j", "-a", "Calendar"], timeout=10, capture_output=True)
    _time.sleep(5)
    logger.info("Calendar.app launched")
    return True


# ── AppleScript helpers ──────────────────────────────────────────────────────

def escape_applescript(s: str) -> str:
    """Escape a value for use inside an AppleScript string literal."""
    return s.replace("\\", "\\\\").replace('"', '\\"')


def _date_block(var: str, dt: datetime) -> str:
    # Day is reset to 1 first so switching month never overflows (e.g. 31 -> Feb).
    return "\n".join([
        f"set {var} to current date",
        f"set day of {var} to 1",
        f"set year of {var} to {dt.year}",
        f"set month of {var} to {dt.month}",
        f"set day of {var} to {dt.day}",
        f"set time of {var} to {dt.hour * 3600 + dt.minute * 60}",
    ])


def _matching_events(title: str) -> str:
    return (
        f'        set matchingEvents to (every event whose summary = "{escape_applescript(title)}" '
        f'and start date = startDate and end date = endDate)'
    )


def _event_script(calendar: str, start: datetime, end: datetime, body: str) -> str:
    return f'''
tell application "Calendar"
    tell calendar "{escape_applescript(calendar)}"
{_date_block("startDate", start)}
{_date_block("endDate", end)}
{body}
    end tell
end tell
'''.strip()


class CalendarAppBackend:
    """Calendar backend for the local Calendar.app."""

    def __init__(self, *, timeout: int = 60) -> None:
        self.timeout = timeout

    def _run_osascript(self, script: str) -> str:
        try:
            result = subprocess.run(
                ["osascript", "-e", script],
                capture_output=True, text=True, timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            raise BackendError(f"AppleScript timed out after {self.timeout}s") from None
        except OSError as exc:
            raise BackendError(f"Cannot run osascript: {exc}") from exc

        if result.returncode != 0:
            stderr = result.stderr.strip()
            if "-600" in stderr:
                try:
                    _ensure_calendar_app()
                except (OSError, subprocess.SubprocessError) as e:
                    logger.warning("Failed to launch Calendar.app: %s", e)
            raise BackendError(f"osascript failed (rc={result.returncode}): {stderr}")
        return result.stdout.rstrip("\r\n")

    def list_calendar_names(self) -> list[str]:
        script = '''
tell application "Calendar"
    set recSep to ASCII character 31
    set output to ""
    repeat with c in every calendar
        set output to output & (name of c) & recSep
    end repeat
    return output
end tell
'''.strip()
        raw = self._run_osascript(script)
        names = [n for n in raw.split(RECORD_SEP) if n]
        logger.debug("Available calendars: %s", ", ".join(names))
        return names

    def find_event(self, calendar: str, title: str, start: datetime, end: datetime) -> bool:
        body = "\n".join([
            _matching_events(title),
            "        return (count of matchingEvents) > 0",
        ])
        out = self._run_osascript(_event_script(calendar, start, end, body))
        if out not in ("true", "false"):
            raise BackendError(f"Unexpected find_event output: {out!r}")
        return out == "true"

    def create_event(
        self,
        calendar: str,
        title: str,
        start: datetime,
        end: datetime,
        alert_minutes: int | None = None,
    ) -> None:
        lines = [
            f'        set newEvent to make new event with properties '
            f'{{summary:"{escape_applescript(title)}", start date:startDate, end date:endDate}}',
        ]
        if alert_minutes:
            lines += [
                "        tell newEvent",
                f"            make new sound alarm with properties "
                f"{{trigger date:(startDate - ({int(alert_minutes)} * minutes))}}",
                "        end tell",
            ]
        self._run_osascript(_event_script(calendar, start, end, "\n".join(lines)))
        logger.info("Created event %r on %s (%s - %s)", title, calendar, start, end)

    def delete_event(self, calendar: str, title: str, start: datetime, end: datetime) -> None:
        body = "\n".join([
            _matching_events(title),
            "        repeat with i from (count of matchingEvents) to 1 by -1",
            "            delete item i of matchingEvents",
            "        end repeat",
        ])
        self._run_osascript(_event_script(calendar, start, end, body))
        logger.info("Deleted event(s) %r on %s (%s - %s)", title, calendar, start, end)
