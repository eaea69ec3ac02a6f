"""User-facing success/error notifications."""

from __future__ import annotations

import logging
import subprocess

from src.backends.calendar_app import escape_applescript

logger = logging.getLogger("calreminder.notify")

APP_TITLE = "Calendar Reminder"


class LogNotifier:
    """Notifications written to the log only."""

    def success(self, message: str) -> None:
        logger.info(message)

    def error(self, message: str) -> None:
        logger.error(message)


class MacNotifier(LogNotifier):
    """Log, then post to the macOS notification center via osascript."""

    def success(self, message: str) -> None:
        super().success(message)
        self._post(message, subtitle="Done")

    def error(self, message: str) -> None:
        super().error(message)
        self._post(message, subtitle="Error")

    def _post(self, message: str, subtitle: str) -> None:
        script = (
            f'display notification "{escape_applescript(message)}" '
            f'with title "{escape_applescript(APP_TITLE)}" '
            f'subtitle "{escape_applescript(subtitle)}"'
        )
        try:
            subprocess.run(
                ["osascript", "-e", script],
                capture_output=True, timeout=10,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.warning("Failed to send notification: %s", e)


def make_notifier(mode: str) -> LogNotifier:
    return MacNotifier() if mode == "macos" else LogNotifier()
