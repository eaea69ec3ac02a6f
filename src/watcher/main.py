#!/usr/bin/env python3
"""Calendar Reminder daemon.

Watches the configured document and syncs its ``@reminder:`` lines into
Calendar.app whenever the file is saved.

Usage:
    python3 -m src.watcher.main
    python3 -m src.watcher.main --once
    python3 -m src.watcher.main --once --dry-run
    python3 -m src.watcher.main --config path/to/config.yaml --log-only
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Allow running as a script from repo root
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from src.backends.calendar_app import CalendarAppBackend
from src.backends.dry_run import DryRunCalendar
from src.common.config import load_config, resolve_target_file, setup_logging
from src.common.notify import make_notifier
from src.reminders.reconciler import process_file
from src.watcher.file_watcher import FileWatcher

logger = logging.getLogger("calreminder.main")


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Sync @reminder: annotations into Calendar.app",
    )
    parser.add_argument("--config", help="Path to config.yaml")
    parser.add_argument(
        "--once", action="store_true",
        help="Process the file immediately and exit",
    )
    parser.add_argument("--dry-run", action="store_true", help="Preview without changing the calendar")
    parser.add_argument(
        "--log-only", action="store_true",
        help="Log results instead of posting macOS notifications",
    )
    args = parser.parse_args()

    cfg = load_config(args.config)
    setup_logging(cfg)

    target = resolve_target_file(cfg)
    backend = CalendarAppBackend(timeout=int(cfg["calendar"]["osascript_timeout"]))
    if args.dry_run:
        backend = DryRunCalendar(backend)
    notifier = make_notifier("log" if args.log_only else cfg["notifications"])

    def on_change(path: Path) -> None:
        process_file(path, backend, notifier)

    if args.once:
        on_change(target)
        return

    logger.info("Calendar Reminder activated")
    FileWatcher(target, on_change, interval=cfg["poll_interval"]).run_forever()


if __name__ == "__main__":
    main()
