"""Poll a single file and fire a callback when it is created or modified."""

from __future__ import annotations

import logging
import os
import time
from pathlib import Path
from typing import Callable

logger = logging.getLogger("calreminder.watcher")


class FileWatcher:
    """mtime/size polling watcher for one file.

    The first observation only records a baseline; the callback fires on
    later creates and modifications.  Deletion is logged and otherwise
    ignored.
    """

    def __init__(
        self,
        path: Path | str,
        callback: Callable[[Path], object],
        interval: float = 2.0,
    ) -> None:
        self.path = Path(path)
        self.callback = callback
        self.interval = interval
        self._last: tuple[int, int] | None = self._stat()

    def _stat(self) -> tuple[int, int] | None:
        try:
            st = os.stat(self.path)
        except FileNotFoundError:
            return None
        return st.st_mtime_ns, st.st_size

    def poll(self) -> bool:
        """Check the file once. Returns True if the callback was invoked."""
        current = self._stat()
        previous, self._last = self._last, current

        if current is None:
            if previous is not None:
                logger.info("Watched file removed: %s", self.path)
            return False
        if current == previous:
            return False

        logger.info("%s: %s", "Created" if previous is None else "Changed", self.path)
        self.callback(self.path)
        return True

    def run_forever(self) -> None:
        logger.info("Watching %s (interval=%.1fs)", self.path, self.interval)
        while True:
            try:
                self.poll()
            except Exception:
                logger.exception("Processing %s failed, will retry on next change", self.path)
            time.sleep(self.interval)
