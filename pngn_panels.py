#!/usr/bin/env python3
"""
🐧 PNGN Log Console - Log Panels
================================
Copyright (c) 2025 PNGN-Tec LLC

Log sources shown by the console, one panel each.

A LogPanel is a bounded, thread-safe store of log entries. Producers
append from any thread; the console collects a snapshot once per frame
and renders the concatenated messages in production order.

PanelLogHandler bridges the standard logging module: attach it to a
logger and every record lands in the panel, wrapped in an SGR color for
its level.

Example Usage
=============
```python
import logging
from pngn_panels import LogPanel, PanelLogHandler

panel = LogPanel("worker")
logging.getLogger("worker").addHandler(PanelLogHandler(panel))
```
"""

import logging
import threading
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, List, Optional

from config import get_panel_config

logger = logging.getLogger('PNGN.Console.Panels')

SGR_RESET = "\033[0m"

LEVEL_SGR: Dict[int, str] = {
    logging.DEBUG: "\033[90m",
    logging.INFO: "\033[37m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[1;31m",
}


@dataclass
class LogEntry:
    """One collected log message"""
    message: str
    level: int = logging.INFO
    created: float = field(default_factory=time.time)


class LogPanel:
    """
    Bounded log entry store for one console panel.

    Oldest entries are dropped once max_entries is reached.
    """

    def __init__(self, name: str, max_entries: Optional[int] = None):
        self.name = name
        if max_entries is None:
            max_entries = get_panel_config().max_entries
        if max_entries <= 0:
            raise ValueError("Panel entry limit must be positive")
        self.max_entries = max_entries
        self._entries: Deque[LogEntry] = deque(maxlen=self.max_entries)
        self._lock = threading.Lock()
        logger.debug(f"Created panel {name!r} keeping {self.max_entries} entries")

    def append(self, message: str, level: int = logging.INFO) -> LogEntry:
        entry = LogEntry(message=message, level=level)
        with self._lock:
            self._entries.append(entry)
        return entry

    def collect_logs(self) -> List[LogEntry]:
        """Snapshot of the current entries, oldest first"""
        with self._lock:
            return list(self._entries)

    def text(self) -> str:
        """All messages concatenated in order, as rendered by the console"""
        return "".join(entry.message for entry in self.collect_logs())

    def clear(self):
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __repr__(self) -> str:
        return f"LogPanel(name={self.name!r}, entries={len(self)})"


class PanelLogHandler(logging.Handler):
    """
    logging.Handler that appends formatted records to a LogPanel.

    Each record becomes one entry ending in a newline. With colorize on,
    the text is wrapped in the SGR color for the record's level.
    """

    def __init__(self, panel: LogPanel, colorize: bool = True, level: int = logging.NOTSET):
        super().__init__(level)
        self.panel = panel
        self.colorize = colorize

    def emit(self, record: logging.LogRecord):
        try:
            message = self.format(record)
            if self.colorize:
                color = LEVEL_SGR.get(record.levelno, LEVEL_SGR[logging.INFO])
                message = f"{color}{message}{SGR_RESET}"
            self.panel.append(message + "\n", record.levelno)
        except Exception:
            self.handleError(record)
