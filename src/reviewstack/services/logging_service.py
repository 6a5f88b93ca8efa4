"""In-process log capture for review sessions.

Attaches a handler to the ``reviewstack`` logger (or any logger passed in),
keeps the most recent records in a bounded ring buffer and republishes each
one as ``ReviewEvent.LOG_RECORD_ADDED`` so a debug panel can follow queue
transitions live.
"""

from __future__ import annotations

import json
import logging
from collections import deque
from dataclasses import asdict, dataclass
from pathlib import Path
from threading import RLock, local
from typing import Deque, List, Optional

from .event_bus import EventBus, ReviewEvent
from .service_locator import EVENT_BUS, LOGGING_SERVICE, services

__all__ = [
    "LogEntry",
    "LoggingService",
    "get_logging_service",
]


@dataclass(frozen=True)
class LogEntry:
    level: str
    name: str
    message: str
    created: float
    lineno: int


class _RingBufferHandler(logging.Handler):
    def __init__(self, svc: "LoggingService") -> None:
        super().__init__(level=logging.DEBUG)
        self._svc = svc

    def emit(self, record: logging.LogRecord) -> None:  # noqa: D401
        self._svc._ingest(record)


class LoggingService:
    def __init__(
        self,
        capacity: int = 500,
        *,
        logger_name: str = "reviewstack",
        event_bus: EventBus | None = None,
    ) -> None:
        self._lock = RLock()
        self._entries: Deque[LogEntry] = deque(maxlen=max(1, capacity))
        self._handler = _RingBufferHandler(self)
        self._logger_name = logger_name
        self._event_bus = event_bus
        self._attached = False
        self._saved_level: Optional[int] = None
        self._publishing = local()

    # Lifecycle --------------------------------------------------------
    def attach(self) -> None:
        if self._attached:
            return
        logger = logging.getLogger(self._logger_name)
        logger.addHandler(self._handler)
        if logger.getEffectiveLevel() > logging.DEBUG:
            self._saved_level = logger.level
            logger.setLevel(logging.DEBUG)
        self._attached = True

    def detach(self) -> None:
        if not self._attached:
            return
        logger = logging.getLogger(self._logger_name)
        logger.removeHandler(self._handler)
        if self._saved_level is not None:
            logger.setLevel(self._saved_level)
            self._saved_level = None
        self._attached = False

    @property
    def attached(self) -> bool:
        return self._attached

    def _ingest(self, record: logging.LogRecord) -> None:
        entry = LogEntry(
            level=record.levelname,
            name=record.name,
            message=record.getMessage(),
            created=record.created,
            lineno=record.lineno,
        )
        with self._lock:
            self._entries.append(entry)
        bus = self._event_bus or services.try_get(EVENT_BUS)
        # A failing subscriber is logged by the bus; do not republish that record.
        if not isinstance(bus, EventBus) or getattr(self._publishing, "active", False):
            return
        self._publishing.active = True
        try:
            bus.publish(
                ReviewEvent.LOG_RECORD_ADDED,
                {"level": entry.level, "name": entry.name, "message": entry.message[:120]},
            )
        finally:
            self._publishing.active = False

    # Query ------------------------------------------------------------
    def recent(self, limit: Optional[int] = None) -> List[LogEntry]:
        with self._lock:
            data = list(self._entries)
        return data[-limit:] if limit is not None else data

    def filter(
        self, *, level: str | None = None, name_contains: str | None = None
    ) -> List[LogEntry]:
        return [
            e
            for e in self.recent()
            if (not level or e.level == level)
            and (not name_contains or name_contains in e.name)
        ]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def export_jsonl(self, path: str | Path, *, level: str | None = None) -> int:
        """Write (optionally level-filtered) entries as JSON Lines; returns line count."""
        entries = self.filter(level=level)
        with open(path, "w", encoding="utf-8") as fh:
            for e in entries:
                fh.write(json.dumps(asdict(e), sort_keys=True) + "\n")
        return len(entries)


def get_logging_service() -> LoggingService:
    return services.get_typed(LOGGING_SERVICE, LoggingService)
