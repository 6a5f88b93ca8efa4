"""Synchronous typed event bus.

The review queue, the gesture classifier and the logging service publish
here; presentation layers subscribe. No producer imports a UI type.

 - Handlers run in subscription order on the publishing thread.
 - A failing handler is isolated: the exception is recorded in ``errors``
   and logged, the remaining handlers still run and nothing propagates back
   into the publisher (``commit``/``undo`` never see a handler fault).
 - ``once=True`` subscriptions are dropped after their first successful call.
 - Optional trace ring buffer of recent events for debugging panels.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from threading import RLock
from time import perf_counter
from typing import Any, Deque, Dict, List, Protocol, Tuple

__all__ = [
    "ReviewEvent",
    "Event",
    "EventBus",
    "EventHandler",
    "Subscription",
    "TraceEntry",
]

_logger = logging.getLogger(__name__)


class ReviewEvent(str, Enum):
    WINDOW_CHANGED = "window_changed"
    ITEM_COMMITTED = "item_committed"
    ITEM_RESTORED = "item_restored"
    EXHAUSTED = "exhausted"
    ITEM_TAPPED = "item_tapped"
    GESTURE_PROGRESS = "gesture_progress"
    GESTURE_FINISHED = "gesture_finished"
    LOG_RECORD_ADDED = "log_record_added"


@dataclass(frozen=True)
class Event:
    name: str  # ReviewEvent value or custom string
    payload: Any
    timestamp: float


class EventHandler(Protocol):  # noqa: D401
    def __call__(self, event: Event) -> None: ...  # pragma: no cover - structural


@dataclass
class Subscription:
    event: str
    handler: EventHandler
    once: bool
    active: bool = True

    def cancel(self) -> None:
        self.active = False


@dataclass(frozen=True)
class TraceEntry:
    name: str
    timestamp: float
    summary: str


def _key(name: str | ReviewEvent) -> str:
    return name.value if isinstance(name, ReviewEvent) else name


class EventBus:
    """Publish/subscribe dispatcher.

    The lock only guards the subscriber table and the trace buffer; handlers
    run without it so they may subscribe or unsubscribe re-entrantly.
    """

    DEFAULT_TRACE_CAPACITY = 50

    def __init__(self) -> None:
        self._lock = RLock()
        self._subs: Dict[str, List[Subscription]] = {}
        self._errors: List[Tuple[Event, BaseException]] = []
        self._tracing_enabled = False
        self._traces: Deque[TraceEntry] = deque(maxlen=self.DEFAULT_TRACE_CAPACITY)

    # Subscriptions ------------------------------------------------------
    def subscribe(
        self, name: str | ReviewEvent, handler: EventHandler, *, once: bool = False
    ) -> Subscription:
        sub = Subscription(event=_key(name), handler=handler, once=once)
        with self._lock:
            self._subs.setdefault(sub.event, []).append(sub)
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        with self._lock:
            bucket = self._subs.get(sub.event)
            if bucket:
                self._subs[sub.event] = [s for s in bucket if s is not sub]
                if not self._subs[sub.event]:
                    del self._subs[sub.event]
        sub.active = False

    def _prune(self, key: str) -> List[Subscription]:
        """Drop subscriptions cancelled in place; caller holds the lock."""
        bucket = self._subs.get(key, [])
        live = [s for s in bucket if s.active]
        if len(live) != len(bucket):
            if live:
                self._subs[key] = live
            else:
                del self._subs[key]
        return live

    def clear(self) -> None:
        with self._lock:
            self._subs.clear()
            self._errors.clear()

    # Publishing ---------------------------------------------------------
    def publish(self, name: str | ReviewEvent, payload: Any = None) -> Event:
        evt = Event(name=_key(name), payload=payload, timestamp=perf_counter())
        with self._lock:
            subs = self._prune(evt.name)
            if self._tracing_enabled:
                text = "-" if payload is None else str(payload)
                if len(text) > 40:
                    text = text[:37] + "..."
                self._traces.append(TraceEntry(evt.name, evt.timestamp, text))
        finished: List[Subscription] = []
        for sub in subs:
            if not sub.active:
                continue
            try:
                sub.handler(evt)
            except Exception as exc:  # noqa: BLE001 - isolate handler faults
                _logger.exception("Handler for %s failed", evt.name)
                with self._lock:
                    self._errors.append((evt, exc))
            else:
                if sub.once:
                    finished.append(sub)
        for sub in finished:
            self.unsubscribe(sub)
        return evt

    # Introspection ------------------------------------------------------
    def subscriber_count(self, name: str | ReviewEvent) -> int:
        with self._lock:
            return len(self._prune(_key(name)))

    @property
    def errors(self) -> list[Tuple[Event, BaseException]]:
        with self._lock:
            return list(self._errors)

    # Tracing ------------------------------------------------------------
    def enable_tracing(self, enabled: bool = True, *, capacity: int | None = None) -> None:
        with self._lock:
            self._tracing_enabled = enabled
            if capacity is not None and capacity != self._traces.maxlen:
                self._traces = deque(self._traces, maxlen=capacity)

    @property
    def tracing_enabled(self) -> bool:
        with self._lock:
            return self._tracing_enabled

    def recent_traces(self) -> list[TraceEntry]:
        with self._lock:
            return list(self._traces)
