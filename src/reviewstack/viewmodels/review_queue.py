"""Review queue state machine.

Owns the cursor into the backing sequence, the bounded window of
materialized slots and the undo history. Pure Python (no Qt) so behavior
is unit-testable headless; presentation layers subscribe to the event bus.

States
------
ACTIVE     cursor < count; the front slot awaits a decision.
EXHAUSTED  cursor == count; window empty. Left only through ``undo``.

Operation order
---------------
``commit`` and ``undo`` finish every state change (window, cursor,
history, slot transforms) before publishing anything, so handlers only see
settled state. Events per call, in order:

    commit: ITEM_COMMITTED, WINDOW_CHANGED[, EXHAUSTED]
    undo:   ITEM_RESTORED, WINDOW_CHANGED

EXHAUSTED fires in the commit that moves the cursor onto ``count``, i.e. the
exhaustion check happens after the cursor increments. Nothing is published
at construction, even for an empty sequence.

Ignored calls (commit or tap while exhausted, undo with empty history)
return ``False`` and publish nothing. The materializer is called before any
mutation; if it raises, the error is logged, the call returns ``False`` and
the queue is left exactly as it was.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence as _SequenceABC
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple

from reviewstack.components.review_window import MaterializedSlot, ReviewWindow, WindowEntry
from reviewstack.config.settings import DEFAULT_WINDOW_SIZE
from reviewstack.design.slot_transform import SlotTransformConfig, SlotTransformPolicy
from reviewstack.errors import InvalidConfiguration
from reviewstack.models import Decision, Direction
from reviewstack.services.event_bus import EventBus, ReviewEvent
from reviewstack.services.settings_service import ReviewSettings

__all__ = [
    "QueueState",
    "ReviewQueue",
    "ReviewProgress",
    "QueueSnapshot",
    "WindowChanged",
    "ItemCommitted",
    "ItemRestored",
    "Exhausted",
    "ItemTapped",
]

_logger = logging.getLogger(__name__)

Materializer = Callable[[Any], Any]


class QueueState(str, Enum):
    ACTIVE = "active"
    EXHAUSTED = "exhausted"


# Event payloads ---------------------------------------------------------
@dataclass(frozen=True)
class WindowChanged:
    slots: Tuple[MaterializedSlot, ...]


@dataclass(frozen=True)
class ItemCommitted:
    item: Any
    direction: Direction
    index: int


@dataclass(frozen=True)
class ItemRestored:
    item: Any
    direction: Direction
    index: int


@dataclass(frozen=True)
class Exhausted:
    count: int


@dataclass(frozen=True)
class ItemTapped:
    item: Any
    index: int


@dataclass(frozen=True)
class ReviewProgress:
    position: int  # 1-based position of the front item (count when exhausted)
    total: int

    def as_text(self) -> str:
        return f"{self.position}/{self.total}"


@dataclass(frozen=True)
class QueueSnapshot:
    cursor: int
    state: QueueState
    window: Tuple[Tuple[int, Any], ...]  # (backing index, item) per slot
    history: Tuple[Decision, ...]


def _identity(item: Any) -> Any:
    return item


class ReviewQueue:
    """Windowed review queue with linear, unbounded undo.

    Parameters
    ----------
    items:
        Backing sequence. Held by reference and never mutated; any iterable
        that is not a ``Sequence`` is copied into a tuple once.
    window_size:
        Number of materialized slots; ``InvalidConfiguration`` if < 1.
    policy:
        Slot transform policy (default: ``SlotTransformPolicy()``).
    materializer:
        Called once for each item entering the window; its return value is
        the slot ``content``. Defaults to the item itself.
    event_bus:
        Bus for lifecycle events (a private bus is created when omitted).
    """

    def __init__(
        self,
        items: Iterable[Any],
        window_size: int = DEFAULT_WINDOW_SIZE,
        *,
        policy: SlotTransformPolicy | None = None,
        materializer: Materializer | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        if isinstance(window_size, bool) or not isinstance(window_size, int) or window_size < 1:
            raise InvalidConfiguration(f"window_size must be an integer >= 1, got {window_size!r}")
        self._items: Sequence[Any] = items if isinstance(items, _SequenceABC) else tuple(items)
        self._count = len(self._items)
        self._window_size = window_size
        self._window = ReviewWindow(window_size)
        self._history: List[Decision] = []
        self._cursor = 0
        self._policy = policy or SlotTransformPolicy()
        self._materialize: Materializer = materializer or _identity
        self._bus = event_bus or EventBus()
        for index in range(min(window_size, self._count)):
            self._window.push_back(self._entry(index))
        self._slots: Tuple[MaterializedSlot, ...] = ()
        self._settle()
        _logger.debug("Review queue initialized: count=%d window=%d", self._count, window_size)

    @classmethod
    def from_settings(
        cls,
        items: Iterable[Any],
        settings: ReviewSettings | None = None,
        *,
        rng: random.Random | None = None,
        materializer: Materializer | None = None,
        event_bus: EventBus | None = None,
    ) -> "ReviewQueue":
        settings = (settings or ReviewSettings()).validate()
        return cls(
            items,
            settings.window_size,
            policy=SlotTransformPolicy(settings.transform_config(), rng),
            materializer=materializer,
            event_bus=event_bus,
        )

    # Read-only state ------------------------------------------------------
    @property
    def state(self) -> QueueState:
        return QueueState.ACTIVE if self._cursor < self._count else QueueState.EXHAUSTED

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def count(self) -> int:
        return self._count

    @property
    def window_size(self) -> int:
        return self._window_size

    @property
    def can_commit(self) -> bool:
        return self.state is QueueState.ACTIVE

    @property
    def can_undo(self) -> bool:
        return bool(self._history)

    @property
    def history(self) -> Tuple[Decision, ...]:
        return tuple(self._history)

    @property
    def front_index(self) -> Optional[int]:
        return self._cursor if self.can_commit else None

    @property
    def front(self) -> Optional[MaterializedSlot]:
        return self._slots[0] if self._slots else None

    @property
    def events(self) -> EventBus:
        return self._bus

    @property
    def policy(self) -> SlotTransformPolicy:
        return self._policy

    @property
    def progress(self) -> ReviewProgress:
        return ReviewProgress(position=min(self._cursor + 1, self._count), total=self._count)

    def peek_window(self) -> Tuple[MaterializedSlot, ...]:
        return self._slots

    def snapshot(self) -> QueueSnapshot:
        return QueueSnapshot(
            cursor=self._cursor,
            state=self.state,
            window=tuple((s.index, s.item) for s in self._slots),
            history=tuple(self._history),
        )

    # Mutations ------------------------------------------------------------
    def commit(self, direction: Direction | str) -> bool:
        direction = Direction(direction)
        if not self.can_commit:
            _logger.debug("Commit %s ignored: queue exhausted", direction.value)
            return False
        refill_index = self._cursor + self._window_size
        try:
            refill = self._entry(refill_index) if refill_index < self._count else None
        except Exception:
            _logger.exception(
                "Commit %s aborted: materializing #%d failed", direction.value, refill_index
            )
            return False

        committed = self._window.pop_front()
        self._policy.release(committed.index)
        decision = Decision(item=committed.item, direction=direction, index=committed.index)
        self._history.append(decision)
        self._cursor += 1
        if refill is not None:
            self._window.push_back(refill)
        self._settle()
        _logger.debug("Committed #%d %s (cursor=%d)", decision.index, direction.value, self._cursor)

        self._bus.publish(
            ReviewEvent.ITEM_COMMITTED,
            ItemCommitted(item=decision.item, direction=direction, index=decision.index),
        )
        self._bus.publish(ReviewEvent.WINDOW_CHANGED, WindowChanged(self._slots))
        if not self._slots:
            _logger.debug("Review queue exhausted after %d items", self._count)
            self._bus.publish(ReviewEvent.EXHAUSTED, Exhausted(self._count))
        return True

    def approve(self) -> bool:
        return self.commit(Direction.FORWARD)

    def reject(self) -> bool:
        return self.commit(Direction.BACKWARD)

    def undo(self) -> bool:
        if not self._history:
            _logger.debug("Undo ignored: history empty")
            return False
        last = self._history[-1]
        try:
            content = self._materialize(last.item)
        except Exception:
            _logger.exception("Undo aborted: materializing #%d failed", last.index)
            return False
        restored = WindowEntry(index=last.index, item=last.item, content=content)

        self._history.pop()
        self._cursor -= 1
        evicted = self._window.push_front(restored)
        if evicted is not None:
            self._policy.release(evicted.index)
        self._settle()
        _logger.debug("Restored #%d (%s)", last.index, last.direction.value)

        self._bus.publish(
            ReviewEvent.ITEM_RESTORED,
            ItemRestored(item=last.item, direction=last.direction, index=last.index),
        )
        self._bus.publish(ReviewEvent.WINDOW_CHANGED, WindowChanged(self._slots))
        return True

    def tap(self) -> bool:
        front = self.front
        if front is None:
            return False
        self._bus.publish(ReviewEvent.ITEM_TAPPED, ItemTapped(item=front.item, index=front.index))
        return True

    def refresh(self, index: int) -> bool:
        """Re-materialize the slot holding backing ``index`` after its payload changed."""
        position = self._window.position_of(index)
        if position is None:
            return False
        item = self._items[index]
        self._window.replace(position, item=item, content=self._materialize(item))
        self._settle()
        self._bus.publish(ReviewEvent.WINDOW_CHANGED, WindowChanged(self._slots))
        return True

    def set_transform_config(self, config: SlotTransformConfig) -> None:
        self._policy.reconfigure(config)
        self._settle()
        self._bus.publish(ReviewEvent.WINDOW_CHANGED, WindowChanged(self._slots))

    # Internal -------------------------------------------------------------
    def _entry(self, index: int) -> WindowEntry:
        item = self._items[index]
        return WindowEntry(index=index, item=item, content=self._materialize(item))

    def _settle(self) -> None:
        assert self._window.satisfies(self._cursor, self._count), "window out of step with cursor"
        self._slots = tuple(
            MaterializedSlot(
                slot_index=pos,
                index=entry.index,
                item=entry.item,
                content=entry.content,
                transform=self._policy.transform_for(pos, key=entry.index),
            )
            for pos, entry in enumerate(self._window)
        )
