"""Card stack widget over a review queue.

Thin presentation bridge: it owns no review state. It renders one child
widget per window slot, positions it from the slot transform and translates
mouse drags on itself into gesture samples for a ``SwipeController``.

Styling hooks (dynamic properties, for QSS or painting delegates):
 - ``slotIndex``, ``slotOffset``, ``slotScale``, ``slotRotation`` per card
 - ``dragRotation`` on the front card while it follows the pointer

QWidget cannot rotate or scale children, so those values are exposed as
properties only; a custom card widget may paint with them.

Pointer handling is split into ``press_at`` / ``drag_to`` / ``release_at``
taking an optional timestamp so tests can drive gestures without
synthesizing mouse events. Velocity is in pixels per second, measured over
the most recent pointer segment; the release point counts as a sample, so a
flick followed by a pause releases with no velocity.
"""

from __future__ import annotations

from time import perf_counter
from typing import Any, Callable, List, Optional, Sequence

from PyQt6.QtWidgets import QLabel, QSizePolicy, QWidget

from reviewstack.components.review_window import MaterializedSlot
from reviewstack.design.gesture import GestureOutcome
from reviewstack.design.slot_transform import drag_transform
from reviewstack.services.event_bus import Event, ReviewEvent
from reviewstack.viewmodels.swipe_controller import SwipeController

__all__ = ["ReviewStackView"]

CardFactory = Callable[[Any], QWidget]

# A pointer resting longer than this before release carries no velocity.
VELOCITY_WINDOW = 0.05  # seconds


class ReviewStackView(QWidget):
    """Stack of cards mirroring ``queue.peek_window()``.

    Parameters
    ----------
    controller:
        Swipe controller wrapping the queue and classifier to drive.
    parent:
        Optional parent widget.
    card_factory:
        Builds a widget from a slot's materialized content. Defaults to a
        ``QLabel`` showing ``str(content)``.
    """

    def __init__(
        self,
        controller: SwipeController,
        parent: Optional[QWidget] = None,
        *,
        card_factory: CardFactory | None = None,
    ) -> None:
        super().__init__(parent)
        self.setObjectName("reviewStack")
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        self._controller = controller
        self._factory: CardFactory = card_factory or self._default_card
        self._cards: List[QWidget] = []  # front card first
        self._press_x: Optional[float] = None
        self._last_sample: tuple[float, float] = (0.0, 0.0)  # (x, seconds)
        self._velocity = 0.0
        self._subscription = controller.queue.events.subscribe(
            ReviewEvent.WINDOW_CHANGED, self._on_window_changed
        )
        self._rebuild(controller.queue.peek_window())

    # Public API -----------------------------------------------------
    def card_count(self) -> int:
        return len(self._cards)

    def cards(self) -> List[QWidget]:
        return list(self._cards)

    def front_card(self) -> Optional[QWidget]:
        return self._cards[0] if self._cards else None

    def reference_width(self) -> float:
        return float(max(1, self.width()))

    def dragging(self) -> bool:
        return self._press_x is not None

    def detach(self) -> None:
        """Stop following the queue (call before discarding the widget)."""
        self._controller.queue.events.unsubscribe(self._subscription)

    # Pointer handling -----------------------------------------------
    def press_at(self, x: float, timestamp: float | None = None) -> None:
        if not self._controller.queue.can_commit:
            return
        self._press_x = x
        self._last_sample = (x, perf_counter() if timestamp is None else timestamp)
        self._velocity = 0.0
        self._controller.begin()

    def drag_to(self, x: float, timestamp: float | None = None) -> None:
        if self._press_x is None:
            return
        now = perf_counter() if timestamp is None else timestamp
        last_x, last_t = self._last_sample
        if now > last_t:
            self._velocity = (x - last_x) / (now - last_t)
        self._last_sample = (x, now)
        translation = x - self._press_x
        self._controller.move(translation, self.reference_width())
        front = self.front_card()
        if front is not None:
            drag = drag_transform(translation, self.reference_width())
            front.move(int(round(drag.translation_x)), front.y())
            front.setProperty("dragRotation", drag.rotation_degrees)

    def release_at(
        self, x: float, timestamp: float | None = None, *, cancelled: bool = False
    ) -> Optional[GestureOutcome]:
        if self._press_x is None:
            return None
        now = perf_counter() if timestamp is None else timestamp
        last_x, last_t = self._last_sample
        if now > last_t and x != last_x:
            self._velocity = (x - last_x) / (now - last_t)
        elif now - last_t > VELOCITY_WINDOW:
            self._velocity = 0.0
        translation = x - self._press_x
        self._press_x = None
        outcome = self._controller.release(
            translation, self._velocity, self.reference_width(), cancelled=cancelled
        )
        if outcome is None or not outcome.committed:
            self._spring_back()
        return outcome

    def mousePressEvent(self, event):  # noqa: N802 - Qt override
        self.press_at(event.position().x())
        event.accept()

    def mouseMoveEvent(self, event):  # noqa: N802
        self.drag_to(event.position().x())
        event.accept()

    def mouseReleaseEvent(self, event):  # noqa: N802
        self.release_at(event.position().x())
        event.accept()

    def closeEvent(self, event):  # noqa: N802
        self.detach()
        super().closeEvent(event)

    # Internal -------------------------------------------------------
    @staticmethod
    def _default_card(content: Any) -> QWidget:
        label = QLabel(str(content))
        label.setWordWrap(True)
        return label

    def _on_window_changed(self, event: Event) -> None:
        self._rebuild(event.payload.slots)

    def _spring_back(self) -> None:
        front = self.front_card()
        if front is None:
            return
        front.move(0, int(round(front.property("slotOffset") or 0.0)))
        front.setProperty("dragRotation", 0.0)

    def _clear_cards(self) -> None:
        for card in self._cards:
            card.setParent(None)
            card.deleteLater()
        self._cards.clear()

    def _rebuild(self, slots: Sequence[MaterializedSlot]) -> None:
        self._clear_cards()
        # Back slots first; later siblings paint on top, leaving slot 0 in front.
        for slot in reversed(slots):
            card = self._factory(slot.content)
            card.setParent(self)
            card.setObjectName("reviewCard")
            card.setProperty("slotIndex", slot.slot_index)
            card.setProperty("slotOffset", slot.transform.vertical_offset)
            card.setProperty("slotScale", slot.transform.scale)
            card.setProperty("slotRotation", slot.transform.rotation_degrees)
            card.setProperty("dragRotation", 0.0)
            card.move(0, int(round(slot.transform.vertical_offset)))
            card.show()
            self._cards.insert(0, card)
