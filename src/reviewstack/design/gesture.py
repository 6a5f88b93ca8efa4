"""Swipe gesture classification.

Turns pointer samples for the front card into a continuous progress value
while the pointer moves and a discrete commit/cancel outcome on release.

    progress = clamp(|translation_x| / reference_width, 0, 1)
    commit   = progress > dismiss_threshold - epsilon
               or |velocity_x| > velocity_threshold

The classifier never touches the review queue. A committing outcome carries
the direction for the caller to hand to ``ReviewQueue.commit``; a cancelled
outcome only tells the presentation layer to spring the card back.

State is limited to the gesture in flight and is reset on ``began`` and
after release, so nothing leaks from one gesture into the next. ``classify``
evaluates a complete immutable sample stream without touching that state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Union

from reviewstack.config.settings import (
    DEFAULT_DISMISS_THRESHOLD,
    DEFAULT_EPSILON,
    DEFAULT_VELOCITY_THRESHOLD,
)
from reviewstack.errors import InvalidConfiguration
from reviewstack.models import Direction
from reviewstack.services.event_bus import EventBus, ReviewEvent

__all__ = [
    "GesturePhase",
    "GestureSample",
    "GestureThresholds",
    "SwipeProgress",
    "GestureOutcome",
    "GestureClassifier",
    "swipe_progress",
    "classify_release",
]

_logger = logging.getLogger(__name__)


class GesturePhase(str, Enum):
    BEGAN = "began"
    CHANGED = "changed"
    ENDED = "ended"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (GesturePhase.ENDED, GesturePhase.CANCELLED)


@dataclass(frozen=True)
class GestureSample:
    phase: GesturePhase
    translation_x: float = 0.0
    velocity_x: float = 0.0
    reference_width: float = 0.0


@dataclass(frozen=True)
class GestureThresholds:
    dismiss_threshold: float = DEFAULT_DISMISS_THRESHOLD
    velocity_threshold: float = DEFAULT_VELOCITY_THRESHOLD
    epsilon: float = DEFAULT_EPSILON

    def validate(self) -> "GestureThresholds":
        if not 0 < self.dismiss_threshold <= 1:
            raise InvalidConfiguration(
                f"dismiss_threshold must be in (0, 1], got {self.dismiss_threshold!r}"
            )
        if self.velocity_threshold < 0:
            raise InvalidConfiguration("velocity_threshold must be >= 0")
        if not 0 <= self.epsilon < self.dismiss_threshold:
            raise InvalidConfiguration("epsilon must be >= 0 and below dismiss_threshold")
        return self

    @property
    def effective_threshold(self) -> float:
        return self.dismiss_threshold - self.epsilon


@dataclass(frozen=True)
class SwipeProgress:
    progress: float
    sign: int  # -1, 0 or 1


@dataclass(frozen=True)
class GestureOutcome:
    committed: bool
    direction: Optional[Direction]  # None when cancelled
    progress: float
    translation_x: float
    velocity_x: float


def _sign(value: float) -> int:
    return (value > 0) - (value < 0)


def swipe_progress(translation_x: float, reference_width: float) -> float:
    if reference_width <= 0:
        _logger.warning("Ignoring non-positive reference width %r", reference_width)
        return 0.0
    return min(1.0, max(0.0, abs(translation_x) / reference_width))


def classify_release(
    translation_x: float,
    velocity_x: float,
    reference_width: float,
    thresholds: GestureThresholds,
) -> GestureOutcome:
    progress = swipe_progress(translation_x, reference_width)
    committed = (
        progress > thresholds.effective_threshold
        or abs(velocity_x) > thresholds.velocity_threshold
    )
    return GestureOutcome(
        committed=committed,
        direction=Direction.from_translation(translation_x) if committed else None,
        progress=progress,
        translation_x=translation_x,
        velocity_x=velocity_x,
    )


class GestureClassifier:
    """Per-gesture classifier publishing progress and outcome events.

    Parameters
    ----------
    thresholds:
        Commit rules; validated on construction.
    event_bus:
        Optional bus receiving ``GESTURE_PROGRESS`` (``SwipeProgress``) and
        ``GESTURE_FINISHED`` (``GestureOutcome``).
    """

    def __init__(
        self,
        thresholds: GestureThresholds | None = None,
        *,
        event_bus: EventBus | None = None,
    ) -> None:
        self._thresholds = (thresholds or GestureThresholds()).validate()
        self._bus = event_bus
        self._active = False
        self._translation_x = 0.0

    @property
    def thresholds(self) -> GestureThresholds:
        return self._thresholds

    @property
    def active(self) -> bool:
        return self._active

    @property
    def translation_x(self) -> float:
        return self._translation_x

    def _reset(self) -> None:
        self._active = False
        self._translation_x = 0.0

    # Phases -------------------------------------------------------------
    def began(self) -> None:
        self._active = True
        self._translation_x = 0.0

    def changed(self, translation_x: float, reference_width: float) -> SwipeProgress:
        if not self._active:
            self._active = True
        self._translation_x = translation_x
        update = SwipeProgress(swipe_progress(translation_x, reference_width), _sign(translation_x))
        if self._bus is not None:
            self._bus.publish(ReviewEvent.GESTURE_PROGRESS, update)
        return update

    def ended(
        self, translation_x: float, velocity_x: float, reference_width: float
    ) -> GestureOutcome:
        outcome = classify_release(translation_x, velocity_x, reference_width, self._thresholds)
        self._reset()
        _logger.debug(
            "Gesture released: progress=%.3f velocity=%.1f committed=%s",
            outcome.progress,
            velocity_x,
            outcome.committed,
        )
        if self._bus is not None:
            self._bus.publish(ReviewEvent.GESTURE_FINISHED, outcome)
        return outcome

    # The system can cancel a pan that was already far enough; it is judged
    # exactly like a release.
    cancelled = ended

    def feed(self, sample: GestureSample) -> Union[SwipeProgress, GestureOutcome, None]:
        if sample.phase is GesturePhase.BEGAN:
            self.began()
            return None
        if sample.phase is GesturePhase.CHANGED:
            return self.changed(sample.translation_x, sample.reference_width)
        return self.ended(sample.translation_x, sample.velocity_x, sample.reference_width)

    def classify(self, samples: Iterable[GestureSample]) -> Optional[GestureOutcome]:
        """Outcome of the first terminal sample in ``samples`` (None if absent).

        Pure: publishes nothing and leaves the in-flight gesture untouched.
        """
        for sample in samples:
            if sample.phase.is_terminal:
                return classify_release(
                    sample.translation_x,
                    sample.velocity_x,
                    sample.reference_width,
                    self._thresholds,
                )
        return None
