"""Glue between pointer input and the review queue.

Feeds gesture samples to the classifier and applies committing outcomes to
the queue. Every sample is dropped while the queue is exhausted, and a
cancelled outcome leaves the queue untouched.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from reviewstack.design.gesture import (
    GestureClassifier,
    GestureOutcome,
    GesturePhase,
    GestureSample,
    SwipeProgress,
)
from reviewstack.viewmodels.review_queue import ReviewQueue

__all__ = ["SwipeController"]

_logger = logging.getLogger(__name__)


class SwipeController:
    def __init__(self, queue: ReviewQueue, classifier: GestureClassifier) -> None:
        self.queue = queue
        self.classifier = classifier

    def on_sample(self, sample: GestureSample) -> Union[SwipeProgress, GestureOutcome, None]:
        if not self.queue.can_commit:
            _logger.debug("Dropping %s sample: queue exhausted", sample.phase.value)
            return None
        result = self.classifier.feed(sample)
        if isinstance(result, GestureOutcome) and result.committed and result.direction:
            self.queue.commit(result.direction)
        return result

    # Convenience wrappers matching the pointer callbacks of a view.
    def begin(self) -> None:
        self.on_sample(GestureSample(GesturePhase.BEGAN))

    def move(self, translation_x: float, reference_width: float) -> Optional[SwipeProgress]:
        result = self.on_sample(
            GestureSample(
                GesturePhase.CHANGED,
                translation_x=translation_x,
                reference_width=reference_width,
            )
        )
        return result if isinstance(result, SwipeProgress) else None

    def release(
        self,
        translation_x: float,
        velocity_x: float,
        reference_width: float,
        *,
        cancelled: bool = False,
    ) -> Optional[GestureOutcome]:
        phase = GesturePhase.CANCELLED if cancelled else GesturePhase.ENDED
        result = self.on_sample(
            GestureSample(
                phase,
                translation_x=translation_x,
                velocity_x=velocity_x,
                reference_width=reference_width,
            )
        )
        return result if isinstance(result, GestureOutcome) else None
