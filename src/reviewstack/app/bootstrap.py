"""Review session bootstrap.

Builds the headless object graph for one review session and registers the
shared pieces in the service locator:

 - Settings (explicit, or loaded from ``config_dir`` when given)
 - EventBus shared by queue, classifier and logging service
 - SlotTransformPolicy with an injectable random source
 - ReviewQueue, GestureClassifier and the SwipeController joining them
 - Optional LoggingService capturing ``reviewstack`` log records

Importing this module does not import Qt; the widget adapter lives in
``reviewstack.views`` and is built on top of the returned context.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterable, Optional

from reviewstack.app.config_store import load_settings
from reviewstack.design.gesture import GestureClassifier
from reviewstack.design.slot_transform import SlotTransformPolicy
from reviewstack.services.event_bus import EventBus
from reviewstack.services.logging_service import LoggingService
from reviewstack.services.service_locator import (
    EVENT_BUS,
    LOGGING_SERVICE,
    REVIEW_QUEUE,
    REVIEW_SETTINGS,
    ServiceLocator,
    services,
)
from reviewstack.services.settings_service import ReviewSettings
from reviewstack.viewmodels.review_queue import ReviewQueue
from reviewstack.viewmodels.swipe_controller import SwipeController

__all__ = ["ReviewContext", "create_review_session"]


@dataclass
class ReviewContext:
    """References created for one review session.

    Attributes
    ----------
    queue: The review queue state machine.
    classifier: Gesture classifier sharing the queue's event bus.
    controller: Swipe controller feeding classifier outcomes into the queue.
    policy: Slot transform policy used by the queue.
    event_bus: Bus carrying lifecycle, gesture and log events.
    settings: Validated settings the session was built from.
    services: Service locator the pieces were registered in.
    logging_service: Capture service when ``capture_logs`` was requested.
    """

    queue: ReviewQueue
    classifier: GestureClassifier
    controller: SwipeController
    policy: SlotTransformPolicy
    event_bus: EventBus
    settings: ReviewSettings
    services: ServiceLocator
    logging_service: Optional[LoggingService] = None

    def close(self) -> None:
        """Detach log capture and drop the bindings this session still owns."""
        if self.logging_service is not None:
            self.logging_service.detach()
        self.services.release(self)


def create_review_session(
    items: Iterable[Any],
    settings: ReviewSettings | None = None,
    *,
    config_dir: str | Path | None = None,
    rng: random.Random | None = None,
    materializer: Callable[[Any], Any] | None = None,
    event_bus: EventBus | None = None,
    register_services: bool = True,
    capture_logs: bool = False,
    locator: ServiceLocator | None = None,
) -> ReviewContext:
    """Create and wire a review session.

    Parameters
    ----------
    items: Backing sequence to review.
    settings: Explicit settings. When None, loaded from ``config_dir`` if
        given, otherwise defaults.
    rng: Random source for slot rotations (seed it for reproducible output).
    register_services: Register ``event_bus``, ``review_queue`` and
        ``review_settings`` (plus ``logging_service``) in the locator.
    capture_logs: Attach a ``LoggingService`` to the ``reviewstack`` logger.

    Raises ``InvalidConfiguration`` when the settings are unusable.
    """
    if settings is None:
        settings = load_settings(config_dir) if config_dir is not None else ReviewSettings()
    settings.validate()
    bus = event_bus or EventBus()
    locator = locator or services

    policy = SlotTransformPolicy(settings.transform_config(), rng)
    queue = ReviewQueue(
        items,
        settings.window_size,
        policy=policy,
        materializer=materializer,
        event_bus=bus,
    )
    classifier = GestureClassifier(settings.thresholds(), event_bus=bus)
    ctx = ReviewContext(
        queue=queue,
        classifier=classifier,
        controller=SwipeController(queue, classifier),
        policy=policy,
        event_bus=bus,
        settings=settings,
        services=locator,
    )
    if capture_logs:
        ctx.logging_service = LoggingService(event_bus=bus)
        ctx.logging_service.attach()
    if register_services:
        locator.register(EVENT_BUS, bus, replace=True, owner=ctx)
        locator.register(REVIEW_QUEUE, queue, replace=True, owner=ctx)
        locator.register(REVIEW_SETTINGS, settings, replace=True, owner=ctx)
        if ctx.logging_service is not None:
            locator.register(LOGGING_SERVICE, ctx.logging_service, replace=True, owner=ctx)
    return ctx
