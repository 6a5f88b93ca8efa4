"""reviewstack public API.

Small curated surface for embedding a swipe review queue. Qt widgets are
not imported here; use ``reviewstack.views`` explicitly.
"""

from __future__ import annotations

from .errors import InvalidConfiguration  # noqa: F401
from .models import Decision, Direction  # noqa: F401
from .services.event_bus import Event, EventBus, ReviewEvent  # noqa: F401
from .services.service_locator import services  # noqa: F401
from .services.settings_service import ReviewSettings  # noqa: F401
from .design.gesture import GestureClassifier, GestureOutcome, GestureSample  # noqa: F401
from .design.slot_transform import SlotTransformPolicy, RotationStability  # noqa: F401
from .viewmodels.review_queue import QueueState, ReviewQueue  # noqa: F401
from .viewmodels.swipe_controller import SwipeController  # noqa: F401
from .app.bootstrap import ReviewContext, create_review_session  # noqa: F401

__all__ = [
    "InvalidConfiguration",
    "Decision",
    "Direction",
    "Event",
    "EventBus",
    "ReviewEvent",
    "services",
    "ReviewSettings",
    "GestureClassifier",
    "GestureOutcome",
    "GestureSample",
    "SlotTransformPolicy",
    "RotationStability",
    "QueueState",
    "ReviewQueue",
    "SwipeController",
    "ReviewContext",
    "create_review_session",
]
