# Shared fixtures. Widget tests use the 'qtbot' fixture from pytest-qt on the
# offscreen platform.

import os
import random

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from reviewstack.design.slot_transform import SlotTransformPolicy  # noqa: E402
from reviewstack.services.event_bus import EventBus, ReviewEvent  # noqa: E402
from reviewstack.services.service_locator import services  # noqa: E402
from reviewstack.viewmodels.review_queue import ReviewQueue  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_services():
    yield
    services.clear()


@pytest.fixture
def letters():
    return ["A", "B", "C", "D", "E"]


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def make_queue(bus):
    """Build a queue on the shared bus with a seeded rotation source."""

    def factory(items, window_size=3, **kwargs):
        kwargs.setdefault("policy", SlotTransformPolicy(rng=random.Random(7)))
        kwargs.setdefault("event_bus", bus)
        return ReviewQueue(items, window_size, **kwargs)

    return factory


@pytest.fixture
def recorder(bus):
    """Collect (event name, payload) tuples for every lifecycle event."""
    seen = []
    for name in (
        ReviewEvent.WINDOW_CHANGED,
        ReviewEvent.ITEM_COMMITTED,
        ReviewEvent.ITEM_RESTORED,
        ReviewEvent.EXHAUSTED,
        ReviewEvent.ITEM_TAPPED,
    ):
        bus.subscribe(name, lambda evt: seen.append((evt.name, evt.payload)))
    return seen
