import json
import logging

import pytest

from reviewstack.models import Direction
from reviewstack.services.event_bus import EventBus, ReviewEvent
from reviewstack.services.logging_service import LoggingService, get_logging_service
from reviewstack.services.service_locator import LOGGING_SERVICE, services


@pytest.fixture()
def setup_logging():
    bus = EventBus()
    svc = LoggingService(capacity=5, event_bus=bus)
    services.register(LOGGING_SERVICE, svc, replace=True)
    svc.attach()
    yield svc, bus
    svc.detach()


def test_logging_capture_and_retrieve(setup_logging):
    svc, _ = setup_logging
    logging.getLogger("reviewstack.test").info("Hello queue")
    assert any(e.message == "Hello queue" for e in svc.recent())
    assert get_logging_service() is svc


def test_other_loggers_not_captured(setup_logging):
    svc, _ = setup_logging
    logging.getLogger("elsewhere").warning("ignored")
    assert svc.recent() == []


def test_logging_capacity_eviction(setup_logging):
    svc, _ = setup_logging
    for i in range(10):
        logging.getLogger("reviewstack.cap").info("M%d", i)
    recents = svc.recent()
    assert len(recents) == 5
    assert recents[0].message == "M5"
    assert [e.message for e in svc.recent(limit=2)] == ["M8", "M9"]


def test_logging_filtering(setup_logging):
    svc, _ = setup_logging
    logging.getLogger("reviewstack.viewmodels").debug("commit")
    logging.getLogger("reviewstack.design").info("release")
    assert all(e.level == "INFO" for e in svc.filter(level="INFO"))
    design = svc.filter(name_contains="design")
    assert design and all("design" in e.name for e in design)


def test_logging_event_emission(setup_logging):
    _, bus = setup_logging
    payloads = []
    bus.subscribe(ReviewEvent.LOG_RECORD_ADDED, lambda evt: payloads.append(evt.payload))
    logging.getLogger("reviewstack.evt").warning("Something happened")
    assert payloads and payloads[-1]["level"] == "WARNING"


def test_queue_transitions_are_logged(setup_logging, make_queue):
    svc, _ = setup_logging
    q = make_queue(["A"])
    q.commit(Direction.FORWARD)
    q.commit(Direction.FORWARD)  # ignored
    messages = [e.message for e in svc.filter(name_contains="review_queue")]
    assert any("Committed #0 forward" in m for m in messages)
    assert any("ignored" in m for m in messages)


def test_export_jsonl(setup_logging, tmp_path):
    svc, _ = setup_logging
    logging.getLogger("reviewstack.x").info("one")
    logging.getLogger("reviewstack.x").error("two")
    path = tmp_path / "logs.jsonl"
    assert svc.export_jsonl(path, level="ERROR") == 1
    row = json.loads(path.read_text(encoding="utf-8").strip())
    assert row["message"] == "two" and row["level"] == "ERROR"


def test_failing_log_subscriber_does_not_recurse(setup_logging):
    svc, bus = setup_logging

    def broken(evt):
        raise RuntimeError("panel gone")

    bus.subscribe(ReviewEvent.LOG_RECORD_ADDED, broken)
    logging.getLogger("reviewstack.x").info("trigger")
    assert len(bus.errors) == 1
    assert svc.recent()[-1].level == "ERROR"


def test_detach_restores_logger_level():
    logger = logging.getLogger("reviewstack.level_check")
    logger.setLevel(logging.WARNING)
    svc = LoggingService(logger_name="reviewstack.level_check", event_bus=EventBus())
    svc.attach()
    assert logger.level == logging.DEBUG
    logger.debug("kept")
    svc.detach()
    assert logger.level == logging.WARNING
    assert [e.message for e in svc.recent()] == ["kept"]
