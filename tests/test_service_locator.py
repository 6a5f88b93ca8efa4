import pytest

from reviewstack.services.event_bus import EventBus
from reviewstack.services.service_locator import (
    EVENT_BUS,
    REVIEW_SETTINGS,
    DuplicateServiceError,
    MissingServiceError,
    ServiceLocator,
    services,
)


def setup_function(_):
    services.clear()


def test_register_and_get():
    services.register(REVIEW_SETTINGS, {"window_size": 3})
    assert services.get(REVIEW_SETTINGS)["window_size"] == 3


def test_double_register_raises_unless_replacing():
    services.register("x", 1)
    with pytest.raises(DuplicateServiceError):
        services.register("x", 2)
    services.register("x", 3, replace=True)
    assert services.get("x") == 3


def test_get_typed_checks_type():
    services.register(EVENT_BUS, EventBus())
    assert isinstance(services.get_typed(EVENT_BUS, EventBus), EventBus)
    services.register(EVENT_BUS, "not a bus", replace=True)
    with pytest.raises(TypeError):
        services.get_typed(EVENT_BUS, EventBus)


def test_try_get_default_and_none_values():
    assert services.try_get("missing", 123) == 123
    services.register("nothing", None)
    assert services.try_get("nothing", 123) is None


def test_unregister():
    services.register("temp", object())
    services.unregister("temp")
    with pytest.raises(MissingServiceError):
        services.get("temp")


def test_release_only_drops_owned_bindings():
    loc = ServiceLocator()
    first, second = object(), object()
    loc.register(EVENT_BUS, "bus-1", owner=first)
    loc.register(REVIEW_SETTINGS, "settings-1", owner=first)
    loc.register(EVENT_BUS, "bus-2", replace=True, owner=second)
    assert loc.owner_of(EVENT_BUS) is second
    assert loc.release(first) == [REVIEW_SETTINGS]
    assert loc.keys() == [EVENT_BUS]
    assert loc.get(EVENT_BUS) == "bus-2"


def test_override_restores_previous():
    loc = ServiceLocator()
    loc.register(EVENT_BUS, "real")
    with loc.override(event_bus="fake", extra=1):
        assert loc.get(EVENT_BUS) == "fake"
        assert loc.get("extra") == 1
    assert loc.get(EVENT_BUS) == "real"
    assert "extra" not in loc.keys()
