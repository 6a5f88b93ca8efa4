"""Service layer exports.

 - Dependency/service locator (`services`)
 - EventBus publish/subscribe core

Settings and logging services are imported from their modules directly.
"""

from .service_locator import services, ServiceLocator  # noqa: F401
from .event_bus import EventBus, ReviewEvent  # noqa: F401

__all__ = [
    "services",
    "ServiceLocator",
    "EventBus",
    "ReviewEvent",
]
