"""Named lookup of the shared review services.

``create_review_session`` publishes its bus, queue and settings here so
widgets created later can find them without the session context being passed
through every constructor:

    from reviewstack.services.service_locator import REVIEW_QUEUE, services
    queue = services.get_typed(REVIEW_QUEUE, ReviewQueue)

Every binding remembers its owner. ``release(owner)`` removes only that
owner's bindings, so closing one session leaves another session's entries in
place. Tests stub entries temporarily with ``services.override(...)``.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from threading import RLock
from typing import Any, Dict, Final, Iterator, List, Optional, Type, TypeVar

T = TypeVar("T")

__all__ = [
    "EVENT_BUS",
    "LOGGING_SERVICE",
    "REVIEW_QUEUE",
    "REVIEW_SETTINGS",
    "DuplicateServiceError",
    "MissingServiceError",
    "ServiceLocator",
    "services",
]

EVENT_BUS: Final = "event_bus"
REVIEW_QUEUE: Final = "review_queue"
REVIEW_SETTINGS: Final = "review_settings"
LOGGING_SERVICE: Final = "logging_service"


class DuplicateServiceError(RuntimeError):
    """A key is already bound and ``replace`` was not requested."""


class MissingServiceError(KeyError):
    """No binding exists for the requested key."""


@dataclass(frozen=True)
class _Binding:
    value: Any
    owner: Optional[object] = None


_MISSING = _Binding(None)


class ServiceLocator:
    def __init__(self) -> None:
        self._lock = RLock()
        self._bindings: Dict[str, _Binding] = {}

    def register(
        self, key: str, value: Any, *, replace: bool = False, owner: Optional[object] = None
    ) -> None:
        with self._lock:
            if not replace and key in self._bindings:
                raise DuplicateServiceError(f"'{key}' is already bound")
            self._bindings[key] = _Binding(value, owner)

    def _binding(self, key: str) -> _Binding:
        with self._lock:
            return self._bindings.get(key, _MISSING)

    def get(self, key: str) -> Any:
        binding = self._binding(key)
        if binding is _MISSING:
            raise MissingServiceError(key)
        return binding.value

    def get_typed(self, key: str, expected_type: Type[T]) -> T:
        value = self.get(key)
        if isinstance(value, expected_type):
            return value
        raise TypeError(f"'{key}' is {type(value).__name__}, expected {expected_type.__name__}")

    def try_get(self, key: str, default: Any = None) -> Any:
        binding = self._binding(key)
        return default if binding is _MISSING else binding.value

    def owner_of(self, key: str) -> Optional[object]:
        return self._binding(key).owner

    def release(self, owner: object) -> List[str]:
        """Drop every binding registered by ``owner``; returns the removed keys."""
        with self._lock:
            removed = [k for k, b in self._bindings.items() if b.owner is owner]
            for key in removed:
                del self._bindings[key]
        return removed

    def unregister(self, key: str) -> None:
        with self._lock:
            self._bindings.pop(key, None)

    def keys(self) -> List[str]:
        with self._lock:
            return sorted(self._bindings)

    @contextmanager
    def override(self, **values: Any) -> Iterator[None]:
        """Bind ``values`` for the duration of the block, then restore."""
        with self._lock:
            saved = {key: self._bindings.get(key) for key in values}
            self._bindings.update({key: _Binding(v, "override") for key, v in values.items()})
        try:
            yield
        finally:
            with self._lock:
                for key, binding in saved.items():
                    if binding is None:
                        self._bindings.pop(key, None)
                    else:
                        self._bindings[key] = binding

    def clear(self) -> None:
        with self._lock:
            self._bindings.clear()


services = ServiceLocator()
