"""Exception types shared across the review stack."""

from __future__ import annotations

__all__ = ["InvalidConfiguration"]


class InvalidConfiguration(ValueError):
    """Raised when a queue, classifier or transform policy is built with unusable settings.

    Construction-time only; a component that raised this cannot be used.
    """
