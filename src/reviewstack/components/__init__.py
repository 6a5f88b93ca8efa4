"""Reusable building blocks for the review queue."""

from __future__ import annotations

from .review_window import MaterializedSlot, ReviewWindow, WindowEntry

__all__ = ["MaterializedSlot", "ReviewWindow", "WindowEntry"]
