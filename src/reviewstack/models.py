"""Core value types shared by the queue, classifier and presentation layers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

__all__ = ["Direction", "Decision"]


class Direction(str, Enum):
    FORWARD = "forward"  # accept / swipe right
    BACKWARD = "backward"  # reject / swipe left

    @property
    def sign(self) -> int:
        return 1 if self is Direction.FORWARD else -1

    @classmethod
    def from_translation(cls, translation_x: float) -> "Direction":
        return cls.FORWARD if translation_x > 0 else cls.BACKWARD


@dataclass(frozen=True)
class Decision:
    """Record of one commit; replayed unchanged by undo.

    Only identity data is kept (item reference, direction, backing index).
    Presentation state is recomputed on restore.
    """

    item: Any
    direction: Direction
    index: int
