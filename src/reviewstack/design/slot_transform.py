"""Slot transform policy.

Maps a window slot index to the presentation parameters of the card sitting
there: a vertical offset, a scale and a small tilt.

    vertical_offset = base_offset * slot
    scale           = scale_ratio ** slot
    rotation        = 0 for slot 0, otherwise a magnitude drawn from
                      [min_rotation, max_rotation], negative on odd slots

``transform`` is the pure form and draws a fresh magnitude on every call.
``SlotTransformPolicy`` adds the stability rule selected by
``RotationStability``:

PER_SLOT
    One magnitude per slot index, drawn on first use and kept until the
    configuration changes. A card picks up a new tilt whenever it moves to a
    different slot; re-evaluating the same slot is stable.
PER_ITEM
    One magnitude per item (keyed by backing index), kept while the item
    stays in the window and dropped by ``release`` when it leaves. Only the
    sign follows the slot.

Randomness always comes from an injected source with a ``uniform(a, b)``
method (``random.Random`` satisfies it) so output is reproducible in tests.

Also hosts two helpers used while a card is being handled directly:
``drag_transform`` for the live-dragged front card and ``exit_offset`` for
the horizontal position a committed card leaves to (and an undone card
returns from).
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Hashable, Optional, Protocol

from reviewstack.config.settings import (
    DEFAULT_BASE_OFFSET,
    DEFAULT_MAX_ROTATION,
    DEFAULT_MIN_ROTATION,
    DEFAULT_SCALE_RATIO,
    DRAG_MAX_ROTATION,
)
from reviewstack.errors import InvalidConfiguration
from reviewstack.models import Direction

__all__ = [
    "RotationStability",
    "RandomSource",
    "SlotTransformConfig",
    "SlotTransform",
    "SlotTransformPolicy",
    "DragTransform",
    "transform",
    "rotation_sign",
    "drag_transform",
    "exit_offset",
]


class RotationStability(str, Enum):
    PER_SLOT = "per_slot"
    PER_ITEM = "per_item"


class RandomSource(Protocol):
    def uniform(self, a: float, b: float) -> float: ...  # pragma: no cover - structural


@dataclass(frozen=True)
class SlotTransformConfig:
    base_offset: float = DEFAULT_BASE_OFFSET
    scale_ratio: float = DEFAULT_SCALE_RATIO
    min_rotation: float = DEFAULT_MIN_ROTATION
    max_rotation: float = DEFAULT_MAX_ROTATION
    stability: RotationStability = RotationStability.PER_SLOT

    def validate(self) -> "SlotTransformConfig":
        if not math.isfinite(self.base_offset):
            raise InvalidConfiguration("base_offset must be finite")
        if not self.scale_ratio > 0:
            raise InvalidConfiguration(f"scale_ratio must be > 0, got {self.scale_ratio!r}")
        if self.min_rotation < 0:
            raise InvalidConfiguration("min_rotation must be >= 0 (sign alternates by slot)")
        if self.min_rotation > self.max_rotation:
            raise InvalidConfiguration(
                f"min_rotation {self.min_rotation} exceeds max_rotation {self.max_rotation}"
            )
        return self


@dataclass(frozen=True)
class SlotTransform:
    vertical_offset: float
    scale: float
    rotation_degrees: float


@dataclass(frozen=True)
class DragTransform:
    translation_x: float
    rotation_degrees: float


def rotation_sign(slot_index: int) -> int:
    return 1 if slot_index % 2 == 0 else -1


def _build(slot_index: int, config: SlotTransformConfig, magnitude: float) -> SlotTransform:
    rotation = 0.0 if slot_index == 0 else rotation_sign(slot_index) * magnitude
    return SlotTransform(
        vertical_offset=config.base_offset * slot_index,
        scale=config.scale_ratio**slot_index,
        rotation_degrees=rotation,
    )


def transform(slot_index: int, config: SlotTransformConfig, rng: RandomSource) -> SlotTransform:
    """Compute slot parameters, drawing a fresh rotation magnitude."""
    if slot_index < 0:
        raise ValueError(f"slot_index must be >= 0, got {slot_index}")
    if slot_index == 0:
        return _build(0, config, 0.0)
    return _build(slot_index, config, rng.uniform(config.min_rotation, config.max_rotation))


class SlotTransformPolicy:
    """Stateful wrapper around ``transform`` applying a rotation stability rule."""

    def __init__(
        self, config: SlotTransformConfig | None = None, rng: RandomSource | None = None
    ) -> None:
        self._config = (config or SlotTransformConfig()).validate()
        self._rng: RandomSource = rng if rng is not None else random.Random()
        self._slot_magnitudes: Dict[int, float] = {}
        self._item_magnitudes: Dict[Hashable, float] = {}

    @property
    def config(self) -> SlotTransformConfig:
        return self._config

    def reconfigure(self, config: SlotTransformConfig) -> None:
        """Swap configuration; every cached magnitude is redrawn on next use."""
        self._config = config.validate()
        self._slot_magnitudes.clear()
        self._item_magnitudes.clear()

    def transform_for(self, slot_index: int, key: Optional[Hashable] = None) -> SlotTransform:
        if slot_index < 0:
            raise ValueError(f"slot_index must be >= 0, got {slot_index}")
        if slot_index == 0:
            return _build(0, self._config, 0.0)
        if self._config.stability is RotationStability.PER_ITEM and key is not None:
            cache, cache_key = self._item_magnitudes, key
        else:
            cache, cache_key = self._slot_magnitudes, slot_index
        magnitude = cache.get(cache_key)
        if magnitude is None:
            magnitude = self._rng.uniform(self._config.min_rotation, self._config.max_rotation)
            cache[cache_key] = magnitude
        return _build(slot_index, self._config, magnitude)

    def release(self, key: Hashable) -> None:
        """Forget the per-item magnitude of an item that left the window."""
        self._item_magnitudes.pop(key, None)


def drag_transform(translation_x: float, reference_width: float) -> DragTransform:
    """Translation and tilt for the front card while it follows the pointer."""
    if reference_width <= 0:
        return DragTransform(translation_x=translation_x, rotation_degrees=0.0)
    return DragTransform(
        translation_x=translation_x,
        rotation_degrees=translation_x / reference_width * DRAG_MAX_ROTATION,
    )


def exit_offset(direction: Direction, reference_width: float) -> float:
    return direction.sign * abs(reference_width)
