"""Runtime tuning for the review stack.

``ReviewSettings`` bundles every construction input of the queue, the
gesture classifier and the slot transform policy in a single frozen
dataclass so a caller (or ``app.config_store``) can build, validate and
persist one object instead of threading a dozen keyword arguments.

Two rotation presets mirror the two card stack variants the UI has shipped:
the default alternates 1-3 degrees, ``restore_variant`` uses 8 degrees up to
a configurable range.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict, fields, replace as _dc_replace
from typing import Any, Dict

from reviewstack.config.settings import (
    DEFAULT_BASE_OFFSET,
    DEFAULT_DISMISS_THRESHOLD,
    DEFAULT_EPSILON,
    DEFAULT_MAX_ROTATION,
    DEFAULT_MIN_ROTATION,
    DEFAULT_ROTATION_RANGE,
    DEFAULT_SCALE_RATIO,
    DEFAULT_VELOCITY_THRESHOLD,
    DEFAULT_WINDOW_SIZE,
    RESTORE_VARIANT_MIN_ROTATION,
)
from reviewstack.design.gesture import GestureThresholds
from reviewstack.design.slot_transform import RotationStability, SlotTransformConfig
from reviewstack.errors import InvalidConfiguration

__all__ = ["ReviewSettings", "InvalidConfiguration"]


@dataclass(frozen=True)
class ReviewSettings:
    """Validated tuning values.

    Attributes:
        window_size: Number of materialized slots (>= 1).
        dismiss_threshold: Fraction of the reference width a drag must pass
            to commit on release.
        velocity_threshold: Release velocity (reference-width units/second)
            that commits regardless of distance.
        epsilon: Tolerance subtracted from ``dismiss_threshold`` to absorb
            floating point rounding at the boundary.
        scale_ratio: Per-slot scale factor (slot n is ``scale_ratio ** n``).
        base_offset: Per-slot vertical offset.
        min_rotation / max_rotation: Bounds (degrees) for back slot tilt.
        rotation_stability: ``"per_slot"`` or ``"per_item"``.
    """

    window_size: int = DEFAULT_WINDOW_SIZE
    dismiss_threshold: float = DEFAULT_DISMISS_THRESHOLD
    velocity_threshold: float = DEFAULT_VELOCITY_THRESHOLD
    epsilon: float = DEFAULT_EPSILON
    scale_ratio: float = DEFAULT_SCALE_RATIO
    base_offset: float = DEFAULT_BASE_OFFSET
    min_rotation: float = DEFAULT_MIN_ROTATION
    max_rotation: float = DEFAULT_MAX_ROTATION
    rotation_stability: str = RotationStability.PER_SLOT.value

    @classmethod
    def restore_variant(cls, rotation_range: float = DEFAULT_ROTATION_RANGE, **overrides: Any):
        return cls(
            min_rotation=RESTORE_VARIANT_MIN_ROTATION,
            max_rotation=rotation_range,
            **overrides,
        )

    def validate(self) -> "ReviewSettings":
        if (
            isinstance(self.window_size, bool)
            or not isinstance(self.window_size, int)
            or self.window_size < 1
        ):
            raise InvalidConfiguration(f"window_size must be an integer >= 1, got {self.window_size!r}")
        if self.rotation_stability not in {s.value for s in RotationStability}:
            raise InvalidConfiguration(f"Unknown rotation_stability: {self.rotation_stability!r}")
        # Component configs carry their own range checks.
        self.thresholds().validate()
        self.transform_config().validate()
        return self

    # Component views ---------------------------------------------------
    def thresholds(self) -> GestureThresholds:
        return GestureThresholds(
            dismiss_threshold=self.dismiss_threshold,
            velocity_threshold=self.velocity_threshold,
            epsilon=self.epsilon,
        )

    def transform_config(self) -> SlotTransformConfig:
        return SlotTransformConfig(
            base_offset=self.base_offset,
            scale_ratio=self.scale_ratio,
            min_rotation=self.min_rotation,
            max_rotation=self.max_rotation,
            stability=RotationStability(self.rotation_stability),
        )

    # Serialization -------------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReviewSettings":
        """Build from a mapping, ignoring unknown keys. Does not validate."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    def replace(self, **changes: Any) -> "ReviewSettings":
        return _dc_replace(self, **changes)
