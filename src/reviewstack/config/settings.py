"""Global defaults for the review stack."""

from __future__ import annotations

import os
from typing import Final

DEFAULT_WINDOW_SIZE: Final = int(os.environ.get("REVIEWSTACK_WINDOW_SIZE", "3"))
DEFAULT_DISMISS_THRESHOLD: Final = 0.75  # fraction of reference width
DEFAULT_VELOCITY_THRESHOLD: Final = 500.0  # reference-width units / second
DEFAULT_EPSILON: Final = 0.01
DEFAULT_SCALE_RATIO: Final = 0.85
DEFAULT_BASE_OFFSET: Final = 44.0
DEFAULT_MIN_ROTATION: Final = 1.0  # degrees
DEFAULT_MAX_ROTATION: Final = 3.0
RESTORE_VARIANT_MIN_ROTATION: Final = 8.0
DEFAULT_ROTATION_RANGE: Final = 12.0
DRAG_MAX_ROTATION: Final = 22.5  # degrees at a full reference-width drag (pi / 8)
CONFIG_DIR: Final = os.environ.get("REVIEWSTACK_CONFIG_DIR", ".")
