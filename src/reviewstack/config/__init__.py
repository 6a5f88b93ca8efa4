"""Default constants and environment overrides."""
