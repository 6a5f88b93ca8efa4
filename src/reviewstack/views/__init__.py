"""Qt widgets (importing a submodule requires PyQt6)."""
