"""Session bootstrap and settings persistence."""
