"""Search preview service."""
