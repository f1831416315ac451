"""Event registration for groups with capacity limits."""

__version__ = "1.0.0"
