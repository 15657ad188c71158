"""Core functionality modules for iconlink."""

__all__ = [
    "config",
    "delegate",
    "events",
    "icons",
    "scheduler",
    "service",
    "storage",
]
