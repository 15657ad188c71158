"""iconlink - priority-ranked icon resolution for file trees."""

__version__ = "1.0.0"
__description__ = "Resolve, cache and propagate file icons across providers and symlinks"

from iconlink.cli import app, main

__all__ = ["app", "main", "__version__"]
