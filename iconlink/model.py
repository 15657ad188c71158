"""
Canonical in-memory description of a decorated filesystem entry.

Resources are owned by whoever tracks the file tree; iconlink only reads
them. The path string doubles as the cache key.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class Resource:
    path: str
    is_directory: bool = False
    symlink: bool = False
    # VCS status marker ("modified", "added", ...); None when unchanged/untracked.
    vcs_status: Optional[str] = None
