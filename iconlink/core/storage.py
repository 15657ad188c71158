"""
Persistent cache of resolved icon identities.

Each entry is keyed by resource path and holds a flat list:

    [priority, icon_index, icon_class, *colour_classes]

The class name is stored alongside the index so a reordered or edited icon
table can be detected: an entry whose class no longer matches the table is
stale and gets discarded instead of restoring the wrong icon.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

from iconlink.core.icons import Icon, IconTables


logger = logging.getLogger(__name__)

CACHE_VERSION = 1


@dataclass(frozen=True)
class CacheEntry:
    priority: int
    icon_index: int
    icon_class: str
    colour: Tuple[str, ...] = ()


def parse_cache_entry(raw: Any) -> Optional[CacheEntry]:
    """Return a CacheEntry, or None if `raw` is not shaped like one."""
    if not isinstance(raw, (list, tuple)) or len(raw) < 3:
        return None
    priority, icon_index, icon_class = raw[0], raw[1], raw[2]
    if isinstance(priority, bool) or not isinstance(priority, int) or priority < 0:
        return None
    if isinstance(icon_index, bool) or not isinstance(icon_index, int):
        return None
    if not isinstance(icon_class, str):
        return None
    return CacheEntry(
        priority=priority,
        icon_index=icon_index,
        icon_class=icon_class,
        colour=tuple(str(c) for c in raw[3:]),
    )


def build_cache_entry(priority: int, icon_index: int, icon: Icon) -> List[Any]:
    return [priority, icon_index, icon.icon, *icon.colour]


def validate_entry(entry: CacheEntry, table: List[Icon]) -> Optional[Icon]:
    """Return the table icon the entry points at, or None when stale."""
    if not 0 <= entry.icon_index < len(table):
        return None
    icon = table[entry.icon_index]
    if icon is None or icon.icon != entry.icon_class:
        return None
    return icon


class CacheStore:
    """
    Keyed read/write surface over the icon cache.

    While `frozen` is set the store is read-only: `set` and `delete` are
    silently ignored.
    """

    def __init__(self, path: Optional[Path] = None, *, frozen: bool = False, data: Optional[Dict[str, List[Any]]] = None):
        self.path = path
        self.frozen = frozen
        self.data: Dict[str, List[Any]] = dict(data or {})

    def get(self, key: str) -> Optional[List[Any]]:
        return self.data.get(key)

    def set(self, key: str, value: List[Any]) -> None:
        if self.frozen:
            return
        self.data[key] = list(value)

    def delete(self, key: str) -> None:
        if self.frozen:
            return
        self.data.pop(key, None)

    def clear(self) -> None:
        if self.frozen:
            return
        self.data.clear()

    def items(self) -> Iterator[Tuple[str, List[Any]]]:
        return iter(sorted(self.data.items()))

    def __contains__(self, key: object) -> bool:
        return key in self.data

    def __len__(self) -> int:
        return len(self.data)

    def prune(self, tables: IconTables, *, directories: Optional[set[str]] = None) -> List[str]:
        """
        Drop every entry that no longer validates against `tables`.

        `directories` names the cached paths that are directories; any other
        path is checked against the file table. Returns the removed paths.
        """
        directories = directories or set()
        removed: List[str] = []
        for key, raw in list(self.data.items()):
            table = tables.table_for(key in directories) or []
            entry = parse_cache_entry(raw)
            if entry is None or validate_entry(entry, table) is None:
                removed.append(key)
        for key in removed:
            self.delete(key)
        return removed

    def to_dict(self) -> Dict[str, Any]:
        return {"version": CACHE_VERSION, "icons": dict(self.data)}

    def save(self, path: Optional[Path] = None) -> Path:
        p = Path(path or self.path or "")
        if not str(p):
            raise ValueError("CacheStore has no path to save to")
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), ensure_ascii=False, indent=2) + "\n", encoding="utf-8")
        return p


def load_cache(path: Path, *, frozen: bool = False) -> CacheStore:
    """
    Load a cache file.

    The cache is disposable: a missing, unreadable or foreign file yields an
    empty store bound to `path`.
    """
    p = Path(path)
    store = CacheStore(p, frozen=frozen)
    if not p.exists():
        return store
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable icon cache %s: %s", p, e)
        return store
    if not isinstance(data, dict) or data.get("version") != CACHE_VERSION:
        logger.warning("Ignoring icon cache %s with unsupported layout", p)
        return store
    icons = data.get("icons")
    if isinstance(icons, dict):
        store.data = {str(k): v for k, v in icons.items() if isinstance(v, list)}
    return store
