"""
Icon descriptors and the ordered icon tables they live in.

Goals:
- Keep icon identity stable: two Icons are the same icon only if they are the
  same object, and an icon's index in its table never changes once loaded
- Load the file/directory tables from a repo-versioned YAML file
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple

import yaml


def _repo_data_dir() -> Path:
    # iconlink/core/icons.py -> iconlink/core -> iconlink
    pkg = Path(__file__).resolve().parents[1]
    return pkg / "data"


def default_table_path() -> Path:
    return _repo_data_dir() / "icons.yaml"


@dataclass(eq=False)
class Icon:
    """
    One entry of an icon table.

    `icon` is the base CSS class; `colour` holds the colour-variant classes
    indexed by colour mode (0 = medium, 1 = dark).
    """

    index: int
    icon: str
    colour: Tuple[str, ...] = ()
    match: Optional[str] = None

    def get_class(self, colour_mode: Optional[int] = None, as_list: bool = False) -> List[str] | str:
        classes = [self.icon]
        if colour_mode is not None and 0 <= colour_mode < len(self.colour):
            classes.append(self.colour[colour_mode])
        if as_list:
            return classes
        return " ".join(classes)

    def __repr__(self) -> str:
        return f"Icon({self.index}, {self.icon!r})"


@dataclass
class IconTables:
    """
    The two index-stable icon tables.

    Either table may be None while it has not been loaded yet; consumers are
    expected to retry later rather than treat that as an error.
    """

    file_icons: Optional[List[Icon]] = None
    directory_icons: Optional[List[Icon]] = None
    source: Optional[Path] = field(default=None, compare=False)

    @property
    def loaded(self) -> bool:
        return self.file_icons is not None and self.directory_icons is not None

    def table_for(self, is_directory: bool) -> Optional[List[Icon]]:
        return self.directory_icons if is_directory else self.file_icons

    def index_of(self, icon: Icon, is_directory: bool) -> int:
        table = self.table_for(is_directory) or []
        for i, candidate in enumerate(table):
            if candidate is icon:
                return i
        return -1

    def find(self, icon_class: str, *, is_directory: bool = False) -> Optional[Icon]:
        for icon in self.table_for(is_directory) or []:
            if icon.icon == icon_class:
                return icon
        return None


def _as_list(value: Any, *, label: str) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    raise ValueError(f"{label} must be a list")


def _build_table(entries: Sequence[Any], *, label: str) -> List[Icon]:
    table: List[Icon] = []
    for i, raw in enumerate(entries):
        if not isinstance(raw, dict):
            raise ValueError(f"{label}[{i}] must be a mapping/dict")
        icon_class = str(raw.get("icon") or "").strip()
        if not icon_class:
            raise ValueError(f"{label}[{i}].icon is required")
        colour = tuple(
            str(c).strip() for c in _as_list(raw.get("colour"), label=f"{label}[{i}].colour") if str(c).strip()
        )
        match = raw.get("match")
        table.append(Icon(index=i, icon=icon_class, colour=colour, match=str(match) if match else None))
    return table


def load_icon_tables(path: Optional[Path] = None) -> IconTables:
    """
    Load both icon tables from YAML.

    Raises:
        ValueError: If the file is missing or malformed
    """
    table_path = (path or default_table_path()).resolve()
    if not table_path.exists():
        raise ValueError(f"Icon table file not found: {table_path}")
    raw = yaml.safe_load(table_path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError("Icon table YAML must be a dict at the top level")

    version = raw.get("version")
    if version != 1:
        raise ValueError(f"Unsupported icon table version: {version!r} (expected 1)")

    return IconTables(
        file_icons=_build_table(_as_list(raw.get("files"), label="files"), label="files"),
        directory_icons=_build_table(_as_list(raw.get("directories"), label="directories"), label="directories"),
        source=table_path,
    )

