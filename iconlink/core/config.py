"""
Display options for icon classes.

Options are passed explicitly to every delegate; there is no process-wide
options singleton. They can be loaded from a small YAML file so users can
override the defaults.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


COLOUR_MODES: Dict[str, int] = {
    "medium": 0,
    "dark": 1,
}

DEFAULT_ICON_CLASS = "default-icon"


def get_config_dir() -> Path:
    """Per-user directory for options and the icon cache (~/.iconlink)."""
    return Path.home() / ".iconlink"


def default_options_path() -> Path:
    return get_config_dir() / "options.yaml"


def default_cache_path() -> Path:
    return get_config_dir() / "cache.json"


@dataclass(frozen=True)
class DisplayOptions:
    """How icon classes are rendered."""

    # Index into Icon.colour; None renders icons without colour.
    colour_mode: Optional[int] = None
    # Only colour resources that carry a VCS status.
    colour_changed_only: bool = False
    default_icon_class: str = DEFAULT_ICON_CLASS

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _parse_colour_mode(value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError("colour_mode must be null, 0, 1, 'medium' or 'dark'")
    if isinstance(value, int):
        if value not in COLOUR_MODES.values():
            raise ValueError(f"colour_mode out of range: {value!r}")
        return value
    name = str(value).strip().lower()
    if name in ("", "none", "off"):
        return None
    if name not in COLOUR_MODES:
        raise ValueError(f"Unknown colour_mode: {value!r} (expected one of {', '.join(COLOUR_MODES)})")
    return COLOUR_MODES[name]


def options_from_dict(raw: Dict[str, Any]) -> DisplayOptions:
    colour_changed_only = raw.get("colour_changed_only", False)
    if not isinstance(colour_changed_only, bool):
        raise ValueError("colour_changed_only must be a boolean")

    default_icon_class = str(raw.get("default_icon_class") or DEFAULT_ICON_CLASS).strip()

    return DisplayOptions(
        colour_mode=_parse_colour_mode(raw.get("colour_mode")),
        colour_changed_only=colour_changed_only,
        default_icon_class=default_icon_class or DEFAULT_ICON_CLASS,
    )


def load_options(path: Optional[Path] = None) -> DisplayOptions:
    """
    Load display options from YAML.

    A missing file yields the defaults.

    Raises:
        ValueError: If the file is not a mapping or holds invalid values
    """
    options_path = path or default_options_path()
    if not options_path.exists():
        return DisplayOptions()
    try:
        raw = yaml.safe_load(options_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"Could not parse options file {options_path}: {e}") from e
    if raw is None:
        return DisplayOptions()
    if not isinstance(raw, dict):
        raise ValueError("Options YAML must be a dict at the top level")
    return options_from_dict(raw)


def save_options(options: DisplayOptions, path: Optional[Path] = None) -> Path:
    options_path = path or default_options_path()
    options_path.parent.mkdir(parents=True, exist_ok=True)
    with open(options_path, "w", encoding="utf-8") as f:
        yaml.dump(options.to_dict(), f, default_flow_style=False, sort_keys=False, allow_unicode=True)
    return options_path
