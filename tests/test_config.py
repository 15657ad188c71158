from pathlib import Path

import pytest

from iconlink.core.config import DisplayOptions, get_config_dir, load_options, options_from_dict, save_options


def test_get_config_dir_uses_home(tmp_path: Path, monkeypatch):
    monkeypatch.setattr(Path, "home", lambda: tmp_path)
    assert get_config_dir() == tmp_path / ".iconlink"


def test_missing_or_empty_file_returns_defaults(tmp_path: Path):
    assert load_options(tmp_path / "missing.yaml") == DisplayOptions()
    empty = tmp_path / "empty.yaml"
    empty.write_text("", encoding="utf-8")
    assert load_options(empty) == DisplayOptions()


def test_colour_mode_names_and_numbers():
    assert options_from_dict({"colour_mode": "medium"}).colour_mode == 0
    assert options_from_dict({"colour_mode": "Dark"}).colour_mode == 1
    assert options_from_dict({"colour_mode": 1}).colour_mode == 1
    assert options_from_dict({"colour_mode": "off"}).colour_mode is None
    assert options_from_dict({}).default_icon_class == "default-icon"


@pytest.mark.parametrize(
    "raw",
    [
        {"colour_mode": "neon"},
        {"colour_mode": 7},
        {"colour_mode": True},
        {"colour_changed_only": "yes"},
    ],
)
def test_invalid_values_raise(raw):
    with pytest.raises(ValueError):
        options_from_dict(raw)


def test_invalid_yaml_raises(tmp_path: Path):
    bad = tmp_path / "options.yaml"
    bad.write_text(":\n- [\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_options(bad)

    not_a_dict = tmp_path / "list.yaml"
    not_a_dict.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_options(not_a_dict)


def test_save_then_load(tmp_path: Path):
    path = tmp_path / "sub" / "options.yaml"
    opts = DisplayOptions(colour_mode=1, colour_changed_only=True, default_icon_class="plain")
    save_options(opts, path)
    assert load_options(path) == opts
