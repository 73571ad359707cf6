import json

import pytest

from sunday.imaging.settings import (
    ImageEditorSettings,
    SettingsError,
    color_rgb,
    list_image_files,
    load_settings,
    normalize_color,
    save_settings,
)


def test_normalize_color_variants():
    assert normalize_color("#FF0000") == "#ff0000"
    assert normalize_color("ff721522") == "#721522"
    assert normalize_color("") == "#ffffff"
    assert normalize_color(None) == "#ffffff"
    with pytest.raises(SettingsError):
        normalize_color("#12345")


def test_color_rgb():
    assert color_rgb("#721522") == (0x72, 0x15, 0x22)


def test_missing_keys_use_defaults():
    settings = ImageEditorSettings.from_dict({"font_size": "48", "disable_font": 1})
    assert settings.font_size == 48
    assert settings.disable_font is True
    assert settings.bg_color == "#721522"
    assert settings.watermark_transparency == 128
    assert settings.output_format == "original"
    assert settings.batches == []


def test_invalid_values_raise():
    with pytest.raises(SettingsError):
        ImageEditorSettings.from_dict({"output_format": "tiff"})
    with pytest.raises(SettingsError):
        ImageEditorSettings.from_dict({"width": "wide"})
    with pytest.raises(SettingsError):
        ImageEditorSettings.from_dict([])


def test_save_and_load(tmp_path):
    settings = ImageEditorSettings(font_size=20, output_format="webp")
    settings.add_batch(" (888) 555-1234 ", " dfw ")
    path = tmp_path / "settings.json"
    save_settings(settings, path)
    assert json.loads(path.read_text())["batches"] == [
        {"phone_number": "(888) 555-1234", "suffix": "dfw"}
    ]
    assert load_settings(path) == settings


def test_load_errors(tmp_path):
    with pytest.raises(SettingsError):
        load_settings(tmp_path / "missing.json")
    bad = tmp_path / "bad.json"
    bad.write_text("{oops")
    with pytest.raises(SettingsError):
        load_settings(bad)


def test_batch_requires_phone_and_suffix():
    settings = ImageEditorSettings()
    with pytest.raises(ValueError):
        settings.add_batch("  ", "DFW")
    with pytest.raises(ValueError):
        settings.add_batch("555", "")
    settings.add_batch("555", "DFW")
    settings.add_batch("666", "AUS")
    settings.remove_batch(0)
    assert [b.suffix for b in settings.batches] == ["AUS"]


def test_list_image_files_filters_and_sorts(tmp_path):
    for name in ("b.PNG", "a.jpg", "notes.txt", "C.webp"):
        (tmp_path / name).write_bytes(b"")
    (tmp_path / "sub.png").mkdir()
    assert [p.name for p in list_image_files(str(tmp_path))] == ["a.jpg", "b.PNG", "C.webp"]
    assert list_image_files("") == []
    assert list_image_files(str(tmp_path / "nope")) == []


def test_non_object_batch_entry_raises(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"batches": ["DFW"]}))
    with pytest.raises(SettingsError, match="Batch entries"):
        load_settings(path)


def test_undecodable_settings_file_raises(tmp_path):
    path = tmp_path / "settings.json"
    path.write_bytes(b'{"font_path": "\xff\xfe"}')
    with pytest.raises(SettingsError):
        load_settings(path)
