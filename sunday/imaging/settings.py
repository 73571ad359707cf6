"""Settings file for the batch image tool."""
from __future__ import annotations

import json
import re
from dataclasses import dataclass, field, asdict, fields
from pathlib import Path
from typing import Dict, List, Tuple

OUTPUT_FORMATS = ("original", "png", "jpg", "webp")
IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".webp", ".bmp", ".gif")

_HEX_COLOR = re.compile(r"^[0-9a-fA-F]{6}([0-9a-fA-F]{2})?$")


class SettingsError(ValueError):
    """Raised for settings files that cannot be read or parsed."""


def normalize_color(value) -> str:
    """Return ``#rrggbb`` for ``#rrggbb`` / ``#aarrggbb`` input; blank is white."""
    if value is None or value == "":
        return "#ffffff"
    text = str(value).strip().lstrip("#")
    if not _HEX_COLOR.match(text):
        raise SettingsError(f"Invalid color: {value!r}")
    if len(text) == 8:
        text = text[2:]
    return f"#{text.lower()}"


def color_rgb(value: str) -> Tuple[int, int, int]:
    text = normalize_color(value)[1:]
    return int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16)


@dataclass
class BatchConfig:
    phone_number: str
    suffix: str

    def to_dict(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict) -> "BatchConfig":
        if not isinstance(data, dict):
            raise SettingsError(f"Batch entries must be objects, got {data!r}")
        return cls(
            phone_number=str(data.get("phone_number") or ""),
            suffix=str(data.get("suffix") or ""),
        )


@dataclass
class ImageEditorSettings:
    input_folder: str = ""
    output_folder: str = ""
    font_path: str = ""
    font_size: int = 32
    text_color: str = "#ffffff"
    bg_color: str = "#721522"
    x_start: int = 350
    y_start: int = 30
    width: int = 300
    height: int = 40
    text_x: int = 370
    text_y: int = 30
    letter_spacing: int = 0
    bg_rotation: int = 0
    bg_transparency: int = 255
    text_rotation: int = 0
    text_transparency: int = 255
    watermark_path: str = ""
    watermark_size: int = 100
    watermark_x: int = 0
    watermark_y: int = 0
    watermark_rotation: int = 0
    watermark_transparency: int = 128
    disable_background: bool = False
    disable_font: bool = False
    disable_watermark: bool = False
    output_format: str = "original"
    batches: List[BatchConfig] = field(default_factory=list)

    def to_dict(self) -> Dict:
        data = asdict(self)
        data["batches"] = [b.to_dict() for b in self.batches]
        return data

    @classmethod
    def from_dict(cls, data: Dict) -> "ImageEditorSettings":
        if not isinstance(data, dict):
            raise SettingsError("Settings must be a JSON object")
        defaults = cls()
        values = {}
        for field_def in fields(cls):
            if field_def.name == "batches":
                continue
            default = getattr(defaults, field_def.name)
            raw = data.get(field_def.name)
            if raw is None:
                values[field_def.name] = default
            elif isinstance(default, bool):
                values[field_def.name] = bool(raw)
            elif isinstance(default, int):
                try:
                    values[field_def.name] = int(raw)
                except (TypeError, ValueError) as exc:
                    raise SettingsError(f"{field_def.name} must be a number") from exc
            else:
                values[field_def.name] = str(raw)
        values["text_color"] = normalize_color(values["text_color"])
        values["bg_color"] = normalize_color(values["bg_color"])
        if values["output_format"] not in OUTPUT_FORMATS:
            raise SettingsError(f"Unknown output format: {values['output_format']}")
        batches = data.get("batches") or []
        if not isinstance(batches, list):
            raise SettingsError("batches must be a list")
        values["batches"] = [BatchConfig.from_dict(b) for b in batches]
        return cls(**values)

    def add_batch(self, phone_number: str, suffix: str) -> BatchConfig:
        phone_number, suffix = phone_number.strip(), suffix.strip()
        if not phone_number or not suffix:
            raise ValueError("A batch needs both a phone number and a suffix")
        batch = BatchConfig(phone_number, suffix)
        self.batches.append(batch)
        return batch

    def remove_batch(self, index: int) -> None:
        del self.batches[index]


def load_settings(path: Path) -> ImageEditorSettings:
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as exc:
        raise SettingsError(f"Cannot read {path}: {exc}") from exc
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise SettingsError(f"Malformed settings file {path}: {exc}") from exc
    return ImageEditorSettings.from_dict(data)


def save_settings(settings: ImageEditorSettings, path: Path) -> None:
    Path(path).write_text(json.dumps(settings.to_dict(), indent=2), encoding="utf-8")


def list_image_files(folder: str) -> List[Path]:
    """Image files directly inside ``folder``, sorted by name."""
    if not folder:
        return []
    directory = Path(folder)
    if not directory.is_dir():
        return []
    return sorted(
        (p for p in directory.iterdir() if p.is_file() and p.suffix.lower() in IMAGE_EXTENSIONS),
        key=lambda p: p.name.lower(),
    )
