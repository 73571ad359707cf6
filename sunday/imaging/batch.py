"""Runs every batch over the input image set."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from PIL import Image, UnidentifiedImageError

from .compositor import Compositor
from .settings import BatchConfig, ImageEditorSettings, list_image_files

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, str], None]

JPEG_QUALITY = 95

_SAVE_FORMATS = {
    "jpg": "JPEG",
    "jpeg": "JPEG",
    "webp": "WEBP",
    "bmp": "BMP",
    "gif": "GIF",
}


class BatchError(ValueError):
    """Raised when a batch run cannot start."""


@dataclass
class BatchReport:
    total: int = 0
    outputs: List[Path] = field(default_factory=list)
    failures: List[Tuple[Path, str]] = field(default_factory=list)

    @property
    def processed(self) -> int:
        return len(self.outputs)


def output_extension(source: Path, output_format: str) -> str:
    if output_format == "original":
        return source.suffix.lstrip(".")
    return output_format


def output_path(output_folder: str, batch: BatchConfig, source: Path, ext: str) -> Path:
    folder = Path(output_folder) / batch.suffix.upper()
    return folder / f"{source.stem}-{batch.suffix.lower()}.{ext}"


def save_image(image: Image.Image, path: Path) -> None:
    """Encode by the target extension; PNG for anything unrecognised."""
    image_format = _SAVE_FORMATS.get(path.suffix.lstrip(".").lower(), "PNG")
    if image_format == "JPEG":
        image.convert("RGB").save(path, image_format, quality=JPEG_QUALITY)
    elif image_format == "BMP":
        image.convert("RGB").save(path, image_format)
    else:
        image.save(path, image_format)


def run_batches(
    settings: ImageEditorSettings,
    progress: Optional[ProgressCallback] = None,
) -> BatchReport:
    if not settings.batches:
        raise BatchError("No batches to process")
    images = list_image_files(settings.input_folder)
    if not images:
        raise BatchError("No images found in input folder")
    if not settings.output_folder:
        raise BatchError("Please select an output folder")

    compositor = Compositor(settings)
    report = BatchReport(total=len(settings.batches) * len(images))
    done = 0
    for batch in settings.batches:
        (Path(settings.output_folder) / batch.suffix.upper()).mkdir(parents=True, exist_ok=True)
        for source in images:
            if progress:
                progress(done, report.total, f"Processing {batch.suffix}: {source.name}")
            ext = output_extension(source, settings.output_format)
            target = output_path(settings.output_folder, batch, source, ext)
            try:
                image = compositor.process_file(source, batch.phone_number)
                save_image(image, target)
            except (UnidentifiedImageError, OSError) as exc:
                logger.warning("Skipping %s for batch %s: %s", source, batch.suffix, exc)
                report.failures.append((source, str(exc)))
            else:
                report.outputs.append(target)
            done += 1
    if progress:
        progress(done, report.total, "Done")
    logger.info(
        "Batch run finished: %s written, %s failed", report.processed, len(report.failures)
    )
    return report
