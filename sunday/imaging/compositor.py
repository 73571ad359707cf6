"""Per-image compositing: background, text, watermark."""
from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Optional, Tuple

from PIL import Image, ImageDraw, ImageFont, UnidentifiedImageError

from .settings import ImageEditorSettings, color_rgb

logger = logging.getLogger(__name__)


def rotate(image: Image.Image, degrees: int) -> Image.Image:
    """Rotate clockwise, growing the canvas to fit."""
    if degrees % 360 == 0:
        return image
    return image.rotate(-degrees, resample=Image.Resampling.BICUBIC, expand=True)


def composite_at(base: Image.Image, overlay: Image.Image, x: int, y: int) -> Image.Image:
    """Alpha-blend ``overlay`` onto ``base`` at (x, y), clipping at the edges."""
    layer = Image.new("RGBA", base.size, (0, 0, 0, 0))
    layer.paste(overlay, (x, y))
    return Image.alpha_composite(base, layer)


def scale_alpha(image: Image.Image, transparency: int) -> Image.Image:
    factor = max(0, min(255, transparency)) / 255
    image = image.convert("RGBA")
    alpha = image.getchannel("A").point(lambda a: round(a * factor))
    image.putalpha(alpha)
    return image


def pick_color(
    image: Image.Image,
    position: Tuple[float, float],
    widget_size: Tuple[float, float],
) -> str:
    """Color under a click on a preview drawn with aspect-fit into ``widget_size``."""
    widget_w, widget_h = widget_size
    image_aspect = image.width / image.height
    widget_aspect = widget_w / widget_h
    offset_x = offset_y = 0.0
    if image_aspect > widget_aspect:
        scale = image.width / widget_w
        offset_y = (widget_h - widget_w / image_aspect) / 2
    else:
        scale = image.height / widget_h
        offset_x = (widget_w - widget_h * image_aspect) / 2
    px = min(max(round((position[0] - offset_x) * scale), 0), image.width - 1)
    py = min(max(round((position[1] - offset_y) * scale), 0), image.height - 1)
    r, g, b = image.convert("RGB").getpixel((px, py))
    return f"#{r:02x}{g:02x}{b:02x}"


class Compositor:
    """Applies the overlay settings to source images.

    The font and watermark are loaded once and reused for every image of a
    run.
    """

    def __init__(self, settings: ImageEditorSettings) -> None:
        self.settings = settings
        self._font: Optional[ImageFont.FreeTypeFont] = None
        self._watermark: Optional[Image.Image] = None
        self._watermark_loaded = False

    @property
    def font(self):
        if self._font is None:
            self._font = self._load_font()
        return self._font

    def _load_font(self):
        settings = self.settings
        if settings.font_path:
            try:
                return ImageFont.truetype(settings.font_path, settings.font_size)
            except OSError as exc:
                logger.warning("Falling back to default font, %s: %s", settings.font_path, exc)
        return ImageFont.load_default(size=settings.font_size)

    @property
    def watermark(self) -> Optional[Image.Image]:
        if not self._watermark_loaded:
            self._watermark = self._load_watermark()
            self._watermark_loaded = True
        return self._watermark

    def _load_watermark(self) -> Optional[Image.Image]:
        settings = self.settings
        path = Path(settings.watermark_path)
        if not settings.watermark_path or not path.is_file():
            return None
        try:
            with Image.open(path) as source:
                watermark = source.convert("RGBA")
        except (UnidentifiedImageError, OSError) as exc:
            logger.warning("Skipping unreadable watermark %s: %s", path, exc)
            return None
        width = max(1, settings.watermark_size)
        height = max(1, round(width * watermark.height / watermark.width))
        watermark = watermark.resize((width, height), Image.Resampling.LANCZOS)
        watermark = rotate(watermark, settings.watermark_rotation)
        return scale_alpha(watermark, settings.watermark_transparency)

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------
    def draw_background(self, image: Image.Image) -> Image.Image:
        settings = self.settings
        fill = (*color_rgb(settings.bg_color), settings.bg_transparency)
        rect = Image.new(
            "RGBA", (max(1, settings.width), max(1, settings.height)), fill
        )
        rect = rotate(rect, settings.bg_rotation)
        return composite_at(image, rect, settings.x_start, settings.y_start)

    def render_text(self, text: str) -> Image.Image:
        """Text on a transparent tile sized to fit, before rotation."""
        settings = self.settings
        font = self.font
        fill = (*color_rgb(settings.text_color), settings.text_transparency)
        advances = [font.getlength(ch) for ch in text]
        width = sum(advances) + settings.letter_spacing * max(0, len(text) - 1)
        probe = ImageDraw.Draw(Image.new("RGBA", (1, 1)))
        height = probe.textbbox((0, 0), text, font=font)[3]
        tile = Image.new(
            "RGBA", (max(1, math.ceil(width)), max(1, math.ceil(height))), (0, 0, 0, 0)
        )
        draw = ImageDraw.Draw(tile)
        if settings.letter_spacing == 0:
            draw.text((0, 0), text, font=font, fill=fill)
            return tile
        x = 0.0
        for ch, advance in zip(text, advances):
            draw.text((x, 0), ch, font=font, fill=fill)
            x += advance + settings.letter_spacing
        return tile

    def draw_text(self, image: Image.Image, text: str) -> Image.Image:
        settings = self.settings
        tile = self.render_text(text)
        if settings.text_rotation % 360 == 0:
            return composite_at(image, tile, settings.text_x, settings.text_y)
        center_x = settings.text_x + tile.width / 2
        center_y = settings.text_y + tile.height / 2
        rotated = rotate(tile, settings.text_rotation)
        return composite_at(
            image,
            rotated,
            round(center_x - rotated.width / 2),
            round(center_y - rotated.height / 2),
        )

    def draw_watermark(self, image: Image.Image) -> Image.Image:
        watermark = self.watermark
        if watermark is None:
            return image
        return composite_at(image, watermark, self.settings.watermark_x, self.settings.watermark_y)

    def compose(self, image: Image.Image, text: str) -> Image.Image:
        settings = self.settings
        result = image.convert("RGBA")
        if not settings.disable_background:
            result = self.draw_background(result)
        if not settings.disable_font and text:
            result = self.draw_text(result, text)
        if not settings.disable_watermark:
            result = self.draw_watermark(result)
        return result

    def process_file(self, path: Path, text: str) -> Image.Image:
        with Image.open(path) as source:
            source.load()
            return self.compose(source, text)
